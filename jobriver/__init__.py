__version__ = "0.1.0"

from .client import Client
from .draft import JobInsertDraft, build_draft, initial_state
from .errors import (
    ArgsError,
    DecodeError,
    InsertOptsError,
    InvalidPayloadError,
    JobRiverError,
    MissingKindError,
)
from .insert_opts import (
    MAX_ATTEMPTS_DEFAULT,
    PRIORITY_DEFAULT,
    PRIORITY_MAX,
    PRIORITY_MIN,
    QUEUE_DEFAULT,
    EffectiveInsertOpts,
    InsertOpts,
    resolve_insert_opts,
)
from .job_args import JobArgs, JobArgsDict, validate_args
from .job_row import (
    JOB_STATE_AVAILABLE,
    JOB_STATE_CANCELLED,
    JOB_STATE_COMPLETED,
    JOB_STATE_DISCARDED,
    JOB_STATE_RETRYABLE,
    JOB_STATE_RUNNING,
    JOB_STATE_SCHEDULED,
    AttemptError,
    JobRow,
    JobState,
    to_job_row,
)
