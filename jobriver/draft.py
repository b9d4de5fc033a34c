"""Construction of the insertable row draft handed to drivers."""

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional, Tuple

from .insert_opts import EffectiveInsertOpts
from .job_args import args_kind, args_payload
from .job_row import JobState

# A job scheduled this close to "now" is still available immediately
SCHEDULED_TOLERANCE = timedelta(milliseconds=100)


@dataclass(frozen=True)
class JobInsertDraft:
    """Everything a driver needs to write one river_job row. Identity is left to storage."""

    kind: str
    args: str
    attempt: int
    created_at: datetime
    max_attempts: int
    priority: int
    queue: str
    scheduled_at: datetime
    state: JobState
    tags: Tuple[str, ...]


def initial_state(scheduled_at: datetime, now: datetime) -> JobState:
    """Return the state a job starts in. Equal timestamps are available."""
    if scheduled_at <= now + SCHEDULED_TOLERANCE:
        return JobState.AVAILABLE
    return JobState.SCHEDULED


def canonical_args(payload: bytes) -> str:
    """Re-serialize validated JSON object text in compact form for storage."""
    return json.dumps(json.loads(payload), separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def build_draft(
    args: Any,
    opts: EffectiveInsertOpts,
    now: datetime,
    payload: Optional[bytes] = None,
) -> JobInsertDraft:
    """
    Build the row draft for one insertion.

    Args:
        args: Job args
        opts: Resolved insert options
        now: Current UTC instant from the client's clock
        payload: Payload already returned by validate_args, if any

    Returns:
        JobInsertDraft, identical for identical inputs
    """
    if payload is None:
        payload = args_payload(args)
    scheduled_at = opts.scheduled_at if opts.scheduled_at is not None else now

    return JobInsertDraft(
        kind=args_kind(args),
        args=canonical_args(payload),
        attempt=0,
        created_at=now,
        max_attempts=opts.max_attempts,
        priority=opts.priority,
        queue=opts.queue,
        scheduled_at=scheduled_at,
        state=initial_state(scheduled_at, now),
        tags=tuple(opts.tags),
    )
