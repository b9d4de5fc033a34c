"""
Decoded representation of persisted jobs.

`to_job_row` is the only bridge between a driver's storage record and the
JobRow handed back to callers. It reads column attributes, so it works on
SQLAlchemy mapped instances, Core `Row` objects, and plain test doubles alike.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from .errors import DecodeError
from .timeutil import parse_timestamp, to_utc


class JobState(str, Enum):
    AVAILABLE = "available"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    DISCARDED = "discarded"
    RETRYABLE = "retryable"
    RUNNING = "running"
    SCHEDULED = "scheduled"


JOB_STATE_AVAILABLE = JobState.AVAILABLE.value
JOB_STATE_CANCELLED = JobState.CANCELLED.value
JOB_STATE_COMPLETED = JobState.COMPLETED.value
JOB_STATE_DISCARDED = JobState.DISCARDED.value
JOB_STATE_RETRYABLE = JobState.RETRYABLE.value
JOB_STATE_RUNNING = JobState.RUNNING.value
JOB_STATE_SCHEDULED = JobState.SCHEDULED.value


@dataclass(frozen=True)
class AttemptError:
    """One failed execution attempt, as recorded by a worker."""

    at: datetime
    attempt: int
    error: str
    trace: str


@dataclass(frozen=True, eq=False)
class JobRow:
    """A persisted job. Tags keep stored order but compare as a set."""

    id: int
    args: Dict[str, Any]
    attempt: int
    attempted_at: Optional[datetime]
    attempted_by: Optional[List[str]]
    created_at: datetime
    errors: List[AttemptError]
    finalized_at: Optional[datetime]
    kind: str
    max_attempts: int
    priority: int
    queue: str
    scheduled_at: datetime
    state: JobState
    tags: List[str]

    def __eq__(self, other):
        if not isinstance(other, JobRow):
            return NotImplemented
        mine = {f: getattr(self, f) for f in self.__dataclass_fields__ if f != "tags"}
        theirs = {f: getattr(other, f) for f in other.__dataclass_fields__ if f != "tags"}
        return mine == theirs and set(self.tags) == set(other.tags)

    __hash__ = None


def _decode_json(value: Any, what: str) -> Any:
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError, UnicodeDecodeError) as e:
        raise DecodeError(f"{what} is not valid JSON: {e}") from e


def _decode_args(value: Any) -> Dict[str, Any]:
    if value is None:
        raise DecodeError("args is missing")
    decoded = value if isinstance(value, dict) else _decode_json(value, "args")
    if not isinstance(decoded, dict):
        raise DecodeError(f"args must decode to a JSON object, got {type(decoded).__name__}")
    return decoded


def _decode_attempt_error(element: Any) -> AttemptError:
    data = element if isinstance(element, dict) else _decode_json(element, "attempt error")
    if not isinstance(data, dict):
        raise DecodeError(f"attempt error must be a JSON object, got {type(data).__name__}")

    missing = [k for k in ("at", "attempt", "error", "trace") if k not in data]
    if missing:
        raise DecodeError(f"attempt error missing fields: {', '.join(missing)}")

    at = data["at"]
    try:
        at = to_utc(at) if isinstance(at, datetime) else parse_timestamp(at)
    except (ValueError, TypeError, AttributeError) as e:
        raise DecodeError(f"attempt error has invalid `at`: {data['at']!r}") from e

    # Stored attempt errors only carry whole seconds
    return AttemptError(
        at=at.replace(microsecond=0),
        attempt=data["attempt"],
        error=data["error"],
        trace=data["trace"],
    )


def _decode_errors(value: Any) -> List[AttemptError]:
    if value is None:
        return []
    if isinstance(value, (str, bytes, bytearray)):
        value = _decode_json(value, "errors")
    if not isinstance(value, (list, tuple)):
        raise DecodeError(f"errors must be an array, got {type(value).__name__}")
    return [_decode_attempt_error(e) for e in value]


def _decode_state(value: Any) -> JobState:
    if value is None:
        raise DecodeError("state is missing")
    try:
        return JobState(value)
    except ValueError as e:
        raise DecodeError(f"unknown job state: {value!r}") from e


def _optional_utc(value: Optional[datetime]) -> Optional[datetime]:
    return to_utc(value) if value is not None else None


def to_job_row(record: Any) -> JobRow:
    """
    Convert a stored job record into a JobRow.

    Args:
        record: Any object exposing the river_job columns as attributes

    Returns:
        JobRow with args and errors decoded

    Raises:
        DecodeError: If args, errors, or state don't have the expected shape
    """
    tags = record.tags
    attempted_by = record.attempted_by

    return JobRow(
        id=record.id,
        args=_decode_args(record.args),
        attempt=record.attempt,
        attempted_at=_optional_utc(record.attempted_at),
        attempted_by=list(attempted_by) if attempted_by is not None else None,
        created_at=_optional_utc(record.created_at),
        errors=_decode_errors(record.errors),
        finalized_at=_optional_utc(record.finalized_at),
        kind=record.kind,
        max_attempts=record.max_attempts,
        priority=record.priority,
        queue=record.queue,
        scheduled_at=_optional_utc(record.scheduled_at),
        state=_decode_state(record.state),
        tags=list(tags) if tags is not None else [],
    )
