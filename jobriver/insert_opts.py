"""
Insert options and their three-layer resolution.

Options can come from the insert call, from the job args themselves, or from
library defaults. Each field is resolved on its own: the first layer that has
an opinion on a field wins that field, and layers are never merged within one
field (call-level tags replace arg-level tags, they aren't appended to them).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence, Tuple

from .errors import InsertOptsError
from .timeutil import to_utc

MAX_ATTEMPTS_DEFAULT = 25
PRIORITY_DEFAULT = 1
PRIORITY_MIN = 1
PRIORITY_MAX = 4
QUEUE_DEFAULT = "default"
TAG_MAX_LENGTH = 255


def _dedupe_tags(tags: Sequence[str]) -> Tuple[str, ...]:
    """Deduplicate tags while preserving order."""
    seen = set()
    result = []
    for tag in tags:
        if tag not in seen:
            seen.add(tag)
            result.append(tag)
    return tuple(result)


@dataclass(frozen=True)
class InsertOpts:
    """
    Per-insert overrides. A field left as None has no opinion and falls
    through to the next layer.

    Raises:
        InsertOptsError: If a set field holds an invalid value
    """

    max_attempts: Optional[int] = None
    priority: Optional[int] = None
    queue: Optional[str] = None
    tags: Optional[Sequence[str]] = None
    scheduled_at: Optional[datetime] = None

    def __post_init__(self):
        if self.max_attempts is not None:
            if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int):
                raise InsertOptsError("max_attempts must be an integer")
            if self.max_attempts < 1:
                raise InsertOptsError(f"max_attempts must be at least 1, got {self.max_attempts}")

        if self.priority is not None:
            if isinstance(self.priority, bool) or not isinstance(self.priority, int):
                raise InsertOptsError("priority must be an integer")
            if not PRIORITY_MIN <= self.priority <= PRIORITY_MAX:
                raise InsertOptsError(
                    f"priority must be between {PRIORITY_MIN} and {PRIORITY_MAX}, got {self.priority}"
                )

        if self.queue is not None:
            if not isinstance(self.queue, str) or self.queue.strip() == "":
                raise InsertOptsError("queue must be a non-empty string")

        if self.tags is not None:
            if isinstance(self.tags, (str, bytes)):
                raise InsertOptsError("tags must be a sequence of strings, not a single string")
            tags = tuple(self.tags)
            for tag in tags:
                if not isinstance(tag, str) or tag == "":
                    raise InsertOptsError(f"tags must be non-empty strings, got {tag!r}")
                if len(tag) > TAG_MAX_LENGTH:
                    raise InsertOptsError(f"tag exceeds {TAG_MAX_LENGTH} characters: {tag[:32]}...")
            # frozen dataclass, so go through object.__setattr__
            object.__setattr__(self, "tags", _dedupe_tags(tags))

        if self.scheduled_at is not None:
            if not isinstance(self.scheduled_at, datetime):
                raise InsertOptsError("scheduled_at must be a datetime")
            object.__setattr__(self, "scheduled_at", to_utc(self.scheduled_at))


@dataclass(frozen=True)
class EffectiveInsertOpts:
    """Fully resolved options. `scheduled_at` stays None when no layer set it."""

    max_attempts: int = MAX_ATTEMPTS_DEFAULT
    priority: int = PRIORITY_DEFAULT
    queue: str = QUEUE_DEFAULT
    tags: Tuple[str, ...] = field(default_factory=tuple)
    scheduled_at: Optional[datetime] = None


def _first_set(*values):
    for v in values:
        if v is not None:
            return v
    return None


def resolve_insert_opts(
    call_opts: Optional[InsertOpts] = None,
    arg_opts: Optional[InsertOpts] = None,
) -> EffectiveInsertOpts:
    """
    Resolve effective insert options.

    Args:
        call_opts: Options passed to the insert call (highest precedence)
        arg_opts: Options returned by the job args

    Returns:
        EffectiveInsertOpts with library defaults filling any gaps
    """
    call_opts = call_opts or InsertOpts()
    arg_opts = arg_opts or InsertOpts()

    tags = _first_set(call_opts.tags, arg_opts.tags)

    return EffectiveInsertOpts(
        max_attempts=_first_set(call_opts.max_attempts, arg_opts.max_attempts, MAX_ATTEMPTS_DEFAULT),
        priority=_first_set(call_opts.priority, arg_opts.priority, PRIORITY_DEFAULT),
        queue=_first_set(call_opts.queue, arg_opts.queue, QUEUE_DEFAULT),
        tags=tuple(tags) if tags is not None else (),
        scheduled_at=_first_set(call_opts.scheduled_at, arg_opts.scheduled_at),
    )
