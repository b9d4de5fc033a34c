"""Driver writing through a SQLAlchemy ORM Session."""

import json
from typing import Optional

from sqlalchemy.orm import Session

from ..database import RiverJob
from ..draft import JobInsertDraft
from .base import Driver


class SessionDriver(Driver):
    """
    Inserts RiverJob instances with `Session.add` and `flush`.

    The row becomes visible to the rest of the session's transaction right
    away; whether it survives is decided by the caller's commit or rollback.
    """

    def __init__(self, session: Optional[Session] = None):
        super().__init__(session)

    def insert(self, draft: JobInsertDraft, tx: Optional[Session] = None) -> RiverJob:
        session = self._resolve_handle(tx)

        job = RiverJob(
            args=json.loads(draft.args),
            attempt=draft.attempt,
            created_at=draft.created_at,
            kind=draft.kind,
            max_attempts=draft.max_attempts,
            priority=draft.priority,
            queue=draft.queue,
            scheduled_at=draft.scheduled_at,
            state=draft.state.value,
            tags=list(draft.tags),
        )
        session.add(job)
        session.flush()
        # Reload so timestamps come back as the backend stored them
        session.refresh(job)
        return job
