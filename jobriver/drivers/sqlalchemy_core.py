"""Driver writing through a SQLAlchemy Core Connection."""

import json
from typing import Optional, Union

from sqlalchemy import insert
from sqlalchemy.engine import Connection, Row
from sqlalchemy.orm import Session

from ..database import river_job
from ..draft import JobInsertDraft
from .base import Driver


class ConnectionDriver(Driver):
    """
    Inserts with a single `INSERT ... RETURNING` statement.

    Accepts a Connection, or a Session whose current connection is used.
    """

    def __init__(self, connection: Optional[Union[Connection, Session]] = None):
        super().__init__(connection)

    def insert(self, draft: JobInsertDraft, tx: Optional[Union[Connection, Session]] = None) -> Row:
        conn = self._resolve_handle(tx)
        if isinstance(conn, Session):
            conn = conn.connection()

        stmt = (
            insert(river_job)
            .values(
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
            .returning(*river_job.c)
        )
        return conn.execute(stmt).one()
