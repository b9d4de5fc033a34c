"""Contract shared by all storage drivers."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, Protocol, Sequence

from ..draft import JobInsertDraft
from ..job_row import JobRow, to_job_row


class StorageRecord(Protocol):
    """Column attributes a driver's stored record must expose."""

    id: int
    args: Any
    attempt: int
    attempted_at: Optional[datetime]
    attempted_by: Optional[Sequence[str]]
    created_at: datetime
    errors: Any
    finalized_at: Optional[datetime]
    kind: str
    max_attempts: int
    priority: int
    queue: str
    scheduled_at: datetime
    state: str
    tags: Optional[Sequence[str]]


class Driver(ABC):
    """
    Persists job drafts for a Client.

    Drivers write inside whatever transaction the given handle is already in.
    They never begin, commit, or roll back, and they let backend errors
    (constraint violations, connection failures) propagate as raised.
    """

    def __init__(self, handle: Any = None):
        self.handle = handle

    def _resolve_handle(self, tx: Any) -> Any:
        handle = tx if tx is not None else self.handle
        if handle is None:
            raise ValueError(
                f"{type(self).__name__} has no bound handle; pass one to the constructor or as `tx`"
            )
        return handle

    @abstractmethod
    def insert(self, draft: JobInsertDraft, tx: Any = None) -> StorageRecord:
        """
        Persist one job row.

        Args:
            draft: Row to write
            tx: Caller-owned transaction handle; the driver's own handle when None

        Returns:
            The record as stored, with generated id and stored timestamps
        """

    def to_job_row(self, record: StorageRecord) -> JobRow:
        return to_job_row(record)
