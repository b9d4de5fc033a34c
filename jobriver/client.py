"""
Client for inserting jobs.

An insert runs: validate args, resolve options, build the row draft, hand it
to the driver, convert the stored record back into a JobRow. The client keeps
no state between calls and never manages transactions: `insert` writes through
the driver's bound handle and `insert_tx` through one the caller passes in.
"""

from datetime import datetime
from typing import Any, Callable, Optional

from .draft import build_draft
from .drivers.base import Driver
from .insert_opts import InsertOpts, resolve_insert_opts
from .job_args import args_insert_opts, validate_args
from .job_row import JobRow
from .logger import StructuredLogger, get_logger
from .timeutil import to_utc, utcnow


class Client:
    """
    Entry point for enqueuing jobs.

    Example:
        client = Client(SessionDriver(session))
        job = client.insert(JobArgsDict("email", {"to": "a@example.com"}))
        session.commit()
    """

    def __init__(
        self,
        driver: Driver,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            driver: Storage driver jobs are persisted through
            clock: Returns the current instant; defaults to UTC wall time
            logger: Defaults to the global jobriver logger
        """
        self.driver = driver
        self.clock = clock or utcnow
        self.logger = logger or get_logger()

    def insert(self, args: Any, insert_opts: Optional[InsertOpts] = None) -> JobRow:
        """
        Insert a job using the driver's own handle.

        Args:
            args: Job args (see jobriver.job_args)
            insert_opts: Call-level options; override the args' own per field

        Returns:
            JobRow as stored

        Raises:
            ArgsError: If args are invalid; nothing is written
            InsertOptsError: If the args return something other than InsertOpts
        """
        return self._insert(args, insert_opts, tx=None)

    def insert_tx(self, tx: Any, args: Any, insert_opts: Optional[InsertOpts] = None) -> JobRow:
        """
        Insert a job inside a caller-owned transaction.

        The row is only durable once the caller commits `tx`; rolling it back
        removes the job.

        Args:
            tx: Session or Connection the driver writes through
            args: Job args
            insert_opts: Call-level options

        Returns:
            JobRow as stored
        """
        if tx is None:
            raise ValueError("insert_tx requires a transaction handle")
        return self._insert(args, insert_opts, tx=tx)

    def _insert(self, args: Any, insert_opts: Optional[InsertOpts], tx: Any) -> JobRow:
        payload = validate_args(args)
        opts = resolve_insert_opts(insert_opts, args_insert_opts(args))
        draft = build_draft(args, opts, to_utc(self.clock()), payload=payload)

        record = self.driver.insert(draft, tx=tx)
        job = self.driver.to_job_row(record)

        self.logger.record_insert(job.kind, job.queue, job.state.value)
        self.logger.debug(
            "Inserted job",
            id=job.id,
            kind=job.kind,
            queue=job.queue,
            state=job.state.value,
        )
        return job
