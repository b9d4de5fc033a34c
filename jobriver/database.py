"""
Database schema and connection helpers.

Defines the river_job table with SQLAlchemy. The mapped RiverJob class is the
storage-facing record type; drivers translate it to and from JobRow.
"""

from datetime import timezone
from pathlib import Path

from sqlalchemy import (
    JSON,
    BigInteger,
    CheckConstraint,
    Column,
    DateTime,
    Index,
    Integer,
    SmallInteger,
    String,
    Text,
    create_engine,
    func,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator

from .insert_opts import PRIORITY_DEFAULT, PRIORITY_MAX, PRIORITY_MIN, QUEUE_DEFAULT
from .job_row import JobState

Base = declarative_base()

_STATES = ", ".join(f"'{s.value}'" for s in JobState)


class UTCDateTime(TypeDecorator):
    """
    Timestamp stored as naive UTC and returned as aware UTC.

    Backends without timezone support (SQLite) otherwise hand back naive
    values, which callers can't compare against aware ones.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class RiverJob(Base):
    """Job record as stored in the river_job table."""

    __tablename__ = "river_job"

    # SQLite only autoincrements INTEGER PRIMARY KEY
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    args = Column(JSON().with_variant(JSONB, "postgresql"), nullable=False)
    attempt = Column(SmallInteger, nullable=False, default=0)
    attempted_at = Column(UTCDateTime)
    attempted_by = Column(JSON().with_variant(ARRAY(Text), "postgresql"))
    created_at = Column(UTCDateTime, nullable=False, server_default=func.current_timestamp())
    errors = Column(JSON().with_variant(JSONB, "postgresql"))
    finalized_at = Column(UTCDateTime)
    kind = Column(Text, nullable=False)
    max_attempts = Column(SmallInteger, nullable=False)
    priority = Column(SmallInteger, nullable=False, default=PRIORITY_DEFAULT)
    queue = Column(Text, nullable=False, default=QUEUE_DEFAULT)
    scheduled_at = Column(UTCDateTime, nullable=False, server_default=func.current_timestamp())
    state = Column(String(16), nullable=False, default=JobState.AVAILABLE.value)
    tags = Column(JSON().with_variant(ARRAY(String(255)), "postgresql"))

    __table_args__ = (
        CheckConstraint(f"state IN ({_STATES})", name="river_job_state_check"),
        CheckConstraint(
            f"priority >= {PRIORITY_MIN} AND priority <= {PRIORITY_MAX}",
            name="river_job_priority_check",
        ),
        CheckConstraint("max_attempts > 0", name="river_job_max_attempts_check"),
        CheckConstraint("attempt >= 0", name="river_job_attempt_check"),
        CheckConstraint("length(kind) > 0", name="river_job_kind_check"),
        Index("river_job_prioritized_fetching_index", "state", "queue", "priority", "scheduled_at", "id"),
        Index("river_job_kind_index", "kind"),
    )

    def __repr__(self) -> str:
        return f"<RiverJob id={self.id} kind={self.kind!r} state={self.state!r}>"


river_job = RiverJob.__table__


def sqlite_url(db_path: Path) -> str:
    """
    Build a SQLite URL for a database file, creating parent directories.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def get_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for a database URL.

    Args:
        database_url: SQLAlchemy database URL
        echo: Log emitted SQL
    """
    return create_engine(database_url, echo=echo)


def init_database(database_url: str) -> Engine:
    """
    Create the river_job table if it doesn't exist.

    Intended for tests and local development; production schemas are managed
    outside this library.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        The engine used to create the table
    """
    engine = get_engine(database_url)
    Base.metadata.create_all(engine)
    return engine


def get_session(database_url: str) -> Session:
    """
    Get a database session.

    The session is not committed or closed on the caller's behalf.

    Args:
        database_url: SQLAlchemy database URL

    Returns:
        SQLAlchemy session
    """
    SessionLocal = sessionmaker(bind=get_engine(database_url))
    return SessionLocal()
