from .base import Driver, StorageRecord
from .sqlalchemy_core import ConnectionDriver
from .sqlalchemy_orm import SessionDriver

__all__ = ["Driver", "StorageRecord", "ConnectionDriver", "SessionDriver"]
