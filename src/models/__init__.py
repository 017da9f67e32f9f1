from models.database import Base, SessionLocal, get_db, init_db
from models.domain import (
    Decision,
    StorageEntry,
    SweepStatus,
)

__all__ = [
    "Base",
    "SessionLocal",
    "get_db",
    "init_db",
    "Decision",
    "StorageEntry",
    "SweepStatus",
]
