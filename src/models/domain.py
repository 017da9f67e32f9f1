import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from .database import Base


class Decision(str, enum.Enum):
    KEEP = "keep"
    DELETE = "delete"


class SweepStatus(str, enum.Enum):
    COMPLETED = "completed"
    NOTHING_TO_CLASSIFY = "nothing_to_classify"
    NO_CREDENTIAL = "no_credential"
    FAILED = "failed"


class StorageEntry(Base):
    __tablename__ = "storage_entries"
    __table_args__ = {'extend_existing': True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    storage_key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    is_encrypted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
