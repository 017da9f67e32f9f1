"""Persistent storage for the single Gemini API key."""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from models import StorageEntry
from services.encryption import EncryptionService, get_encryption_service
from services.errors import StorageError

logger = logging.getLogger(__name__)


class CredentialStore:
    """Key/value slot holding the API key across runs.

    Values are Fernet-encrypted when an encryption service is supplied and
    kept as plain text otherwise. Backend failures surface as StorageError.
    """

    def __init__(
        self,
        db: Session,
        encryption_service: Optional[EncryptionService] = None,
        key_name: Optional[str] = None,
    ):
        self.db = db
        self.encryption_service = encryption_service
        self.key_name = key_name or settings.credential_key_name

    def _find_entry(self) -> Optional[StorageEntry]:
        return (
            self.db.query(StorageEntry)
            .filter(StorageEntry.storage_key == self.key_name)
            .first()
        )

    def entry(self) -> Optional[StorageEntry]:
        try:
            return self._find_entry()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read '{self.key_name}': {e}") from e

    def get(self) -> Optional[str]:
        entry = self.entry()
        if entry is None:
            return None

        if not entry.is_encrypted:
            return entry.value

        if self.encryption_service is None:
            raise StorageError(
                f"'{self.key_name}' is stored encrypted but no ENCRYPTION_SECRET_KEY is configured"
            )
        try:
            return self.encryption_service.decrypt(entry.value)
        except ValueError as e:
            raise StorageError(f"Failed to decrypt '{self.key_name}': {e}") from e

    def set(self, key: str) -> str:
        if self.encryption_service is not None:
            value = self.encryption_service.encrypt(key)
            is_encrypted = True
        else:
            value = key
            is_encrypted = False

        try:
            entry = self._find_entry()
            if entry is None:
                entry = StorageEntry(storage_key=self.key_name, value=value, is_encrypted=is_encrypted)
                self.db.add(entry)
            else:
                entry.value = value
                entry.is_encrypted = is_encrypted
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to write '{self.key_name}': {e}") from e

        fingerprint = EncryptionService.hash_key(key)[:8]
        logger.info(f"Stored '{self.key_name}' (sha256 {fingerprint}, encrypted={is_encrypted})")
        return key

    def clear(self) -> bool:
        try:
            entry = self._find_entry()
            if entry is None:
                return False
            self.db.delete(entry)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StorageError(f"Failed to delete '{self.key_name}': {e}") from e

        logger.info(f"Cleared '{self.key_name}'")
        return True


def get_credential_store(db: Session) -> CredentialStore:
    return CredentialStore(db, encryption_service=get_encryption_service())
