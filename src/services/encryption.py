"""Encryption service for the stored Gemini API key."""

import base64
import hashlib
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from config import settings

logger = logging.getLogger(__name__)


class EncryptionService:
    def __init__(self, secret_key: Optional[str] = None):
        self.secret_key = secret_key or settings.encryption_secret_key
        if not self.secret_key:
            raise ValueError("ENCRYPTION_SECRET_KEY setting is required")

        self.salt = b"brand_sweep_salt"
        self._fernet = self._create_fernet()

    def _create_fernet(self) -> Fernet:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self.salt,
            iterations=100000,
        )
        key = base64.urlsafe_b64encode(kdf.derive(self.secret_key.encode()))
        return Fernet(key)

    def encrypt(self, plaintext: str) -> str:
        encrypted = self._fernet.encrypt(plaintext.encode())
        return encrypted.decode()

    def decrypt(self, ciphertext: str) -> str:
        try:
            decrypted = self._fernet.decrypt(ciphertext.encode())
        except InvalidToken as e:
            raise ValueError("Invalid encrypted key") from e
        return decrypted.decode()

    @staticmethod
    def hash_key(api_key: str) -> str:
        return hashlib.sha256(api_key.encode()).hexdigest()


def get_encryption_service() -> Optional[EncryptionService]:
    if not settings.encryption_secret_key:
        return None
    return EncryptionService(settings.encryption_secret_key)
