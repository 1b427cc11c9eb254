"""AES-256-GCM field encryption for bank account details."""

import base64
import binascii
import secrets

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.core.config import Config


class FieldCipher:
    """Encrypts single string fields for storage.

    Output format: base64(nonce + ciphertext + tag), with a 12 byte nonce
    and the 16 byte tag appended by AESGCM.
    """

    NONCE_SIZE = 12

    def __init__(self, key_base64: str) -> None:
        key = base64.b64decode(key_base64)
        if len(key) != 32:
            raise ValueError("Encryption key must be exactly 32 bytes (256 bits)")
        self._aesgcm = AESGCM(key)

    def encrypt(self, plaintext: str) -> str:
        nonce = secrets.token_bytes(self.NONCE_SIZE)
        ciphertext = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None)
        return base64.b64encode(nonce + ciphertext).decode("ascii")

    def decrypt(self, encrypted_b64: str) -> str:
        data = base64.b64decode(encrypted_b64)
        nonce = data[: self.NONCE_SIZE]
        ciphertext = data[self.NONCE_SIZE :]
        return self._aesgcm.decrypt(nonce, ciphertext, None).decode("utf-8")

    def is_encrypted(self, value: str | None) -> bool:
        if not value:
            return False
        try:
            self.decrypt(value)
        except (InvalidTag, ValueError, binascii.Error):
            return False
        return True


def generate_encryption_key() -> str:
    """Return a fresh base64 key suitable for ENCRYPTION_KEY."""
    return base64.b64encode(secrets.token_bytes(32)).decode("ascii")


_cipher: FieldCipher | None = None


def get_cipher() -> FieldCipher:
    global _cipher
    if _cipher is None:
        _cipher = FieldCipher(Config.ENCRYPTION_KEY)
    return _cipher


def encrypt_field(value: str) -> str:
    cipher = get_cipher()
    if cipher.is_encrypted(value):
        return value
    return cipher.encrypt(value)


def decrypt_field(value: str | None) -> str | None:
    """Decrypt a stored field; values that are not ciphertext pass through."""
    if not value:
        return value
    cipher = get_cipher()
    try:
        return cipher.decrypt(value)
    except (InvalidTag, ValueError, binascii.Error):
        return value
