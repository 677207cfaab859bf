from cryptography.fernet import Fernet, InvalidToken

from notion_sync.core.exceptions import AppException


class TokenDecryptionError(AppException):
    def __init__(self):
        super().__init__(
            code="TOKEN_DECRYPTION_FAILED",
            message="Stored token could not be decrypted with the configured key",
            status_code=500,
        )


class TokenCipher:
    def __init__(self, encryption_key: str):
        self._fernet = Fernet(encryption_key.encode())

    def encrypt(self, value: str) -> str:
        return self._fernet.encrypt(value.encode()).decode()

    def decrypt(self, encrypted_value: str) -> str:
        try:
            return self._fernet.decrypt(encrypted_value.encode()).decode()
        except InvalidToken as e:
            raise TokenDecryptionError() from e


def generate_encryption_key() -> str:
    return Fernet.generate_key().decode()
