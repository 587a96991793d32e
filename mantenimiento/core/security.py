# mantenimiento/core/security.py
from typing import Protocol

from passlib.context import CryptContext

from mantenimiento.core.config import Settings

# pbkdf2 no necesita backends nativos
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, stored: str) -> bool:
    """Acepta un hash de passlib o, si no lo es, compara en texto plano."""
    if pwd_context.identify(stored) is None:
        return plain == stored
    return pwd_context.verify(plain, stored)


class AdminCredentialProvider(Protocol):
    def verify(self, username: str, password: str) -> bool: ...


class SettingsAdminCredentials:
    """Credenciales de administrador tomadas de Settings (ADMIN_USERNAME / ADMIN_PASSWORD)."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def verify(self, username: str, password: str) -> bool:
        if username != self.settings.admin_username:
            return False
        return verify_password(password, self.settings.admin_password)
