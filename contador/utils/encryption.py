# contador/utils/encryption.py
"""
Cifrado simétrico de secretos guardados en system_settings
(API keys de IA, contraseña SMTP).

La clave Fernet se deriva de SECRET_KEY: cambiar SECRET_KEY invalida
los secretos ya guardados.
"""
import base64
import hashlib
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from contador.core.config import settings

logger = logging.getLogger(__name__)

# Valor que el frontend devuelve cuando no se modificó un secreto
PLACEHOLDER = "********"


def _fernet() -> Fernet:
    digest = hashlib.sha256(settings.secret_key.encode("utf-8")).digest()
    return Fernet(base64.urlsafe_b64encode(digest))


def encrypt(value: str) -> str:
    return _fernet().encrypt(value.encode("utf-8")).decode("utf-8")


def decrypt(token: Optional[str]) -> str:
    """Descifra un secreto. Si el token no es válido devuelve cadena vacía."""
    if not token:
        return ""
    try:
        return _fernet().decrypt(token.encode("utf-8")).decode("utf-8")
    except (InvalidToken, ValueError):
        logger.error("No se pudo descifrar un secreto guardado (¿cambió SECRET_KEY?)")
        return ""


def is_placeholder(value: Optional[str]) -> bool:
    """True para '********' o cualquier cadena formada solo por asteriscos."""
    if not value:
        return False
    return set(value) == {"*"}


def mask(value: Optional[str]) -> str:
    return PLACEHOLDER if value else ""
