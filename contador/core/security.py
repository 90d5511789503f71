# contador/core/security.py
from passlib.context import CryptContext
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import jwt, JWTError
from fastapi import HTTPException, status, Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from contador.core.config import settings, Roles
from contador.db.session import get_db
from contador.crud.usuario import get_usuario_by_id, get_usuario_by_email

# pbkdf2_sha256 es puro Python en passlib (sin backend bcrypt nativo)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None, extra_claims: Optional[Dict[str, Any]] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)
    now = datetime.now(timezone.utc)
    exp = now + expires_delta
    payload: Dict[str, Any] = {"sub": str(subject), "iat": now, "exp": exp}
    if extra_claims:
        payload.update(extra_claims)
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido")


def get_current_usuario(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    """Usuario dueño del bearer token; 401 si no existe, 403 si está inactivo."""
    payload = decode_access_token(token)
    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token inválido")

    # sub es el id numérico; se acepta el email como alternativa
    try:
        user = get_usuario_by_id(db, int(subject))
    except (ValueError, TypeError):
        user = get_usuario_by_email(db, subject)

    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Usuario no encontrado")
    if not user.activo:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Usuario inactivo")
    return user


def require_role(role_names):
    """
    Dependencia que exige uno de los roles indicados.

    Args:
        role_names: String único o lista. Ejemplo: require_role(["superadmin", "admin"])
    """
    if isinstance(role_names, str):
        role_names = [role_names]

    def inner(current_user=Depends(get_current_usuario)):
        if getattr(current_user, "role", None):
            if current_user.role.nombre in role_names:
                return current_user
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Permisos insuficientes")
    return inner


require_superadmin = require_role(Roles.SUPERADMIN)


def is_superadmin(usuario) -> bool:
    return bool(getattr(usuario, "role", None)) and usuario.role.nombre == Roles.SUPERADMIN
