# contador/api/v1/routers/auth.py
"""
Router de autenticación: login con email y contraseña, usuario actual.
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.security import create_access_token, get_current_usuario
from contador.crud.usuario import authenticate
from contador.schemas.auth import LoginRequest, TokenResponse, UsuarioResponse
import logging

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/login", response_model=TokenResponse, summary="Login con email y contraseña")
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    logger.info(f"Login attempt for user: {credentials.email}")

    usuario = authenticate(db, credentials.email, credentials.password)
    if not usuario:
        logger.warning(f"Login failed for user: {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email o contraseña incorrectos"
        )

    if not usuario.activo:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Usuario inactivo"
        )

    usuario.last_login = datetime.now(timezone.utc)
    db.commit()

    token = create_access_token(
        subject=str(usuario.id),
        extra_claims={"rol": usuario.role.nombre if usuario.role else None}
    )
    return TokenResponse(access_token=token, user=UsuarioResponse.from_usuario(usuario))


@router.get("/me", response_model=UsuarioResponse, summary="Usuario autenticado")
def me(current_user=Depends(get_current_usuario)):
    return UsuarioResponse.from_usuario(current_user)
