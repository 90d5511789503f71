# contador/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UsuarioResponse(BaseModel):
    id: int
    email: EmailStr
    nombre: Optional[str] = None
    rol: str
    activo: bool
    creado_en: Optional[datetime] = None

    @classmethod
    def from_usuario(cls, usuario) -> "UsuarioResponse":
        return cls(
            id=usuario.id,
            email=usuario.email,
            nombre=usuario.nombre,
            rol=usuario.role.nombre if usuario.role else "",
            activo=usuario.activo,
            creado_en=usuario.creado_en,
        )


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UsuarioResponse
