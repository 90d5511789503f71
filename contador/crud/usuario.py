from sqlalchemy.orm import Session
from typing import Optional

from contador.models.usuario import Usuario
from contador.models.role import Role


# -----------------------------------------------------
# Obtener usuario por ID
# -----------------------------------------------------
def get_usuario_by_id(db: Session, usuario_id: int) -> Optional[Usuario]:
    return db.query(Usuario).filter(Usuario.id == usuario_id).first()


# -----------------------------------------------------
# Obtener usuario por email
# -----------------------------------------------------
def get_usuario_by_email(db: Session, email: str) -> Optional[Usuario]:
    return db.query(Usuario).filter(Usuario.email == email.strip().lower()).first()


# -----------------------------------------------------
# Autenticar usuario
# -----------------------------------------------------
def authenticate(db: Session, email: str, password: str) -> Optional[Usuario]:
    from contador.core.security import verify_password
    user = get_usuario_by_email(db, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# -----------------------------------------------------
# Crear usuario
# -----------------------------------------------------
def create_usuario(db: Session, email: str, password: str, nombre: Optional[str], role_nombre: str) -> Usuario:
    from contador.core.security import hash_password
    role = db.query(Role).filter(Role.nombre == role_nombre).first()
    if not role:
        raise ValueError(f"Rol '{role_nombre}' no existe")

    obj = Usuario(
        email=email.strip().lower(),
        nombre=nombre,
        hashed_password=hash_password(password),
        activo=True,
        role_id=role.id,
    )
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj
