# contador/db/init_db.py
from sqlalchemy.orm import Session

from contador.core.config import Roles, settings
from contador.crud.usuario import create_usuario, get_usuario_by_email
from contador.models.role import Role
from contador.utils.logger import logger


def create_default_roles_and_admin(db: Session):
    # === Crear roles si no existen ===
    for role_name in (Roles.SUPERADMIN, Roles.ADMIN, Roles.CONTADOR):
        if not db.query(Role).filter(Role.nombre == role_name).first():
            db.add(Role(nombre=role_name))
            logger.info("Rol creado: %s", role_name)
    db.commit()

    # === Crear superadmin si no existe ===
    email = settings.superadmin_email.strip().lower()
    if not email:
        logger.info("SUPERADMIN_EMAIL vacío, se omite la creación del superadmin")
        return

    admin = get_usuario_by_email(db, email)
    if admin:
        logger.info("Superadmin ya existe: %s", admin.email)
        return

    admin = create_usuario(
        db,
        email=email,
        password=settings.superadmin_password,
        nombre="Administrador",
        role_nombre=Roles.SUPERADMIN,
    )
    logger.info("Superadmin creado: %s", admin.email)
