from sqlalchemy import Column, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from contador.db.base import Base
from contador.models.types import PK


class SettingCategory:
    AI = "AI"
    EMAIL = "EMAIL"
    GENERAL = "GENERAL"


class SystemSetting(Base):
    """
    Configuración administrable en tiempo de ejecución (clave/valor).

    Los secretos se guardan cifrados con Fernet e is_encrypted=True.
    """
    __tablename__ = "system_settings"

    id = Column(PK, primary_key=True, autoincrement=True)
    key = Column(String(100), nullable=False, unique=True)
    value = Column(Text, nullable=True)
    category = Column(String(20), nullable=False, default=SettingCategory.GENERAL, index=True)
    description = Column(String(255), nullable=True)
    is_encrypted = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
