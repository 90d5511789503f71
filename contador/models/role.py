# contador/models/role.py
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship
from contador.db.base import Base
from contador.models.types import PK


class Role(Base):
    __tablename__ = "roles"

    id = Column(PK, primary_key=True, autoincrement=True)
    nombre = Column(String(50), unique=True, nullable=False)

    # Relación inversa
    usuarios = relationship("Usuario", back_populates="role", lazy="selectin")
