# contador/db/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from contador.core.config import settings
from typing import Generator

# SQLite exige check_same_thread=False con el pool de hilos de FastAPI
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, pool_pre_ping=True, future=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
