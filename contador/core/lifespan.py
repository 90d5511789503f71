from contextlib import asynccontextmanager
from fastapi import FastAPI
from sqlalchemy.orm import Session

import contador.models  # noqa: F401  registra las tablas en Base.metadata
from contador.db.base import Base
from contador.db.session import engine
from contador.db.init_db import create_default_roles_and_admin
from contador.utils.logger import logger
from contador.core.config import settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: tablas (solo en desarrollo), roles y superadmin, scheduler de alertas.
    Shutdown: detiene el scheduler.
    """
    scheduler_iniciado = False

    try:
        # --- Startup ---
        logger.info(" Iniciando aplicación Contador Virtual...")

        if settings.environment == "development":
            Base.metadata.create_all(bind=engine)

        session = Session(bind=engine)
        try:
            create_default_roles_and_admin(session)
        finally:
            session.close()

        # --- Scheduler de alertas de licitaciones ---
        if settings.alert_scheduler_enabled:
            try:
                from contador.services.scheduler_alertas import iniciar_scheduler_alertas
                iniciar_scheduler_alertas()
                scheduler_iniciado = True
                logger.info(" Scheduler de alertas iniciado")
            except Exception as e:
                logger.warning(f"  Error iniciando scheduler de alertas: {str(e)}")
        else:
            logger.info(" Scheduler de alertas deshabilitado (ALERT_SCHEDULER_ENABLED=false)")

        logger.info(" Startup completado correctamente")

    except Exception as e:
        logger.exception(" Error en startup: %s", e)

    # La app se levanta aquí
    yield

    # --- Shutdown ---
    logger.info(" Aplicación apagándose...")

    if scheduler_iniciado:
        try:
            from contador.services.scheduler_alertas import detener_scheduler_alertas
            detener_scheduler_alertas()
        except Exception as e:
            logger.warning(f"  Error deteniendo scheduler de alertas: {str(e)}")

    logger.info(" Aplicación cerrada correctamente")
