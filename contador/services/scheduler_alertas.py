# contador/services/scheduler_alertas.py
"""
Scheduler de alertas de licitaciones.

- Vencimientos próximos: diario a las 07:00
- Licitaciones nuevas: cada 6 horas

Se inicia y detiene desde el lifespan cuando ALERT_SCHEDULER_ENABLED=true.
"""

import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from contador.core.config import settings
from contador.db.session import SessionLocal
from contador.services.alert_service import check_pending_alerts, notify_new_licitaciones

logger = logging.getLogger(__name__)

# Scheduler global
_scheduler = None


def iniciar_scheduler_alertas():
    global _scheduler

    if _scheduler is not None:
        logger.warning("Scheduler de alertas ya esta iniciado")
        return

    _scheduler = BackgroundScheduler()

    _scheduler.add_job(
        func=_ejecutar_alertas_vencimiento,
        trigger=CronTrigger(hour=settings.alert_check_hour, minute=0),
        id='alertas_vencimiento_licitaciones',
        name='Alertas de etapas próximas a vencer',
        replace_existing=True
    )

    _scheduler.add_job(
        func=_ejecutar_licitaciones_nuevas,
        trigger=IntervalTrigger(hours=settings.new_licitaciones_interval_hours),
        id='licitaciones_nuevas',
        name='Notificación de licitaciones nuevas',
        replace_existing=True
    )

    _scheduler.start()

    logger.info("Scheduler de alertas iniciado")
    logger.info(f"  - Vencimientos: diario {settings.alert_check_hour:02d}:00")
    logger.info(f"  - Nuevas: cada {settings.new_licitaciones_interval_hours} horas")


def detener_scheduler_alertas():
    global _scheduler

    if _scheduler is not None:
        _scheduler.shutdown()
        _scheduler = None
        logger.info("Scheduler de alertas detenido")


def _ejecutar_alertas_vencimiento():
    logger.info("=== INICIANDO ALERTAS DE VENCIMIENTO ===")

    db = SessionLocal()
    try:
        resultado = check_pending_alerts(db)
        logger.info(
            f"Alertas de vencimiento completadas: "
            f"{resultado['alerts_generated']} alertas, "
            f"{resultado['emails_sent']} emails, "
            f"{len(resultado['errors'])} errores"
        )
    except Exception as e:
        logger.error(f"Error ejecutando alertas de vencimiento: {str(e)}", exc_info=True)
    finally:
        db.close()


def _ejecutar_licitaciones_nuevas():
    logger.info("=== INICIANDO NOTIFICACIÓN DE LICITACIONES NUEVAS ===")

    db = SessionLocal()
    try:
        resultado = notify_new_licitaciones(db)
        logger.info(
            f"Licitaciones nuevas: {resultado['new_found']} encontradas, "
            f"{resultado['notified']} notificadas"
        )
    except Exception as e:
        logger.error(f"Error notificando licitaciones nuevas: {str(e)}", exc_info=True)
    finally:
        db.close()
