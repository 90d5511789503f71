# contador/services/alert_service.py
"""
Alertas de licitaciones por vencimiento de etapas y por licitaciones nuevas.

Lo ejecuta el scheduler (scheduler_alertas) o el superadmin manualmente.
Cada correo o licitación se procesa en su propio try/except: un fallo se
registra en 'errors' y el lote continúa.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from contador.models.alerta import (
    AlertConfig, AlertHistory, LicitacionEtapa, LicitacionNotificacion, ScrapedLicitacion
)
from contador.services.alert_matcher import (
    clasificar_urgencia, coincide_licitacion, dias_configurados, dias_restantes,
    etiqueta_dias, titulo_alerta,
)
from contador.services.email_service import EmailService
from contador.utils.templates import render_template

logger = logging.getLogger(__name__)

VENTANA_DIAS = 30
TIPO_NUEVA = "nueva"
FUENTE_SEACE = "SEACE"
APP_NAME = "Contador Virtual"


@dataclass
class PendingAlert:
    licitacion: ScrapedLicitacion
    config: AlertConfig
    etapa: str
    fecha_vencimiento: date
    dias: int
    email: str
    nombre_usuario: str

    @property
    def tipo_notificacion(self) -> str:
        return f"vencimiento_{self.dias}d"


def _ya_notificado(licitacion: ScrapedLicitacion, config_id: int, etapa: str, tipo: str) -> bool:
    return any(
        n.alert_config_id == config_id and n.etapa_notificada == etapa and n.tipo_notificacion == tipo
        for n in licitacion.notificaciones
    )


def _configs_activas(db: Session) -> List[AlertConfig]:
    return (
        db.query(AlertConfig)
        .filter(AlertConfig.is_active == True, AlertConfig.tipo == "licitacion")
        .all()
    )


def _buscar_pendientes(configs, licitaciones, hoy: date, limite: date) -> List[PendingAlert]:
    pendientes = []
    for config in configs:
        usuario = config.usuario
        if usuario is None:
            continue
        dias_aviso = dias_configurados(config.dias_anticipacion)

        for licitacion in licitaciones:
            if not coincide_licitacion(config, licitacion):
                continue

            for etapa in licitacion.etapas:
                if not etapa.fecha_fin or not (hoy <= etapa.fecha_fin <= limite):
                    continue
                dias = dias_restantes(etapa.fecha_fin, hoy)
                if dias < 0 or dias not in dias_aviso:
                    continue
                if _ya_notificado(licitacion, config.id, etapa.nombre_etapa, f"vencimiento_{dias}d"):
                    continue

                pendientes.append(PendingAlert(
                    licitacion=licitacion,
                    config=config,
                    etapa=etapa.nombre_etapa,
                    fecha_vencimiento=etapa.fecha_fin,
                    dias=dias,
                    email=config.email_destino or usuario.email,
                    nombre_usuario=usuario.nombre or usuario.email,
                ))
    return pendientes


def _render_email(alertas: List[PendingAlert]) -> str:
    grupos: Dict[str, List[Dict[str, Any]]] = {"urgentes": [], "proximas": [], "otras": []}
    for alerta in alertas:
        objeto = alerta.licitacion.objeto_contratacion or ""
        grupos[clasificar_urgencia(alerta.dias)].append({
            "nomenclatura": alerta.licitacion.nomenclatura,
            "objeto": objeto[:200] + ("..." if len(objeto) > 200 else ""),
            "entidad": alerta.licitacion.entidad,
            "etapa": alerta.etapa,
            "fecha": alerta.fecha_vencimiento,
            "cuando": etiqueta_dias(alerta.dias),
            "url": alerta.licitacion.url_origen,
        })

    return render_template(
        "emails/alertas_licitaciones.html",
        nombre_usuario=alertas[0].nombre_usuario,
        total=len(alertas),
        urgentes=grupos["urgentes"],
        proximas=grupos["proximas"],
        otras=grupos["otras"],
        app_name=APP_NAME,
    )


def _registrar_envio(db: Session, alerta: PendingAlert) -> None:
    licitacion = alerta.licitacion
    db.add(LicitacionNotificacion(
        licitacion_id=licitacion.id,
        alert_config_id=alerta.config.id,
        tipo_notificacion=alerta.tipo_notificacion,
        etapa_notificada=alerta.etapa,
    ))
    db.add(AlertHistory(
        alert_config_id=alerta.config.id,
        titulo=titulo_alerta(licitacion.nomenclatura, alerta.etapa, alerta.dias),
        contenido=(
            f"{licitacion.objeto_contratacion}\n\n"
            f"Entidad: {licitacion.entidad}\n"
            f"Etapa: {alerta.etapa}\n"
            f"Fecha: {alerta.fecha_vencimiento.strftime('%d/%m/%Y')}"
        ),
        fuente=FUENTE_SEACE,
        entidad=licitacion.entidad,
        region=licitacion.region,
        monto=licitacion.valor_referencial,
        url_origen=licitacion.url_origen,
        is_notified=True,
        notified_at=datetime.now(timezone.utc),
    ))


def check_pending_alerts(
    db: Session,
    hoy: Optional[date] = None,
    email_service: Optional[EmailService] = None,
) -> Dict[str, Any]:
    """
    Busca etapas que vencen en los próximos 30 días y avisa a cada usuario
    en los días configurados (dias_anticipacion). Un solo correo por destinatario.

    Returns:
        {'checked', 'alerts_generated', 'emails_sent', 'errors'}
    """
    hoy = hoy or date.today()
    limite = hoy + timedelta(days=VENTANA_DIAS)
    errors: List[str] = []
    alerts_generated = 0
    emails_sent = 0

    configs = _configs_activas(db)
    logger.info(f"Verificando {len(configs)} configuraciones de alerta")

    licitaciones = (
        db.query(ScrapedLicitacion)
        .filter(
            ScrapedLicitacion.estado == "ACTIVO",
            ScrapedLicitacion.etapas.any(
                (LicitacionEtapa.fecha_fin >= hoy) & (LicitacionEtapa.fecha_fin <= limite)
            ),
        )
        .all()
    )
    logger.info(f"{len(licitaciones)} licitaciones con etapas próximas a vencer")

    pendientes = _buscar_pendientes(configs, licitaciones, hoy, limite)
    if not pendientes:
        return {"checked": len(licitaciones), "alerts_generated": 0, "emails_sent": 0, "errors": errors}

    por_email: "OrderedDict[str, List[PendingAlert]]" = OrderedDict()
    for alerta in pendientes:
        por_email.setdefault(alerta.email, []).append(alerta)

    email_service = email_service or EmailService.from_db(db)

    for email, alertas in por_email.items():
        try:
            resultado = email_service.send_email(
                to_email=email,
                subject=f"🔔 {len(alertas)} licitación(es) próximas a vencer",
                body_html=_render_email(alertas),
            )
            if not resultado.get("success"):
                errors.append(f"Error enviando a {email}: {resultado.get('error')}")
                continue

            emails_sent += 1
            for alerta in alertas:
                _registrar_envio(db, alerta)
                alerts_generated += 1
            db.commit()

        except Exception as e:
            db.rollback()
            logger.error(f"Error enviando alertas a {email}: {str(e)}", exc_info=True)
            errors.append(f"Error enviando a {email}: {str(e)}")

    logger.info(f"Alertas de vencimiento: {alerts_generated} generadas, {emails_sent} emails enviados")
    return {
        "checked": len(licitaciones),
        "alerts_generated": alerts_generated,
        "emails_sent": emails_sent,
        "errors": errors,
    }


def notify_new_licitaciones(db: Session, ahora: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Registra en el historial las licitaciones scrapeadas en las últimas 24 h
    que coinciden con cada configuración. Solo se notifican una vez ('nueva').

    Returns:
        {'new_found', 'notified', 'errors'}
    """
    ahora = ahora or datetime.now(timezone.utc).replace(tzinfo=None)  # scraped_at es naive (UTC)
    desde = ahora - timedelta(days=1)
    errors: List[str] = []
    notified = 0

    nuevas = (
        db.query(ScrapedLicitacion)
        .filter(
            ScrapedLicitacion.scraped_at >= desde,
            ScrapedLicitacion.estado == "ACTIVO",
            ~ScrapedLicitacion.notificaciones.any(LicitacionNotificacion.tipo_notificacion == TIPO_NUEVA),
        )
        .all()
    )
    logger.info(f"{len(nuevas)} licitaciones nuevas para notificar")
    if not nuevas:
        return {"new_found": 0, "notified": 0, "errors": errors}

    configs = [c for c in _configs_activas(db) if c.usuario is not None]

    for licitacion in nuevas:
        try:
            for config in configs:
                if not coincide_licitacion(config, licitacion, con_monto=False):
                    continue
                db.add(AlertHistory(
                    alert_config_id=config.id,
                    titulo=f"🆕 Nueva licitación: {licitacion.nomenclatura}",
                    contenido=f"{licitacion.objeto_contratacion}\n\nEntidad: {licitacion.entidad}",
                    fuente=licitacion.fuente,
                    entidad=licitacion.entidad,
                    region=licitacion.region,
                    monto=licitacion.valor_referencial,
                    url_origen=licitacion.url_origen,
                    is_read=False,
                    is_notified=False,
                ))
                db.add(LicitacionNotificacion(
                    licitacion_id=licitacion.id,
                    alert_config_id=config.id,
                    tipo_notificacion=TIPO_NUEVA,
                    etapa_notificada=None,
                ))
                notified += 1
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error notificando licitación {licitacion.id}: {str(e)}", exc_info=True)
            errors.append(f"Licitación {licitacion.nomenclatura}: {str(e)}")

    return {"new_found": len(nuevas), "notified": notified, "errors": errors}
