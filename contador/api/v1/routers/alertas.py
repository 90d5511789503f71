# contador/api/v1/routers/alertas.py
"""
Configuración de alertas de licitaciones y bandeja de alertas del usuario.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.security import get_current_usuario, require_superadmin
from contador.models.alerta import AlertConfig, AlertHistory
from contador.schemas.alerta import (
    AlertConfigCreate, AlertConfigResponse, AlertConfigUpdate, AlertHistoryResponse
)
from contador.schemas.common import ErrorResponse
from contador.services.alert_service import check_pending_alerts, notify_new_licitaciones
from contador.utils.logger import logger

router = APIRouter()


def _get_own_config(db: Session, config_id: int, usuario_id: int) -> AlertConfig:
    config = db.query(AlertConfig).filter(
        AlertConfig.id == config_id,
        AlertConfig.usuario_id == usuario_id,
    ).first()
    if not config:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alerta no encontrada")
    return config


def _validar_montos(monto_minimo, monto_maximo) -> None:
    if monto_minimo is not None and monto_maximo is not None and monto_minimo > monto_maximo:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El monto mínimo no puede ser mayor al monto máximo"
        )


@router.get("/alertas", response_model=List[AlertConfigResponse], summary="Mis configuraciones de alerta")
def list_configs(db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    return (
        db.query(AlertConfig)
        .filter(AlertConfig.usuario_id == current_user.id)
        .order_by(AlertConfig.id)
        .all()
    )


@router.post(
    "/alertas",
    response_model=AlertConfigResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_config(payload: AlertConfigCreate, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    _validar_montos(payload.monto_minimo, payload.monto_maximo)
    config = AlertConfig(usuario_id=current_user.id, **payload.model_dump())
    db.add(config)
    db.commit()
    db.refresh(config)
    logger.info(f"Alerta {config.id} creada por usuario {current_user.id}")
    return config


@router.get("/alertas/history", response_model=List[AlertHistoryResponse], summary="Bandeja de alertas")
def history(
    solo_no_leidas: bool = False,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    query = (
        db.query(AlertHistory)
        .join(AlertConfig, AlertHistory.alert_config_id == AlertConfig.id)
        .filter(AlertConfig.usuario_id == current_user.id)
    )
    if solo_no_leidas:
        query = query.filter(AlertHistory.is_read.is_(False))
    return query.order_by(AlertHistory.creado_en.desc(), AlertHistory.id.desc()).limit(limit).all()


@router.put(
    "/alertas/{config_id}",
    response_model=AlertConfigResponse,
    responses={404: {"model": ErrorResponse}},
)
def update_config(
    config_id: int,
    payload: AlertConfigUpdate,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    config = _get_own_config(db, config_id, current_user.id)
    changes = payload.model_dump(exclude_unset=True)
    _validar_montos(
        changes.get("monto_minimo", config.monto_minimo),
        changes.get("monto_maximo", config.monto_maximo),
    )
    for field, value in changes.items():
        setattr(config, field, value)
    db.commit()
    db.refresh(config)
    return config


@router.delete(
    "/alertas/{config_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
def delete_config(config_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    config = _get_own_config(db, config_id, current_user.id)
    db.delete(config)
    db.commit()
    logger.info(f"Alerta {config_id} eliminada por usuario {current_user.id}")


@router.post("/admin/alertas/run", summary="Ejecutar manualmente los jobs de alertas")
def run_jobs(db: Session = Depends(get_db), current_user=Depends(require_superadmin)):
    logger.info(f"Ejecución manual de alertas por usuario {current_user.id}")
    return {
        "vencimientos": check_pending_alerts(db),
        "nuevas": notify_new_licitaciones(db),
    }
