# contador/api/v1/routers/admin_smtp.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.security import require_superadmin
from contador.schemas.common import ErrorResponse
from contador.schemas.smtp import SMTPConfig, SMTPConfigResponse, SMTPTestRequest
from contador.services.smtp_config_service import (
    SMTPConfigError, get_public_smtp_config, probar_conexion_smtp, save_smtp_config, smtp_suggestion
)
from contador.utils.logger import logger

router = APIRouter()


@router.get("", response_model=SMTPConfigResponse, summary="Configuración SMTP")
def get_config(db: Session = Depends(get_db), current_user=Depends(require_superadmin)):
    return get_public_smtp_config(db)


@router.put(
    "",
    response_model=SMTPConfigResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Guardar configuración SMTP",
)
def update_config(payload: SMTPConfig, db: Session = Depends(get_db), current_user=Depends(require_superadmin)):
    try:
        save_smtp_config(db, payload.model_dump())
    except SMTPConfigError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return get_public_smtp_config(db)


@router.post("/test", summary="Probar conexión SMTP")
def test_config(payload: SMTPTestRequest, db: Session = Depends(get_db), current_user=Depends(require_superadmin)):
    """
    Prueba los datos del formulario (o los guardados si no se envía host).
    Con test_email además envía un correo de prueba.
    """
    data = payload.model_dump(exclude={"test_email"})
    try:
        return probar_conexion_smtp(db, data, test_email=payload.test_email)
    except SMTPConfigError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        message = str(e) or e.__class__.__name__
        logger.error(f"Error probando SMTP: {message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "error": f"Error de conexión: {message}",
                "suggestion": smtp_suggestion(message),
            },
        )
