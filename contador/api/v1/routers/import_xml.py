# contador/api/v1/routers/import_xml.py
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.company_access import require_company_access
from contador.core.security import get_current_usuario
from contador.models.comprobante import TipoOperacion
from contador.services.import_service import ImportValidationError, importar_archivo
from contador.utils.logger import logger

router = APIRouter()


@router.post("/xml", summary="Importar comprobantes desde XML o ZIP")
async def import_xml(
    file: Optional[UploadFile] = File(None),
    company_id: Optional[int] = Form(None),
    tipo_operacion: Optional[str] = Form(None, description="VENTA o COMPRA; por defecto se detecta por RUC"),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    """
    Clasifica cada comprobante como VENTA si el RUC emisor es el de la
    empresa y como COMPRA en otro caso, salvo que se indique tipo_operacion.
    """
    if file is None or company_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Archivo y empresa son requeridos"
        )
    if tipo_operacion and tipo_operacion not in (TipoOperacion.VENTA, TipoOperacion.COMPRA):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tipo de operación inválido. Use VENTA o COMPRA."
        )

    company = require_company_access(db, company_id, current_user)
    content = await file.read()

    try:
        return importar_archivo(
            db,
            company,
            content,
            file_name=file.filename or "archivo",
            usuario_id=current_user.id,
            tipo_operacion_manual=tipo_operacion,
        )
    except ImportValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error importando XML/ZIP: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error interno: {str(e)}"
        )
