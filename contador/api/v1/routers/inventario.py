# contador/api/v1/routers/inventario.py
"""
Inventarios físicos: alta manual, cruce de archivos Excel (stock economato
contra conteo), exportación del Anexo 2 e informe HTML.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from contador.db.session import get_db
from contador.core.company_access import require_company_access
from contador.core.security import get_current_usuario, is_superadmin
from contador.models.inventario import Inventario
from contador.schemas.common import ErrorResponse
from contador.schemas.inventario import InventarioCreate, InventarioDetalle, InventarioResumen
from contador.services.inventario_excel import XLSX_MEDIA_TYPE, generar_anexo2
from contador.services.inventario_informe import generar_informe_html
from contador.services.inventario_service import InventarioFileError, crear_inventario, procesar_archivos
from contador.utils.logger import logger

router = APIRouter()


def _get_inventario(db: Session, inventario_id: int, usuario) -> Inventario:
    query = db.query(Inventario).filter(Inventario.id == inventario_id)
    if not is_superadmin(usuario):
        query = query.filter(Inventario.usuario_id == usuario.id)
    inventario = query.first()
    if not inventario:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventario no encontrado")
    return inventario


@router.get("", response_model=List[InventarioResumen], summary="Mis inventarios")
def list_all(db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    return (
        db.query(Inventario)
        .filter(Inventario.usuario_id == current_user.id)
        .order_by(Inventario.fecha_inventario.desc(), Inventario.id.desc())
        .all()
    )


@router.post("", response_model=InventarioDetalle, status_code=status.HTTP_201_CREATED)
def create(payload: InventarioCreate, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    if payload.company_id is not None:
        require_company_access(db, payload.company_id, current_user)
    inventario = crear_inventario(db, payload.model_dump(), current_user.id)
    logger.info(f"Inventario {inventario.id} creado con {inventario.total_items} items")
    return inventario


@router.post(
    "/procesar",
    response_model=InventarioDetalle,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
    summary="Cruzar stock economato contra conteo físico",
)
async def procesar(
    stock_file: Optional[UploadFile] = File(None),
    conteo_file: Optional[UploadFile] = File(None),
    nombre: Optional[str] = Form(None),
    descripcion: Optional[str] = Form(None),
    fecha_inventario: Optional[date] = Form(None),
    company_id: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    if stock_file is None or conteo_file is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Se requieren ambos archivos: Stock Economato y Primer/Segundo Conteo"
        )
    if company_id is not None:
        require_company_access(db, company_id, current_user)

    stock_content = await stock_file.read()
    conteo_content = await conteo_file.read()

    try:
        return procesar_archivos(
            db,
            stock_content,
            conteo_content,
            usuario_id=current_user.id,
            nombre=nombre,
            descripcion=descripcion,
            fecha_inventario=fecha_inventario,
            company_id=company_id,
        )
    except InventarioFileError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error procesando archivos de inventario: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error interno: {str(e)}"
        )


@router.get("/{inventario_id}", response_model=InventarioDetalle, responses={404: {"model": ErrorResponse}})
def get_one(inventario_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    return _get_inventario(db, inventario_id, current_user)


@router.delete(
    "/{inventario_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
def delete(inventario_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    inventario = _get_inventario(db, inventario_id, current_user)
    db.delete(inventario)
    db.commit()
    logger.info(f"Inventario {inventario_id} eliminado por usuario {current_user.id}")


@router.get("/{inventario_id}/excel", summary="Descargar Anexo 2 en Excel")
def excel(inventario_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_usuario)):
    inventario = _get_inventario(db, inventario_id, current_user)
    content, filename = generar_anexo2(inventario)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{inventario_id}/informe", response_class=HTMLResponse, summary="Informe de inventario en HTML")
def informe(
    inventario_id: int,
    include_firma: bool = True,
    include_huella: bool = True,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_usuario),
):
    inventario = _get_inventario(db, inventario_id, current_user)
    return HTMLResponse(generar_informe_html(inventario, include_firma=include_firma, include_huella=include_huella))
