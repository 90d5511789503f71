# contador/services/inventario_service.py
"""
Inventario físico vs kárdex.

procesar_archivos cruza dos hojas Excel:
- Stock Economato: saldo y valor según kárdex por código de bien
- Primer/Segundo Conteo: cantidad contada (columna 'CONTEO B')
"""
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional

from openpyxl import load_workbook
from sqlalchemy.orm import Session

from contador.models.inventario import Inventario, InventarioItem

logger = logging.getLogger(__name__)

DEFAULT_ECONOMATO = "130"
CUATRO = Decimal("0.0001")
DOS = Decimal("0.01")
CERO = Decimal("0")


class InventarioFileError(ValueError):
    """Archivo Excel ilegible o sin las columnas esperadas"""


def _dec(value: Any) -> Decimal:
    if value is None or value == "":
        return CERO
    try:
        return Decimal(str(value).replace(",", "").strip())
    except (InvalidOperation, ValueError):
        return CERO


def _unidades(value: Decimal) -> Decimal:
    return value.quantize(CUATRO, rounding=ROUND_HALF_UP)


def _importe(value: Decimal) -> Decimal:
    return value.quantize(DOS, rounding=ROUND_HALF_UP)


# -----------------------------------------------------
# Cálculo
# -----------------------------------------------------
def calcular_diferencias(item: InventarioItem) -> InventarioItem:
    """
    Completa importes y sobrantes/faltantes a partir de las unidades y el
    costo unitario. Modifica el item y lo devuelve.
    """
    costo = _dec(item.costo_unitario)
    inventario_unidad = _dec(item.inventario_unidad)
    kardex_unidad = _dec(item.kardex_unidad)

    diferencia = inventario_unidad - kardex_unidad
    sobrantes = diferencia if diferencia > 0 else CERO
    faltantes = -diferencia if diferencia < 0 else CERO

    item.inventario_importe = _importe(inventario_unidad * costo)
    if item.kardex_importe is None or _dec(item.kardex_importe) == 0:
        item.kardex_importe = _importe(kardex_unidad * costo)
    item.sobrantes_unidad = _unidades(sobrantes)
    item.sobrantes_importe = _importe(sobrantes * costo)
    item.faltantes_unidad = _unidades(faltantes)
    item.faltantes_importe = _importe(faltantes * costo)
    return item


def recalcular_totales(inventario: Inventario) -> Inventario:
    items = list(inventario.items)
    inventario.total_items = len(items)
    inventario.total_inventario_importe = _importe(sum((_dec(i.inventario_importe) for i in items), CERO))
    inventario.total_kardex_importe = _importe(sum((_dec(i.kardex_importe) for i in items), CERO))
    inventario.total_sobrantes_importe = _importe(sum((_dec(i.sobrantes_importe) for i in items), CERO))
    inventario.total_faltantes_importe = _importe(sum((_dec(i.faltantes_importe) for i in items), CERO))
    return inventario


# -----------------------------------------------------
# Lectura de Excel
# -----------------------------------------------------
def leer_hoja(content: bytes) -> List[Dict[str, Any]]:
    """Primera hoja como lista de dicts usando la primera fila como cabecera."""
    try:
        wb = load_workbook(BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise InventarioFileError(f"No se pudo leer el archivo Excel: {e}") from e

    try:
        ws = wb.worksheets[0]
        rows = ws.iter_rows(values_only=True)
        header = next(rows, None)
        if not header:
            return []
        columnas = [str(c).strip() if c is not None else "" for c in header]
        registros = []
        for row in rows:
            if row is None or all(v is None for v in row):
                continue
            registros.append({col: val for col, val in zip(columnas, row) if col})
        return registros
    finally:
        wb.close()


def _texto(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Códigos numéricos que Excel guarda como float
        return str(int(value))
    return str(value).strip()


def construir_items(stock: Iterable[Dict[str, Any]], conteo: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Cruza stock y conteo por código de bien.

    Returns:
        {'items': [InventarioItem], 'codigo_economato': str, 'almacen_desc': str}
    """
    conteo_map: Dict[str, Decimal] = {}
    for fila in conteo:
        codigo = _texto(fila.get("CODIGO"))
        if codigo:
            conteo_map[codigo] = _dec(fila.get("CONTEO B"))

    codigo_economato = DEFAULT_ECONOMATO
    almacen_desc = ""
    items: List[InventarioItem] = []

    for fila in stock:
        codigo = _texto(fila.get("codi_bser_cat"))
        if not codigo:
            continue

        codigo_economato = _texto(fila.get("almacen")) or DEFAULT_ECONOMATO
        almacen_desc = _texto(fila.get("almacen_desc"))

        kardex_unidad = _dec(fila.get("saldo_final"))
        kardex_importe = _dec(fila.get("valor_total"))
        costo = kardex_importe / kardex_unidad if kardex_unidad > 0 else CERO

        item = InventarioItem(
            codigo_bien=codigo,
            descripcion=_texto(fila.get("descripcion")),
            unidad_medida=_texto(fila.get("unidad_medida_desc")),
            inventario_unidad=_unidades(conteo_map.get(codigo, CERO)),
            kardex_unidad=_unidades(kardex_unidad),
            kardex_importe=_importe(kardex_importe),
            costo_unitario=costo,
        )
        calcular_diferencias(item)
        item.costo_unitario = _unidades(costo)
        items.append(item)

    return {"items": items, "codigo_economato": codigo_economato, "almacen_desc": almacen_desc}


def procesar_archivos(
    db: Session,
    stock_content: bytes,
    conteo_content: bytes,
    usuario_id: int,
    nombre: Optional[str] = None,
    descripcion: Optional[str] = None,
    fecha_inventario: Optional[date] = None,
    company_id: Optional[int] = None,
) -> Inventario:
    stock = leer_hoja(stock_content)
    conteo = leer_hoja(conteo_content)
    logger.info(f"Procesando inventario: {len(stock)} filas de stock, {len(conteo)} filas de conteo")

    cruce = construir_items(stock, conteo)
    fecha_inventario = fecha_inventario or date.today()

    inventario = Inventario(
        usuario_id=usuario_id,
        company_id=company_id,
        nombre=nombre or f"Inventario {fecha_inventario.strftime('%d/%m/%Y')}",
        descripcion=descripcion,
        fecha_inventario=fecha_inventario,
        codigo_economato=cruce["codigo_economato"],
        almacen_desc=cruce["almacen_desc"] or None,
    )
    inventario.items = cruce["items"]
    recalcular_totales(inventario)

    db.add(inventario)
    db.commit()
    db.refresh(inventario)
    logger.info(f"Inventario {inventario.id} guardado con {inventario.total_items} items")
    return inventario


def crear_inventario(db: Session, data: Dict[str, Any], usuario_id: int) -> Inventario:
    """Alta manual con items ya capturados; las diferencias se recalculan."""
    items_data = data.pop("items", []) or []
    inventario = Inventario(usuario_id=usuario_id, **data)
    if not inventario.codigo_economato:
        inventario.codigo_economato = DEFAULT_ECONOMATO

    items = []
    for item_data in items_data:
        item = InventarioItem(**item_data)
        calcular_diferencias(item)
        items.append(item)
    inventario.items = items
    recalcular_totales(inventario)

    db.add(inventario)
    db.commit()
    db.refresh(inventario)
    return inventario
