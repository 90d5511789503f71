# contador/services/resumen_service.py
"""
Resumen tributario del período (base para el PDT 621).
"""
import re
from decimal import Decimal
from typing import Dict, Iterable

from contador.models.comprobante import Comprobante, TipoOperacion

PERIODO_RE = re.compile(r"^\d{6}$")

CAMPOS = (
    "total_ventas", "igv_ventas", "ventas_gravadas", "ventas_no_gravadas", "exportaciones",
    "total_compras", "igv_compras", "compras_gravadas", "compras_no_gravadas",
)


def periodo_valido(periodo) -> bool:
    return bool(periodo) and bool(PERIODO_RE.match(periodo))


def calcular_resumen(periodo: str, comprobantes: Iterable[Comprobante]) -> Dict[str, object]:
    """
    Suma ventas y compras de comprobantes ACTIVO.

    Ventas: exportación > gravada > no gravada (sobre base imponible).
    Compras: gravada solo si además afecta IGV.
    """
    acum = {campo: Decimal("0") for campo in CAMPOS}

    for c in comprobantes:
        base = Decimal(c.base_imponible or 0)
        igv = Decimal(c.igv or 0)
        total = Decimal(c.total or 0)

        if c.tipo == TipoOperacion.VENTA:
            acum["total_ventas"] += total
            acum["igv_ventas"] += igv
            if c.es_exportacion:
                acum["exportaciones"] += base
            elif c.es_gravada:
                acum["ventas_gravadas"] += base
            else:
                acum["ventas_no_gravadas"] += base
        else:
            acum["total_compras"] += total
            acum["igv_compras"] += igv
            if c.es_gravada and c.afecta_igv:
                acum["compras_gravadas"] += base
            else:
                acum["compras_no_gravadas"] += base

    resumen: Dict[str, object] = {"periodo": periodo}
    resumen.update({campo: round(float(valor), 2) for campo, valor in acum.items()})
    return resumen
