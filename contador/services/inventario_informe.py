# contador/services/inventario_informe.py
"""
Informe final de inventario en HTML listo para imprimir como PDF.
"""
from datetime import date
from typing import Any, Dict

from contador.models.inventario import Inventario
from contador.utils.templates import render_template

MESES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


def fecha_larga(value: date) -> str:
    """date(2024, 3, 5) -> '5 de marzo de 2024'"""
    return f"{value.day} de {MESES[value.month - 1]} de {value.year}"


def _porcentaje(parte: int, total: int) -> float:
    return round(parte / total * 100, 1) if total else 0.0


def resumen_inventario(inventario: Inventario) -> Dict[str, Any]:
    items = list(inventario.items)
    total = len(items)
    sobrantes = [i for i in items if float(i.sobrantes_unidad or 0) > 0]
    faltantes = [i for i in items if float(i.faltantes_unidad or 0) > 0]
    sin_diferencia = total - len(sobrantes) - len(faltantes)

    return {
        "total_items": total,
        "con_sobrantes": len(sobrantes),
        "con_faltantes": len(faltantes),
        "sin_diferencia": sin_diferencia,
        "pct_sobrantes": _porcentaje(len(sobrantes), total),
        "pct_faltantes": _porcentaje(len(faltantes), total),
        "pct_sin_diferencia": _porcentaje(sin_diferencia, total),
        "diferencia_neta": float(inventario.total_sobrantes_importe or 0) - float(inventario.total_faltantes_importe or 0),
        "sobrantes": sobrantes,
        "faltantes": faltantes,
        "unidades_sobrantes": sum(float(i.sobrantes_unidad or 0) for i in sobrantes),
        "unidades_faltantes": sum(float(i.faltantes_unidad or 0) for i in faltantes),
    }


def generar_informe_html(
    inventario: Inventario,
    include_firma: bool = True,
    include_huella: bool = True,
) -> str:
    company = inventario.company
    firma = company.firma_digital_base64 if (include_firma and company) else None
    huella = company.huella_digital_base64 if (include_huella and company) else None

    return render_template(
        "reportes/informe_inventario.html",
        inventario=inventario,
        company=company,
        resumen=resumen_inventario(inventario),
        fecha_inventario=fecha_larga(inventario.fecha_inventario),
        fecha_emision=fecha_larga(date.today()),
        firma=firma,
        huella=huella,
    )
