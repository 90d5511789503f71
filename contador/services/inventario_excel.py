# contador/services/inventario_excel.py
"""
Generación del ANEXO 2 (reporte de resultados del inventario) en XLSX.
"""
from io import BytesIO
from typing import Tuple

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from contador.models.inventario import Inventario

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

COLUMN_WIDTHS = {
    "A": 35, "B": 18, "C": 45, "D": 12, "E": 10, "F": 12, "G": 10,
    "H": 12, "I": 12, "J": 10, "K": 12, "L": 10, "M": 12,
}

UNIT_COLUMNS = (5, 7, 10, 12)
AMOUNT_COLUMNS = (6, 8, 9, 11, 13)
NUMBER_FORMAT = "#,##0"
CURRENCY_FORMAT = "#,##0.00"

COLOR_PRIMARIO = "1F4E79"
COLOR_SUBHEADER = "2E75B6"
COLOR_SOBRANTES = "70AD47"
COLOR_FALTANTES = "C00000"
COLOR_SOBRANTE_TEXTO = "006400"
COLOR_TOTALES = "D9E1F2"


def _fill(color: str) -> PatternFill:
    return PatternFill(fill_type="solid", start_color=color, end_color=color)


def _border(color: str = "000000", style: str = "thin", outer: str = None) -> Border:
    side = Side(style=style, color=color)
    outer_side = Side(style=outer, color=color) if outer else side
    return Border(top=outer_side, left=side, bottom=outer_side, right=side)


HEADER_FONT = Font(bold=True, color="FFFFFF", size=10)
SUBHEADER_FONT = Font(bold=True, color="FFFFFF", size=9)
CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)
RIGHT = Alignment(horizontal="right")


def nombre_archivo(inventario: Inventario) -> str:
    return f"ANEXO_2_{inventario.fecha_inventario.isoformat()}_{inventario.codigo_economato}.xlsx"


def _escribir_cabecera(ws, fila: int) -> None:
    # A-D ocupan las tres filas de cabecera
    for col in "ABCD":
        ws.merge_cells(f"{col}{fila}:{col}{fila + 2}")
    ws.merge_cells(f"E{fila}:F{fila + 1}")
    ws.merge_cells(f"G{fila}:I{fila + 1}")
    ws.merge_cells(f"J{fila}:M{fila}")
    ws.merge_cells(f"J{fila + 1}:K{fila + 1}")
    ws.merge_cells(f"L{fila + 1}:M{fila + 1}")

    titulos = {
        "A": "Economato", "B": "Código de Bien", "C": "Descripción del Bien",
        "D": "Unid. Medida", "E": "INVENTARIO", "G": "KÁRDEX", "J": "DIFERENCIAS",
    }
    for col, titulo in titulos.items():
        ws[f"{col}{fila}"] = titulo

    for col in "ABCDEFGHIJKLM":
        cell = ws[f"{col}{fila}"]
        cell.font = HEADER_FONT
        cell.fill = _fill(COLOR_PRIMARIO)
        cell.alignment = CENTER
        cell.border = _border()
    for col in "EFGHI":
        cell = ws[f"{col}{fila + 1}"]
        cell.font = HEADER_FONT
        cell.fill = _fill(COLOR_PRIMARIO)
        cell.alignment = CENTER
        cell.border = _border()

    ws[f"J{fila + 1}"] = "Sobrantes"
    ws[f"L{fila + 1}"] = "Faltantes"
    for col, color in (("J", COLOR_SOBRANTES), ("K", COLOR_SOBRANTES), ("L", COLOR_FALTANTES), ("M", COLOR_FALTANTES)):
        cell = ws[f"{col}{fila + 1}"]
        cell.font = SUBHEADER_FONT
        cell.fill = _fill(color)
        cell.alignment = CENTER
        cell.border = _border()

    subtitulos = {
        "E": "Unidad", "F": "Importe", "G": "Unidad", "H": "Costo Unit.", "I": "Importe",
        "J": "Unidad", "K": "Importe", "L": "Unidad", "M": "Importe",
    }
    for col, texto in subtitulos.items():
        cell = ws[f"{col}{fila + 2}"]
        cell.value = texto
        cell.font = SUBHEADER_FONT
        cell.fill = _fill(COLOR_SUBHEADER)
        cell.alignment = CENTER
        cell.border = _border()

    ws.row_dimensions[fila].height = 22
    ws.row_dimensions[fila + 1].height = 20
    ws.row_dimensions[fila + 2].height = 20


def generar_anexo2(inventario: Inventario) -> Tuple[bytes, str]:
    """
    Returns:
        (contenido xlsx, nombre de archivo)
    """
    wb = Workbook()
    ws = wb.active
    ws.title = "ANEXO 2"
    ws.page_setup.orientation = "landscape"
    ws.page_setup.paperSize = ws.PAPERSIZE_A4
    ws.page_setup.fitToWidth = 1
    ws.page_setup.fitToHeight = 0
    ws.sheet_properties.pageSetUpPr.fitToPage = True

    for col, width in COLUMN_WIDTHS.items():
        ws.column_dimensions[col].width = width

    fila = 1
    ws.merge_cells(f"A{fila}:M{fila}")
    ws[f"A{fila}"] = 'ANEXO "2"'
    ws[f"A{fila}"].font = Font(bold=True, size=16, color=COLOR_PRIMARIO)
    ws[f"A{fila}"].alignment = Alignment(horizontal="center", vertical="center")
    ws.row_dimensions[fila].height = 25
    fila += 2

    ws.merge_cells(f"A{fila}:M{fila}")
    ws[f"A{fila}"] = "REPORTE DE RESULTADOS DEL INVENTARIO DE BIENES DE USO Y CONSUMO"
    ws[f"A{fila}"].font = Font(bold=True, size=12)
    ws[f"A{fila}"].alignment = Alignment(horizontal="center", vertical="center")
    fila += 2

    if inventario.company:
        ws[f"A{fila}"] = f"Empresa: {inventario.company.razon_social}"
        ws[f"A{fila}"].font = Font(bold=True)
        fila += 1
        ws[f"A{fila}"] = f"RUC: {inventario.company.ruc}"
        fila += 1

    ws[f"A{fila}"] = f"Nombre: {inventario.nombre}"
    ws[f"A{fila}"].font = Font(bold=True)
    fila += 1
    ws[f"A{fila}"] = f"Fecha de Inventario: {inventario.fecha_inventario.strftime('%d/%m/%Y')}"
    fila += 1
    ws[f"A{fila}"] = f"Código de Economato: {inventario.codigo_economato}"
    fila += 2

    _escribir_cabecera(ws, fila)
    fila += 3

    economato = (
        f"{inventario.codigo_economato} - {inventario.almacen_desc}"
        if inventario.almacen_desc else inventario.codigo_economato
    )
    data_border = _border("D0D0D0")

    for idx, item in enumerate(inventario.items):
        valores = [
            economato, item.codigo_bien, item.descripcion, item.unidad_medida,
            float(item.inventario_unidad or 0), float(item.inventario_importe or 0),
            float(item.kardex_unidad or 0), float(item.costo_unitario or 0), float(item.kardex_importe or 0),
            float(item.sobrantes_unidad or 0), float(item.sobrantes_importe or 0),
            float(item.faltantes_unidad or 0), float(item.faltantes_importe or 0),
        ]
        fill = _fill("FFFFFF" if idx % 2 == 0 else "F2F2F2")
        hay_sobrante = float(item.sobrantes_unidad or 0) > 0
        hay_faltante = float(item.faltantes_unidad or 0) > 0

        for col, valor in enumerate(valores, start=1):
            cell = ws.cell(row=fila, column=col, value=valor)
            cell.border = data_border
            cell.fill = fill
            cell.font = Font(size=9)
            if col in UNIT_COLUMNS:
                cell.number_format = NUMBER_FORMAT
                cell.alignment = RIGHT
            elif col in AMOUNT_COLUMNS:
                cell.number_format = CURRENCY_FORMAT
                cell.alignment = RIGHT
            if col in (10, 11) and hay_sobrante:
                cell.font = Font(size=9, color=COLOR_SOBRANTE_TEXTO, bold=True)
            if col in (12, 13) and hay_faltante:
                cell.font = Font(size=9, color=COLOR_FALTANTES, bold=True)
        fila += 1

    # Totales
    fila += 1
    ws.merge_cells(f"A{fila}:D{fila}")
    totales = {
        1: "TOTALES",
        6: float(inventario.total_inventario_importe or 0),
        9: float(inventario.total_kardex_importe or 0),
        11: float(inventario.total_sobrantes_importe or 0),
        13: float(inventario.total_faltantes_importe or 0),
    }
    totals_border = _border(COLOR_PRIMARIO, outer="medium")
    for col in range(1, 14):
        cell = ws.cell(row=fila, column=col)
        if col in totales:
            cell.value = totales[col]
        cell.font = Font(bold=True, size=10)
        cell.fill = _fill(COLOR_TOTALES)
        cell.border = totals_border
        if col in (6, 9, 11, 13):
            cell.number_format = CURRENCY_FORMAT
            cell.alignment = RIGHT
        if col == 1:
            cell.alignment = Alignment(horizontal="center")
    if totales[11] > 0:
        ws.cell(row=fila, column=11).font = Font(bold=True, size=10, color=COLOR_SOBRANTE_TEXTO)
    if totales[13] > 0:
        ws.cell(row=fila, column=13).font = Font(bold=True, size=10, color=COLOR_FALTANTES)
    ws.row_dimensions[fila].height = 22

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue(), nombre_archivo(inventario)
