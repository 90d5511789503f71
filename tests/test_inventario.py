"""
Tests de inventario físico: cálculo de diferencias, cruce de Excel,
Anexo 2 e informe HTML.
"""
from decimal import Decimal
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from contador.models.inventario import InventarioItem
from contador.services.inventario_informe import fecha_larga
from contador.services.inventario_service import calcular_diferencias, construir_items

STOCK_HEADER = [
    "codi_bser_cat", "descripcion", "unidad_medida_desc", "almacen", "almacen_desc",
    "saldo_final", "valor_total",
]
STOCK_ROWS = [
    ["A001", "PAPEL BOND A4", "MILLAR", 130, "ECONOMATO CENTRAL", 10, 250],
    [2001, "LAPICERO AZUL", "UNIDAD", 130, "ECONOMATO CENTRAL", 100, 50],
    ["T003", "TONER HP 85A", "UNIDAD", 130, "ECONOMATO CENTRAL", 4, 400],
]
CONTEO_HEADER = ["CODIGO", "DESCRIPCION", "CONTEO A", "CONTEO B"]
CONTEO_ROWS = [
    ["A001", "PAPEL BOND A4", 11, 12],
    ["2001", "LAPICERO AZUL", 90, 90],
    ["T003", "TONER HP 85A", 4, 4],
]

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _xlsx(header, rows) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.append(header)
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def _archivos():
    return {
        "stock_file": ("stock.xlsx", _xlsx(STOCK_HEADER, STOCK_ROWS), XLSX),
        "conteo_file": ("conteo.xlsx", _xlsx(CONTEO_HEADER, CONTEO_ROWS), XLSX),
    }


@pytest.fixture
def inventario(client, auth_headers):
    r = client.post(
        "/api/v1/inventario/procesar",
        files=_archivos(),
        data={"nombre": "Inventario anual", "fecha_inventario": "2024-12-31"},
        headers=auth_headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.unit
class TestCalculo:

    def test_sobrante(self):
        item = calcular_diferencias(InventarioItem(
            codigo_bien="A", inventario_unidad=Decimal("12"), kardex_unidad=Decimal("10"),
            costo_unitario=Decimal("25"),
        ))
        assert item.sobrantes_unidad == Decimal("2")
        assert item.sobrantes_importe == Decimal("50.00")
        assert item.faltantes_unidad == Decimal("0")
        assert item.inventario_importe == Decimal("300.00")
        assert item.kardex_importe == Decimal("250.00")

    def test_faltante_respeta_importe_kardex(self):
        item = calcular_diferencias(InventarioItem(
            codigo_bien="B", inventario_unidad=Decimal("7"), kardex_unidad=Decimal("10"),
            costo_unitario=Decimal("1.5"), kardex_importe=Decimal("15.10"),
        ))
        assert item.faltantes_unidad == Decimal("3")
        assert item.faltantes_importe == Decimal("4.50")
        assert item.kardex_importe == Decimal("15.10")

    def test_cruce_por_codigo(self):
        stock = [dict(zip(STOCK_HEADER, row)) for row in STOCK_ROWS]
        conteo = [dict(zip(CONTEO_HEADER, row)) for row in CONTEO_ROWS]

        cruce = construir_items(stock, conteo)

        assert cruce["codigo_economato"] == "130"
        assert cruce["almacen_desc"] == "ECONOMATO CENTRAL"
        items = {i.codigo_bien: i for i in cruce["items"]}
        assert items["2001"].costo_unitario == Decimal("0.5000")
        assert items["2001"].faltantes_unidad == Decimal("10")
        assert items["T003"].sobrantes_unidad == Decimal("0")

    def test_codigo_sin_conteo_cuenta_cero(self):
        stock = [dict(zip(STOCK_HEADER, STOCK_ROWS[0]))]
        item = construir_items(stock, [])["items"][0]
        assert item.inventario_unidad == Decimal("0")
        assert item.faltantes_unidad == Decimal("10")

    def test_fecha_larga(self):
        from datetime import date
        assert fecha_larga(date(2024, 3, 5)) == "5 de marzo de 2024"


@pytest.mark.integration
class TestEndpoints:

    def test_procesar(self, inventario):
        assert inventario["nombre"] == "Inventario anual"
        assert inventario["codigo_economato"] == "130"
        assert inventario["total_items"] == 3
        assert Decimal(inventario["total_inventario_importe"]) == Decimal("745")
        assert Decimal(inventario["total_kardex_importe"]) == Decimal("700")
        assert Decimal(inventario["total_sobrantes_importe"]) == Decimal("50")
        assert Decimal(inventario["total_faltantes_importe"]) == Decimal("5")

    def test_procesar_sin_archivos(self, client, auth_headers):
        r = client.post(
            "/api/v1/inventario/procesar",
            files={"stock_file": _archivos()["stock_file"]},
            headers=auth_headers,
        )
        assert r.status_code == 400
        assert r.json()["detail"] == "Se requieren ambos archivos: Stock Economato y Primer/Segundo Conteo"

    def test_procesar_archivo_invalido(self, client, auth_headers):
        r = client.post(
            "/api/v1/inventario/procesar",
            files={
                "stock_file": ("stock.xlsx", b"no es excel", XLSX),
                "conteo_file": _archivos()["conteo_file"],
            },
            headers=auth_headers,
        )
        assert r.status_code == 400
        assert r.json()["detail"].startswith("No se pudo leer el archivo Excel")

    def test_alta_manual_y_listado(self, client, auth_headers):
        r = client.post(
            "/api/v1/inventario",
            json={
                "nombre": "Conteo manual",
                "fecha_inventario": "2024-06-30",
                "items": [
                    {"codigo_bien": "X1", "descripcion": "Archivador", "inventario_unidad": 5,
                     "kardex_unidad": 6, "costo_unitario": 8},
                ],
            },
            headers=auth_headers,
        )
        assert r.status_code == 201
        assert Decimal(r.json()["total_faltantes_importe"]) == Decimal("8")

        listado = client.get("/api/v1/inventario", headers=auth_headers).json()
        assert [i["nombre"] for i in listado] == ["Conteo manual"]

    def test_inventario_ajeno(self, client, inventario, otro_headers, superadmin_headers):
        url = f"/api/v1/inventario/{inventario['id']}"
        r = client.get(url, headers=otro_headers)
        assert r.status_code == 404
        assert r.json()["detail"] == "Inventario no encontrado"

        assert client.get(url, headers=superadmin_headers).status_code == 200

    def test_excel_anexo2(self, client, inventario, auth_headers):
        r = client.get(f"/api/v1/inventario/{inventario['id']}/excel", headers=auth_headers)
        assert r.status_code == 200
        assert r.headers["content-type"] == XLSX
        assert 'filename="ANEXO_2_2024-12-31_130.xlsx"' in r.headers["content-disposition"]

        wb = load_workbook(BytesIO(r.content))
        ws = wb["ANEXO 2"]
        assert ws["A1"].value == 'ANEXO "2"'
        assert ws["A1"].alignment.horizontal == "center"
        assert ws["A1"].alignment.vertical == "center"
        valores = [c for row in ws.iter_rows(values_only=True) for c in row if c is not None]
        assert "TOTALES" in valores
        assert "PAPEL BOND A4" in valores

    def test_informe_html(self, client, inventario, auth_headers):
        r = client.get(f"/api/v1/inventario/{inventario['id']}/informe", headers=auth_headers)
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/html")
        assert "Inventario anual" in r.text
        assert "31 de diciembre de 2024" in r.text
        assert "LAPICERO AZUL" in r.text

    def test_eliminar(self, client, inventario, auth_headers):
        url = f"/api/v1/inventario/{inventario['id']}"
        assert client.delete(url, headers=auth_headers).status_code == 204
        assert client.get(url, headers=auth_headers).status_code == 404
