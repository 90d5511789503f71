"""
Tests unitarios del resumen tributario y del formato de almacenamiento.
"""
from decimal import Decimal
from types import SimpleNamespace

import pytest

from contador.models.comprobante import TipoOperacion
from contador.services.resumen_service import calcular_resumen, periodo_valido
from contador.services.storage_service import format_bytes

pytestmark = pytest.mark.unit


def _comprobante(tipo, base, igv, total, gravada=True, exportacion=False, afecta_igv=True):
    return SimpleNamespace(
        tipo=tipo,
        base_imponible=Decimal(base),
        igv=Decimal(igv),
        total=Decimal(total),
        es_gravada=gravada,
        es_exportacion=exportacion,
        afecta_igv=afecta_igv,
    )


def test_resumen_clasifica_ventas_y_compras():
    comprobantes = [
        _comprobante(TipoOperacion.VENTA, "100.00", "18.00", "118.00"),
        _comprobante(TipoOperacion.VENTA, "50.00", "0", "50.00", gravada=False),
        _comprobante(TipoOperacion.VENTA, "300.00", "0", "300.00", exportacion=True),
        _comprobante(TipoOperacion.COMPRA, "200.00", "36.00", "236.00"),
        _comprobante(TipoOperacion.COMPRA, "40.00", "7.20", "47.20", afecta_igv=False),
    ]

    resumen = calcular_resumen("202404", comprobantes)

    assert resumen["periodo"] == "202404"
    assert resumen["total_ventas"] == 468.0
    assert resumen["igv_ventas"] == 18.0
    assert resumen["ventas_gravadas"] == 100.0
    assert resumen["ventas_no_gravadas"] == 50.0
    assert resumen["exportaciones"] == 300.0
    assert resumen["total_compras"] == 283.2
    assert resumen["igv_compras"] == 43.2
    assert resumen["compras_gravadas"] == 200.0
    assert resumen["compras_no_gravadas"] == 40.0


def test_resumen_vacio():
    resumen = calcular_resumen("202401", [])
    assert resumen["total_ventas"] == 0.0
    assert resumen["compras_no_gravadas"] == 0.0


@pytest.mark.parametrize("periodo,esperado", [
    ("202404", True),
    ("2024-04", False),
    ("20244", False),
    ("", False),
    (None, False),
])
def test_periodo_valido(periodo, esperado):
    assert periodo_valido(periodo) is esperado


@pytest.mark.parametrize("size,esperado", [
    (0, "0 Bytes"),
    (512, "512 Bytes"),
    (1536, "1.5 KB"),
    (1048576, "1 MB"),
    (104857600, "100 MB"),
    (-2048, "-2 KB"),
])
def test_format_bytes(size, esperado):
    assert format_bytes(size) == esperado
