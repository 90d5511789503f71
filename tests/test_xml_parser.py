"""
Tests del decodificador de comprobantes UBL 2.1 (sunat_xml).
"""
from decimal import Decimal

import pytest

from sunat_xml import InvoiceParserFacade, check_consistency, parse_invoice_xml
from sunat_xml.extraction.notes_extractor import is_amount_in_words
from sunat_xml.validation.monetary_validator import MonetaryConsistencyValidator


@pytest.mark.unit
class TestFactura:

    def test_campos_de_identificacion(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml())
        assert parsed is not None
        assert parsed.tipo_documento == "01"
        assert parsed.serie == "F001"
        assert parsed.numero == "123"
        assert parsed.numero_completo == "F001-123"
        assert parsed.ruc == "20100070970"
        assert parsed.razon_social_emisor == "PROVEEDOR SA"
        assert parsed.direccion_emisor == "AV. LARCO 123, MIRAFLORES"
        assert parsed.tipo_doc_tercero == "6"
        assert parsed.numero_doc_tercero == "20131312955"
        assert parsed.fecha_emision == "2024-03-15"
        assert parsed.moneda == "PEN"

    def test_montos(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml())
        assert parsed.base_imponible == Decimal("100.00")
        assert parsed.igv == Decimal("18.00")
        assert parsed.total == Decimal("118.00")

    def test_items(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml())
        assert len(parsed.items) == 1
        item = parsed.items[0]
        assert item.descripcion == "TONER HP 85A"
        assert item.cantidad == Decimal("2")
        assert item.unidad == "NIU"
        assert item.codigo_producto == "TON-85A"
        assert item.precio_unitario == Decimal("50.00")
        assert item.total == Decimal("118.00")

    def test_observaciones_sin_monto_en_letras(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml())
        assert parsed.observaciones == "Entrega en almacén central"

    def test_nota_libre_que_empieza_con_son(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml(notas=(
            "SON: CIENTO DIECIOCHO CON 00/100 SOLES",
            "Son bienes perecibles, mantener refrigerado",
        )))
        assert parsed.observaciones == "Son bienes perecibles, mantener refrigerado"

    def test_base_imponible_ausente_usa_total_menos_igv(self, ubl_xml):
        xml = ubl_xml(total="120.00").replace(
            '<cbc:TaxableAmount currencyID="PEN">100.00</cbc:TaxableAmount>', ""
        )
        assert "TaxableAmount" not in xml
        parsed = parse_invoice_xml(xml)
        assert parsed.igv == Decimal("18.00")
        assert parsed.base_imponible == Decimal("102.00")

    def test_sin_notas_observaciones_none(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml(notas=()))
        assert parsed.observaciones is None

    def test_hash_de_la_firma(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml())
        assert parsed.hash_cpe == "aGFzaC1kZS1wcnVlYmE="

    def test_boleta_con_dni(self, ubl_xml):
        parsed = parse_invoice_xml(
            ubl_xml(doc_id="B001-9", tipo_codigo="03", cliente_tipo="1", cliente_doc="45678912", cliente="JUAN PEREZ")
        )
        assert parsed.tipo_documento == "03"
        assert parsed.tipo_doc_tercero == "1"
        assert parsed.numero_doc_tercero == "45678912"
        assert parsed.razon_social_tercero == "JUAN PEREZ"

    def test_bytes_con_bom(self, ubl_xml):
        content = b"\xef\xbb\xbf" + ubl_xml().encode("utf-8")
        parsed = parse_invoice_xml(content)
        assert parsed is not None
        assert parsed.serie == "F001"


@pytest.mark.unit
class TestNotas:

    def test_nota_credito(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml(kind="CreditNote", doc_id="FC01-7"))
        assert parsed.tipo_documento == "07"
        assert parsed.total == Decimal("118.00")
        assert len(parsed.items) == 1

    def test_nota_debito_usa_requested_monetary_total(self, ubl_xml):
        parsed = parse_invoice_xml(ubl_xml(kind="DebitNote", doc_id="FD01-3", base="10.00", igv="1.80", total="11.80"))
        assert parsed.tipo_documento == "08"
        assert parsed.total == Decimal("11.80")
        assert parsed.igv == Decimal("1.80")


@pytest.mark.unit
class TestDocumentosNoValidos:

    def test_raiz_no_reconocida(self):
        xml = '<ApplicationResponse xmlns="urn:oasis:names:specification:ubl:schema:xsd:ApplicationResponse-2"/>'
        assert parse_invoice_xml(xml) is None

    def test_contenido_vacio(self):
        assert parse_invoice_xml("") is None

    def test_xml_truncado(self, ubl_xml):
        xml = ubl_xml()
        truncado = xml[:xml.index("<cac:TaxTotal>")]
        assert parse_invoice_xml(truncado) is None
        assert parse_invoice_xml(truncado.encode("utf-8")) is None

    def test_xml_mal_formado(self, ubl_xml):
        assert parse_invoice_xml(ubl_xml().replace("</cbc:IssueDate>", "")) is None

    def test_facade_sin_cargar(self):
        facade = InvoiceParserFacade("<Otro/>").load()
        assert facade.is_loaded is False
        assert facade.extract() is None


@pytest.mark.unit
class TestMontoEnLetras:

    @pytest.mark.parametrize("texto", [
        "SON: CIENTO DIECIOCHO CON 00/100 SOLES",
        "MIL DOSCIENTOS Y 50/100 DOLARES AMERICANOS",
    ])
    def test_detecta_monto_en_letras(self, texto):
        assert is_amount_in_words(texto) is True

    def test_locale_1000(self):
        assert is_amount_in_words("cualquier texto", "1000") is True

    def test_nota_normal(self):
        assert is_amount_in_words("Entrega en almacén central") is False

    @pytest.mark.parametrize("texto", [
        "SON PRODUCTOS IMPORTADOS, ENTREGA EN 5 DIAS",
        "Son bienes perecibles, mantener refrigerado",
    ])
    def test_son_como_texto_libre(self, texto):
        assert is_amount_in_words(texto) is False

    def test_son_con_moneda_sin_centimos(self):
        assert is_amount_in_words("SON CIENTO DIECIOCHO SOLES") is True


@pytest.mark.unit
class TestConsistencia:

    def test_montos_consistentes(self, ubl_xml):
        result = check_consistency(parse_invoice_xml(ubl_xml()))
        assert result["es_valido"] is True

    def test_montos_inconsistentes(self, ubl_xml):
        result = check_consistency(parse_invoice_xml(ubl_xml(total="150.00")))
        assert result["es_valido"] is False
        assert result["datos_completos"] is True

    def test_tolerancia_por_defecto_desde_configuracion(self, ubl_xml, monkeypatch):
        monkeypatch.setattr(MonetaryConsistencyValidator, "TOLERANCE", Decimal("0.50"))
        parsed = parse_invoice_xml(ubl_xml(total="118.30"))
        assert check_consistency(parsed)["es_valido"] is True
        assert check_consistency(parsed, tolerance=Decimal("0.05"))["es_valido"] is False
