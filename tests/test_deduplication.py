from sunat_xml import parse_invoice_xml
from sunat_xml.utils.deduplication import deduplicate_parsed, make_comprobante_key


def test_deduplicate_parsed(ubl_xml):
    a = parse_invoice_xml(ubl_xml(doc_id="F001-1"))
    a_bis = parse_invoice_xml(ubl_xml(doc_id="F001-1", total="999.00"))
    b = parse_invoice_xml(ubl_xml(doc_id="F001-2"))

    unicos, descartados = deduplicate_parsed([a, a_bis, b])

    assert descartados == 1
    assert [p.numero for p in unicos] == ["1", "2"]
    # Se conserva la primera ocurrencia
    assert str(unicos[0].total) == "118.00"


def test_key_distingue_tipo_documento(ubl_xml):
    factura = parse_invoice_xml(ubl_xml(doc_id="F001-1"))
    nota = parse_invoice_xml(ubl_xml(kind="CreditNote", doc_id="F001-1"))
    assert make_comprobante_key(factura) != make_comprobante_key(nota)
