import io
import zipfile

from sunat_xml.utils.archive import detect_file_type, extract_xmls_from_zip


def _zip(entries):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def test_detect_zip():
    assert detect_file_type(_zip({"a.xml": "<Invoice/>"})) == "zip"


def test_detect_xml_con_bom_y_espacios():
    assert detect_file_type("\ufeff  <?xml version='1.0'?><Invoice/>".encode("utf-8")) == "xml"


def test_detect_unknown():
    assert detect_file_type(b"%PDF-1.4 contenido") == "unknown"
    assert detect_file_type(b"") == "unknown"


def test_extract_solo_comprobantes(ubl_xml):
    data = _zip({
        "F001-1.xml": ubl_xml(doc_id="F001-1"),
        "R-F001-1.xml": "<ApplicationResponse/>",
        "leeme.txt": "Invoice",
        "carpeta/F001-2.XML": ubl_xml(doc_id="F001-2"),
    })
    xmls = extract_xmls_from_zip(data)
    assert len(xmls) == 2
    assert all("Invoice" in x for x in xmls)


def test_zip_corrupto():
    assert extract_xmls_from_zip(b"PK\x03\x04basura") == []
