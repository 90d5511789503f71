"""
Configuración central de pytest y fixtures compartidas.

Proporciona:
- Base SQLite en memoria compartida entre el test y la app
- Cliente HTTP con get_db sobrescrito
- Usuarios de prueba (superadmin y contador) con su token
- Empresa de prueba y constructor de XML UBL
"""
import os

# Debe configurarse antes de importar la app
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "clave-de-pruebas"
os.environ["ALERT_SCHEDULER_ENABLED"] = "false"
os.environ["SUPERADMIN_EMAIL"] = "admin@contador.pe"
os.environ["SUPERADMIN_PASSWORD"] = "admin123"
for _var in ("ANTHROPIC_API_KEY", "AWS_ACCESS_KEY_ID", "AWS_SECRET_ACCESS_KEY", "OPENAI_API_KEY",
             "AI_PROVIDER", "AI_MODEL", "SMTP_HOST", "SMTP_FROM_EMAIL"):
    os.environ[_var] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import contador.models  # noqa: F401
from contador.core.config import Roles
from contador.core.security import create_access_token
from contador.crud.company import create_company
from contador.crud.usuario import create_usuario, get_usuario_by_email
from contador.db.base import Base
from contador.db.init_db import create_default_roles_and_admin
from contador.db.session import get_db
from contador.main import app
from contador.services.ai_provider import invalidate_ai_config_cache

RUC_EMPRESA = "20131312955"
RUC_PROVEEDOR = "20100070970"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# ==================== FIXTURES GLOBALES ====================

@pytest.fixture(autouse=True)
def _reset_ai_cache():
    invalidate_ai_config_cache()
    yield
    invalidate_ai_config_cache()


@pytest.fixture
def db():
    """Sesión sobre una base recién creada; se descarta al terminar el test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    create_default_roles_and_admin(session)

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    """Cliente HTTP para pruebas de endpoints (sin lifespan)."""
    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def superadmin(db):
    return get_usuario_by_email(db, "admin@contador.pe")


@pytest.fixture
def contador_user(db):
    return create_usuario(db, "contador@estudio.pe", "secreto123", "Contador Test", Roles.CONTADOR)


@pytest.fixture
def otro_user(db):
    return create_usuario(db, "otro@estudio.pe", "secreto123", "Otro Contador", Roles.CONTADOR)


def _auth(usuario):
    return {"Authorization": f"Bearer {create_access_token(subject=str(usuario.id))}"}


@pytest.fixture
def superadmin_headers(superadmin):
    return _auth(superadmin)


@pytest.fixture
def auth_headers(contador_user):
    return _auth(contador_user)


@pytest.fixture
def otro_headers(otro_user):
    return _auth(otro_user)


@pytest.fixture
def company(db, contador_user):
    return create_company(
        db,
        {"ruc": RUC_EMPRESA, "razon_social": "MI EMPRESA SAC", "regimen": "RG"},
        contador_user,
    )


# ==================== XML DE PRUEBA ====================

UBL_NS = (
    'xmlns:cac="urn:oasis:names:specification:ubl:schema:xsd:CommonAggregateComponents-2" '
    'xmlns:cbc="urn:oasis:names:specification:ubl:schema:xsd:CommonBasicComponents-2" '
    'xmlns:ext="urn:oasis:names:specification:ubl:schema:xsd:CommonExtensionComponents-2" '
    'xmlns:ds="http://www.w3.org/2000/09/xmldsig#"'
)

ROOT_NS = {
    "Invoice": "urn:oasis:names:specification:ubl:schema:xsd:Invoice-2",
    "CreditNote": "urn:oasis:names:specification:ubl:schema:xsd:CreditNote-2",
    "DebitNote": "urn:oasis:names:specification:ubl:schema:xsd:DebitNote-2",
}

LINE_TAGS = {
    "Invoice": ("InvoiceLine", "InvoicedQuantity"),
    "CreditNote": ("CreditNoteLine", "CreditedQuantity"),
    "DebitNote": ("DebitNoteLine", "DebitedQuantity"),
}


def build_ubl_xml(
    kind="Invoice",
    doc_id="F001-123",
    ruc_emisor=RUC_PROVEEDOR,
    emisor="PROVEEDOR SA",
    cliente_doc=RUC_EMPRESA,
    cliente_tipo="6",
    cliente="MI EMPRESA SAC",
    fecha="2024-03-15",
    base="100.00",
    igv="18.00",
    total="118.00",
    tipo_codigo="01",
    notas=("SON: CIENTO DIECIOCHO CON 00/100 SOLES", "Entrega en almacén central"),
    digest="aGFzaC1kZS1wcnVlYmE=",
):
    """Comprobante UBL 2.1 mínimo con una línea, IGV y firma."""
    line_tag, qty_tag = LINE_TAGS[kind]
    type_code = f"<cbc:InvoiceTypeCode listID=\"0101\">{tipo_codigo}</cbc:InvoiceTypeCode>" if kind == "Invoice" else ""
    monetary = "RequestedMonetaryTotal" if kind == "DebitNote" else "LegalMonetaryTotal"
    notes = "".join(
        f'<cbc:Note languageLocaleID="1000">{n}</cbc:Note>' if n.startswith("SON") else f"<cbc:Note>{n}</cbc:Note>"
        for n in notas
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<{kind} xmlns="{ROOT_NS[kind]}" {UBL_NS}>
  <ext:UBLExtensions><ext:UBLExtension><ext:ExtensionContent>
    <ds:Signature Id="SignSUNAT"><ds:SignedInfo>
      <ds:Reference URI=""><ds:DigestValue>{digest}</ds:DigestValue></ds:Reference>
    </ds:SignedInfo></ds:Signature>
  </ext:ExtensionContent></ext:UBLExtension></ext:UBLExtensions>
  <cbc:UBLVersionID>2.1</cbc:UBLVersionID>
  <cbc:ID>{doc_id}</cbc:ID>
  <cbc:IssueDate>{fecha}</cbc:IssueDate>
  {type_code}
  {notes}
  <cbc:DocumentCurrencyCode>PEN</cbc:DocumentCurrencyCode>
  <cac:AccountingSupplierParty><cac:Party>
    <cac:PartyIdentification><cbc:ID schemeID="6">{ruc_emisor}</cbc:ID></cac:PartyIdentification>
    <cac:PartyLegalEntity>
      <cbc:RegistrationName>{emisor}</cbc:RegistrationName>
      <cac:RegistrationAddress><cac:AddressLine><cbc:Line>AV. LARCO 123, MIRAFLORES</cbc:Line></cac:AddressLine></cac:RegistrationAddress>
    </cac:PartyLegalEntity>
  </cac:Party></cac:AccountingSupplierParty>
  <cac:AccountingCustomerParty><cac:Party>
    <cac:PartyIdentification><cbc:ID schemeID="{cliente_tipo}">{cliente_doc}</cbc:ID></cac:PartyIdentification>
    <cac:PartyLegalEntity><cbc:RegistrationName>{cliente}</cbc:RegistrationName></cac:PartyLegalEntity>
  </cac:Party></cac:AccountingCustomerParty>
  <cac:TaxTotal>
    <cbc:TaxAmount currencyID="PEN">{igv}</cbc:TaxAmount>
    <cac:TaxSubtotal>
      <cbc:TaxableAmount currencyID="PEN">{base}</cbc:TaxableAmount>
      <cbc:TaxAmount currencyID="PEN">{igv}</cbc:TaxAmount>
      <cac:TaxCategory><cac:TaxScheme><cbc:ID>1000</cbc:ID><cbc:Name>IGV</cbc:Name></cac:TaxScheme></cac:TaxCategory>
    </cac:TaxSubtotal>
  </cac:TaxTotal>
  <cac:{monetary}>
    <cbc:LineExtensionAmount currencyID="PEN">{base}</cbc:LineExtensionAmount>
    <cbc:PayableAmount currencyID="PEN">{total}</cbc:PayableAmount>
  </cac:{monetary}>
  <cac:{line_tag}>
    <cbc:ID>1</cbc:ID>
    <cbc:{qty_tag} unitCode="NIU">2</cbc:{qty_tag}>
    <cbc:LineExtensionAmount currencyID="PEN">{base}</cbc:LineExtensionAmount>
    <cac:TaxTotal><cbc:TaxAmount currencyID="PEN">{igv}</cbc:TaxAmount></cac:TaxTotal>
    <cac:Item>
      <cbc:Description>TONER HP 85A</cbc:Description>
      <cac:SellersItemIdentification><cbc:ID>TON-85A</cbc:ID></cac:SellersItemIdentification>
    </cac:Item>
    <cac:Price><cbc:PriceAmount currencyID="PEN">50.00</cbc:PriceAmount></cac:Price>
  </cac:{line_tag}>
</{kind}>"""


@pytest.fixture
def ubl_xml():
    """Constructor de comprobantes UBL para los tests."""
    return build_ubl_xml


# ==================== CONFIGURACIÓN DE PYTEST ====================

def pytest_configure(config):
    """Marcadores personalizados para categorizar tests."""
    config.addinivalue_line(
        "markers",
        "integration: pruebas que pasan por la API y la base de datos"
    )
    config.addinivalue_line(
        "markers",
        "unit: pruebas unitarias (pueden usar mocks)"
    )
