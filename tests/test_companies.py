# tests/test_companies.py
import pytest

from contador.models.company import CompanyMember, MemberRole


@pytest.mark.integration
class TestCompanies:

    def test_crear_empresa_owner_es_miembro(self, client, db, auth_headers, contador_user):
        r = client.post(
            "/api/v1/companies",
            json={"ruc": "20131312955", "razon_social": "MI EMPRESA SAC"},
            headers=auth_headers,
        )
        assert r.status_code == 201
        data = r.json()
        assert data["owner_id"] == contador_user.id

        member = db.query(CompanyMember).filter(CompanyMember.company_id == data["id"]).one()
        assert member.usuario_id == contador_user.id
        assert member.rol == MemberRole.OWNER

    def test_ruc_invalido(self, client, auth_headers):
        r = client.post(
            "/api/v1/companies",
            json={"ruc": "20131312954", "razon_social": "X"},
            headers=auth_headers,
        )
        assert r.status_code == 400
        assert r.json()["detail"] == "RUC inválido"

    def test_ruc_duplicado(self, client, auth_headers, company):
        r = client.post(
            "/api/v1/companies",
            json={"ruc": company.ruc, "razon_social": "OTRA"},
            headers=auth_headers,
        )
        assert r.status_code == 400
        assert r.json()["detail"] == "El RUC ya está registrado en el sistema"

    def test_listado_solo_empresas_propias(self, client, company, auth_headers, otro_headers, superadmin_headers):
        assert [c["id"] for c in client.get("/api/v1/companies", headers=auth_headers).json()] == [company.id]
        assert client.get("/api/v1/companies", headers=otro_headers).json() == []
        assert len(client.get("/api/v1/companies", headers=superadmin_headers).json()) == 1

    def test_empresa_ajena_devuelve_404(self, client, company, otro_headers):
        r = client.get(f"/api/v1/companies/{company.id}", headers=otro_headers)
        assert r.status_code == 404
        assert r.json()["detail"] == "Empresa no encontrada"

    def test_detalle(self, client, company, auth_headers):
        r = client.get(f"/api/v1/companies/{company.id}", headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["ruc"] == company.ruc


@pytest.mark.integration
@pytest.mark.filterwarnings("error::DeprecationWarning:contador")
def test_storage_empresa(client, company, auth_headers, ubl_xml):
    client.post(
        "/api/v1/import/xml",
        files={"file": ("F001-1.xml", ubl_xml(doc_id="F001-1").encode("utf-8"), "text/xml")},
        data={"company_id": str(company.id)},
        headers=auth_headers,
    )
    r = client.get(f"/api/v1/companies/{company.id}/storage", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    # Sin XML firmado ni CDR guardados, solo cuentan logo y certificado
    assert data["usage"]["generated_files"] == 0
    assert data["usage"]["total"] == 0
    assert data["limit"] == 100 * 1024 * 1024
    assert data["formatted"]["limit"] == "100 MB"
    assert data["percentage"] == 0
