# tests/test_auth.py
import pytest


def test_openapi(client):
    r = client.get("/openapi.json")
    assert r.status_code == 200


def test_root(client):
    r = client.get("/api/v1/")
    assert r.status_code == 200
    assert "Contador Virtual" in r.json()["message"]


@pytest.mark.integration
class TestLogin:

    def test_login_superadmin(self, client, superadmin):
        r = client.post("/api/v1/auth/login", json={"email": "admin@contador.pe", "password": "admin123"})
        assert r.status_code == 200
        data = r.json()
        assert data["token_type"] == "bearer"
        assert data["access_token"]
        assert data["user"]["rol"] == "superadmin"

    @pytest.mark.filterwarnings("error::DeprecationWarning:contador")
    def test_login_actualiza_last_login(self, client, db, contador_user):
        assert contador_user.last_login is None
        r = client.post("/api/v1/auth/login", json={"email": "contador@estudio.pe", "password": "secreto123"})
        assert r.status_code == 200
        db.refresh(contador_user)
        assert contador_user.last_login is not None

    def test_password_incorrecto(self, client, contador_user):
        r = client.post("/api/v1/auth/login", json={"email": "contador@estudio.pe", "password": "otra"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Email o contraseña incorrectos"

    def test_usuario_inactivo(self, client, db, contador_user):
        contador_user.activo = False
        db.commit()
        r = client.post("/api/v1/auth/login", json={"email": "contador@estudio.pe", "password": "secreto123"})
        assert r.status_code == 403

    def test_me(self, client, auth_headers):
        r = client.get("/api/v1/auth/me", headers=auth_headers)
        assert r.status_code == 200
        assert r.json()["email"] == "contador@estudio.pe"
        assert r.json()["rol"] == "contador"

    def test_me_sin_token(self, client):
        r = client.get("/api/v1/auth/me")
        assert r.status_code == 401

    def test_token_invalido(self, client):
        r = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer no-es-un-jwt"})
        assert r.status_code == 401
