"""
Tests de configuración SMTP, prueba de conexión y servicio de email.
"""
from unittest.mock import MagicMock

import pytest

from contador.crud.system_setting import get_setting
from contador.services.email_service import EmailConfig, EmailService
from contador.services.smtp_config_service import (
    get_public_smtp_config, get_stored_smtp_config, save_smtp_config, smtp_suggestion
)

CONFIG_VALIDA = {
    "smtp_enabled": True,
    "smtp_host": "smtp.gmail.com",
    "smtp_port": 587,
    "smtp_user": "avisos@contador.pe",
    "smtp_password": "clave-app",
    "smtp_from_email": "avisos@contador.pe",
    "smtp_from_name": "Contador Virtual",
    "smtp_secure": True,
}


@pytest.fixture
def fake_smtp(monkeypatch):
    server = MagicMock()
    factory = MagicMock(return_value=server)
    monkeypatch.setattr("contador.services.email_service.smtplib.SMTP", factory)
    return server


@pytest.mark.unit
class TestSugerencias:

    def test_conexion_rechazada(self):
        assert smtp_suggestion("[Errno 111] Connection refused").startswith("Conexión rechazada")

    def test_timeout(self):
        assert "no responde" in smtp_suggestion("timed out")

    def test_autenticacion(self):
        assert "autenticación" in smtp_suggestion("(535, b'5.7.8 Username and Password not accepted')")

    def test_error_desconocido(self):
        assert smtp_suggestion("algo raro") == ""


@pytest.mark.integration
class TestConfiguracion:

    def test_password_cifrado_y_enmascarado(self, db):
        save_smtp_config(db, dict(CONFIG_VALIDA))

        assert get_setting(db, "smtp_password").value != "clave-app"
        assert get_stored_smtp_config(db)["smtp_password"] == "clave-app"

        public = get_public_smtp_config(db)
        assert public["smtp_password"] == "********"
        assert public["has_password"] is True
        assert public["smtp_port"] == 587
        assert public["smtp_enabled"] is True

    def test_placeholder_conserva_password(self, db):
        save_smtp_config(db, dict(CONFIG_VALIDA))
        save_smtp_config(db, {**CONFIG_VALIDA, "smtp_password": "********", "smtp_host": "mail.contador.pe"})
        stored = get_stored_smtp_config(db)
        assert stored["smtp_password"] == "clave-app"
        assert stored["smtp_host"] == "mail.contador.pe"

    def test_put_habilitado_sin_host(self, client, superadmin_headers):
        r = client.put(
            "/api/v1/admin/smtp",
            json={**CONFIG_VALIDA, "smtp_host": ""},
            headers=superadmin_headers,
        )
        assert r.status_code == 400
        assert r.json()["detail"] == "Host, puerto y email de origen son requeridos"

    def test_put_y_get(self, client, superadmin_headers):
        r = client.put("/api/v1/admin/smtp", json=CONFIG_VALIDA, headers=superadmin_headers)
        assert r.status_code == 200
        assert r.json()["smtp_password"] == "********"

        r = client.get("/api/v1/admin/smtp", headers=superadmin_headers)
        assert r.json()["smtp_host"] == "smtp.gmail.com"

    def test_requiere_superadmin(self, client, auth_headers):
        assert client.get("/api/v1/admin/smtp", headers=auth_headers).status_code == 403


@pytest.mark.integration
class TestPruebaConexion:

    def test_sin_configuracion(self, client, superadmin_headers):
        r = client.post("/api/v1/admin/smtp/test", json={}, headers=superadmin_headers)
        assert r.status_code == 400
        assert r.json()["detail"] == "Configuración SMTP incompleta. Completa host y puerto."

    def test_sin_email_origen(self, client, superadmin_headers):
        r = client.post(
            "/api/v1/admin/smtp/test",
            json={"smtp_host": "smtp.gmail.com", "smtp_port": 587},
            headers=superadmin_headers,
        )
        assert r.status_code == 400
        assert r.json()["detail"] == "Email de origen es requerido"

    def test_conexion_ok(self, client, superadmin_headers, fake_smtp):
        r = client.post("/api/v1/admin/smtp/test", json=CONFIG_VALIDA, headers=superadmin_headers)
        assert r.status_code == 200
        assert r.json()["success"] is True
        fake_smtp.login.assert_called_once_with("avisos@contador.pe", "clave-app")
        fake_smtp.noop.assert_called_once()

    def test_envia_email_de_prueba(self, client, superadmin_headers, fake_smtp):
        r = client.post(
            "/api/v1/admin/smtp/test",
            json={**CONFIG_VALIDA, "test_email": "destino@contador.pe"},
            headers=superadmin_headers,
        )
        assert r.status_code == 200
        assert "destino@contador.pe" in r.json()["message"]
        fake_smtp.sendmail.assert_called_once()

    def test_error_de_conexion_con_sugerencia(self, client, superadmin_headers, monkeypatch):
        monkeypatch.setattr(
            "contador.services.email_service.smtplib.SMTP",
            MagicMock(side_effect=ConnectionRefusedError("[Errno 111] Connection refused")),
        )
        r = client.post("/api/v1/admin/smtp/test", json=CONFIG_VALIDA, headers=superadmin_headers)
        assert r.status_code == 500
        body = r.json()
        assert body["success"] is False
        assert body["error"].startswith("Error de conexión:")
        assert body["suggestion"].startswith("Conexión rechazada")


@pytest.mark.unit
class TestEmailService:

    def test_sin_configuracion(self):
        service = EmailService(EmailConfig("", 587, "", "", "", ""))
        result = service.send_email("a@b.pe", "asunto", "<p>hola</p>")
        assert result == {"success": False, "error": "SMTP no configurado", "mode": "disabled"}

    def test_reintentos(self, monkeypatch):
        monkeypatch.setattr(
            "contador.services.email_service.smtplib.SMTP",
            MagicMock(side_effect=OSError("timed out")),
        )
        service = EmailService(EmailConfig("smtp.test", 587, "", "", "no-reply@test.pe", ""))
        service.retry_delay = 0
        result = service.send_email("a@b.pe", "asunto", "<p>hola</p>")
        assert result["success"] is False
        assert result["attempts"] == 3
        assert result["error"] == "timed out"

    def test_envio_ok(self, fake_smtp):
        service = EmailService(EmailConfig("smtp.test", 587, "", "", "no-reply@test.pe", "Contador"))
        result = service.send_email(["a@b.pe", "c@d.pe"], "asunto", "<p>hola</p>", body_text="hola")
        assert result["success"] is True
        assert result["recipients"] == ["a@b.pe", "c@d.pe"]
        fake_smtp.login.assert_not_called()
        fake_smtp.quit.assert_called_once()
