"""
Tests del panel de configuración de IA y del selector de proveedor.
"""
import json

import pytest

from contador.crud.system_setting import get_setting, upsert_setting
from contador.models.ai_usage_log import AIUsageLog
from contador.models.system_setting import SettingCategory
from contador.services import ai_provider
from contador.services.ai_config_service import get_admin_config, update_admin_config
from contador.services.ai_provider import (
    AI_CONFIG_KEY, AIProviderError, AIResponse, call_ai, get_ai_config, get_provider_info, resolve_model
)
from contador.utils.encryption import decrypt, encrypt, is_placeholder


def _panel(db):
    return json.loads(get_setting(db, AI_CONFIG_KEY).value)


@pytest.mark.unit
class TestCredenciales:

    def test_placeholder(self):
        assert is_placeholder("********") is True
        assert is_placeholder("***") is True
        assert is_placeholder("") is False
        assert is_placeholder("sk-***") is False

    def test_cifrado_ida_y_vuelta(self):
        token = encrypt("sk-secreto")
        assert token != "sk-secreto"
        assert decrypt(token) == "sk-secreto"

    def test_token_invalido_devuelve_vacio(self):
        assert decrypt("no-es-fernet") == ""
        assert decrypt(None) == ""


@pytest.mark.integration
class TestAdminConfig:

    def test_crea_configuracion_por_defecto(self, db):
        config = get_admin_config(db)
        assert config["provider"] == "bedrock"
        assert config["has_aws_credentials"] is False
        assert config["aws_secret_access_key"] == ""

    def test_guarda_credenciales_cifradas(self, db):
        get_admin_config(db)
        update_admin_config(db, {"aws_access_key_id": "AKIA123", "aws_secret_access_key": "secreto"})
        panel = _panel(db)
        assert panel["hasAwsCredentials"] is True
        assert "secreto" not in json.dumps(panel)
        assert decrypt(panel["awsSecretAccessKeyEncrypted"]) == "secreto"

    def test_placeholder_conserva_credenciales(self, db):
        get_admin_config(db)
        update_admin_config(db, {"openai_api_key": "sk-real"})
        guardado = _panel(db)["openaiApiKeyEncrypted"]

        update_admin_config(db, {"openai_api_key": "********", "model": "gpt-4"})

        panel = _panel(db)
        assert panel["openaiApiKeyEncrypted"] == guardado
        assert panel["model"] == "gpt-4"

    def test_cadena_vacia_elimina_credencial(self, db):
        get_admin_config(db)
        update_admin_config(db, {"openai_api_key": "sk-real"})
        update_admin_config(db, {"openai_api_key": ""})
        panel = _panel(db)
        assert "openaiApiKeyEncrypted" not in panel
        assert panel["hasOpenaiKey"] is False

    def test_aws_solo_con_ambas_claves(self, db):
        get_admin_config(db)
        update_admin_config(db, {"aws_access_key_id": "AKIA123"})
        assert _panel(db).get("hasAwsCredentials") is not True


@pytest.mark.integration
class TestProveedor:

    def test_alias_de_modelo(self):
        assert resolve_model("bedrock", "claude-3-haiku") == "anthropic.claude-3-haiku-20240307-v1:0"
        assert resolve_model("openai", "gpt-4") == "gpt-4"

    def test_valores_por_defecto(self, db):
        config = get_ai_config(db)
        assert config.provider == "anthropic"
        assert config.model == "claude-3-5-sonnet-20241022"

    def test_claves_sueltas_tienen_prioridad(self, db):
        upsert_setting(db, "ai_provider", "openai", SettingCategory.AI)
        upsert_setting(db, "openai_api_key", "sk-x", SettingCategory.AI, is_encrypted=True)
        config = get_ai_config(db)
        assert config.provider == "openai"
        assert config.openai_api_key == "sk-x"

    def test_info_sin_secretos(self, db):
        upsert_setting(db, "anthropic_api_key", "sk-ant", SettingCategory.AI, is_encrypted=True)
        info = get_provider_info(db)
        assert info["has_api_key"] is True
        assert "sk-ant" not in json.dumps(info)

    def test_sin_credenciales_lanza_error(self, db, contador_user):
        with pytest.raises(AIProviderError):
            call_ai(db, "system", [{"role": "user", "content": "hola"}], usuario_id=contador_user.id)
        log = db.query(AIUsageLog).one()
        assert log.success is False
        assert log.error_message

    @pytest.mark.filterwarnings("error::DeprecationWarning:contador")
    def test_llamada_exitosa_registra_uso(self, db, contador_user, monkeypatch):
        def _fake(config, system_prompt, messages, max_tokens):
            return AIResponse(content="OK", input_tokens=10, output_tokens=2, model=config.model, provider="anthropic")

        monkeypatch.setitem(ai_provider._DISPATCH, "anthropic", _fake)
        response = call_ai(db, "system", [{"role": "user", "content": "hola"}], usuario_id=contador_user.id)

        assert response.content == "OK"
        log = db.query(AIUsageLog).one()
        assert log.success is True
        assert log.total_tokens == 12

    def test_sin_usuario_no_escribe_log(self, db, monkeypatch):
        monkeypatch.setitem(
            ai_provider._DISPATCH, "anthropic",
            lambda config, s, m, t: AIResponse("OK", 1, 1, config.model, "anthropic"),
        )
        call_ai(db, "system", [{"role": "user", "content": "hola"}])
        assert db.query(AIUsageLog).count() == 0


@pytest.mark.integration
class TestEndpoints:

    def test_requiere_superadmin(self, client, auth_headers):
        r = client.get("/api/v1/admin/ai-config", headers=auth_headers)
        assert r.status_code == 403

    def test_get_y_put(self, client, superadmin_headers):
        r = client.get("/api/v1/admin/ai-config", headers=superadmin_headers)
        assert r.status_code == 200

        r = client.put(
            "/api/v1/admin/ai-config",
            json={"provider": "openai", "openai_api_key": "sk-nueva", "model": "gpt-4"},
            headers=superadmin_headers,
        )
        assert r.status_code == 200
        body = r.json()
        assert body["provider"] == "openai"
        assert body["has_openai_key"] is True
        assert body["openai_api_key"] == ""

    def test_modelos(self, client, superadmin_headers):
        r = client.get("/api/v1/admin/ai-config/models", headers=superadmin_headers)
        assert set(r.json()["models"]) == {"anthropic", "bedrock", "openai"}

    def test_prueba_sin_credenciales_502(self, client, superadmin_headers):
        r = client.post("/api/v1/admin/ai-config/test", headers=superadmin_headers)
        assert r.status_code == 502

    def test_chat(self, client, auth_headers, company, monkeypatch):
        capturado = {}

        def _fake(config, system_prompt, messages, max_tokens):
            capturado["system"] = system_prompt
            capturado["messages"] = messages
            return AIResponse("El IGV es 18%.", 5, 5, config.model, "anthropic")

        monkeypatch.setitem(ai_provider._DISPATCH, "anthropic", _fake)
        r = client.post(
            "/api/v1/ai/chat",
            json={
                "message": "¿Cuál es la tasa del IGV?",
                "history": [{"role": "user", "content": "Hola"}, {"role": "assistant", "content": "Hola"}],
                "company_id": company.id,
            },
            headers=auth_headers,
        )
        assert r.status_code == 200
        assert r.json()["reply"] == "El IGV es 18%."
        assert company.ruc in capturado["system"]
        assert capturado["messages"][-1]["content"] == "¿Cuál es la tasa del IGV?"
        assert len(capturado["messages"]) == 3

    def test_chat_sin_credenciales_502(self, client, auth_headers):
        r = client.post("/api/v1/ai/chat", json={"message": "hola"}, headers=auth_headers)
        assert r.status_code == 502
