# contador/services/ai_config_service.py
"""
Configuración de IA editable desde el panel de administración.

Se guarda como un JSON en la clave 'ai_config' de system_settings.
Las credenciales se guardan cifradas y nunca se devuelven.
"""
import json
import logging
from typing import Any, Dict

from sqlalchemy.orm import Session

from contador.crud.system_setting import get_setting, upsert_setting
from contador.models.system_setting import SettingCategory
from contador.services.ai_provider import AI_CONFIG_KEY, AI_USAGE_KEY, invalidate_ai_config_cache
from contador.utils.encryption import encrypt, is_placeholder

logger = logging.getLogger(__name__)

DESCRIPCION = "Configuración del asistente de IA"

DEFAULT_FEATURES = {
    "chatAssistant": True,
    "autoClassification": False,
    "smartSuggestions": False,
    "ocrExtraction": False,
    "anomalyDetection": False,
    "financialSummary": False,
}

DEFAULT_AI_CONFIG = {
    "provider": "bedrock",
    "hasAwsCredentials": False,
    "hasOpenaiKey": False,
    "awsRegion": "us-east-1",
    "model": "claude-3-haiku",
    "maxTokens": 2000,
    "temperature": 0.7,
    "enabledFeatures": DEFAULT_FEATURES,
}


def _load(db: Session) -> Dict[str, Any]:
    setting = get_setting(db, AI_CONFIG_KEY)
    if not setting or not setting.value:
        return {}
    try:
        return json.loads(setting.value)
    except ValueError:
        logger.error("JSON de ai_config inválido, se reinicia")
        return {}


def _save(db: Session, data: Dict[str, Any]) -> None:
    upsert_setting(db, AI_CONFIG_KEY, json.dumps(data), SettingCategory.AI, description=DESCRIPCION)


def get_admin_config(db: Session) -> Dict[str, Any]:
    """Configuración para el panel; crea la de por defecto si no existe."""
    if get_setting(db, AI_CONFIG_KEY) is None:
        _save(db, dict(DEFAULT_AI_CONFIG))
        logger.info("Configuración de IA por defecto creada")

    data = _load(db)

    usage_setting = get_setting(db, AI_USAGE_KEY)
    usage = {"totalRequests": 0, "totalTokens": 0, "lastUsed": None}
    if usage_setting and usage_setting.value:
        try:
            usage = json.loads(usage_setting.value)
        except ValueError:
            logger.warning("Contador de uso de IA inválido, se muestra en cero")

    return {
        "provider": data.get("provider") or "bedrock",
        # Nunca devolver las credenciales reales
        "aws_access_key_id": "",
        "aws_secret_access_key": "",
        "aws_region": data.get("awsRegion") or "us-east-1",
        "has_aws_credentials": bool(data.get("hasAwsCredentials")),
        "openai_api_key": "",
        "has_openai_key": bool(data.get("hasOpenaiKey")),
        "model": data.get("model") or "claude-3-haiku",
        "max_tokens": data.get("maxTokens") or 2000,
        "temperature": data.get("temperature") if data.get("temperature") is not None else 0.7,
        "enabled_features": data.get("enabledFeatures") or dict(DEFAULT_FEATURES),
        "usage": usage,
    }


def update_admin_config(db: Session, changes: Dict[str, Any]) -> None:
    """
    Aplica solo los campos presentes en `changes`.

    Credenciales:
        - valor nuevo no vacío: se cifra y reemplaza
        - cadena vacía: se elimina
        - '********' (o solo asteriscos): se conserva lo guardado
    """
    data = _load(db)

    if "provider" in changes:
        data["provider"] = changes["provider"]

    if "aws_access_key_id" in changes and "aws_secret_access_key" in changes:
        key_id = (changes["aws_access_key_id"] or "").strip()
        secret = (changes["aws_secret_access_key"] or "").strip()
        if is_placeholder(key_id) or is_placeholder(secret):
            pass
        elif key_id and secret:
            data["awsAccessKeyIdEncrypted"] = encrypt(key_id)
            data["awsSecretAccessKeyEncrypted"] = encrypt(secret)
            data["hasAwsCredentials"] = True
        else:
            data.pop("awsAccessKeyIdEncrypted", None)
            data.pop("awsSecretAccessKeyEncrypted", None)
            data["hasAwsCredentials"] = False

    if "aws_region" in changes:
        data["awsRegion"] = changes["aws_region"]

    if "openai_api_key" in changes:
        openai_key = (changes["openai_api_key"] or "").strip()
        if is_placeholder(openai_key):
            pass
        elif openai_key:
            data["openaiApiKeyEncrypted"] = encrypt(openai_key)
            data["hasOpenaiKey"] = True
        else:
            data.pop("openaiApiKeyEncrypted", None)
            data["hasOpenaiKey"] = False

    for field, key in (("model", "model"), ("max_tokens", "maxTokens"),
                       ("temperature", "temperature"), ("enabled_features", "enabledFeatures")):
        if field in changes:
            data[key] = changes[field]

    _save(db, data)
    invalidate_ai_config_cache()
    logger.info(f"Configuración de IA actualizada: {sorted(changes.keys())}")
