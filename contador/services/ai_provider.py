# contador/services/ai_provider.py
"""
Proveedor de IA configurable: Anthropic directo, AWS Bedrock u OpenAI.

La configuración se lee de system_settings (categoría AI) con un cache de
60 segundos en memoria del proceso. Si no hay credenciales en BD se usan
las variables de entorno.
"""
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import anthropic
import openai
from sqlalchemy.orm import Session

from contador.core.config import settings
from contador.crud.system_setting import get_settings_by_category, get_setting, upsert_setting
from contador.models.ai_usage_log import AIUsageLog
from contador.models.system_setting import SettingCategory
from contador.utils.encryption import decrypt

logger = logging.getLogger(__name__)

PROVIDERS = ("anthropic", "bedrock", "openai")

DEFAULT_PROVIDER = "anthropic"
DEFAULT_MODEL = "claude-3-5-sonnet-20241022"

# Clave del JSON escrito por el panel de administración
AI_CONFIG_KEY = "ai_config"
AI_USAGE_KEY = "ai_usage"

CONFIG_CACHE_TTL = 60  # segundos

# Modelos disponibles por proveedor
AVAILABLE_MODELS: Dict[str, List[Dict[str, str]]] = {
    "anthropic": [
        {"id": "claude-3-5-sonnet-20241022", "name": "Claude 3.5 Sonnet", "description": "Mejor balance rendimiento/costo"},
        {"id": "claude-3-haiku-20240307", "name": "Claude 3 Haiku", "description": "Más rápido y económico"},
        {"id": "claude-3-opus-20240229", "name": "Claude 3 Opus", "description": "Más potente"},
    ],
    "bedrock": [
        {"id": "anthropic.claude-3-5-sonnet-20241022-v2:0", "name": "Claude 3.5 Sonnet v2 (Bedrock)", "description": "Claude en AWS"},
        {"id": "anthropic.claude-3-sonnet-20240229-v1:0", "name": "Claude 3 Sonnet (Bedrock)", "description": "Balance rendimiento/costo"},
        {"id": "anthropic.claude-3-haiku-20240307-v1:0", "name": "Claude 3 Haiku (Bedrock)", "description": "Rápido y económico"},
    ],
    "openai": [
        {"id": "gpt-4-turbo-preview", "name": "GPT-4 Turbo", "description": "Modelo más avanzado de OpenAI"},
        {"id": "gpt-4", "name": "GPT-4", "description": "Modelo estable"},
        {"id": "gpt-3.5-turbo", "name": "GPT-3.5 Turbo", "description": "Económico y rápido"},
    ],
}

# Nombres cortos que guarda el panel -> id real por proveedor
MODEL_ALIASES: Dict[str, Dict[str, str]] = {
    "anthropic": {
        "claude-3-haiku": "claude-3-haiku-20240307",
        "claude-3-5-sonnet": "claude-3-5-sonnet-20241022",
        "claude-3-opus": "claude-3-opus-20240229",
    },
    "bedrock": {
        "claude-3-haiku": "anthropic.claude-3-haiku-20240307-v1:0",
        "claude-3-sonnet": "anthropic.claude-3-sonnet-20240229-v1:0",
        "claude-3-5-sonnet": "anthropic.claude-3-5-sonnet-20241022-v2:0",
    },
}


class AIProviderError(Exception):
    """Error de configuración o de llamada al proveedor de IA"""


@dataclass
class AIConfig:
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    api_key: str = ""
    aws_region: str = ""
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    openai_api_key: str = ""
    openai_org_id: str = ""


@dataclass
class AIResponse:
    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str


# Cache de configuración para evitar consultas repetidas a BD
_cached_config: Optional[AIConfig] = None
_config_cache_time: float = 0.0


def invalidate_ai_config_cache() -> None:
    global _cached_config, _config_cache_time
    _cached_config = None
    _config_cache_time = 0.0


def resolve_model(provider: str, model: str) -> str:
    return MODEL_ALIASES.get(provider, {}).get(model, model)


def _read_value(setting) -> str:
    if setting.is_encrypted:
        return decrypt(setting.value)
    return setting.value or ""


def get_ai_config(db: Session) -> AIConfig:
    """
    Configuración efectiva de IA.

    Prioridad: claves sueltas de system_settings, luego el JSON 'ai_config'
    del panel, luego variables de entorno, luego valores por defecto.
    """
    global _cached_config, _config_cache_time

    now = time.monotonic()
    if _cached_config is not None and (now - _config_cache_time) < CONFIG_CACHE_TTL:
        return _cached_config

    values: Dict[str, str] = {}
    panel: Dict[str, Any] = {}
    for setting in get_settings_by_category(db, SettingCategory.AI):
        if setting.key == AI_CONFIG_KEY:
            try:
                panel = json.loads(setting.value or "{}")
            except ValueError:
                logger.error("El JSON de ai_config está corrupto, se ignora")
            continue
        values[setting.key] = _read_value(setting)

    provider = values.get("ai_provider") or panel.get("provider") or settings.ai_provider or DEFAULT_PROVIDER
    if provider not in PROVIDERS:
        logger.warning(f"Proveedor de IA desconocido '{provider}', se usa {DEFAULT_PROVIDER}")
        provider = DEFAULT_PROVIDER

    model = values.get("ai_model") or panel.get("model") or settings.ai_model or DEFAULT_MODEL

    config = AIConfig(
        provider=provider,
        model=resolve_model(provider, model),
        api_key=values.get("anthropic_api_key") or settings.anthropic_api_key,
        aws_region=values.get("aws_region") or panel.get("awsRegion") or settings.aws_region,
        aws_access_key_id=(
            values.get("aws_access_key_id")
            or decrypt(panel.get("awsAccessKeyIdEncrypted"))
            or settings.aws_access_key_id
        ),
        aws_secret_access_key=(
            values.get("aws_secret_access_key")
            or decrypt(panel.get("awsSecretAccessKeyEncrypted"))
            or settings.aws_secret_access_key
        ),
        openai_api_key=(
            values.get("openai_api_key")
            or decrypt(panel.get("openaiApiKeyEncrypted"))
            or settings.openai_api_key
        ),
        openai_org_id=values.get("openai_org_id", ""),
    )

    _cached_config = config
    _config_cache_time = now
    return config


# ==================== Clientes por proveedor ====================

def _call_anthropic_direct(config: AIConfig, system_prompt: str, messages: List[Dict[str, str]], max_tokens: int) -> AIResponse:
    if not config.api_key:
        raise AIProviderError("API key de Anthropic no configurada")

    client = anthropic.Anthropic(api_key=config.api_key)
    response = client.messages.create(
        model=config.model,
        max_tokens=max_tokens,
        system=system_prompt,
        messages=[{"role": m["role"], "content": m["content"]} for m in messages],
    )
    return AIResponse(
        content=_first_text(response.content),
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
        model=config.model,
        provider="anthropic",
    )


def _call_aws_bedrock(config: AIConfig, system_prompt: str, messages: List[Dict[str, str]], max_tokens: int) -> AIResponse:
    if not config.aws_access_key_id or not config.aws_secret_access_key:
        raise AIProviderError("Credenciales de AWS no configuradas")

    client = anthropic.AnthropicBedrock(
        aws_access_key=config.aws_access_key_id,
        aws_secret_key=config.aws_secret_access_key,
        aws_region=config.aws_region or "us-east-1",
    )
    response = client.messages.create(
        model=config.model,
        max_tokens=max_tokens,
        system=system_prompt,
        messages=[{"role": m["role"], "content": m["content"]} for m in messages],
    )
    return AIResponse(
        content=_first_text(response.content),
        input_tokens=response.usage.input_tokens,
        output_tokens=response.usage.output_tokens,
        model=config.model,
        provider="bedrock",
    )


def _call_openai(config: AIConfig, system_prompt: str, messages: List[Dict[str, str]], max_tokens: int) -> AIResponse:
    if not config.openai_api_key:
        raise AIProviderError("API key de OpenAI no configurada")

    client = openai.OpenAI(api_key=config.openai_api_key, organization=config.openai_org_id or None)
    response = client.chat.completions.create(
        model=config.model,
        max_tokens=max_tokens,
        messages=[{"role": "system", "content": system_prompt}]
        + [{"role": m["role"], "content": m["content"]} for m in messages],
    )
    usage = response.usage
    return AIResponse(
        content=response.choices[0].message.content or "",
        input_tokens=usage.prompt_tokens if usage else 0,
        output_tokens=usage.completion_tokens if usage else 0,
        model=config.model,
        provider="openai",
    )


def _first_text(blocks) -> str:
    for block in blocks or []:
        if getattr(block, "type", None) == "text":
            return block.text
    return ""


_DISPATCH = {
    "anthropic": _call_anthropic_direct,
    "bedrock": _call_aws_bedrock,
    "openai": _call_openai,
}


# ==================== Métricas ====================

def _log_usage(
    db: Session,
    config: AIConfig,
    usuario_id: Optional[int],
    company_id: Optional[int],
    prompt_type: str,
    response: Optional[AIResponse],
    elapsed_ms: int,
    error: Optional[str],
) -> None:
    input_tokens = response.input_tokens if response else 0
    output_tokens = response.output_tokens if response else 0
    logger.info(
        f"IA provider={config.provider} model={config.model} tipo={prompt_type} "
        f"tokens={input_tokens}+{output_tokens} ms={elapsed_ms} ok={error is None}"
    )
    if usuario_id is None:
        return

    try:
        db.add(AIUsageLog(
            usuario_id=usuario_id,
            company_id=company_id,
            provider=config.provider,
            model=config.model,
            prompt_type=prompt_type,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
            response_time_ms=elapsed_ms,
            success=error is None,
            error_message=error,
        ))
        if response is not None:
            _increment_usage_counter(db, input_tokens + output_tokens)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"No se pudo registrar el uso de IA: {e}")


def _increment_usage_counter(db: Session, tokens: int) -> None:
    setting = get_setting(db, AI_USAGE_KEY)
    usage = {"totalRequests": 0, "totalTokens": 0, "lastUsed": None}
    if setting and setting.value:
        try:
            usage.update(json.loads(setting.value))
        except ValueError:
            logger.warning("Contador de uso de IA inválido, se reinicia")
    usage["totalRequests"] += 1
    usage["totalTokens"] += tokens
    usage["lastUsed"] = datetime.now(timezone.utc).isoformat()
    upsert_setting(db, AI_USAGE_KEY, json.dumps(usage), SettingCategory.AI, commit=False)


# ==================== API pública ====================

def call_ai(
    db: Session,
    system_prompt: str,
    messages: List[Dict[str, str]],
    max_tokens: int = 4096,
    usuario_id: Optional[int] = None,
    company_id: Optional[int] = None,
    prompt_type: str = "general",
) -> AIResponse:
    """
    Llama al proveedor configurado.

    Raises:
        AIProviderError: credenciales faltantes o error del proveedor
    """
    config = get_ai_config(db)
    start = time.monotonic()
    try:
        response = _DISPATCH[config.provider](config, system_prompt, messages, max_tokens)
    except Exception as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        _log_usage(db, config, usuario_id, company_id, prompt_type, None, elapsed_ms, str(e))
        if isinstance(e, AIProviderError):
            raise
        raise AIProviderError(f"Error del proveedor {config.provider}: {e}") from e

    elapsed_ms = int((time.monotonic() - start) * 1000)
    _log_usage(db, config, usuario_id, company_id, prompt_type, response, elapsed_ms, None)
    return response


def get_provider_info(db: Session) -> Dict[str, Any]:
    """Configuración actual sin secretos"""
    config = get_ai_config(db)
    return {
        "provider": config.provider,
        "model": config.model,
        "has_api_key": bool(config.api_key),
        "has_aws_credentials": bool(config.aws_access_key_id and config.aws_secret_access_key),
        "has_openai_key": bool(config.openai_api_key),
    }
