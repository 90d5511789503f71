# contador/services/smtp_config_service.py
"""
Configuración SMTP administrable y prueba de conexión.
"""
import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from contador.crud.system_setting import get_settings_by_category, get_setting, upsert_setting
from contador.models.system_setting import SettingCategory
from contador.services.email_service import EmailConfig, EmailService, open_smtp_connection
from contador.utils.encryption import decrypt, is_placeholder, PLACEHOLDER
from contador.utils.templates import render_template

logger = logging.getLogger(__name__)

SMTP_SETTINGS_KEYS = [
    "smtp_enabled",
    "smtp_host",
    "smtp_port",
    "smtp_user",
    "smtp_password",
    "smtp_from_email",
    "smtp_from_name",
    "smtp_secure",
]

BOOL_KEYS = ("smtp_enabled", "smtp_secure")
DEFAULT_PORT = 587
TEST_TIMEOUT = 20

# (subcadenas del error, sugerencia). Se evalúan en orden.
SUGGESTIONS = [
    (
        ("Timeout", "ETIMEDOUT", "timed out"),
        "El servidor SMTP no responde. Posibles causas: 1) El puerto 465 puede estar bloqueado por "
        "firewall - prueba con puerto 587. 2) El servidor no permite conexiones externas. 3) Verifica "
        "que el host sea correcto. Si estás en un hosting compartido, intenta usar servicios como "
        "Gmail (smtp.gmail.com:587) o SendGrid.",
    ),
    (
        ("ECONNREFUSED", "Connection refused"),
        "Conexión rechazada. El servidor está activo pero no acepta conexiones en este puerto. "
        "Prueba: 1) Puerto 587 en lugar de 465. 2) Verifica que el servidor permita conexiones SMTP externas.",
    ),
    (
        ("ENOTFOUND", "getaddrinfo", "Name or service not known"),
        "No se encontró el servidor. Verifica que el nombre del host sea correcto "
        "(ej: smtp.gmail.com, mail.tudominio.com).",
    ),
    (
        ("auth", "535", "Authentication", "Invalid login"),
        "Error de autenticación. Para Gmail: usa una \"Contraseña de aplicación\", no tu contraseña "
        "normal. Para otros servidores: verifica usuario y contraseña.",
    ),
    (
        ("certificate", "SSL", "TLS", "self signed"),
        "Error de certificado SSL/TLS. El servidor puede tener un certificado autofirmado. Si es tu "
        "propio servidor, esto es normal y debería funcionar.",
    ),
    (
        ("ECONNRESET", "Connection reset"),
        "La conexión fue reiniciada por el servidor. Prueba con un puerto diferente "
        "(587 en lugar de 465 o viceversa).",
    ),
]


class SMTPConfigError(ValueError):
    """Configuración SMTP incompleta para probar o guardar"""


def smtp_suggestion(message: str) -> str:
    """Sugerencia de solución según el texto del error; '' si no se reconoce."""
    for needles, suggestion in SUGGESTIONS:
        if any(n in message for n in needles):
            return suggestion
    return ""


def get_stored_smtp_config(db: Session) -> Dict[str, Any]:
    """Configuración guardada, con la contraseña descifrada (uso interno)."""
    config: Dict[str, Any] = {}
    for setting in get_settings_by_category(db, SettingCategory.EMAIL):
        if setting.key not in SMTP_SETTINGS_KEYS:
            continue
        if setting.key == "smtp_password":
            config[setting.key] = decrypt(setting.value) if setting.is_encrypted else (setting.value or "")
        elif setting.key in BOOL_KEYS:
            config[setting.key] = setting.value == "true"
        elif setting.key == "smtp_port":
            try:
                config[setting.key] = int(setting.value or DEFAULT_PORT)
            except ValueError:
                config[setting.key] = DEFAULT_PORT
        else:
            config[setting.key] = setting.value or ""
    return config


def get_public_smtp_config(db: Session) -> Dict[str, Any]:
    """Configuración para el panel; la contraseña nunca sale en claro."""
    stored = get_stored_smtp_config(db)
    has_password = bool(stored.get("smtp_password"))
    return {
        "smtp_enabled": stored.get("smtp_enabled", False),
        "smtp_host": stored.get("smtp_host", ""),
        "smtp_port": stored.get("smtp_port", DEFAULT_PORT),
        "smtp_user": stored.get("smtp_user", ""),
        "smtp_password": PLACEHOLDER if has_password else "",
        "smtp_from_email": stored.get("smtp_from_email", ""),
        "smtp_from_name": stored.get("smtp_from_name", ""),
        "smtp_secure": stored.get("smtp_secure", True),
        "has_password": has_password,
    }


def save_smtp_config(db: Session, data: Dict[str, Any]) -> None:
    """
    Guarda cada clave. La contraseña solo se reemplaza si viene un valor
    nuevo (no vacío y no '********').

    Raises:
        SMTPConfigError: SMTP habilitado sin host, puerto o email de origen
    """
    if data.get("smtp_enabled"):
        if not data.get("smtp_host") or not data.get("smtp_port") or not data.get("smtp_from_email"):
            raise SMTPConfigError("Host, puerto y email de origen son requeridos")

    plain_values = {
        "smtp_enabled": str(bool(data.get("smtp_enabled", False))).lower(),
        "smtp_host": data.get("smtp_host") or "",
        "smtp_port": str(data.get("smtp_port") or DEFAULT_PORT),
        "smtp_user": data.get("smtp_user") or "",
        "smtp_from_email": data.get("smtp_from_email") or "",
        "smtp_from_name": data.get("smtp_from_name") or "",
        "smtp_secure": str(bool(data.get("smtp_secure", True))).lower(),
    }
    for key, value in plain_values.items():
        upsert_setting(
            db, key, value, SettingCategory.EMAIL,
            description=f"Configuración SMTP: {key}", commit=False
        )

    password = data.get("smtp_password")
    if password and not is_placeholder(password):
        upsert_setting(
            db, "smtp_password", password, SettingCategory.EMAIL, is_encrypted=True,
            description="Configuración SMTP: smtp_password", commit=False
        )

    db.commit()
    logger.info("Configuración SMTP guardada")


def _resolve_test_config(db: Session, data: Dict[str, Any]) -> EmailConfig:
    if data.get("smtp_host") and data.get("smtp_port"):
        # Datos del formulario (probar sin guardar)
        password = data.get("smtp_password") or ""
        if not password or is_placeholder(password):
            saved = get_setting(db, "smtp_password")
            password = decrypt(saved.value) if saved and saved.is_encrypted else ""
        config = {
            "smtp_host": data["smtp_host"],
            "smtp_port": data["smtp_port"],
            "smtp_user": data.get("smtp_user") or "",
            "smtp_password": password,
            "smtp_from_email": data.get("smtp_from_email") or "",
            "smtp_from_name": data.get("smtp_from_name") or "",
        }
    else:
        config = get_stored_smtp_config(db)

    if not config.get("smtp_host") or not config.get("smtp_port"):
        raise SMTPConfigError("Configuración SMTP incompleta. Completa host y puerto.")
    if not config.get("smtp_from_email"):
        raise SMTPConfigError("Email de origen es requerido")

    return EmailConfig(
        smtp_host=config["smtp_host"],
        smtp_port=int(config["smtp_port"]),
        smtp_user=config.get("smtp_user", ""),
        smtp_password=config.get("smtp_password", ""),
        from_email=config["smtp_from_email"],
        from_name=config.get("smtp_from_name", ""),
        timeout=TEST_TIMEOUT,
    )


def probar_conexion_smtp(db: Session, data: Dict[str, Any], test_email: Optional[str] = None) -> Dict[str, Any]:
    """
    Verifica conexión y login (NOOP). Con test_email además envía un correo.

    Raises:
        SMTPConfigError: faltan datos
        Exception: cualquier error de conexión o SMTP (el router agrega la sugerencia)
    """
    config = _resolve_test_config(db, data)
    logger.info(f"Probando SMTP {config.smtp_host}:{config.smtp_port} ssl={config.use_ssl} user={config.smtp_user}")

    server = open_smtp_connection(config)
    try:
        server.noop()
    finally:
        server.quit()

    if not test_email:
        return {"success": True, "message": "Conexión SMTP verificada correctamente"}

    service = EmailService(config)
    service.max_retries = 1
    result = service.send_email(
        to_email=test_email,
        subject="Prueba de configuración SMTP - Contador Virtual",
        body_html=render_template("emails/smtp_test.html", app_name="Contador Virtual"),
    )
    if not result.get("success"):
        raise RuntimeError(result.get("error") or "No se pudo enviar el email de prueba")

    return {"success": True, "message": f"Conexión exitosa. Email de prueba enviado a {test_email}"}
