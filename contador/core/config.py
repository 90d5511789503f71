# contador/core/config.py
from pydantic_settings import BaseSettings
from pydantic import Field


# Roles del sistema
class Roles:
    """
    Constantes para roles de usuario.

    - SUPERADMIN: Administra el sistema (IA, SMTP, alertas) y ve todas las empresas
    - ADMIN: Administra sus empresas
    - CONTADOR: Importa y consulta comprobantes de las empresas donde es miembro
    """
    SUPERADMIN = "superadmin"
    ADMIN = "admin"
    CONTADOR = "contador"


class Settings(BaseSettings):
    # --- Core ---
    environment: str = Field("development", env="ENVIRONMENT")

    # --- Seguridad / JWT ---
    secret_key: str = Field("cambiar-esta-clave-en-produccion", env="SECRET_KEY")
    algorithm: str = Field("HS256", env="ALGORITHM")
    access_token_expire_minutes: int = Field(60, env="ACCESS_TOKEN_EXPIRE_MINUTES")

    # --- Base de datos ---
    database_url: str = Field("sqlite:///./contador.db", env="DATABASE_URL")

    # --- CORS ---
    # Lista separada por comas
    backend_cors_origins: str = Field("", env="BACKEND_CORS_ORIGINS")

    # --- Superadmin inicial ---
    superadmin_email: str = Field("admin@contador.pe", env="SUPERADMIN_EMAIL")
    superadmin_password: str = Field("cambiar123", env="SUPERADMIN_PASSWORD")

    # --- SMTP (fallback cuando no hay configuración en system_settings) ---
    smtp_host: str = Field("", env="SMTP_HOST")
    smtp_port: int = Field(587, env="SMTP_PORT")
    smtp_user: str = Field("", env="SMTP_USER")
    smtp_password: str = Field("", env="SMTP_PASSWORD")
    smtp_from_email: str = Field("", env="SMTP_FROM_EMAIL")
    smtp_from_name: str = Field("Contador Virtual", env="SMTP_FROM_NAME")
    smtp_timeout: int = Field(20, env="SMTP_TIMEOUT")

    # --- Proveedores de IA (fallback de variables de entorno) ---
    anthropic_api_key: str = Field("", env="ANTHROPIC_API_KEY")
    aws_access_key_id: str = Field("", env="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: str = Field("", env="AWS_SECRET_ACCESS_KEY")
    aws_region: str = Field("us-east-1", env="AWS_REGION")
    openai_api_key: str = Field("", env="OPENAI_API_KEY")
    ai_provider: str = Field("", env="AI_PROVIDER")
    ai_model: str = Field("", env="AI_MODEL")

    # --- Consulta RUC/DNI ---
    apisperu_token: str = Field("", env="APISPERU_TOKEN")
    migo_token: str = Field("", env="MIGO_TOKEN")
    ruc_lookup_timeout: int = Field(5, env="RUC_LOOKUP_TIMEOUT")
    ruc_cache_days: int = Field(30, env="RUC_CACHE_DAYS")

    # --- Almacenamiento ---
    default_max_storage: int = Field(100 * 1024 * 1024, env="DEFAULT_MAX_STORAGE")

    # --- Alertas de licitaciones ---
    alert_scheduler_enabled: bool = Field(False, env="ALERT_SCHEDULER_ENABLED")
    alert_check_hour: int = Field(7, env="ALERT_CHECK_HOUR")
    new_licitaciones_interval_hours: int = Field(6, env="NEW_LICITACIONES_INTERVAL_HOURS")

    # --- Frontend URLs (para emails) ---
    frontend_url: str = Field("http://localhost:3000", env="FRONTEND_URL")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
