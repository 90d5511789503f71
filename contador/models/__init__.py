from contador.db.base import Base

# Importa modelos para que se registren en Base.metadata
from .role import Role
from .usuario import Usuario
from .company import Company, CompanyMember, MemberRole
from .comprobante import Comprobante, ComprobanteItem, TipoOperacion, EstadoComprobante
from .upload_history import UploadHistory, UploadStatus
from .tercero import Tercero
from .system_setting import SystemSetting, SettingCategory
from .ai_usage_log import AIUsageLog
from .storage_usage import StorageUsage
from .alerta import (
    AlertConfig,
    ScrapedLicitacion,
    LicitacionEtapa,
    LicitacionNotificacion,
    AlertHistory,
)
from .inventario import Inventario, InventarioItem

__all__ = [
    "Base",
    "Role",
    "Usuario",
    "Company",
    "CompanyMember",
    "MemberRole",
    "Comprobante",
    "ComprobanteItem",
    "TipoOperacion",
    "EstadoComprobante",
    "UploadHistory",
    "UploadStatus",
    "Tercero",
    "SystemSetting",
    "SettingCategory",
    "AIUsageLog",
    "StorageUsage",
    "AlertConfig",
    "ScrapedLicitacion",
    "LicitacionEtapa",
    "LicitacionNotificacion",
    "AlertHistory",
    "Inventario",
    "InventarioItem",
]
