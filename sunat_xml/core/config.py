from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class ParserSettings(BaseSettings):
    """Configuración del decodificador de comprobantes UBL"""
    log_level: str = Field("INFO", alias="SUNAT_XML_LOG_LEVEL")
    # Límite de entradas leídas de un ZIP
    max_zip_entries: int = Field(5000, alias="SUNAT_XML_MAX_ZIP_ENTRIES")
    # Tolerancia para validar base + IGV contra el total
    tolerancia_totales: str = Field("0.05", alias="SUNAT_XML_TOLERANCIA")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


parser_settings = ParserSettings()
