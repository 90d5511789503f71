# contador/services/alert_matcher.py
"""
Reglas puras de coincidencia entre una configuración de alerta y una
licitación. No tocan la base de datos.
"""
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence


def coincide_region(regiones: Sequence[str], region: Optional[str]) -> bool:
    """El filtro solo aplica si hay regiones configuradas y la licitación tiene región."""
    if not regiones or not region:
        return True
    return region in regiones


def coincide_entidad(entidades: Sequence[str], entidad: str, sigla: Optional[str] = None) -> bool:
    if not entidades:
        return True
    entidad_l = (entidad or "").lower()
    sigla_l = (sigla or "").lower()
    for e in entidades:
        buscado = e.lower()
        if buscado in entidad_l or (sigla_l and buscado in sigla_l):
            return True
    return False


def coincide_monto(
    monto_minimo: Optional[Decimal],
    monto_maximo: Optional[Decimal],
    valor: Optional[Decimal],
) -> bool:
    # Cada límite solo se evalúa si existe el límite y el valor referencial
    if monto_minimo and valor and Decimal(valor) < Decimal(monto_minimo):
        return False
    if monto_maximo and valor and Decimal(valor) > Decimal(monto_maximo):
        return False
    return True


def coincide_palabras_clave(palabras: Sequence[str], objeto: str, nomenclatura: str) -> bool:
    if not palabras:
        return True
    texto = f"{objeto or ''} {nomenclatura or ''}".lower()
    return any(p.lower() in texto for p in palabras)


def coincide_licitacion(config, licitacion, con_monto: bool = True) -> bool:
    """Aplica todos los filtros de un AlertConfig sobre una ScrapedLicitacion."""
    if not coincide_region(config.regiones or [], licitacion.region):
        return False
    if not coincide_entidad(config.entidades or [], licitacion.entidad, licitacion.sigla_entidad):
        return False
    if con_monto and not coincide_monto(config.monto_minimo, config.monto_maximo, licitacion.valor_referencial):
        return False
    return coincide_palabras_clave(
        config.palabras_clave or [], licitacion.objeto_contratacion, licitacion.nomenclatura
    )


def dias_restantes(fecha_fin: date, hoy: date) -> int:
    return (fecha_fin - hoy).days


def dias_configurados(dias_anticipacion) -> Iterable[int]:
    # Configs antiguas guardaban un entero
    if isinstance(dias_anticipacion, (list, tuple)):
        return [int(d) for d in dias_anticipacion]
    if dias_anticipacion is None:
        return []
    return [int(dias_anticipacion)]


def etiqueta_dias(dias: int) -> str:
    if dias == 0:
        return "HOY"
    if dias == 1:
        return "MAÑANA"
    return f"en {dias} días"


def titulo_alerta(nomenclatura: str, etapa: str, dias: int) -> str:
    if dias == 0:
        return f"🚨 {nomenclatura} - {etapa} vence HOY"
    if dias == 1:
        return f"⚠️ {nomenclatura} - {etapa} vence MAÑANA"
    return f"⏰ {nomenclatura} - {etapa} vence en {dias} días"


def clasificar_urgencia(dias: int) -> str:
    """'urgentes' (<= 1 día), 'proximas' (2-3) u 'otras'."""
    if dias <= 1:
        return "urgentes"
    if dias <= 3:
        return "proximas"
    return "otras"
