# contador/services/ruc_service.py
"""
Consulta de RUC y DNI contra servicios públicos peruanos, con cache local
en la tabla terceros.

Orden de fuentes para RUC: apis.net.pe (v1, sin token), dniruc.apisperu.com,
api.migo.pe. Para DNI solo apis.net.pe.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

import requests
from sqlalchemy.orm import Session

from contador.core.config import settings
from contador.models.tercero import Tercero
from sunat_xml.utils.ruc_utils import TIPO_DOC_DNI, TIPO_DOC_RUC

logger = logging.getLogger(__name__)

APIS_NET_PE_URL = "https://api.apis.net.pe/v1/{tipo}?numero={numero}"
APISPERU_URL = "https://dniruc.apisperu.com/api/v1/ruc/{numero}"
MIGO_URL = "https://api.migo.pe/api/v1/ruc/{numero}"

FUENTE_CACHE = "cache"

TERCERO_FIELDS = (
    "tipo_documento", "numero_documento", "razon_social", "nombre_comercial", "direccion",
    "ubigeo", "departamento", "provincia", "distrito", "estado", "condicion",
    "es_agente_retencion", "es_buen_contribuyente", "fuente",
)


def _get_json(url: str, params: Optional[Dict[str, str]] = None, headers: Optional[Dict[str, str]] = None) -> Optional[Dict[str, Any]]:
    """GET con timeout; None ante cualquier error o respuesta no 200."""
    try:
        response = requests.get(
            url,
            params=params,
            headers={"Accept": "application/json", **(headers or {})},
            timeout=settings.ruc_lookup_timeout,
        )
        if response.status_code != 200:
            logger.info(f"Consulta {url} respondió {response.status_code}")
            return None
        return response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Error consultando {url}: {str(e)}")
        return None


def _ruc_payload(numero: str, d: Dict[str, Any], fuente: str, **overrides) -> Dict[str, Any]:
    data = {
        "tipo_documento": TIPO_DOC_RUC,
        "numero_documento": numero,
        "razon_social": d.get("razonSocial") or "",
        "nombre_comercial": d.get("nombreComercial") or None,
        "direccion": d.get("direccion") or None,
        "ubigeo": d.get("ubigeo") or None,
        "departamento": d.get("departamento") or None,
        "provincia": d.get("provincia") or None,
        "distrito": d.get("distrito") or None,
        "estado": d.get("estado") or None,
        "condicion": d.get("condicion") or None,
        "es_agente_retencion": False,
        "es_buen_contribuyente": False,
        "fuente": fuente,
    }
    data.update(overrides)
    return data


def consultar_apis_net_pe_ruc(ruc: str) -> Optional[Dict[str, Any]]:
    data = _get_json(APIS_NET_PE_URL.format(tipo="ruc", numero=ruc))
    if not data or not data.get("numeroDocumento"):
        return None
    # v1 devuelve "nombre" en lugar de "razonSocial"
    return _ruc_payload(
        ruc, data, "apis.net.pe",
        razon_social=data.get("nombre") or data.get("razonSocial") or "",
        es_agente_retencion=bool(data.get("esAgenteRetencion")),
        es_buen_contribuyente=bool(data.get("esBuenContribuyente")),
    )


def consultar_apisperu_ruc(ruc: str) -> Optional[Dict[str, Any]]:
    params = {"token": settings.apisperu_token} if settings.apisperu_token else None
    data = _get_json(APISPERU_URL.format(numero=ruc), params=params)
    if not data or not data.get("ruc"):
        return None
    return _ruc_payload(ruc, data, "apisperu.com")


def consultar_migo_ruc(ruc: str) -> Optional[Dict[str, Any]]:
    headers = {"Authorization": f"Bearer {settings.migo_token}"} if settings.migo_token else None
    data = _get_json(MIGO_URL.format(numero=ruc), headers=headers)
    # { success: true, data: {...} }
    if not data or not data.get("success") or not data.get("data"):
        return None
    d = data["data"]
    return _ruc_payload(
        ruc, {}, "migo.pe",
        razon_social=d.get("nombre_o_razon_social") or "",
        nombre_comercial=d.get("nombre_comercial") or None,
        direccion=d.get("direccion_completa") or d.get("direccion") or None,
        ubigeo=d.get("ubigeo") or None,
        departamento=d.get("departamento") or None,
        provincia=d.get("provincia") or None,
        distrito=d.get("distrito") or None,
        estado=d.get("estado") or None,
        condicion=d.get("condicion") or None,
    )


def consultar_apis_net_pe_dni(dni: str) -> Optional[Dict[str, Any]]:
    data = _get_json(APIS_NET_PE_URL.format(tipo="dni", numero=dni))
    if not data or not data.get("numeroDocumento"):
        return None
    nombre = " ".join(
        p for p in (data.get("nombres"), data.get("apellidoPaterno"), data.get("apellidoMaterno")) if p
    ).strip()
    return {
        "tipo_documento": TIPO_DOC_DNI,
        "numero_documento": dni,
        "razon_social": nombre,
        "nombre_comercial": None,
        "direccion": None,
        "fuente": "apis.net.pe",
    }


RUC_SOURCES: List[Callable[[str], Optional[Dict[str, Any]]]] = [
    consultar_apis_net_pe_ruc,
    consultar_apisperu_ruc,
    consultar_migo_ruc,
]


# -----------------------------------------------------
# Cache
# -----------------------------------------------------
def _cache_vigente(tercero: Tercero) -> bool:
    actualizado = tercero.actualizado_en or tercero.creado_en
    if actualizado is None:
        return False
    if actualizado.tzinfo is None:
        # SQLite devuelve fechas sin zona (UTC)
        actualizado = actualizado.replace(tzinfo=timezone.utc)
    return datetime.now(timezone.utc) - actualizado < timedelta(days=settings.ruc_cache_days)


def _from_cache(tercero: Tercero) -> Dict[str, Any]:
    data = {field: getattr(tercero, field) for field in TERCERO_FIELDS}
    data["fuente"] = FUENTE_CACHE
    return data


def _guardar_cache(db: Session, data: Dict[str, Any]) -> None:
    tercero = db.query(Tercero).filter(Tercero.numero_documento == data["numero_documento"]).first()
    if tercero is None:
        tercero = Tercero(numero_documento=data["numero_documento"])
        db.add(tercero)
    for field in TERCERO_FIELDS:
        if field == "numero_documento" or field not in data:
            continue
        value = data[field]
        if field in ("es_agente_retencion", "es_buen_contribuyente"):
            value = bool(value)
        setattr(tercero, field, value)
    tercero.actualizado_en = datetime.now(timezone.utc)
    try:
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Error guardando tercero {data['numero_documento']} en cache: {str(e)}")


def _buscar_cache(db: Session, numero: str) -> Optional[Dict[str, Any]]:
    cached = db.query(Tercero).filter(Tercero.numero_documento == numero).first()
    if cached and _cache_vigente(cached):
        return _from_cache(cached)
    return None


# -----------------------------------------------------
# API pública
# -----------------------------------------------------
def consultar_ruc(db: Session, ruc: str) -> Optional[Dict[str, Any]]:
    """Datos del contribuyente o None si el RUC no tiene 11 dígitos o no se encontró."""
    if not ruc or len(ruc) != 11 or not ruc.isdigit():
        return None

    cached = _buscar_cache(db, ruc)
    if cached:
        return cached

    logger.info(f"Consultando RUC {ruc}")
    data = None
    for source in RUC_SOURCES:
        data = source(ruc)
        if data:
            break
        logger.info(f"{source.__name__} sin resultado para {ruc}")

    if data:
        _guardar_cache(db, data)
    else:
        logger.info(f"RUC {ruc} no encontrado en ninguna fuente")
    return data


def consultar_dni(db: Session, dni: str) -> Optional[Dict[str, Any]]:
    if not dni or len(dni) != 8 or not dni.isdigit():
        return None

    cached = _buscar_cache(db, dni)
    if cached:
        return cached

    data = consultar_apis_net_pe_dni(dni)
    if data:
        _guardar_cache(db, data)
    return data


def consultar(db: Session, tipo_documento: str, numero: str) -> Optional[Dict[str, Any]]:
    if tipo_documento == TIPO_DOC_RUC:
        return consultar_ruc(db, numero)
    if tipo_documento == TIPO_DOC_DNI:
        return consultar_dni(db, numero)
    return None
