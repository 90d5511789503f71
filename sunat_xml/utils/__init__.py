# sunat_xml/utils/__init__.py
# archive y deduplication se importan directamente (dependen de core y models)
from sunat_xml.utils.logger import logger, get_logger
from sunat_xml.utils.ruc_utils import es_ruc_valido, es_dni_valido, calcular_digito_verificador_ruc

__all__ = [
    'logger',
    'get_logger',
    'es_ruc_valido',
    'es_dni_valido',
    'calcular_digito_verificador_ruc',
]
