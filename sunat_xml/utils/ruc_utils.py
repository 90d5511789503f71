"""
Utilidades para documentos de identidad peruanos (RUC y DNI).
"""
from typing import Optional

# Pesos del módulo 11 de SUNAT para los 10 primeros dígitos
PESOS_RUC = [5, 4, 3, 2, 7, 6, 5, 4, 3, 2]

# Catálogo 06 SUNAT
TIPO_DOC_DNI = "1"
TIPO_DOC_RUC = "6"


def calcular_digito_verificador_ruc(base: str) -> Optional[int]:
    """
    Calcula el dígito verificador a partir de los 10 primeros dígitos.

    Example:
        >>> calcular_digito_verificador_ruc("2013131295")
        5
    """
    if not base or len(base) != 10 or not base.isdigit():
        return None

    suma = sum(int(d) * p for d, p in zip(base, PESOS_RUC))
    dv = 11 - (suma % 11)
    if dv == 10:
        return 0
    if dv == 11:
        return 1
    return dv


def es_ruc_valido(ruc: str) -> bool:
    """11 dígitos con dígito verificador correcto."""
    if not ruc:
        return False
    ruc = ruc.strip()
    if len(ruc) != 11 or not ruc.isdigit():
        return False
    return calcular_digito_verificador_ruc(ruc[:10]) == int(ruc[10])


def es_dni_valido(dni: str) -> bool:
    if not dni:
        return False
    dni = dni.strip()
    return len(dni) == 8 and dni.isdigit()
