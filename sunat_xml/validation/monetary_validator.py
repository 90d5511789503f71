"""
Validador de consistencia de montos del comprobante.

Solo VALIDA: base imponible + IGV debe aproximar el total a pagar.
Nunca modifica los valores extraídos del XML.
"""
from decimal import Decimal
from typing import Dict, Any, Optional

from sunat_xml.utils.logger import logger
from sunat_xml.core.config import parser_settings
from sunat_xml.models.invoice_types import ParsedInvoice


class MonetaryConsistencyValidator:
    """
    Ecuación: BASE_IMPONIBLE + IGV = TOTAL

    Los comprobantes con operaciones inafectas o exoneradas no cuadran con
    esta ecuación. El resultado es informativo.
    """

    TOLERANCE = Decimal(parser_settings.tolerancia_totales)

    @staticmethod
    def validate(
        base_imponible: Optional[Decimal],
        igv: Optional[Decimal],
        total: Optional[Decimal],
        tolerance: Optional[Decimal] = None
    ) -> Dict[str, Any]:
        """
        Returns:
            {
                'es_valido': bool,
                'mensaje': str,
                'datos_completos': bool,
                'diferencia': Decimal
            }
        """
        if base_imponible is None or igv is None or total is None:
            return {
                'es_valido': False,
                'mensaje': 'Datos monetarios incompletos para validación',
                'datos_completos': False
            }

        limite = tolerance if tolerance is not None else MonetaryConsistencyValidator.TOLERANCE
        calculado = base_imponible + igv
        diferencia = abs(calculado - total)

        if diferencia <= limite:
            return {
                'es_valido': True,
                'mensaje': 'Consistencia de montos correcta',
                'datos_completos': True,
                'diferencia': diferencia
            }
        return {
            'es_valido': False,
            'mensaje': f'Inconsistencia de montos: calculado {calculado} vs reportado {total}',
            'datos_completos': True,
            'diferencia': diferencia,
            'calculado': calculado,
            'reportado': total
        }

    @staticmethod
    def log_validation(result: Dict[str, Any], documento_id: str = "DESCONOCIDO") -> None:
        if result.get('es_valido'):
            logger.info(f"[{documento_id}] Validación OK - Diferencia: {result.get('diferencia')}")
        elif not result.get('datos_completos'):
            logger.warning(f"[{documento_id}] Validación incompleta - {result.get('mensaje')}")
        else:
            logger.error(f"[{documento_id}] Inconsistencia detectada - {result.get('mensaje')}")


def check_consistency(parsed: ParsedInvoice, tolerance: Optional[Decimal] = None) -> Dict[str, Any]:
    """Valida base + IGV ≈ total. Sin tolerance se usa SUNAT_XML_TOLERANCIA."""
    result = MonetaryConsistencyValidator.validate(
        parsed.base_imponible, parsed.igv, parsed.total, tolerance
    )
    MonetaryConsistencyValidator.log_validation(result, parsed.numero_completo)
    return result
