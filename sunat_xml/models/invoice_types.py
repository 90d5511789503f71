"""
Tipos y estructuras de datos para comprobantes electrónicos SUNAT.
"""
from dataclasses import dataclass, field, asdict
from decimal import Decimal
from typing import Optional, Dict, Any, List


# Código SUNAT (catálogo 01) -> nombre interno
TIPO_DOC_MAP: Dict[str, str] = {
    '01': 'FACTURA',
    '03': 'BOLETA',
    '07': 'NOTA_CREDITO',
    '08': 'NOTA_DEBITO',
}


@dataclass
class ParsedItem:
    """Una línea del comprobante (InvoiceLine / CreditNoteLine / DebitNoteLine)"""
    cantidad: Decimal
    unidad: str
    descripcion: str
    precio_unitario: Decimal
    valor_venta: Decimal
    igv: Decimal
    total: Decimal
    codigo_producto: Optional[str] = None


@dataclass
class ParsedInvoice:
    """Registro plano resultante de decodificar un comprobante UBL 2.1"""
    # Emisor
    ruc: str
    razon_social_emisor: str
    tipo_documento: str
    serie: str
    numero: str
    fecha_emision: str
    moneda: str
    # Receptor
    tipo_doc_tercero: str
    numero_doc_tercero: str
    razon_social_tercero: str
    # Montos
    base_imponible: Decimal = Decimal("0.00")
    igv: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    # Opcionales
    direccion_emisor: Optional[str] = None
    direccion_tercero: Optional[str] = None
    fecha_vencimiento: Optional[str] = None
    observaciones: Optional[str] = None
    hash_cpe: Optional[str] = None
    items: List[ParsedItem] = field(default_factory=list)

    @property
    def nombre_tipo_documento(self) -> str:
        return TIPO_DOC_MAP.get(self.tipo_documento, 'DESCONOCIDO')

    @property
    def numero_completo(self) -> str:
        return f"{self.serie}-{self.numero}"

    def to_dict(self) -> Dict[str, Any]:
        """Serializa a dict con montos como float (apto para JSON)."""
        data = asdict(self)
        for key in ("base_imponible", "igv", "total"):
            data[key] = float(data[key])
        data["items"] = [
            {k: (float(v) if isinstance(v, Decimal) else v) for k, v in item.items()}
            for item in data["items"]
        ]
        return data
