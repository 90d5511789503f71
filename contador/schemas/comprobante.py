# contador/schemas/comprobante.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal


class ComprobanteItemResponse(BaseModel):
    numero_linea: int
    cantidad: Decimal
    unidad_medida: str
    descripcion: str
    codigo_producto: Optional[str] = None
    precio_unitario: Decimal
    valor_venta: Decimal
    igv: Decimal
    total: Decimal

    class Config:
        from_attributes = True


class ComprobanteResponse(BaseModel):
    id: int
    company_id: int
    tipo: str
    tipo_documento: str
    serie: str
    numero: str
    fecha_emision: date
    fecha_vencimiento: Optional[date] = None
    periodo: str
    ruc_emisor: str
    razon_social_emisor: Optional[str] = None
    tipo_doc_tercero: Optional[str] = None
    ruc_tercero: Optional[str] = None
    razon_social_tercero: Optional[str] = None
    moneda: str
    base_imponible: Decimal
    igv: Decimal
    total: Decimal
    es_gravada: bool
    afecta_igv: bool
    es_exportacion: bool
    estado: str
    creado_en: Optional[datetime] = None

    class Config:
        from_attributes = True


class ComprobanteDetalle(ComprobanteResponse):
    direccion_emisor: Optional[str] = None
    tipo_doc_receptor: Optional[str] = None
    numero_doc_receptor: Optional[str] = None
    razon_social_receptor: Optional[str] = None
    observaciones: Optional[str] = None
    hash_resumen: Optional[str] = None
    items: List[ComprobanteItemResponse] = []


class ResumenPeriodo(BaseModel):
    periodo: str
    total_ventas: float
    igv_ventas: float
    ventas_gravadas: float
    ventas_no_gravadas: float
    exportaciones: float
    total_compras: float
    igv_compras: float
    compras_gravadas: float
    compras_no_gravadas: float
