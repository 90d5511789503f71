# contador/schemas/inventario.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal


class InventarioItemBase(BaseModel):
    codigo_bien: str = Field(..., min_length=1)
    descripcion: str = ""
    unidad_medida: Optional[str] = None
    inventario_unidad: Decimal = Decimal("0")
    kardex_unidad: Decimal = Decimal("0")
    kardex_importe: Optional[Decimal] = None
    costo_unitario: Decimal = Decimal("0")


class InventarioItemResponse(InventarioItemBase):
    id: int
    inventario_importe: Decimal
    kardex_importe: Decimal
    sobrantes_unidad: Decimal
    sobrantes_importe: Decimal
    faltantes_unidad: Decimal
    faltantes_importe: Decimal

    class Config:
        from_attributes = True


class InventarioCreate(BaseModel):
    nombre: str = Field(..., min_length=1)
    descripcion: Optional[str] = None
    fecha_inventario: date
    codigo_economato: str = "130"
    almacen_desc: Optional[str] = None
    company_id: Optional[int] = None
    items: List[InventarioItemBase] = []


class InventarioResumen(BaseModel):
    id: int
    nombre: str
    descripcion: Optional[str] = None
    fecha_inventario: date
    codigo_economato: str
    almacen_desc: Optional[str] = None
    company_id: Optional[int] = None
    total_items: int
    total_inventario_importe: Decimal
    total_kardex_importe: Decimal
    total_sobrantes_importe: Decimal
    total_faltantes_importe: Decimal
    creado_en: Optional[datetime] = None

    class Config:
        from_attributes = True


class InventarioDetalle(InventarioResumen):
    items: List[InventarioItemResponse] = []
