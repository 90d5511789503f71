from pydantic import BaseModel, Field
from typing import Any, Optional, List, Generic, TypeVar


class ErrorResponse(BaseModel):
    detail: str


class ResponseBase(BaseModel):
    """Esquema base para respuestas de la API"""
    success: bool
    message: str
    data: Optional[Any] = None


class PaginationMetadata(BaseModel):
    total: int = Field(..., description="Total de registros")
    page: int = Field(..., description="Página actual (base 1)", ge=1)
    per_page: int = Field(..., description="Registros por página", ge=1, le=500)
    total_pages: int = Field(..., description="Total de páginas disponibles")
    has_next: bool
    has_prev: bool

    @classmethod
    def build(cls, total: int, page: int, per_page: int) -> "PaginationMetadata":
        total_pages = (total + per_page - 1) // per_page if total else 0
        return cls(
            total=total,
            page=page,
            per_page=per_page,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


T = TypeVar('T')


class PaginatedResponse(BaseModel, Generic[T]):
    data: List[T] = Field(..., description="Registros de la página actual")
    pagination: PaginationMetadata
