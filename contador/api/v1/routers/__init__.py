from fastapi import APIRouter

# Importa cada módulo de rutas
from contador.api.v1.routers import (
    auth,
    companies,
    comprobantes,
    import_xml,
    admin_ai_config,
    ai_chat,
    admin_smtp,
    alertas,
    terceros,
    inventario,
)

# Router principal con prefijo global
# redirect_slashes=False evita redirects 307 automáticos
api_router = APIRouter(prefix="/api/v1", redirect_slashes=False)


@api_router.get("/", tags=["Root"])
def read_root():
    return {"message": "Bienvenido a la API v1 de Contador Virtual"}


# Registro de módulos de rutas
api_router.include_router(auth.router, prefix="/auth", tags=["Auth"])
api_router.include_router(companies.router, prefix="/companies", tags=["Empresas"])
api_router.include_router(comprobantes.router, prefix="/companies", tags=["Comprobantes"])
api_router.include_router(import_xml.router, prefix="/import", tags=["Importación"])
api_router.include_router(admin_ai_config.router, prefix="/admin/ai-config", tags=["Admin IA"])
api_router.include_router(ai_chat.router, prefix="/ai", tags=["Asistente IA"])
api_router.include_router(admin_smtp.router, prefix="/admin/smtp", tags=["Admin SMTP"])
api_router.include_router(alertas.router, tags=["Alertas"])
api_router.include_router(terceros.router, prefix="/terceros", tags=["Terceros"])
api_router.include_router(inventario.router, prefix="/inventario", tags=["Inventario"])
