from fastapi import FastAPI
from contador.api.v1 import api_router
from contador.core.lifespan import lifespan
from contador.utils.cors import setup_cors


def create_app() -> FastAPI:
    """
    Factory que crea y configura la aplicación FastAPI.
    """
    app = FastAPI(
        title="Contador Virtual",
        version="1.0.0",
        description="Backend contable multiempresa: comprobantes SUNAT, asistente IA, alertas e inventarios",
        lifespan=lifespan,
        contact={
            "name": "Equipo Backend",
            "email": "soporte@contador.pe",
        },
        license_info={
            "name": "MIT",
        },
    )

    # --- Configuración CORS ---
    setup_cors(app)

    # --- Rutas centralizadas ---
    app.include_router(api_router)

    return app


app = create_app()
