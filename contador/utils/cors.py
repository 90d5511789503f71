from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from contador.core.config import settings


def setup_cors(app: FastAPI) -> None:
    """
    Configura CORS a partir de BACKEND_CORS_ORIGINS (lista separada por comas).
    """
    origins = [o.strip() for o in settings.backend_cors_origins.split(",") if o.strip()]

    # En desarrollo o sin configuración se aceptan todos los orígenes
    if not origins or settings.environment == "development":
        origins = ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
        # El navegador rechaza credenciales con origen comodín
        allow_credentials=origins != ["*"],
    )
