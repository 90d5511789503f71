from contador.api.v1.routers import api_router

__all__ = ["api_router"]
