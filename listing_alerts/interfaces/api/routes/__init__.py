from fastapi import FastAPI

from .admin import router as admin_router
from .listings import router as listings_router
from .notifications import router as notifications_router


def register_routes(app: FastAPI) -> None:
    """Registra todos los routers de la API en la aplicación FastAPI."""

    app.include_router(listings_router)
    app.include_router(notifications_router)
    app.include_router(admin_router)
