"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from listing_alerts.config import get_settings
from listing_alerts.infrastructure.database import engine, initialize_database
from listing_alerts.infrastructure.push import PushDispatcher, build_push_dispatcher
from listing_alerts.interfaces.api.routes import register_routes


def create_app(*, push_dispatcher: PushDispatcher | None = None) -> FastAPI:
    """Crea y configura la aplicación principal de FastAPI.

    ``push_dispatcher`` replaces the Firebase-backed dispatcher built at
    startup, which lets callers inject another transport.
    """

    settings = get_settings()
    logging.getLogger("listing_alerts").setLevel(settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Inicializa la base de datos y el despachador push al arrancar."""

        initialize_database()
        app.state.push_dispatcher = push_dispatcher or build_push_dispatcher(settings)
        yield
        engine.dispose()

    app = FastAPI(title="Listing Alerts API", lifespan=lifespan)

    # Autoriza peticiones desde los clientes configurados.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app
