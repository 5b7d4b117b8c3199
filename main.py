from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roles_admin.config import get_settings
from roles_admin.infrastructure.database import dispose_engine, initialize_database
from roles_admin.interfaces.api.routes import register_routes
from roles_admin.interfaces.navigation import register_navigation


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the tables on startup and release pooled connections on shutdown."""

    initialize_database()
    yield
    dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the roles administration application."""

    settings = get_settings()
    app = FastAPI(title="Roles Admin API", lifespan=lifespan)

    if settings.cors_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_routes(app)
    register_navigation(app)
    return app


app = create_app()
