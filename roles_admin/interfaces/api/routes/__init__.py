from fastapi import FastAPI

from .roles import router as roles_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(roles_router)
