"""Application factory and entry point.

Run with:
    uvicorn app:app --reload
"""

from __future__ import annotations

from fastapi import FastAPI

from api import health_router, router, set_settings
from config import Settings, get_settings
from log import get_logger, setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts optional settings for testing; reads the environment if omitted.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings.log_level, json=settings.log_json)
    set_settings(settings)

    app = FastAPI(
        title="Fast Modular Exponentiation API",
        description=(
            "Computes a^n mod m by binary exponentiation and returns every "
            "intermediate value, one step per bit of the exponent, most "
            "significant bit first."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    app.include_router(health_router)

    get_logger(__name__).info(
        "app_created",
        input_limit=settings.input_limit,
        defaults=settings.defaults.model_dump(),
    )
    return app


# Default app instance for `uvicorn app:app`
app = create_app()
