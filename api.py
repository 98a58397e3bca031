"""FastAPI endpoints for tracing fast modular exponentiation.

Routes
------
GET    /modexp            Trace a^n mod m from query parameters a, n, m
POST   /modexp            Trace a^n mod m from a JSON body
GET    /modexp/defaults   Default inputs used for missing query parameters
GET    /health            Liveness check with the active input limit
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from config import Settings
from log import get_logger
from models import CalculationResult, CalculationStep, InputError, InputState, ParsedInputs
from modexp import calculate, validate_and_parse
from urlstate import read_query, write_query

logger = get_logger(__name__)

router = APIRouter(prefix="/modexp", tags=["modexp"])
health_router = APIRouter(tags=["health"])

# The settings instance is injected by the app factory (see app.py).
_settings: Settings | None = None


def set_settings(settings: Settings) -> None:
    """Inject the settings instance. Called once at app startup."""
    global _settings
    _settings = settings


def get_settings() -> Settings:
    assert _settings is not None, "Settings not initialized"
    return _settings


# ---------------------------------------------------------------------------
# Response helpers
# ---------------------------------------------------------------------------

class ModExpResponse(BaseModel):
    inputs: ParsedInputs
    bits: list[int]
    steps: list[CalculationStep]
    binary_str: str
    bit_count: int
    result: int
    share_query: str


class HealthResponse(BaseModel):
    status: str
    input_limit: int


def _validation_error(error: InputError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"kind": error.kind.value, "message": error.message},
    )


def _trace(state: InputState) -> ModExpResponse:
    settings = get_settings()
    outcome = validate_and_parse(
        state.a, state.n, state.m, limit=settings.input_limit
    )
    if outcome.error is not None:
        logger.info(
            "modexp_rejected",
            kind=outcome.error.kind.value,
            message=outcome.error.message,
        )
        raise _validation_error(outcome.error)

    p = outcome.parsed
    result: CalculationResult = calculate(p.a, p.n, p.m)
    logger.info(
        "modexp_calculated",
        a=p.a, n=p.n, m=p.m,
        steps=result.bit_count,
        result=result.result,
    )
    return ModExpResponse(
        inputs=p,
        bits=list(result.bits),
        steps=list(result.steps),
        binary_str=result.binary_str,
        bit_count=result.bit_count,
        result=result.result,
        share_query=write_query(state, defaults=settings.defaults),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("", response_model=ModExpResponse)
def trace_from_query(request: Request) -> ModExpResponse:
    """Trace using query parameters; missing or blank ones use the defaults."""
    state = read_query(request.query_params, defaults=get_settings().defaults)
    return _trace(state)


@router.post("", response_model=ModExpResponse)
def trace_from_body(payload: InputState) -> ModExpResponse:
    """Trace using raw strings from the request body (no defaults applied)."""
    return _trace(payload)


@router.get("/defaults", response_model=InputState)
def get_defaults() -> InputState:
    """Return the inputs used when the query string omits them."""
    return get_settings().defaults


@health_router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", input_limit=get_settings().input_limit)
