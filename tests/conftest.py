"""Shared fixtures for modular exponentiation tests."""

from __future__ import annotations

import pytest
import structlog
from fastapi.testclient import TestClient

from app import create_app
from config import Settings
from models import InputState


@pytest.fixture(autouse=True)
def _reset_structlog():
    # setup_logging binds the current sys.stderr, which pytest's capture
    # closes after each test; reset so later tests don't log to a closed file.
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        input_limit_bits=24,
        default_a="3",
        default_n="100",
        default_m="23",
        log_level="warning",
    )


@pytest.fixture
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings=settings))


@pytest.fixture
def sample_state() -> InputState:
    """The worked example: 2^23 mod 100."""
    return InputState(a="2", n="23", m="100")
