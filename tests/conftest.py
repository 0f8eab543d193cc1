"""
Pytest configuration for the datamapper test suite.

Provides:
- A loguru-to-caplog bridge so tests can assert on log output
- A fresh function registry and engine per test, isolated from the default registry
- Small sample data sets shared across pipeline tests
- A Hypothesis profile for property-based tests
"""

import contextlib
import logging
from typing import Any, Dict, List

import pytest
from hypothesis import HealthCheck, settings
from loguru import logger

from datamapper.pipeline import DataMappingEngine
from datamapper.registries import create_registry, reset_default_registry


settings.register_profile(
    "datamapper",
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("datamapper")


# ============================================================================
# LOGURU INTEGRATION
# ============================================================================

@pytest.fixture(autouse=True, scope="function")
def capture_loguru_logs_globally(caplog):
    """
    Propagate loguru records into pytest's caplog.

    The package is silent by default, so logging is enabled for the duration
    of each test and disabled again afterwards.
    """
    class PropagateHandler(logging.Handler):
        def emit(self, record):
            logging.getLogger(record.name or "datamapper").handle(record)

    caplog.set_level(logging.DEBUG)
    logger.enable("datamapper")
    handler_id = logger.add(
        PropagateHandler(),
        format="{message}",
        level="DEBUG",
        catch=True,
        enqueue=False
    )

    yield

    with contextlib.suppress(ValueError):
        logger.remove(handler_id)
    logger.disable("datamapper")


@pytest.fixture(autouse=True)
def isolated_default_registry():
    """Keep registrations made through module-level helpers from leaking between tests."""
    reset_default_registry()
    yield
    reset_default_registry()


# ============================================================================
# ENGINE FIXTURES
# ============================================================================

@pytest.fixture
def registry():
    """A fresh registry with the built-in functions."""
    return create_registry()


@pytest.fixture
def engine(registry):
    """An engine bound to the per-test registry."""
    return DataMappingEngine(registry)


@pytest.fixture
def user_rows() -> List[Dict[str, Any]]:
    """Five CSV-style user rows; the third has an invalid email."""
    return [
        {"email": " Alice@Example.com ", "name": "alice smith", "role": "Administrator", "phone": "1 (555) 123-4567"},
        {"email": "bob@example.com", "name": "BOB JONES", "role": "coach", "phone": ""},
        {"email": "not-an-email", "name": "carol white", "role": "player"},
        {"email": "dave@example.com", "name": "dave brown", "role": ""},
        {"email": "erin@example.com", "name": "erin green", "role": "guest", "team": " Tigers "},
    ]
