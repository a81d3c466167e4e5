"""Top-level pytest configuration for conduit."""

import logging

import pytest
import pytest_asyncio

from conduit.di import Container
from conduit.logging.logger import ROOT_LOGGER_NAME
from conduit.mediator import CancellationTokenSource

pytest_plugins = [
    "pytest_asyncio",
]


@pytest.fixture(autouse=True)
def _clean_conduit_env(monkeypatch):
    """Keep settings tests independent of the developer's environment."""
    for name in (
        "CONDUIT_MEDIATOR_PUBLISH_STRATEGY",
        "CONDUIT_MEDIATOR_HANDLER_LIFETIME",
        "CONDUIT_LOGGING_LEVEL",
        "CONDUIT_LOGGING_JSON_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def _restore_conduit_logger():
    """Undo handlers installed by configure_logging()."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    level, propagate = root.level, root.propagate
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)
    root.propagate = propagate


@pytest_asyncio.fixture
async def container():
    c = Container()
    yield c
    await c.dispose()


@pytest.fixture
def token_source():
    return CancellationTokenSource()
