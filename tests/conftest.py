import pytest

from pico_limit.config import LimiterSettings
from pico_limit.limiter import Limiter
from pico_limit.registry import LimiterRegistry


@pytest.fixture
def limiter_settings():
    """Settings with a small default ceiling and one per-name override."""
    return LimiterSettings(default_concurrency=3, limits={"db": 2})


@pytest.fixture
def registry(limiter_settings):
    """Create a LimiterRegistry backed by ``limiter_settings``."""
    return LimiterRegistry(limiter_settings)


@pytest.fixture
def serial_limiter():
    """A limiter that runs one item at a time."""
    return Limiter(1, name="serial")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove pico-limit variables from the environment."""
    monkeypatch.delenv("PICO_LIMIT_MAX_CONCURRENCY", raising=False)
    monkeypatch.delenv("PICO_LIMIT_LIMITS", raising=False)
    return monkeypatch
