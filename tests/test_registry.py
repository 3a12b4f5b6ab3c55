import asyncio
import logging

import pytest

from pico_limit.config import LimiterSettings
from pico_limit.exceptions import InvalidConcurrencyError, LimiterConfigurationError
from pico_limit.limiter import Limiter
from pico_limit.registry import LimiterRegistry


class TestLimiterRegistry:
    def test_get_creates_named_limiter(self, registry):
        limiter = registry.get("api")
        assert isinstance(limiter, Limiter)
        assert limiter.name == "api"

    def test_get_returns_same_instance(self, registry):
        assert registry.get("api") is registry.get("api")

    def test_default_concurrency(self, registry):
        assert registry.get("api").concurrency == 3

    def test_named_setting(self, registry):
        assert registry.get("db").concurrency == 2

    def test_explicit_concurrency_wins(self, registry):
        assert registry.get("db", 7).concurrency == 7

    def test_same_explicit_concurrency_is_allowed(self, registry):
        first = registry.get("api", 4)
        assert registry.get("api", 4) is first

    def test_conflicting_concurrency_raises(self, registry):
        registry.get("api", 4)
        with pytest.raises(LimiterConfigurationError) as exc_info:
            registry.get("api", 8)
        assert "api" in str(exc_info.value)

    def test_invalid_concurrency_raises(self, registry):
        with pytest.raises(InvalidConcurrencyError):
            registry.get("bad", 0)
        assert "bad" not in registry

    def test_names_and_contains(self, registry):
        registry.get("a")
        registry.get("b")
        assert registry.names() == ["a", "b"]
        assert "a" in registry
        assert "c" not in registry

    @pytest.mark.asyncio
    async def test_stats(self, registry):
        limiter = registry.get("db")
        futures = [limiter.schedule(asyncio.sleep, 0.02) for _ in range(5)]
        await asyncio.sleep(0)

        assert registry.stats() == {"db": {"concurrency": 2, "active": 2, "pending": 3}}

        await asyncio.gather(*futures)
        assert registry.stats()["db"]["active"] == 0


class TestRegistryShutdown:
    @pytest.mark.asyncio
    async def test_shutdown_clears_queues(self, registry, caplog):
        api = registry.get("api", 1)
        running = api.schedule(asyncio.sleep, 0.02, "done")
        for _ in range(4):
            api.schedule(asyncio.sleep, 0.02)
        await asyncio.sleep(0)

        with caplog.at_level(logging.INFO, logger="pico_limit"):
            registry._on_shutdown()

        assert api.pending_count == 0
        assert api.active_count == 1
        assert "discarded 4 queued item(s)" in caplog.text
        assert await running == "done"

    def test_shutdown_with_nothing_queued(self, registry, caplog):
        registry.get("idle")
        with caplog.at_level(logging.INFO, logger="pico_limit"):
            registry._on_shutdown()
        assert "discarded" not in caplog.text


class TestRegistryWithEnvSettings:
    def test_uses_env_settings(self, clean_env):
        clean_env.setenv("PICO_LIMIT_LIMITS", "search=6")
        registry = LimiterRegistry(LimiterSettings.from_env())
        assert registry.get("search").concurrency == 6
        assert registry.get("other").concurrency == 10
