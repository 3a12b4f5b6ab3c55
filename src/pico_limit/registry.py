"""Named limiters shared across the container.

``LimiterRegistry`` hands out one ``Limiter`` per name so that every caller
throttling the same resource (an API, a database) shares one ceiling.
"""

from typing import Any, Dict, List, Optional, Union

from pico_ioc import cleanup, component

from .config import LimiterSettings
from .exceptions import LimiterConfigurationError
from .limiter import Limiter
from .logging import get_logger

logger = get_logger(__name__)


@component(scope="singleton")
class LimiterRegistry:
    """Singleton registry of named ``Limiter`` instances.

    The ceiling of a new limiter is, in order of precedence, the explicit
    *concurrency* passed to ``get()``, the per-name entry in
    ``LimiterSettings.limits`` and ``LimiterSettings.default_concurrency``.
    On container shutdown (``@cleanup``) every queue is cleared.

    Example:
        >>> registry = container.get(LimiterRegistry)
        >>> result = await registry.get("openai", 5).schedule(call_api, prompt)
    """

    def __init__(self, settings: LimiterSettings):
        self.settings = settings
        self._limiters: Dict[str, Limiter] = {}

    def get(self, name: str, concurrency: Optional[Union[int, float]] = None) -> Limiter:
        """Return the limiter registered under *name*, creating it if needed.

        Args:
            name: Limiter name.
            concurrency: Explicit ceiling for a new limiter.

        Returns:
            The shared ``Limiter`` for *name*.

        Raises:
            LimiterConfigurationError: If *name* exists with a different
                ceiling than the explicit *concurrency*.
            InvalidConcurrencyError: If the resolved ceiling is invalid.
        """
        limiter = self._limiters.get(name)
        if limiter is not None:
            if concurrency is not None and concurrency != limiter.concurrency:
                raise LimiterConfigurationError(
                    f"Limiter '{name}' already exists with concurrency {limiter.concurrency}, "
                    f"cannot change it to {concurrency}"
                )
            return limiter

        ceiling = concurrency if concurrency is not None else self.settings.concurrency_for(name)
        limiter = Limiter(ceiling, name=name)
        self._limiters[name] = limiter
        logger.debug("Created limiter '%s' with concurrency %s", name, ceiling)
        return limiter

    def names(self) -> List[str]:
        return list(self._limiters)

    def __contains__(self, name: str) -> bool:
        return name in self._limiters

    def stats(self) -> Dict[str, Dict[str, Any]]:
        """Snapshot of every limiter's counters, keyed by name."""
        return {
            name: {
                "concurrency": limiter.concurrency,
                "active": limiter.active_count,
                "pending": limiter.pending_count,
            }
            for name, limiter in self._limiters.items()
        }

    @cleanup
    def _on_shutdown(self):
        discarded = sum(limiter.clear_queue() for limiter in self._limiters.values())
        if discarded:
            logger.info("LimiterRegistry: discarded %d queued item(s) on shutdown", discarded)
