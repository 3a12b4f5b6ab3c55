"""Environment-backed settings for the limiter registry."""

import math
import os
from dataclasses import dataclass, field
from typing import Dict, Union

from .exceptions import LimiterConfigurationError

_UNBOUNDED_WORDS = ("unbounded", "inf", "infinity")


def _parse_ceiling(raw: str, source: str) -> Union[int, float]:
    value = raw.strip()
    if value.lower() in _UNBOUNDED_WORDS:
        return math.inf
    try:
        ceiling = int(value)
    except ValueError:
        raise LimiterConfigurationError(f"{source}: expected a positive integer or 'unbounded', got {raw!r}") from None
    if ceiling <= 0:
        raise LimiterConfigurationError(f"{source}: concurrency must be greater than 0, got {ceiling}")
    return ceiling


def _parse_limits(raw: str) -> Dict[str, Union[int, float]]:
    limits: Dict[str, Union[int, float]] = {}
    for pair in raw.split(","):
        if not pair.strip():
            continue
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise LimiterConfigurationError(f"PICO_LIMIT_LIMITS: expected 'name=value', got {pair.strip()!r}")
        limits[name.strip()] = _parse_ceiling(value, f"PICO_LIMIT_LIMITS[{name.strip()}]")
    return limits


@dataclass(frozen=True)
class LimiterSettings:
    """Ceilings used by ``LimiterRegistry`` when creating limiters.

    Attributes:
        default_concurrency: Ceiling for names without an explicit entry.
        limits: Per-name ceilings.
    """

    default_concurrency: Union[int, float] = 10
    limits: Dict[str, Union[int, float]] = field(default_factory=dict)

    def concurrency_for(self, name: str) -> Union[int, float]:
        return self.limits.get(name, self.default_concurrency)

    @staticmethod
    def from_env() -> "LimiterSettings":
        """Build settings from ``PICO_LIMIT_MAX_CONCURRENCY`` and ``PICO_LIMIT_LIMITS``.

        ``PICO_LIMIT_LIMITS`` is a comma separated list such as
        ``"openai=5,db=2"``.  Empty variables fall back to the defaults.

        Raises:
            LimiterConfigurationError: If a value cannot be parsed.
        """
        default_raw = os.getenv("PICO_LIMIT_MAX_CONCURRENCY", "")
        limits_raw = os.getenv("PICO_LIMIT_LIMITS", "")
        return LimiterSettings(
            default_concurrency=(
                _parse_ceiling(default_raw, "PICO_LIMIT_MAX_CONCURRENCY") if default_raw.strip() else 10
            ),
            limits=_parse_limits(limits_raw),
        )
