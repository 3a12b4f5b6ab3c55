from .limiter import Limiter, UNBOUNDED
from .queue import Queue
from .config import LimiterSettings
from .registry import LimiterRegistry
from .factory import LimiterInfrastructureFactory
from .decorators import limited, LimitSpec
from .interceptor import LimitInterceptor
from .logging import configure_logging, get_logger
from .exceptions import LimiterError, InvalidConcurrencyError, LimiterConfigurationError

__all__ = [
    "Limiter",
    "UNBOUNDED",
    "Queue",
    "LimiterSettings",
    "LimiterRegistry",
    "LimiterInfrastructureFactory",
    "limited",
    "LimitSpec",
    "LimitInterceptor",
    "configure_logging",
    "get_logger",
    "LimiterError",
    "InvalidConcurrencyError",
    "LimiterConfigurationError"
]
