import inspect
from dataclasses import dataclass
from typing import Callable, Optional, Union

from pico_ioc import intercepted_by

from .exceptions import LimiterConfigurationError

LIMIT_META_KEY = "_pico_limit_meta"


@dataclass(frozen=True)
class LimitSpec:
    name: str
    concurrency: Optional[Union[int, float]] = None


def limited(name: str, concurrency: Optional[Union[int, float]] = None) -> Callable[[Callable], Callable]:
    """Run every call of an ``async def`` component method through the limiter *name*.

    Only coroutine functions are accepted: the limiter hands back a future,
    which a synchronous method could not return to its caller.
    """

    def decorator(fn: Callable) -> Callable:
        if not inspect.iscoroutinefunction(fn):
            raise LimiterConfigurationError(
                f"@limited('{name}') requires an async method, got {getattr(fn, '__qualname__', fn)!r}"
            )
        from .interceptor import LimitInterceptor

        setattr(fn, LIMIT_META_KEY, LimitSpec(name=name, concurrency=concurrency))
        return intercepted_by(LimitInterceptor)(fn)
    return decorator
