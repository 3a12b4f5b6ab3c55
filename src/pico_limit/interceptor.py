"""Method interceptor for declarative concurrency limits.

``LimitInterceptor`` is a pico-ioc ``MethodInterceptor`` that routes calls
to methods marked with ``@limited`` through the matching ``Limiter`` of the
``LimiterRegistry``.
"""

from typing import Any, Callable

from pico_ioc import MethodCtx, MethodInterceptor, component

from .decorators import LIMIT_META_KEY
from .registry import LimiterRegistry


@component
class LimitInterceptor(MethodInterceptor):
    """Schedules ``@limited`` method calls on their named limiter.

    Methods without ``LimitSpec`` metadata are passed through unchanged.

    Args:
        registry: The ``LimiterRegistry`` that owns the named limiters.
    """

    def __init__(self, registry: LimiterRegistry):
        self.registry = registry

    def invoke(self, ctx: MethodCtx, call_next: Callable[[MethodCtx], Any]) -> Any:
        """Intercept a method call.

        Args:
            ctx: The method invocation context.
            call_next: Callable to proceed with the original method.

        Returns:
            An ``asyncio.Future`` for limited methods, otherwise the
            original method's return value.
        """
        method = getattr(ctx.cls, ctx.name, None)
        spec = getattr(method, LIMIT_META_KEY, None)

        if spec is None:
            return call_next(ctx)

        return self.registry.get(spec.name, spec.concurrency).schedule(call_next, ctx)
