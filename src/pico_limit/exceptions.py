from typing import Any


class LimiterError(Exception):
    pass


class InvalidConcurrencyError(LimiterError, TypeError):
    def __init__(self, value: Any):
        super().__init__(f"Expected `concurrency` to be a positive integer or UNBOUNDED, got {value!r}")
        self.value = value


class LimiterConfigurationError(LimiterError):
    pass
