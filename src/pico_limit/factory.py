from pico_ioc import factory, provides

from .config import LimiterSettings


@factory
class LimiterInfrastructureFactory:
    @provides(LimiterSettings, scope="singleton")
    def provide_limiter_settings(self) -> LimiterSettings:
        return LimiterSettings.from_env()
