from app.configs.settings import (
    CONFIG_MAP,
    STORE_TIMEOUT_MESSAGE,
    LimiterConfig,
    Settings,
    pool_kwargs,
    settings,
)

__all__ = [
    "CONFIG_MAP",
    "STORE_TIMEOUT_MESSAGE",
    "LimiterConfig",
    "Settings",
    "pool_kwargs",
    "settings",
]
