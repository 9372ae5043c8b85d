from inkpost.configs.settings import (
    CONFIG_MAP,
    DEFAULT_ERROR_MESSAGE,
    STORE_ERROR_MESSAGE,
    Argon2Params,
    LimiterConfig,
    settings,
)

__all__ = [
    "Argon2Params",
    "CONFIG_MAP",
    "DEFAULT_ERROR_MESSAGE",
    "LimiterConfig",
    "STORE_ERROR_MESSAGE",
    "settings",
]
