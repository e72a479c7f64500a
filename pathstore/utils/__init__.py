from .config import ConfigError, ConfigProvider, ServerConfig
from .env_config import AppSettings, get_settings, reload_settings

__all__ = [
    "ConfigError",
    "ConfigProvider",
    "ServerConfig",
    "AppSettings",
    "get_settings",
    "reload_settings",
]
