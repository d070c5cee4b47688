from .manager import ConfigManager, default_config
from .models import (
    CrowdConfig, AggregationConfig, FormatterConfig, GeoConfig,
    AdvisoryConfig, ServerConfig, DatabaseConfig
)

__all__ = [
    "ConfigManager", "default_config",
    "CrowdConfig", "AggregationConfig", "FormatterConfig", "GeoConfig",
    "AdvisoryConfig", "ServerConfig", "DatabaseConfig"
]
