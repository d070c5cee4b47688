from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..exceptions import ConfigurationError
from .models import CrowdConfig

class ConfigManager:
    """Centralizes loading and validation of configuration"""

    REQUIRED_KEYS = ['aggregation', 'formatter', 'geo']

    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = Path(config_dir)

    def load_crowd_config(self, profile: str = "default") -> DictConfig:
        """Loads a crowd profile over the structured defaults and validates it"""
        config_path = self.config_dir / "crowd" / f"{profile}.yaml"

        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")

        raw = OmegaConf.load(config_path)
        for key in self.REQUIRED_KEYS:
            if key not in raw:
                raise ConfigurationError(f"Missing required config key: {key}")

        try:
            cfg = OmegaConf.merge(OmegaConf.structured(CrowdConfig), raw)
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Invalid config {config_path}: {e}") from e

        self.validate(cfg)
        return cfg

    @staticmethod
    def validate(cfg: DictConfig) -> None:
        if cfg.aggregation.window_minutes <= 0:
            raise ConfigurationError("aggregation.window_minutes must be positive")
        if cfg.aggregation.fetch_limit <= 0:
            raise ConfigurationError("aggregation.fetch_limit must be positive")
        if cfg.geo.default_radius_km < 0:
            raise ConfigurationError("geo.default_radius_km must be non-negative")
        if cfg.advisory.low_confidence_threshold < 0:
            raise ConfigurationError("advisory.low_confidence_threshold must be non-negative")
        try:
            ZoneInfo(cfg.formatter.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone: {cfg.formatter.timezone}") from e

def default_config() -> DictConfig:
    """Structured defaults, used when no profile file is available."""
    return OmegaConf.structured(CrowdConfig)
