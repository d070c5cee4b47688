from dataclasses import dataclass, field

@dataclass
class AggregationConfig:
    window_minutes: int = 60
    fetch_limit: int = 50

@dataclass
class FormatterConfig:
    timezone: str = "UTC"

@dataclass
class GeoConfig:
    default_radius_km: float = 10.0

@dataclass
class AdvisoryConfig:
    low_confidence_threshold: int = 3

@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000

@dataclass
class DatabaseConfig:
    url: str = "sqlite:///crowdsense.db"

@dataclass
class CrowdConfig:
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    geo: GeoConfig = field(default_factory=GeoConfig)
    advisory: AdvisoryConfig = field(default_factory=AdvisoryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
