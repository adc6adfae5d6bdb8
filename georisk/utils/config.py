"""Configuration loader for GeoRisk Scanner."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class CatalogConfig(BaseModel):
    path: str = "config/districts/san_pedro_de_los_milagros.yaml"


class AnalysisConfig(BaseModel):
    # Pause before each analysis, purely for UX feedback. 0 disables it.
    processing_delay_seconds: float = 0.0
    default_model: str = "weighted_factor"
    report_model: str = "additive_points"


class SimulationConfig(BaseModel):
    reference_asset_value: float = 150_000_000
    impact_rate_per_point: float = 0.02
    currency: str = "COP"


class ExportConfig(BaseModel):
    output_dir: str = "reports"
    default_format: str = "pdf"
    page_size: str = "A4"


class APIConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = True
    workers: int = 1
    cors_origins: list[str] = ["http://localhost:8501"]


class UIConfig(BaseModel):
    port: int = 8501
    theme: str = "light"
    map_center: dict = {"lat": 6.4167, "lon": -75.5500}
    map_zoom: int = 13


class LoggingConfig(BaseModel):
    level: str = "DEBUG"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    rotation: str = "10 MB"
    retention: str = "7 days"


class AppConfig(BaseModel):
    name: str = "georisk_scanner"
    version: str = "0.1.0"
    environment: str = "development"
    debug: bool = True


class Settings(BaseModel):
    app: AppConfig = AppConfig()
    logging: LoggingConfig = LoggingConfig()
    catalog: CatalogConfig = CatalogConfig()
    analysis: AnalysisConfig = AnalysisConfig()
    simulation: SimulationConfig = SimulationConfig()
    export: ExportConfig = ExportConfig()
    api: APIConfig = APIConfig()
    ui: UIConfig = UIConfig()


def get_project_root() -> Path:
    return Path(__file__).parent.parent.parent


def resolve_path(path: str) -> Path:
    """Relative paths in settings are anchored at the project root."""
    p = Path(path)
    return p if p.is_absolute() else get_project_root() / p


def load_yaml_config(env: str = "development") -> dict[str, Any]:
    config_path = get_project_root() / "config" / "environments" / f"{env}.yaml"
    if not config_path.exists():
        return {}
    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(env: Optional[str] = None) -> Settings:
    env = env or os.getenv("APP_ENV", "development")
    yaml_config = load_yaml_config(env)

    # Override with env vars
    if os.getenv("GEORISK_CATALOG_PATH"):
        yaml_config.setdefault("catalog", {})["path"] = os.getenv("GEORISK_CATALOG_PATH")
    if os.getenv("GEORISK_PROCESSING_DELAY"):
        yaml_config.setdefault("analysis", {})["processing_delay_seconds"] = float(
            os.getenv("GEORISK_PROCESSING_DELAY")
        )
    if os.getenv("GEORISK_LOG_LEVEL"):
        yaml_config.setdefault("logging", {})["level"] = os.getenv("GEORISK_LOG_LEVEL")

    return Settings(**yaml_config) if yaml_config else Settings()


settings = get_settings()
