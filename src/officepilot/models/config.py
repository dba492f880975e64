"""Configuration data models for OfficePilot."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ServerConfig(BaseModel):
    """Server configuration."""

    port: int = 8400
    host: str = "127.0.0.1"


class PathsConfig(BaseModel):
    """Paths configuration."""

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".officepilot")
    logs_dir: Path | None = None
    # Catalog override; the packaged resources/catalog.json is used when unset
    catalog_file: Path | None = None

    @field_validator("data_dir", mode="before")
    @classmethod
    def expand_data_dir(cls, v: str | Path) -> Path:
        """Expand user path for data_dir."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    @field_validator("logs_dir", "catalog_file", mode="before")
    @classmethod
    def expand_optional_path(cls, v: str | Path | None) -> Path | None:
        """Expand user path for optional paths."""
        if v is None:
            return None
        if isinstance(v, str):
            return Path(v).expanduser()
        return v

    def model_post_init(self, __context: object) -> None:
        """Set default subdirectories if not specified."""
        if self.logs_dir is None:
            self.logs_dir = self.data_dir / "logs"


class DeploymentDefaultsConfig(BaseModel):
    """Values used when an install request leaves the per-run overrides empty."""

    company_name: str = ""
    user_name: str = ""


class AdvancedConfig(BaseModel):
    """Advanced configuration."""

    execution_timeout: int = 3600  # Seconds before a hung installer process is killed
    log_level: Literal["INFO", "DEBUG", "TRACE"] = "INFO"


class AppConfig(BaseModel):
    """Application configuration."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    deployment: DeploymentDefaultsConfig = Field(default_factory=DeploymentDefaultsConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)
