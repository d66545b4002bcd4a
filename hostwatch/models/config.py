"""Configuration models using Pydantic for validation."""

from pathlib import Path
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .target import Target

MIN_TIMEOUT_SECONDS = 1
MAX_TIMEOUT_SECONDS = 10
DEFAULT_TIMEOUT_SECONDS = 3


def clamp_timeout(value: float) -> int:
    """Clamp a timeout into the supported 1-10 second range, in whole seconds."""
    return round(min(max(value, MIN_TIMEOUT_SECONDS), MAX_TIMEOUT_SECONDS))


class TargetConfig(BaseModel):
    """Configuration for a single monitored host."""

    name: str = ""
    host: str
    port: int = 80
    id: UUID | None = None

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Strip whitespace and require a non-empty host."""
        v = v.strip()
        if not v:
            raise ValueError("Host must not be empty")
        return v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    def to_target(self) -> Target:
        """Build a Target, keeping the configured id when one is given."""
        if self.id is not None:
            return Target(id=self.id, name=self.name, host=self.host, port=self.port)
        return Target(name=self.name, host=self.host, port=self.port)


class MonitorSettings(BaseModel):
    """Probe and refresh settings."""

    timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS
    refresh_interval_seconds: float = Field(default=15.0, gt=0)
    debounce_seconds: float = Field(default=1.0, ge=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("timeout_seconds", mode="before")
    @classmethod
    def validate_timeout(cls, v: float) -> int:
        """Clamp timeout into range instead of rejecting it."""
        try:
            return clamp_timeout(float(v))
        except (TypeError, ValueError):
            raise ValueError(f"Timeout must be a number, got {v!r}")


class Config(BaseModel):
    """Main configuration model."""

    targets: list[TargetConfig] = Field(default_factory=list)
    settings: MonitorSettings = Field(default_factory=MonitorSettings)

    @classmethod
    def load(cls, path: Path | str = "config.json") -> "Config":
        """Load configuration from a JSON file."""
        import json

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    @classmethod
    def load_or_default(cls, path: Path | str = "config.json") -> "Config":
        """Load configuration or return default if file doesn't exist."""
        try:
            return cls.load(path)
        except FileNotFoundError:
            return cls()

    def build_targets(self) -> list[Target]:
        """Create Target records for every configured host."""
        return [t.to_target() for t in self.targets]
