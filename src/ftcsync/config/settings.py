"""Configuration management for ftcsync.

Loads settings from a YAML configuration file with environment variable
overrides. Supports .env files and the plain ``FTC_ROBOT_ADDRESS`` /
``FTC_REMOTE_DIRECTORY`` variables.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("ftc-sync.yaml")


class RemoteConfig(BaseModel):
    address: str = Field(default="192.168.49.1:8080", description="Host:port of the robot")
    remote_directory: str = Field(default="/org/firstinspires/ftc/teamcode/")
    websocket_port: int = Field(default=8081, ge=1, le=65535)
    websocket_url: str | None = Field(default=None)
    http_timeout: float = Field(default=5.0, gt=0)
    cookie_file: str = Field(default=".cookies")

    @property
    def resolved_websocket_url(self) -> str:
        """The websocket lives on a separate port of the same host."""
        if self.websocket_url:
            return self.websocket_url
        host = self.address.rsplit(":", 1)[0] if ":" in self.address else self.address
        return f"ws://{host}:{self.websocket_port}"


class ReplConfig(BaseModel):
    prompt: str = Field(default="ftc> ")
    channel_capacity: int = Field(default=10, gt=0)
    idle_timeout: float = Field(default=0.05, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="WARNING")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for ftc-sync.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "FTC_SYNC_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    remote: RemoteConfig = Field(default_factory=RemoteConfig)
    repl: ReplConfig = Field(default_factory=ReplConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: FTC_ROBOT_ADDRESS / FTC_REMOTE_DIRECTORY > YAML file >
    FTC_SYNC_* variables (from the environment or .env) > defaults.
    YAML values are passed to ``Settings`` as init arguments, so they
    win over the prefixed variables for the same field.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    _load_dotenv()

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.debug("Config file %s not found, using defaults + env vars", path)

    _apply_env_overrides(yaml_data)

    return Settings(**yaml_data)


def _load_dotenv() -> None:
    """Load .env file into os.environ if it exists."""
    env_path = Path(".env")
    if not env_path.exists():
        return
    with open(env_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, _, value = line.partition("=")
                key = key.strip()
                value = value.strip()
                if not os.environ.get(key):
                    os.environ[key] = value


def _apply_env_overrides(yaml_data: dict) -> None:
    """Apply the unprefixed FTC_* variables on top of the YAML data."""
    address = os.environ.get("FTC_ROBOT_ADDRESS", "")
    remote_directory = os.environ.get("FTC_REMOTE_DIRECTORY", "")

    if not address and not remote_directory:
        return

    remote = yaml_data.setdefault("remote", {})
    if address:
        remote["address"] = address
    if remote_directory:
        remote["remote_directory"] = remote_directory
