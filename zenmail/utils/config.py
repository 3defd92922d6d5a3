"""Configuration manager for persistent settings stored as JSON."""

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from .errors import (
    ConfigurationError,
    FileSystemError,
    InvalidConfigError,
    MissingConfigError,
    ZenMailError,
)
from .logging import get_logger, log_call
from .paths import CONFIG_PATH

logger = get_logger(__name__)


class AccountConfig(BaseModel):
    """Pydantic model for account configuration."""

    email: str = ""
    username: str = ""
    imap_server: str = ""
    imap_port: int = 993
    smtp_server: str = ""
    smtp_port: int = 587
    smtp_starttls: bool = True
    network_timeout: int = 30  # in seconds

    @property
    def login(self) -> str:
        """Login name, falling back to the address."""
        return self.username or self.email


class UIConfig(BaseModel):
    """Pydantic model for UI settings."""

    inbox_limit: int = Field(default=20, ge=1, le=500)
    demo_mode: bool = False


class LoggingConfig(BaseModel):
    """Pydantic model for logging settings."""

    log_level: str = "INFO"


class AppConfig(BaseModel):
    """Pydantic model for overall application configuration."""

    version: str = "0.1.0"
    account: AccountConfig = Field(default_factory=AccountConfig)
    ui: UIConfig = Field(default_factory=UIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class ConfigManager:
    """Manages persistent application configuration."""

    def __init__(self, config_path: Optional[Path] = None):
        self.path = Path(config_path) if config_path else CONFIG_PATH
        self.config = self._load_or_create_config()
        logger.info(f"Configuration loaded from {self.path}")

    def _load_or_create_config(self) -> AppConfig:
        """Load configuration from file or create default if not present."""

        from pydantic import ValidationError

        if not self.path.exists():
            logger.info("No config file found, creating default configuration.")
            config = AppConfig()
            self._save_config(config)
            return config

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            config = AppConfig(**data)
            logger.debug("Configuration successfully loaded and validated.")
            return config

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config file: {e}")
            raise InvalidConfigError(
                f"Configuration file is not valid JSON: {str(e)}"
            ) from e
        except ValidationError as e:
            logger.error(f"Failed to validate config file: {e}")
            raise InvalidConfigError(
                f"Configuration data does not match expected schema: {str(e)}"
            ) from e
        except (TypeError, OSError) as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e

    def _save_config(self, config: Optional[AppConfig] = None):
        """Save the current configuration to file."""

        config = config or self.config

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
            logger.debug("Configuration successfully saved.")
        except OSError as e:
            raise FileSystemError(
                f"Failed to write configuration file: {str(e)}"
            ) from e

    def get_config(self, key_path: str, default: Any = None) -> Any:
        """Get a configuration value using a dot-separated key path."""

        obj: Any = self.config
        for key in key_path.split("."):
            if not hasattr(obj, key):
                return default
            obj = getattr(obj, key)

        return obj

    @log_call
    def set_config(self, key_path: str, value: Any, persist: bool = True):
        """Set a configuration value using dot-separated key path."""

        try:
            keys = key_path.split(".")
            obj = self.config

            for key in keys[:-1]:
                if not hasattr(obj, key):
                    raise MissingConfigError(
                        f"Configuration path '{key_path}' is invalid: '{key}' not found"
                    )
                obj = getattr(obj, key)

            if not hasattr(obj, keys[-1]):
                raise MissingConfigError(
                    f"Configuration key '{keys[-1]}' does not exist in path '{key_path}'"
                )

            setattr(obj, keys[-1], value)

            if persist:
                self._save_config()

            logger.info(f"Config key '{key_path}' updated.")

        except ZenMailError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to set configuration key '{key_path}': {str(e)}"
            ) from e

    def reset_to_defaults(self):
        """Reset configuration to default values."""

        logger.warning("Resetting configuration to default values.")
        self.config = AppConfig()
        self._save_config()
