"""
pagebuilder/config.py - Page builder configuration

Provides configuration loading from files, environment variables, and defaults.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

logger = logging.getLogger("pagebuilder.config")

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class EditorConfig:
    """Editing behaviour."""

    debounce_seconds: float = 1.0
    history_limit: int = 50
    real_time_preview: bool = True
    default_preview_device: str = "desktop"
    show_error_details: bool = False

    @classmethod
    def from_env(cls) -> "EditorConfig":
        return cls(
            debounce_seconds=float(os.getenv("PAGEBUILDER_DEBOUNCE_SECONDS", "1.0")),
            history_limit=int(os.getenv("PAGEBUILDER_HISTORY_LIMIT", "50")),
            real_time_preview=_env_bool("PAGEBUILDER_REAL_TIME_PREVIEW", "true"),
            default_preview_device=os.getenv("PAGEBUILDER_PREVIEW_DEVICE", "desktop"),
            show_error_details=_env_bool("PAGEBUILDER_SHOW_ERROR_DETAILS", "false"),
        )


@dataclass
class StorageConfig:
    """Where the JSON page repository keeps its documents."""

    pages_dir: str = "./pages"

    @classmethod
    def from_env(cls) -> "StorageConfig":
        return cls(pages_dir=os.getenv("PAGEBUILDER_PAGES_DIR", "./pages"))


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("PAGEBUILDER_LOG_LEVEL", "INFO"),
            format=os.getenv("PAGEBUILDER_LOG_FORMAT", DEFAULT_LOG_FORMAT),
            log_file=os.getenv("PAGEBUILDER_LOG_FILE"),
            json_logs=_env_bool("PAGEBUILDER_JSON_LOGS", "false"),
        )


@dataclass
class PageBuilderConfig:
    """Root configuration."""

    environment: str = "development"
    debug: bool = False

    editor: EditorConfig = field(default_factory=EditorConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "PageBuilderConfig":
        """Create configuration from environment variables."""
        return cls(
            environment=os.getenv("PAGEBUILDER_ENVIRONMENT", "development"),
            debug=_env_bool("PAGEBUILDER_DEBUG", "false"),
            editor=EditorConfig.from_env(),
            storage=StorageConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "PageBuilderConfig":
        """Load configuration from JSON file, layered over the environment."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Config file not found: {filepath}, using defaults")
            return cls.from_env()

        with open(path) as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageBuilderConfig":
        """Environment configuration with values from data applied on top."""
        config = cls.from_env()
        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]

        for section in ("editor", "storage", "logging"):
            target = getattr(config, section)
            for key, value in data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown config key: {section}.{key}")
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialize config to dictionary."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "editor": {f.name: getattr(self.editor, f.name) for f in fields(self.editor)},
            "storage": {"pages_dir": self.storage.pages_dir},
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global config instance
_config: Optional[PageBuilderConfig] = None


def load_config(filepath: str = None) -> PageBuilderConfig:
    """
    Load configuration from file or environment.

    Args:
        filepath: Optional path to JSON config file

    Returns:
        PageBuilderConfig instance
    """
    global _config

    if filepath:
        _config = PageBuilderConfig.from_file(filepath)
    else:
        default_paths = [
            "./pagebuilder.json",
            "./config/pagebuilder.json",
            os.path.expanduser("~/.pagebuilder/config.json"),
        ]
        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading config from: {path}")
                _config = PageBuilderConfig.from_file(path)
                return _config

        _config = PageBuilderConfig.from_env()

    logger.info(f"Configuration loaded: environment={_config.environment}")
    return _config


def get_config() -> PageBuilderConfig:
    """Get current configuration, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration."""
    global _config
    _config = None
