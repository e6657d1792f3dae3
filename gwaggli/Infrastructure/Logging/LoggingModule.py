"""
Centralized logging configuration for Gwaggli.

Wraps the standard logging package: one console handler, an optional
(rotating) file handler, and per-feature levels keyed by the feature package
name, e.g. {"Streaming": LogLevel.DEBUG} applies to gwaggli.Features.Streaming.
"""

import logging
import logging.handlers
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union

ROOT_LOGGER_NAME = "gwaggli"
FEATURES_PACKAGE = "gwaggli.Features"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LogLevel(Enum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def coerce(cls, level: Union['LogLevel', int, str]) -> 'LogLevel':
        if isinstance(level, LogLevel):
            return level
        if isinstance(level, str):
            try:
                return cls[level.upper()]
            except KeyError:
                raise ValueError(f"Unknown log level: {level}")
        return cls(level)


@dataclass
class LoggingConfig:
    """Logging settings applied by LoggingModule.initialize()."""

    console_level: LogLevel = LogLevel.WARNING
    console_format: str = DEFAULT_FORMAT
    file_enabled: bool = False
    file_path: str = "logs/gwaggli.log"
    file_level: LogLevel = LogLevel.DEBUG
    file_format: str = DEFAULT_FORMAT
    rotation_enabled: bool = True
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5
    feature_levels: Dict[str, LogLevel] = field(default_factory=dict)


class LoggingModule:
    """Configures the gwaggli logger hierarchy."""

    _config: Optional[LoggingConfig] = None
    _handlers = []

    @classmethod
    def initialize(
            cls,
            console_level: Union[LogLevel, int, str] = LogLevel.WARNING,
            file_enabled: bool = False,
            file_path: str = "logs/gwaggli.log",
            rotation_enabled: bool = True,
            console_format: str = DEFAULT_FORMAT,
            file_format: str = DEFAULT_FORMAT,
            feature_levels: Optional[Dict[str, Union[LogLevel, int, str]]] = None,
        ) -> LoggingConfig:
        """
        (Re)configure logging. Calling it again replaces earlier handlers.

        Returns:
            LoggingConfig: The applied configuration
        """
        config = LoggingConfig(
            console_level=LogLevel.coerce(console_level),
            console_format=console_format,
            file_enabled=file_enabled,
            file_path=file_path,
            file_format=file_format,
            rotation_enabled=rotation_enabled,
            feature_levels={name: LogLevel.coerce(level) for name, level in (feature_levels or {}).items()},
        )
        cls.apply(config)
        return config

    @classmethod
    def apply(cls, config: LoggingConfig) -> None:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()
        cls._handlers = []

        console = logging.StreamHandler()
        console.setLevel(config.console_level.value)
        console.setFormatter(logging.Formatter(config.console_format))
        cls._handlers.append(console)

        lowest = config.console_level.value
        if config.file_enabled:
            directory = os.path.dirname(config.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            if config.rotation_enabled:
                file_handler = logging.handlers.RotatingFileHandler(
                    config.file_path, maxBytes=config.max_bytes, backupCount=config.backup_count)
            else:
                file_handler = logging.FileHandler(config.file_path)
            file_handler.setLevel(config.file_level.value)
            file_handler.setFormatter(logging.Formatter(config.file_format))
            cls._handlers.append(file_handler)
            lowest = min(lowest, config.file_level.value)

        for handler in cls._handlers:
            root.addHandler(handler)
        root.setLevel(lowest)
        root.propagate = False

        for feature, level in config.feature_levels.items():
            logging.getLogger(f"{FEATURES_PACKAGE}.{feature}").setLevel(level.value)

        cls._config = config

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        return logging.getLogger(name)

    @classmethod
    def set_feature_level(cls, feature: str, level: Union[LogLevel, int, str]) -> None:
        logging.getLogger(f"{FEATURES_PACKAGE}.{feature}").setLevel(LogLevel.coerce(level).value)

    @classmethod
    def get_config(cls) -> Optional[LoggingConfig]:
        return cls._config


def get_logger(name: str) -> logging.Logger:
    return LoggingModule.get_logger(name)
