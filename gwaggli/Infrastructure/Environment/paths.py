"""
Cache directory layout.

    <cache-root>/models/<model-name>     downloaded model artifacts
    <cache-root>/download/<random-name>  staging area, renamed into models/ when complete
"""

import logging
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "gwaggli"


def platform_cache_dir() -> Path:
    """The per-user cache directory of the current platform."""
    if sys.platform == "win32":
        base = os.environ.get("LOCALAPPDATA")
        if base:
            return Path(base)
        return Path.home() / "AppData" / "Local"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Caches"
    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".cache"


def default_cache_root(app: str = APP_NAME) -> Path:
    return platform_cache_dir() / app


@dataclass(frozen=True)
class CachePaths:
    root: Path

    def __post_init__(self):
        object.__setattr__(self, 'root', Path(self.root))

    @property
    def models(self) -> Path:
        return self.root / "models"

    @property
    def download(self) -> Path:
        return self.root / "download"

    def model_dir(self, model_name: str) -> Path:
        return self.models / model_name

    def prepare(self) -> None:
        """Create the models and download directories."""
        self.models.mkdir(parents=True, exist_ok=True)
        self.download.mkdir(parents=True, exist_ok=True)


def clear_cache(paths: CachePaths) -> bool:
    """
    Remove the cache root and everything below it.

    Returns:
        bool: True if something was removed
    """
    if not paths.root.exists():
        logger.info(f"Cache directory {paths.root} does not exist")
        return False
    shutil.rmtree(paths.root)
    logger.info(f"Removed cache directory {paths.root}")
    return True
