from .downloader import ModelDownloader
from .paths import CachePaths, clear_cache, default_cache_root

__all__ = ['CachePaths', 'ModelDownloader', 'clear_cache', 'default_cache_root']
