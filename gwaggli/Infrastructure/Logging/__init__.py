from .LoggingModule import LoggingConfig, LoggingModule, LogLevel, get_logger

__all__ = ['LoggingConfig', 'LoggingModule', 'LogLevel', 'get_logger']
