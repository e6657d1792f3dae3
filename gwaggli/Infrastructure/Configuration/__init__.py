from .AppConfig import AppConfig, StreamingConfig, WhisperConfig

__all__ = ['AppConfig', 'StreamingConfig', 'WhisperConfig']
