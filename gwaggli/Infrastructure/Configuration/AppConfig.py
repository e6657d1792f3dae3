"""
Application configuration.

Plain dataclasses with defaults; AppConfig.from_env() overrides them from
GWAGGLI_* environment variables. Components receive the pieces they need
explicitly instead of looking anything up globally.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from gwaggli.Core.Common.errors import ConfigurationError
from gwaggli.Infrastructure.Environment.paths import CachePaths, default_cache_root

SAMPLE_RATE = 16000


@dataclass
class StreamingConfig:
    """Configuration of the real-time framing pipeline."""

    # Sample rate every chunk must have
    sample_rate: int = SAMPLE_RATE

    # Frame length in samples (10 seconds)
    window_size: int = 10 * SAMPLE_RATE

    # Samples the window advances between frames (250 ms)
    hop_size: int = 4000

    # Unread events each bus subscription retains
    bus_capacity: int = 1000

    # Log a warning when the unread backlog exceeds this many samples (None disables)
    backlog_warning_samples: Optional[int] = 60 * SAMPLE_RATE

    # Abort the session on the first failed frame instead of logging and continuing
    stop_on_error: bool = False

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")
        if self.window_size < 1:
            raise ValueError(f"Window size must be at least 1, got {self.window_size}")
        if not 0 < self.hop_size <= self.window_size:
            raise ValueError(f"Hop size must be between 1 and window size {self.window_size}, got {self.hop_size}")
        if self.bus_capacity < 1:
            raise ValueError(f"Bus capacity must be at least 1, got {self.bus_capacity}")

    @classmethod
    def from_seconds(cls, window_seconds: float, hop_seconds: float, **kwargs) -> 'StreamingConfig':
        sample_rate = kwargs.pop('sample_rate', SAMPLE_RATE)
        return cls(
            sample_rate=sample_rate,
            window_size=int(window_seconds * sample_rate),
            hop_size=int(hop_seconds * sample_rate),
            **kwargs,
        )


@dataclass
class WhisperConfig:
    """Configuration of the Whisper transcription engine."""

    # Model size name, see WhisperModel
    model: str = "medium"

    # "cpu", "cuda" or "auto"
    device: str = "auto"

    # CTranslate2 compute type
    compute_type: str = "default"

    # CPU threads used for inference (0 lets the backend decide)
    n_threads: int = 0

    beam_size: int = 5

    # Language code, None for auto-detection
    language: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level configuration."""

    streaming: StreamingConfig = field(default_factory=StreamingConfig)
    whisper: WhisperConfig = field(default_factory=WhisperConfig)
    cache_root: Path = field(default_factory=default_cache_root)

    @property
    def cache_paths(self) -> CachePaths:
        return CachePaths(self.cache_root)

    @classmethod
    def from_env(cls, environ=None) -> 'AppConfig':
        """
        Build a configuration from GWAGGLI_* environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        env = os.environ if environ is None else environ
        config = cls()

        try:
            if env.get('GWAGGLI_CACHE_DIR'):
                config.cache_root = Path(env['GWAGGLI_CACHE_DIR']).expanduser()
            if env.get('GWAGGLI_WHISPER_MODEL'):
                config.whisper.model = env['GWAGGLI_WHISPER_MODEL']
            if env.get('GWAGGLI_WHISPER_DEVICE'):
                config.whisper.device = env['GWAGGLI_WHISPER_DEVICE']
            if env.get('GWAGGLI_WHISPER_THREADS'):
                config.whisper.n_threads = int(env['GWAGGLI_WHISPER_THREADS'])
            if env.get('GWAGGLI_LANGUAGE'):
                config.whisper.language = env['GWAGGLI_LANGUAGE']

            streaming = {}
            if env.get('GWAGGLI_WINDOW_SIZE'):
                streaming['window_size'] = int(env['GWAGGLI_WINDOW_SIZE'])
            if env.get('GWAGGLI_HOP_SIZE'):
                streaming['hop_size'] = int(env['GWAGGLI_HOP_SIZE'])
            if env.get('GWAGGLI_STOP_ON_ERROR'):
                streaming['stop_on_error'] = env['GWAGGLI_STOP_ON_ERROR'].lower() == 'true'
            if streaming:
                config.streaming = StreamingConfig(**streaming)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}") from e

        return config
