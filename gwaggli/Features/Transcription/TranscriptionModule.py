import logging
from pathlib import Path
from typing import Optional, Union

from gwaggli.Core.Common.Interfaces.transcription_engine import ITranscriptionEngine
from gwaggli.Features.AudioCapture.Decoders.RiffWave import RiffWave
from gwaggli.Features.Transcription.Engines.FakeTranscriptionEngine import FakeTranscriptionEngine
from gwaggli.Features.Transcription.Engines.FasterWhisperEngine import FasterWhisperEngine
from gwaggli.Infrastructure.Configuration.AppConfig import AppConfig
from gwaggli.Infrastructure.Environment.downloader import ModelDownloader

logger = logging.getLogger(__name__)

ENGINE_TYPES = ("whisper", "fake")


class TranscriptionModule:
    """
    Module that provides transcription engines and the batch (whole file)
    transcription path.
    """

    @staticmethod
    def create_engine(engine_type: str = "whisper", config: Optional[AppConfig] = None) -> ITranscriptionEngine:
        """
        Create a transcription engine. The engine still has to be loaded.

        Args:
            engine_type: One of ENGINE_TYPES
            config: Application configuration (model, cache location)

        Raises:
            ValueError: If the engine type is unknown
        """
        config = config or AppConfig()

        if engine_type == "whisper":
            downloader = ModelDownloader(config.cache_paths)
            return FasterWhisperEngine(config.whisper, downloader)
        elif engine_type == "fake":
            return FakeTranscriptionEngine(auto_load=False)

        raise ValueError(f"Unsupported engine type: {engine_type}. Must be one of: {', '.join(ENGINE_TYPES)}")

    @staticmethod
    def transcribe_file(file_path: Union[str, Path], engine: ITranscriptionEngine) -> str:
        """
        Decode a WAVE file and transcribe it in one pass.

        Raises:
            FileNotFoundError: If the file does not exist
            FormatError: If the file cannot be decoded
            TranscriptionError: If the audio is not 16 kHz mono or the backend fails
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File does not exist: {path}")

        wave = RiffWave.from_file(path)
        logger.info(f"Transcribing {path} ({wave.format.num_channels}, {wave.format.sample_rate} Hz, "
                    f"{wave.duration_seconds:.1f}s)")

        if not engine.is_ready:
            engine.load()
        return engine.transcribe(wave)
