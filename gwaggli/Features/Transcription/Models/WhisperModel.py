from enum import Enum


class WhisperModel(Enum):
    """Whisper model sizes available as CTranslate2 conversions."""

    Tiny = "tiny.en"
    Base = "base"
    Small = "small"
    Medium = "medium"
    Large = "large-v3"

    @property
    def repo_id(self) -> str:
        return f"Systran/faster-whisper-{self.value}"

    @property
    def model_name(self) -> str:
        return f"faster-whisper-{self.value}"

    @classmethod
    def from_name(cls, name: str) -> 'WhisperModel':
        for model in cls:
            if name.lower() in (model.value, model.name.lower()):
                return model
        available = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown Whisper model '{name}'. Available models: {available}")


class Quality(Enum):
    """Transcription quality; higher takes more time to process."""

    Low = "low"
    Medium = "medium"
    High = "high"

    def __str__(self) -> str:
        return self.value

    @property
    def model(self) -> WhisperModel:
        return {
            Quality.Low: WhisperModel.Tiny,
            Quality.Medium: WhisperModel.Medium,
            Quality.High: WhisperModel.Large,
        }[self]
