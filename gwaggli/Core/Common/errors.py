"""
Error taxonomy for Gwaggli.

Every error raised by the library derives from GwaggliError so that hosting
applications can decide their own retry/skip/fail policy. Messages name the
contract that was violated (device, format, channels, rate).
"""


class GwaggliError(Exception):
    """Base class for all library errors."""


class ConfigurationError(GwaggliError):
    """No capture device or no matching device configuration exists."""


class FormatError(GwaggliError):
    """Malformed container, unsupported codec, channel count or sample rate."""


class ChannelClosedError(GwaggliError):
    """The event bus is closed, or has no subscribers in strict mode."""


class SubscriptionLaggedError(GwaggliError):
    """
    A subscription fell behind the bus capacity and events were dropped.

    The subscription stays usable; the next receive continues with the oldest
    event that is still retained.
    """

    def __init__(self, missed: int):
        super().__init__(f"Subscription lagged behind, {missed} events were dropped")
        self.missed = missed


class TransientIOError(GwaggliError):
    """A download or other I/O operation failed after all retries."""


class TranscriptionError(GwaggliError):
    """The transcription backend could not produce text for the input."""


class UnsupportedSampleRateError(TranscriptionError):
    def __init__(self, sample_rate: int, expected: int = 16000):
        super().__init__(f"Unsupported sample rate: {sample_rate} (expected {expected})")
        self.sample_rate = sample_rate
        self.expected = expected


class UnsupportedChannelCountError(TranscriptionError):
    def __init__(self, channels: int):
        super().__init__(f"Unsupported number of channels: {channels} (expected mono)")
        self.channels = channels


class BackendNotInitializedError(TranscriptionError):
    """The engine was used before load() completed."""
