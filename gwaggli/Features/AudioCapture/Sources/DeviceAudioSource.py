import logging
import threading
import time
from typing import List, Optional

from gwaggli.Core.Common.Interfaces.audio_source import IAudioSource
from gwaggli.Core.Common.errors import ChannelClosedError, ConfigurationError
from gwaggli.Core.Events.event_bus import EventPublisher
from gwaggli.Features.AudioCapture.Events.AudioChunkCapturedEvent import AudioChunkCapturedEvent
from gwaggli.Features.AudioCapture.Models.AudioChunk import AudioChunk
from gwaggli.Features.AudioCapture.Models.DeviceInfo import DeviceInfo

logger = logging.getLogger(__name__)

CAPTURE_SAMPLE_RATE = 16000
CAPTURE_CHANNELS = 1


def _import_pyaudio():
    try:
        import pyaudio
    except ImportError as e:
        raise ConfigurationError(
            "PyAudio is required for device capture, install with 'pip install Gwaggli_STT[capture]'") from e
    return pyaudio


class DeviceAudioSource(IAudioSource):
    """
    Audio source backed by the default input device via PyAudio.

    The source exclusively owns the PortAudio interface and, once produce() was
    called, the active capture stream. Both are released by close().
    """

    def __init__(
            self,
            input_device_index: Optional[int] = None,
            sample_rate: int = CAPTURE_SAMPLE_RATE,
            chunk_size: int = 512,
        ):
        """
        Open the capture device and verify it supports mono 16-bit capture.

        Args:
            input_device_index: Optional device index, None for the default input device
            sample_rate: Capture sample rate in Hz
            chunk_size: Frames per hardware buffer

        Raises:
            ConfigurationError: If there is no input device or it lacks the required format
        """
        self._pyaudio = _import_pyaudio()
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.stream = None
        self._publisher: Optional[EventPublisher] = None
        self._lock = threading.RLock()
        self.audio_interface = self._pyaudio.PyAudio()

        try:
            if input_device_index is None:
                device_info = self.audio_interface.get_default_input_device_info()
            else:
                device_info = self.audio_interface.get_device_info_by_index(input_device_index)
        except (IOError, OSError) as e:
            self.audio_interface.terminate()
            raise ConfigurationError(f"Failed to get input device: {e}") from e

        self.input_device_index = int(device_info['index'])
        self.device_name = device_info.get('name', '')

        if not self._supports_format(self.input_device_index):
            self.audio_interface.terminate()
            raise ConfigurationError(
                f"Failed to find device with following capabilities: {CAPTURE_CHANNELS} channel, "
                f"{sample_rate} Hz sample rate, i16 sample format (device {self.device_name!r})")

        logger.debug(f"Using input device {self.input_device_index}: {self.device_name}")

    def _supports_format(self, device_index: int) -> bool:
        try:
            return bool(self.audio_interface.is_format_supported(
                self.sample_rate,
                input_device=device_index,
                input_channels=CAPTURE_CHANNELS,
                input_format=self._pyaudio.paInt16,
            ))
        except ValueError:
            return False

    def produce(self, publisher: EventPublisher) -> None:
        """Open the callback-mode capture stream; chunks are published from PortAudio's thread."""
        with self._lock:
            if self.stream is not None:
                raise RuntimeError("Capture stream already running")

            self._publisher = publisher
            self.stream = self.audio_interface.open(
                format=self._pyaudio.paInt16,
                channels=CAPTURE_CHANNELS,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
                input_device_index=self.input_device_index,
                stream_callback=self._on_audio,
            )
            self.stream.start_stream()
            logger.info(f"Audio capture started at {self.sample_rate} Hz on {self.device_name!r}")

    def _on_audio(self, in_data, frame_count, time_info, status_flags):
        # Runs on the real-time audio thread: snapshot, publish, return.
        captured_at = time.time_ns()
        if status_flags:
            logger.warning(f"Audio stream status flags: {status_flags:#x}")

        if in_data:
            chunk = AudioChunk.from_pcm16(in_data, self.sample_rate, captured_at)
            try:
                self._publisher.publish(AudioChunkCapturedEvent(audio_chunk=chunk))
            except ChannelClosedError as e:
                logger.error(f"Audio stream error: {e}")

        return None, self._pyaudio.paContinue

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self.stream is not None and self.stream.is_active()

    def close(self) -> None:
        with self._lock:
            try:
                if self.stream is not None:
                    self.stream.stop_stream()
                    self.stream.close()
                    self.stream = None
                    logger.info("Audio capture stopped")
            finally:
                if self.audio_interface is not None:
                    self.audio_interface.terminate()
                    self.audio_interface = None

    @staticmethod
    def list_devices() -> List[DeviceInfo]:
        """
        List all audio input devices.

        Raises:
            ConfigurationError: If PyAudio is not installed
        """
        pyaudio = _import_pyaudio()
        audio_interface = pyaudio.PyAudio()
        devices = []
        try:
            try:
                default_index = audio_interface.get_default_input_device_info()['index']
            except (IOError, OSError):
                default_index = None

            for i in range(audio_interface.get_device_count()):
                device_info = audio_interface.get_device_info_by_index(i)
                if int(device_info.get('maxInputChannels', 0)) <= 0:
                    continue

                try:
                    supported = bool(audio_interface.is_format_supported(
                        CAPTURE_SAMPLE_RATE,
                        input_device=i,
                        input_channels=CAPTURE_CHANNELS,
                        input_format=pyaudio.paInt16,
                    ))
                except ValueError:
                    supported = False

                devices.append(DeviceInfo.from_portaudio(device_info, default_index, supported))
        finally:
            audio_interface.terminate()

        return devices
