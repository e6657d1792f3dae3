from pathlib import Path
from typing import List, Optional, Union

from gwaggli.Core.Common.Interfaces.audio_source import IAudioSource
from gwaggli.Features.AudioCapture.Models.DeviceInfo import DeviceInfo
from gwaggli.Features.AudioCapture.Sources.DeviceAudioSource import DeviceAudioSource
from gwaggli.Features.AudioCapture.Sources.FileAudioSource import FileAudioSource


class AudioCaptureModule:
    """
    Module that provides audio capture functionality.

    This module encapsulates the construction of audio sources so callers pick
    a transport-agnostic IAudioSource without knowing the concrete classes.
    """

    @staticmethod
    def create_source(
            input_file: Optional[Union[str, Path]] = None,
            device_id: Optional[int] = None,
            sample_rate: int = 16000,
            chunk_size: int = 512,
        ) -> IAudioSource:
        """
        Create an audio source.

        Args:
            input_file: Replay this WAVE file in real time instead of capturing
            device_id: Device index to capture from (None for default)
            sample_rate: Sample rate of published chunks in Hz
            chunk_size: Samples per chunk

        Returns:
            IAudioSource: File-backed source if input_file is given, otherwise device-backed

        Raises:
            ConfigurationError: If no suitable capture device exists
            FormatError: If the input file cannot be decoded
        """
        if input_file is not None:
            return FileAudioSource(
                input_file,
                target_samplerate=sample_rate,
                chunk_size=chunk_size,
                realtime=True,
            )
        return DeviceAudioSource(
            input_device_index=device_id,
            sample_rate=sample_rate,
            chunk_size=chunk_size,
        )

    @staticmethod
    def list_devices() -> List[DeviceInfo]:
        """
        Helper method to list available audio input devices.

        Returns:
            List[DeviceInfo]: Input-capable devices
        """
        return DeviceAudioSource.list_devices()
