from .DeviceAudioSource import DeviceAudioSource
from .FileAudioSource import FileAudioSource
from .FixedAudioSource import FixedAudioSource

__all__ = ['DeviceAudioSource', 'FileAudioSource', 'FixedAudioSource']
