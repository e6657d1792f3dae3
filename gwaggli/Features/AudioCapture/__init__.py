"""
Audio capture feature: audio chunk model and events, sources and the WAVE decoder.
"""

from .AudioCaptureModule import AudioCaptureModule
from .Events import AudioChunkCapturedEvent
from .Models import AudioChunk, DeviceInfo

__all__ = ['AudioCaptureModule', 'AudioChunk', 'AudioChunkCapturedEvent', 'DeviceInfo']
