from .AudioChunk import AudioChunk
from .DeviceInfo import DeviceInfo

__all__ = ['AudioChunk', 'DeviceInfo']
