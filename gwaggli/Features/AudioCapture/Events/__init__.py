from .AudioChunkCapturedEvent import AudioChunkCapturedEvent

__all__ = ['AudioChunkCapturedEvent']
