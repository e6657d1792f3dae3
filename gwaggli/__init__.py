"""
Gwaggli: speech-to-text transcription of audio files and live audio streams.

Audio sources publish chunks on an event bus; the streaming pipeline frames
them into overlapping windows and transcribes every frame.
"""

__version__ = "0.1.0"
