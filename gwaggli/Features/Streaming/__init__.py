"""
Streaming feature: sliding-window framing and the live transcription pipeline.
"""

from .Framing.SlidingWindow import SlidingWindow
from .Pipeline.RealtimeTranscriptionPipeline import PipelineStats, RealtimeTranscriptionPipeline
from .StreamingModule import StreamingModule

__all__ = ['PipelineStats', 'RealtimeTranscriptionPipeline', 'SlidingWindow', 'StreamingModule']
