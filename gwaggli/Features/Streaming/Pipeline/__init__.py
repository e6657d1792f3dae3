from .RealtimeTranscriptionPipeline import PipelineStats, RealtimeTranscriptionPipeline

__all__ = ['PipelineStats', 'RealtimeTranscriptionPipeline']
