import asyncio
import logging
from typing import Callable, Optional

from gwaggli.Core.Common.Interfaces.audio_source import IAudioSource
from gwaggli.Core.Common.Interfaces.transcription_engine import ITranscriptionEngine
from gwaggli.Core.Events.event_bus import EventBus
from gwaggli.Features.AudioCapture.Events.AudioChunkCapturedEvent import AudioChunkCapturedEvent
from gwaggli.Features.Streaming.Pipeline.RealtimeTranscriptionPipeline import (
    PipelineStats,
    RealtimeTranscriptionPipeline,
)
from gwaggli.Features.Transcription.Models.TranscriptionResult import TranscriptionResult
from gwaggli.Infrastructure.Configuration.AppConfig import StreamingConfig

logger = logging.getLogger(__name__)


class StreamingModule:
    """
    Module that wires an audio source, the event bus and the transcription
    pipeline together for live transcription.
    """

    @staticmethod
    async def transcribe_stream(
            source: IAudioSource,
            engine: ITranscriptionEngine,
            config: Optional[StreamingConfig] = None,
            on_result: Optional[Callable[[TranscriptionResult], None]] = None,
            event_bus: Optional[EventBus] = None,
            pipeline: Optional[RealtimeTranscriptionPipeline] = None,
        ) -> PipelineStats:
        """
        Run live transcription of `source` until its stream ends.

        The subscription is created before the source starts producing so no
        chunk is missed. The source's produce() runs in the default executor,
        so both callback-driven and blocking sources work.

        Args:
            source: Audio source to transcribe
            engine: Loaded transcription engine
            config: Framing configuration
            on_result: Called with every transcription result
            event_bus: Bus to use; a private bus is created if omitted
            pipeline: Pre-built pipeline (e.g. to call stop() on it from elsewhere)

        Returns:
            PipelineStats: Counters of the finished session
        """
        config = config or StreamingConfig()
        bus = event_bus or EventBus(capacity=config.bus_capacity)
        if pipeline is None:
            pipeline = RealtimeTranscriptionPipeline(engine, config, on_result=on_result, publisher=bus.publisher())

        loop = asyncio.get_running_loop()
        subscription = bus.subscribe(AudioChunkCapturedEvent)

        producing = loop.run_in_executor(None, source.produce, bus.publisher())

        def _on_produced(future):
            if not future.cancelled() and future.exception() is not None:
                logger.error(f"Audio source failed: {future.exception()}")
                asyncio.ensure_future(pipeline.stop())

        producing.add_done_callback(_on_produced)

        try:
            stats = await pipeline.run(subscription)
        finally:
            subscription.close()

        if producing.done() and not producing.cancelled() and producing.exception() is not None:
            raise producing.exception()
        return stats
