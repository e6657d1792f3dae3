"""
RealtimeTranscriptionPipeline drives live transcription of an audio stream.

Two cooperative asyncio tasks share one SlidingWindow under an
asyncio.Condition:

- the feeder awaits audio chunk events from a bus subscription and pushes their
  samples into the window, notifying the condition after every push;
- the driver waits on the condition until a frame is ready, polls exactly one
  frame while holding the lock, releases it and hands the frame to the
  transcription engine in the default executor.

At any instant at most one of the two holds the window. Frames are
transcribed one at a time, in stream order.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from gwaggli.Core.Common.Interfaces.transcription_engine import ITranscriptionEngine
from gwaggli.Core.Common.errors import (
    BackendNotInitializedError,
    ChannelClosedError,
    FormatError,
    SubscriptionLaggedError,
    TranscriptionError,
)
from gwaggli.Core.Events.event_bus import EventPublisher, Subscription
from gwaggli.Features.AudioCapture.Events.AudioChunkCapturedEvent import AudioChunkCapturedEvent
from gwaggli.Features.AudioCapture.Models.AudioChunk import NANOS_PER_SECOND
from gwaggli.Features.Streaming.Framing.SlidingWindow import SlidingWindow
from gwaggli.Features.Transcription.Events.TranscriptionUpdatedEvent import TranscriptionUpdatedEvent
from gwaggli.Features.Transcription.Models.TranscriptionResult import TranscriptionResult
from gwaggli.Infrastructure.Configuration.AppConfig import StreamingConfig

logger = logging.getLogger(__name__)


@dataclass
class PipelineStats:
    """Counters describing one pipeline session."""

    chunks_received: int = 0
    chunks_rejected: int = 0
    events_missed: int = 0
    frames_transcribed: int = 0
    frames_failed: int = 0


class RealtimeTranscriptionPipeline:
    """
    Feeds audio chunks into a sliding window and transcribes each frame.

    A pipeline instance runs a single session; create a new one per stream.
    """

    def __init__(
            self,
            engine: ITranscriptionEngine,
            config: Optional[StreamingConfig] = None,
            on_result: Optional[Callable[[TranscriptionResult], None]] = None,
            publisher: Optional[EventPublisher] = None,
        ):
        """
        Args:
            engine: Loaded transcription engine
            config: Framing configuration
            on_result: Called on the event loop with every transcription result
            publisher: If given, a TranscriptionUpdatedEvent is published per result
        """
        self.engine = engine
        self.config = config or StreamingConfig()
        self.on_result = on_result
        self.publisher = publisher
        self.window = SlidingWindow(self.config.window_size, self.config.hop_size)
        self.stats = PipelineStats()

        self._condition: Optional[asyncio.Condition] = None
        self._ended = False
        self._stopped = False
        self._first_timestamp: Optional[int] = None
        self._backlog_warned = False

    @property
    def running(self) -> bool:
        return self._condition is not None and not (self._ended or self._stopped)

    async def run(self, subscription: Subscription) -> PipelineStats:
        """
        Transcribe the stream until it ends or stop() is called.

        The stream ends with a chunk flagged is_last or when the subscription
        reports the bus closed; every full frame still buffered is transcribed
        before returning.

        Raises:
            BackendNotInitializedError: If the engine is not loaded
            TranscriptionError: On the first failed frame when stop_on_error is set
        """
        if self._condition is not None:
            raise RuntimeError("Pipeline session already started")
        if not self.engine.is_ready:
            raise BackendNotInitializedError("Transcription engine is not loaded")

        self._condition = asyncio.Condition()
        logger.info(f"Pipeline started: window={self.config.window_size} hop={self.config.hop_size} "
                    f"samples at {self.config.sample_rate} Hz")

        feeder = asyncio.ensure_future(self._feed(subscription))
        try:
            await self._drive()
        finally:
            feeder.cancel()
            await asyncio.gather(feeder, return_exceptions=True)

        if not feeder.cancelled() and feeder.exception() is not None:
            raise feeder.exception()

        logger.info(f"Pipeline finished: {self.stats}")
        return self.stats

    async def stop(self) -> None:
        """Ask feeder and driver to finish; the frame in flight completes first."""
        self._stopped = True
        if self._condition is not None:
            async with self._condition:
                self._condition.notify_all()

    async def _feed(self, subscription: Subscription) -> None:
        try:
            while not self._stopped:
                try:
                    event = await subscription.recv()
                except SubscriptionLaggedError as e:
                    self.stats.events_missed += e.missed
                    logger.warning(f"Audio feed fell behind: {e}")
                    continue
                except ChannelClosedError:
                    logger.info("Audio stream closed")
                    break

                if not isinstance(event, AudioChunkCapturedEvent):
                    continue

                await self._push(event)
                if event.is_last:
                    logger.debug("Received last audio chunk")
                    break
        finally:
            async with self._condition:
                self._ended = True
                self._condition.notify_all()

    async def _push(self, event: AudioChunkCapturedEvent) -> None:
        chunk = event.audio_chunk
        self.stats.chunks_received += 1

        if event.sample_rate != self.config.sample_rate:
            self.stats.chunks_rejected += 1
            error = FormatError(
                f"Rejected chunk with sample rate {chunk.sample_rate}, expected {self.config.sample_rate}")
            logger.error(str(error))
            return

        async with self._condition:
            if self._first_timestamp is None:
                self._first_timestamp = chunk.timestamp
            self.window.push(chunk.samples)
            self._check_backlog()
            self._condition.notify_all()

    def _check_backlog(self) -> None:
        limit = self.config.backlog_warning_samples
        if limit is None:
            return
        backlog = self.window.pending
        if backlog > limit and not self._backlog_warned:
            self._backlog_warned = True
            logger.warning(f"Transcription is falling behind: {backlog} unread samples buffered "
                           f"({backlog / self.config.sample_rate:.1f}s)")
        elif backlog <= limit:
            self._backlog_warned = False

    def _has_work(self) -> bool:
        return self._stopped or self._ended or self.window.ready

    async def _drive(self) -> None:
        loop = asyncio.get_running_loop()

        while True:
            async with self._condition:
                await self._condition.wait_for(self._has_work)
                if self._stopped:
                    return
                frame = self.window.poll()
                if frame is None:
                    # Stream ended and the backlog holds no full frame
                    return
                frame_index = self.window.frames_emitted - 1

            try:
                text = await loop.run_in_executor(None, self.engine.transcribe_raw, frame)
            except TranscriptionError as e:
                self.stats.frames_failed += 1
                if self.config.stop_on_error:
                    raise
                logger.error(f"Failed to transcribe frame {frame_index}: {e}")
                continue

            self.stats.frames_transcribed += 1
            self._emit(self._result_for(frame_index, text))

    def _result_for(self, frame_index: int, text: str) -> TranscriptionResult:
        start_sample = frame_index * self.config.hop_size
        timestamp = (self._first_timestamp or 0) + start_sample * NANOS_PER_SECOND // self.config.sample_rate
        return TranscriptionResult(
            text=text,
            frame_index=frame_index,
            start_sample=start_sample,
            timestamp=timestamp,
        )

    def _emit(self, result: TranscriptionResult) -> None:
        logger.debug(f"Frame {result.frame_index}: {result.text!r}")

        if self.on_result is not None:
            self.on_result(result)

        if self.publisher is not None:
            try:
                self.publisher.publish(TranscriptionUpdatedEvent(result=result))
            except ChannelClosedError as e:
                logger.warning(f"Could not publish transcription result: {e}")
