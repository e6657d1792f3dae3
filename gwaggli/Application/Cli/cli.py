"""
Command line interface for Gwaggli.

    gwaggli transcribe --input speech.wav --quality low
    gwaggli listen [--input speech.wav] [--window-seconds 10] [--hop-seconds 0.25]
    gwaggli devices
    gwaggli clear-cache
"""

import argparse
import asyncio
import dataclasses
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, init

from gwaggli import __version__
from gwaggli.Core.Common.errors import ConfigurationError, GwaggliError
from gwaggli.Core.Events.event_bus import EventBus
from gwaggli.Features.AudioCapture.AudioCaptureModule import AudioCaptureModule
from gwaggli.Features.Streaming.Pipeline.RealtimeTranscriptionPipeline import RealtimeTranscriptionPipeline
from gwaggli.Features.Streaming.StreamingModule import StreamingModule
from gwaggli.Features.Transcription.Models.WhisperModel import Quality
from gwaggli.Features.Transcription.TranscriptionModule import ENGINE_TYPES, TranscriptionModule
from gwaggli.Infrastructure.Configuration.AppConfig import AppConfig, StreamingConfig
from gwaggli.Infrastructure.Environment.paths import clear_cache
from gwaggli.Infrastructure.Logging.LoggingModule import LoggingModule, LogLevel

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gwaggli",
        description="Speech-to-text transcription of audio files and live microphone input")
    parser.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    parser.add_argument('--verbose', '-v', action='store_true', help="Show informational log messages")
    parser.add_argument('--debug', action='store_true', help="Show debug log messages")
    parser.add_argument('--log-file', type=str, default=None, help="Also write logs to this file")
    parser.add_argument('--cache-dir', type=Path, default=None,
                        help="Cache directory for downloaded models (default: platform cache dir)")

    subparsers = parser.add_subparsers(dest='command')

    transcribe = subparsers.add_parser('transcribe', help="Transcribes an audio file into text")
    transcribe.add_argument('--input', '-i', type=Path, required=True, help="Path to the wave file")
    _add_engine_arguments(transcribe)

    listen = subparsers.add_parser('listen', help="Transcribes live audio continuously")
    listen.add_argument('--input', '-i', type=Path, default=None,
                        help="Replay a wave file in real time instead of using the microphone")
    listen.add_argument('--device', type=int, default=None, help="Input device index (default device if omitted)")
    listen.add_argument('--window-seconds', type=float, default=None,
                        help="Length of each transcribed frame (default: 10)")
    listen.add_argument('--hop-seconds', type=float, default=None,
                        help="Advance between consecutive frames (default: 0.25)")
    _add_engine_arguments(listen)

    subparsers.add_parser('devices', help="Lists audio input devices")
    subparsers.add_parser('clear-cache', help="Clears local cache in the file system (f.e. downloaded models)")

    return parser


def _add_engine_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--quality', '-q', type=lambda value: Quality(value.lower()), default=None,
                        choices=list(Quality),
                        help="Quality of the transcription; higher takes more time to process (default: medium)")
    parser.add_argument('--engine', choices=ENGINE_TYPES, default="whisper", help="Transcription engine")


def _configure_logging(args) -> None:
    if args.debug:
        level = LogLevel.DEBUG
    elif args.verbose:
        level = LogLevel.INFO
    else:
        level = LogLevel.WARNING
    LoggingModule.initialize(
        console_level=level,
        file_enabled=args.log_file is not None,
        file_path=args.log_file or "logs/gwaggli.log",
    )


def _load_config(args) -> AppConfig:
    config = AppConfig.from_env()
    if args.cache_dir is not None:
        config.cache_root = args.cache_dir
    if getattr(args, 'quality', None) is not None:
        config.whisper.model = args.quality.model.value
    return config


def cmd_transcribe(args, config: AppConfig) -> int:
    print(f"Transcribing file with model {config.whisper.model}: {args.input}", file=sys.stderr)
    engine = TranscriptionModule.create_engine(args.engine, config)
    text = TranscriptionModule.transcribe_file(args.input, engine)
    print(text)
    return 0


def _streaming_config(args, config: AppConfig) -> StreamingConfig:
    """Apply --window-seconds and --hop-seconds on top of the configured streaming settings."""
    overrides = {}
    if args.window_seconds is not None:
        overrides['window_size'] = int(args.window_seconds * config.streaming.sample_rate)
    if args.hop_seconds is not None:
        overrides['hop_size'] = int(args.hop_seconds * config.streaming.sample_rate)
    if not overrides:
        return config.streaming
    try:
        return dataclasses.replace(config.streaming, **overrides)
    except ValueError as e:
        raise ConfigurationError(f"Invalid window or hop length: {e}") from e


def cmd_listen(args, config: AppConfig) -> int:
    streaming = _streaming_config(args, config)
    config.streaming = streaming

    engine = TranscriptionModule.create_engine(args.engine, config)
    engine.load()

    def print_result(result):
        print(result.text, flush=True)

    with AudioCaptureModule.create_source(input_file=args.input, device_id=args.device,
                                          sample_rate=streaming.sample_rate) as source:
        bus = EventBus(capacity=streaming.bus_capacity)
        pipeline = RealtimeTranscriptionPipeline(engine, streaming, on_result=print_result,
                                                 publisher=bus.publisher())
        stats = asyncio.run(_listen(source, engine, streaming, bus, pipeline))

    logger.info(f"Transcribed {stats.frames_transcribed} frames ({stats.frames_failed} failed)")
    return 0


async def _listen(source, engine, streaming, bus, pipeline):
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, lambda: asyncio.ensure_future(pipeline.stop()))
    except (NotImplementedError, RuntimeError, ValueError):
        # Not available on Windows or outside the main thread; Ctrl+C then raises KeyboardInterrupt
        logger.debug("Could not install SIGINT handler")
    return await StreamingModule.transcribe_stream(source, engine, streaming, event_bus=bus, pipeline=pipeline)


def cmd_devices(args, config: AppConfig) -> int:
    init()  # Initialize colorama
    devices = AudioCaptureModule.list_devices()
    if not devices:
        print("No audio input devices found")
        return 1

    print("Available audio input devices:")
    for device in devices:
        marker = f" {Fore.YELLOW}(default){Style.RESET_ALL}" if device.is_default else ""
        capture = (f"{Fore.CYAN}16 kHz mono{Style.RESET_ALL}" if device.supports_capture_format
                   else f"{Fore.RED}unsupported format{Style.RESET_ALL}")
        print(f"{Fore.LIGHTGREEN_EX}Device {Style.RESET_ALL}{device.id}{Fore.LIGHTGREEN_EX}: "
              f"{device.name}{Style.RESET_ALL}{marker} - {capture}")
    return 0


def cmd_clear_cache(args, config: AppConfig) -> int:
    clear_cache(config.cache_paths)
    print("Cache cleared.")
    return 0


COMMANDS = {
    'transcribe': cmd_transcribe,
    'listen': cmd_listen,
    'devices': cmd_devices,
    'clear-cache': cmd_clear_cache,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    _configure_logging(args)

    try:
        config = _load_config(args)
        return COMMANDS[args.command](args, config)
    except (GwaggliError, FileNotFoundError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
