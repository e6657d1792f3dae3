"""
Tests for the transcription engines, model descriptions and the batch
transcription path.

The Whisper backend itself is not loaded; a stand-in model object is
injected so the engine's own behaviour can be checked without weights.
"""

import os
import struct
import sys
import tempfile
import unittest
from collections import namedtuple

import numpy as np

# Add project root to path so we can import the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../..')))

from gwaggli.Core.Common.errors import (
    BackendNotInitializedError,
    ConfigurationError,
    FormatError,
    TranscriptionError,
    UnsupportedChannelCountError,
    UnsupportedSampleRateError,
)
from gwaggli.Features.AudioCapture.Decoders.RiffWave import RiffWave
from gwaggli.Features.Transcription.Engines.FakeTranscriptionEngine import FakeTranscriptionEngine
from gwaggli.Features.Transcription.Engines.FasterWhisperEngine import FasterWhisperEngine
from gwaggli.Features.Transcription.Models.WhisperModel import Quality, WhisperModel
from gwaggli.Features.Transcription.TranscriptionModule import TranscriptionModule
from gwaggli.Infrastructure.Configuration.AppConfig import AppConfig, WhisperConfig
from gwaggli.Infrastructure.Environment.downloader import ModelDownloader
from gwaggli.Infrastructure.Environment.paths import CachePaths

Segment = namedtuple('Segment', ['text'])


def make_wave_bytes(num_samples, sample_rate=16000, channels=1):
    data = np.zeros(num_samples * channels, dtype='<i2').tobytes()
    fmt = struct.pack('<HHIIHH', 1, channels, sample_rate, sample_rate * 2 * channels, 2 * channels, 16)
    body = b'WAVE' + b'fmt ' + struct.pack('<I', len(fmt)) + fmt + b'data' + struct.pack('<I', len(data)) + data
    return b'RIFF' + struct.pack('<I', len(body)) + body


class StubWhisperModel:
    """Stands in for faster_whisper.WhisperModel."""

    def __init__(self, segments=None, error=None):
        self.segments = segments or []
        self.error = error
        self.kwargs = None

    def transcribe(self, audio, **kwargs):
        if self.error is not None:
            raise self.error
        self.kwargs = kwargs
        return iter(self.segments), None


class FakeTranscriptionEngineTest(unittest.TestCase):
    """Tests for FakeTranscriptionEngine and the shared transcribe() checks"""

    def test_reports_input_length(self):
        engine = FakeTranscriptionEngine()
        text = engine.transcribe_raw(np.zeros(1234, dtype=np.float32))
        self.assertEqual(text, "No real transcription, but returning some data. Length=1234")
        self.assertEqual(engine.calls, 1)

    def test_requires_load(self):
        engine = FakeTranscriptionEngine(auto_load=False)
        self.assertFalse(engine.is_ready)
        with self.assertRaises(BackendNotInitializedError):
            engine.transcribe_raw(np.zeros(10, dtype=np.float32))
        engine.load()
        self.assertTrue(engine.is_ready)

    def test_transcribe_accepts_16khz_mono(self):
        wave = RiffWave.from_bytes(make_wave_bytes(160))
        self.assertTrue(FakeTranscriptionEngine().transcribe(wave).endswith("Length=160"))

    def test_transcribe_rejects_other_rates(self):
        wave = RiffWave.from_bytes(make_wave_bytes(80, sample_rate=8000))
        with self.assertRaises(UnsupportedSampleRateError) as context:
            FakeTranscriptionEngine().transcribe(wave)
        self.assertEqual(context.exception.sample_rate, 8000)

    def test_transcribe_rejects_stereo(self):
        wave = RiffWave.from_bytes(make_wave_bytes(160, channels=2))
        with self.assertRaises(UnsupportedChannelCountError):
            FakeTranscriptionEngine().transcribe(wave)


class FasterWhisperEngineTest(unittest.TestCase):
    """Tests for FasterWhisperEngine around an injected model"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        downloader = ModelDownloader(CachePaths(self.tmp.name))
        self.engine = FasterWhisperEngine(WhisperConfig(model="tiny.en", language="en"), downloader)

    def tearDown(self):
        self.tmp.cleanup()

    def test_not_ready_before_load(self):
        self.assertFalse(self.engine.is_ready)
        with self.assertRaises(BackendNotInitializedError):
            self.engine.transcribe_raw(np.zeros(16000, dtype=np.float32))

    def test_segments_are_joined(self):
        model = StubWhisperModel(segments=[Segment(" Hello"), Segment(" world.")])
        self.engine.model = model

        text = self.engine.transcribe_raw(np.zeros(16000, dtype=np.float32))

        self.assertEqual(text, " Hello world.")
        self.assertEqual(model.kwargs['language'], "en")
        self.assertEqual(model.kwargs['beam_size'], 5)

    def test_empty_input(self):
        self.engine.model = StubWhisperModel(error=RuntimeError("should not be called"))
        self.assertEqual(self.engine.transcribe_raw(np.zeros(0, dtype=np.float32)), "")

    def test_backend_errors_are_wrapped(self):
        self.engine.model = StubWhisperModel(error=RuntimeError("out of memory"))
        with self.assertRaises(TranscriptionError):
            self.engine.transcribe_raw(np.zeros(16000, dtype=np.float32))

    def test_unknown_model(self):
        with self.assertRaises(ConfigurationError):
            FasterWhisperEngine(WhisperConfig(model="gigantic"), ModelDownloader(CachePaths(self.tmp.name)))


class WhisperModelTest(unittest.TestCase):
    """Tests for model names and quality mapping"""

    def test_quality_mapping(self):
        self.assertEqual(Quality.Low.model, WhisperModel.Tiny)
        self.assertEqual(Quality.Medium.model, WhisperModel.Medium)
        self.assertEqual(Quality.High.model, WhisperModel.Large)

    def test_repository_names(self):
        self.assertEqual(WhisperModel.Tiny.repo_id, "Systran/faster-whisper-tiny.en")
        self.assertEqual(WhisperModel.Large.model_name, "faster-whisper-large-v3")

    def test_from_name(self):
        self.assertEqual(WhisperModel.from_name("medium"), WhisperModel.Medium)
        self.assertEqual(WhisperModel.from_name("Large"), WhisperModel.Large)
        self.assertEqual(WhisperModel.from_name("large-v3"), WhisperModel.Large)


class TranscriptionModuleTest(unittest.TestCase):
    """Tests for engine creation and file transcription"""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "speech.wav")

    def tearDown(self):
        self.tmp.cleanup()

    def test_create_engines(self):
        config = AppConfig(cache_root=self.tmp.name)
        self.assertIsInstance(TranscriptionModule.create_engine("fake", config), FakeTranscriptionEngine)
        self.assertIsInstance(TranscriptionModule.create_engine("whisper", config), FasterWhisperEngine)
        with self.assertRaises(ValueError):
            TranscriptionModule.create_engine("other", config)

    def test_transcribe_file_loads_engine(self):
        with open(self.path, 'wb') as f:
            f.write(make_wave_bytes(16000))
        engine = FakeTranscriptionEngine(auto_load=False)

        text = TranscriptionModule.transcribe_file(self.path, engine)

        self.assertTrue(engine.is_ready)
        self.assertEqual(text, "No real transcription, but returning some data. Length=16000")

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            TranscriptionModule.transcribe_file(os.path.join(self.tmp.name, "missing.wav"),
                                                FakeTranscriptionEngine())

    def test_invalid_file(self):
        with open(self.path, 'wb') as f:
            f.write(b'RIFF')
        with self.assertRaises(FormatError):
            TranscriptionModule.transcribe_file(self.path, FakeTranscriptionEngine())


if __name__ == "__main__":
    unittest.main()
