"""
Tests for the sliding-window framer.
"""

import os
import sys
import unittest

import numpy as np

# Add project root to path so we can import the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../..')))

from gwaggli.Features.Streaming.Framing.SlidingWindow import SlidingWindow


class SlidingWindowTest(unittest.TestCase):
    """Tests for SlidingWindow push/poll semantics"""

    def test_half_overlapping_frames(self):
        """W=10, F=5 over 0..19 gives frames [0..9], [5..14], [10..19]"""
        window = SlidingWindow(window_size=10, hop_size=5)
        window.push(np.arange(20, dtype=np.float32))

        frames = list(window.drain())

        self.assertEqual(len(frames), 3)
        np.testing.assert_array_equal(frames[0], np.arange(0, 10))
        np.testing.assert_array_equal(frames[1], np.arange(5, 15))
        np.testing.assert_array_equal(frames[2], np.arange(10, 20))
        self.assertEqual(window.pending, 5)
        self.assertIsNone(window.poll())

    def test_constant_valued_chunks(self):
        """Ten chunks of ten samples, chunk i filled with i"""
        window = SlidingWindow(window_size=10, hop_size=5)
        frames = []
        for i in range(10):
            window.push(np.full(10, i, dtype=np.float32))
            frames.extend(window.drain())

        np.testing.assert_array_equal(frames[0], [0] * 10)
        np.testing.assert_array_equal(frames[1], [0] * 5 + [1] * 5)
        np.testing.assert_array_equal(frames[2], [1] * 10)
        np.testing.assert_array_equal(frames[3], [1] * 5 + [2] * 5)
        self.assertEqual(len(frames), 19)

    def test_not_ready_leaves_state_untouched(self):
        """poll() returns None until a full window is pending"""
        window = SlidingWindow(window_size=10, hop_size=5)
        window.push(np.ones(9, dtype=np.float32))

        self.assertFalse(window.ready)
        self.assertIsNone(window.poll())
        self.assertEqual(window.pending, 9)
        self.assertEqual(window.frames_emitted, 0)

        window.push(np.ones(1, dtype=np.float32))
        self.assertTrue(window.ready)
        self.assertEqual(len(window.poll()), 10)

    def test_frame_count_for_arbitrary_chunking(self):
        """Total frames equal floor((N - W) / F) + 1 regardless of chunk sizes"""
        rng = np.random.default_rng(42)
        window_size, hop_size = 64, 16
        total = 1000
        signal = np.arange(total, dtype=np.float32)

        window = SlidingWindow(window_size, hop_size)
        frames = []
        position = 0
        while position < total:
            size = int(rng.integers(1, 50))
            window.push(signal[position:position + size])
            position += size
            frames.extend(window.drain())

        self.assertEqual(len(frames), (total - window_size) // hop_size + 1)
        for k, frame in enumerate(frames):
            np.testing.assert_array_equal(frame, signal[k * hop_size:k * hop_size + window_size])

    def test_consecutive_frames_overlap(self):
        """The tail of frame k equals the head of frame k+1 over W - F samples"""
        window = SlidingWindow(window_size=8, hop_size=3)
        window.push(np.arange(30, dtype=np.float32))

        frames = list(window.drain())

        self.assertEqual(window.overlap, 5)
        for current, following in zip(frames, frames[1:]):
            np.testing.assert_array_equal(current[3:], following[:5])

    def test_hop_equal_to_window(self):
        """F == W yields disjoint frames"""
        window = SlidingWindow(window_size=4, hop_size=4)
        window.push(np.arange(8, dtype=np.float32))

        frames = list(window.drain())

        np.testing.assert_array_equal(frames[0], [0, 1, 2, 3])
        np.testing.assert_array_equal(frames[1], [4, 5, 6, 7])
        self.assertEqual(window.pending, 0)

    def test_counters(self):
        """frames_emitted and samples_consumed advance per frame"""
        window = SlidingWindow(window_size=10, hop_size=5)
        window.push(np.zeros(20, dtype=np.float32))
        list(window.drain())

        self.assertEqual(window.frames_emitted, 3)
        self.assertEqual(window.samples_consumed, 15)
        self.assertEqual(window.buffered, 5)

    def test_frames_are_copies(self):
        """Emitted frames do not alias the internal buffer"""
        window = SlidingWindow(window_size=4, hop_size=2)
        window.push(np.zeros(6, dtype=np.float32))

        first = window.poll()
        first[:] = 1.0

        np.testing.assert_array_equal(window.poll(), np.zeros(4))

    def test_empty_push(self):
        """Pushing nothing changes nothing"""
        window = SlidingWindow(window_size=4, hop_size=2)
        window.push(np.zeros(0, dtype=np.float32))
        self.assertEqual(window.pending, 0)

    def test_invalid_sizes(self):
        """Hop size must be in (0, window_size]"""
        with self.assertRaises(ValueError):
            SlidingWindow(window_size=0, hop_size=1)
        with self.assertRaises(ValueError):
            SlidingWindow(window_size=4, hop_size=0)
        with self.assertRaises(ValueError):
            SlidingWindow(window_size=4, hop_size=5)


if __name__ == "__main__":
    unittest.main()
