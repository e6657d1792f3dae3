"""
Sliding-window framer.

Turns variably sized chunks into fixed-size, overlapping frames. Frame k
covers positions [k * hop_size, k * hop_size + window_size) of the
concatenated input, so consecutive frames overlap by window_size - hop_size
samples.

The framer is not thread-safe; callers that push and poll from different
tasks must hold a shared lock around both.
"""

from typing import Iterator, Optional

import numpy as np


class SlidingWindow:
    """
    Buffer that emits a window_size frame every time hop_size new samples
    have accumulated beyond the first window.

    Attributes:
        window_size: Length of every emitted frame
        hop_size: Samples the window advances between frames
    """

    def __init__(self, window_size: int, hop_size: int, dtype=np.float32):
        if window_size < 1:
            raise ValueError(f"Window size must be at least 1, got {window_size}")
        if not 0 < hop_size <= window_size:
            raise ValueError(f"Hop size must be between 1 and window size {window_size}, got {hop_size}")

        self.window_size = window_size
        self.hop_size = hop_size
        self.dtype = np.dtype(dtype)
        self._buffer = np.empty(0, dtype=self.dtype)
        self._pending = 0
        self.frames_emitted = 0
        self.samples_consumed = 0

    @property
    def pending(self) -> int:
        """Samples available since the last emission."""
        return self._pending

    @property
    def buffered(self) -> int:
        return len(self._buffer)

    @property
    def ready(self) -> bool:
        return self._pending >= self.window_size

    @property
    def overlap(self) -> int:
        return self.window_size - self.hop_size

    def push(self, samples) -> None:
        """Append samples to the buffer tail."""
        data = np.asarray(samples, dtype=self.dtype).ravel()
        if data.size == 0:
            return
        self._buffer = np.concatenate((self._buffer, data))
        self._pending += data.size

    def poll(self) -> Optional[np.ndarray]:
        """
        Emit the next frame if one is ready.

        Returns:
            Optional[np.ndarray]: A window_size frame, or None (state untouched)
            when fewer than window_size samples are pending
        """
        if self._pending < self.window_size:
            return None

        frame = self._buffer[:self.window_size].copy()
        self._buffer = self._buffer[self.hop_size:]
        self._pending -= self.hop_size
        self.frames_emitted += 1
        self.samples_consumed += self.hop_size
        return frame

    def drain(self) -> Iterator[np.ndarray]:
        """Yield every frame that is ready from the current backlog."""
        frame = self.poll()
        while frame is not None:
            yield frame
            frame = self.poll()

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        return (f"SlidingWindow(window_size={self.window_size}, hop_size={self.hop_size}, "
                f"pending={self._pending})")
