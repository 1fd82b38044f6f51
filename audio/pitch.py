# audio/pitch.py
"""Pitch mapping by resampling.

Every key gets its own copy of the base note, played faster or slower by
``2 ** (offset / 12)``. The sample rate reported to the sink is left alone,
so a key an octave up is literally half as long and an octave down twice as
long. Samples in between source frames are linearly interpolated; reads
past the last frame are silence.
"""
from typing import Callable, Optional

import numpy as np

from audio.errors import BuildCancelled
from audio.pcm import PCMBuffer, BaseNote
from instrument.instrument import Instrument
from keys.layout import KeyboardLayout


def semitone_ratio(offset: int) -> float:
    return 2.0 ** (offset / 12.0)


def output_frames(frame_count: int, offset: int) -> int:
    return int(round(frame_count / semitone_ratio(offset)))


def resample_linear(frames: np.ndarray, ratio: float, out_n: int) -> np.ndarray:
    """Read *frames* (n, channels) at positions ``i * ratio`` for ``i < out_n``."""
    n, ch = frames.shape
    if out_n <= 0:
        return np.zeros((0, ch), dtype=np.float32)
    # one trailing row of silence: anything past the end reads from it
    padded = np.vstack([frames.astype(np.float64), np.zeros((1, ch))])

    pos = np.arange(out_n, dtype=np.float64) * ratio
    idx = np.floor(pos).astype(np.int64)
    frac = (pos - idx)[:, None]
    i0 = np.minimum(idx, n)
    i1 = np.minimum(idx + 1, n)

    out = padded[i0] * (1.0 - frac) + padded[i1] * frac
    return out.astype(np.float32)


def shift(base: PCMBuffer, offset: int) -> PCMBuffer:
    if offset == 0:
        return PCMBuffer(base.sample_rate, base.channels, base.samples)
    ratio = semitone_ratio(offset)
    out = resample_linear(base.frames(), ratio, output_frames(base.frame_count, offset))
    return PCMBuffer(base.sample_rate, base.channels, out.reshape(-1))


def map_instrument(base: BaseNote, layout: KeyboardLayout,
                   cancelled: Optional[Callable[[], bool]] = None) -> Instrument:
    voices = {}
    for key in layout:
        if cancelled is not None and cancelled():
            raise BuildCancelled(f"stopped before key {key.key_id}")
        voices[key.key_id] = shift(base, key.semitone_offset)
    return Instrument(layout=layout, base=base, voices=voices)
