# audio/pcm.py
from dataclasses import dataclass

import numpy as np


def _readonly(arr: np.ndarray) -> np.ndarray:
    arr = np.array(arr, dtype=np.float32, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, eq=False)
class PCMBuffer:
    """Decoded audio: interleaved float32 samples plus sample rate.

    The sample array is copied and frozen on construction, so a buffer can be
    handed to the mixer or another thread without anyone mutating it.
    """
    sample_rate: int
    channels: int
    samples: np.ndarray

    def __post_init__(self):
        if int(self.sample_rate) <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate!r}")
        if int(self.channels) < 1:
            raise ValueError(f"channels must be >= 1, got {self.channels!r}")
        samples = np.asarray(self.samples)
        if samples.ndim != 1:
            raise ValueError("samples must be a flat (interleaved) sequence")
        if len(samples) % int(self.channels):
            raise ValueError(
                f"{len(samples)} samples is not a multiple of {self.channels} channels")
        object.__setattr__(self, "sample_rate", int(self.sample_rate))
        object.__setattr__(self, "channels", int(self.channels))
        object.__setattr__(self, "samples", _readonly(samples))

    @classmethod
    def from_frames(cls, frames, sample_rate: int) -> "PCMBuffer":
        """Build from a (frames, channels) or 1-D mono array."""
        frames = np.asarray(frames, dtype=np.float32)
        if frames.ndim == 1:
            return cls(sample_rate, 1, frames)
        return cls(sample_rate, frames.shape[1], frames.reshape(-1))

    @classmethod
    def silence(cls, sample_rate: int, channels: int, frame_count: int) -> "PCMBuffer":
        return cls(sample_rate, channels, np.zeros(max(0, frame_count) * channels, dtype=np.float32))

    @property
    def frame_count(self) -> int:
        return len(self.samples) // self.channels

    @property
    def duration(self) -> float:
        return self.frame_count / self.sample_rate

    def frames(self) -> np.ndarray:
        return self.samples.reshape(-1, self.channels)

    def is_empty(self) -> bool:
        return self.frame_count == 0

    def is_silent(self) -> bool:
        return not np.any(self.samples)

    def __repr__(self):
        return (f"{type(self).__name__}(sample_rate={self.sample_rate}, "
                f"channels={self.channels}, frames={self.frame_count})")


@dataclass(frozen=True, eq=False, repr=False)
class BaseNote(PCMBuffer):
    """A PCMBuffer whose length is exactly ``target_duration`` worth of frames.

    ``midi_note`` is the pitch the unshifted sample is assigned to.
    Only audio.normalizer creates these.
    """
    target_duration: float = 1.0
    midi_note: int = 60
