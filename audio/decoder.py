# audio/decoder.py
import os
from typing import Optional

import numpy as np
import soundfile as sf

from audio.errors import DecodeError
from audio.normalizer import target_frames
from audio.pcm import PCMBuffer


def decode_file(path: str, max_duration: Optional[float] = None) -> PCMBuffer:
    """Decode *path* with libsndfile into a float32 PCMBuffer.

    Only the first ``max_duration`` seconds are read when given; the rest of
    a long file is never decoded.
    """
    if not os.path.isfile(path):
        raise DecodeError(f"failed to open selected file: {path}")
    try:
        with sf.SoundFile(path) as f:
            sr, ch = f.samplerate, f.channels
            frames = -1 if max_duration is None else target_frames(sr, max_duration)
            data = f.read(frames=frames, dtype="float32", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, TypeError, OSError) as e:
        raise DecodeError(f"could not decode {os.path.basename(path)}: {e}") from e

    if sr <= 0 or ch <= 0:
        raise DecodeError(f"{os.path.basename(path)}: missing sample rate or channel information")
    return PCMBuffer(sr, ch, np.ascontiguousarray(data).reshape(-1))
