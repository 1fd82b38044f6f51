# audio/normalizer.py
import logging
import warnings

import numpy as np

from audio.errors import EmptyClipWarning
from audio.pcm import PCMBuffer, BaseNote

TARGET_DURATION = 1.0  # seconds


def target_frames(sample_rate: int, target_duration: float = TARGET_DURATION) -> int:
    return max(0, int(round(sample_rate * target_duration)))


def normalize(buf: PCMBuffer, target_duration: float = TARGET_DURATION,
              midi_note: int = 60) -> BaseNote:
    """Cut or pad *buf* to exactly ``target_duration`` seconds.

    Longer clips are hard-truncated (no fade), shorter ones get trailing
    zeros. Sample rate and channel count are never touched.
    """
    n = target_frames(buf.sample_rate, target_duration)
    ch = buf.channels
    have = buf.frame_count

    if have == 0:
        msg = f"empty clip, base note is {target_duration:.3f}s of silence"
        logging.warning(msg)
        warnings.warn(msg, EmptyClipWarning, stacklevel=2)
        samples = np.zeros(n * ch, dtype=np.float32)
    elif have == n:
        samples = buf.samples
    elif have > n:
        samples = buf.samples[: n * ch]
    else:
        samples = np.zeros(n * ch, dtype=np.float32)
        samples[: len(buf.samples)] = buf.samples

    return BaseNote(buf.sample_rate, ch, samples,
                    target_duration=float(target_duration), midi_note=int(midi_note))
