# tests/test_tone.py
import numpy as np
import pytest

from audio.tone import generate_tone


def test_tone_is_deterministic_and_one_second():
    a = generate_tone()
    b = generate_tone()
    assert a.samples.tobytes() == b.samples.tobytes()
    assert a.frame_count == 44100 and a.channels == 1
    assert a.samples[0] == 0.0
    assert np.max(np.abs(a.samples)) == pytest.approx(0.3, abs=1e-6)


def test_tone_respects_rate_and_duration():
    t = generate_tone(sample_rate=8000, duration=0.5)
    assert t.sample_rate == 8000
    assert t.frame_count == 4000
