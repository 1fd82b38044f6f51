# tests/test_sink.py
import numpy as np

from audio.pcm import PCMBuffer
from audio.sink import SilentSink, to_mixer_array


def test_mono_to_stereo_int16():
    buf = PCMBuffer(44100, 1, np.array([1.0, -1.0, 0.5], dtype=np.float32))
    arr = to_mixer_array(buf, 2, gain=1.0)
    assert arr.dtype == np.int16
    assert arr.shape == (3, 2)
    assert arr[:, 0].tolist() == [32767, -32767, 16383]
    assert np.array_equal(arr[:, 0], arr[:, 1])


def test_clipping_and_gain():
    buf = PCMBuffer(44100, 1, np.array([2.0, -2.0, 0.0], dtype=np.float32))
    assert to_mixer_array(buf, 1, gain=1.0).tolist() == [32767, -32768, 0]
    half = PCMBuffer(44100, 1, np.array([1.0], dtype=np.float32))
    assert to_mixer_array(half, 1, gain=0.5).tolist() == [16383]


def test_stereo_to_mono_averages():
    buf = PCMBuffer(44100, 2, np.array([0.5, 0.0, -0.5, -0.5], dtype=np.float32))
    arr = to_mixer_array(buf, 1, gain=1.0)
    assert arr.ndim == 1
    assert arr.tolist() == [8191, -16383]


def test_silent_sink_accepts_anything():
    sink = SilentSink()
    assert sink.play(PCMBuffer(44100, 1, np.zeros(4, dtype=np.float32))) is None
    sink.stop_all()
    sink.close()
