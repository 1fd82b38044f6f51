# tests/conftest.py
import numpy as np
import pytest

from audio.pcm import PCMBuffer


class FakeSink:
    def __init__(self, fail: Exception = None):
        self.played = []
        self.fail = fail
        self.closed = False

    def play(self, buf):
        if self.fail is not None:
            raise self.fail
        self.played.append(buf)

    def stop_all(self):
        pass

    def close(self):
        self.closed = True


@pytest.fixture
def sink():
    return FakeSink()


def noise_clip(seconds: float, sample_rate: int = 44100, channels: int = 1, seed: int = 0) -> PCMBuffer:
    n = int(round(seconds * sample_rate))
    rng = np.random.default_rng(seed)
    return PCMBuffer(sample_rate, channels, rng.uniform(-0.5, 0.5, n * channels).astype(np.float32))
