# tests/test_mixer_sink.py
import gc
import os

os.environ["SDL_AUDIODRIVER"] = "dummy"

import numpy as np
import pygame
import pytest

from audio.errors import PlaybackDeviceError
from audio.pcm import PCMBuffer
from audio.sink import MixerSink, SilentSink, open_sink


def tone(rate: int = 44100, frames: int = 441) -> PCMBuffer:
    return PCMBuffer(rate, 1, np.linspace(-0.5, 0.5, frames, dtype=np.float32))


@pytest.fixture
def init_calls(monkeypatch):
    real_init = pygame.mixer.init
    calls = []

    def counting_init(*args, **kw):
        calls.append(kw.get("frequency"))
        return real_init(*args, **kw)

    monkeypatch.setattr(pygame.mixer, "init", counting_init)
    return calls


@pytest.fixture
def sink(init_calls):
    try:
        s = MixerSink(frequency=44100, voices=8)
    except PlaybackDeviceError as e:
        pytest.skip(f"SDL dummy audio unavailable: {e}")
    yield s
    s.close()


def test_sounds_cached_per_buffer(sink, init_calls):
    buf = tone()
    sink.play(buf)
    first = sink._sounds[buf]
    sink.play(buf)
    assert sink._sounds[buf] is first
    assert init_calls == [44100]

    del buf, first
    gc.collect()
    assert len(sink._sounds) == 0


def test_reopens_only_when_buffer_rate_changes(sink, init_calls):
    sink.play(tone(44100))
    sink.play(tone(22050))
    sink.play(tone(22050))
    assert init_calls == [44100, 22050]
    assert sink.frequency == 22050


def test_device_rate_does_not_force_reopen(monkeypatch):
    real_init = pygame.mixer.init
    calls = []

    def device_keeps_48k(*args, **kw):
        calls.append(kw.get("frequency"))
        return real_init(*args, **{**kw, "frequency": 48000})

    monkeypatch.setattr(pygame.mixer, "init", device_keeps_48k)
    try:
        s = MixerSink(frequency=44100, voices=8)
    except PlaybackDeviceError as e:
        pytest.skip(f"SDL dummy audio unavailable: {e}")
    try:
        buf = tone(44100)
        for _ in range(3):
            s.play(buf)
        assert calls == [44100]
        assert s.frequency == 44100
    finally:
        s.close()


def test_empty_buffer_plays_nothing(sink):
    assert sink.play(PCMBuffer(44100, 1, np.zeros(0, dtype=np.float32))) is None


def test_pygame_error_becomes_playback_device_error(sink, monkeypatch):
    def broken(arr):
        raise pygame.error("device lost")

    monkeypatch.setattr(pygame.sndarray, "make_sound", broken)
    with pytest.raises(PlaybackDeviceError, match="device lost"):
        sink.play(tone())


def test_open_sink_falls_back_to_silence(monkeypatch):
    def no_device(*args, **kw):
        raise pygame.error("no audio device")

    monkeypatch.setattr(pygame.mixer, "init", no_device)
    assert isinstance(open_sink(44100), SilentSink)
