# tests/test_normalizer.py
import numpy as np
import pytest

from audio.errors import EmptyClipWarning
from audio.normalizer import normalize, target_frames
from audio.pcm import BaseNote, PCMBuffer
from conftest import noise_clip


def test_short_clip_is_padded_with_silence():
    clip = noise_clip(0.3)
    base = normalize(clip, 1.0)
    assert isinstance(base, BaseNote)
    assert base.frame_count == 44100
    assert np.array_equal(base.samples[:13230], clip.samples)
    assert not np.any(base.samples[13230:])
    assert base.sample_rate == 44100 and base.channels == 1


def test_long_clip_is_truncated():
    clip = noise_clip(1.5, channels=2)
    base = normalize(clip, 1.0)
    assert base.frame_count == 44100
    assert base.channels == 2
    assert np.array_equal(base.samples, clip.samples[: 44100 * 2])


def test_exact_length_passes_through():
    clip = noise_clip(1.0, sample_rate=22050)
    base = normalize(clip, 1.0, midi_note=62)
    assert np.array_equal(base.samples, clip.samples)
    assert base.midi_note == 62
    assert base.target_duration == 1.0


def test_empty_clip_becomes_silence():
    with pytest.warns(EmptyClipWarning):
        base = normalize(PCMBuffer(48000, 2, np.zeros(0, dtype=np.float32)), 1.0)
    assert base.frame_count == 48000
    assert len(base.samples) == 96000
    assert base.is_silent()


def test_target_frames_rounds():
    assert target_frames(44100, 0.5) == 22050
    assert normalize(noise_clip(0.2, sample_rate=8000), 0.25).frame_count == 2000
