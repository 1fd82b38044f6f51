# tests/test_instrument.py
import pytest

from audio.normalizer import normalize
from audio.pitch import map_instrument
from instrument.instrument import Instrument
from keys.layout import build_layout
from conftest import noise_clip


def test_voices_must_match_layout():
    layout = build_layout(60, 62)
    base = normalize(noise_clip(0.1), 0.1)
    with pytest.raises(ValueError):
        Instrument(layout=layout, base=base, voices={60: base, 61: base})


def test_voices_are_read_only():
    layout = build_layout(60, 62)
    inst = map_instrument(normalize(noise_clip(0.1), 0.1), layout)
    assert list(inst) == [60, 61, 62]
    assert 61 in inst and 63 not in inst
    assert inst.get(63) is None
    with pytest.raises(TypeError):
        inst.voices[63] = inst[60]
