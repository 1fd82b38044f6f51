# tests/test_keymap.py
import json

import pygame
import pytest

from input.keymap import DEFAULT_KEYMAP, deserialize_keymap, load_keymap, serialize_keymap


def test_default_keymap_covers_one_octave_from_middle_c():
    assert sorted(DEFAULT_KEYMAP.values()) == list(range(60, 73))


def test_numeric_key_names():
    assert deserialize_keymap({"97": 60, "119": "61"}) == {97: 60, 119: 61}


def test_keymap_must_be_object():
    with pytest.raises(ValueError):
        deserialize_keymap([["a", 60]])


def test_load_keymap_file(tmp_path):
    path = tmp_path / "keys.json"
    path.write_text(json.dumps({"100": 64}), encoding="utf-8")
    assert load_keymap(str(path)) == {100: 64}


def test_digit_keys_survive_save_and_load():
    kmap = {pygame.K_1: 60, pygame.K_a: 62}
    saved = serialize_keymap(kmap)
    assert saved["1"] == 60
    assert deserialize_keymap(saved) == kmap


def test_unknown_key_name_rejected():
    with pytest.raises(ValueError):
        deserialize_keymap({"not-a-key": 60})
