# ========================= keys/layout.py =========================
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

WHITE_SET = {0, 2, 4, 5, 7, 9, 11}
NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

PIANO_START_MIDI = 48  # C3
PIANO_END_MIDI = 72    # C5
BASE_MIDI_NOTE = 60    # C4


def midi_is_black(p: int) -> bool:
    return (p % 12) not in WHITE_SET


def note_name(midi: int) -> str:
    return f"{NOTE_NAMES[midi % 12]}{midi // 12 - 1}"


@dataclass(frozen=True)
class KeyDefinition:
    key_id: int           # MIDI note number
    is_black: bool
    semitone_offset: int  # distance from the layout reference key

    @property
    def name(self) -> str:
        return note_name(self.key_id)


@dataclass(frozen=True)
class KeyboardLayout:
    """Ordered, read-only set of piano keys around a reference key."""
    keys: Tuple[KeyDefinition, ...]
    reference: int

    def __iter__(self) -> Iterator[KeyDefinition]:
        return iter(self.keys)

    def __len__(self):
        return len(self.keys)

    def __contains__(self, key_id) -> bool:
        return self.get(key_id) is not None

    def get(self, key_id) -> Optional[KeyDefinition]:
        for k in self.keys:
            if k.key_id == key_id:
                return k
        return None

    def offset_for(self, key_id: int) -> int:
        k = self.get(key_id)
        if k is None:
            raise KeyError(key_id)
        return k.semitone_offset

    def key_ids(self) -> list[int]:
        return [k.key_id for k in self.keys]

    def white_keys(self) -> list[KeyDefinition]:
        return [k for k in self.keys if not k.is_black]

    def black_keys(self) -> list[KeyDefinition]:
        return [k for k in self.keys if k.is_black]

    @property
    def first(self) -> int:
        return self.keys[0].key_id

    @property
    def last(self) -> int:
        return self.keys[-1].key_id


def build_layout(first: int = PIANO_START_MIDI, last: int = PIANO_END_MIDI,
                 reference: int = BASE_MIDI_NOTE) -> KeyboardLayout:
    if last < first:
        raise ValueError(f"empty key range [{first}, {last}]")
    keys = tuple(KeyDefinition(p, midi_is_black(p), p - reference)
                 for p in range(first, last + 1))
    return KeyboardLayout(keys=keys, reference=reference)


DEFAULT_LAYOUT = build_layout()
