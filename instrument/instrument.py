# instrument/instrument.py
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from audio.pcm import PCMBuffer, BaseNote
from keys.layout import KeyboardLayout


@dataclass(frozen=True, eq=False)
class Instrument:
    """One playable buffer per layout key, all derived from a single base note.

    Never patched in place: loading another clip builds a new Instrument.
    """
    layout: KeyboardLayout
    base: BaseNote
    voices: Mapping[int, PCMBuffer]

    def __post_init__(self):
        voices = dict(self.voices)
        expected = set(self.layout.key_ids())
        if set(voices) != expected:
            missing = sorted(expected - set(voices))
            extra = sorted(set(voices) - expected)
            raise ValueError(f"voices do not match layout (missing={missing}, extra={extra})")
        object.__setattr__(self, "voices", MappingProxyType(voices))

    def __getitem__(self, key_id: int) -> PCMBuffer:
        return self.voices[key_id]

    def get(self, key_id: int) -> Optional[PCMBuffer]:
        return self.voices.get(key_id)

    def __contains__(self, key_id) -> bool:
        return key_id in self.voices

    def __iter__(self):
        return iter(self.layout.key_ids())

    def __len__(self):
        return len(self.voices)
