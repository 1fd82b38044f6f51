# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class RenderConfig:
    window_w: int = 1200
    window_h: int = 420
    status_h: int = 36
    piano_margin: int = 16
    fps: int = 60

@dataclass
class SamplerConfig:
    target_duration: float = 1.0  # base note length (s)
    base_note: int = 60           # C4 plays the clip unshifted
    first_note: int = 48          # C3
    last_note: int = 72           # C5
    workers: int = 2
    clip_path: Optional[str] = None

@dataclass
class AudioConfig:
    sample_rate: int = 44100
    channels: int = 2
    voices: int = 32     # mixer channels = max overlapping notes
    gain: float = 0.7

@dataclass
class MidiConfig:
    enabled: bool = True
    port_name: Optional[str] = None

@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    midi: MidiConfig = field(default_factory=MidiConfig)
    keymap_path: Optional[str] = None
