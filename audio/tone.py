# audio/tone.py
import numpy as np

from audio.pcm import PCMBuffer

C4_HZ = 261.63
HARMONICS = [0.5, 0.3, 0.2, 0.1, 0.05]  # fundamental, then partials 2..5


def generate_tone(sample_rate: int = 44100, duration: float = 1.0,
                  frequency: float = C4_HZ, volume: float = 0.3) -> PCMBuffer:
    """Built-in mono piano-ish tone, used before any clip is loaded."""
    n = int(round(sample_rate * duration))
    t = np.arange(n, dtype=np.float64) / sample_rate

    wave = np.zeros_like(t)
    for i, a in enumerate(HARMONICS):
        wave += a * np.sin(2 * np.pi * frequency * (i + 1) * t)

    # 10ms 線性起音，之後指數衰減
    attack = min(n, int(0.01 * sample_rate))
    env = np.exp(-t * 1.5)
    env[:attack] *= np.linspace(0.0, 1.0, attack, endpoint=False)
    wave *= env

    peak = np.max(np.abs(wave)) if n else 0.0
    if peak > 0:
        wave *= volume / peak
    return PCMBuffer(sample_rate, 1, wave.astype(np.float32))
