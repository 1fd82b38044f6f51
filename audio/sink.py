# audio/sink.py
import logging
import weakref

import numpy as np
import pygame

from audio.errors import PlaybackDeviceError
from audio.pcm import PCMBuffer


def to_mixer_array(buf: PCMBuffer, mixer_channels: int, gain: float = 0.7) -> np.ndarray:
    """float PCM -> int16 array shaped the way pygame.sndarray expects for the mixer."""
    frames = buf.frames().astype(np.float32)
    ch = buf.channels
    if ch != mixer_channels:
        if ch == 1:
            frames = np.repeat(frames, mixer_channels, axis=1)
        elif mixer_channels == 1:
            frames = frames.mean(axis=1, keepdims=True)
        elif ch > mixer_channels:
            frames = frames[:, :mixer_channels]
        else:
            extra = np.repeat(frames[:, -1:], mixer_channels - ch, axis=1)
            frames = np.hstack([frames, extra])

    data = np.clip(frames * gain * 32767.0, -32768, 32767).astype(np.int16)
    if mixer_channels == 1:
        data = data[:, 0]
    return np.ascontiguousarray(data)


class SilentSink:
    """Used when no output device could be opened; every note plays silently."""
    frequency = 0

    def play(self, buf: PCMBuffer):
        return None

    def stop_all(self):
        pass

    def close(self):
        pass


class MixerSink:
    """
    pygame.mixer 輸出：
    - play(buf) 不阻塞，交給空閒的 mixer channel，重疊的音由 mixer 處理
    - 每個 PCMBuffer 只轉換一次 Sound（weak cache，Instrument 丟掉後自動釋放）
    - buffer 的取樣率和上次要求的不同時才重新 init mixer（allowedchanges=0，裝置的轉換交給 SDL）
    """
    def __init__(self, frequency: int = 44100, channels: int = 2, voices: int = 32,
                 buffer: int = 512, gain: float = 0.7):
        self.channels = channels
        self.voices = voices
        self.buffer = buffer
        self.gain = gain
        self.frequency = 0   # rate the sounds are built for
        self._sounds = weakref.WeakKeyDictionary()  # PCMBuffer -> pygame.mixer.Sound
        self._open(frequency)

    def _open(self, frequency: int):
        if pygame.mixer.get_init():
            pygame.mixer.quit()
        try:
            pygame.mixer.init(frequency=frequency, size=-16, channels=self.channels,
                              buffer=self.buffer, allowedchanges=0)
        except pygame.error as e:
            raise PlaybackDeviceError(f"no default audio output device found: {e}") from e
        freq, _fmt, ch = pygame.mixer.get_init()
        pygame.mixer.set_num_channels(self.voices)
        if freq != frequency:
            logging.warning("Mixer asked for %d Hz, device runs at %d Hz", frequency, freq)
        self.frequency, self.channels = frequency, ch
        self._sounds = weakref.WeakKeyDictionary()
        logging.info("Mixer ready: %d Hz, %d channel(s), %d voices", freq, ch, self.voices)

    def _sound_for(self, buf: PCMBuffer) -> pygame.mixer.Sound:
        snd = self._sounds.get(buf)
        if snd is None:
            snd = pygame.sndarray.make_sound(to_mixer_array(buf, self.channels, self.gain))
            self._sounds[buf] = snd
        return snd

    def play(self, buf: PCMBuffer):
        if buf.is_empty():
            return None
        try:
            if buf.sample_rate != self.frequency:
                self._open(buf.sample_rate)
            return self._sound_for(buf).play()
        except pygame.error as e:
            raise PlaybackDeviceError(str(e)) from e

    def stop_all(self):
        if pygame.mixer.get_init():
            pygame.mixer.stop()

    def close(self):
        self.stop_all()
        self._sounds = weakref.WeakKeyDictionary()
        if pygame.mixer.get_init():
            pygame.mixer.quit()
        self.frequency = 0


def open_sink(frequency: int = 44100, channels: int = 2, voices: int = 32, gain: float = 0.7):
    try:
        return MixerSink(frequency=frequency, channels=channels, voices=voices, gain=gain)
    except PlaybackDeviceError as e:
        logging.error("audio initialization failed, continuing without sound: %s", e)
        return SilentSink()
