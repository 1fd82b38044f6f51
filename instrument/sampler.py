# instrument/sampler.py
import logging
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional, Union

from audio.decoder import decode_file
from audio.errors import BuildCancelled, DecodeError, PlaybackDeviceError
from audio.normalizer import TARGET_DURATION, normalize
from audio.pcm import PCMBuffer
from audio.pitch import map_instrument
from audio.tone import generate_tone
from instrument.instrument import Instrument
from keys.layout import DEFAULT_LAYOUT, KeyboardLayout
from utils.crashlog import log_exception

DEFAULT_TONE = "default tone"

ClipSource = Union[str, os.PathLike]  # DEFAULT_TONE or a file path


def build_instrument(clip: PCMBuffer, layout: KeyboardLayout = DEFAULT_LAYOUT,
                     target_duration: float = TARGET_DURATION,
                     cancelled: Optional[Callable[[], bool]] = None) -> Instrument:
    """decoded clip -> base note -> one resampled buffer per key"""
    base = normalize(clip, target_duration, midi_note=layout.reference)
    return map_instrument(base, layout, cancelled=cancelled)


class Sampler:
    """Owns the current Instrument and rebuilds it when a new clip is loaded.

    Builds run on a worker pool. Each load bumps a generation number; a build
    whose generation is no longer current stops between keys and is thrown
    away, so the last requested clip always wins. Publishing swaps a single
    reference under a lock, so ``play`` sees the whole old Instrument or the
    whole new one.
    """
    def __init__(self, sink, layout: KeyboardLayout = DEFAULT_LAYOUT,
                 target_duration: float = TARGET_DURATION,
                 decoder: Callable[..., PCMBuffer] = decode_file,
                 tone: Callable[[], PCMBuffer] = generate_tone,
                 on_notice: Optional[Callable[[str], None]] = None,
                 max_workers: int = 2):
        self.sink = sink
        self.layout = layout
        self.target_duration = target_duration
        self.decoder = decoder
        self.tone = tone
        self.on_notice = on_notice or (lambda msg: None)

        self._lock = threading.Lock()
        self._generation = 0
        self._instrument: Optional[Instrument] = None
        self.source_name: Optional[str] = None
        self._pool = ThreadPoolExecutor(max_workers=max(1, max_workers),
                                        thread_name_prefix="instrument-build")

        self.use_default_tone()

    # ---------- state ----------
    @property
    def instrument(self) -> Optional[Instrument]:
        return self._instrument

    def current_layout(self) -> KeyboardLayout:
        return self.layout

    def is_default(self) -> bool:
        return self.source_name is None

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _is_stale(self, gen: int) -> bool:
        return gen != self._generation

    def _publish(self, gen: int, inst: Instrument, name: Optional[str]) -> bool:
        with self._lock:
            if gen != self._generation:
                return False
            self._instrument = inst
            self.source_name = name
            return True

    # ---------- loading ----------
    def use_default_tone(self) -> Instrument:
        gen = self._next_generation()
        inst = build_instrument(self.tone(), self.layout, self.target_duration)
        self._publish(gen, inst, None)
        return inst

    def _clip_for(self, source: ClipSource) -> PCMBuffer:
        if source == DEFAULT_TONE:
            return self.tone()
        return self.decoder(os.fspath(source), max_duration=self.target_duration)

    def _run(self, gen: int, source: ClipSource) -> Optional[Instrument]:
        name = None if source == DEFAULT_TONE else os.path.basename(os.fspath(source))
        try:
            clip = self._clip_for(source)
            if self._is_stale(gen):
                raise BuildCancelled("superseded after decode")
            inst = build_instrument(clip, self.layout, self.target_duration,
                                    cancelled=lambda: self._is_stale(gen))
        except DecodeError as e:
            logging.warning("Clip load failed (%s): %s", source, e)
            if not self._is_stale(gen):
                self.on_notice(f"Could not load clip: {e}")
            return None
        except BuildCancelled:
            logging.info("Discarded stale instrument build for %s", source)
            return None

        if not self._publish(gen, inst, name):
            logging.info("Discarded stale instrument build for %s", source)
            return None
        if name is None:
            self.on_notice("Using the built-in tone.")
        else:
            clip_info = f"{clip.sample_rate} Hz, {clip.channels} channel(s)"
            self.on_notice(f"Loaded {name} ({clip_info}). "
                           f"First {self.target_duration:g}s is now mapped across the keyboard.")
        logging.info("Instrument rebuilt from %s: %d keys", name or DEFAULT_TONE, len(inst))
        return inst

    def load(self, source: ClipSource) -> "Future[Optional[Instrument]]":
        """Rebuild in the background; the future yields the published Instrument or None."""
        gen = self._next_generation()
        fut = self._pool.submit(self._run, gen, source)
        fut.add_done_callback(lambda f: self._build_failed(f, source))
        return fut

    def _build_failed(self, fut: Future, source: ClipSource):
        if fut.cancelled() or fut.exception() is None:
            return
        e = fut.exception()
        logging.error("Instrument build for %s crashed: %s", source, e, exc_info=e)
        self.on_notice(f"Could not load clip: {e}")
        log_exception("instrument build", e)

    def load_sync(self, source: ClipSource) -> Optional[Instrument]:
        return self._run(self._next_generation(), source)

    # ---------- playback ----------
    def play(self, key_id: int) -> bool:
        inst = self._instrument
        buf = inst.get(key_id) if inst is not None else None
        if buf is None:
            logging.debug("play: key_id=%r is not on the keyboard, ignored", key_id)
            return False
        try:
            self.sink.play(buf)
        except PlaybackDeviceError as e:
            logging.error("Playback error: %s", e)
            self.on_notice(f"Playback error: {e}")
            return False
        return True

    def close(self):
        with self._lock:
            self._generation += 1  # abandon anything in flight
        self._pool.shutdown(wait=False)
        self.sink.close()
