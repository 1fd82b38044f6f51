# app.py
import logging
import pygame
from collections import deque
from typing import Dict, Optional
from config import AppConfig
from render.renderer import Renderer
from audio.sink import open_sink
from audio.tone import generate_tone
from instrument.sampler import Sampler, DEFAULT_TONE
from input.keymap import DEFAULT_KEYMAP, load_keymap
from keys.layout import build_layout
from midi.input import MidiKeyInput
from utils.crashlog import log_exception

CLICK_FLASH_SECS = 0.15  # 滑鼠 / MIDI 觸發時的高亮時間
CLIP_PATTERNS = [("Audio files", "*.wav *.flac *.ogg *.aiff *.aif *.mp3"), ("All files", "*.*")]

def pick_file_dialog(title: str, patterns: list[tuple[str, str]]) -> Optional[str]:
    try:
        import tkinter as tk
        from tkinter import filedialog
        root = tk.Tk(); root.withdraw()
        file = filedialog.askopenfilename(title=title, filetypes=patterns)
        root.update(); root.destroy()
        return file or None
    except Exception as e:
        logging.warning("File dialog unavailable: %s", e)
        return None

class App:
    def __init__(self, cfg: AppConfig):
        self.cfg = cfg
        self.layout = build_layout(cfg.sampler.first_note, cfg.sampler.last_note, cfg.sampler.base_note)
        self.renderer = Renderer(cfg.render, self.layout)

        # 背景執行緒也會送訊息過來，deque.append 是 thread-safe 的
        self._notices: deque[str] = deque()
        sink = open_sink(cfg.audio.sample_rate, cfg.audio.channels, cfg.audio.voices, cfg.audio.gain)
        self.sampler = Sampler(
            sink,
            layout=self.layout,
            target_duration=cfg.sampler.target_duration,
            tone=lambda: generate_tone(cfg.audio.sample_rate, cfg.sampler.target_duration),
            on_notice=self._notices.append,
            max_workers=cfg.sampler.workers,
        )

        self.keymap: Dict[int, int] = dict(DEFAULT_KEYMAP)
        if cfg.keymap_path:
            try:
                self.keymap = load_keymap(cfg.keymap_path)
            except (OSError, ValueError) as e:
                log_exception("load_keymap", e)
                self._toast(f"Keymap not loaded, using defaults ({e})", 6.0)

        self.midi: Optional[MidiKeyInput] = None
        if cfg.midi.enabled:
            self.midi = MidiKeyInput(self._play_flash, cfg.midi.port_name)

        # 狀態
        self.held: set[int] = set()
        self.flash: Dict[int, float] = {}
        self._msg = "Load any sound clip to build your base note."
        self._msg_time = 0.0

        if cfg.sampler.clip_path:
            self.sampler.load_sync(cfg.sampler.clip_path)

    # ---------- UI 訊息 ----------
    def _toast(self, msg: str, secs: float = 4.0):
        self._msg = msg
        self._msg_time = max(self._msg_time, secs)

    def _drain_notices(self):
        while self._notices:
            self._toast(self._notices.popleft(), 6.0)

    # ---------- Loading ----------
    def open_clip_interactive(self):
        path = pick_file_dialog("Select a sound clip", CLIP_PATTERNS)
        if not path:
            return False
        self._toast("Building instrument…", 30.0)
        self.sampler.load(path)
        return True

    # ---------- Play ----------
    def _play_flash(self, key_id: int):
        if self.sampler.play(key_id):
            self.flash[key_id] = CLICK_FLASH_SECS

    def _tick_flash(self, dt: float):
        for k in list(self.flash):
            self.flash[k] -= dt
            if self.flash[k] <= 0:
                del self.flash[k]

    def close(self):
        if self.midi:
            self.midi.close()
        self.sampler.close()
        pygame.quit()

    # ---------- Main loop ----------
    def run(self):
        running = True
        while running:
            dt = self.renderer.tick(self.cfg.render.fps)
            for e in pygame.event.get():
                if e.type == pygame.QUIT:
                    running = False

                if e.type == pygame.KEYDOWN:
                    if e.key == pygame.K_ESCAPE:
                        running = False; continue
                    if e.key in self.keymap:
                        key_id = self.keymap[e.key]
                        if self.sampler.play(key_id):
                            self.held.add(key_id)

                if e.type == pygame.KEYUP and e.key in self.keymap:
                    self.held.discard(self.keymap[e.key])

                if e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    label = self.renderer.button_at(e.pos)
                    if label == "OPEN CLIP":
                        self.open_clip_interactive()
                    elif label == "DEFAULT TONE":
                        self.sampler.load(DEFAULT_TONE)
                    elif label == "QUIT":
                        running = False
                    else:
                        key_id = self.renderer.key_at(e.pos)
                        if key_id is not None:
                            self._play_flash(key_id)

            if not running: break

            if self.midi:
                self.midi.poll()
            self._drain_notices()
            self._tick_flash(dt)

            # ===== 訊息倒數（toast） =====
            if self._msg_time > 0:
                self._msg_time -= dt
                if self._msg_time <= 0:
                    self._msg_time = 0
                    self._msg = ""

            # ----- Render -----
            self.renderer.begin_frame()
            hint = "Load a clip to replace the built-in tone." if self.sampler.is_default() else ""
            self.renderer.draw_status_bar(
                clip_name=self.sampler.source_name or "built-in tone",
                status=self._msg,
                hint=hint,
            )
            self.renderer.draw_keyboard(highlight=self.held | set(self.flash))
            self.renderer.end_frame()

        self.close()
