# midi/input.py
import logging
from typing import Callable, Optional

import mido


class MidiKeyInput:
    """Hardware MIDI keyboard -> key_id events.

    Non-blocking: the app calls poll() once per frame and every note_on with
    a non-zero velocity becomes on_key(note). Note-offs are ignored, the
    sample plays to its end like a click does.
    """
    def __init__(self, on_key: Callable[[int], object], port_name: Optional[str] = None, port=None):
        self.on_key = on_key
        self.port = port
        if self.port is None:
            try:
                self.port = mido.open_input(port_name)
                logging.info("MIDI input: %s", self.port.name)
            except Exception as e:  # mido backends raise their own types (rtmidi, IOError, ...)
                logging.warning("MIDI input disabled (%s): %s", port_name or "default port", e)
                self.port = None

    @property
    def enabled(self) -> bool:
        return self.port is not None

    def handle(self, msg) -> Optional[int]:
        if msg.type == "note_on" and msg.velocity > 0:
            self.on_key(msg.note)
            return msg.note
        return None

    def poll(self) -> list[int]:
        if self.port is None:
            return []
        played = []
        for msg in self.port.iter_pending():
            note = self.handle(msg)
            if note is not None:
                played.append(note)
        return played

    def close(self):
        if self.port is not None:
            try:
                self.port.close()
            finally:
                self.port = None


def list_input_names() -> list[str]:
    try:
        return list(mido.get_input_names())
    except Exception as e:
        logging.warning("Could not list MIDI inputs: %s", e)
        return []
