# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # 確保能找到 config.py

from utils.crashlog import setup_crashlog, log_exception, log_dir
setup_crashlog()

import argparse
from config import AppConfig, RenderConfig, SamplerConfig, AudioConfig, MidiConfig
import logging, traceback

def _init_logging():
    logs = log_dir()
    log_path = os.path.join(logs, "app.log")

    if logging.getLogger().handlers:
        return

    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        encoding="utf-8"
    )
    try:
        from logging.handlers import RotatingFileHandler
        fh = RotatingFileHandler(log_path, maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logging.getLogger().addHandler(fh)
    except OSError as e:
        logging.warning("無法寫入 %s：%s", log_path, e)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Turn one sound clip into a two-octave piano.")
    ap.add_argument('--clip', default=None, help='audio file to use instead of the built-in tone')
    ap.add_argument('--seconds', type=float, default=1.0, help='base note length')
    ap.add_argument('--base-note', type=int, default=60, help='MIDI note that plays the clip unshifted')
    ap.add_argument('--first-note', type=int, default=48)
    ap.add_argument('--last-note', type=int, default=72)
    ap.add_argument('--sample-rate', type=int, default=44100)
    ap.add_argument('--voices', type=int, default=32)
    ap.add_argument('--keymap', default=None, help='JSON of key name -> MIDI note')
    ap.add_argument('--midi-port', default=None)
    ap.add_argument('--no-midi', action='store_true')
    ap.add_argument('--list-midi', action='store_true', help='print MIDI inputs and exit')
    ap.add_argument('--width', type=int, default=1200)
    ap.add_argument('--height', type=int, default=420)
    return ap

def config_from_args(args) -> AppConfig:
    if args.seconds <= 0:
        raise SystemExit("--seconds must be positive")
    if args.last_note < args.first_note:
        raise SystemExit("--last-note must be >= --first-note")
    return AppConfig(
        render=RenderConfig(window_w=args.width, window_h=args.height),
        sampler=SamplerConfig(
            target_duration=args.seconds,
            base_note=args.base_note,
            first_note=args.first_note,
            last_note=args.last_note,
            clip_path=args.clip,
        ),
        audio=AudioConfig(sample_rate=args.sample_rate, voices=args.voices),
        midi=MidiConfig(enabled=not args.no_midi, port_name=args.midi_port),
        keymap_path=args.keymap,
    )

def main(argv=None):
    _init_logging()
    logging.info("應用程式啟動")

    args = build_parser().parse_args(argv)
    if args.list_midi:
        from midi.input import list_input_names
        for name in list_input_names():
            print(name)
        return

    from app import App
    App(config_from_args(args)).run()

if __name__ == '__main__':
    try:
        main()
    except Exception as e:
        try:
            log_exception("Top-level exception", e)
        except OSError:
            pass
        logging.error("未捕捉的例外：%s", e, exc_info=True)
        print("程式發生錯誤，請到 logs/ 資料夾看 app.log 與 error-*.txt")
        traceback.print_exc()
