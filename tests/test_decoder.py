# tests/test_decoder.py
import numpy as np
import pytest
import soundfile as sf

from audio.decoder import decode_file
from audio.errors import DecodeError


def test_decodes_wav(tmp_path):
    data = np.stack([np.linspace(-0.5, 0.5, 2205), np.zeros(2205)], axis=1).astype(np.float32)
    path = tmp_path / "clip.wav"
    sf.write(path, data, 22050, subtype="FLOAT")

    buf = decode_file(str(path))
    assert buf.sample_rate == 22050
    assert buf.channels == 2
    assert np.allclose(buf.frames(), data)


def test_reads_only_max_duration(tmp_path):
    path = tmp_path / "long.wav"
    sf.write(path, np.zeros(44100 * 3, dtype=np.float32), 44100, subtype="FLOAT")
    assert decode_file(str(path), max_duration=1.0).frame_count == 44100


def test_garbage_file_is_decode_error(tmp_path):
    path = tmp_path / "not_audio.wav"
    path.write_bytes(b"this is not a wave file at all" * 10)
    with pytest.raises(DecodeError):
        decode_file(str(path))


def test_missing_file_is_decode_error(tmp_path):
    with pytest.raises(DecodeError):
        decode_file(str(tmp_path / "missing.wav"))
