# audio/errors.py


class DecodeError(Exception):
    """Clip could not be turned into PCM (missing file, unsupported format, corrupt data)."""


class PlaybackDeviceError(Exception):
    """Output device refused a play request."""


class BuildCancelled(Exception):
    """A newer clip load superseded this instrument build."""


class EmptyClipWarning(UserWarning):
    """Decoded clip had no samples; the base note is padded with silence."""
