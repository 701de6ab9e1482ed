"""Exception hierarchy for the rotation relay."""


class RotateLogError(Exception):
    """Base class for every error raised by rotatelog."""


class ConfigurationError(RotateLogError):
    """Missing or invalid configuration; the relay is never started."""


class RotationError(RotateLogError):
    """The active log file or the current-log symlink could not be managed."""


class CompressionError(RotateLogError):
    """A superseded file could not be compressed. The original is kept."""


class InputReadError(RotateLogError):
    """Reading from the input stream failed."""
