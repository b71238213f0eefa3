"""
Exception taxonomy for the capture preprocessing pipeline.

Pure steps only raise InputError. I/O-bound steps raise ProbeError,
CodecError, CaptureError or EncodingError; the pipeline decides which of
them are recovered locally and which reach the caller.
"""


class CapturePrepError(Exception):
    """Base class for all pipeline errors."""


class InputError(CapturePrepError, ValueError):
    """Empty or invalid input supplied to a step."""


class ProbeError(CapturePrepError):
    """Metadata or byte-size probe failed."""


class CodecError(CapturePrepError):
    """A crop, compression or resize codec failed."""


class CompressionError(CapturePrepError):
    """Compression failed and its single fallback failed too."""


class CaptureError(CapturePrepError):
    """The view-capture primitive failed."""


class EncodingError(CapturePrepError):
    """Base64 encoding of an image failed."""


class SettingsError(CapturePrepError):
    """Settings could not be persisted."""
