"""Custom exceptions raised while converting one acquisition into sidecars."""

from __future__ import annotations


class ConversionError(RuntimeError):
    """Raised when an acquisition cannot be converted; nothing is written."""

    pass


class UnsupportedFormatError(ConversionError):
    """Raised when the acquisition file type is not recognised."""

    pass


class SidecarExistsError(ConversionError):
    """Raised when a TSV sidecar already holds rows and would be overwritten."""

    pass


class TrialTableError(ConversionError):
    """Raised when a trial table lacks the begsample/endsample/offset columns."""

    pass


class CalibrationError(ConversionError):
    """Raised when a calibration DICOM exists but cannot be decoded."""

    pass


class LengthMismatchError(ConversionError, ValueError):
    """Raised when a per-channel override does not match the channel count."""

    pass
