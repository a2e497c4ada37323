"""
Acquisition descriptors shared by the I/O, pipeline, and CLI layers.

The readers in :mod:`sidecaromatic.io` return exactly one of two immutable
descriptors per acquisition:

* :class:`AnatomicalAcquisition` – a NIfTI image plus the optional metadata
  decoded from a matching DICOM file.
* :class:`RecordingAcquisition` – an MEG recording with its per-channel
  labels, types and units and the events decoded from the file.

The set is closed on purpose; :func:`sidecaromatic.pipelines.synthesize_metadata`
dispatches on the concrete class.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, model_validator


class RecordingFormat(str, Enum):
    """Vendor file formats understood by the MEG reader."""

    CTF = "ctf"
    NEUROMAG = "neuromag"


# Manufacturer strings as listed in the BIDS MEG appendix.
MANUFACTURERS: Dict[RecordingFormat, str] = {
    RecordingFormat.CTF: "CTF",
    RecordingFormat.NEUROMAG: "Elekta/Neuromag",
}


class RawEvent(BaseModel, frozen=True):
    """One event decoded from a recording.

    Attributes
    ----------
    type
        Event label, e.g. the trigger channel name or annotation description.
    value
        Trigger value or ``None`` when the event carries none.
    sample
        First sample of the event, 1-based (first sample of the file is 1).
    duration
        Duration in samples, ``None`` when unknown or instantaneous.
    """

    type: str
    value: Optional[Any] = None
    sample: Optional[int] = None
    duration: Optional[float] = None


class AnatomicalAcquisition(BaseModel, frozen=True):
    """NIfTI image with optional calibration metadata.

    Attributes
    ----------
    path
        Location of the ``.nii``/``.nii.gz`` file.
    shape / voxel_sizes
        Image header summary used for log messages.
    calibration
        BIDS keys decoded from the matching DICOM file, or ``None``.
    """

    path: Path
    shape: Tuple[int, ...] = ()
    voxel_sizes: Tuple[float, ...] = ()
    calibration: Optional[Dict[str, Any]] = None


class RecordingAcquisition(BaseModel, frozen=True):
    """MEG recording header and events.

    Attributes
    ----------
    path
        Dataset on disk (``.ds`` directory or ``.fif`` file).
    format
        Vendor format; drives the Manufacturer fields.
    sample_rate
        Sampling frequency in Hz.
    n_samples
        Samples per epoch (the whole recording when continuous).
    n_epochs
        Number of epochs/trials stored in the file.
    labels / types / units
        One entry per channel in file order. Types use the lower-case labels
        listed in :data:`sidecaromatic.pipelines.meg.CHANNEL_TYPE_GROUPS`.
    events
        Decoded events, possibly empty.
    model_name
        Vendor system designation (e.g. ``"CTF275"``) when it can be inferred.
    """

    path: Path
    format: RecordingFormat
    sample_rate: float
    n_samples: int
    n_epochs: int = 1
    labels: List[str]
    types: List[str]
    units: List[Optional[str]]
    events: List[RawEvent] = []
    model_name: Optional[str] = None

    @property
    def n_channels(self) -> int:
        """Number of channels in the recording."""
        return len(self.labels)

    @model_validator(mode="after")
    def _channel_vectors_align(self):
        """Reject descriptors whose per-channel lists disagree in length."""
        if not len(self.labels) == len(self.types) == len(self.units):
            raise ValueError(
                "labels/types/units length mismatch: "
                f"{len(self.labels)}/{len(self.types)}/{len(self.units)}"
            )
        return self


Acquisition = Union[AnatomicalAcquisition, RecordingAcquisition]

__all__ = [
    "Acquisition",
    "AnatomicalAcquisition",
    "MANUFACTURERS",
    "RawEvent",
    "RecordingAcquisition",
    "RecordingFormat",
]
