"""Pick the right reader for an acquisition path.

The format is decided from the file name alone:

* ``.nii`` / ``.nii.gz`` → nibabel, :class:`AnatomicalAcquisition`
* ``.ds`` directory, ``.meg4``, ``.res4`` → ``mne.io.read_raw_ctf``
* ``.fif`` → ``mne.io.read_raw_fif``
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sidecaromatic.models import Acquisition, RecordingFormat
from sidecaromatic.utils.errors import UnsupportedFormatError
from .nifti import read_nifti

log = logging.getLogger(__name__)

_NIFTI_SUFFIXES = (".nii.gz", ".nii")
_CTF_FILE_SUFFIXES = (".meg4", ".res4")


def detect_format(path: Path) -> Optional[RecordingFormat]:
    """Return the recording format for *path*, ``None`` for NIfTI images.

    Raises:
        UnsupportedFormatError: When the suffix is not recognised.
    """
    name = path.name.lower()
    if name.endswith(_NIFTI_SUFFIXES):
        return None
    if name.endswith(".ds") or name.endswith(_CTF_FILE_SUFFIXES):
        return RecordingFormat.CTF
    if name.endswith(".fif"):
        return RecordingFormat.NEUROMAG
    raise UnsupportedFormatError(f"unsupported data format: {path}")


def read_acquisition(path: Path | str) -> Acquisition:
    """Read the acquisition at *path* and return its descriptor.

    Args:
        path: NIfTI image, CTF dataset (directory or one of its files) or
            FIF file.

    Raises:
        UnsupportedFormatError: For unrecognised suffixes.
        ConversionError: When the file cannot be read.
    """
    path = Path(path)
    fmt = detect_format(path)
    log.debug("[reader] %s detected as %s", path.name, fmt.value if fmt else "nifti")
    if fmt is None:
        return read_nifti(path)

    from .meg import read_meg  # mne is heavy; import on first use

    if fmt is RecordingFormat.CTF and path.name.lower().endswith(_CTF_FILE_SUFFIXES):
        path = path.parent
    return read_meg(path, fmt)


__all__ = ["detect_format", "read_acquisition"]
