"""Public façade for the ``io`` sub-package.

The readers wrap third-party file-format libraries and return the immutable
descriptors from :mod:`sidecaromatic.models`.

Attributes:
    read_acquisition (Callable[[Path], Acquisition]): Detect the format from
        the file name and read the NIfTI header (nibabel) or the MEG
        recording (mne).
    read_calibration (Callable[[Path], dict | None]): Map the attributes of a
        DICOM file to BIDS keys (pydicom).
"""

from .dicom import read_calibration
from .reader import detect_format, read_acquisition

__all__ = ["detect_format", "read_acquisition", "read_calibration"]
