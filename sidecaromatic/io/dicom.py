"""
Scanner details from the DICOM file that matches an anatomical image.

Only the attributes that have a direct BIDS counterpart are kept. DICOM
stores echo, inversion and repetition times in milliseconds while BIDS wants
seconds, so those three are converted on the way out.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pydicom
from pydicom.dataset import Dataset
from pydicom.errors import InvalidDicomError
from pydicom.multival import MultiValue

from sidecaromatic.utils.errors import CalibrationError

log = logging.getLogger(__name__)

# DICOM keyword → BIDS key
_DICOM_TO_BIDS: Dict[str, str] = {
    "Manufacturer": "Manufacturer",
    "ManufacturerModelName": "ManufacturersModelName",
    "DeviceSerialNumber": "DeviceSerialNumber",
    "SoftwareVersions": "SoftwareVersions",
    "InstitutionName": "InstitutionName",
    "InstitutionAddress": "InstitutionAddress",
    "InstitutionalDepartmentName": "InstitutionalDepartmentName",
    "StationName": "StationName",
    "MagneticFieldStrength": "MagneticFieldStrength",
    "ReceiveCoilName": "ReceiveCoilName",
    "ScanningSequence": "ScanningSequence",
    "SequenceVariant": "SequenceVariant",
    "ScanOptions": "ScanOptions",
    "SequenceName": "SequenceName",
    "EchoTrainLength": "EchoTrainLength",
    "ParallelReductionFactorInPlane": "ParallelReductionFactorInPlane",
    "EchoTime": "EchoTime",
    "InversionTime": "InversionTime",
    "RepetitionTime": "RepetitionTime",
    "FlipAngle": "FlipAngle",
}

_MS_TO_S = frozenset({"EchoTime", "InversionTime", "RepetitionTime"})


def _plain(value: Any) -> Any:
    """Turn pydicom value representations into JSON-friendly builtins."""
    if isinstance(value, MultiValue):
        return [_plain(v) for v in value]
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, bytes):
        return value.decode(errors="ignore").strip()
    return str(value).strip()


def calibration_fields(ds: Dataset) -> Dict[str, Any]:
    """Map the attributes of *ds* to their BIDS keys.

    Absent or empty attributes are left out; timing values are in seconds.
    Raises :class:`CalibrationError` for a value that cannot be decoded.
    """
    out: Dict[str, Any] = {}
    for keyword, key in _DICOM_TO_BIDS.items():
        try:
            raw = getattr(ds, keyword, None)
            if raw is None or raw == "":
                continue
            value = _plain(raw)
            if key in _MS_TO_S:
                value = float(value) / 1000.0
        except (TypeError, ValueError, OverflowError) as exc:
            raise CalibrationError(f"cannot decode DICOM attribute {keyword}: {exc}") from exc
        out[key] = value
    return out


def read_calibration(path: Path | str) -> Optional[Dict[str, Any]]:
    """Return the BIDS keys read from the DICOM file at *path*.

    Args:
        path: DICOM file acquired in the same series as the NIfTI image.

    Returns:
        Mapping of BIDS keys, or ``None`` when the file does not exist.

    Raises:
        CalibrationError: When the file cannot be parsed or one of the
            mapped attributes cannot be decoded.
    """
    path = Path(path)
    if not path.exists():
        log.warning("[dicom] calibration file not found: %s", path)
        return None
    try:
        ds = pydicom.dcmread(path, stop_before_pixels=True, force=True)
    except (InvalidDicomError, OSError, EOFError) as exc:
        raise CalibrationError(f"cannot read DICOM file {path}: {exc}") from exc

    fields = calibration_fields(ds)
    if not fields:
        log.warning("[dicom] no scanner attributes found in %s", path.name)
    log.info("[dicom] %d key(s) read from %s", len(fields), path.name)
    return fields


__all__ = ["calibration_fields", "read_calibration"]
