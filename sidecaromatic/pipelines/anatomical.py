"""Build the JSON record for an anatomical MRI.

The record starts from the scanner details decoded from the calibration
DICOM (when one was supplied) and layers the caller's generic and anatomical
options on top, so a value typed by the user always beats the DICOM header.
"""

from __future__ import annotations

import logging
from typing import Any

from sidecaromatic.config.schema import ANAT_FIELDS, GENERIC_FIELDS, ConversionConfig
from sidecaromatic.models import AnatomicalAcquisition
from sidecaromatic.utils.merge import merge_all, select_fields

log = logging.getLogger(__name__)


def synthesize_anat(acq: AnatomicalAcquisition, cfg: ConversionConfig) -> dict[str, Any]:
    """Return the merged anatomical JSON record for *acq*.

    Args:
        acq: Anatomical descriptor; ``acq.calibration`` may be ``None``.
        cfg: Validated options.

    Returns:
        Flat dictionary restricted to the generic and anatomical vocabularies.
    """
    calibration = select_fields(acq.calibration, GENERIC_FIELDS | ANAT_FIELDS)
    if acq.calibration is None:
        log.info("[anat] no calibration DICOM for %s", acq.path.name)
    else:
        log.info("[anat] %d key(s) taken from calibration DICOM", len(calibration))

    generic = select_fields(cfg, GENERIC_FIELDS)
    anat = select_fields(cfg.anat, ANAT_FIELDS)
    return merge_all(calibration, generic, anat)


__all__ = ["synthesize_anat"]
