"""Dispatch metadata synthesis on the acquisition descriptor type."""

from __future__ import annotations

from typing import Any

from sidecaromatic.config.schema import ConversionConfig
from sidecaromatic.models import AnatomicalAcquisition, RecordingAcquisition
from sidecaromatic.utils.errors import UnsupportedFormatError
from .anatomical import synthesize_anat
from .meg import synthesize_meg


def synthesize_metadata(acq: Any, cfg: ConversionConfig) -> dict[str, Any]:
    """Return the merged metadata record for *acq*.

    Raises:
        UnsupportedFormatError: When *acq* is not a known descriptor.
    """
    if isinstance(acq, AnatomicalAcquisition):
        return synthesize_anat(acq, cfg)
    if isinstance(acq, RecordingAcquisition):
        return synthesize_meg(acq, cfg)
    raise UnsupportedFormatError(f"unsupported acquisition: {type(acq).__name__}")


__all__ = ["synthesize_metadata"]
