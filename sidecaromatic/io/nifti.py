"""Read the header of an anatomical NIfTI image with *nibabel*."""

from __future__ import annotations

import logging
from pathlib import Path

import nibabel as nib
from nibabel.filebasedimages import ImageFileError

from sidecaromatic.models import AnatomicalAcquisition
from sidecaromatic.utils.errors import ConversionError

log = logging.getLogger(__name__)


def read_nifti(path: Path) -> AnatomicalAcquisition:
    """Return an :class:`AnatomicalAcquisition` for the image at *path*.

    Only the header is inspected; voxel data is never loaded.
    """
    try:
        img = nib.load(str(path))
    except (FileNotFoundError, ImageFileError) as exc:
        raise ConversionError(f"cannot read NIfTI image {path}: {exc}") from exc

    shape = tuple(int(n) for n in img.shape)
    zooms = tuple(float(z) for z in img.header.get_zooms())
    log.debug("[nifti] %s shape=%s voxel=%s", path.name, shape, zooms)
    return AnatomicalAcquisition(path=path, shape=shape, voxel_sizes=zooms)


__all__ = ["read_nifti"]
