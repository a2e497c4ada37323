"""
Convert one acquisition into its BIDS sidecars.

:func:`convert_acquisition` runs the whole chain for a single dataset:

1. read the acquisition (and the calibration DICOM for anatomical images);
2. synthesize the metadata record;
3. build the channel and event tables for recordings;
4. check every enabled table target, then write.

All fatal conditions surface before step 4 writes anything, so a refused
table never leaves a half-updated set of sidecars behind.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional

import pandas as pd

from sidecaromatic.config.schema import ConversionConfig
from sidecaromatic.io import read_acquisition, read_calibration
from sidecaromatic.models import AnatomicalAcquisition, RecordingAcquisition
from sidecaromatic.utils.channels import build_channels_frame
from sidecaromatic.utils.errors import ConversionError
from sidecaromatic.utils.events import build_events_frame
from sidecaromatic.utils.sidecars import (
    check_table_target,
    sidecar_paths,
    write_metadata,
    write_table,
)
from .synthesize import synthesize_metadata
from .types import ConversionResult

log = logging.getLogger(__name__)


def _read(cfg: ConversionConfig):
    """Return the acquisition descriptor, with calibration attached for anat."""
    acq = read_acquisition(cfg.dataset)
    if isinstance(acq, AnatomicalAcquisition) and cfg.anat.dicomfile is not None:
        calibration = read_calibration(cfg.anat.dicomfile)
        acq = acq.model_copy(update={"calibration": calibration})
    return acq


def _metadata_enabled(acq, cfg: ConversionConfig) -> bool:
    if isinstance(acq, AnatomicalAcquisition):
        return cfg.anat.write
    return cfg.meg.write


def convert_acquisition(cfg: ConversionConfig) -> ConversionResult:
    """Write the sidecars for ``cfg.dataset``.

    Args:
        cfg: Validated options; ``cfg.dataset`` must be set.

    Returns:
        A :class:`ConversionResult` listing written and skipped files.

    Raises:
        ConversionError: For unsupported inputs, invalid trial tables,
            override length mismatches and non-empty table targets.
    """
    if cfg.dataset is None:
        raise ConversionError("no dataset given")

    dataset = Path(cfg.dataset)
    paths = sidecar_paths(dataset)
    acq = _read(cfg)
    log.info("[convert] %s → %s", dataset.name, type(acq).__name__)

    # ── plan ────────────────────────────────────────────────────────────────
    record = synthesize_metadata(acq, cfg)
    tables: List[tuple[Path, Optional[pd.DataFrame]]] = []
    skipped: List[Path] = []

    if isinstance(acq, RecordingAcquisition):
        if cfg.channels.write:
            tables.append((paths.channels, build_channels_frame(acq, cfg.channels)))
        else:
            skipped.append(paths.channels)
        if cfg.events.write:
            tables.append((paths.events, build_events_frame(acq, cfg.events.trl)))
        else:
            skipped.append(paths.events)

    # Fatal table conflicts must surface before the JSON is touched.
    for path, frame in tables:
        if frame is not None and not frame.empty:
            check_table_target(path)

    # ── write ───────────────────────────────────────────────────────────────
    written: List[Path] = []

    def _record(result: Any, path: Path) -> None:
        (written if result is not None else skipped).append(path)

    if _metadata_enabled(acq, cfg):
        _record(write_metadata(paths.metadata, record), paths.metadata)
    else:
        skipped.append(paths.metadata)

    for path, frame in tables:
        _record(write_table(path, frame), path)

    log.info("[convert] %d written, %d skipped", len(written), len(skipped))
    return ConversionResult(dataset=dataset, written=written, skipped=skipped)


__all__ = ["convert_acquisition"]
