"""Build the ``*_channels.tsv`` table for an MEG recording."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

import pandas as pd

from sidecaromatic.config.schema import CHANNEL_COLUMNS, ChannelsOptions
from sidecaromatic.models import RecordingAcquisition
from .errors import LengthMismatchError
from .merge import expand_override, is_unset, merge_vector

log = logging.getLogger(__name__)

REQUIRED_COLUMNS: tuple[str, ...] = ("name", "type", "units", "sampling_frequency")


def _data_columns(acq: RecordingAcquisition) -> Dict[str, List[Any]]:
    """Return the per-channel values that can be read from the recording."""
    n = acq.n_channels
    return {
        "name": list(acq.labels),
        "type": list(acq.types),
        "units": list(acq.units),
        "sampling_frequency": [acq.sample_rate] * n,
    }


def build_channels_frame(
    acq: RecordingAcquisition, options: ChannelsOptions | None = None
) -> pd.DataFrame:
    """Return one row per channel, in recording order.

    Args:
        acq: Recording descriptor.
        options: Caller overrides; each column is a scalar or a per-channel
            list.

    Returns:
        Frame with the four required columns and every optional column for
        which at least one channel has a value.

    Raises:
        LengthMismatchError: When an override list does not have one entry
            per channel.
    """
    options = options or ChannelsOptions()
    n = acq.n_channels
    data = _data_columns(acq)

    columns: Dict[str, List[Any]] = {}
    for col in CHANNEL_COLUMNS:
        base = data.get(col, [None] * n)
        try:
            merged = merge_vector(base, expand_override(getattr(options, col), n))
        except LengthMismatchError as exc:
            raise LengthMismatchError(f"channels.{col}: {exc}") from exc
        if col in REQUIRED_COLUMNS or any(not is_unset(v) for v in merged):
            columns[col] = merged

    log.debug("[channels] %d channel(s), columns: %s", n, ", ".join(columns))
    return pd.DataFrame(columns, columns=list(columns))


__all__ = ["REQUIRED_COLUMNS", "build_channels_frame"]
