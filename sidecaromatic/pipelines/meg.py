"""Build the ``*_meg.json`` record for an MEG recording.

Key points
----------
* Channel counts are always computed; a type with no channel yields ``0``.
* Channel types are compared case-insensitively. Types outside the known
  vocabulary are counted as miscellaneous so unusual hardware does not
  silently undercount.
* Caller options are merged on top of the derived values, generic keys first
  and MEG keys last.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Iterable

from sidecaromatic.config.schema import (
    GENERIC_FIELDS,
    MEG_FIELDS,
    ConversionConfig,
)
from sidecaromatic.models import MANUFACTURERS, RecordingAcquisition
from sidecaromatic.utils.merge import merge_all, select_fields

log = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Channel-type vocabulary → BIDS count field
# ─────────────────────────────────────────────────────────────────────────────
CHANNEL_TYPE_GROUPS: dict[str, tuple[str, ...]] = {
    "MEGChannelCount": ("megmag", "meggrad", "megplanar"),
    "MEGREFChannelCount": ("refmag", "refgrad"),
    "EEGChannelCount": ("eeg",),
    "ECOGChannelCount": ("ecog",),
    "SEEGChannelCount": ("seeg",),
    "EOGChannelCount": ("eog",),
    "ECGChannelCount": ("ecg",),
    "EMGChannelCount": ("emg",),
    "MiscChannelCount": ("misc",),
    "TriggerChannelCount": ("trigger",),
}

HEADLOC_TYPE = "headloc"

_KNOWN_TYPES = frozenset(t for group in CHANNEL_TYPE_GROUPS.values() for t in group)


def count_channel_types(types: Iterable[str]) -> dict[str, int]:
    """Return one ``*ChannelCount`` entry per group in :data:`CHANNEL_TYPE_GROUPS`.

    Head-localisation channels are excluded from every count; any other type
    not in the vocabulary is added to ``MiscChannelCount``.
    """
    tally = Counter(str(t).strip().lower() for t in types)
    counts = {
        field: sum(tally[t] for t in group)
        for field, group in CHANNEL_TYPE_GROUPS.items()
    }
    unknown = {
        t: n for t, n in tally.items() if t not in _KNOWN_TYPES and t != HEADLOC_TYPE
    }
    if unknown:
        log.debug("[meg] counting unlisted channel types as misc: %s", unknown)
        counts["MiscChannelCount"] += sum(unknown.values())
    return counts


def derive_meg_fields(acq: RecordingAcquisition) -> dict[str, Any]:
    """Return the JSON keys that can be computed from the recording header."""
    fs = acq.sample_rate
    derived: dict[str, Any] = {"SamplingFrequency": fs}
    derived.update(count_channel_types(acq.types))
    derived["RecordingDuration"] = (acq.n_epochs * acq.n_samples) / fs
    derived["RecordingType"] = "continuous" if acq.n_epochs == 1 else "epoched"
    derived["EpochLength"] = acq.n_samples / fs
    derived["ContinuousHeadLocalization"] = any(
        str(t).strip().lower() == HEADLOC_TYPE for t in acq.types
    )
    manufacturer = MANUFACTURERS.get(acq.format)
    if manufacturer:
        derived["Manufacturer"] = manufacturer
    if acq.model_name:
        derived["ManufacturersModelName"] = acq.model_name
    return derived


def synthesize_meg(acq: RecordingAcquisition, cfg: ConversionConfig) -> dict[str, Any]:
    """Return the merged ``*_meg.json`` record for *acq*.

    Args:
        acq: Recording descriptor returned by the reader.
        cfg: Validated options.

    Returns:
        Flat dictionary restricted to the generic and MEG vocabularies.
    """
    vocab = GENERIC_FIELDS | MEG_FIELDS
    derived = select_fields(derive_meg_fields(acq), vocab)
    generic = select_fields(cfg, GENERIC_FIELDS)
    meg = select_fields(cfg.meg, MEG_FIELDS)

    log.debug(
        "[meg] %d derived, %d generic, %d meg option key(s)",
        len(derived),
        len(generic),
        len(meg),
    )
    return merge_all(derived, generic, meg)


__all__ = [
    "CHANNEL_TYPE_GROUPS",
    "count_channel_types",
    "derive_meg_fields",
    "synthesize_meg",
]
