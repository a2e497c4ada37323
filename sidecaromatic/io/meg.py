"""
Read MEG recordings with *mne*.

The reader turns an ``mne.io.Raw`` object into a
:class:`~sidecaromatic.models.RecordingAcquisition`:

* channel types are normalised to the labels used in the channel table
  (``megmag``, ``meggrad``, ``megplanar``, ``refmag``, ``refgrad``,
  ``trigger``, ``headloc`` …);
* units are reported as SI symbols;
* events come from every stim channel plus the annotations stored in the
  file, sorted by sample.

*mne* is imported lazily by :mod:`sidecaromatic.io.reader` so that the
anatomical path works without loading it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import mne
from mne.io.constants import FIFF

from sidecaromatic.models import RawEvent, RecordingAcquisition, RecordingFormat
from sidecaromatic.utils.errors import ConversionError

log = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────────────────
# Lookup tables
# ─────────────────────────────────────────────────────────────────────────────
_AXIAL_GRADIOMETERS = frozenset(
    {
        FIFF.FIFFV_COIL_CTF_GRAD,
        FIFF.FIFFV_COIL_AXIAL_GRAD_5CM,
        FIFF.FIFFV_COIL_KIT_GRAD,
    }
)
_REF_GRADIOMETERS = frozenset(
    {
        FIFF.FIFFV_COIL_CTF_REF_GRAD,
        FIFF.FIFFV_COIL_CTF_OFFDIAG_REF_GRAD,
    }
)

# mne channel type → channel-table label, for types whose label does not
# depend on the coil.
_MNE_TYPES: Dict[str, str] = {
    "grad": "megplanar",
    "stim": "trigger",
    "eeg": "eeg",
    "ecog": "ecog",
    "seeg": "seeg",
    "eog": "eog",
    "ecg": "ecg",
    "emg": "emg",
    "misc": "misc",
    "chpi": "headloc",
}

_UNITS: Dict[int, str] = {
    FIFF.FIFF_UNIT_T: "T",
    FIFF.FIFF_UNIT_T_M: "T/m",
    FIFF.FIFF_UNIT_V: "V",
    FIFF.FIFF_UNIT_AM: "A*m",
    FIFF.FIFF_UNIT_S: "s",
}

# CTF head-localisation coils are stored as misc channels named HLC00nn.
_HEADLOC_PREFIX = "HLC"

_CTF_SYSTEMS = (64, 151, 275)


# ─────────────────────────────────────────────────────────────────────────────
# Channel helpers
# ─────────────────────────────────────────────────────────────────────────────
def _chantype(ch: Dict[str, Any], mne_type: str) -> str:
    """Return the channel-table label for one ``info["chs"]`` entry."""
    if str(ch["ch_name"]).upper().startswith(_HEADLOC_PREFIX):
        return "headloc"
    coil = int(ch.get("coil_type", FIFF.FIFFV_COIL_NONE))
    if mne_type == "mag":
        return "meggrad" if coil in _AXIAL_GRADIOMETERS else "megmag"
    if mne_type == "ref_meg":
        return "refgrad" if coil in _REF_GRADIOMETERS else "refmag"
    return _MNE_TYPES.get(mne_type, mne_type)


def _unit(ch: Dict[str, Any]) -> Optional[str]:
    return _UNITS.get(int(ch.get("unit", FIFF.FIFF_UNIT_NONE)))


def _ctf_model_name(types: List[str]) -> str:
    """Return ``CTF<n>`` for the nearest standard CTF system size."""
    n_meg = sum(t in ("meggrad", "megmag") for t in types)
    return f"CTF{min(_CTF_SYSTEMS, key=lambda size: abs(size - n_meg))}"


# ─────────────────────────────────────────────────────────────────────────────
# Event helpers
# ─────────────────────────────────────────────────────────────────────────────
def _stim_events(raw: mne.io.BaseRaw, types: List[str]) -> List[RawEvent]:
    events: List[RawEvent] = []
    for name, kind in zip(raw.ch_names, types):
        if kind != "trigger":
            continue
        try:
            found = mne.find_events(
                raw, stim_channel=name, shortest_event=1, verbose=False
            )
        except ValueError as exc:
            log.warning("[meg] no events decoded from %s: %s", name, exc)
            continue
        for sample, _previous, value in found:
            events.append(
                RawEvent(
                    type=name,
                    value=int(value),
                    sample=int(sample) - raw.first_samp + 1,
                )
            )
    return events


def _annotation_events(raw: mne.io.BaseRaw) -> List[RawEvent]:
    annotations = raw.annotations
    if len(annotations) == 0:
        return []
    sfreq = raw.info["sfreq"]
    # Onsets are relative to orig_time when set, else to the first sample.
    origin = raw.first_time if annotations.orig_time is not None else 0.0
    return [
        RawEvent(
            type=str(annot["description"]),
            sample=int(round((annot["onset"] - origin) * sfreq)) + 1,
            duration=float(annot["duration"]) * sfreq,
        )
        for annot in annotations
    ]


def _epochs(raw: mne.io.BaseRaw, fmt: RecordingFormat) -> tuple[int, int]:
    """Return ``(n_samples_per_epoch, n_epochs)``."""
    if fmt is RecordingFormat.CTF:
        extras = (getattr(raw, "_raw_extras", None) or [{}])[0] or {}
        block = int(extras.get("block_size") or 0)
        if block and raw.n_times % block == 0 and raw.n_times > block:
            return block, raw.n_times // block
    return raw.n_times, 1


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────
def _open(path: Path, fmt: RecordingFormat) -> mne.io.BaseRaw:
    try:
        if fmt is RecordingFormat.CTF:
            return mne.io.read_raw_ctf(str(path), preload=False, verbose=False)
        return mne.io.read_raw_fif(str(path), preload=False, verbose=False)
    except (OSError, ValueError, RuntimeError) as exc:
        raise ConversionError(f"cannot read MEG recording {path}: {exc}") from exc


def read_meg(path: Path, fmt: RecordingFormat) -> RecordingAcquisition:
    """Return a :class:`RecordingAcquisition` for the recording at *path*.

    Args:
        path: CTF ``.ds`` directory or ``.fif`` file.
        fmt: Vendor format decided by :func:`sidecaromatic.io.read_acquisition`.
    """
    raw = _open(path, fmt)
    chs = raw.info["chs"]
    types = [_chantype(ch, t) for ch, t in zip(chs, raw.get_channel_types())]
    units = [_unit(ch) for ch in chs]

    events = sorted(
        _stim_events(raw, types) + _annotation_events(raw),
        key=lambda e: (e.sample if e.sample is not None else 0),
    )
    n_samples, n_epochs = _epochs(raw, fmt)

    acq = RecordingAcquisition(
        path=path,
        format=fmt,
        sample_rate=float(raw.info["sfreq"]),
        n_samples=n_samples,
        n_epochs=n_epochs,
        labels=list(raw.ch_names),
        types=types,
        units=units,
        events=events,
        model_name=_ctf_model_name(types) if fmt is RecordingFormat.CTF else None,
    )
    log.info(
        "[meg] %s: %d channel(s), %.1f Hz, %d event(s)",
        path.name,
        acq.n_channels,
        acq.sample_rate,
        len(events),
    )
    return acq


__all__ = ["read_meg"]
