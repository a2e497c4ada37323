"""
Build the ``*_events.tsv`` table for an MEG recording.

Three mutually exclusive sources, chosen by what the caller supplied as
``trl``:

1. a :class:`pandas.DataFrame` (or a TSV/CSV file holding one) whose first
   three columns are ``begsample``, ``endsample`` and ``offset``, used as is;
2. a plain trial matrix with the same three leading columns, converted to
   ``onset``/``duration`` in seconds;
3. nothing, in which case the events decoded from the recording are used.

Sample indices are 1-based: the first sample of the file is sample 1 and
therefore has onset ``0.0``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

import numpy as np
import pandas as pd

from sidecaromatic.models import RecordingAcquisition
from .errors import TrialTableError
from .merge import is_unset

log = logging.getLogger(__name__)

TRIAL_COLUMNS: tuple[str, str, str] = ("begsample", "endsample", "offset")
EVENT_COLUMNS: tuple[str, ...] = ("onset", "duration", "sample", "event_type", "event_value")


# ─────────────────────────────────────────────────────────────────────────────
# Trial table (mode 1)
# ─────────────────────────────────────────────────────────────────────────────
def load_trial_table(path: Path | str) -> pd.DataFrame:
    """Read a trial table from a ``.tsv``/``.csv`` file."""
    path = Path(path)
    if not path.exists():
        raise TrialTableError(f"trial table not found: {path}")
    sep = "," if path.suffix.lower() == ".csv" else "\t"
    return pd.read_csv(path, sep=sep)


def _validate_trial_table(trl: pd.DataFrame) -> pd.DataFrame:
    leading = tuple(str(c) for c in trl.columns[:3])
    if leading != TRIAL_COLUMNS:
        raise TrialTableError(
            "trial table must start with columns "
            f"{', '.join(TRIAL_COLUMNS)}; got {', '.join(leading) or 'none'}"
        )
    return trl.reset_index(drop=True)


# ─────────────────────────────────────────────────────────────────────────────
# Trial matrix (mode 2)
# ─────────────────────────────────────────────────────────────────────────────
def _from_trial_matrix(trl: Any, fs: float) -> pd.DataFrame:
    try:
        matrix = np.asarray(trl, dtype=float)
    except (TypeError, ValueError) as exc:
        raise TrialTableError(f"trial matrix must be numeric: {exc}") from exc
    if matrix.ndim == 1:
        matrix = matrix.reshape(1, -1)
    if matrix.ndim != 2 or matrix.shape[1] < 2:
        raise TrialTableError(
            f"trial matrix must have at least begsample and endsample columns; "
            f"got shape {matrix.shape}"
        )

    begsample, endsample = matrix[:, 0], matrix[:, 1]
    if matrix.shape[1] >= 3 and np.any(matrix[:, 2] != 0):
        log.warning("[events] non-zero trial offsets are not written to the events table")
    if matrix.shape[1] > 3:
        log.warning(
            "[events] %d extra trial column(s) are not written to the events table",
            matrix.shape[1] - 3,
        )

    return pd.DataFrame(
        {
            "onset": (begsample - 1) / fs,
            "duration": (endsample - begsample + 1) / fs,
        }
    )


# ─────────────────────────────────────────────────────────────────────────────
# Raw events (mode 3)
# ─────────────────────────────────────────────────────────────────────────────
def _nan_if_unset(value: Any) -> Any:
    return np.nan if is_unset(value) else value


def _is_integral(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    if isinstance(value, (int, np.integer)):
        return True
    return isinstance(value, (float, np.floating)) and float(value).is_integer()


def _column(values: list[Any]) -> Any:
    """Nullable integer column when every set value is whole, else object.

    Keeps ``5`` from being written as ``5.0`` next to an unset ``n/a``.
    """
    present = [v for v in values if not is_unset(v)]
    if all(_is_integral(v) for v in present):
        return pd.array(
            [pd.NA if is_unset(v) else int(v) for v in values], dtype="Int64"
        )
    return pd.Series([None if is_unset(v) else v for v in values], dtype=object)


def _from_raw_events(acq: RecordingAcquisition) -> Optional[pd.DataFrame]:
    if not acq.events:
        return None

    fs = acq.sample_rate
    sample = np.array([_nan_if_unset(e.sample) for e in acq.events], dtype=float)
    duration = np.array([_nan_if_unset(e.duration) for e in acq.events], dtype=float)
    frame = pd.DataFrame(
        {
            "onset": (sample - 1) / fs,
            "duration": duration / fs,
            "sample": _column([e.sample for e in acq.events]),
            "event_type": [e.type for e in acq.events],
            "event_value": _column([e.value for e in acq.events]),
        },
        columns=list(EVENT_COLUMNS),
    )
    return frame


def _is_empty(trl: Any) -> bool:
    if trl is None:
        return True
    if isinstance(trl, pd.DataFrame):
        return len(trl.index) == 0
    try:
        return np.size(trl) == 0
    except ValueError:
        return False


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────
def build_events_frame(
    acq: RecordingAcquisition, trl: Any = None
) -> Optional[pd.DataFrame]:
    """Return the events table for *acq*.

    Args:
        acq: Recording descriptor (supplies the sample rate and raw events).
        trl: Optional trial definition: a DataFrame, a path to a TSV/CSV
            file, or an N×3+ matrix of ``begsample, endsample, offset``.

    Returns:
        The events table, or ``None`` when there is nothing to write (no
        trial definition and no decoded events).

    Raises:
        TrialTableError: When a trial table does not start with the
            required columns or a trial matrix is not numeric.
    """
    if isinstance(trl, str) and not trl.strip():
        trl = None
    if isinstance(trl, (str, Path)):
        trl = load_trial_table(trl)

    if _is_empty(trl):
        if trl is not None:
            log.info("[events] empty trial definition, using decoded events")
    elif isinstance(trl, pd.DataFrame):
        frame = _validate_trial_table(trl)
        log.info("[events] using trial table with %d row(s)", len(frame))
        return frame
    else:
        frame = _from_trial_matrix(trl, acq.sample_rate)
        log.info("[events] %d trial(s) from trial matrix", len(frame))
        return frame

    frame = _from_raw_events(acq)
    if frame is None:
        log.info("[events] no events in %s", acq.path.name)
    else:
        log.info("[events] %d event(s) decoded from %s", len(frame), acq.path.name)
    return frame


__all__ = ["EVENT_COLUMNS", "TRIAL_COLUMNS", "build_events_frame", "load_trial_table"]
