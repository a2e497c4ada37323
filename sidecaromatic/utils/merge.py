"""Selection and merge primitives for sidecar metadata.

Every sidecar value passes through the helpers in this module:

* :func:`select_fields` keeps the keys of a record that belong to a BIDS
  vocabulary.
* :func:`merge` / :func:`merge_all` combine flat records with right-biased
  precedence (later sources win).
* :func:`merge_vector` combines a per-channel column read from the data with
  the caller's overrides, element by element.

``None``, ``pandas.NA``, a float NaN and the empty string act as the
*unset* marker. Unset values never overwrite a real value in any of the
merges.
"""

from __future__ import annotations

import math
from functools import reduce
from typing import Any, Iterable, List, Mapping, Sequence

import numpy as np
import pandas as pd
from pydantic import BaseModel

from .errors import LengthMismatchError

__all__ = [
    "is_unset",
    "is_empty",
    "select_fields",
    "merge",
    "merge_all",
    "expand_override",
    "merge_vector",
    "drop_empty",
]


def is_unset(value: Any) -> bool:
    """Return ``True`` when *value* is the unset marker."""
    if value is None or value is pd.NA:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (float, np.floating)):
        return math.isnan(value)
    return False


def is_empty(value: Any) -> bool:
    """Return ``True`` for unset values and empty containers.

    ``0`` and ``False`` are real values and are kept.
    """
    if is_unset(value):
        return True
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def _as_mapping(record: Mapping[str, Any] | BaseModel | None) -> Mapping[str, Any]:
    if record is None:
        return {}
    if isinstance(record, BaseModel):
        return dict(record)
    return record


def select_fields(
    record: Mapping[str, Any] | BaseModel | None, vocabulary: Iterable[str]
) -> dict[str, Any]:
    """Return the subset of *record* whose keys belong to *vocabulary*.

    Args:
        record: Flat mapping or pydantic model (caller options, calibration
            metadata, derived fields).
        vocabulary: Accepted field names.

    Returns:
        New dictionary with unset values dropped and values left untouched.
    """
    data = _as_mapping(record)
    vocab = set(vocabulary)
    return {k: v for k, v in data.items() if k in vocab and not is_unset(v)}


def merge(
    base: Mapping[str, Any] | None, override: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Right-biased union of two flat records.

    Keys present in *override* replace the same key of *base* as a whole
    value; keys found in only one side are kept. Unset values in *override*
    are ignored.
    """
    out = dict(base or {})
    for key, val in (override or {}).items():
        if is_unset(val):
            continue
        out[key] = val
    return out


def merge_all(*records: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fold :func:`merge` over *records* left to right; the last source wins."""
    return reduce(merge, records, {})


def drop_empty(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return *record* without keys whose value :func:`is_empty`."""
    return {k: v for k, v in record.items() if not is_empty(v)}


def expand_override(value: Any, n: int) -> List[Any]:
    """Turn a caller-supplied column into an *n*-element vector.

    ``None`` yields *n* unset entries and a scalar is repeated *n* times.
    Arrays and :class:`pandas.Series` count as sequences.
    Sequences are returned as a list without resizing so the length check in
    :func:`merge_vector` still applies.
    """
    if value is None:
        return [None] * n
    if isinstance(value, (np.ndarray, pd.Series)):
        return value.tolist()
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value] * n


def merge_vector(data: Sequence[Any], caller: Sequence[Any]) -> List[Any]:
    """Merge a data-derived column with the caller's column element-wise.

    Args:
        data: Values read from the acquisition, one per channel.
        caller: Caller overrides of the same length; unset entries keep the
            data value.

    Returns:
        New list aligned with *data*.

    Raises:
        LengthMismatchError: When the two sequences differ in length.
    """
    if len(data) != len(caller):
        raise LengthMismatchError(
            f"override has {len(caller)} values but the recording has {len(data)}"
        )
    return [d if is_unset(c) else c for d, c in zip(data, caller)]
