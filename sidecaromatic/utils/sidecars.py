"""Read and write BIDS sidecar files.

* JSON metadata is *merged* into an existing document: keys already on disk
  survive unless the new record sets them, and empty values are dropped.
* TSV tables are *never* merged. Writing a table over an existing file that
  already holds rows is refused with :class:`SidecarExistsError` so a rerun
  cannot silently overwrite curated events or channel annotations.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

import pandas as pd
from pydantic import BaseModel

from .errors import SidecarExistsError
from .merge import drop_empty, is_unset, merge

log = logging.getLogger(__name__)

# Longest suffix first so ``.nii.gz`` is not mistaken for ``.gz``.
_ACQ_SUFFIXES: tuple[str, ...] = (".nii.gz", ".nii", ".ds", ".meg4", ".res4", ".fif")


class SidecarPaths(BaseModel, frozen=True):
    """Output locations derived from one acquisition.

    Attributes
    ----------
    metadata
        ``<stem>.json`` next to the acquisition.
    channels / events
        ``<stem>_channels.tsv`` and ``<stem>_events.tsv`` (recordings only).
    """

    metadata: Path
    channels: Path
    events: Path


# ─────────────────────────────────────────────────────────────────────────────
# Path helpers
# ─────────────────────────────────────────────────────────────────────────────
def _strip_suffix(name: str) -> str:
    lower = name.lower()
    for suffix in _ACQ_SUFFIXES:
        if lower.endswith(suffix):
            return name[: -len(suffix)]
    return Path(name).stem


def sidecar_paths(dataset: Path | str) -> SidecarPaths:
    """Return the sidecar locations for *dataset*.

    Files inside a CTF ``.ds`` directory (``.meg4``/``.res4``) write their
    sidecars next to the directory, named after it.
    """
    path = Path(dataset)
    if path.parent.suffix.lower() == ".ds" and path.suffix.lower() in {".meg4", ".res4"}:
        path = path.parent
    stem = _strip_suffix(path.name)
    parent = path.parent
    return SidecarPaths(
        metadata=parent / f"{stem}.json",
        channels=parent / f"{stem}_channels.tsv",
        events=parent / f"{stem}_events.tsv",
    )


# ─────────────────────────────────────────────────────────────────────────────
# JSON
# ─────────────────────────────────────────────────────────────────────────────
def _json_default(value: Any) -> Any:
    """Convert numpy scalars/arrays and paths for :func:`json.dumps`."""
    if hasattr(value, "tolist"):
        return value.tolist()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serialisable")


def read_metadata(path: Path) -> dict[str, Any]:
    """Return the JSON object stored at *path*.

    A missing file, malformed JSON or a non-object document all yield ``{}``.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        log.warning("[sidecar] ignoring unreadable %s: %s", path.name, exc)
        return {}
    if not isinstance(data, dict):
        log.warning("[sidecar] ignoring %s: top level is not an object", path.name)
        return {}
    return data


def write_metadata(path: Path, record: Mapping[str, Any]) -> Optional[Path]:
    """Merge *record* into the JSON document at *path*.

    Args:
        path: Destination ``*.json`` file.
        record: Flat metadata record; unset values are ignored.

    Returns:
        *path* when the file was written, ``None`` when *record* was empty.
    """
    if not drop_empty(record):
        log.info("[sidecar] nothing to write for %s", path.name)
        return None

    existing = read_metadata(path)
    merged = drop_empty(merge(existing, record))

    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(merged, indent=2, ensure_ascii=False, default=_json_default)
    path.write_text(text + "\n", encoding="utf-8")
    log.info(
        "[sidecar] wrote %s (%d key(s), %d already on disk)",
        path,
        len(merged),
        len(existing),
    )
    return path


# ─────────────────────────────────────────────────────────────────────────────
# TSV
# ─────────────────────────────────────────────────────────────────────────────
def _has_rows(path: Path) -> bool:
    """Return ``True`` when *path* holds at least one data row.

    A file that cannot be parsed counts as non-empty.
    """
    if path.stat().st_size == 0:
        return False
    try:
        existing = pd.read_csv(path, sep="\t", dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError:
        return False
    except (OSError, ValueError, pd.errors.ParserError) as exc:
        log.debug("[sidecar] cannot parse %s: %s", path.name, exc)
        return True
    return len(existing) > 0


def check_table_target(path: Path) -> None:
    """Raise :class:`SidecarExistsError` when *path* already holds rows."""
    if path.exists() and _has_rows(path):
        raise SidecarExistsError(f"existing file is not empty: {path}")


def write_table(path: Path, frame: Optional[pd.DataFrame]) -> Optional[Path]:
    """Write *frame* to *path* as tab-separated values.

    Args:
        path: Destination ``*.tsv`` file.
        frame: Table to write; ``None`` or an empty frame is skipped.

    Returns:
        *path* when the file was written, ``None`` otherwise.

    Raises:
        SidecarExistsError: When *path* already contains rows.
    """
    if frame is None or frame.empty:
        log.info("[sidecar] no rows for %s", path.name)
        return None

    check_table_target(path)
    out = frame.astype(object).where(~frame.map(is_unset), None)
    path.parent.mkdir(parents=True, exist_ok=True)
    out.to_csv(path, sep="\t", index=False, na_rep="n/a")
    log.info("[sidecar] wrote %s (%d row(s))", path, len(out))
    return path


__all__ = [
    "SidecarPaths",
    "check_table_target",
    "read_metadata",
    "sidecar_paths",
    "write_metadata",
    "write_table",
]
