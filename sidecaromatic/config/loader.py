"""
YAML options loader.

This helper locates, reads, merges, and validates the options YAML before
returning a :class:`sidecaromatic.config.schema.ConversionConfig` instance.

Search precedence for the YAML (first match wins)
1. An explicit path argument (``--config`` on the CLI).
2. ``<bids-root>/code/config/sidecaromatic.yaml`` – project-local override.
3. The packaged default shipped inside the wheel.

``--set key=value`` assignments and the dataset path are layered on top of
the YAML document before validation, so the rest of *sidecaromatic* treats
configuration as an already-validated object.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

import yaml
from importlib.resources import as_file, files

from .schema import ConversionConfig

# --------------------------------------------------------------------------- #
# Wheel-internal fallback (works even from a zipped wheel)                    #
# --------------------------------------------------------------------------- #
try:
    _DEFAULT_OPTIONS = files("sidecaromatic.resources") / "default_options.yaml"
except ModuleNotFoundError:
    _DEFAULT_OPTIONS = (
        Path(__file__).resolve().parent.parent / "resources" / "default_options.yaml"
    )

_LOCAL_NAME = "sidecaromatic.yaml"

# --------------------------------------------------------------------------- #
# Helper functions                                                            #
# --------------------------------------------------------------------------- #


def _dataset_local(root: Optional[Path]) -> Optional[Path]:
    """Return ``<root>/code/config/sidecaromatic.yaml`` or *None*."""
    if root is None:
        return None
    return root / "code" / "config" / _LOCAL_NAME


def _first_existing(*candidates: Optional[Path]) -> Optional[Path]:
    """Return the first path in *candidates* that exists on disk."""
    for p in candidates:
        if p is not None and p.exists():
            return p
    return None


def _load_yaml(path: Path) -> dict:
    """Read a YAML file; an empty document yields an empty dict."""
    return yaml.safe_load(path.read_text()) or {}


def _resolve_yaml(explicit: Optional[Path], dataset_root: Optional[Path]) -> Path:
    """Resolve the options YAML according to the documented precedence."""
    resolved = _first_existing(explicit, _dataset_local(dataset_root))
    if resolved is None:
        with as_file(_DEFAULT_OPTIONS) as p:
            resolved = p
    return resolved


def parse_assignments(assignments: Iterable[str]) -> dict[str, Any]:
    """Convert ``key=value`` strings into a nested mapping.

    Dotted keys address namespaces (``meg.PowerLineFrequency=50``). Values are
    parsed as YAML scalars so ``50`` becomes an int, ``no`` a bool and
    ``[a, b]`` a list.

    Args:
        assignments: Raw strings as typed on the command line.

    Returns:
        Nested dictionary ready to be merged into the YAML document.

    Raises:
        ValueError: When an assignment has no ``=`` or an empty key.
    """
    out: dict[str, Any] = {}
    for raw in assignments:
        if "=" not in raw:
            raise ValueError(f"bad assignment '{raw}' (expected key=value)")
        key, value = (s.strip() for s in raw.split("=", 1))
        if not key:
            raise ValueError(f"bad assignment '{raw}' (empty key)")
        *parents, leaf = key.split(".")
        node = out
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = yaml.safe_load(value) if value else None
    return out


def _nested_update(dst: dict, src: Mapping[str, Any]) -> dict:
    """Merge *src* into *dst* one namespace level deep and return *dst*."""
    for key, val in src.items():
        if isinstance(val, Mapping) and isinstance(dst.get(key), dict):
            dst[key] = {**dst[key], **val}
        else:
            dst[key] = val
    return dst


# --------------------------------------------------------------------------- #
# Public API                                                                  #
# --------------------------------------------------------------------------- #
def load_config(
    *,
    config_path: Optional[str | Path] = None,
    dataset_root: Optional[str | Path] = None,
    dataset: Optional[str | Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ConversionConfig:
    """Return a fully validated :class:`ConversionConfig`.

    Args:
        config_path: Explicit options YAML. ``None`` triggers the search
            sequence described in the module doc-string.
        dataset_root: BIDS dataset root, used for the project-local override.
        dataset: Acquisition path; replaces any ``dataset`` key in the YAML.
        overrides: Nested mapping applied last (see :func:`parse_assignments`).

    Returns:
        A :class:`ConversionConfig` object ready for downstream use.

    Raises:
        RuntimeError: When the merged document fails pydantic validation.
    """
    root = Path(dataset_root).expanduser().resolve() if dataset_root else None
    explicit = Path(config_path).expanduser().resolve() if config_path else None

    merged: dict = _load_yaml(_resolve_yaml(explicit, root))
    if overrides:
        merged = _nested_update(merged, overrides)
    if dataset is not None:
        merged["dataset"] = Path(dataset).expanduser()

    try:
        return ConversionConfig(**merged)
    except Exception as exc:  # pydantic.ValidationError or bad YAML types
        raise RuntimeError(f"Invalid configuration – {exc}") from exc
