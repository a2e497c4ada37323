"""
Public façade for the *utils* package.

Anything imported here becomes part of the *stable* public API.
Internal helpers live in their own modules and are **not** re-exported.
"""

from __future__ import annotations

# ─── errors ──────────────────────────────────────────────────────────────
from .errors import (
    CalibrationError,
    ConversionError,
    LengthMismatchError,
    SidecarExistsError,
    TrialTableError,
    UnsupportedFormatError,
)

# ─── selection & merge ───────────────────────────────────────────────────
from .merge import (
    drop_empty,
    expand_override,
    is_empty,
    is_unset,
    merge,
    merge_all,
    merge_vector,
    select_fields,
)

# ─── tables ──────────────────────────────────────────────────────────────
from .channels import build_channels_frame
from .events import build_events_frame, load_trial_table

# ─── sidecar I/O ─────────────────────────────────────────────────────────
from .sidecars import (
    SidecarPaths,
    check_table_target,
    read_metadata,
    sidecar_paths,
    write_metadata,
    write_table,
)
from .display import echo_banner, echo_dataset, echo_skipped, echo_success

# ------------------------------------------------------------------------
__all__: list[str] = [
    # errors
    "CalibrationError",
    "ConversionError",
    "LengthMismatchError",
    "SidecarExistsError",
    "TrialTableError",
    "UnsupportedFormatError",
    # merge
    "drop_empty",
    "expand_override",
    "is_empty",
    "is_unset",
    "merge",
    "merge_all",
    "merge_vector",
    "select_fields",
    # tables
    "build_channels_frame",
    "build_events_frame",
    "load_trial_table",
    # sidecars
    "SidecarPaths",
    "check_table_target",
    "read_metadata",
    "sidecar_paths",
    "write_metadata",
    "write_table",
    # display
    "echo_banner",
    "echo_dataset",
    "echo_skipped",
    "echo_success",
]
