"""
Public façade for the *pipelines* sub-package.

This module exposes the helpers used by the CLI and by scripts that drive
the conversion one acquisition at a time:

* **Metadata synthesis**
    * :func:`synthesize_metadata` – dispatch on the descriptor type
    * :func:`synthesize_anat`
    * :func:`synthesize_meg`

* **End-to-end conversion**
    * :func:`convert_acquisition`
    * :class:`ConversionResult`

Importing from ``sidecaromatic.pipelines`` rather than individual modules
keeps call-sites stable even when underlying filenames change.
"""

from __future__ import annotations

from .types import ConversionResult
from .anatomical import synthesize_anat
from .meg import CHANNEL_TYPE_GROUPS, synthesize_meg
from .synthesize import synthesize_metadata
from .convert import convert_acquisition

__all__: list[str] = [
    # Synthesis
    "synthesize_metadata",
    "synthesize_anat",
    "synthesize_meg",
    "CHANNEL_TYPE_GROUPS",
    # Conversion
    "convert_acquisition",
    "ConversionResult",
]
