"""
Typed, immutable value objects returned by the conversion pipeline.

Every class inherits from :class:`pydantic.BaseModel` with ``frozen=True`` so
results can be logged or compared without fear of mutation.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel


class ConversionResult(BaseModel, frozen=True):
    """Summary returned by :func:`sidecaromatic.pipelines.convert_acquisition`.

    Attributes
    ----------
    dataset
        Acquisition that was converted.
    written
        Sidecars created or updated, in write order.
    skipped
        Sidecars disabled by a ``write`` flag or with nothing to write.
    """

    dataset: Path
    written: List[Path] = []
    skipped: List[Path] = []

    def path_for(self, suffix: str) -> Optional[Path]:
        """Return the written path ending in *suffix*, or ``None``."""
        return next((p for p in self.written if p.name.endswith(suffix)), None)


__all__ = ["ConversionResult"]
