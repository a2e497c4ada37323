"""
Configuration package façade.

Exports the small, stable surface that external callers rely on:

* :func:`load_config` – Read, layer, and validate the options YAML into a
  single :class:`ConversionConfig` instance.
* :class:`ConversionConfig` – Pydantic model representing the validated
  options for one acquisition.
* The field vocabularies used when selecting sidecar keys.

Anything not imported here is considered private implementation detail.
"""

from .loader import load_config, parse_assignments  # noqa: F401
from .schema import (  # noqa: F401
    ANAT_FIELDS,
    CHANNEL_COLUMNS,
    GENERIC_FIELDS,
    MEG_FIELDS,
    AnatOptions,
    ChannelsOptions,
    ConversionConfig,
    EventsOptions,
    MegOptions,
)

__all__: list[str] = [
    "load_config",
    "parse_assignments",
    "ConversionConfig",
    "AnatOptions",
    "MegOptions",
    "ChannelsOptions",
    "EventsOptions",
    "GENERIC_FIELDS",
    "ANAT_FIELDS",
    "MEG_FIELDS",
    "CHANNEL_COLUMNS",
]
