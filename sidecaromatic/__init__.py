"""
sidecaromatic package initialisation.

The module performs two small tasks:

1. **Expose the version string**
   ``sidecaromatic.__version__`` is resolved at import-time from the
   installed distribution metadata.

2. **Re-export the public YAML loader**
   :func:`sidecaromatic.config.load_config` is available at the top level so
   call-sites can simply do::

       from sidecaromatic import load_config

Module attributes
-----------------
__version__ : str
    Semantic version derived from the installed wheel.
load_config : Callable
    Shortcut to :pyfunc:`sidecaromatic.config.load_config`.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__: str = version("sidecaromatic")
except PackageNotFoundError:
    # Source tree without an installed wheel.
    __version__ = "0.0.0"

from .config import load_config  # noqa: E402

__all__: list[str] = ["load_config", "__version__"]
