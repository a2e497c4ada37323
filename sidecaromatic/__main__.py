"""
Module entry-point that makes the package runnable with

    python -m sidecaromatic
    python -m sidecaromatic.cli

The behaviour is identical to the *sidecaromatic-cli* console script because
the Click **group** object imported below performs all CLI dispatching.
"""

from sidecaromatic.cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
