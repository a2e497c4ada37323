"""Module wrapper so running ``python -m sidecaromatic.cli`` matches the console script."""

from sidecaromatic.cli import main  # Re-exported Click command-group


if __name__ == "__main__":  # pragma: no cover
    main()
