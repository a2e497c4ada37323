"""Expose the project-wide Click group for the ``sidecaromatic-cli`` script.

The module:

* declares a single Click *group* called :pyfunc:`main`;
* wires common global flags (dataset root, verbosity, log mirror);
* sets up logging via :pyfunc:`sidecaromatic.utils.logging.setup_logging`;
* registers every sub-command located in sibling modules.

Configuration is loaded by the sub-commands themselves because it depends on
the acquisition they are given.
"""

from __future__ import annotations

import importlib
import os
from pathlib import Path
from typing import Any, Dict

import click

from sidecaromatic import __version__
from sidecaromatic.utils.logging import setup_logging


class LazyGroup(click.Group):
    """Click group that imports sub-commands lazily."""

    def __init__(self, *args, **kwargs):
        self._lazy: dict[str, str] = {}
        super().__init__(*args, **kwargs)

    def set_lazy_command(self, name: str, target: str) -> None:
        """Register *name* to be imported from ``target`` on first use."""
        self._lazy[name] = target

    def list_commands(self, ctx):
        return sorted(set(super().list_commands(ctx)) | set(self._lazy))

    def get_command(self, ctx, cmd_name):  # noqa: D401 - Click signature
        """Resolve *cmd_name* from the eager map or import table."""
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd
        target = self._lazy.get(cmd_name)
        if not target:
            return None
        module_name, attr = target.split(":", 1)
        module = importlib.import_module(module_name)
        cmd = getattr(module, attr)
        self.add_command(cmd, name=cmd_name)
        return cmd


# ─────────────────────────────────────────────────────────────────────────────
# Context settings shared by the entire Click hierarchy
# ─────────────────────────────────────────────────────────────────────────────
_CTX: Dict[str, Any] = dict(
    help_option_names=["-h", "--help"],
    show_default=True,
    max_content_width=120,
)


@click.group(
    cls=LazyGroup,
    context_settings=_CTX,
    help="""\b
sidecaromatic-cli – write BIDS sidecars for MRI and MEG acquisitions.

""",
)
@click.version_option(__version__)
@click.option(
    "-r",
    "--bids-root",
    type=click.Path(file_okay=False, path_type=Path),
    help="BIDS dataset root; selects code/config/sidecaromatic.yaml and code/logs/.",
)
@click.option("-v", "--verbose", is_flag=True, help="INFO-level console output.")
@click.option("--debug", is_flag=True, help="DEBUG console output.")
@click.option(
    "--save-logfile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Mirror console output into this plain-text file.",
)
@click.pass_context
def main(  # noqa: D401 – Click requires the callback to be named “main”.
    ctx: click.Context,
    bids_root: Path | None,
    verbose: bool,
    debug: bool,
    save_logfile: Path | None,
) -> None:
    """Root command executed by *sidecaromatic-cli*.

    Args:
        ctx: Click runtime context that carries objects across sub-commands.
        bids_root: Optional dataset root supplied via ``--bids-root``. Falls
            back to ``$BIDS_ROOT`` or the current directory.
        verbose: Emit INFO-level messages on stdout.
        debug: Emit DEBUG-level messages.
        save_logfile: Optional path for a plain-text log that mirrors console
            output.
    """
    root = (bids_root or Path(os.environ.get("BIDS_ROOT", "."))).resolve()

    setup_logging(
        dataset_root=root if root.exists() else None,
        verbose=verbose,
        debug=debug,
        extra_text_log=save_logfile,
    )

    ctx.obj = {
        "root": root,
        "verbose": verbose,
        "debug": debug,
    }


main.set_lazy_command("convert", "sidecaromatic.cli.convert:cli")

# The public symbol exported by this module.
cli = main
__all__: list[str] = ["main"]
