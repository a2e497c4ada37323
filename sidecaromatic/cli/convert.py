"""
CLI front-end for :pyfunc:`sidecaromatic.pipelines.convert_acquisition`.

One invocation converts one acquisition: the metadata JSON is merged into
whatever already sits next to the file, and for MEG recordings the channel
and event tables are created (never overwritten).

Examples
--------
    sidecaromatic-cli -r /data/study convert sub-01/anat/sub-01_T1w.nii.gz \\
        --set anat.dicomfile=sourcedata/dicom/00080_1.IMA

    sidecaromatic-cli convert sub-01/meg/sub-01_task-rest_meg.ds \\
        --set meg.PowerLineFrequency=50 --set TaskName=rest
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import click
import structlog

from sidecaromatic.config import load_config, parse_assignments
from sidecaromatic.pipelines import convert_acquisition
from sidecaromatic.utils.display import (
    echo_banner,
    echo_dataset,
    echo_skipped,
    echo_success,
)
from sidecaromatic.utils.errors import ConversionError
from sidecaromatic.utils.events import load_trial_table

log = structlog.get_logger()


def _resolve(path: Path | None, root: Path) -> Path | None:
    """Anchor a relative path at the dataset root when it exists there."""
    if path is None or path.is_absolute() or path.exists():
        return path
    candidate = root / path
    return candidate if candidate.exists() else path


@click.command(
    name="convert",
    context_settings=dict(
        help_option_names=["-h", "--help"], show_default=True, max_content_width=120
    ),
)
@click.argument("dataset", type=click.Path(path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    help="Options YAML (defaults to <bids-root>/code/config/sidecaromatic.yaml).",
)
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override one option, e.g. meg.PowerLineFrequency=50 (repeatable).",
)
@click.option(
    "--trl",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    help="TSV/CSV trial table (begsample, endsample, offset, …) for the events file.",
)
@click.pass_obj
def cli(
    obj: dict,
    dataset: Path,
    config_path: Path | None,
    assignments: Tuple[str, ...],
    trl: Path | None,
) -> None:
    """Write BIDS sidecar files for DATASET."""
    root: Path = obj["root"]
    dataset = _resolve(dataset, root)

    try:
        overrides = parse_assignments(assignments)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--set") from exc

    try:
        cfg = load_config(
            config_path=config_path,
            dataset_root=root,
            dataset=dataset,
            overrides=overrides,
        )
    except RuntimeError as exc:
        raise click.ClickException(str(exc)) from exc

    if cfg.anat.dicomfile is not None:
        dicomfile = _resolve(cfg.anat.dicomfile, root)
        cfg = cfg.model_copy(
            update={"anat": cfg.anat.model_copy(update={"dicomfile": dicomfile})}
        )

    echo_banner("Writing sidecars")
    echo_dataset(dataset)

    try:
        if trl is not None:
            frame = load_trial_table(trl)
            cfg = cfg.model_copy(
                update={"events": cfg.events.model_copy(update={"trl": frame})}
            )
        result = convert_acquisition(cfg)
    except ConversionError as exc:
        log.error("[convert] %s", exc)
        raise click.ClickException(str(exc)) from exc

    for path in result.written:
        echo_success(f"wrote {path}")
    for path in result.skipped:
        echo_skipped(f"skipped {path.name}")
    log.info("[convert] done: %d file(s) written", len(result.written))
