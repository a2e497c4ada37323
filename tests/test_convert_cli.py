"""CLI tests for ``sidecaromatic-cli convert``."""

import json
import subprocess
import sys
from pathlib import Path

from click.testing import CliRunner

from sidecaromatic.cli import main as cli_main


def test_convert_anat(tmp_path: Path, make_nifti):
    nii = make_nifti()
    runner = CliRunner()
    result = runner.invoke(
        cli_main,
        [
            "-r",
            str(tmp_path),
            "convert",
            str(nii),
            "--set",
            "anat.MagneticFieldStrength=3",
            "--set",
            "InstitutionName=Lab",
        ],
    )
    assert result.exit_code == 0, result.output
    assert "wrote" in result.output
    data = json.loads((tmp_path / "sub-01_T1w.json").read_text())
    assert data == {"InstitutionName": "Lab", "MagneticFieldStrength": 3.0}


def test_convert_relative_to_root(tmp_path: Path, make_nifti):
    make_nifti("sub-01/anat/sub-01_T1w.nii")
    runner = CliRunner()
    result = runner.invoke(
        cli_main,
        ["-r", str(tmp_path), "convert", "sub-01/anat/sub-01_T1w.nii", "--set", "TaskName=rest"],
    )
    assert result.exit_code == 0, result.output
    assert (tmp_path / "sub-01" / "anat" / "sub-01_T1w.json").exists()


def test_convert_dataset_local_config(tmp_path: Path, make_nifti):
    nii = make_nifti()
    cfg = tmp_path / "code" / "config" / "sidecaromatic.yaml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text("anat:\n  FlipAngle: 8\n")
    result = CliRunner().invoke(cli_main, ["-r", str(tmp_path), "convert", str(nii)])
    assert result.exit_code == 0, result.output
    assert json.loads((tmp_path / "sub-01_T1w.json").read_text()) == {"FlipAngle": 8.0}


def test_convert_unsupported_format(tmp_path: Path):
    path = tmp_path / "recording.edf"
    path.touch()
    result = CliRunner().invoke(cli_main, ["-r", str(tmp_path), "convert", str(path)])
    assert result.exit_code == 1
    assert "unsupported data format" in result.output


def test_convert_bad_assignment(tmp_path: Path, make_nifti):
    nii = make_nifti()
    result = CliRunner().invoke(
        cli_main, ["-r", str(tmp_path), "convert", str(nii), "--set", "novalue"]
    )
    assert result.exit_code == 2


def test_convert_invalid_option(tmp_path: Path, make_nifti):
    nii = make_nifti()
    result = CliRunner().invoke(
        cli_main, ["-r", str(tmp_path), "convert", str(nii), "--set", "anat.Bogus=1"]
    )
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_log_file_written(tmp_path: Path, make_nifti, _isolated_log_dir: Path):
    nii = make_nifti()
    CliRunner().invoke(
        cli_main, ["-r", str(tmp_path), "convert", str(nii), "--set", "TaskName=rest"]
    )
    assert (_isolated_log_dir / "sidecaromatic.log").exists()


def test_module_entry_point_help():
    """``python -m sidecaromatic`` exposes the convert sub-command."""
    result = subprocess.run(
        [sys.executable, "-m", "sidecaromatic", "--help"],
        capture_output=True,
        text=True,
        check=True,
    )
    assert "convert" in result.stdout
