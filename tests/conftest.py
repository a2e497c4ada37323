"""Pytest configuration for sidecaromatic tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

# Skip the entire suite when optional heavy dependencies are unavailable.
pytest.importorskip("pandas")
pytest.importorskip("nibabel")

from sidecaromatic.models import RawEvent, RecordingAcquisition, RecordingFormat  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_log_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the rotating log file out of the source tree."""
    logdir = tmp_path / "logs"
    monkeypatch.setenv("SIDECAROMATIC_LOG_DIR", str(logdir))
    return logdir


@pytest.fixture
def make_recording(tmp_path: Path):
    """Return a factory for small :class:`RecordingAcquisition` objects."""

    def _make(
        types=("megmag", "megmag", "megmag", "eog", "ecg"),
        *,
        sample_rate: float = 1200.0,
        n_samples: int = 1200,
        n_epochs: int = 1,
        events=(),
        fmt: RecordingFormat = RecordingFormat.CTF,
        model_name: str | None = None,
    ) -> RecordingAcquisition:
        labels = [f"CH{i:03d}" for i in range(1, len(types) + 1)]
        units = ["T" if t.startswith("meg") else "V" for t in types]
        return RecordingAcquisition(
            path=tmp_path / "sub-01_task-rest_meg.ds",
            format=fmt,
            sample_rate=sample_rate,
            n_samples=n_samples,
            n_epochs=n_epochs,
            labels=labels,
            types=list(types),
            units=units,
            events=list(events),
            model_name=model_name,
        )

    return _make


@pytest.fixture
def make_nifti(tmp_path: Path):
    """Return a factory that writes a tiny NIfTI image and returns its path."""
    import nibabel as nib

    def _make(name: str = "sub-01_T1w.nii.gz") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        img = nib.Nifti1Image(np.zeros((4, 4, 3), dtype=np.int16), np.diag([1.0, 1.0, 1.2, 1.0]))
        nib.save(img, str(path))
        return path

    return _make


@pytest.fixture
def sample_events():
    """Two stim events and one annotation-like event without a value."""
    return [
        RawEvent(type="UPPT001", value=5, sample=1, duration=0),
        RawEvent(type="UPPT001", value=3, sample=1201, duration=None),
        RawEvent(type="cue", value=None, sample=601, duration=120),
    ]
