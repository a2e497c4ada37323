"""Tests for the mne-based MEG reader."""

from pathlib import Path
from types import SimpleNamespace

import numpy as np
import pytest

mne = pytest.importorskip("mne")

from mne.io.constants import FIFF  # noqa: E402

from sidecaromatic.io import read_acquisition  # noqa: E402
from sidecaromatic.io.meg import _chantype, _ctf_model_name, _epochs  # noqa: E402
from sidecaromatic.models import RecordingAcquisition, RecordingFormat  # noqa: E402


@pytest.mark.parametrize(
    "ch, mne_type, expected",
    [
        ({"ch_name": "MLC11-4408", "coil_type": FIFF.FIFFV_COIL_CTF_GRAD}, "mag", "meggrad"),
        ({"ch_name": "MEG 0111", "coil_type": FIFF.FIFFV_COIL_VV_MAG_T3}, "mag", "megmag"),
        ({"ch_name": "MEG 0112", "coil_type": FIFF.FIFFV_COIL_VV_PLANAR_T1}, "grad", "megplanar"),
        ({"ch_name": "BG1-4408", "coil_type": FIFF.FIFFV_COIL_CTF_REF_MAG}, "ref_meg", "refmag"),
        ({"ch_name": "G11-4408", "coil_type": FIFF.FIFFV_COIL_CTF_REF_GRAD}, "ref_meg", "refgrad"),
        ({"ch_name": "HLC0011", "coil_type": FIFF.FIFFV_COIL_NONE}, "misc", "headloc"),
        ({"ch_name": "UPPT001", "coil_type": FIFF.FIFFV_COIL_NONE}, "stim", "trigger"),
        ({"ch_name": "EEG057", "coil_type": FIFF.FIFFV_COIL_EEG}, "eeg", "eeg"),
    ],
)
def test_chantype(ch, mne_type, expected):
    assert _chantype(ch, mne_type) == expected


@pytest.mark.parametrize("n_meg, model", [(272, "CTF275"), (151, "CTF151"), (60, "CTF64")])
def test_ctf_model_name(n_meg: int, model: str):
    assert _ctf_model_name(["meggrad"] * n_meg + ["refmag"] * 29) == model


@pytest.mark.parametrize(
    "extras, n_times, fmt, expected",
    [
        ([{"block_size": 300}], 1200, RecordingFormat.CTF, (300, 4)),
        ([{"block_size": 1200}], 1200, RecordingFormat.CTF, (1200, 1)),
        ([{"block_size": 500}], 1200, RecordingFormat.CTF, (1200, 1)),
        ([{}], 1200, RecordingFormat.CTF, (1200, 1)),
        (None, 1200, RecordingFormat.CTF, (1200, 1)),
        ([{"block_size": 300}], 1200, RecordingFormat.NEUROMAG, (1200, 1)),
    ],
    ids=["trials", "single-block", "uneven", "no-block", "no-extras", "neuromag"],
)
def test_epochs_from_block_size(extras, n_times, fmt, expected):
    raw = SimpleNamespace(_raw_extras=extras, n_times=n_times)
    assert _epochs(raw, fmt) == expected


@pytest.fixture
def fif_recording(tmp_path: Path) -> Path:
    """Write a four-channel FIF file with two triggers and one annotation."""
    sfreq = 1000.0
    info = mne.create_info(
        ["MEG 0111", "MEG 0112", "STI 014", "EOG 061"],
        sfreq,
        ["mag", "grad", "stim", "eog"],
    )
    data = np.zeros((4, 1000))
    data[2, 100:110] = 5
    data[2, 500:510] = 3
    raw = mne.io.RawArray(data, info, verbose=False)
    raw.set_annotations(mne.Annotations(onset=[0.25], duration=[0.1], description=["cue"]))
    path = tmp_path / "sub-01_task-rest_meg.fif"
    raw.save(path, verbose=False)
    return path


def test_read_fif(fif_recording: Path):
    acq = read_acquisition(fif_recording)
    assert isinstance(acq, RecordingAcquisition)
    assert acq.format is RecordingFormat.NEUROMAG
    assert acq.sample_rate == 1000.0
    assert acq.n_samples == 1000
    assert acq.n_epochs == 1
    assert acq.types == ["megmag", "megplanar", "trigger", "eog"]
    assert acq.units[0] == "T"
    assert acq.units[1] == "T/m"
    assert acq.units[3] == "V"
    assert acq.model_name is None


def test_read_fif_events(fif_recording: Path):
    acq = read_acquisition(fif_recording)
    assert [(e.type, e.sample) for e in acq.events] == [
        ("STI 014", 101),
        ("cue", 251),
        ("STI 014", 501),
    ]
    assert [e.value for e in acq.events] == [5, None, 3]
    assert acq.events[1].duration == pytest.approx(100.0)
