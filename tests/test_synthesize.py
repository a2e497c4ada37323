"""Tests for metadata synthesis of anatomical images and MEG recordings."""

from pathlib import Path

import pytest

from sidecaromatic.config.schema import ANAT_FIELDS, ConversionConfig
from sidecaromatic.models import AnatomicalAcquisition, RecordingFormat
from sidecaromatic.pipelines import synthesize_anat, synthesize_meg, synthesize_metadata
from sidecaromatic.pipelines.meg import count_channel_types
from sidecaromatic.utils.errors import UnsupportedFormatError


# ─── anatomical ──────────────────────────────────────────────────────────
def test_anat_without_calibration(tmp_path: Path):
    """Only the caller's keys appear when no DICOM was read."""
    acq = AnatomicalAcquisition(path=tmp_path / "sub-01_T1w.nii.gz")
    cfg = ConversionConfig(InstitutionName="Lab", anat={"MagneticFieldStrength": 3})
    record = synthesize_anat(acq, cfg)
    assert {k: v for k, v in record.items() if k in ANAT_FIELDS} == {"MagneticFieldStrength": 3}
    assert record == {"InstitutionName": "Lab", "MagneticFieldStrength": 3}


def test_anat_caller_beats_calibration(tmp_path: Path):
    acq = AnatomicalAcquisition(
        path=tmp_path / "sub-01_T1w.nii.gz",
        calibration={
            "MagneticFieldStrength": 2.89,
            "EchoTime": 0.00226,
            "InstitutionName": "Scanner site",
            "PatientName": "should never be copied",
        },
    )
    cfg = ConversionConfig(InstitutionName="Lab", anat={"MagneticFieldStrength": 3})
    record = synthesize_anat(acq, cfg)
    assert record == {"MagneticFieldStrength": 3, "EchoTime": 0.00226, "InstitutionName": "Lab"}


# ─── MEG ─────────────────────────────────────────────────────────────────
def test_meg_derived_fields(make_recording):
    acq = make_recording(
        ["meggrad"] * 3 + ["refmag", "refgrad", "eog", "ecg", "trigger"],
        sample_rate=1200.0,
        n_samples=2400,
        model_name="CTF275",
    )
    record = synthesize_meg(acq, ConversionConfig())
    assert record["SamplingFrequency"] == 1200.0
    assert record["MEGChannelCount"] == 3
    assert record["MEGREFChannelCount"] == 2
    assert record["EOGChannelCount"] == 1
    assert record["ECGChannelCount"] == 1
    assert record["TriggerChannelCount"] == 1
    assert record["EEGChannelCount"] == 0
    assert record["RecordingDuration"] == 2.0
    assert record["EpochLength"] == 2.0
    assert record["RecordingType"] == "continuous"
    assert record["ContinuousHeadLocalization"] is False
    assert record["Manufacturer"] == "CTF"
    assert record["ManufacturersModelName"] == "CTF275"


def test_meg_epoched_recording(make_recording):
    acq = make_recording(["megmag"], sample_rate=100.0, n_samples=50, n_epochs=4)
    record = synthesize_meg(acq, ConversionConfig())
    assert record["RecordingType"] == "epoched"
    assert record["EpochLength"] == 0.5
    assert record["RecordingDuration"] == 2.0


def test_meg_caller_options_win(make_recording):
    acq = make_recording(fmt=RecordingFormat.NEUROMAG)
    cfg = ConversionConfig(
        TaskName="rest",
        Manufacturer="MEGIN",
        meg={"PowerLineFrequency": 50, "SamplingFrequency": 1000, "DewarPosition": None},
    )
    record = synthesize_meg(acq, cfg)
    assert record["Manufacturer"] == "MEGIN"
    assert record["PowerLineFrequency"] == 50
    assert record["SamplingFrequency"] == 1000
    assert record["TaskName"] == "rest"
    assert "DewarPosition" not in record


def test_channel_counts_case_insensitive_and_misc():
    counts = count_channel_types(["MEGMAG", "megplanar", "headloc", "resp", "misc"])
    assert counts["MEGChannelCount"] == 2
    assert counts["MiscChannelCount"] == 2
    assert sum(counts.values()) == 4


def test_headloc_sets_continuous_localisation(make_recording):
    acq = make_recording(["meggrad", "headloc"])
    record = synthesize_meg(acq, ConversionConfig())
    assert record["ContinuousHeadLocalization"] is True
    assert record["MiscChannelCount"] == 0


def test_synthesize_metadata_dispatch(tmp_path: Path, make_recording):
    cfg = ConversionConfig(anat={"FlipAngle": 9})
    anat = AnatomicalAcquisition(path=tmp_path / "a.nii")
    assert synthesize_metadata(anat, cfg) == {"FlipAngle": 9}
    assert "MEGChannelCount" in synthesize_metadata(make_recording(), cfg)


def test_synthesize_metadata_rejects_unknown():
    with pytest.raises(UnsupportedFormatError):
        synthesize_metadata(object(), ConversionConfig())
