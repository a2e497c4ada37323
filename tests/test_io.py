"""Tests for the acquisition and calibration readers."""

import struct
from pathlib import Path
from types import SimpleNamespace

import pytest
from pydicom.dataset import Dataset
from pydicom.errors import InvalidDicomError

from sidecaromatic.io import detect_format, read_acquisition, read_calibration
from sidecaromatic.io.dicom import calibration_fields
from sidecaromatic.models import AnatomicalAcquisition, RecordingFormat
from sidecaromatic.utils.errors import CalibrationError, ConversionError, UnsupportedFormatError


@pytest.mark.parametrize(
    "name, expected",
    [
        ("a.nii", None),
        ("a.NII.GZ", None),
        ("a.ds", RecordingFormat.CTF),
        ("a.meg4", RecordingFormat.CTF),
        ("a.res4", RecordingFormat.CTF),
        ("a_meg.fif", RecordingFormat.NEUROMAG),
    ],
)
def test_detect_format(name: str, expected):
    assert detect_format(Path(name)) is expected


def test_unsupported_format(tmp_path: Path):
    path = tmp_path / "recording.edf"
    path.touch()
    with pytest.raises(UnsupportedFormatError):
        read_acquisition(path)


def test_read_nifti(make_nifti):
    path = make_nifti()
    acq = read_acquisition(path)
    assert isinstance(acq, AnatomicalAcquisition)
    assert acq.shape == (4, 4, 3)
    assert acq.voxel_sizes == pytest.approx((1.0, 1.0, 1.2))
    assert acq.calibration is None


def test_read_missing_nifti(tmp_path: Path):
    with pytest.raises(ConversionError):
        read_acquisition(tmp_path / "missing.nii.gz")


def test_calibration_fields_mapping():
    ds = Dataset()
    ds.Manufacturer = "SIEMENS"
    ds.ManufacturerModelName = "Prisma"
    ds.MagneticFieldStrength = "2.89362"
    ds.EchoTime = "2.26"
    ds.RepetitionTime = "2300"
    ds.InversionTime = "900"
    ds.FlipAngle = "8"
    ds.ScanningSequence = ["GR", "IR"]
    ds.PatientName = "Anonymous"

    fields = calibration_fields(ds)
    assert fields["Manufacturer"] == "SIEMENS"
    assert fields["ManufacturersModelName"] == "Prisma"
    assert fields["MagneticFieldStrength"] == pytest.approx(2.89362)
    assert fields["EchoTime"] == pytest.approx(0.00226)
    assert fields["RepetitionTime"] == pytest.approx(2.3)
    assert fields["InversionTime"] == pytest.approx(0.9)
    assert fields["FlipAngle"] == pytest.approx(8.0)
    assert fields["ScanningSequence"] == ["GR", "IR"]
    assert "PatientName" not in fields


def test_calibration_missing_file(tmp_path: Path, caplog):
    assert read_calibration(tmp_path / "missing.IMA") is None
    assert "not found" in caplog.text


def _element(group: int, element: int, value: bytes) -> bytes:
    """Implicit VR little endian data element."""
    return struct.pack("<HHI", group, element, len(value)) + value


def test_calibration_without_preamble(tmp_path: Path):
    """Bare data sets without the 128-byte preamble are still read."""
    path = tmp_path / "00080_1.IMA"
    path.write_bytes(
        _element(0x0008, 0x0070, b"SIEMENS ") + _element(0x0018, 0x0081, b"2.26")
    )
    fields = read_calibration(path)
    assert fields["Manufacturer"] == "SIEMENS"
    assert fields["EchoTime"] == pytest.approx(0.00226)


def test_calibration_reads_forced(tmp_path: Path, monkeypatch):
    path = tmp_path / "00080_1.IMA"
    path.touch()
    seen = {}

    def _dcmread(fp, **kwargs):
        seen.update(kwargs)
        ds = Dataset()
        ds.Manufacturer = "GE"
        return ds

    monkeypatch.setattr("sidecaromatic.io.dicom.pydicom.dcmread", _dcmread)
    assert read_calibration(path) == {"Manufacturer": "GE"}
    assert seen == {"stop_before_pixels": True, "force": True}


def test_calibration_unreadable(tmp_path: Path, monkeypatch):
    path = tmp_path / "00080_1.IMA"
    path.touch()

    def _dcmread(fp, **kwargs):
        raise InvalidDicomError("truncated")

    monkeypatch.setattr("sidecaromatic.io.dicom.pydicom.dcmread", _dcmread)
    with pytest.raises(CalibrationError, match="cannot read DICOM"):
        read_calibration(path)


def test_calibration_undecodable_value():
    ds = SimpleNamespace(Manufacturer="SIEMENS", EchoTime="n/a")
    with pytest.raises(CalibrationError, match="EchoTime"):
        calibration_fields(ds)
