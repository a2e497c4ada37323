"""
Pydantic models that mirror the options consumed by *sidecaromatic*.

The classes define one explicit, typed field per BIDS sidecar key so the rest
of the codebase selects metadata by vocabulary instead of inspecting names at
run-time. Field names therefore follow the BIDS spelling (``PascalCase`` for
JSON keys, ``snake_case`` for TSV columns).

Namespaces
----------
* top level      – generic keys that apply to every data type
* ``anat``       – anatomical MRI JSON keys plus the calibration DICOM path
* ``meg``        – MEG JSON keys
* ``channels``   – per-channel overrides for ``*_channels.tsv``
* ``events``     – trial definition for ``*_events.tsv``

Every namespace carries a ``write`` flag (default ``True``). YAML spellings
such as ``yes``/``no`` are accepted by pydantic's boolean parser.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

_FROZEN = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)


# --------------------------------------------------------------------------- #
# 1.  JSON field groups                                                       #
# --------------------------------------------------------------------------- #


class GenericFields(BaseModel):
    """Keys shared by every sidecar JSON regardless of data type."""

    model_config = _FROZEN

    TaskName: Optional[str] = None
    TaskDescription: Optional[str] = None
    Instructions: Optional[str] = None
    CogAtlasID: Optional[str] = None
    CogPOID: Optional[str] = None
    Manufacturer: Optional[str] = None
    ManufacturersModelName: Optional[str] = None
    DeviceSerialNumber: Optional[str] = None
    SoftwareVersions: Optional[str] = None
    InstitutionName: Optional[str] = None
    InstitutionAddress: Optional[str] = None
    InstitutionalDepartmentName: Optional[str] = None


class MegFields(BaseModel):
    """MEG recording keys (``*_meg.json``)."""

    model_config = _FROZEN

    SamplingFrequency: Optional[float] = None
    PowerLineFrequency: Optional[float] = None
    DewarPosition: Optional[str] = None
    SoftwareFilters: Any = None
    DigitizedLandmarks: Optional[bool] = None
    DigitizedHeadPoints: Optional[bool] = None
    MEGChannelCount: Optional[int] = None
    MEGREFChannelCount: Optional[int] = None
    EEGChannelCount: Optional[int] = None
    ECOGChannelCount: Optional[int] = None
    SEEGChannelCount: Optional[int] = None
    EOGChannelCount: Optional[int] = None
    ECGChannelCount: Optional[int] = None
    EMGChannelCount: Optional[int] = None
    MiscChannelCount: Optional[int] = None
    TriggerChannelCount: Optional[int] = None
    RecordingDuration: Optional[float] = None
    RecordingType: Optional[str] = None
    EpochLength: Optional[float] = None
    ContinuousHeadLocalization: Optional[bool] = None
    HeadCoilFrequency: Optional[List[float]] = None
    MaxMovement: Optional[float] = None
    SubjectArtefactDescription: Optional[str] = None
    AssociatedEmptyRoom: Optional[str] = None


class AnatFields(BaseModel):
    """Anatomical MRI keys, grouped as in the BIDS MRI sidecar tables."""

    model_config = _FROZEN

    # scanner hardware
    MagneticFieldStrength: Optional[float] = None
    StationName: Optional[str] = None
    HardcopyDeviceSoftwareVersion: Optional[str] = None
    ReceiveCoilName: Optional[str] = None
    ReceiveCoilActiveElements: Optional[str] = None
    GradientSetType: Optional[str] = None
    MRTransmitCoilSequence: Optional[str] = None
    MatrixCoilMode: Optional[str] = None
    CoilCombinationMethod: Optional[str] = None
    # sequence specifics
    PulseSequenceType: Optional[str] = None
    ScanningSequence: Any = None
    SequenceVariant: Any = None
    ScanOptions: Any = None
    SequenceName: Optional[str] = None
    PulseSequenceDetails: Optional[str] = None
    NonlinearGradientCorrection: Optional[bool] = None
    # in-plane spatial encoding
    NumberShots: Optional[int] = None
    ParallelReductionFactorInPlane: Optional[float] = None
    ParallelAcquisitionTechnique: Optional[str] = None
    PartialFourier: Optional[float] = None
    PartialFourierDirection: Optional[str] = None
    PhaseEncodingDirection: Optional[str] = None
    EffectiveEchoSpacing: Optional[float] = None
    TotalReadoutTime: Optional[float] = None
    WaterFatShift: Optional[float] = None
    EchoTrainLength: Optional[int] = None
    # timing parameters
    EchoTime: Optional[float] = None
    InversionTime: Optional[float] = None
    RepetitionTime: Optional[float] = None
    SliceTiming: Optional[List[float]] = None
    SliceEncodingDirection: Optional[str] = None
    DwellTime: Optional[float] = None
    # RF & contrast
    FlipAngle: Optional[float] = None
    # slice acceleration
    MultibandAccelerationFactor: Optional[float] = None
    # anatomical landmarks
    AnatomicalLandmarkCoordinates: Any = None


def _vocabulary(model: type[BaseModel]) -> frozenset[str]:
    """Return the field names declared on *model*."""
    return frozenset(model.model_fields)


GENERIC_FIELDS: frozenset[str] = _vocabulary(GenericFields)
MEG_FIELDS: frozenset[str] = _vocabulary(MegFields)
ANAT_FIELDS: frozenset[str] = _vocabulary(AnatFields)


# --------------------------------------------------------------------------- #
# 2.  Namespaces                                                              #
# --------------------------------------------------------------------------- #


class AnatOptions(AnatFields):
    """Anatomical namespace: JSON keys plus I/O switches."""

    write: bool = True
    dicomfile: Optional[Path] = Field(
        None, description="DICOM file matching the NIfTI, read for scanner details"
    )


class MegOptions(MegFields):
    """MEG namespace: JSON keys plus the write switch."""

    write: bool = True


class ChannelsOptions(BaseModel):
    """Per-channel overrides for ``*_channels.tsv``.

    Each column accepts either a scalar (applied to every channel) or a list
    with one entry per channel, where ``null``/empty entries keep the value
    read from the recording.
    """

    model_config = _FROZEN

    write: bool = True
    name: Any = None
    type: Any = None
    units: Any = None
    description: Any = None
    sampling_frequency: Any = None
    low_cutoff: Any = None
    high_cutoff: Any = None
    notch: Any = None
    software_filters: Any = None
    status: Any = None
    status_description: Any = None


CHANNEL_COLUMNS: tuple[str, ...] = tuple(
    name for name in ChannelsOptions.model_fields if name != "write"
)


class EventsOptions(BaseModel):
    """Trial definition for ``*_events.tsv``.

    ``trl`` is either an N×3+ matrix (begsample, endsample, offset, …), a
    :class:`pandas.DataFrame` whose first columns are named ``begsample``,
    ``endsample`` and ``offset``, or a path to a TSV/CSV file with that header.
    """

    model_config = _FROZEN

    write: bool = True
    trl: Any = None


# --------------------------------------------------------------------------- #
# 3.  Top-level model – complete validated config                             #
# --------------------------------------------------------------------------- #


class ConversionConfig(GenericFields):
    """Root options object for converting one acquisition.

    Attributes:
        dataset: Acquisition on disk (NIfTI file, CTF ``.ds`` or FIF file).
        anat / meg / channels / events: Namespace models described above.
    """

    dataset: Optional[Path] = None
    anat: AnatOptions = Field(default_factory=AnatOptions)
    meg: MegOptions = Field(default_factory=MegOptions)
    channels: ChannelsOptions = Field(default_factory=ChannelsOptions)
    events: EventsOptions = Field(default_factory=EventsOptions)
