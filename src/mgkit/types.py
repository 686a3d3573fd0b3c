from enum import Enum
from pathlib import Path
from typing import Literal, TypeAlias

PathLike: TypeAlias = Path | str

SeparatorType = Literal["_", " ", " - ", "-", "."]
NumberingPattern = Literal["none", "1_", "01_", "001_"]
SchemeOverride = Literal["01_", "001_"]


class SampleLocation(str, Enum):
    PROJECT = "PROJECT"
    WAVS = "WAVS"
    RECS = "RECS"
    NOT_FOUND = "NOT_FOUND"


class IssueSeverity(str, Enum):
    error = "error"
    warning = "warning"


class IssueType(str, Enum):
    duration = "duration"
    sample_rate = "sampleRate"
    bit_depth = "bitDepth"
    channels = "channels"
    format = "format"
    unreadable = "unreadable"


class ImportStage(str, Enum):
    validating = "validating"
    converting = "converting"
    copying = "copying"
