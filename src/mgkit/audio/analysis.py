"""Checking audio files against the hardware playback format."""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import soundfile as sf

from mgkit.constants import AUDIO_SPECS, AudioSpecs
from mgkit.types import IssueSeverity, IssueType, PathLike

logger = logging.getLogger(__name__)

# soundfile major formats that are already RIFF/WAVE
WAVE_FORMATS = frozenset({"WAV", "WAVEX"})


@dataclass
class AudioIssue:
    type: IssueType
    message: str
    severity: IssueSeverity = IssueSeverity.warning


@dataclass
class AudioMetadata:
    duration: float
    sample_rate: int
    bit_depth: int
    channels: int
    format: str


@dataclass
class AudioAnalysis:
    """What has to happen to a file before it can go on the card."""

    path: Path
    filename: str
    valid: bool
    needs_conversion: bool = False
    will_be_trimmed: bool = False
    issues: list[AudioIssue] = field(default_factory=list)
    metadata: AudioMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        result = asdict(self)
        result["path"] = str(self.path)
        return result


def get_bit_depth_from_subtype(subtype: str) -> int:
    """Get bit depth from soundfile subtype string."""
    subtype = subtype.upper()
    if "8" in subtype:
        return 8
    elif "16" in subtype:
        return 16
    elif "24" in subtype:
        return 24
    elif "32" in subtype or "FLOAT" in subtype:
        return 32
    return 16  # Compressed formats have no fixed depth


def read_audio_metadata(path: PathLike) -> AudioMetadata:
    """Read format details without decoding samples.

    Raises:
        RuntimeError: If libsndfile cannot open the file.
    """
    info = sf.info(str(path))
    return AudioMetadata(
        duration=info.duration,
        sample_rate=info.samplerate,
        bit_depth=get_bit_depth_from_subtype(info.subtype),
        channels=info.channels,
        format=info.format,
    )


def find_issues(metadata: AudioMetadata, specs: AudioSpecs = AUDIO_SPECS) -> list[AudioIssue]:
    """List every way metadata deviates from specs."""
    issues = []

    if metadata.duration > specs.max_duration_seconds:
        issues.append(
            AudioIssue(
                IssueType.duration,
                f"File is {metadata.duration:.1f}s long "
                f"(max {specs.max_duration_seconds:g}s). Will be trimmed.",
            )
        )

    if metadata.sample_rate != specs.sample_rate:
        issues.append(
            AudioIssue(
                IssueType.sample_rate,
                f"Sample rate is {metadata.sample_rate}Hz "
                f"(requires {specs.sample_rate}Hz). Will be converted.",
            )
        )

    if metadata.bit_depth != specs.bit_depth:
        issues.append(
            AudioIssue(
                IssueType.bit_depth,
                f"Bit depth is {metadata.bit_depth}-bit "
                f"(requires {specs.bit_depth}-bit). Will be converted.",
            )
        )

    if metadata.channels == 1:
        issues.append(AudioIssue(IssueType.channels, "Mono file will be converted to stereo."))
    elif metadata.channels > specs.channels:
        issues.append(
            AudioIssue(
                IssueType.channels,
                f"{metadata.channels}-channel file will be downmixed to stereo.",
            )
        )

    if metadata.format.upper() not in WAVE_FORMATS:
        issues.append(
            AudioIssue(IssueType.format, f"{metadata.format.upper()} file will be converted to WAV.")
        )

    return issues


def analyze_audio_file(path: PathLike, specs: AudioSpecs = AUDIO_SPECS) -> AudioAnalysis:
    """Decide whether a file can be imported and what conversion it needs.

    Unreadable files yield ``valid=False`` with a single error issue instead
    of raising.

    Args:
        path: Any audio file libsndfile can open.
        specs: Target playback format.

    Returns:
        AudioAnalysis. Any issue implies ``needs_conversion``.
    """
    path = Path(path)
    try:
        metadata = read_audio_metadata(path)
    except (RuntimeError, OSError) as e:
        logger.debug("Cannot read %s: %s", path, e)
        return AudioAnalysis(
            path=path,
            filename=path.name,
            valid=False,
            issues=[
                AudioIssue(
                    IssueType.unreadable, f"Cannot read file: {e}", severity=IssueSeverity.error
                )
            ],
        )

    issues = find_issues(metadata, specs)
    return AudioAnalysis(
        path=path,
        filename=path.name,
        valid=True,
        needs_conversion=bool(issues),
        will_be_trimmed=any(issue.type is IssueType.duration for issue in issues),
        issues=issues,
        metadata=metadata,
    )
