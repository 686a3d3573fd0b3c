"""Device constraints for the Multigrain SD card layout.

All values are fixed by the hardware. They are kept in frozen dataclasses so
callers can pass alternative limits explicitly (tests do) without mutating
module state.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AudioSpecs:
    """Audio format the hardware plays without conversion."""

    format: str = "wav"
    sample_rate: int = 48000
    bit_depth: int = 16
    channels: int = 2
    max_duration_seconds: float = 32.0


@dataclass(frozen=True)
class StorageLimits:
    """Per-folder capacity limits."""

    max_projects: int = 48
    presets_per_project: int = 48
    sounds_per_preset: int = 8
    samples_per_project: int = 128
    samples_in_wavs: int = 128
    samples_in_recs: int = 1024


@dataclass(frozen=True)
class FolderNames:
    """Names of the well-known folders and files on the card."""

    root: str = "Multigrain"
    recs: str = "Recs"
    wavs: str = "Wavs"
    settings_file: str = "Settings.mgs"
    autosave_file: str = "Autosave.mgp"
    project_metadata_file: str = ".project-metadata.json"


AUDIO_SPECS = AudioSpecs()
STORAGE_LIMITS = StorageLimits()
FOLDER_NAMES = FolderNames()

AUDIO_EXTENSION = ".wav"
PRESET_EXTENSION = ".mgp"

# .mgp preset files are fixed-size opaque blobs
PRESET_FILE_SIZE = 16384

BANK_NAMES = ("X", "Y", "Z", "XX", "YY", "ZZ")
PROJECTS_PER_BANK = 8


def get_project_folder_name(index: int) -> str:
    """Folder name for a project index, e.g. 1 -> "Project01"."""
    if not 1 <= index <= STORAGE_LIMITS.max_projects:
        raise ValueError(f"Project index must be between 1 and {STORAGE_LIMITS.max_projects}")
    return f"Project{index:02d}"


def get_preset_file_name(index: int) -> str:
    """File name for a preset index, e.g. 3 -> "Preset03.mgp"."""
    if not 1 <= index <= STORAGE_LIMITS.presets_per_project:
        raise ValueError(
            f"Preset index must be between 1 and {STORAGE_LIMITS.presets_per_project}"
        )
    return f"Preset{index:02d}{PRESET_EXTENSION}"


def get_project_bank_info(index: int) -> tuple[str, int]:
    """Return (bank name, position 1-8) for a project index 1-48."""
    if not 1 <= index <= STORAGE_LIMITS.max_projects:
        raise ValueError(
            f"Project index must be between 1 and {STORAGE_LIMITS.max_projects}, got {index}"
        )
    bank = BANK_NAMES[(index - 1) // PROJECTS_PER_BANK]
    position = (index - 1) % PROJECTS_PER_BANK + 1
    return bank, position
