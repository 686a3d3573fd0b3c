"""SD card library model: projects, presets and the samples they use."""

from mgkit.library.resolve import (
    ResolvedSample,
    resolve_preset_samples,
    resolve_sample_location,
)
from mgkit.library.structure import (
    MultigrainStructure,
    Preset,
    Project,
    StructureValidation,
    WavFile,
    find_multigrain_folder,
    list_wav_files,
    read_custom_name,
    validate_structure,
)

__all__ = [
    # Structure
    "MultigrainStructure",
    "Project",
    "Preset",
    "WavFile",
    "StructureValidation",
    "validate_structure",
    "find_multigrain_folder",
    "list_wav_files",
    "read_custom_name",
    # Resolution
    "ResolvedSample",
    "resolve_sample_location",
    "resolve_preset_samples",
]
