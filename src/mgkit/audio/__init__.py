"""Audio analysis, conversion and import.

Anything libsndfile can read is accepted. Files that are not already 48 kHz,
16-bit stereo WAV of at most 32 seconds are converted on import.

Example Usage
-------------
>>> from mgkit.audio import NumberingOptions, import_files
>>> result = import_files(
...     ["~/loops/break.flac", "~/loops/pad.wav"],
...     "Multigrain/Project01",
...     numbering=NumberingOptions(enabled=True),
... )
>>> [n.final for n in result.numbered]
['03_break.wav', '04_pad.wav']
"""

from mgkit.audio.analysis import (
    AudioAnalysis,
    AudioIssue,
    AudioMetadata,
    analyze_audio_file,
)
from mgkit.audio.convert import (
    ConversionResult,
    cleanup_temp_file,
    convert_audio_file,
    get_temp_conversion_path,
)
from mgkit.audio.importer import (
    ImportFailure,
    ImportProgress,
    ImportResult,
    NumberingOptions,
    RenamedFile,
    get_storage_info,
    get_storage_limit,
    import_files,
    plan_import_name,
    resolve_numbering_scheme,
)

__all__ = [
    # Analysis
    "AudioAnalysis",
    "AudioIssue",
    "AudioMetadata",
    "analyze_audio_file",
    # Conversion
    "ConversionResult",
    "convert_audio_file",
    "get_temp_conversion_path",
    "cleanup_temp_file",
    # Import
    "import_files",
    "plan_import_name",
    "resolve_numbering_scheme",
    "get_storage_limit",
    "get_storage_info",
    "NumberingOptions",
    "ImportResult",
    "ImportFailure",
    "ImportProgress",
    "RenamedFile",
]
