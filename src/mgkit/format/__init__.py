"""WAV container module.

This module reads and rewrites the RIFF chunk layout of Multigrain samples.
It never decodes audio; it only moves chunks around.

Chunk Layout
------------
The Multigrain parses chunks in file order and requires the description to
follow the audio payload:

    +----------------------------------------+
    | RIFF Header ("WAVE")                   |
    +----------------------------------------+
    | fmt  chunk (audio format)              |
    +----------------------------------------+
    | ... other chunks (bext, cue, ...)      |
    +----------------------------------------+
    | data chunk (PCM samples)               |
    +----------------------------------------+
    | LIST chunk ("INFO")                    |
    |   - ICMT sub-chunk (description)       |
    +----------------------------------------+

Files with a LIST chunk before data are flagged by :func:`check_chunk_order`
and fixed by any comment write.

Example Usage
-------------
>>> from mgkit.format import read_comment, write_comment_file
>>> result = write_comment_file("Project01/kick.wav", "Punchy kick")
>>> result.success
True
>>> read_comment("Project01/kick.wav")
'Punchy kick'
"""

from mgkit.format.info import build_info_chunk, extract_comment, parse_info_entries
from mgkit.format.metadata import (
    SampleInfo,
    WriteResult,
    read_comment,
    read_sample_info,
    write_comment_file,
)
from mgkit.format.riff import (
    Chunk,
    InvalidContainerError,
    NoDataChunkError,
    RiffError,
    WavFormat,
    build_wav,
    find_chunk,
    find_info_chunk,
    read_format,
    read_riff_size,
    scan_chunks,
    update_riff_size,
)
from mgkit.format.splice import remove_chunk, write_comment
from mgkit.format.validation import (
    ChunkOrderReport,
    ValidationResult,
    check_chunk_order,
    check_wav_file,
    repair_chunk_order,
    scan_wav_files,
)

__all__ = [
    # Chunks
    "Chunk",
    "WavFormat",
    "scan_chunks",
    "find_chunk",
    "find_info_chunk",
    "read_format",
    "read_riff_size",
    "update_riff_size",
    "build_wav",
    # INFO codec
    "build_info_chunk",
    "extract_comment",
    "parse_info_entries",
    # Splicing
    "write_comment",
    "remove_chunk",
    # Files
    "read_comment",
    "read_sample_info",
    "write_comment_file",
    "WriteResult",
    "SampleInfo",
    # Validation
    "check_chunk_order",
    "check_wav_file",
    "scan_wav_files",
    "repair_chunk_order",
    "ChunkOrderReport",
    "ValidationResult",
    # Errors
    "RiffError",
    "InvalidContainerError",
    "NoDataChunkError",
]
