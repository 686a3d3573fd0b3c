"""mgkit - Sample library toolkit for the Multigrain.

This package manages the WAV samples, presets and projects stored on a
Multigrain SD card.

Sample Descriptions
-------------------
The hardware reads WAV chunks strictly in order and cannot play files whose
LIST/INFO chunk precedes the audio data. The format submodule reads and
writes descriptions while keeping INFO after data.

Example Usage
-------------
>>> from mgkit import read_comment, write_comment_file, check_wav_file
>>>
>>> # Files written by other editors may carry INFO before data
>>> check_wav_file("Multigrain/Wavs/pad.wav").valid
False
>>>
>>> # Any description write moves it after the audio
>>> write_comment_file("Multigrain/Wavs/pad.wav", "Warm pad, C3").success
True
>>> read_comment("Multigrain/Wavs/pad.wav")
'Warm pad, C3'
"""

# Re-export format module for convenience
from mgkit.format import (
    InvalidContainerError,
    NoDataChunkError,
    RiffError,
    SampleInfo,
    WriteResult,
    check_wav_file,
    read_comment,
    read_sample_info,
    write_comment_file,
)
from mgkit.naming import resolve_conflict, sanitize_filename
from mgkit.preset import extract_samples_from_preset

__all__ = [
    # Descriptions
    "read_comment",
    "read_sample_info",
    "write_comment_file",
    "WriteResult",
    "SampleInfo",
    # Validation
    "check_wav_file",
    # Presets
    "extract_samples_from_preset",
    # Naming
    "resolve_conflict",
    "sanitize_filename",
    # Errors
    "RiffError",
    "InvalidContainerError",
    "NoDataChunkError",
]
