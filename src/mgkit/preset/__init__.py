"""Preset (.mgp) reading.

Presets are 16 KB opaque blobs written by the Multigrain. Only the sample
references are recovered; preset files are never written back.

Example Usage
-------------
>>> from mgkit.preset import extract_samples_from_preset
>>> extract_samples_from_preset("Multigrain/Project01/Preset01.mgp")
['kick.wav', 'snare.wav', 'pad.wav']
"""

from mgkit.preset.parser import (
    MAX_PRESET_SAMPLES,
    extract_samples,
    extract_samples_from_preset,
)

__all__ = [
    "MAX_PRESET_SAMPLES",
    "extract_samples",
    "extract_samples_from_preset",
]
