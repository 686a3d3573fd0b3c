"""Converting arbitrary audio to the hardware playback format.

Output is always 48 kHz, 16-bit PCM, stereo WAV of at most 32 seconds, with
no metadata chunks.
"""

import logging
import math
import os
import tempfile
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import soundfile as sf
from numpy.typing import NDArray
from scipy.signal import resample_poly

from mgkit.constants import AUDIO_EXTENSION, AUDIO_SPECS, AudioSpecs
from mgkit.types import PathLike

logger = logging.getLogger(__name__)

TEMP_FILE_PREFIX = "multigrain_"

# Tolerance for rounding in the resampled frame count
DURATION_TOLERANCE_SECONDS = 0.001

ProgressCallback = Callable[[float], None]


@dataclass
class ConversionResult:
    success: bool
    output_path: Path | None = None
    error: str | None = None


def bit_depth_to_subtype(bit_depth: int) -> str | None:
    mapping = {
        8: "PCM_U8",
        16: "PCM_16",
        24: "PCM_24",
        32: "PCM_32",
    }
    return mapping.get(bit_depth)


def to_stereo(data: NDArray[np.float32]) -> NDArray[np.float32]:
    """Map (frames, channels) audio onto two channels.

    Mono is duplicated; more than two channels are averaged into both sides.
    """
    channels = data.shape[1]
    if channels == 2:
        return data
    if channels == 1:
        return np.repeat(data, 2, axis=1)
    mixed = np.mean(data, axis=1, keepdims=True)
    return np.repeat(mixed, 2, axis=1).astype(np.float32, copy=False)


def resample_audio(data: NDArray[np.float32], old_sr: int, new_sr: int) -> NDArray[np.float32]:
    if old_sr == new_sr:
        return data
    gcd = math.gcd(old_sr, new_sr)
    up = new_sr // gcd
    down = old_sr // gcd
    return resample_poly(data, up, down, axis=0).astype(np.float32, copy=False)


def trim_to_duration(
    data: NDArray[np.float32], sample_rate: int, max_seconds: float
) -> NDArray[np.float32]:
    max_frames = int(sample_rate * max_seconds)
    return data[:max_frames]


def validate_converted_file(path: PathLike, specs: AudioSpecs = AUDIO_SPECS) -> bool:
    """Whether a written file matches specs exactly."""
    try:
        info = sf.info(str(path))
    except (RuntimeError, OSError) as e:
        logger.error("Validation error for %s: %s", path, e)
        return False

    return (
        info.samplerate == specs.sample_rate
        and info.subtype == bit_depth_to_subtype(specs.bit_depth)
        and info.channels == specs.channels
        and info.duration <= specs.max_duration_seconds + DURATION_TOLERANCE_SECONDS
    )


def convert_audio_file(
    source: PathLike,
    destination: PathLike,
    on_progress: ProgressCallback | None = None,
    specs: AudioSpecs = AUDIO_SPECS,
) -> ConversionResult:
    """Convert source to the playback format and write it to destination.

    Failures are reported in the result, never raised.

    Args:
        source: Any file libsndfile can read.
        destination: Output WAV path; overwritten if present.
        on_progress: Called with a percentage (0-100) as stages complete.
        specs: Target playback format.

    Returns:
        ConversionResult with output_path set on success.
    """
    destination = Path(destination)

    def report(percent: float) -> None:
        if on_progress is not None:
            on_progress(min(100.0, max(0.0, percent)))

    try:
        data, source_rate = sf.read(str(source), dtype="float32", always_2d=True)
    except (RuntimeError, OSError) as e:
        return ConversionResult(success=False, error=f"Conversion failed: {e}")
    report(25)

    data = trim_to_duration(data, source_rate, specs.max_duration_seconds)
    data = to_stereo(data)
    data = resample_audio(data, source_rate, specs.sample_rate)
    data = np.clip(data, -1.0, 1.0)
    report(75)

    try:
        sf.write(
            str(destination),
            data,
            specs.sample_rate,
            subtype=bit_depth_to_subtype(specs.bit_depth),
            format="WAV",
        )
    except (RuntimeError, OSError) as e:
        return ConversionResult(success=False, error=f"Conversion failed: {e}")
    report(100)

    if not validate_converted_file(destination, specs):
        return ConversionResult(
            success=False, error="Converted file does not meet specifications"
        )

    logger.debug("Converted %s -> %s (%d frames)", source, destination, len(data))
    return ConversionResult(success=True, output_path=destination)


def get_temp_conversion_path(original_filename: str) -> Path:
    """Unique scratch path for converting original_filename."""
    stem = Path(original_filename).stem
    timestamp = int(time.time() * 1000)
    return Path(tempfile.gettempdir()) / f"{TEMP_FILE_PREFIX}{stem}_{timestamp}{AUDIO_EXTENSION}"


def cleanup_temp_file(path: PathLike) -> None:
    """Delete a scratch file; failures are logged and ignored."""
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning("Failed to clean up temp file %s: %s", path, e)
