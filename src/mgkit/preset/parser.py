"""Best-effort sample extraction from .mgp preset files.

The preset format is undocumented. Instead of decoding fields at guessed
offsets, the blob is scanned for NUL-terminated printable ASCII tokens that
end in ``.wav``; empirically these are the sample references of the eight
sounds, in slot order.
"""

import logging

from mgkit.constants import AUDIO_EXTENSION, STORAGE_LIMITS
from mgkit.types import PathLike

logger = logging.getLogger(__name__)

MAX_PRESET_SAMPLES = STORAGE_LIMITS.sounds_per_preset

_PRINTABLE = range(32, 127)


def _is_sample_token(token: str) -> bool:
    return token.lower().endswith(AUDIO_EXTENSION)


def extract_samples(blob: bytes) -> list[str]:
    """Extract up to eight sample file names from a preset blob.

    Printable ASCII (32-126) accumulates into a token. A NUL byte ends the
    token, which is kept (minus any ``/``-separated folder prefix) when it
    ends in ``.wav``. Any other byte discards the token, except a token that
    already ends in ``.wav`` survives until the next NUL.

    Args:
        blob: Raw preset file contents.

    Returns:
        Sample names in slot order. Fewer than eight when the blob holds
        fewer; never padded.
    """
    samples: list[str] = []
    token: list[str] = []

    for byte in blob:
        if byte == 0:
            text = "".join(token)
            if _is_sample_token(text):
                # "/PROJECT/kick.wav" -> "kick.wav"
                samples.append(text.rsplit("/", 1)[-1])
                if len(samples) == MAX_PRESET_SAMPLES:
                    break
            token = []
        elif byte in _PRINTABLE:
            token.append(chr(byte))
        elif token and not _is_sample_token("".join(token)):
            token = []

    return samples


def extract_samples_from_preset(path: PathLike) -> list[str]:
    """Read a .mgp file and return the samples it references.

    Raises:
        OSError: If the file cannot be read.
    """
    with open(path, "rb") as f:
        blob = f.read()
    samples = extract_samples(blob)
    logger.debug("Found %d sample references in %s", len(samples), path)
    return samples
