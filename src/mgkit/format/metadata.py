"""File-level comment reading and writing for WAV samples.

These are the entry points the rest of the toolkit uses. Files are read whole,
rewritten in memory by :mod:`mgkit.format.splice`, and replaced atomically, so
a failure at any point leaves the original file untouched.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path

from mgkit.format.info import extract_comment
from mgkit.format.riff import DATA_ID, RiffError, find_chunk, read_format, scan_chunks
from mgkit.format.splice import write_comment
from mgkit.types import PathLike

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    """Outcome of a metadata write, surfaced verbatim to the user."""

    success: bool
    error: str | None = None


@dataclass
class SampleInfo:
    """Description and format details of a WAV sample."""

    description: str
    sample_rate: int
    bit_depth: int
    channels: int
    duration: float


def atomic_write_bytes(path: PathLike, data: bytes) -> None:
    """Replace path with data via a temp file in the same directory.

    Readers see either the old or the new file, never a partial one.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_comment(path: PathLike) -> str:
    """Return the ICMT description of a WAV file, or "" if it has none.

    Raises:
        OSError: If the file cannot be read.
        RiffError: If the file is not a RIFF/WAVE container.
    """
    buffer = Path(path).read_bytes()
    return extract_comment(buffer, scan_chunks(buffer)) or ""


def read_sample_info(path: PathLike) -> SampleInfo:
    """Read the description and fmt details of a WAV file.

    Duration is derived from the data chunk size and byte rate.

    Raises:
        OSError: If the file cannot be read.
        RiffError: If the container or its fmt chunk is invalid.
    """
    buffer = Path(path).read_bytes()
    chunks = scan_chunks(buffer)
    fmt = read_format(buffer, chunks)

    data = find_chunk(chunks, DATA_ID)
    duration = data.size / fmt.byte_rate if data is not None and fmt.byte_rate else 0.0

    return SampleInfo(
        description=extract_comment(buffer, chunks) or "",
        sample_rate=fmt.sample_rate,
        bit_depth=fmt.bits_per_sample,
        channels=fmt.num_channels,
        duration=duration,
    )


def write_comment_file(path: PathLike, text: str) -> WriteResult:
    """Set the description of a WAV file, moving INFO after the data chunk.

    Args:
        path: WAV file to rewrite in place.
        text: New description.

    Returns:
        WriteResult with success=False and the underlying message on any
        read, parse or write failure.
    """
    path = Path(path)
    try:
        buffer = path.read_bytes()
        updated = write_comment(buffer, text)
        atomic_write_bytes(path, updated)
    except (OSError, RiffError, UnicodeEncodeError) as e:
        logger.error("Error writing metadata to %s: %s", path, e)
        return WriteResult(success=False, error=str(e))

    logger.debug("Wrote %d-byte description to %s", len(text.encode("utf-8")), path)
    return WriteResult(success=True)
