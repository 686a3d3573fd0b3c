"""Rewriting WAV buffers with a comment placed after the audio payload.

The Multigrain parses chunks in file order and stalls when a LIST chunk comes
before ``data``. Every rewrite here therefore produces the layout::

    RIFF | WAVE | fmt | ... | data | LIST(INFO/ICMT) | ...

Buffers are rebuilt rather than patched. The input is never modified, and the
caller decides when the returned bytes replace the file on disk.
"""

import logging

from mgkit.format.info import build_info_chunk
from mgkit.format.riff import (
    DATA_ID,
    Chunk,
    InvalidContainerError,
    NoDataChunkError,
    find_chunk,
    find_info_chunk,
    scan_chunks,
    update_riff_size,
)

logger = logging.getLogger(__name__)


def remove_chunk(buffer: bytes, chunk: Chunk) -> bytes:
    """Return buffer without the chunk's header, payload and pad byte.

    The RIFF size field is left as is; callers fix it once they are done.
    """
    end = min(chunk.end, len(buffer))
    return buffer[: chunk.offset] + buffer[end:]


def _data_insertion_point(buffer: bytes, data: Chunk) -> tuple[bytes, int]:
    """Locate the first byte after the data chunk, restoring a missing pad byte.

    Returns:
        Tuple of (buffer, insertion_point). The buffer only differs from the
        input when the final pad byte of an odd-sized data chunk was truncated.

    Raises:
        InvalidContainerError: If the data payload itself runs past the end.
    """
    payload_end = data.data_offset + data.size
    if payload_end > len(buffer):
        raise InvalidContainerError(
            f"data chunk declares {data.size} bytes but only "
            f"{len(buffer) - data.data_offset} are present"
        )

    if data.end > len(buffer):
        logger.debug("Restoring missing pad byte after data chunk at offset %d", data.offset)
        buffer = buffer[:payload_end] + b"\x00"

    return buffer, data.end


def write_comment(buffer: bytes, comment: str) -> bytes:
    """Return a copy of a WAV buffer carrying comment in a post-data INFO chunk.

    Existing LIST/INFO chunks are excised wherever they sit (including the
    hardware-hostile position before ``data``), a fresh INFO chunk holding only
    ICMT is inserted right after the data chunk, and the RIFF size is rewritten.

    Args:
        buffer: Complete WAV file contents.
        comment: Description text.

    Returns:
        The rewritten WAV file.

    Raises:
        InvalidContainerError: If buffer is not a RIFF/WAVE container.
        NoDataChunkError: If the container has no data chunk.
    """
    chunks = scan_chunks(buffer)
    if find_chunk(chunks, DATA_ID) is None:
        raise NoDataChunkError("No data chunk found")

    info = find_info_chunk(buffer, chunks)
    while info is not None:
        logger.debug("Removing LIST/INFO chunk at offset %d", info.offset)
        buffer = remove_chunk(buffer, info)
        chunks = scan_chunks(buffer)
        info = find_info_chunk(buffer, chunks)

    data = find_chunk(chunks, DATA_ID)
    if data is None:
        raise NoDataChunkError("No data chunk found")

    buffer, insertion_point = _data_insertion_point(buffer, data)
    result = buffer[:insertion_point] + build_info_chunk(comment) + buffer[insertion_point:]

    return update_riff_size(result)
