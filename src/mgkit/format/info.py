"""LIST/INFO chunk encoding and decoding.

Only the ICMT (comment) sub-chunk is ever written. Its declared length is the
unpadded UTF-8 byte length, while the pad byte is physically present, the same
convention top-level chunks follow.
"""

import struct
from collections.abc import Iterator, Sequence

from mgkit.format.riff import (
    CHUNK_HEADER_SIZE,
    INFO_ID,
    LIST_ID,
    Chunk,
    find_info_chunk,
    is_info_chunk,
)

ICMT_ID = b"ICMT"


def build_info_chunk(comment: str) -> bytes:
    """Build a LIST/INFO chunk holding a single ICMT sub-chunk.

    Layout::

        LIST | payload_size | INFO | ICMT | comment_len | comment [+ pad]

    where ``payload_size = 4 + 8 + padded_comment_len``.

    Args:
        comment: Comment text, encoded as UTF-8.

    Returns:
        The complete chunk, header included.
    """
    comment_bytes = comment.encode("utf-8")
    padded = comment_bytes + (b"\x00" if len(comment_bytes) % 2 else b"")
    payload_size = len(INFO_ID) + CHUNK_HEADER_SIZE + len(padded)

    return (
        LIST_ID
        + struct.pack("<I", payload_size)
        + INFO_ID
        + ICMT_ID
        + struct.pack("<I", len(comment_bytes))
        + padded
    )


def _iter_info_entries(buffer: bytes, chunk: Chunk) -> Iterator[tuple[str, bytes]]:
    """Yield (tag, raw_value) for every sub-chunk of a LIST/INFO chunk."""
    position = chunk.data_offset + len(INFO_ID)
    end = min(chunk.data_offset + chunk.size, len(buffer))

    while position + CHUNK_HEADER_SIZE <= end:
        tag = buffer[position : position + 4].decode("ascii", errors="replace")
        size = struct.unpack_from("<I", buffer, position + 4)[0]
        value_start = position + CHUNK_HEADER_SIZE
        yield tag, buffer[value_start : min(value_start + size, end)]
        position = value_start + size + (size % 2)


def _decode_value(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").rstrip("\x00")


def parse_info_entries(buffer: bytes, chunk: Chunk) -> dict[str, str]:
    """Decode all INFO sub-chunks (ICMT, INAM, IART, ...) of a LIST/INFO chunk.

    The first occurrence of a tag wins.
    """
    if not is_info_chunk(buffer, chunk):
        return {}

    entries: dict[str, str] = {}
    for tag, raw in _iter_info_entries(buffer, chunk):
        entries.setdefault(tag, _decode_value(raw))
    return entries


def extract_comment(buffer: bytes, chunks: Sequence[Chunk]) -> str | None:
    """Return the ICMT comment of the first LIST/INFO chunk.

    A file without an INFO chunk, or with one that has no ICMT entry, simply
    has no comment; None is returned rather than raising.
    """
    info = find_info_chunk(buffer, chunks)
    if info is None:
        return None

    for tag, raw in _iter_info_entries(buffer, info):
        if tag == ICMT_ID.decode("ascii"):
            return _decode_value(raw)
    return None
