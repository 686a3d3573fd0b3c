"""RIFF/WAVE chunk utilities.

This module walks the chunk layout of an in-memory WAV buffer. Every function
here is pure: buffers go in, new values come out, nothing is patched in place.
"""

import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

# FourCC identifiers
RIFF_ID = b"RIFF"
WAVE_ID = b"WAVE"
FMT_ID = b"fmt "
DATA_ID = b"data"
LIST_ID = b"LIST"
INFO_ID = b"INFO"

# Audio format codes
WAVE_FORMAT_PCM = 1
WAVE_FORMAT_IEEE_FLOAT = 3

RIFF_HEADER_SIZE = 12
CHUNK_HEADER_SIZE = 8


class RiffError(Exception):
    """Error reading or rewriting a RIFF container."""


class InvalidContainerError(RiffError):
    """Buffer is not a RIFF/WAVE container."""


class NoDataChunkError(RiffError):
    """RIFF/WAVE container has no data chunk."""


@dataclass(frozen=True)
class Chunk:
    """A chunk header found while scanning a RIFF container."""

    id: str
    """4-character ASCII tag, e.g. "fmt " or "LIST"."""

    size: int
    """Declared payload size (excludes the 8-byte header and the pad byte)."""

    offset: int
    """Byte position of the chunk header within the buffer."""

    @property
    def data_offset(self) -> int:
        """Position of the first payload byte."""
        return self.offset + CHUNK_HEADER_SIZE

    @property
    def padded_size(self) -> int:
        """Payload size including the word-alignment pad byte."""
        return self.size + (self.size % 2)

    @property
    def end(self) -> int:
        """Offset of the next chunk header."""
        return self.offset + CHUNK_HEADER_SIZE + self.padded_size


@dataclass(frozen=True)
class WavFormat:
    """Fields of the fmt chunk. Samples are never decoded."""

    audio_format: int
    num_channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int


def check_container(buffer: bytes) -> None:
    """Raise InvalidContainerError unless buffer starts with a RIFF/WAVE header."""
    if len(buffer) < RIFF_HEADER_SIZE:
        raise InvalidContainerError("File too small to be a valid WAV file")

    if buffer[:4] != RIFF_ID:
        raise InvalidContainerError("Not a RIFF file")

    if buffer[8:12] != WAVE_ID:
        raise InvalidContainerError("Not a WAVE file")


def scan_chunks(buffer: bytes) -> list[Chunk]:
    """List the top-level chunks of a RIFF/WAVE buffer in file order.

    Scanning starts at offset 12 and advances by header + payload + pad byte.
    It stops once a full 8-byte header no longer fits, so short trailing
    garbage is ignored rather than reported.

    Args:
        buffer: Complete WAV file contents.

    Returns:
        The chunks in the order they appear. Duplicate ids are kept.

    Raises:
        InvalidContainerError: If the RIFF/WAVE signature is missing.
    """
    check_container(buffer)

    chunks: list[Chunk] = []
    offset = RIFF_HEADER_SIZE
    while offset <= len(buffer) - CHUNK_HEADER_SIZE:
        chunk_id = buffer[offset : offset + 4].decode("ascii", errors="replace")
        chunk_size = struct.unpack_from("<I", buffer, offset + 4)[0]
        chunk = Chunk(id=chunk_id, size=chunk_size, offset=offset)
        chunks.append(chunk)
        offset = chunk.end

    return chunks


def find_chunk(chunks: Iterable[Chunk], chunk_id: bytes | str) -> Chunk | None:
    """Return the first chunk with the given FourCC, or None."""
    if isinstance(chunk_id, bytes):
        chunk_id = chunk_id.decode("ascii")
    return next((chunk for chunk in chunks if chunk.id == chunk_id), None)


def list_type(buffer: bytes, chunk: Chunk) -> str | None:
    """Return the list-type tag of a LIST chunk ("INFO", "adtl", ...)."""
    if chunk.id != LIST_ID.decode("ascii") or chunk.size < 4:
        return None
    tag = buffer[chunk.data_offset : chunk.data_offset + 4]
    if len(tag) < 4:
        return None
    return tag.decode("ascii", errors="replace")


def is_info_chunk(buffer: bytes, chunk: Chunk) -> bool:
    """Whether chunk is a LIST chunk of type INFO."""
    return list_type(buffer, chunk) == INFO_ID.decode("ascii")


def find_info_chunk(buffer: bytes, chunks: Sequence[Chunk]) -> Chunk | None:
    """Return the first LIST/INFO chunk, which is the authoritative one."""
    return next((chunk for chunk in chunks if is_info_chunk(buffer, chunk)), None)


def read_riff_size(buffer: bytes) -> int:
    """Return the declared RIFF size (bytes 4..8)."""
    check_container(buffer)
    return struct.unpack_from("<I", buffer, 4)[0]


def update_riff_size(buffer: bytes) -> bytes:
    """Return a copy of buffer whose RIFF size field equals len(buffer) - 8."""
    check_container(buffer)
    return buffer[:4] + struct.pack("<I", len(buffer) - 8) + buffer[8:]


def chunk_payload(buffer: bytes, chunk: Chunk) -> bytes:
    """Return the declared payload of a chunk, truncated at end of buffer."""
    return buffer[chunk.data_offset : chunk.data_offset + chunk.size]


def read_format(buffer: bytes, chunks: Sequence[Chunk] | None = None) -> WavFormat:
    """Parse the fmt chunk of a WAV buffer.

    Raises:
        RiffError: If the fmt chunk is missing or too small.
    """
    if chunks is None:
        chunks = scan_chunks(buffer)

    fmt = find_chunk(chunks, FMT_ID)
    if fmt is None:
        raise RiffError("fmt chunk not found in WAV file")

    fmt_data = chunk_payload(buffer, fmt)
    if len(fmt_data) < 16:
        raise RiffError("fmt chunk too small")

    audio_format, num_channels, sample_rate, byte_rate, block_align, bits_per_sample = (
        struct.unpack("<HHIIHH", fmt_data[:16])
    )
    return WavFormat(
        audio_format=audio_format,
        num_channels=num_channels,
        sample_rate=sample_rate,
        byte_rate=byte_rate,
        block_align=block_align,
        bits_per_sample=bits_per_sample,
    )


def pack_chunk(chunk_id: bytes, payload: bytes) -> bytes:
    """Serialize a chunk: header, payload and pad byte when the size is odd."""
    if len(chunk_id) != 4:
        raise ValueError("chunk_id must be 4 bytes")
    pad = b"\x00" if len(payload) % 2 else b""
    return chunk_id + struct.pack("<I", len(payload)) + payload + pad


def build_wav(
    samples: bytes,
    sample_rate: int = 48000,
    num_channels: int = 2,
    bits_per_sample: int = 16,
    *,
    chunks_before_data: Sequence[tuple[bytes, bytes]] = (),
    chunks_after_data: Sequence[tuple[bytes, bytes]] = (),
) -> bytes:
    """Build a complete PCM WAV file.

    Args:
        samples: Raw sample data, already in the target byte format.
        sample_rate: The sample rate in Hz.
        num_channels: Number of audio channels.
        bits_per_sample: Bits per sample.
        chunks_before_data: Extra (id, payload) chunks placed between fmt and data.
        chunks_after_data: Extra (id, payload) chunks appended after data.

    Returns:
        The complete WAV file as bytes, with a correct RIFF size.
    """
    bytes_per_sample = bits_per_sample // 8
    byte_rate = sample_rate * num_channels * bytes_per_sample
    block_align = num_channels * bytes_per_sample

    fmt_chunk = struct.pack(
        "<HHIIHH",
        WAVE_FORMAT_PCM,
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
    )

    body = bytearray(WAVE_ID)
    body.extend(pack_chunk(FMT_ID, fmt_chunk))
    for chunk_id, payload in chunks_before_data:
        body.extend(pack_chunk(chunk_id, payload))
    body.extend(pack_chunk(DATA_ID, samples))
    for chunk_id, payload in chunks_after_data:
        body.extend(pack_chunk(chunk_id, payload))

    return RIFF_ID + struct.pack("<I", len(body)) + bytes(body)
