"""Hardware compatibility checks for WAV samples.

The Multigrain expects ``fmt -> data -> [metadata]``. Files written by other
tools often carry a LIST chunk before ``data``; they play fine on a computer
but not on the module. This module finds such files and repairs them.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mgkit.constants import AUDIO_EXTENSION
from mgkit.format.metadata import WriteResult, read_comment, write_comment_file
from mgkit.format.riff import (
    DATA_ID,
    INFO_ID,
    LIST_ID,
    Chunk,
    RiffError,
    find_chunk,
    list_type,
    read_riff_size,
    scan_chunks,
)
from mgkit.types import PathLike

logger = logging.getLogger(__name__)

INFO_TYPE = INFO_ID.decode("ascii")


@dataclass
class ValidationResult:
    """Result of validation with optional warnings."""

    valid: bool
    errors: list[str]
    warnings: list[str]

    @classmethod
    def success(cls, warnings: list[str] | None = None) -> "ValidationResult":
        """Create a successful validation result."""
        return cls(valid=True, errors=[], warnings=warnings or [])

    @classmethod
    def failure(cls, errors: list[str], warnings: list[str] | None = None) -> "ValidationResult":
        """Create a failed validation result."""
        return cls(valid=False, errors=errors, warnings=warnings or [])


@dataclass
class ChunkOrderReport:
    """Chunk-order check for a single WAV file."""

    path: Path | None
    result: ValidationResult
    chunk_order: list[str] = field(default_factory=list)
    lists_before_data: list[str] = field(default_factory=list)
    """List types ("INFO", "adtl", ...) of LIST chunks that precede data."""

    @property
    def valid(self) -> bool:
        return self.result.valid

    @property
    def info_before_data(self) -> bool:
        return INFO_TYPE in self.lists_before_data

    @property
    def repairable(self) -> bool:
        """Whether rewriting the description would make the file valid.

        Only LIST/INFO chunks are moved by a rewrite, so any other misplaced
        LIST type keeps the file incompatible.
        """
        return (
            not self.valid
            and bool(self.lists_before_data)
            and all(tag == INFO_TYPE for tag in self.lists_before_data)
            and all("before data" in error for error in self.result.errors)
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "path": str(self.path) if self.path is not None else None,
            "valid": self.result.valid,
            "errors": self.result.errors,
            "warnings": self.result.warnings,
            "chunk_order": self.chunk_order,
        }


def format_chunk_order(chunks: list[Chunk]) -> str:
    """Render chunk ids as "fmt  -> data -> LIST"."""
    return " -> ".join(chunk.id for chunk in chunks)


def misplaced_list_message(tag: str) -> str:
    if tag == INFO_TYPE:
        return "INFO chunk before data chunk (incompatible with Multigrain)"
    return f"LIST ({tag}) chunk before data chunk (incompatible with Multigrain)"


def check_chunk_order(buffer: bytes, path: Path | None = None) -> ChunkOrderReport:
    """Check that no LIST chunk precedes the data chunk.

    Errors:
    - Not a RIFF/WAVE container
    - No data chunk
    - LIST chunk before data, one error per list type

    Warnings:
    - Declared RIFF size differs from the actual file length
    """
    errors: list[str] = []
    warnings: list[str] = []

    try:
        chunks = scan_chunks(buffer)
    except RiffError as e:
        return ChunkOrderReport(path=path, result=ValidationResult.failure([str(e)]))

    order = [chunk.id for chunk in chunks]

    data = find_chunk(chunks, DATA_ID)
    misplaced: list[str] = []

    if data is None:
        errors.append("No data chunk found")
    else:
        for chunk in chunks:
            if chunk.offset >= data.offset:
                break
            if chunk.id != LIST_ID.decode("ascii"):
                continue
            tag = list_type(buffer, chunk) or "?"
            if tag not in misplaced:
                misplaced.append(tag)
                errors.append(misplaced_list_message(tag))

    declared = read_riff_size(buffer)
    if declared != len(buffer) - 8:
        warnings.append(f"RIFF size is {declared}, expected {len(buffer) - 8}")

    if errors:
        result = ValidationResult.failure(errors, warnings)
    else:
        result = ValidationResult.success(warnings)
    return ChunkOrderReport(
        path=path, result=result, chunk_order=order, lists_before_data=misplaced
    )


def check_wav_file(path: PathLike) -> ChunkOrderReport:
    """Read a file and run :func:`check_chunk_order` on it.

    Unreadable files are reported as failures rather than raised.
    """
    path = Path(path)
    try:
        buffer = path.read_bytes()
    except OSError as e:
        return ChunkOrderReport(path=path, result=ValidationResult.failure([str(e)]))
    return check_chunk_order(buffer, path=path)


def find_wav_files(root: PathLike) -> list[Path]:
    """Recursively list .wav files under root, sorted, skipping dot-files."""
    root = Path(root)
    return sorted(
        p
        for p in root.rglob("*")
        if p.is_file()
        and p.suffix.lower() == AUDIO_EXTENSION
        and not p.name.startswith(".")
    )


def scan_wav_files(root: PathLike) -> list[ChunkOrderReport]:
    """Check the chunk order of every .wav file under root."""
    reports = []
    for path in find_wav_files(root):
        report = check_wav_file(path)
        if not report.valid:
            logger.info("%s: %s", path, "; ".join(report.result.errors))
        reports.append(report)
    return reports


def repair_chunk_order(path: PathLike) -> WriteResult:
    """Move a file's INFO chunk after its data chunk.

    The existing description is written back unchanged, which rebuilds the
    file with the hardware-safe layout. Files with another LIST type before
    data are left untouched, since a rewrite cannot move those.
    """
    report = check_wav_file(path)
    others = [tag for tag in report.lists_before_data if tag != INFO_TYPE]
    if others:
        return WriteResult(
            success=False,
            error=f"Cannot move LIST ({', '.join(others)}) chunk after data chunk",
        )
    try:
        comment = read_comment(path)
    except (OSError, RiffError) as e:
        return WriteResult(success=False, error=str(e))
    return write_comment_file(path, comment)
