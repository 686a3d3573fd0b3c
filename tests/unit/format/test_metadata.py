"""Unit tests for mgkit.format.metadata file-level reading and writing."""

import os
import stat
from pathlib import Path

import pytest

from mgkit.format.info import build_info_chunk
from mgkit.format.metadata import (
    atomic_write_bytes,
    read_comment,
    read_sample_info,
    write_comment_file,
)
from mgkit.format.riff import InvalidContainerError, build_wav, scan_chunks


def write_wav(path: Path, comment_before_data: str | None = None, **kwargs) -> Path:
    """Write a small WAV, optionally with an INFO chunk before data."""
    before = []
    if comment_before_data is not None:
        before.append((b"LIST", build_info_chunk(comment_before_data)[8:]))
    path.write_bytes(build_wav(b"\x00" * 400, chunks_before_data=before, **kwargs))
    return path


class TestReadComment:
    """Tests for reading descriptions from disk."""

    def test_missing_comment_is_empty(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "plain.wav")
        assert read_comment(path) == ""

    def test_reads_comment_before_data(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "legacy.wav", comment_before_data="From another editor")
        assert read_comment(path) == "From another editor"

    def test_missing_file_raises_oserror(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_comment(tmp_path / "nope.wav")

    def test_not_a_wav_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.wav"
        path.write_text("not audio")

        with pytest.raises(InvalidContainerError):
            read_comment(path)


class TestWriteCommentFile:
    """Tests for the file-level write boundary."""

    def test_write_then_read(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "kick.wav")

        result = write_comment_file(path, "Punchy kick")

        assert result.success
        assert result.error is None
        assert read_comment(path) == "Punchy kick"

    def test_rewrites_layout_on_disk(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "legacy.wav", comment_before_data="old")

        write_comment_file(path, "new")

        assert [c.id for c in scan_chunks(path.read_bytes())] == ["fmt ", "data", "LIST"]

    def test_missing_file_reports_failure(self, tmp_path: Path) -> None:
        result = write_comment_file(tmp_path / "gone.wav", "x")

        assert not result.success
        assert "gone.wav" in result.error

    def test_invalid_file_is_left_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.wav"
        path.write_bytes(b"garbage" * 10)

        result = write_comment_file(path, "x")

        assert not result.success
        assert result.error == "Not a RIFF file"
        assert path.read_bytes() == b"garbage" * 10

    def test_unencodable_comment_reports_failure(self, tmp_path: Path) -> None:
        # Undecodable argv bytes arrive as lone surrogates
        path = write_wav(tmp_path / "kick.wav")
        before = path.read_bytes()

        result = write_comment_file(path, "bad\udcff")

        assert not result.success
        assert "surrogates not allowed" in result.error
        assert path.read_bytes() == before

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "kick.wav")

        write_comment_file(path, "desc")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["kick.wav"]


class TestAtomicWrite:
    """Tests for the temp-file-and-rename writer."""

    def test_creates_file(self, tmp_path: Path) -> None:
        target = tmp_path / "out.bin"

        atomic_write_bytes(target, b"abc")

        assert target.read_bytes() == b"abc"

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_preserves_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "out.bin"
        target.write_bytes(b"old")
        target.chmod(0o640)

        atomic_write_bytes(target, b"new")

        assert stat.S_IMODE(target.stat().st_mode) == 0o640
        assert target.read_bytes() == b"new"

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            atomic_write_bytes(tmp_path / "missing" / "out.bin", b"abc")


class TestReadSampleInfo:
    """Tests for format details derived from chunks."""

    def test_reads_format_and_duration(self, tmp_path: Path) -> None:
        path = write_wav(tmp_path / "s.wav", sample_rate=48000, num_channels=2)
        write_comment_file(path, "desc")

        info = read_sample_info(path)

        assert info.description == "desc"
        assert info.sample_rate == 48000
        assert info.bit_depth == 16
        assert info.channels == 2
        assert info.duration == pytest.approx(400 / (48000 * 4))
