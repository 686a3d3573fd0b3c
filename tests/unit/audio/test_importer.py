"""Unit tests for mgkit.audio.importer batch imports."""

from pathlib import Path

import numpy as np
import soundfile as sf

from mgkit.audio.convert import ConversionResult
from mgkit.audio.importer import (
    ImportProgress,
    NumberingOptions,
    get_storage_info,
    get_storage_limit,
    import_files,
    plan_import_name,
    to_wav_name,
)
from mgkit.naming import DEFAULT_SCHEME
from mgkit.types import ImportStage


def write_audio(path: Path, sample_rate: int = 48000, channels: int = 2, **kwargs) -> Path:
    data = np.full((int(sample_rate * 0.05), channels), 0.1, dtype=np.float32)
    sf.write(str(path), data, sample_rate, **kwargs)
    return path


def failing_converter(source, destination, on_progress=None) -> ConversionResult:
    return ConversionResult(success=False, error="encoder exploded")


class TestImportFiles:
    """Tests for the per-file import pipeline."""

    def test_compliant_file_is_copied_verbatim(self, tmp_path: Path) -> None:
        source = write_audio(tmp_path / "kick.wav")
        target = tmp_path / "Project01"
        target.mkdir()

        result = import_files([source], target)

        assert result.success
        assert result.imported == 1
        assert result.renamed == []
        assert (target / "kick.wav").read_bytes() == source.read_bytes()

    def test_converts_off_spec_audio(self, tmp_path: Path) -> None:
        source = write_audio(tmp_path / "loop.flac", sample_rate=44100, channels=1, format="FLAC")
        target = tmp_path / "Wavs"
        target.mkdir()

        result = import_files([source], target)

        assert result.success, result.errors
        info = sf.info(str(target / "loop.wav"))
        assert (info.samplerate, info.channels, info.subtype) == (48000, 2, "PCM_16")
        assert result.renamed[0].original == "loop.flac"
        assert result.renamed[0].final == "loop.wav"

    def test_conflicts_get_suffixes(self, tmp_path: Path) -> None:
        source = write_audio(tmp_path / "kick.wav")
        target = tmp_path / "Project01"
        target.mkdir()
        (target / "kick.wav").write_bytes(b"existing")

        result = import_files([source, source], target)

        assert result.imported == 2
        assert [(r.original, r.final) for r in result.renamed] == [
            ("kick.wav", "kick_1.wav"),
            ("kick.wav", "kick_2.wav"),
        ]
        assert (target / "kick.wav").read_bytes() == b"existing"

    def test_sanitizes_names(self, tmp_path: Path) -> None:
        source = write_audio(tmp_path / "a?b.wav")
        target = tmp_path / "Project01"
        target.mkdir()

        result = import_files([source], target)

        assert (target / "a_b.wav").exists()
        assert [(r.original, r.final) for r in result.renamed] == [("a?b.wav", "a_b.wav")]

    def test_numbering_continues_folder_sequence(self, tmp_path: Path) -> None:
        target = tmp_path / "Project01"
        target.mkdir()
        (target / "01 - bass.wav").write_bytes(b"")
        (target / "02 - pad.wav").write_bytes(b"")
        files = [write_audio(tmp_path / "kick.wav"), write_audio(tmp_path / "07_hat.wav")]

        result = import_files(files, target, numbering=NumberingOptions(enabled=True))

        assert [(n.original, n.final) for n in result.numbered] == [("kick.wav", "03 - kick.wav")]
        assert (target / "03 - kick.wav").exists()
        assert (target / "07_hat.wav").exists()

    def test_numbering_scheme_override(self, tmp_path: Path) -> None:
        target = tmp_path / "Wavs"
        target.mkdir()
        files = [write_audio(tmp_path / "a.wav"), write_audio(tmp_path / "b.wav")]

        result = import_files(files, target, numbering=NumberingOptions(enabled=True, scheme="001_"))

        assert [n.final for n in result.numbered] == ["001_a.wav", "002_b.wav"]

    def test_numbered_name_conflict(self, tmp_path: Path) -> None:
        target = tmp_path / "Wavs"
        target.mkdir()
        (target / "01_a.wav").write_bytes(b"")
        source = write_audio(tmp_path / "a.wav")

        result = import_files(
            [source], target, numbering=NumberingOptions(enabled=True, scheme="01_")
        )

        assert [n.final for n in result.numbered] == ["02_a.wav"]
        assert result.renamed == []

    def test_disabled_numbering(self, tmp_path: Path) -> None:
        target = tmp_path / "Wavs"
        target.mkdir()
        (target / "01_x.wav").write_bytes(b"")

        result = import_files([write_audio(tmp_path / "a.wav")], target, numbering=NumberingOptions())

        assert result.numbered == []
        assert (target / "a.wav").exists()

    def test_unreadable_file_does_not_abort_batch(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.wav"
        bad.write_text("not audio")
        good = write_audio(tmp_path / "good.wav")
        target = tmp_path / "Wavs"
        target.mkdir()

        result = import_files([bad, good], target)

        assert not result.success
        assert result.imported == 1
        assert result.failed == 1
        assert result.errors[0].file == "bad.wav"
        assert result.errors[0].error.startswith("Cannot read file:")
        assert (target / "good.wav").exists()
        assert not (target / "bad.wav").exists()

    def test_conversion_failure(self, tmp_path: Path) -> None:
        source = write_audio(tmp_path / "slow.wav", sample_rate=22050)
        target = tmp_path / "Wavs"
        target.mkdir()

        result = import_files([source], target, converter=failing_converter)

        assert result.failed == 1
        assert result.errors[0].error == "encoder exploded"
        assert list(target.iterdir()) == []

    def test_temp_file_is_cleaned_up(self, tmp_path: Path, monkeypatch) -> None:
        scratch = tmp_path / "scratch"
        scratch.mkdir()
        monkeypatch.setattr("tempfile.tempdir", str(scratch))
        source = write_audio(tmp_path / "slow.wav", sample_rate=22050)
        target = tmp_path / "Wavs"
        target.mkdir()

        result = import_files([source], target)

        assert result.success
        assert list(scratch.iterdir()) == []

    def test_long_file_is_reported_as_trimmed(self, tmp_path: Path) -> None:
        source = tmp_path / "drone.wav"
        sf.write(str(source), np.zeros((8000 * 33, 1), dtype=np.float32), 8000, subtype="PCM_16")
        target = tmp_path / "Wavs"
        target.mkdir()

        result = import_files([source], target)

        assert result.trimmed == ["drone.wav"]
        assert sf.info(str(target / "drone.wav")).duration <= 32.0

    def test_storage_limit(self, tmp_path: Path) -> None:
        target = tmp_path / "Project01"
        target.mkdir()
        for i in range(127):
            (target / f"s{i}.wav").write_bytes(b"")
        files = [write_audio(tmp_path / "a.wav"), write_audio(tmp_path / "b.wav")]

        result = import_files(files, target)

        assert result.imported == 1
        assert result.failed == 1
        assert result.errors[0].file == "b.wav"
        assert result.errors[0].error == "Storage limit reached"

    def test_progress_stages(self, tmp_path: Path) -> None:
        target = tmp_path / "Wavs"
        target.mkdir()
        files = [write_audio(tmp_path / "a.wav"), write_audio(tmp_path / "b.wav", sample_rate=22050)]
        updates: list[ImportProgress] = []

        import_files(files, target, on_progress=updates.append)

        stages = [(u.current_file, u.stage) for u in updates if u.current_file]
        assert stages[:2] == [("a.wav", ImportStage.validating), ("a.wav", ImportStage.copying)]
        assert ("b.wav", ImportStage.converting) in stages
        assert updates[-1] == ImportProgress(
            current_file="", current_index=2, total_files=2, percent=100, stage=ImportStage.copying
        )

    def test_empty_batch(self, tmp_path: Path) -> None:
        result = import_files([], tmp_path)

        assert result.success
        assert result.imported == 0


class TestStorage:
    """Tests for folder capacity lookups."""

    def test_limits(self, tmp_path: Path) -> None:
        assert get_storage_limit(tmp_path / "Recs") == 1024
        assert get_storage_limit(tmp_path / "Wavs") == 128
        assert get_storage_limit(tmp_path / "Project07") == 128

    def test_storage_info_counts_wavs_only(self, tmp_path: Path) -> None:
        for name in ["a.wav", "b.WAV", "Preset01.mgp"]:
            (tmp_path / name).write_bytes(b"")

        info = get_storage_info(tmp_path)

        assert info.current_count == 2
        assert info.available_slots == 126


class TestToWavName:
    """Tests for destination name normalization."""

    def test_names(self) -> None:
        assert to_wav_name("kick.wav") == "kick.wav"
        assert to_wav_name("loop.flac") == "loop.wav"
        assert to_wav_name("LOUD.WAV") == "LOUD.wav"
        assert to_wav_name("a:b.aif") == "a_b.wav"


class TestPlanImportName:
    """Tests for planning destination names ahead of a copy."""

    def test_unnumbered(self, tmp_path: Path) -> None:
        assert plan_import_name("loop.flac", tmp_path, None, 1) == ("loop.wav", "loop.wav", False)

    def test_numbered(self, tmp_path: Path) -> None:
        assert plan_import_name("kick.wav", tmp_path, DEFAULT_SCHEME, 4) == (
            "04_kick.wav",
            "04_kick.wav",
            True,
        )

    def test_prefixed_name_keeps_its_number(self, tmp_path: Path) -> None:
        assert plan_import_name("07_hat.wav", tmp_path, DEFAULT_SCHEME, 4) == (
            "07_hat.wav",
            "07_hat.wav",
            False,
        )

    def test_conflicts_with_disk_and_reserved_names(self, tmp_path: Path) -> None:
        (tmp_path / "kick.wav").write_bytes(b"")

        _, final, _ = plan_import_name("kick.wav", tmp_path, None, 1, reserved=["kick_1.wav"])

        assert final == "kick_2.wav"
