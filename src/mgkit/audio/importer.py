"""Batch import of audio files into a project, Wavs or Recs folder.

Each file goes through analysis, optional conversion, naming and copy. A
failure on one file is recorded and the batch moves on.
"""

import logging
import shutil
from collections.abc import Callable, Collection, Sequence
from dataclasses import asdict, dataclass, field, replace
from pathlib import Path
from typing import Any

from mgkit.audio.analysis import analyze_audio_file
from mgkit.audio.convert import (
    ConversionResult,
    ProgressCallback,
    cleanup_temp_file,
    convert_audio_file,
    get_temp_conversion_path,
)
from mgkit.constants import AUDIO_EXTENSION, FOLDER_NAMES, STORAGE_LIMITS
from mgkit.naming import (
    NumberingScheme,
    apply_number_prefix,
    detect_numbering_scheme,
    has_number_prefix,
    resolve_conflict,
    sanitize_filename,
    scheme_with_override,
)
from mgkit.types import ImportStage, PathLike, SchemeOverride

logger = logging.getLogger(__name__)

Converter = Callable[[PathLike, PathLike, ProgressCallback | None], ConversionResult]


@dataclass
class NumberingOptions:
    enabled: bool = False
    scheme: SchemeOverride | None = None
    """Force "01_" or "001_"; None detects the folder's scheme."""


@dataclass
class RenamedFile:
    original: str
    final: str


@dataclass
class ImportFailure:
    file: str
    error: str


@dataclass
class ImportProgress:
    current_file: str
    current_index: int
    total_files: int
    percent: int
    stage: ImportStage


@dataclass
class ImportResult:
    success: bool = True
    imported: int = 0
    failed: int = 0
    trimmed: list[str] = field(default_factory=list)
    renamed: list[RenamedFile] = field(default_factory=list)
    numbered: list[RenamedFile] = field(default_factory=list)
    errors: list[ImportFailure] = field(default_factory=list)

    def add_failure(self, file: str, error: str) -> None:
        logger.warning("Import of %s failed: %s", file, error)
        self.errors.append(ImportFailure(file=file, error=error))
        self.failed += 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StorageInfo:
    current_count: int
    limit: int

    @property
    def available_slots(self) -> int:
        return max(0, self.limit - self.current_count)


def get_storage_limit(target_dir: PathLike) -> int:
    """Sample capacity of a folder: 1024 for Recs, 128 for Wavs and projects."""
    if Path(target_dir).name == FOLDER_NAMES.recs:
        return STORAGE_LIMITS.samples_in_recs
    return STORAGE_LIMITS.samples_per_project


def list_wav_names(directory: PathLike) -> list[str]:
    """Names of the .wav files directly inside directory."""
    try:
        return [
            p.name
            for p in Path(directory).iterdir()
            if p.is_file() and p.name.lower().endswith(AUDIO_EXTENSION)
        ]
    except OSError:
        return []


def get_storage_info(target_dir: PathLike) -> StorageInfo:
    return StorageInfo(
        current_count=len(list_wav_names(target_dir)),
        limit=get_storage_limit(target_dir),
    )


def resolve_numbering_scheme(
    target_dir: PathLike, options: NumberingOptions | None
) -> NumberingScheme | None:
    if options is None or not options.enabled:
        return None
    existing = list_wav_names(target_dir)
    if options.scheme:
        return scheme_with_override(existing, options.scheme)
    return detect_numbering_scheme(existing)


def to_wav_name(filename: str) -> str:
    """Sanitize filename and give it a .wav extension."""
    sanitized = sanitize_filename(filename)
    if sanitized.endswith(AUDIO_EXTENSION):
        return sanitized
    return Path(sanitized).stem + AUDIO_EXTENSION


def plan_import_name(
    filename: str,
    target_dir: PathLike,
    scheme: NumberingScheme | None,
    number: int,
    reserved: Collection[str] = (),
) -> tuple[str, str, bool]:
    """Work out the name a source file is imported under.

    Args:
        filename: Source file name.
        target_dir: Destination folder, probed for existing names.
        scheme: Numbering scheme, or None to leave the name unnumbered.
        number: Number to use if the name gets a prefix.
        reserved: Names already claimed by earlier files of the batch.

    Returns:
        ``(desired, final, numbered)``: the sanitized, possibly numbered
        ``.wav`` name, the conflict-free name actually used, and whether
        ``number`` was consumed.
    """
    desired = to_wav_name(filename)
    numbered = False
    if scheme is not None and not has_number_prefix(desired):
        desired = apply_number_prefix(desired, number, scheme)
        numbered = True
    return desired, resolve_conflict(target_dir, desired, reserved), numbered


def import_files(
    files: Sequence[PathLike],
    target_dir: PathLike,
    numbering: NumberingOptions | None = None,
    converter: Converter = convert_audio_file,
    on_progress: Callable[[ImportProgress], None] | None = None,
) -> ImportResult:
    """Import audio files into target_dir.

    Files are handled in order, which is also the order numbers are handed
    out in. Files past the folder's storage limit fail with
    "Storage limit reached".

    Args:
        files: Source audio files.
        target_dir: Project, Wavs or Recs folder.
        numbering: Prefix options; None leaves names unnumbered.
        converter: Conversion function, replaceable for tests.
        on_progress: Receives an ImportProgress at every stage.

    Returns:
        ImportResult; ``success`` is True only when no file failed.
    """
    target_dir = Path(target_dir)
    result = ImportResult()
    available_slots = get_storage_info(target_dir).available_slots

    scheme = resolve_numbering_scheme(target_dir, numbering)
    current_number = scheme.next_number if scheme else 0

    total = len(files)

    def report(progress: ImportProgress) -> None:
        if on_progress is not None:
            on_progress(progress)

    for index, file_path in enumerate(files):
        file_path = Path(file_path)
        filename = file_path.name

        if available_slots <= 0:
            result.add_failure(filename, "Storage limit reached")
            continue

        progress = ImportProgress(
            current_file=filename,
            current_index=index,
            total_files=total,
            percent=round(index / total * 100),
            stage=ImportStage.validating,
        )
        report(progress)

        analysis = analyze_audio_file(file_path)
        if not analysis.valid:
            message = analysis.issues[0].message if analysis.issues else "File is not readable"
            result.add_failure(filename, message)
            continue

        if analysis.will_be_trimmed:
            result.trimmed.append(filename)

        source = file_path
        temp_path: Path | None = None
        try:
            if analysis.needs_conversion:
                converting = replace(progress, stage=ImportStage.converting)
                report(converting)

                def conversion_progress(percent: float, base: ImportProgress = converting) -> None:
                    overall = round((base.current_index + percent / 100) / total * 100)
                    report(replace(base, percent=overall))

                temp_path = get_temp_conversion_path(filename)
                conversion = converter(file_path, temp_path, conversion_progress)
                if not conversion.success:
                    result.add_failure(filename, conversion.error or "Conversion failed")
                    continue
                source = temp_path

            report(replace(progress, stage=ImportStage.copying))

            desired_name, final_name, numbered = plan_import_name(
                filename, target_dir, scheme, current_number
            )
            if numbered:
                result.numbered.append(
                    RenamedFile(original=to_wav_name(filename), final=desired_name)
                )
                current_number += 1

            if final_name != desired_name:
                result.renamed.append(
                    RenamedFile(original=desired_name if numbered else filename, final=final_name)
                )
            elif not numbered and final_name != filename:
                result.renamed.append(RenamedFile(original=filename, final=final_name))

            shutil.copyfile(source, target_dir / final_name)
            logger.info("Imported %s as %s", filename, final_name)
            result.imported += 1
            available_slots -= 1
        except OSError as e:
            result.add_failure(filename, str(e))
        finally:
            if temp_path is not None:
                cleanup_temp_file(temp_path)

    report(
        ImportProgress(
            current_file="",
            current_index=total,
            total_files=total,
            percent=100,
            stage=ImportStage.copying,
        )
    )

    result.success = result.failed == 0
    return result
