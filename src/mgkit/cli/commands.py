import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Literal

from cyclopts import App, Parameter
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from mgkit.audio import (
    ImportProgress,
    NumberingOptions,
    analyze_audio_file,
    get_storage_info,
    import_files,
    plan_import_name,
    resolve_numbering_scheme,
)
from mgkit.cli.validators import validate_directory, validate_existing_files
from mgkit.format import (
    RiffError,
    check_wav_file,
    find_info_chunk,
    parse_info_entries,
    read_comment,
    read_sample_info,
    repair_chunk_order,
    scan_chunks,
    scan_wav_files,
    write_comment_file,
)
from mgkit.format.validation import format_chunk_order
from mgkit.library import (
    find_multigrain_folder,
    resolve_preset_samples,
    validate_structure,
)
from mgkit.library.structure import parse_project
from mgkit.types import SampleLocation

app = App(name="mgkit", help="Manage the sample library on a Multigrain SD card")
console = Console()

logger = logging.getLogger("mgkit")


def configure_logging(verbose: bool = False) -> None:
    """Route mgkit log records to stderr through rich."""
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=Console(stderr=True), show_path=False, show_time=False)
    )
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(message, style="bold red")


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(message, style="bold green")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(message, style="bold yellow")


def print_json(data: object) -> None:
    console.print_json(json.dumps(data))


@app.meta.default
def launcher(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    verbose: bool = False,
) -> int:
    """
    Manage the sample library on a Multigrain SD card.

    Parameters
    ----------
    verbose: bool
        Show debug logging
    """
    configure_logging(verbose)
    return app(tokens)


@app.command
def inspect(file: Path) -> int:
    """
    Display the chunk layout, format and description of a WAV sample.

    Parameters
    ----------
    file: Path
        The path to the .wav sample
    """
    if not file.exists():
        print_error(f"Error: File not found: {file}")
        return 1

    try:
        buffer = file.read_bytes()
        chunks = scan_chunks(buffer)
        info = read_sample_info(file)
    except (OSError, RiffError) as e:
        print_error(f"Error reading {file}: {e}")
        return 1

    console.print(f"[bold]Sample: {escape(str(file))}[/bold]")
    console.print(f"  Sample rate: {info.sample_rate} Hz")
    console.print(f"  Bit depth: {info.bit_depth}-bit")
    console.print(f"  Channels: {info.channels}")
    console.print(f"  Duration: {info.duration:.3f}s")
    console.print(f"  Description: {escape(info.description) or '(none)'}")
    console.print(f"  Chunk order: {format_chunk_order(chunks)}")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Chunk", justify="left")
    table.add_column("Offset", justify="right")
    table.add_column("Size", justify="right")
    for chunk in chunks:
        table.add_row(repr(chunk.id), str(chunk.offset), str(chunk.size))
    console.print(table)

    info_chunk = find_info_chunk(buffer, chunks)
    if info_chunk is not None:
        entries = parse_info_entries(buffer, info_chunk)
        if entries:
            console.print("[bold]INFO entries:[/bold]")
            for tag, value in entries.items():
                console.print(f"  {tag}: {escape(value)}")

    return 0


@app.command
def check(
    path: Path,
    fix: bool = False,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
) -> int:
    """
    Check WAV files for chunk layouts the Multigrain cannot play.

    A LIST chunk placed before the data chunk stalls the hardware. With
    --fix, affected files are rewritten with the description after the audio.

    Parameters
    ----------
    path: Path
        A .wav file, or a folder to scan recursively
    fix: bool
        Repair files whose INFO chunk precedes the data chunk (default: False)
    output_json: bool
        Output results as JSON (default: False)
    """
    if not path.exists():
        if output_json:
            print_json([{"path": str(path), "valid": False, "errors": ["File not found"]}])
        else:
            print_error(f"[FAIL] File not found: {path}")
        return 1

    reports = scan_wav_files(path) if path.is_dir() else [check_wav_file(path)]

    fixed: list[str] = []
    if fix:
        for index, report in enumerate(reports):
            if report.valid or not report.lists_before_data or report.path is None:
                continue
            if not report.repairable:
                report.result.errors.append(
                    "Repair failed: only INFO chunks can be moved after the data chunk"
                )
                continue
            result = repair_chunk_order(report.path)
            if not result.success:
                report.result.errors.append(f"Repair failed: {result.error}")
                continue
            recheck = check_wav_file(report.path)
            if recheck.valid:
                fixed.append(str(report.path))
            else:
                recheck.result.errors.append("Repair failed: file is still incompatible")
            reports[index] = recheck

    all_valid = all(report.valid for report in reports)

    if output_json:
        print_json([report.to_dict() for report in reports])
        return 0 if all_valid else 1

    for report in reports:
        name = escape(str(report.path))
        if report.valid:
            status = "[FIXED]" if str(report.path) in fixed else "[PASS]"
            print_success(f"{status} {name}")
        else:
            print_error(f"[FAIL] {name}")
            for error in report.result.errors:
                console.print(f"  {escape(error)}")
            if report.chunk_order:
                console.print(f"  Chunk order: {' -> '.join(report.chunk_order)}")
        for warning in report.result.warnings:
            print_warning(f"  [WARN] {escape(warning)}")

    invalid = sum(1 for report in reports if not report.valid)
    console.print("")
    console.print(f"Checked {len(reports)} file(s): {invalid} incompatible, {len(fixed)} fixed")
    if invalid and not fix:
        console.print("  Suggestion: run again with --fix to move the metadata after the audio.")

    return 0 if all_valid else 1


@app.command
def comment(
    file: Path,
    text: Annotated[str | None, Parameter(name=["--set"])] = None,
) -> int:
    """
    Read or set the description of a WAV sample.

    Setting a description always places it after the audio data, which also
    fixes files the hardware could not read.

    Parameters
    ----------
    file: Path
        The path to the .wav sample
    text: str | None
        New description; omit to print the current one
    """
    if not file.exists():
        print_error(f"Error: File not found: {file}")
        return 1

    if text is None:
        try:
            console.print(read_comment(file), markup=False, highlight=False)
        except (OSError, RiffError) as e:
            print_error(f"Error reading {file}: {e}")
            return 1
        return 0

    result = write_comment_file(file, text)
    if not result.success:
        print_error(f"Error: {result.error}")
        return 1

    print_success(f"Description saved to {escape(str(file))}")
    return 0


@app.command
def preset(file: Path) -> int:
    """
    List the samples a preset uses and where the hardware will find them.

    Samples are looked up in the project folder, then Wavs, then Recs.

    Parameters
    ----------
    file: Path
        The path to a PresetNN.mgp or Autosave.mgp file inside a project folder
    """
    if not file.exists():
        print_error(f"Error: File not found: {file}")
        return 1

    project = parse_project(file.parent)
    multigrain = find_multigrain_folder(file.parent.parent) or file.parent.parent
    structure = validate_structure(multigrain).structure
    if structure is None:
        print_error(f"Error: Cannot read card folder {multigrain}")
        return 1

    try:
        resolved = resolve_preset_samples(file, project, structure)
    except OSError as e:
        print_error(f"Error reading preset: {e}")
        return 1

    console.print(f"[bold]Preset: {escape(str(file))}[/bold]")
    if not resolved:
        print_warning("No sample references found.")
        return 0

    location_styles = {
        SampleLocation.PROJECT: "cyan",
        SampleLocation.WAVS: "green",
        SampleLocation.RECS: "magenta",
        SampleLocation.NOT_FOUND: "bold red",
    }

    table = Table(show_header=True, header_style="bold")
    table.add_column("Sound", justify="right")
    table.add_column("Sample", justify="left")
    table.add_column("Location", justify="left")
    for slot, sample in enumerate(resolved, start=1):
        label = sample.location.value
        if sample.location is SampleLocation.PROJECT and project is not None:
            label = project.name
        style = location_styles[sample.location]
        table.add_row(str(slot), escape(sample.name), f"[{style}]{label}[/{style}]")
    console.print(table)

    missing = sum(1 for sample in resolved if not sample.found)
    if missing:
        print_warning(f"{missing} sample(s) not found on the card")
    return 0


@app.command
def structure(
    path: Path,
    output_json: Annotated[bool, Parameter(name=["--json"])] = False,
) -> int:
    """
    Summarize the projects, presets and samples on a card.

    Parameters
    ----------
    path: Path
        The card mount point or its Multigrain folder
    output_json: bool
        Output results as JSON (default: False)
    """
    validation = validate_structure(path)
    card = validation.structure

    if output_json:
        data: dict[str, object] = {"valid": validation.valid, "errors": validation.errors}
        if card is not None:
            data.update(
                {
                    "root": str(card.root_path),
                    "has_settings": card.has_settings,
                    "projects": [
                        {
                            "name": project.name,
                            "index": project.index,
                            "bank": "{}{}".format(*project.bank),
                            "custom_name": project.custom_name,
                            "presets": len(project.presets),
                            "samples": len(project.samples),
                            "has_autosave": project.has_autosave,
                        }
                        for project in card.projects
                    ],
                    "global_wavs": len(card.global_wavs),
                    "recordings": len(card.recordings),
                }
            )
        print_json(data)
        return 0 if validation.valid else 1

    if card is None:
        for error in validation.errors:
            print_error(f"[FAIL] {error}")
        return 1

    console.print(f"[bold]Multigrain card: {escape(str(card.root_path))}[/bold]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Bank", justify="left")
    table.add_column("Project", justify="left")
    table.add_column("Presets", justify="right")
    table.add_column("Samples", justify="right")
    table.add_column("Autosave", justify="center")
    for project in card.projects:
        bank, position = project.bank
        autosave = "[green]Yes[/green]" if project.has_autosave else "[yellow]No[/yellow]"
        table.add_row(
            f"{bank}{position}",
            escape(project.display_name),
            str(len(project.presets)),
            str(len(project.samples)),
            autosave,
        )
    console.print(table)

    console.print(f"  Wavs: {len(card.global_wavs)} sample(s)")
    console.print(f"  Recs: {len(card.recordings)} recording(s)")

    if validation.valid:
        print_success("[PASS] Card structure is valid")
        return 0

    for error in validation.errors:
        print_error(f"[FAIL] {error}")
    return 1


@app.command(name="import")
def import_(
    files: Annotated[list[Path], Parameter(validator=validate_existing_files)],
    *,
    to: Annotated[Path, Parameter(validator=validate_directory)],
    number: bool = False,
    scheme: Literal["auto", "01_", "001_"] = "auto",
    dry_run: bool = False,
) -> int:
    """
    Import audio files into a project, Wavs or Recs folder.

    Files that are not 48 kHz 16-bit stereo WAV are converted, and anything
    longer than 32 seconds is trimmed.

    Parameters
    ----------
    files: list[Path]
        Audio files to import, in the order they should be numbered
    to: Path
        Destination folder
    number: bool
        Prefix imported names with sequence numbers (default: False)
    scheme: Literal["auto", "01_", "001_"]
        Numbering width; "auto" follows the folder's existing prefixes
    dry_run: bool
        Show what would happen without copying anything (default: False)
    """
    override = None if scheme == "auto" else scheme

    if dry_run:
        return _preview_import(files, to, number, override)

    numbering = NumberingOptions(enabled=number, scheme=override)

    def on_progress(progress: ImportProgress) -> None:
        if progress.current_file:
            logger.debug(
                "[%d/%d] %s: %s",
                progress.current_index + 1,
                progress.total_files,
                progress.stage.value,
                progress.current_file,
            )

    with console.status(f"Importing {len(files)} file(s)..."):
        result = import_files(files, to, numbering=numbering, on_progress=on_progress)

    for name in result.trimmed:
        print_warning(f"  [TRIM] {escape(name)} was trimmed to 32s")
    for renamed in result.numbered:
        console.print(f"  [NUM] {escape(renamed.original)} -> {escape(renamed.final)}")
    for renamed in result.renamed:
        console.print(f"  [RENAME] {escape(renamed.original)} -> {escape(renamed.final)}")
    for failure in result.errors:
        print_error(f"  [FAIL] {escape(failure.file)}: {escape(failure.error)}")

    summary = f"Imported {result.imported} file(s) into {escape(str(to))}"
    if result.success:
        print_success(summary)
        return 0

    print_warning(f"{summary}, {result.failed} failed")
    return 1


def _preview_import(
    files: list[Path], target: Path, number: bool, override: Literal["01_", "001_"] | None
) -> int:
    storage = get_storage_info(target)
    console.print(
        f"[bold]Target: {escape(str(target))}[/bold] "
        f"({storage.current_count}/{storage.limit} samples)"
    )

    scheme = resolve_numbering_scheme(target, NumberingOptions(enabled=number, scheme=override))
    next_number = scheme.next_number if scheme else 0
    available_slots = storage.available_slots
    planned: list[str] = []

    table = Table(show_header=True, header_style="bold")
    table.add_column("File", justify="left")
    table.add_column("Import as", justify="left")
    table.add_column("Issues", justify="left")

    failing = 0
    for file in files:
        if available_slots <= 0:
            failing += 1
            table.add_row(escape(file.name), "-", "[red]Storage limit reached[/red]")
            continue

        analysis = analyze_audio_file(file)
        issues = "\n".join(escape(issue.message) for issue in analysis.issues) or "[green]OK[/green]"
        if not analysis.valid:
            failing += 1
            table.add_row(escape(file.name), "-", issues)
            continue

        _, final_name, numbered = plan_import_name(
            file.name, target, scheme, next_number, reserved=planned
        )
        if numbered:
            next_number += 1
        planned.append(final_name)
        available_slots -= 1
        table.add_row(escape(file.name), escape(final_name), issues)
    console.print(table)

    if failing:
        print_warning(f"{failing} file(s) would fail")
    return 0


def main() -> None:
    sys.exit(app.meta())


if __name__ == "__main__":
    main()
