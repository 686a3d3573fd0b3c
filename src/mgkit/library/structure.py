"""Reading the Multigrain folder layout of an SD card.

Expected layout::

    Multigrain/
        Settings.mgs
        Project01/ .. Project48/
            Preset01.mgp .. Preset48.mgp
            Autosave.mgp
            *.wav
            .project-metadata.json   (optional custom name)
        Wavs/*.wav
        Recs/*.wav
"""

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from mgkit.constants import (
    AUDIO_EXTENSION,
    FOLDER_NAMES,
    STORAGE_LIMITS,
    get_project_bank_info,
)
from mgkit.types import PathLike

logger = logging.getLogger(__name__)

# macOS litter on FAT cards
IGNORED_PREFIXES = (".DS_Store", "._", ".Spotlight", ".fseventsd", "__MACOSX")

PROJECT_DIR_PATTERN = re.compile(r"^Project(\d{2})$")
PRESET_FILE_PATTERN = re.compile(r"^Preset(\d{2})\.mgp$", re.IGNORECASE)

AUTOSAVE_INDEX = 0


@dataclass
class WavFile:
    name: str
    path: Path
    size: int


@dataclass
class Preset:
    name: str
    path: Path
    index: int
    """1-48, or 0 for the project autosave."""

    @property
    def is_autosave(self) -> bool:
        return self.index == AUTOSAVE_INDEX


@dataclass
class Project:
    name: str
    path: Path
    index: int
    presets: list[Preset] = field(default_factory=list)
    samples: list[WavFile] = field(default_factory=list)
    autosave: Preset | None = None
    custom_name: str | None = None

    @property
    def has_autosave(self) -> bool:
        return self.autosave is not None

    @property
    def bank(self) -> tuple[str, int]:
        """(bank name, position) as shown on the hardware, e.g. ("Y", 3)."""
        return get_project_bank_info(self.index)

    @property
    def display_name(self) -> str:
        return self.custom_name or self.name


@dataclass
class MultigrainStructure:
    root_path: Path
    projects: list[Project] = field(default_factory=list)
    global_wavs: list[WavFile] = field(default_factory=list)
    recordings: list[WavFile] = field(default_factory=list)
    has_settings: bool = False
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def get_project(self, index: int) -> Project | None:
        return next((p for p in self.projects if p.index == index), None)


@dataclass
class StructureValidation:
    valid: bool
    errors: list[str]
    structure: MultigrainStructure | None = None


def should_ignore(name: str) -> bool:
    return name.startswith(IGNORED_PREFIXES)


def _list_entries(directory: Path) -> list[Path]:
    """Directory entries minus OS metadata files; missing directories are empty."""
    try:
        return [p for p in directory.iterdir() if not should_ignore(p.name)]
    except OSError:
        return []


def list_wav_files(directory: PathLike) -> list[WavFile]:
    """List the .wav files directly inside directory, sorted by name."""
    wav_files = []
    for entry in _list_entries(Path(directory)):
        if not entry.name.lower().endswith(AUDIO_EXTENSION):
            continue
        try:
            if not entry.is_file():
                continue
            size = entry.stat().st_size
        except OSError as e:
            logger.debug("Skipping %s: %s", entry, e)
            continue
        wav_files.append(WavFile(name=entry.name, path=entry, size=size))

    return sorted(wav_files, key=lambda w: w.name.lower())


def read_custom_name(project_path: PathLike) -> str | None:
    """Return the user-defined project name, or None.

    A missing or malformed metadata file means no custom name.
    """
    metadata_path = Path(project_path) / FOLDER_NAMES.project_metadata_file
    try:
        metadata = json.loads(metadata_path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if not isinstance(metadata, dict):
        return None
    return metadata.get("customName") or None


def parse_project(project_path: PathLike) -> Project | None:
    """Parse a ProjectNN folder; None if the name or index is out of range."""
    project_path = Path(project_path)
    match = PROJECT_DIR_PATTERN.match(project_path.name)
    if match is None:
        return None

    index = int(match.group(1))
    if not 1 <= index <= STORAGE_LIMITS.max_projects:
        return None

    presets = []
    autosave = None
    for entry in _list_entries(project_path):
        if entry.is_dir():
            continue
        preset_match = PRESET_FILE_PATTERN.match(entry.name)
        if preset_match:
            presets.append(Preset(name=entry.name, path=entry, index=int(preset_match.group(1))))
        elif entry.name.lower() == FOLDER_NAMES.autosave_file.lower():
            autosave = Preset(name="Autosave", path=entry, index=AUTOSAVE_INDEX)

    return Project(
        name=project_path.name,
        path=project_path,
        index=index,
        presets=sorted(presets, key=lambda p: p.index),
        samples=list_wav_files(project_path),
        autosave=autosave,
        custom_name=read_custom_name(project_path),
    )


def find_multigrain_folder(search_path: PathLike) -> Path | None:
    """Return search_path if it is the Multigrain folder, or its Multigrain child."""
    search_path = Path(search_path)
    if search_path.name == FOLDER_NAMES.root:
        return search_path

    candidate = search_path / FOLDER_NAMES.root
    if candidate.is_dir():
        return candidate
    return None


def validate_structure(root_path: PathLike) -> StructureValidation:
    """Parse a card (or its Multigrain folder) and check it looks like one.

    The card is valid when it holds Settings.mgs and at least one project
    folder. Parsed contents are returned even when invalid.

    Args:
        root_path: Card mount point or the Multigrain folder itself.

    Returns:
        StructureValidation with the parsed structure, or without one when
        the path is not an accessible directory.
    """
    root_path = Path(root_path)
    if not root_path.exists():
        return StructureValidation(valid=False, errors=["Cannot access the selected path"])
    if not root_path.is_dir():
        return StructureValidation(valid=False, errors=["Selected path is not a directory"])

    multigrain_path = root_path
    if (root_path / FOLDER_NAMES.root).is_dir():
        multigrain_path = root_path / FOLDER_NAMES.root

    entries = _list_entries(multigrain_path)
    has_settings = any(
        e.name == FOLDER_NAMES.settings_file and e.is_file() for e in entries
    )

    projects = []
    for entry in entries:
        if entry.is_dir():
            project = parse_project(entry)
            if project is not None:
                projects.append(project)
    projects.sort(key=lambda p: p.index)

    errors = []
    if not has_settings:
        errors.append(f"Missing {FOLDER_NAMES.settings_file} file")
    if not projects:
        errors.append("No valid project folders found")

    structure = MultigrainStructure(
        root_path=multigrain_path,
        projects=projects,
        global_wavs=list_wav_files(multigrain_path / FOLDER_NAMES.wavs),
        recordings=list_wav_files(multigrain_path / FOLDER_NAMES.recs),
        has_settings=has_settings,
        errors=errors,
    )
    logger.debug(
        "Parsed %s: %d projects, %d global wavs, %d recordings",
        multigrain_path,
        len(projects),
        len(structure.global_wavs),
        len(structure.recordings),
    )
    return StructureValidation(valid=not errors, errors=errors, structure=structure)
