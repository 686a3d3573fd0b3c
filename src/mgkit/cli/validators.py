from pathlib import Path


def validate_directory(type_: object, path: Path | None) -> None:
    if path is None:
        return

    if not path.is_dir():
        raise ValueError(f"Not a directory: {path}")


def validate_existing_files(type_: object, paths: list[Path] | None) -> None:
    """Validate that every path is an existing file."""
    if not paths:
        return

    missing = [str(p) for p in paths if not p.is_file()]
    if missing:
        raise ValueError(f"File not found: {', '.join(missing)}")
