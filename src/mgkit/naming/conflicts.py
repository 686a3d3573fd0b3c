"""Collision-free file names for imports into a card folder."""

import os
import re
import time
from collections.abc import Collection
from pathlib import Path

from mgkit.types import PathLike

# Characters Windows rejects in file names, plus ASCII control characters
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

MAX_CONFLICT_SUFFIX = 999


def sanitize_filename(name: str) -> str:
    """Replace characters that are invalid on FAT/Windows file systems with "_".

    >>> sanitize_filename('kick:01?.wav')
    'kick_01_.wav'
    """
    return _INVALID_FILENAME_CHARS.sub("_", name)


def resolve_conflict(
    target_dir: PathLike, desired_name: str, reserved: Collection[str] = ()
) -> str:
    """Return a file name in target_dir that does not exist yet.

    The desired name is returned unchanged when it is free. Otherwise numeric
    suffixes are probed in order (``kick_1.wav``, ``kick_2.wav``, ...) so the
    first gap is reused. After 999 taken suffixes a millisecond timestamp is
    used instead.

    Names in ``reserved`` count as taken, which lets a whole batch be planned
    before anything is written. Existence is only checked, never reserved on
    disk; callers importing into the same directory must do so one file at a
    time.
    """
    target_dir = Path(target_dir)

    def taken(name: str) -> bool:
        return name in reserved or (target_dir / name).exists()

    if not taken(desired_name):
        return desired_name

    base, ext = os.path.splitext(desired_name)
    for counter in range(1, MAX_CONFLICT_SUFFIX + 1):
        candidate = f"{base}_{counter}{ext}"
        if not taken(candidate):
            return candidate

    return f"{base}_{int(time.time() * 1000)}{ext}"
