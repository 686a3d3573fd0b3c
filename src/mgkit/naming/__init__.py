"""File naming helpers for imports.

Example Usage
-------------
>>> from mgkit.naming import detect_numbering_scheme, apply_number_prefix
>>> scheme = detect_numbering_scheme(["01_kick.wav", "02_snare.wav"])
>>> apply_number_prefix("hat.wav", scheme.next_number, scheme)
'03_hat.wav'
"""

from mgkit.naming.conflicts import resolve_conflict, sanitize_filename
from mgkit.naming.numbering import (
    DEFAULT_SCHEME,
    NumberingScheme,
    apply_number_prefix,
    detect_numbering_scheme,
    extract_prefix_number,
    generate_numbered_filenames,
    has_number_prefix,
    remove_number_prefix,
    scheme_with_override,
)

__all__ = [
    # Conflicts
    "resolve_conflict",
    "sanitize_filename",
    # Numbering
    "NumberingScheme",
    "DEFAULT_SCHEME",
    "detect_numbering_scheme",
    "scheme_with_override",
    "apply_number_prefix",
    "remove_number_prefix",
    "has_number_prefix",
    "extract_prefix_number",
    "generate_numbered_filenames",
]
