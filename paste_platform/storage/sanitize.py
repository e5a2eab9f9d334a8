"""
Entry id sanitization.

An entry id is both the public URL segment and, for the filesystem backend,
the file name on disk. Every id a user can influence (custom URL, rename
target) goes through `sanitize_id` once, and the sanitized form becomes the
canonical id. Backends refuse ids that are not already canonical, so a raw
value like ``"../greet"`` can never be used to reach the entry stored as
``"greet"``.

Rules:
    - werkzeug's `secure_filename` drops path separators, ``..`` segments,
      NUL/control characters and non-ASCII, and joins words with ``_``
    - leftover leading/trailing ``.``/``_`` are stripped
    - Windows device names (CON, PRN, AUX, NUL, COM1-9, LPT1-9) get a ``_``
      prefix on every platform so a data directory stays portable
    - result is capped at MAX_ID_BYTES so ``<id>.json`` fits in a 255-byte
      file name
"""

import re

from werkzeug.utils import secure_filename

MAX_ID_BYTES = 250

_RESERVED_NAMES = re.compile(r"^(con|prn|aux|nul|com[0-9]|lpt[0-9])(\..*)?$", re.IGNORECASE)


def sanitize_id(raw: str) -> str:
    """
    Map a user-supplied id to its filesystem-safe canonical form.

    Returns:
        str: Sanitized id, or "" when nothing usable remains.

    Examples:
        >>> sanitize_id("greet")
        'greet'
        >>> sanitize_id("../../etc/passwd")
        'etc_passwd'
        >>> sanitize_id("..")
        ''
    """
    if not raw:
        return ""
    cleaned = secure_filename(raw.strip()).strip("._")
    if not cleaned:
        return ""
    if _RESERVED_NAMES.match(cleaned):
        cleaned = f"_{cleaned}"
    encoded = cleaned.encode("ascii")
    if len(encoded) > MAX_ID_BYTES:
        cleaned = encoded[:MAX_ID_BYTES].decode("ascii").rstrip("._")
    return cleaned


def is_canonical_id(value: str) -> bool:
    """True if `value` is non-empty and already in sanitized form."""
    return bool(value) and sanitize_id(value) == value
