"""Path utilities for POSIX and Windows path syntax.

Both flavors are always importable; ``is_absolute``, ``join`` and
``SEPARATOR`` at module level are bound to the running platform.
No ``.``/``..`` normalization is performed.
"""

import sys

POSIX_SEPARATOR = "/"
WINDOWS_SEPARATOR = "\\"


def is_absolute_posix(path: str) -> bool:
    """Return True if *path* starts at the filesystem root."""
    return path.startswith(POSIX_SEPARATOR)


def is_absolute_windows(path: str) -> bool:
    """Return True for ``C:\\...``, ``C:/...`` and UNC ``\\\\server\\...`` paths."""
    if path.startswith(WINDOWS_SEPARATOR * 2):
        return True
    return len(path) > 2 and path[0].isalpha() and path[1] == ":" and path[2] in ("\\", "/")


def _join(separators: str, separator: str, prefix: str, path: str) -> str:
    if not prefix:
        return path
    if prefix.endswith(tuple(separators)):
        return prefix + path
    return prefix + separator + path


def join_posix(prefix: str, path: str) -> str:
    """Join *prefix* and *path* with a single ``/``."""
    return _join(POSIX_SEPARATOR, POSIX_SEPARATOR, prefix, path)


def join_windows(prefix: str, path: str) -> str:
    """Join *prefix* and *path* with a single ``\\``."""
    return _join("\\/", WINDOWS_SEPARATOR, prefix, path)


if sys.platform == "win32":
    SEPARATOR = WINDOWS_SEPARATOR
    is_absolute = is_absolute_windows
    join = join_windows
else:
    SEPARATOR = POSIX_SEPARATOR
    is_absolute = is_absolute_posix
    join = join_posix
