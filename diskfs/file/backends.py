"""File handle backend selection."""

import sys
from typing import Union

from diskfs.common.constants import BackendName
from diskfs.file.base import File
from diskfs.file.raw import RawHandleFile
from diskfs.file.stream import BufferedStreamFile

BACKENDS: dict[BackendName, type[File]] = {
    BackendName.STREAM: BufferedStreamFile,
    BackendName.RAW: RawHandleFile,
}


def default_backend() -> type[File]:
    """Return the native backend of the running platform."""
    if sys.platform == "win32":
        return RawHandleFile
    return BufferedStreamFile


def select_backend(name: Union[str, BackendName] = BackendName.AUTO) -> type[File]:
    """Map a backend name to its File class.

    Args:
        name: ``"stream"``, ``"raw"`` or ``"auto"`` (platform default)

    Raises:
        ValueError: Unknown backend name
    """
    try:
        backend = BackendName(name)
    except ValueError:
        raise ValueError(f"Unknown file backend: {name}") from None
    if backend == BackendName.AUTO:
        return default_backend()
    return BACKENDS[backend]
