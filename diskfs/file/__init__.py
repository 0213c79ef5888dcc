from diskfs.file.backends import default_backend, select_backend
from diskfs.file.base import File
from diskfs.file.raw import RawHandleFile
from diskfs.file.stream import BufferedStreamFile

__all__ = [
    "File",
    "BufferedStreamFile",
    "RawHandleFile",
    "default_backend",
    "select_backend",
]
