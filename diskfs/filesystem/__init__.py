from diskfs.filesystem.disk import DiskFilesystem
from diskfs.filesystem.interface import Filesystem

__all__ = ["Filesystem", "DiskFilesystem"]
