"""Cross-platform raw file descriptor helpers.

Provides the ``os.open`` flags for each open mode and ``flush_fd`` which
pushes written data to the storage device on every platform. On macOS
``fsync`` only reaches the drive cache, so ``F_FULLFSYNC`` is used instead.
"""

import os
import sys

from diskfs.common.constants import FileOpenMode

# Windows opens descriptors in text mode unless O_BINARY is given
O_BINARY = getattr(os, "O_BINARY", 0)

# READ never creates; WRITE creates if missing and keeps existing bytes
RAW_OPEN_FLAGS = {
    FileOpenMode.READ: os.O_RDONLY | O_BINARY,
    FileOpenMode.WRITE: os.O_WRONLY | os.O_CREAT | O_BINARY,
}

RAW_CREATE_PERMISSIONS = 0o644

if sys.platform == "darwin":
    import fcntl

    def flush_fd(fd: int) -> None:
        """Flush *fd* through the drive cache."""
        fcntl.fcntl(fd, fcntl.F_FULLFSYNC)

else:
    flush_fd = os.fsync
