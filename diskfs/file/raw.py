"""Raw-handle file backend built on unbuffered OS file descriptors."""

import logging
import os
from typing import Any, Optional

from diskfs.common.constants import U32_MAX, FileOpenMode
from diskfs.common.errors import FlushFailed, OpenFailed, ReadFailed, SeekFailed, ShortWriteError, WriteFailed, ensure
from diskfs.common.fileutil import RAW_CREATE_PERMISSIONS, RAW_OPEN_FLAGS, flush_fd
from diskfs.file.base import Buffer, File

logger = logging.getLogger("diskfs.file")


class RawHandleFile(File):
    """File backend over a raw descriptor from ``os.open``.

    - WRITE creates the file if missing; an existing file is opened in place
      without truncation, so bytes past the last write survive.
    - The descriptor has no end-of-file query. ``end_of_file`` is a flag set
      by ``read``: true iff the latest read succeeded and returned zero bytes.
      Seeking never touches it.
    - ``flush`` syncs the descriptor to the storage device.
    """

    kind = "raw"

    def __init__(self) -> None:
        super().__init__()
        self._fd: Optional[int] = None
        self._eof = False

    def open(self, path: str, mode: FileOpenMode) -> None:
        ensure(path is not None, "Path must be != None")
        ensure(not self.is_open(), f"File already open, path = '{self.path}'")
        mode = self._check_mode(mode)
        try:
            self._fd = os.open(path, RAW_OPEN_FLAGS[mode], RAW_CREATE_PERMISSIONS)
        except OSError as e:
            raise OpenFailed.from_oserror("open", e, path) from e
        self.path = path
        self.mode = mode
        self._eof = False
        logger.debug("Opened '%s' for %s (%s)", path, mode.value, self.kind)

    def close(self) -> None:
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        self._eof = False
        try:
            os.close(fd)
        except OSError as e:
            logger.warning("close: errno = %s, path = '%s'", e.errno, self.path)
        logger.debug("Closed '%s'", self.path)

    def is_open(self) -> bool:
        return self._fd is not None

    def _descriptor(self) -> int:
        self._check_open()
        return self._fd  # type: ignore[return-value]

    def size(self) -> int:
        fd = self._descriptor()
        try:
            size = os.fstat(fd).st_size
        except OSError as e:
            raise SeekFailed.from_oserror("fstat", e, self.path) from e
        return self._check_result(size, "fstat")

    def position(self) -> int:
        return self._lseek(0, os.SEEK_CUR)

    def end_of_file(self) -> bool:
        self._check_open()
        return self._eof

    def _lseek(self, offset: int, whence: int) -> int:
        fd = self._descriptor()
        try:
            pos = os.lseek(fd, offset, whence)
        except OSError as e:
            raise SeekFailed.from_oserror("lseek", e, self.path) from e
        return self._check_result(pos, "lseek")

    def seek(self, position: int) -> None:
        self._check_u32(position, "position")
        self._lseek(position, os.SEEK_SET)

    def seek_to_end(self) -> None:
        self._lseek(0, os.SEEK_END)

    def skip(self, count: int) -> None:
        self._check_u32(count, "count")
        ensure(self.position() + count <= U32_MAX, f"skip({count}) would move past offset {U32_MAX}")
        self._lseek(count, os.SEEK_CUR)

    def read(self, buffer: Any, size: Optional[int] = None) -> int:
        fd = self._descriptor()
        view = self._writable_view(buffer, size)
        try:
            data = os.read(fd, view.nbytes)
        except OSError as e:
            self._eof = False
            raise ReadFailed.from_oserror("read", e, self.path) from e
        n = len(data)
        view[:n] = data
        self._eof = n == 0
        return n

    def write(self, data: Buffer, size: Optional[int] = None) -> int:
        fd = self._descriptor()
        view = self._readable_view(data, size)
        try:
            n = os.write(fd, view)
        except OSError as e:
            raise WriteFailed.from_oserror("write", e, self.path) from e
        if n != view.nbytes:
            raise ShortWriteError(self.path, view.nbytes, n)
        return n

    def flush(self) -> None:
        fd = self._descriptor()
        try:
            flush_fd(fd)
        except OSError as e:
            raise FlushFailed.from_oserror("fsync", e, self.path) from e
