"""Constants for diskfs."""

from enum import Enum


class FileOpenMode(str, Enum):
    """Modes a file handle can be opened with."""

    READ = "read"
    WRITE = "write"


class BackendName(str, Enum):
    """File handle backends selectable by name."""

    AUTO = "auto"
    STREAM = "stream"
    RAW = "raw"


# Sizes and offsets are unsigned 32-bit
U32_MAX = 0xFFFFFFFF

# Config discovery
CONFIG_DIR_NAME = ".diskfs"
CONFIG_ENV_VAR = "DISKFS_CONFIG"
ENV_PREFIX = "DISKFS_"

# Logger namespace
LOGGER_NAME = "diskfs"
LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

# Copy buffer used by the CLI put/get commands: 64KB
COPY_CHUNK_SIZE = 64 * 1024
