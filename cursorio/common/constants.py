"""Constants for cursorio."""

# Byte orders, spelled the way int.from_bytes expects them
BIG_ENDIAN = "big"
LITTLE_ENDIAN = "little"

# struct prefixes per byte order
STRUCT_ORDER = {
    BIG_ENDIAN: ">",
    LITTLE_ENDIAN: "<",
}

# Integer widths handled by the generic codec
MIN_INT_SIZE = 1
MAX_INT_SIZE = 8
INT64_SIZE = 8

# IEEE-754 widths
FLOAT_SIZE = 4  # single precision
DOUBLE_SIZE = 8  # double precision

# Open modes (Node-style flag strings)
DEFAULT_READ_FLAGS = "r"
DEFAULT_WRITE_FLAGS = "w"

# Permission bits used when a writer creates the file
DEFAULT_FILE_MODE = 0o666

# Text defaults
DEFAULT_ENCODING = "utf-8"
DEFAULT_STRING_ERRORS = "strict"

# Shared I/O pool size
DEFAULT_IO_WORKERS = 8

# Environment variable naming an explicit config file
CONFIG_ENV_VAR = "CURSORIO_CONFIG"
