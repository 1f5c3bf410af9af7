"""Scalar codecs shared by the reader and writer.

Every integer width goes through one two's-complement routine parameterized
by size, byte order and signedness; the fixed-width accessors on the handles
are thin wrappers over it.
"""

import struct

from cursorio.common.constants import (
    BIG_ENDIAN,
    DOUBLE_SIZE,
    FLOAT_SIZE,
    LITTLE_ENDIAN,
    MAX_INT_SIZE,
    MIN_INT_SIZE,
    STRUCT_ORDER,
)

_FLOAT_FORMATS = {
    FLOAT_SIZE: "f",
    DOUBLE_SIZE: "d",
}


def check_byteorder(byteorder: str) -> None:
    if byteorder not in (BIG_ENDIAN, LITTLE_ENDIAN):
        raise ValueError(f"byteorder must be {BIG_ENDIAN!r} or {LITTLE_ENDIAN!r}, got {byteorder!r}")


def check_int_size(size: int) -> None:
    """Reject integer widths the codec cannot handle."""
    if isinstance(size, bool) or not isinstance(size, int):
        raise TypeError(f"size must be an int, not {type(size).__name__}")
    if not MIN_INT_SIZE <= size <= MAX_INT_SIZE:
        raise ValueError(f"size must be between {MIN_INT_SIZE} and {MAX_INT_SIZE} bytes, got {size}")


def int_range(size: int, signed: bool) -> tuple[int, int]:
    """Inclusive (min, max) of a *size*-byte integer."""
    bits = size * 8
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def decode_int(data: bytes, byteorder: str, signed: bool) -> int:
    """Decode a two's-complement integer spanning all of *data*."""
    check_byteorder(byteorder)
    check_int_size(len(data))
    return int.from_bytes(data, byteorder, signed=signed)


def encode_int(value: int, size: int, byteorder: str, signed: bool) -> bytes:
    """Encode *value* as a *size*-byte two's-complement integer.

    Raises:
        ValueError: If *value* does not fit the requested width and signedness.
    """
    check_byteorder(byteorder)
    check_int_size(size)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"value must be an int, not {type(value).__name__}")
    low, high = int_range(size, signed)
    if not low <= value <= high:
        kind = "signed" if signed else "unsigned"
        raise ValueError(f"value {value} out of range for {size}-byte {kind} integer [{low}, {high}]")
    return value.to_bytes(size, byteorder, signed=signed)


def _float_format(size: int, byteorder: str) -> str:
    check_byteorder(byteorder)
    try:
        return STRUCT_ORDER[byteorder] + _FLOAT_FORMATS[size]
    except KeyError:
        raise ValueError(f"IEEE-754 size must be {FLOAT_SIZE} or {DOUBLE_SIZE} bytes, got {size}") from None


def decode_float(data: bytes, byteorder: str) -> float:
    """Decode a single (4 bytes) or double (8 bytes) precision float."""
    return struct.unpack(_float_format(len(data), byteorder), data)[0]  # type: ignore[no-any-return]


def encode_float(value: float, size: int, byteorder: str) -> bytes:
    """Encode *value* as a single or double precision float.

    Raises:
        ValueError: If a finite *value* overflows single precision.
    """
    try:
        return struct.pack(_float_format(size, byteorder), value)
    except OverflowError as exc:
        raise ValueError(f"value {value} out of range for {size}-byte float") from exc


def supports_int64() -> bool:
    """Whether the runtime can pack 64-bit integers without losing precision."""
    try:
        if struct.calcsize("=q") != 8:
            return False
        for fmt, value in (("=q", -(1 << 63)), ("=q", (1 << 63) - 1), ("=Q", (1 << 64) - 1)):
            if struct.unpack(fmt, struct.pack(fmt, value))[0] != value:
                return False
    except struct.error:
        return False
    return True
