"""
VP container layout.

All integers are little-endian::

    header   magic(4s) version(i) total_size(i) entry_count(i)
    payload  file contents, TOC order
    toc      entry_count x [offset(i) size(i) name(32s) timestamp(i)]
"""
import struct

DEFAULT_MAGIC = b"VPVP"
DEFAULT_VERSION = 2

HEADER = struct.Struct("<4siii")
HEADER_LENGTH = HEADER.size

NAME_FIELD_WIDTH = 32
# one byte is always reserved for the terminating null
MAX_NAME_BYTES = NAME_FIELD_WIDTH - 1
TOC_RECORD = struct.Struct(f"<ii{NAME_FIELD_WIDTH}si")
TOC_RECORD_LENGTH = TOC_RECORD.size

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

DEFAULT_MAX_PAYLOAD_BYTES = 1_000_000_000
# payload + header must still fit the header's total_size field
MAX_PAYLOAD_LIMIT = INT32_MAX - HEADER_LENGTH


def fits_int32(value: int) -> bool:
    return INT32_MIN <= value <= INT32_MAX


def encode_name(name: str) -> bytes:
    """UTF-8 bytes of *name*, without the null terminator."""
    return name.encode("utf-8", "surrogateescape")
