"""
Big-Endian Field Reader
=======================

Fixed-width unsigned integer readers for region file headers.
All multi-byte values in the Anvil format are big-endian.
"""

import struct
from typing import Union

from anvilscope.errors import FieldBoundsError


Buffer = Union[bytes, bytearray, memoryview]

_U32 = struct.Struct('>I')


def _check_bounds(buf: Buffer, offset: int, width: int):
    if offset < 0 or offset + width > len(buf):
        raise FieldBoundsError(
            f"cannot read {width} bytes at offset {offset} "
            f"from a buffer of {len(buf)} bytes")


def read_u32(buf: Buffer, offset: int) -> int:
    """Read a 4-byte big-endian unsigned integer at ``offset``."""
    _check_bounds(buf, offset, 4)
    return _U32.unpack_from(buf, offset)[0]


def read_u24(buf: Buffer, offset: int) -> int:
    """Read a 3-byte big-endian unsigned integer at ``offset``."""
    _check_bounds(buf, offset, 3)
    return (buf[offset] << 16) | (buf[offset + 1] << 8) | buf[offset + 2]


def read_u8(buf: Buffer, offset: int) -> int:
    """Read a single unsigned byte at ``offset``."""
    _check_bounds(buf, offset, 1)
    return buf[offset]
