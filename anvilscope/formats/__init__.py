"""
AnvilScope Formats Module
=========================

Readers for the Anvil region file container:

- binary: big-endian field helpers
- header: location and timestamp tables
- payload: per-chunk framing, zlib and NBT decode
- anvil: parallel decode of a whole region
"""

from anvilscope.formats.binary import read_u8, read_u24, read_u32
from anvilscope.formats.header import (
    ChunkLocationEntry,
    parse_location_table,
    slot_index,
    SECTOR_SIZE,
    SLOT_COUNT,
    HEADER_SIZE,
)
from anvilscope.formats.payload import decode_chunk, decompress_payload, COMPRESSION_ZLIB
from anvilscope.formats.anvil import AnvilRegion, decode_region, read_region_file


__all__ = [
    'read_u8',
    'read_u24',
    'read_u32',
    'ChunkLocationEntry',
    'parse_location_table',
    'slot_index',
    'SECTOR_SIZE',
    'SLOT_COUNT',
    'HEADER_SIZE',
    'decode_chunk',
    'decompress_payload',
    'COMPRESSION_ZLIB',
    'AnvilRegion',
    'decode_region',
    'read_region_file',
]
