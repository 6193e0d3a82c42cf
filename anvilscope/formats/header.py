"""
Region Header
=============

The first 8 KiB of a region file hold two tables of 1024 entries each:

- Locations (bytes 0-4095): 3-byte sector offset, 1-byte sector count
- Timestamps (bytes 4096-8191): 4-byte Unix time of the last save

Slot ``i`` describes chunk ``(i % 32, i // 32)`` of the region.
"""

from dataclasses import dataclass
from typing import List, Optional

from anvilscope.errors import RegionHeaderError
from anvilscope.formats.binary import Buffer, read_u8, read_u24, read_u32


SECTOR_SIZE = 4096
REGION_WIDTH = 32
SLOT_COUNT = REGION_WIDTH * REGION_WIDTH
HEADER_SIZE = 2 * SECTOR_SIZE


def slot_index(x: int, z: int) -> int:
    """
    Get the slot index for a chunk.

    World chunk coordinates are accepted and wrapped into the region.

    Args:
        x: Chunk X coordinate
        z: Chunk Z coordinate

    Returns:
        Index into the location table (0-1023)
    """
    return (x % REGION_WIDTH) + (z % REGION_WIDTH) * REGION_WIDTH


@dataclass(frozen=True)
class ChunkLocationEntry:
    """Location of one generated chunk inside the region file."""
    index: int
    sector_offset: int
    sector_count: int
    timestamp: int = 0

    @property
    def x(self) -> int:
        return self.index % REGION_WIDTH

    @property
    def z(self) -> int:
        return self.index // REGION_WIDTH

    @property
    def byte_offset(self) -> int:
        return self.sector_offset * SECTOR_SIZE

    @property
    def is_unloaded(self) -> bool:
        return self.sector_offset == 0 and self.sector_count == 0 and self.timestamp == 0


def read_location_entry(buf: Buffer, index: int) -> Optional[ChunkLocationEntry]:
    """Read slot ``index`` of the header, or ``None`` for an unloaded slot."""
    if not 0 <= index < SLOT_COUNT:
        raise IndexError(f"slot index out of range: {index}")

    entry = ChunkLocationEntry(
        index=index,
        sector_offset=read_u24(buf, 4 * index),
        sector_count=read_u8(buf, 4 * index + 3),
        timestamp=read_u32(buf, SECTOR_SIZE + 4 * index),
    )
    if entry.is_unloaded:
        return None
    return entry


def parse_location_table(buf: Buffer) -> List[Optional[ChunkLocationEntry]]:
    """
    Parse the location and timestamp tables.

    Args:
        buf: Contents of the whole region file

    Returns:
        List of 1024 entries, ``None`` where the chunk was never generated

    Raises:
        RegionHeaderError: If the buffer is shorter than the 8 KiB header
    """
    if len(buf) < HEADER_SIZE:
        raise RegionHeaderError(
            f"the region file is {len(buf)} bytes, too small to have a header")

    return [read_location_entry(buf, i) for i in range(SLOT_COUNT)]
