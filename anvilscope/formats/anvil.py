"""
Anvil Region Reader
===================

Decodes all 1024 chunk slots of a region file (.mca) in parallel.

Every slot is decoded independently from the same read-only buffer, so the
work is spread over a thread pool and gathered back in slot order. A slot
that fails to decode becomes ``None``; only failures that affect the whole
file (unreadable file, truncated header) are raised.

zlib releases the GIL while inflating, but the NBT parse and mapping run
in Python and hold it, so threads mostly overlap the decompression step.
"""

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Tuple, Union

from anvilscope.config import ReaderConfig
from anvilscope.core.chunk import Chunk
from anvilscope.core.region import RegionFile
from anvilscope.errors import RegionFormatError
from anvilscope.formats.binary import Buffer
from anvilscope.formats.header import SLOT_COUNT, ChunkLocationEntry, parse_location_table
from anvilscope.formats.payload import decode_chunk


logger = logging.getLogger(__name__)

REGION_NAME_PATTERN = re.compile(r'^r\.(-?\d+)\.(-?\d+)\.mca$')


def region_coords_from_path(filepath: Union[str, Path]) -> Optional[Tuple[int, int]]:
    """Get ``(region_x, region_z)`` from a file named ``r.<x>.<z>.mca``."""
    match = REGION_NAME_PATTERN.match(Path(filepath).name)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def decode_region(data: Buffer, config: Optional[ReaderConfig] = None,
                  region_x: Optional[int] = None,
                  region_z: Optional[int] = None) -> RegionFile:
    """
    Decode every chunk slot of a region file.

    Args:
        data: Contents of the whole region file
        config: Reader settings
        region_x, region_z: Region coordinates to record on the result

    Returns:
        RegionFile with exactly 1024 slots in file order

    Raises:
        RegionHeaderError: If the data is too short to hold the header
    """
    config = config or ReaderConfig()
    data = bytes(data)
    entries = parse_location_table(data)

    def decode_slot(entry: Optional[ChunkLocationEntry]
                    ) -> Tuple[Optional[Chunk], Optional[RegionFormatError]]:
        if entry is None:
            return None, None
        try:
            return decode_chunk(data, entry, config), None
        except RegionFormatError as e:
            e.index = entry.index
            if config.log_failures:
                logger.warning("Skipping chunk (%d, %d): %s", entry.x, entry.z, e.msg)
            return None, e

    # Executor.map yields results in submission order
    with ThreadPoolExecutor(max_workers=config.max_workers,
                            thread_name_prefix='anvil-decode') as executor:
        results = list(executor.map(decode_slot, entries))

    chunks = [chunk for chunk, _ in results]
    errors = {i: error for i, (_, error) in enumerate(results) if error is not None}

    region = RegionFile(chunks, errors=errors, region_x=region_x, region_z=region_z)
    logger.debug("Decoded %d of %d slots (%d failed)",
                 region.chunk_count, SLOT_COUNT, len(errors))
    return region


def read_region_file(filepath: Union[str, Path],
                     config: Optional[ReaderConfig] = None) -> RegionFile:
    """
    Read and decode a region file from disk.

    Raises:
        OSError: If the file cannot be read
        RegionHeaderError: If the file is too short to hold the header
    """
    with open(filepath, 'rb') as f:
        data = f.read()

    coords = region_coords_from_path(filepath)
    region_x, region_z = coords if coords is not None else (None, None)
    logger.debug("Read %d bytes from %s", len(data), filepath)
    return decode_region(data, config, region_x=region_x, region_z=region_z)


class AnvilRegion:
    """
    Handler for Minecraft Anvil region files (.mca).

    Reads the location table and decodes every generated chunk.
    """

    EXTENSION = '.mca'

    @classmethod
    def load(cls, filepath: str, config: Optional[ReaderConfig] = None) -> RegionFile:
        """
        Load a region file.

        Args:
            filepath: Path to the region file
            config: Optional reader settings

        Returns:
            Decoded RegionFile
        """
        return read_region_file(filepath, config)

    @classmethod
    def decode(cls, data: Buffer, config: Optional[ReaderConfig] = None) -> RegionFile:
        """Decode a region file already held in memory."""
        return decode_region(data, config)

    @classmethod
    def can_load(cls, filepath: str) -> bool:
        return Path(filepath).suffix.lower() == cls.EXTENSION
