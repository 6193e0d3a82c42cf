"""
RegionFile - Decoded Region Container
=====================================

Fixed 32x32 grid of chunk slots. Slot ``i`` holds the chunk at region-local
coordinates ``(i % 32, i // 32)`` or ``None`` when the chunk was never
generated or could not be decoded.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from anvilscope.core.chunk import Chunk
from anvilscope.errors import RegionFormatError
from anvilscope.formats.header import SLOT_COUNT, REGION_WIDTH, slot_index


class RegionFile:
    """
    The decoded contents of one region file.

    Attributes:
        chunks: 1024 slots of ``Optional[Chunk]``
        errors: Decode failure for each slot that was present but unreadable
        region_x, region_z: Region coordinates, when known from the file name
    """

    def __init__(self, chunks: Sequence[Optional[Chunk]],
                 errors: Optional[Dict[int, RegionFormatError]] = None,
                 region_x: Optional[int] = None,
                 region_z: Optional[int] = None):
        if len(chunks) != SLOT_COUNT:
            raise ValueError(f"a region holds {SLOT_COUNT} chunk slots, got {len(chunks)}")

        self.chunks: List[Optional[Chunk]] = list(chunks)
        self.errors: Dict[int, RegionFormatError] = dict(errors or {})
        self.region_x = region_x
        self.region_z = region_z

    def __len__(self) -> int:
        return SLOT_COUNT

    def __getitem__(self, index: int) -> Optional[Chunk]:
        return self.chunks[index]

    def __iter__(self) -> Iterator[Optional[Chunk]]:
        return iter(self.chunks)

    def __eq__(self, other):
        if not isinstance(other, RegionFile):
            return NotImplemented
        return self.chunks == other.chunks

    def __repr__(self):
        return (f"RegionFile(region=({self.region_x}, {self.region_z}), "
                f"chunks={self.chunk_count}, errors={len(self.errors)})")

    def get_chunk(self, x: int, z: int) -> Optional[Chunk]:
        """
        Get a chunk by coordinates.

        Args:
            x: Chunk X, region-local (0-31) or world chunk coordinate
            z: Chunk Z, region-local (0-31) or world chunk coordinate
        """
        return self.chunks[slot_index(x, z)]

    @property
    def chunk_count(self) -> int:
        return sum(1 for chunk in self.chunks if chunk is not None)

    @property
    def present_indices(self) -> List[int]:
        return [i for i, chunk in enumerate(self.chunks) if chunk is not None]

    def iter_chunks(self) -> Iterator[Tuple[int, Chunk]]:
        """Yield ``(index, chunk)`` for every decoded slot in slot order."""
        for i, chunk in enumerate(self.chunks):
            if chunk is not None:
                yield i, chunk

    @staticmethod
    def local_coords(index: int) -> Tuple[int, int]:
        """Region-local ``(x, z)`` of a slot index."""
        return index % REGION_WIDTH, index // REGION_WIDTH
