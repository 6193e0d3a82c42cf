"""
AnvilScope - Minecraft Region File Reader
=========================================

Reads Minecraft Anvil region files (.mca) and exposes the decoded chunk
structures:

- Location and timestamp tables
- Per-chunk zlib payloads decoded in parallel
- Chunk sections with block state and biome palettes and light arrays

Uses nbtlib for NBT parsing and numpy for the raw arrays.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from anvilscope.formats import AnvilRegion, decode_region, read_region_file
from anvilscope.core import Chunk, Section, BlockStates, Biomes, PaletteBlock, RegionFile
from anvilscope.config import ReaderConfig
from anvilscope.errors import RegionFormatError

__all__ = [
    'AnvilRegion',
    'decode_region',
    'read_region_file',
    'Chunk',
    'Section',
    'BlockStates',
    'Biomes',
    'PaletteBlock',
    'RegionFile',
    'ReaderConfig',
    'RegionFormatError',
    '__version__',
]
