"""
AnvilScope Core Module
======================

Data structures for decoded region files and chunks.
"""

from anvilscope.core.chunk import Chunk, Section, BlockStates, Biomes, PaletteBlock
from anvilscope.core.region import RegionFile

__all__ = ['Chunk', 'Section', 'BlockStates', 'Biomes', 'PaletteBlock', 'RegionFile']
