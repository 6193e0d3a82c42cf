"""
Chunk Data Model
================

Typed view of the NBT stored in each region file slot.

Only the 21w43a+ chunk layout (DataVersion 2844 and newer, the one without
the ``Level`` wrapper) is modelled:

    Chunk
    └── sections[]          one per 16x16x16 cube, keyed by Y
        ├── block_states    palette of PaletteBlock + packed indices
        ├── biomes          palette of biome ids + packed indices
        ├── BlockLight      optional 2048-byte nibble array
        └── SkyLight        optional 2048-byte nibble array

Packed index arrays are kept as raw 64-bit words and never unpacked.
Block properties outside KNOWN_BLOCK_PROPERTIES are dropped on decode.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import nbtlib
import numpy as np

from anvilscope.errors import ChunkSchemaError


# Chunk NBT moved out of the "Level" compound in this snapshot
VERSION_21w43a = 2844

LIGHT_ARRAY_SIZE = 2048

KNOWN_BLOCK_PROPERTIES = (
    'level',
    'snowy',
    'distance',
    'persistent',
    'waterlogged',
    'axis',
)


def _get(tag, key: str, path: str, required: bool = True):
    if not isinstance(tag, dict):
        raise ChunkSchemaError("expected a compound", path=path)
    if key not in tag:
        if required:
            raise ChunkSchemaError(f"missing required tag '{key}'", path=path)
        return None
    return tag[key]


def _unpack(value):
    # str() of an nbtlib tag is its SNBT form
    return value.unpack() if isinstance(value, nbtlib.tag.Base) else value


def _as_int(value, path: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise ChunkSchemaError(f"expected an integer tag, got {type(value).__name__}", path=path)
    return int(_unpack(value))


def _as_str(value, path: str) -> str:
    if not isinstance(value, str):
        raise ChunkSchemaError(f"expected a string tag, got {type(value).__name__}", path=path)
    return _unpack(value)


def _as_list(value, path: str) -> list:
    if not isinstance(value, list):
        raise ChunkSchemaError(f"expected a list tag, got {type(value).__name__}", path=path)
    return value


def _as_long_array(value, path: str) -> Optional[np.ndarray]:
    if value is None:
        return None
    if not isinstance(value, nbtlib.LongArray):
        raise ChunkSchemaError(f"expected a long array, got {type(value).__name__}", path=path)
    return np.array(value, dtype=np.int64)


def _as_light(value, path: str) -> Optional[np.ndarray]:
    if value is None:
        return None
    if not isinstance(value, nbtlib.ByteArray):
        raise ChunkSchemaError(f"expected a byte array, got {type(value).__name__}", path=path)
    if len(value) != LIGHT_ARRAY_SIZE:
        raise ChunkSchemaError(
            f"light array must be {LIGHT_ARRAY_SIZE} bytes, got {len(value)}", path=path)
    return np.array(value, dtype=np.int8).view(np.uint8)


def _arrays_equal(a: Optional[np.ndarray], b: Optional[np.ndarray]) -> bool:
    if a is None or b is None:
        return a is None and b is None
    return np.array_equal(a, b)


@dataclass
class PaletteBlock:
    """A block state in a section palette."""
    name: str
    properties: Optional[Dict[str, str]] = None

    @classmethod
    def from_nbt(cls, tag, path: str = 'palette') -> 'PaletteBlock':
        name = _as_str(_get(tag, 'Name', path), f"{path}.Name")

        raw = _get(tag, 'Properties', path, required=False)
        properties = None
        if raw is not None:
            if not isinstance(raw, dict):
                raise ChunkSchemaError("expected a compound", path=f"{path}.Properties")
            properties = {
                key: _as_str(raw[key], f"{path}.Properties.{key}")
                for key in KNOWN_BLOCK_PROPERTIES
                if key in raw
            }

        return cls(name=name, properties=properties)

    def to_dict(self) -> Dict[str, Any]:
        result = {'name': self.name}
        if self.properties is not None:
            result['properties'] = dict(self.properties)
        return result


@dataclass(eq=False)
class BlockStates:
    """Block state palette and packed indices for one section."""
    palette: List[PaletteBlock] = field(default_factory=list)
    data: Optional[np.ndarray] = None

    @classmethod
    def from_nbt(cls, tag, path: str = 'block_states') -> 'BlockStates':
        entries = _as_list(_get(tag, 'palette', path), f"{path}.palette")
        palette = [
            PaletteBlock.from_nbt(entry, f"{path}.palette[{i}]")
            for i, entry in enumerate(entries)
        ]
        data = _as_long_array(_get(tag, 'data', path, required=False), f"{path}.data")
        return cls(palette=palette, data=data)

    @property
    def is_uniform(self) -> bool:
        """True when the whole section is a single block state."""
        return len(self.palette) == 1

    def __eq__(self, other):
        if not isinstance(other, BlockStates):
            return NotImplemented
        return self.palette == other.palette and _arrays_equal(self.data, other.data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'palette': [block.to_dict() for block in self.palette],
            'data_length': None if self.data is None else len(self.data),
        }


@dataclass(eq=False)
class Biomes:
    """Biome palette and packed indices for one section."""
    palette: List[str] = field(default_factory=list)
    data: Optional[np.ndarray] = None

    @classmethod
    def from_nbt(cls, tag, path: str = 'biomes') -> 'Biomes':
        entries = _as_list(_get(tag, 'palette', path), f"{path}.palette")
        palette = [_as_str(entry, f"{path}.palette[{i}]") for i, entry in enumerate(entries)]
        data = _as_long_array(_get(tag, 'data', path, required=False), f"{path}.data")
        return cls(palette=palette, data=data)

    @property
    def is_uniform(self) -> bool:
        return len(self.palette) == 1

    def __eq__(self, other):
        if not isinstance(other, Biomes):
            return NotImplemented
        return self.palette == other.palette and _arrays_equal(self.data, other.data)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'palette': list(self.palette),
            'data_length': None if self.data is None else len(self.data),
        }


@dataclass(eq=False)
class Section:
    """A 16x16x16 cube of a chunk."""
    y: int
    block_states: BlockStates
    biomes: Biomes
    block_light: Optional[np.ndarray] = None
    sky_light: Optional[np.ndarray] = None

    @classmethod
    def from_nbt(cls, tag, path: str = 'section') -> 'Section':
        y = _as_int(_get(tag, 'Y', path), f"{path}.Y")
        if not -32768 <= y <= 32767:
            raise ChunkSchemaError(f"section Y out of range: {y}", path=f"{path}.Y")

        return cls(
            y=y,
            block_states=BlockStates.from_nbt(
                _get(tag, 'block_states', path), f"{path}.block_states"),
            biomes=Biomes.from_nbt(_get(tag, 'biomes', path), f"{path}.biomes"),
            block_light=_as_light(
                _get(tag, 'BlockLight', path, required=False), f"{path}.BlockLight"),
            sky_light=_as_light(
                _get(tag, 'SkyLight', path, required=False), f"{path}.SkyLight"),
        )

    def __eq__(self, other):
        if not isinstance(other, Section):
            return NotImplemented
        return (self.y == other.y
                and self.block_states == other.block_states
                and self.biomes == other.biomes
                and _arrays_equal(self.block_light, other.block_light)
                and _arrays_equal(self.sky_light, other.sky_light))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'y': self.y,
            'block_states': self.block_states.to_dict(),
            'biomes': self.biomes.to_dict(),
            'block_light': self.block_light is not None,
            'sky_light': self.sky_light is not None,
        }


@dataclass
class Chunk:
    """
    A decoded chunk.

    ``sections`` keeps file order, which is not guaranteed to be sorted by Y.
    Use ``get_section`` to look a section up by its vertical index.
    """
    data_version: int
    chunk_x: int
    chunk_z: int
    chunk_y: Optional[int]
    status: str
    last_update: int
    sections: List[Section] = field(default_factory=list)

    @classmethod
    def from_nbt(cls, tag) -> 'Chunk':
        """
        Map a parsed NBT root compound onto a Chunk.

        Args:
            tag: Root compound as returned by ``nbtlib.File.parse``

        Raises:
            ChunkSchemaError: If a required tag is missing or has the wrong type
        """
        if isinstance(tag, dict) and 'Level' in tag and 'sections' not in tag:
            version = _unpack(tag.get('DataVersion'))
            raise ChunkSchemaError(
                f"chunk uses the pre-21w43a layout (DataVersion {version}), "
                f"need {VERSION_21w43a} or newer")

        path = 'chunk'
        y_pos = _get(tag, 'yPos', path, required=False)
        sections = _as_list(_get(tag, 'sections', path), 'sections')

        return cls(
            data_version=_as_int(_get(tag, 'DataVersion', path), 'DataVersion'),
            chunk_x=_as_int(_get(tag, 'xPos', path), 'xPos'),
            chunk_z=_as_int(_get(tag, 'zPos', path), 'zPos'),
            chunk_y=None if y_pos is None else _as_int(y_pos, 'yPos'),
            status=_as_str(_get(tag, 'Status', path), 'Status'),
            last_update=_as_int(_get(tag, 'LastUpdate', path), 'LastUpdate'),
            sections=[
                Section.from_nbt(section, f"sections[{i}]")
                for i, section in enumerate(sections)
            ],
        )

    def get_section(self, y: int) -> Optional[Section]:
        """Get the section at vertical index ``y``, or None."""
        for section in self.sections:
            if section.y == y:
                return section
        return None

    @property
    def section_ys(self) -> List[int]:
        """Vertical indices of all sections, sorted."""
        return sorted(section.y for section in self.sections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'data_version': self.data_version,
            'x': self.chunk_x,
            'y': self.chunk_y,
            'z': self.chunk_z,
            'status': self.status,
            'last_update': self.last_update,
            'sections': [section.to_dict() for section in self.sections],
        }
