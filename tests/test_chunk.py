"""Tests for mapping chunk NBT onto the data model."""

import numpy as np
import pytest
from nbtlib import ByteArray, Compound, Int, Short, String

from anvilscope.core.chunk import (
    KNOWN_BLOCK_PROPERTIES,
    Biomes,
    BlockStates,
    Chunk,
    PaletteBlock,
    Section,
)
from anvilscope.errors import ChunkSchemaError
from tests.conftest import make_chunk_nbt, make_section


class TestPaletteBlock:
    """Test cases for PaletteBlock.from_nbt."""

    def test_name_only(self) -> None:
        block = PaletteBlock.from_nbt(Compound({'Name': String('minecraft:stone')}))

        assert block == PaletteBlock(name='minecraft:stone', properties=None)

    def test_known_properties_kept_unknown_dropped(self) -> None:
        tag = Compound({
            'Name': String('minecraft:oak_leaves'),
            'Properties': Compound({
                'distance': String('7'),
                'persistent': String('true'),
                'waterlogged': String('false'),
                'facing': String('east'),
            }),
        })
        block = PaletteBlock.from_nbt(tag)

        assert block.properties == {
            'distance': '7',
            'persistent': 'true',
            'waterlogged': 'false',
        }

    def test_only_unknown_properties_gives_empty_mapping(self) -> None:
        tag = Compound({
            'Name': String('minecraft:chest'),
            'Properties': Compound({'facing': String('west'), 'type': String('single')}),
        })

        assert PaletteBlock.from_nbt(tag).properties == {}

    def test_known_property_set(self) -> None:
        assert set(KNOWN_BLOCK_PROPERTIES) == {
            'level', 'snowy', 'distance', 'persistent', 'waterlogged', 'axis'}

    def test_missing_name(self) -> None:
        with pytest.raises(ChunkSchemaError, match="missing required tag 'Name'"):
            PaletteBlock.from_nbt(Compound({}))


class TestSection:
    """Test cases for Section, BlockStates and Biomes."""

    def test_uniform_section_has_no_data(self) -> None:
        section = Section.from_nbt(make_section(3))

        assert section.y == 3
        assert section.block_states.is_uniform
        assert section.block_states.data is None
        assert section.biomes.is_uniform
        assert section.biomes.data is None
        assert section.block_light is None
        assert section.sky_light is None

    def test_negative_y(self) -> None:
        assert Section.from_nbt(make_section(-64 // 16)).y == -4

    def test_short_y_outside_byte_range(self) -> None:
        tag = make_section(0)
        tag['Y'] = Short(200)

        assert Section.from_nbt(tag).y == 200

    def test_y_beyond_short_range(self) -> None:
        tag = make_section(0)
        tag['Y'] = Int(40000)

        with pytest.raises(ChunkSchemaError, match='out of range'):
            Section.from_nbt(tag)

    def test_packed_data_kept_raw(self) -> None:
        words = [0x0123456789ABCDEF, -1, 0]
        tag = make_section(
            0,
            blocks=[Compound({'Name': String('minecraft:stone')}),
                    Compound({'Name': String('minecraft:dirt')})],
            block_data=words,
        )
        section = Section.from_nbt(tag)

        assert section.block_states.data.dtype == np.int64
        assert section.block_states.data.tolist() == words

    def test_light_arrays(self) -> None:
        section = Section.from_nbt(make_section(0, light=True))

        assert section.block_light.shape == (2048,)
        assert section.sky_light.dtype == np.uint8

    def test_wrong_light_size(self) -> None:
        tag = make_section(0)
        tag['SkyLight'] = ByteArray([0] * 100)

        with pytest.raises(ChunkSchemaError, match='2048'):
            Section.from_nbt(tag)

    def test_missing_biomes(self) -> None:
        tag = make_section(0)
        del tag['biomes']

        with pytest.raises(ChunkSchemaError, match='biomes'):
            Section.from_nbt(tag)

    def test_data_must_be_long_array(self) -> None:
        tag = make_section(0)
        tag['block_states']['data'] = Int(5)

        with pytest.raises(ChunkSchemaError, match='long array'):
            Section.from_nbt(tag)

    def test_equality_compares_arrays(self) -> None:
        a = Section.from_nbt(make_section(1, block_data=[1, 2], light=True))
        b = Section.from_nbt(make_section(1, block_data=[1, 2], light=True))
        c = Section.from_nbt(make_section(1, block_data=[1, 3], light=True))

        assert a == b
        assert a != c

    def test_block_states_and_biomes_equality(self) -> None:
        assert BlockStates() == BlockStates()
        assert Biomes(['minecraft:plains']) != Biomes(['minecraft:plains'], np.array([1]))


class TestChunk:
    """Test cases for Chunk.from_nbt."""

    def test_fields(self) -> None:
        chunk = Chunk.from_nbt(make_chunk_nbt(-3, 17, data_version=3700, status='minecraft:features'))

        assert chunk.data_version == 3700
        assert chunk.chunk_x == -3
        assert chunk.chunk_z == 17
        assert chunk.chunk_y == -4
        assert chunk.status == 'minecraft:features'
        assert chunk.last_update == 123456

    def test_y_pos_optional(self) -> None:
        assert Chunk.from_nbt(make_chunk_nbt(0, 0, y=None)).chunk_y is None

    def test_sections_are_keyed_by_y(self) -> None:
        """File order is preserved; lookup is by Y."""
        sections = [make_section(5), make_section(-2), make_section(0)]
        chunk = Chunk.from_nbt(make_chunk_nbt(0, 0, sections=sections))

        assert [s.y for s in chunk.sections] == [5, -2, 0]
        assert chunk.section_ys == [-2, 0, 5]
        assert chunk.get_section(-2).y == -2
        assert chunk.get_section(7) is None

    def test_empty_sections(self) -> None:
        assert Chunk.from_nbt(make_chunk_nbt(0, 0, sections=[])).sections == []

    def test_level_layout_rejected(self) -> None:
        tag = Compound({
            'DataVersion': Int(2730),
            'Level': Compound({'xPos': Int(0), 'zPos': Int(0)}),
        })

        with pytest.raises(ChunkSchemaError, match='pre-21w43a'):
            Chunk.from_nbt(tag)

    def test_error_names_nested_path(self) -> None:
        tag = make_chunk_nbt(0, 0, sections=[make_section(0), make_section(1)])
        del tag['sections'][1]['block_states']['palette']

        with pytest.raises(ChunkSchemaError) as excinfo:
            Chunk.from_nbt(tag)
        assert excinfo.value.path == 'sections[1].block_states'

    def test_to_dict(self) -> None:
        chunk = Chunk.from_nbt(make_chunk_nbt(1, 2, sections=[make_section(0, block_data=[9])]))
        summary = chunk.to_dict()

        assert summary['x'] == 1
        assert summary['z'] == 2
        assert summary['sections'][0]['block_states']['data_length'] == 1
        assert summary['sections'][0]['biomes']['data_length'] is None
