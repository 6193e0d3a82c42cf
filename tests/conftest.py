"""Shared fixtures: build chunk NBT and region files in memory."""

import io
import struct
import zlib
from typing import Dict, List, Optional

import nbtlib
import pytest
from nbtlib import Byte, ByteArray, Compound, Int, List as TagList, Long, LongArray, String


SECTOR = 4096
HEADER = 2 * SECTOR
TIMESTAMP = 1700000000


def make_section(y: int, blocks: Optional[List[Compound]] = None,
                 biomes: Optional[List[str]] = None,
                 block_data: Optional[List[int]] = None,
                 biome_data: Optional[List[int]] = None,
                 light: bool = False) -> Compound:
    if blocks is None:
        blocks = [Compound({'Name': String('minecraft:air')})]
    if biomes is None:
        biomes = ['minecraft:plains']

    block_states = Compound({'palette': TagList[Compound](blocks)})
    if block_data is not None:
        block_states['data'] = LongArray(block_data)

    biome_tag = Compound({'palette': TagList[String]([String(b) for b in biomes])})
    if biome_data is not None:
        biome_tag['data'] = LongArray(biome_data)

    section = Compound({
        'Y': Byte(y),
        'block_states': block_states,
        'biomes': biome_tag,
    })
    if light:
        section['BlockLight'] = ByteArray([0] * 2048)
        section['SkyLight'] = ByteArray([-1] * 2048)
    return section


def make_chunk_nbt(x: int, z: int, sections: Optional[List[Compound]] = None,
                   data_version: int = 3465, status: str = 'minecraft:full',
                   y: Optional[int] = -4, last_update: int = 123456) -> nbtlib.File:
    if sections is None:
        sections = [make_section(-4), make_section(0)]

    root = Compound({
        'DataVersion': Int(data_version),
        'xPos': Int(x),
        'zPos': Int(z),
        'Status': String(status),
        'LastUpdate': Long(last_update),
        'sections': TagList[Compound](sections),
    })
    if y is not None:
        root['yPos'] = Int(y)
    return nbtlib.File(root)


def nbt_bytes(tag: nbtlib.File) -> bytes:
    buf = io.BytesIO()
    tag.write(buf)
    return buf.getvalue()


def frame_payload(raw: bytes, compression: int = 2) -> bytes:
    """Compress raw NBT and prepend the 5-byte chunk header."""
    compressed = zlib.compress(raw)
    return struct.pack('>IB', len(compressed) + 1, compression) + compressed


def frame_chunk(tag: nbtlib.File, compression: int = 2) -> bytes:
    return frame_payload(nbt_bytes(tag), compression)


def build_region(payloads: Dict[int, bytes], timestamp: int = TIMESTAMP) -> bytes:
    """Lay out framed payloads one after another, starting at sector 2."""
    header = bytearray(HEADER)
    body = bytearray()
    sector = 2

    for index, payload in sorted(payloads.items()):
        padded = payload + b'\x00' * (-len(payload) % SECTOR)
        count = len(padded) // SECTOR
        struct.pack_into('>I', header, 4 * index, (sector << 8) | count)
        struct.pack_into('>I', header, SECTOR + 4 * index, timestamp)
        body += padded
        sector += count

    return bytes(header + body)


@pytest.fixture
def chunk_nbt():
    blocks = [
        Compound({'Name': String('minecraft:air')}),
        Compound({
            'Name': String('minecraft:oak_log'),
            'Properties': Compound({'axis': String('y')}),
        }),
        Compound({
            'Name': String('minecraft:oak_stairs'),
            'Properties': Compound({
                'facing': String('north'),
                'waterlogged': String('false'),
            }),
        }),
    ]
    sections = [
        make_section(2, blocks=blocks, block_data=[1, 2, 3], light=True),
        make_section(-4, biomes=['minecraft:plains', 'minecraft:forest'], biome_data=[7]),
        make_section(0),
    ]
    return make_chunk_nbt(5, 0, sections=sections)


@pytest.fixture
def two_chunk_region():
    """Slots 5 and 990 populated, everything else empty."""
    return build_region({
        5: frame_chunk(make_chunk_nbt(5, 0)),
        990: frame_chunk(make_chunk_nbt(30, 30)),
    })
