"""
Chunk Payload Decoder
=====================

Each generated chunk starts on a sector boundary with a 5-byte header:

- 4-byte big-endian length of everything that follows (tag + data)
- 1-byte compression tag

followed by ``length - 1`` bytes of compressed NBT. Only zlib (tag 2), the
scheme the game writes by default, is decoded here.
"""

import io
import logging
import zlib
from typing import Optional

import nbtlib

from anvilscope.config import ReaderConfig
from anvilscope.core.chunk import Chunk
from anvilscope.errors import (
    ChunkDataError,
    ChunkHeaderError,
    ChunkSchemaError,
    UnsupportedCompressionError,
)
from anvilscope.formats.binary import Buffer, read_u8, read_u32
from anvilscope.formats.header import HEADER_SIZE, ChunkLocationEntry


logger = logging.getLogger(__name__)

COMPRESSION_GZIP = 1
COMPRESSION_ZLIB = 2
COMPRESSION_NONE = 3
COMPRESSION_LZ4 = 4
COMPRESSION_CUSTOM = 127
# Set on the tag when the payload lives in a separate c.<x>.<z>.mcc file
EXTERNAL_FLAG = 128

COMPRESSION_NAMES = {
    COMPRESSION_GZIP: 'gzip',
    COMPRESSION_ZLIB: 'zlib',
    COMPRESSION_NONE: 'uncompressed',
    COMPRESSION_LZ4: 'lz4',
    COMPRESSION_CUSTOM: 'custom',
}


def compression_name(compression: int) -> str:
    """Describe a compression tag, e.g. ``"external zlib"`` for 130."""
    name = COMPRESSION_NAMES.get(compression & ~EXTERNAL_FLAG, 'unknown')
    if compression & EXTERNAL_FLAG:
        return f"external {name}"
    return name


CHUNK_HEADER_SIZE = 5


def _read_frame(buf: Buffer, entry: ChunkLocationEntry) -> memoryview:
    """Validate the chunk header and return a view of the compressed bytes."""
    base = entry.byte_offset

    if base < HEADER_SIZE:
        raise ChunkHeaderError(
            f"chunk ({entry.x}, {entry.z}) points into the region header "
            f"(sector {entry.sector_offset})", entry.index)
    if base + CHUNK_HEADER_SIZE > len(buf):
        raise ChunkHeaderError(
            f"chunk ({entry.x}, {entry.z}) is outside the file "
            f"(offset {base}, file size {len(buf)})", entry.index)

    length = read_u32(buf, base)
    if length < 1:
        raise ChunkHeaderError(f"chunk ({entry.x}, {entry.z}) has zero length", entry.index)
    if base + 4 + length > len(buf):
        raise ChunkHeaderError(
            f"chunk ({entry.x}, {entry.z}) is partially outside the file "
            f"(length {length}, {len(buf) - base - 4} bytes available)", entry.index)

    compression = read_u8(buf, base + 4)
    if compression != COMPRESSION_ZLIB:
        raise UnsupportedCompressionError(
            compression, entry.index, compression_name(compression))

    return memoryview(buf)[base + CHUNK_HEADER_SIZE:base + 4 + length]


def _inflate(data: memoryview, max_size: int, index: int) -> bytes:
    decompressor = zlib.decompressobj()
    try:
        result = decompressor.decompress(data, max_size)
    except zlib.error as e:
        raise ChunkDataError(f"corrupt zlib stream: {e}", index) from e

    if not decompressor.eof:
        if decompressor.unconsumed_tail or len(result) >= max_size:
            raise ChunkDataError(f"chunk inflates to more than {max_size} bytes", index)
        raise ChunkDataError("truncated zlib stream", index)
    return result


def decompress_payload(buf: Buffer, entry: ChunkLocationEntry,
                       config: Optional[ReaderConfig] = None) -> bytes:
    """
    Read and inflate the payload of one chunk.

    Args:
        buf: Contents of the whole region file
        entry: Location of the chunk
        config: Reader settings, for the decompressed size limit

    Returns:
        The uncompressed NBT bytes

    Raises:
        ChunkHeaderError: If the offset or length points outside the file
        UnsupportedCompressionError: If the chunk is not zlib-compressed
        ChunkDataError: If the zlib stream is corrupt or too large
    """
    config = config or ReaderConfig()
    data = _read_frame(buf, entry)
    return _inflate(data, config.max_decompressed_size, entry.index)


def parse_chunk_nbt(raw: bytes, index: Optional[int] = None) -> Chunk:
    """Parse uncompressed chunk NBT and map it onto a Chunk."""
    try:
        root = nbtlib.File.parse(io.BytesIO(raw))
    except Exception as e:
        raise ChunkDataError(f"malformed NBT: {e}", index) from e

    try:
        return Chunk.from_nbt(root)
    except ChunkSchemaError as e:
        e.index = index
        raise


def decode_chunk(buf: Buffer, entry: ChunkLocationEntry,
                 config: Optional[ReaderConfig] = None) -> Chunk:
    """
    Decode the chunk stored at ``entry``.

    Raises:
        RegionFormatError: Any of the per-chunk errors; the rest of the
            region is unaffected
    """
    raw = decompress_payload(buf, entry, config)
    logger.debug("Slot %d (%d, %d): %d bytes of NBT", entry.index, entry.x, entry.z, len(raw))
    return parse_chunk_nbt(raw, entry.index)
