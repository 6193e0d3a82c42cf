"""
AnvilScope Errors
=================

Exception types raised while reading region files.

Whole-file failures (``RegionHeaderError``, ``OSError``) reach the caller.
Everything else is scoped to a single chunk slot and is turned into an
empty slot by the region decoder.
"""

from typing import Optional


class RegionFormatError(Exception):
    """Base class for all region file format errors."""

    def __init__(self, msg: str = "", index: Optional[int] = None):
        super().__init__(msg)
        self.msg = msg
        self.index = index

    def __str__(self):
        if self.index is None:
            return self.msg
        return f"slot {self.index}: {self.msg}"


class RegionHeaderError(RegionFormatError):
    """The file is too small to contain the location and timestamp tables."""


class FieldBoundsError(RegionFormatError, IndexError):
    """A fixed-width field would be read past the end of the buffer."""


class ChunkHeaderError(RegionFormatError):
    """The chunk offset or length header points outside the file."""


class UnsupportedCompressionError(RegionFormatError):
    """The chunk uses a compression scheme this reader does not decode."""

    def __init__(self, compression: int, index: Optional[int] = None, scheme: str = ''):
        msg = f"unsupported chunk compression type: {compression}"
        if scheme:
            msg = f"{msg} ({scheme})"
        super().__init__(msg, index)
        self.scheme = scheme
        self.compression = compression


class ChunkDataError(RegionFormatError):
    """The chunk payload could not be decompressed or parsed as NBT."""


class ChunkSchemaError(RegionFormatError):
    """The chunk NBT does not have the expected structure."""

    def __init__(self, msg: str = "", path: str = "", index: Optional[int] = None):
        if path:
            msg = f"{path}: {msg}"
        super().__init__(msg, index)
        self.path = path


__all__ = [
    'RegionFormatError',
    'RegionHeaderError',
    'FieldBoundsError',
    'ChunkHeaderError',
    'UnsupportedCompressionError',
    'ChunkDataError',
    'ChunkSchemaError',
]
