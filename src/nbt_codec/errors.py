"""Exceptions raised while decoding or encoding NBT data.

Every error aborts the whole document; nothing here is recoverable
mid-stream.  Decode errors carry the byte offset where the problem was
found (``None`` when no cursor was involved).
"""

from typing import Optional


class NBTError(Exception):
    """Base class for all NBT codec errors."""

    def __init__(self, message: str, offset: Optional[int] = None):
        if offset is not None:
            message = f'{message} (at offset {offset})'
        super().__init__(message)
        self.offset = offset


class TypeMismatch(NBTError):
    """A direct-typed read found a different type byte."""

    def __init__(self, expected, actual, offset: Optional[int] = None):
        super().__init__(f'expected {_type_name(expected)}, got {_type_name(actual)}', offset)
        self.expected = expected
        self.actual = actual


class UnknownType(NBTError):
    """A type code outside 0..12."""

    def __init__(self, code: int, offset: Optional[int] = None):
        super().__init__(f'unknown tag type {code}', offset)
        self.code = code


class UnknownEnvelope(NBTError):
    """The first byte is neither a Compound marker nor a known compression magic."""

    def __init__(self, first_byte: int):
        super().__init__(f'cannot detect compression from leading byte 0x{first_byte:02x}', 0)
        self.first_byte = first_byte


class CorruptEnvelope(NBTError):
    """The decompressor rejected a gzip or zlib envelope."""

    def __init__(self, compression, reason: str = ''):
        message = f'corrupt {compression.name.lower()} envelope'
        if reason:
            message = f'{message}: {reason}'
        super().__init__(message)
        self.compression = compression


class MalformedStream(NBTError):
    """The byte stream violates the NBT layout."""


class TruncatedStream(MalformedStream):
    """The stream ended before a read could be satisfied."""

    def __init__(self, offset: int, needed: int, available: int):
        super().__init__(f'truncated stream: needed {needed} bytes, {available} left', offset)
        self.needed = needed
        self.available = available


class MalformedLength(MalformedStream):
    """A declared count or length is negative or implausibly large."""

    def __init__(self, length: int, offset: Optional[int] = None, limit: Optional[int] = None):
        if length < 0:
            message = f'negative length {length}'
        else:
            message = f'length {length} exceeds limit {limit}'
        super().__init__(message, offset)
        self.length = length
        self.limit = limit


class NestingTooDeep(MalformedStream):
    """Compound/List nesting exceeds the configured depth."""

    def __init__(self, depth: int, offset: Optional[int] = None):
        super().__init__(f'nesting depth {depth} exceeds limit', offset)
        self.depth = depth


class ValueOutOfRange(NBTError):
    """A payload does not fit the wire width of its tag type."""

    def __init__(self, tag_type, value):
        shown = value if not isinstance(value, (str, bytes)) else f'{len(value)}-byte value'
        super().__init__(f'{_type_name(tag_type)} cannot hold {shown}')
        self.tag_type = tag_type
        self.value = value


def _type_name(tag_type) -> str:
    name = getattr(tag_type, 'name', None)
    return name if name is not None else str(tag_type)
