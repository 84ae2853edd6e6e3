"""Compression envelope detection.

An NBT document is either a bare root Compound (first byte 0x0A) or the
same bytes wrapped in gzip (0x1F) or zlib (0x78).  Only the envelope is
recognised here; the work itself is done by the ``gzip`` and ``zlib``
modules.
"""

import gzip
import logging
import zlib
from enum import IntEnum

from .errors import CorruptEnvelope, TruncatedStream, UnknownEnvelope

logger = logging.getLogger(__name__)


class Compression(IntEnum):
    """Envelope kinds, valued by the leading byte that identifies them."""

    NONE = 0x0A
    GZIP = 0x1F
    ZLIB = 0x78


def sniff(data: bytes) -> Compression:
    """Classify ``data`` by its first byte."""
    if not data:
        raise TruncatedStream(0, 1, 0)
    try:
        return Compression(data[0])
    except ValueError:
        raise UnknownEnvelope(data[0]) from None


def decompress(data: bytes, compression: Compression) -> bytes:
    """Strip the envelope; ``Compression.NONE`` returns ``data`` unchanged."""
    if compression == Compression.NONE:
        return data
    try:
        if compression == Compression.GZIP:
            raw = gzip.decompress(data)
        else:
            raw = zlib.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise CorruptEnvelope(compression, str(exc)) from exc
    logger.debug('%s envelope: %d -> %d bytes', compression.name, len(data), len(raw))
    return raw


def compress(data: bytes, compression: Compression) -> bytes:
    if compression == Compression.GZIP:
        return gzip.compress(data)
    if compression == Compression.ZLIB:
        return zlib.compress(data)
    return data
