"""Whole-document entry points: bytes and files in, tag trees out."""

import logging
from typing import Optional

from .codec import Codec
from .compression import Compression, compress, decompress, sniff
from .cursor import ByteReader, ByteWriter
from .errors import MalformedStream
from .options import CodecOptions
from .tags import Tag, TagType

logger = logging.getLogger(__name__)


def decode_document(data: bytes, options: Optional[CodecOptions] = None) -> Tag:
    """Decode one root tag, unwrapping a gzip or zlib envelope if present.

    The root must be a keyed tag, not End.  Bytes after it are ignored.
    """
    compression = sniff(data)
    raw = decompress(data, compression)
    reader = ByteReader(raw)
    root = Codec(options).read_tag(reader)
    if root.type == TagType.END:
        raise MalformedStream('document root is an End tag', 0)
    if reader.remaining:
        logger.debug('ignoring %d trailing bytes after root tag', reader.remaining)
    return root


def encode_document(tag: Tag, options: Optional[CodecOptions] = None) -> bytes:
    """Encode ``tag`` as an uncompressed root; a missing key is written as ``""``."""
    writer = ByteWriter()
    Codec(options).write_tag(writer, tag)
    return writer.get_bytes()


def load(path: str, options: Optional[CodecOptions] = None) -> Tag:
    with open(path, 'rb') as f:
        data = f.read()
    logger.debug('read %d bytes from %s', len(data), path)
    return decode_document(data, options)


def save(path: str, tag: Tag, compression: Compression = Compression.GZIP,
         options: Optional[CodecOptions] = None) -> None:
    """Encode ``tag`` and write it to ``path`` with the chosen envelope."""
    data = compress(encode_document(tag, options), compression)
    with open(path, 'wb') as f:
        f.write(data)
    logger.debug('wrote %d bytes (%s) to %s', len(data), compression.name, path)
