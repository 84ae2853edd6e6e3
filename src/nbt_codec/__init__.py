"""nbt_codec: reader/writer for NBT (Named Binary Tag) data.

    >>> from nbt_codec import Tag, encode_document, decode_document
    >>> root = Tag.compound({'name': Tag.string('Steve'), 'level': Tag.int(3)}, key='')
    >>> decode_document(encode_document(root)) == root
    True
"""

from .codec import Codec
from .compression import Compression, compress, decompress, sniff
from .cursor import ByteReader, ByteWriter
from .document import decode_document, encode_document, load, save
from .errors import (
    CorruptEnvelope,
    MalformedLength,
    MalformedStream,
    NBTError,
    NestingTooDeep,
    TruncatedStream,
    TypeMismatch,
    UnknownEnvelope,
    UnknownType,
    ValueOutOfRange,
)
from .options import CodecOptions
from .projection import to_json, to_python
from .tags import Tag, TagType, create

__version__ = '0.1.0'

__all__ = [
    'ByteReader',
    'ByteWriter',
    'Codec',
    'CodecOptions',
    'Compression',
    'CorruptEnvelope',
    'MalformedLength',
    'MalformedStream',
    'NBTError',
    'NestingTooDeep',
    'Tag',
    'TagType',
    'TruncatedStream',
    'TypeMismatch',
    'UnknownEnvelope',
    'UnknownType',
    'ValueOutOfRange',
    'compress',
    'create',
    'decode_document',
    'decompress',
    'encode_document',
    'load',
    'save',
    'sniff',
    'to_json',
    'to_python',
]
