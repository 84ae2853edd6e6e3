"""NBT read/write engine.

Layout of one keyed tag::

    int8 type | uint16 key length + UTF-8 key (unless End) | content

Compound content is a run of keyed tags closed by an End byte.  List
content is ``int8 element type, int32 count`` followed by ``count``
bare contents: List elements carry neither a type byte nor a key.

Nested Lists and Compounds are walked with an explicit stack rather than
Python recursion, so ``CodecOptions.max_depth`` is the only nesting limit.
"""

import struct
from typing import Optional

from .cursor import ByteReader, ByteWriter
from .errors import (
    MalformedLength,
    MalformedStream,
    NestingTooDeep,
    TypeMismatch,
    UnknownType,
    ValueOutOfRange,
)
from .options import DEFAULT_OPTIONS, CodecOptions
from .tags import Tag, TagType, create

_TYPE_CODES = frozenset(int(t) for t in TagType)
_MAX_COUNT = 0x7FFFFFFF

# struct format codes, shared by the scalar and array variants
_SCALAR_CODES = {
    TagType.BYTE: 'b',
    TagType.SHORT: 'h',
    TagType.INT: 'i',
    TagType.LONG: 'q',
    TagType.FLOAT: 'f',
    TagType.DOUBLE: 'd',
}
_ARRAY_CODES = {
    TagType.BYTE_ARRAY: 'b',
    TagType.INT_ARRAY: 'i',
    TagType.LONG_ARRAY: 'q',
}
_SCALAR_READERS = {
    TagType.BYTE: ByteReader.read_byte,
    TagType.SHORT: ByteReader.read_short,
    TagType.INT: ByteReader.read_int,
    TagType.LONG: ByteReader.read_long,
    TagType.FLOAT: ByteReader.read_float,
    TagType.DOUBLE: ByteReader.read_double,
}
_SCALAR_WRITERS = {
    TagType.BYTE: ByteWriter.write_byte,
    TagType.SHORT: ByteWriter.write_short,
    TagType.INT: ByteWriter.write_int,
    TagType.LONG: ByteWriter.write_long,
    TagType.FLOAT: ByteWriter.write_float,
    TagType.DOUBLE: ByteWriter.write_double,
}


def _type_or_code(code: int):
    return TagType(code) if code in _TYPE_CODES else code


class _Frame:
    """An open List or Compound on the work stack.

    ``remaining`` counts List elements still to read; ``members`` iterates
    the children still to write.
    """

    __slots__ = ('tag', 'depth', 'remaining', 'members')

    def __init__(self, tag: Tag, depth: int, remaining: int = 0, members=None):
        self.tag = tag
        self.depth = depth
        self.remaining = remaining
        self.members = members


class Codec:
    """Encode and decode tags against byte cursors.

    One dispatch table maps every ``TagType`` to a pair of content
    functions.  Scalar, string and array functions do their whole job;
    the List and Compound ones handle their header and push a frame that
    ``read_content``/``write_content`` then drain.  A codec holds no
    per-call state, so one instance can serve any number of documents.
    """

    def __init__(self, options: Optional[CodecOptions] = None):
        self.options = options or DEFAULT_OPTIONS
        self._dispatch = {TagType.END: (self._read_end_content, self._write_end_content)}
        for tag_type in _SCALAR_CODES:
            self._dispatch[tag_type] = (self._read_scalar, self._write_scalar)
        for tag_type in _ARRAY_CODES:
            self._dispatch[tag_type] = (self._read_array, self._write_array)
        self._dispatch[TagType.STRING] = (self._read_string, self._write_string)
        self._dispatch[TagType.LIST] = (self._open_list, self._open_list_write)
        self._dispatch[TagType.COMPOUND] = (self._open_compound, self._open_compound_write)

    # keyed framing

    def read_tag(self, reader: ByteReader, expected: Optional[TagType] = None,
                 depth: int = 0) -> Tag:
        """Read one keyed tag.

        The type byte is checked before it is consumed: on ``TypeMismatch``
        or ``UnknownType`` the cursor still points at it.  End is returned
        as a keyless End tag.
        """
        code = self._read_type(reader, expected)
        if code == TagType.END:
            return create(code)
        key = reader.read_string()
        tag = self.read_content(reader, code, depth)
        tag.key = key
        return tag

    def write_tag(self, writer: ByteWriter, tag: Tag, key: Optional[str] = None,
                  depth: int = 0) -> None:
        """Write type byte, key block and content.

        ``key`` defaults to the tag's own key, and to ``""`` when it has none.
        """
        writer.write_ubyte(tag.type)
        if tag.type == TagType.END:
            return
        if key is None:
            key = tag.key if tag.key is not None else ''
        writer.write_string(key)
        self.write_content(writer, tag, depth)

    # bare content

    def read_content(self, reader: ByteReader, tag_type: TagType, depth: int = 0) -> Tag:
        """Read the content of one tag of ``tag_type`` into a fresh, unkeyed tag."""
        root = create(tag_type)
        stack = []
        self._fill(reader, root, depth, stack)
        while stack:
            frame = stack[-1]
            parent = frame.tag
            if parent.type == TagType.LIST:
                if not frame.remaining:
                    stack.pop()
                    if self.options.list_end_marker:
                        self._read_end_marker(reader)
                    continue
                frame.remaining -= 1
                child = create(parent.element_type)
                parent.value.append(child)
            else:
                code = self._read_type(reader)
                if code == TagType.END:
                    stack.pop()
                    continue
                key = reader.read_string()
                child = create(code)
                child.key = key
                # a repeated key replaces the earlier member in place
                parent.value[key] = child
            self._fill(reader, child, frame.depth + 1, stack)
        return root

    def write_content(self, writer: ByteWriter, tag: Tag, depth: int = 0) -> None:
        stack = []
        self._emit(writer, tag, depth, stack)
        while stack:
            frame = stack[-1]
            parent = frame.tag
            child = next(frame.members, None)
            if child is None:
                stack.pop()
                if parent.type == TagType.COMPOUND or self.options.list_end_marker:
                    writer.write_ubyte(TagType.END)
                continue
            if parent.type == TagType.COMPOUND:
                key, child = child
                if child.type == TagType.END:
                    raise ValueOutOfRange(TagType.COMPOUND, child)
                writer.write_ubyte(child.type)
                writer.write_string(key)
            self._emit(writer, child, frame.depth + 1, stack)

    # helpers

    def _fill(self, reader, tag, depth, stack):
        read, _ = self._dispatch[tag.type]
        read(reader, tag, depth, stack)

    def _emit(self, writer, tag, depth, stack):
        _, write = self._dispatch[tag.type]
        write(writer, tag, depth, stack)

    def _read_type(self, reader: ByteReader, expected: Optional[TagType] = None) -> int:
        offset = reader.pos
        code = reader.peek_ubyte()
        if expected is not None and code != expected:
            raise TypeMismatch(TagType(expected), _type_or_code(code), offset)
        if code not in _TYPE_CODES:
            raise UnknownType(code, offset)
        reader.pos += 1
        return code

    def _check_depth(self, depth: int, offset: Optional[int] = None) -> None:
        if depth > self.options.max_depth:
            raise NestingTooDeep(depth, offset)

    def _read_count(self, reader: ByteReader) -> int:
        offset = reader.pos
        count = reader.read_int()
        if count < 0 or count > self.options.max_array_length:
            raise MalformedLength(count, offset, self.options.max_array_length)
        return count

    def _write_count(self, writer: ByteWriter, tag: Tag) -> None:
        if len(tag.value) > _MAX_COUNT:
            raise ValueOutOfRange(tag.type, len(tag.value))
        writer.write_int(len(tag.value))

    def _read_end_marker(self, reader):
        offset = reader.pos
        code = reader.read_ubyte()
        if code != TagType.END:
            raise TypeMismatch(TagType.END, _type_or_code(code), offset)

    # per-variant content

    def _read_end_content(self, reader, tag, depth, stack):
        pass

    def _write_end_content(self, writer, tag, depth, stack):
        pass

    def _read_scalar(self, reader, tag, depth, stack):
        tag.value = _SCALAR_READERS[tag.type](reader)

    def _write_scalar(self, writer, tag, depth, stack):
        try:
            _SCALAR_WRITERS[tag.type](writer, tag.value)
        except (struct.error, OverflowError) as exc:
            raise ValueOutOfRange(tag.type, tag.value) from exc

    def _read_string(self, reader, tag, depth, stack):
        tag.value = reader.read_string()

    def _write_string(self, writer, tag, depth, stack):
        writer.write_string(tag.value)

    def _read_array(self, reader, tag, depth, stack):
        count = self._read_count(reader)
        tag.value = reader.read_array(_ARRAY_CODES[tag.type], count)

    def _write_array(self, writer, tag, depth, stack):
        self._write_count(writer, tag)
        try:
            writer.write_array(_ARRAY_CODES[tag.type], tag.value)
        except struct.error as exc:
            raise ValueOutOfRange(tag.type, tag.value) from exc

    def _open_list(self, reader, tag, depth, stack):
        self._check_depth(depth, reader.pos)
        offset = reader.pos
        code = reader.read_byte()
        if code not in _TYPE_CODES:
            raise UnknownType(code, offset)
        element_type = TagType(code)
        count = self._read_count(reader)
        if element_type == TagType.END and count:
            raise MalformedStream(f'list of End declares {count} elements', offset)
        tag.element_type = element_type
        stack.append(_Frame(tag, depth, remaining=count))

    def _open_list_write(self, writer, tag, depth, stack):
        self._check_depth(depth)
        for item in tag.value:
            if item.type != tag.element_type:
                raise TypeMismatch(tag.element_type, item.type)
        if tag.value and tag.element_type == TagType.END:
            raise ValueOutOfRange(TagType.LIST, tag.value[0])
        writer.write_byte(tag.element_type)
        self._write_count(writer, tag)
        stack.append(_Frame(tag, depth, members=iter(tag.value)))

    def _open_compound(self, reader, tag, depth, stack):
        self._check_depth(depth, reader.pos)
        stack.append(_Frame(tag, depth))

    def _open_compound_write(self, writer, tag, depth, stack):
        self._check_depth(depth)
        stack.append(_Frame(tag, depth, members=iter(tag.value.items())))
