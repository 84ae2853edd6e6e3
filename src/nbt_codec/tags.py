"""NBT tag model: the type codes and a single tagged-union ``Tag`` class."""

from __future__ import annotations

import struct
from enum import IntEnum
from typing import Any, Dict, Iterable, Iterator, Optional, Union

from .errors import TypeMismatch, UnknownType, ValueOutOfRange


class TagType(IntEnum):
    """Wire type codes.  Values are fixed by the format."""

    END = 0
    BYTE = 1
    SHORT = 2
    INT = 3
    LONG = 4
    FLOAT = 5
    DOUBLE = 6
    BYTE_ARRAY = 7
    STRING = 8
    LIST = 9
    COMPOUND = 10
    INT_ARRAY = 11
    LONG_ARRAY = 12


INTEGER_TYPES = frozenset({TagType.BYTE, TagType.SHORT, TagType.INT, TagType.LONG})
ARRAY_TYPES = frozenset({TagType.BYTE_ARRAY, TagType.INT_ARRAY, TagType.LONG_ARRAY})
COMPOSITE_TYPES = frozenset({TagType.LIST, TagType.COMPOUND})

_SINGLE = struct.Struct('>f')


def _default_value(tag_type: TagType) -> Any:
    if tag_type == TagType.END:
        return None
    if tag_type in INTEGER_TYPES:
        return 0
    if tag_type in (TagType.FLOAT, TagType.DOUBLE):
        return 0.0
    if tag_type == TagType.STRING:
        return ''
    if tag_type == TagType.COMPOUND:
        return {}
    return []


def _to_single(value: float) -> float:
    """Round to the nearest IEEE single, the precision a Float has on the wire."""
    try:
        return _SINGLE.unpack(_SINGLE.pack(value))[0]
    except (struct.error, OverflowError) as exc:
        raise ValueOutOfRange(TagType.FLOAT, value) from exc


def _signed_bytes(values) -> list:
    if isinstance(values, (bytes, bytearray, memoryview)):
        raw = bytes(values)
        return [*struct.unpack(f'>{len(raw)}b', raw)]
    return [*values]


class Tag:
    """One node of an NBT tree.

    ``value`` depends on ``type``: an int or float for scalars, a str for
    String, a list of ints for the array types, a list of unkeyed tags for
    List (all of ``element_type``) and an insertion-ordered dict of keyed
    tags for Compound.  End has no value.

    ``key`` is set for Compound members and the document root and is
    ``None`` for List elements.
    """

    __slots__ = ('type', 'key', 'value', 'element_type')

    def __init__(self, tag_type: TagType, value: Any = None, key: Optional[str] = None,
                 element_type: Optional[TagType] = None):
        self.type = TagType(tag_type)
        self.key = key
        if value is None:
            value = _default_value(self.type)
        elif self.type == TagType.FLOAT:
            value = _to_single(value)
        self.value = value
        self.element_type = None
        if self.type == TagType.LIST:
            self.element_type = TagType(element_type if element_type is not None else TagType.END)

    def _require(self, tag_type: TagType) -> None:
        if self.type != tag_type:
            raise TypeMismatch(tag_type, self.type)

    # compound access

    def set(self, key: str, tag: Tag) -> None:
        """Insert or replace a Compound member; replacing keeps its position."""
        self._require(TagType.COMPOUND)
        if tag.type == TagType.END:
            raise ValueOutOfRange(TagType.COMPOUND, tag)
        tag.key = key
        self.value[key] = tag

    __setitem__ = set

    def __getitem__(self, index):
        if self.type in (TagType.COMPOUND, TagType.LIST):
            return self.value[index]
        raise TypeError(f'{self.type.name} tag is not subscriptable')

    def get(self, key: str, default: Optional[Tag] = None) -> Optional[Tag]:
        self._require(TagType.COMPOUND)
        return self.value.get(key, default)

    def keys(self):
        self._require(TagType.COMPOUND)
        return self.value.keys()

    def items(self):
        self._require(TagType.COMPOUND)
        return self.value.items()

    def __contains__(self, key: str) -> bool:
        self._require(TagType.COMPOUND)
        return key in self.value

    # list access

    def append(self, item) -> None:
        """Append a tag to a List, or an int to one of the array tags.

        The first element appended to an empty List of element type End
        fixes the element type.
        """
        if self.type in ARRAY_TYPES:
            self.value.append(item)
            return
        self._require(TagType.LIST)
        if item.type == TagType.END:
            raise ValueOutOfRange(TagType.LIST, item)
        if not self.value and self.element_type == TagType.END:
            self.element_type = item.type
        elif item.type != self.element_type:
            raise TypeMismatch(self.element_type, item.type)
        item.key = None
        self.value.append(item)

    def __len__(self) -> int:
        if self.type in (TagType.COMPOUND, TagType.LIST, TagType.STRING) or self.type in ARRAY_TYPES:
            return len(self.value)
        raise TypeError(f'{self.type.name} tag has no length')

    def __iter__(self) -> Iterator:
        if self.type == TagType.COMPOUND:
            return iter(self.value.values())
        if self.type == TagType.LIST or self.type in ARRAY_TYPES:
            return iter(self.value)
        raise TypeError(f'{self.type.name} tag is not iterable')

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tag):
            return NotImplemented
        pending = [(self, other)]
        while pending:
            a, b = pending.pop()
            if a.type != b.type or a.key != b.key or a.element_type != b.element_type:
                return False
            if a.type == TagType.COMPOUND:
                # member order is part of the encoding
                if list(a.value) != list(b.value):
                    return False
                pending.extend(zip(a.value.values(), b.value.values()))
            elif a.type == TagType.LIST:
                if len(a.value) != len(b.value):
                    return False
                pending.extend(zip(a.value, b.value))
            elif a.value != b.value:
                return False
        return True

    __hash__ = None

    def __repr__(self) -> str:
        parts = [self.type.name]
        if self.key is not None:
            parts.append(repr(self.key))
        if self.type == TagType.LIST:
            parts.append(f'of {self.element_type.name}')
        if self.type == TagType.COMPOUND:
            parts.append(repr(list(self.value.values())))
        elif self.type != TagType.END:
            parts.append(repr(self.value))
        return f'Tag({" ".join(parts)})'

    # builders

    @classmethod
    def byte(cls, value: int = 0, key: Optional[str] = None) -> Tag:
        return cls(TagType.BYTE, value, key)

    @classmethod
    def short(cls, value: int = 0, key: Optional[str] = None) -> Tag:
        return cls(TagType.SHORT, value, key)

    @classmethod
    def int(cls, value: int = 0, key: Optional[str] = None) -> Tag:
        return cls(TagType.INT, value, key)

    @classmethod
    def long(cls, value: int = 0, key: Optional[str] = None) -> Tag:
        return cls(TagType.LONG, value, key)

    @classmethod
    def float(cls, value: float = 0.0, key: Optional[str] = None) -> Tag:
        return cls(TagType.FLOAT, value, key)

    @classmethod
    def double(cls, value: float = 0.0, key: Optional[str] = None) -> Tag:
        return cls(TagType.DOUBLE, value, key)

    @classmethod
    def string(cls, value: str = '', key: Optional[str] = None) -> Tag:
        return cls(TagType.STRING, value, key)

    @classmethod
    def byte_array(cls, values: Union[bytes, Iterable[int]] = (), key: Optional[str] = None) -> Tag:
        """``bytes`` input is reinterpreted as signed, so ``b'\\xff'`` becomes ``[-1]``."""
        return cls(TagType.BYTE_ARRAY, _signed_bytes(values), key)

    @classmethod
    def int_array(cls, values: Iterable[int] = (), key: Optional[str] = None) -> Tag:
        return cls(TagType.INT_ARRAY, [*values], key)

    @classmethod
    def long_array(cls, values: Iterable[int] = (), key: Optional[str] = None) -> Tag:
        return cls(TagType.LONG_ARRAY, [*values], key)

    @classmethod
    def list(cls, element_type: TagType = TagType.END, items: Iterable[Tag] = (),
             key: Optional[str] = None) -> Tag:
        tag = cls(TagType.LIST, [], key, element_type)
        for item in items:
            tag.append(item)
        return tag

    @classmethod
    def compound(cls, members: Union[Dict[str, Tag], Iterable[Tag], None] = None,
                 key: Optional[str] = None) -> Tag:
        """Build a Compound from a ``{key: tag}`` dict or from already keyed tags."""
        tag = cls(TagType.COMPOUND, {}, key)
        if isinstance(members, dict):
            for name, member in members.items():
                tag.set(name, member)
        elif members is not None:
            for member in members:
                if member.key is None:
                    raise ValueOutOfRange(TagType.COMPOUND, member)
                tag.set(member.key, member)
        return tag


def create(tag_type: int) -> Tag:
    """Return a default-valued tag of the given type code."""
    try:
        tag_type = TagType(tag_type)
    except ValueError:
        raise UnknownType(tag_type) from None
    return Tag(tag_type)
