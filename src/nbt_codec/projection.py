"""Plain-Python and JSON views of a tag tree."""

import json
from typing import Any, Optional

from .tags import ARRAY_TYPES, COMPOSITE_TYPES, Tag, TagType


def _shell(tag: Tag) -> Any:
    if tag.type == TagType.COMPOUND:
        return {}
    if tag.type == TagType.LIST:
        return []
    if tag.type in ARRAY_TYPES:
        return list(tag.value)
    return tag.value


def to_python(tag: Tag) -> Any:
    """Drop type information: Compound -> dict, List and arrays -> list."""
    root = _shell(tag)
    pending = [(tag, root)] if tag.type in COMPOSITE_TYPES else []
    while pending:
        source, target = pending.pop()
        if source.type == TagType.COMPOUND:
            children = source.value.items()
        else:
            children = enumerate(source.value)
        for key, child in children:
            out = _shell(child)
            if source.type == TagType.COMPOUND:
                target[key] = out
            else:
                target.append(out)
            if child.type in COMPOSITE_TYPES:
                pending.append((child, out))
    return root


def to_json(tag: Tag, indent: Optional[int] = None) -> str:
    return json.dumps(to_python(tag), indent=indent, ensure_ascii=False)
