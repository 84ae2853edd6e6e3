"""Codec configuration."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CodecOptions:
    """Limits and wire-format switches shared by decode and encode.

    ``max_depth`` bounds Compound/List nesting, ``max_array_length`` bounds
    any declared element count.  ``list_end_marker`` selects the legacy
    List layout that follows every List body with an End byte; it changes
    the wire format and is off by default.
    """

    max_depth: int = 512
    max_array_length: int = 1 << 24
    list_end_marker: bool = False


DEFAULT_OPTIONS = CodecOptions()
