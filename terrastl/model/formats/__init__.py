"""Model file formats."""

from .stl import (
    DEFAULT_HEADER,
    ParsedSTL,
    parse_stl,
    serialize_stl,
    serialize_ascii_stl,
    write_stl
)

__all__ = [
    'DEFAULT_HEADER',
    'ParsedSTL',
    'parse_stl',
    'serialize_stl',
    'serialize_ascii_stl',
    'write_stl'
]
