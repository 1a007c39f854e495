"""
# structure: format strings for binary layouts.

A format string (inspired by the struct module) describes the exact layout
of a sequence of values; build() compiles it into a Schema that can be
reused to

 1. pack(): encode the values into bytes, always exactly size() long.

 2. unpack(): decode bytes, that must be exactly size() long, back into
    a tuple of values.

and their streaming counterparts pack_into() and unpack_from() that write
to / read from anything that behaves like a file.

The first character can indicate the byte order ('=' native, '<' little,
'>' big, '!' network), by default it's big-endian. Then follow the fields

    b B ? h H i I q Q f d   numbers and booleans, the count repeats them
    s S                     buffers, the count is their length
    x                       padding, the count is its length
    P, P<tag>               pointer sized opaque handle (native order only)

so that "2IB" are two unsigned 32-bit integers and a byte, while "4s" is a
single buffer of four bytes.
"""
import functools

from .core import Schema
from .exceptions import (
    StructureException,
    ConstructionError,
    PackException,
    InvalidInput,
    LengthMismatch,
    TypeMismatch,
    UnexpectedEOF,
    ShortWrite,
)


@functools.lru_cache(maxsize=256)
def build(format: str, word_size=None) -> Schema:
    '''Compile the format into a Schema, the same Schema instance is returned
    for the same arguments since it's immutable.'''
    return Schema(format, word_size=word_size)


def calcsize(format: str) -> int:
    return build(format).size()


def pack(format: str, *values) -> bytes:
    return build(format).pack(*values)


def pack_into(format: str, sink, *values) -> None:
    build(format).pack_into(sink, *values)


def unpack(format: str, buffer) -> tuple:
    return build(format).unpack(buffer)


def unpack_from(format: str, source) -> tuple:
    return build(format).unpack_from(source)
