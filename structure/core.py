"""
Core module: the Schema compiled from a format string.

A Schema is immutable, so it can be built once and used from everywhere
(also from different threads) to pack and unpack.
"""
import io
import logging
from typing import List, Tuple

from .fields import Field
from .layout import Slot, calculate, offsets
from . import parser
from .streams import Stream
from .exceptions import PackException, LengthMismatch


logger = logging.getLogger(__name__)


class Schema(object):
    """
    Together with Field is the main class: it walks its fields, in order, once
    for each pack/unpack.

        >>> s = Schema('2IB')
        >>> s.pack(1, 2, 3)
        b'\\x00\\x00\\x00\\x01\\x00\\x00\\x00\\x02\\x03'
        >>> s.unpack(b'\\x00\\x00\\x00\\x01\\x00\\x00\\x00\\x02\\x03')
        (1, 2, 3)
    """

    def __init__(self, format: str, word_size=None):
        if word_size is None:
            word_size = parser.default_word_size()
        order, fields = parser.parse(format, word_size=word_size)
        size, slots = calculate(fields)

        init = super().__setattr__
        init('_format', format)
        init('_byte_order', order)
        init('_prefix', order.prefix)
        init('_fields', tuple(fields))
        init('_size', size)
        init('_slots', slots)
        init('_word_size', word_size)

        logger.debug('built %r: size=%d slots=%d' % (self, size, len(slots)))

    def __setattr__(self, name, value):
        raise AttributeError(f"'{self.__class__.__name__}' is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"'{self.__class__.__name__}' is immutable")

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self._format)

    def __eq__(self, other):
        return isinstance(other, Schema) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def _key(self):
        return (self._prefix, self._word_size, self._fields)

    @property
    def format(self) -> str:
        return self._format

    @property
    def byte_order(self):
        return self._byte_order

    @property
    def prefix(self) -> str:
        '''The struct prefix ('<' or '>') used for the numbers'''
        return self._prefix

    @property
    def fields(self) -> Tuple[Field, ...]:
        return self._fields

    @property
    def word_size(self) -> int:
        '''Width in bytes of the pointers'''
        return self._word_size

    @property
    def slots(self) -> Tuple[Slot, ...]:
        return self._slots

    @property
    def arity(self) -> int:
        return len(self._slots)

    @property
    def layout(self) -> List[Tuple[Field, int, int]]:
        return offsets(self._fields)

    def size(self) -> int:
        return self._size

    def _check_arity(self, values):
        if len(values) != self.arity:
            raise LengthMismatch('%r takes %d values but %d were given' % (self, self.arity, len(values)))

    def pack(self, *values) -> bytes:
        stream = Stream(io.BytesIO(), flags='w')
        self._pack(stream, values)

        return stream.getvalue()

    def pack_into(self, sink, *values) -> None:
        '''Pack the values directly into the sink, that is anything with a
        write() method or a bytearray (that is extended).

        If a value is wrong what is before it is already written.'''
        self._pack(Stream(sink, flags='w'), values)

    def _pack(self, stream, values):
        self._check_arity(values)

        slot = 0
        for index, field in enumerate(self._fields):
            arity = field.arity
            logger.debug('packing %r at slot %d' % (field, slot))
            try:
                field.pack(stream, values[slot:slot + arity], self._prefix)
            except PackException as e:
                e.chain = [index] + [slot + _ for _ in e.chain]
                raise
            slot += arity

    def unpack(self, buffer) -> tuple:
        '''Unpack a bytes-like object that must be exactly size() bytes long.'''
        # len() of a memoryview counts items, not bytes
        buffer = memoryview(buffer).tobytes()
        if len(buffer) != self._size:
            raise LengthMismatch('Buffer length does not match the format '
                                 '(format size: %d, actual size: %d)' % (self._size, len(buffer)))

        return self._unpack(Stream(buffer))

    def unpack_from(self, source) -> tuple:
        '''Unpack reading from source, it doesn't know in advance how much data
        is available: if it ends too early UnexpectedEOF is raised.'''
        return self._unpack(Stream(source))

    def _unpack(self, stream):
        values = []
        for index, field in enumerate(self._fields):
            logger.debug('unpacking %r at slot %d' % (field, len(values)))
            try:
                values.extend(field.unpack(stream, self._prefix))
            except PackException as e:
                e.chain = [index] + [len(values) + _ for _ in e.chain]
                raise

        return tuple(values)
