"""
A Field is the unit of a format string: a type character with its optional
repeat count. Each kind of field knows how many bytes it takes in the stream,
how many arguments it takes at the pack()/unpack() boundary and how to
pack/unpack itself.

The repeat count has two meanings: for numbers, booleans and pointers it's
the number of independent values ("3I" are three integers), for buffers
and padding it's the length in bytes of the one field ("3s" is one buffer
of three bytes).
"""
import logging
import struct
from typing import List

from .enum import SlotKind
from .exceptions import InvalidInput, TypeMismatch
from .layout import Slot


logger = logging.getLogger(__name__)

BYTES_TYPES = (bytes, bytearray, memoryview)


class Field(object):
    """Base class to subclass from"""

    format = None

    def __init__(self, repeat=1):
        self.repeat = repeat

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self)

    def __str__(self):
        return '%d%s' % (self.repeat, self.format)

    def _key(self):
        return (self.__class__, self.format, self.repeat)

    def __eq__(self, other):
        return isinstance(other, Field) and self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    @property
    def size(self) -> int:
        raise NotImplementedError(f"method {self.__class__.__name__}.size not implemented")

    @property
    def arity(self) -> int:
        return len(self.slots())

    def slots(self) -> List[Slot]:
        raise NotImplementedError(f"method {self.__class__.__name__}.slots() not implemented")

    def pack(self, stream, values, prefix):
        '''Write the values (exactly arity of them) into the stream using
        the struct prefix indicated for the byte order.'''
        raise NotImplementedError('you need to implement this in the subclass')

    def unpack(self, stream, prefix) -> list:
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    numbers to/from bytes, one value for each repetition.
    """
    FORMATS = ''

    def __init__(self, format, repeat=1):
        if format not in self.FORMATS:
            raise ValueError('\'%s\' is not a format for %s' % (format, self.__class__.__name__))
        self.format = format
        super().__init__(repeat=repeat)

    @property
    def width(self) -> int:
        return struct.calcsize('<' + self.get_format())

    @property
    def size(self):
        return self.width * self.repeat

    @property
    def arity(self):
        return self.repeat

    def get_format(self):
        '''The struct format of a single value'''
        return self.format

    def slot(self) -> Slot:
        raise NotImplementedError()

    def slots(self):
        return [self.slot()] * self.repeat

    def check(self, value, index):
        '''Raise TypeMismatch if the value cannot go in this field'''
        pass

    def encode(self, value):
        return value

    def decode(self, value):
        return value

    def pack(self, stream, values, prefix):
        fmt = prefix + self.get_format()
        for index, value in enumerate(values):
            self.check(value, index)
            try:
                raw = struct.pack(fmt, self.encode(value))
            except (struct.error, OverflowError) as e:
                logger.debug(e)
                raise InvalidInput('value %r does not fit in \'%s\': %s' % (value, self.format, e), chain=[index])
            stream.write_all(raw)

    def unpack(self, stream, prefix):
        fmt = prefix + self.get_format()
        return [self.decode(struct.unpack(fmt, stream.read_exact(self.width))[0]) for _ in range(self.repeat)]


class IntegerField(StructField):
    """Signed (lowercase) or unsigned (uppercase) integers of 1, 2, 4 or 8 bytes."""
    FORMATS = 'bBhHiIqQ'

    @property
    def signed(self) -> bool:
        return self.format.islower()

    def slot(self):
        return Slot(SlotKind.SIGNED_INT if self.signed else SlotKind.UNSIGNED_INT, self.width)

    def check(self, value, index):
        if not isinstance(value, int):
            raise TypeMismatch('\'%s\' expects an int, not %s' % (self.format, type(value).__name__), chain=[index])


class FloatField(StructField):
    """IEEE-754 single (f) and double (d) precision."""
    FORMATS = 'fd'

    def slot(self):
        return Slot(SlotKind.FLOAT, self.width)

    def check(self, value, index):
        if not isinstance(value, (int, float)):
            raise TypeMismatch('\'%s\' expects a float, not %s' % (self.format, type(value).__name__), chain=[index])


class BooleanField(StructField):
    """One byte: packing writes only 0x00 or 0x01, unpacking considers
    True any value different from zero."""
    FORMATS = '?'

    def get_format(self):
        return 'B'

    def slot(self):
        return Slot(SlotKind.BOOL, 1)

    def check(self, value, index):
        if not isinstance(value, bool):
            raise TypeMismatch('\'?\' expects a bool, not %s' % type(value).__name__, chain=[index])

    def encode(self, value):
        return 1 if value else 0

    def decode(self, value):
        return value != 0


class PointerField(StructField):
    """An opaque, word sized, unsigned handle.

    It makes sense only in native byte order and its width is the configured
    word size (4 or 8 bytes). The tag (as in "P<u32>") is only a label for the
    caller and has no effect on the encoding. The value is never dereferenced.
    """
    FORMATS = 'P'

    def __init__(self, repeat=1, tag=None, word_size=8):
        self.tag = tag
        self.word_size = word_size
        super().__init__('P', repeat=repeat)

    def __str__(self):
        return '%dP%s' % (self.repeat, '<%s>' % self.tag if self.tag is not None else '')

    def _key(self):
        return super()._key() + (self.tag, self.word_size)

    def get_format(self):
        return 'Q' if self.word_size == 8 else 'I'

    def slot(self):
        return Slot(SlotKind.OPAQUE_WORD, self.word_size, self.tag)

    def check(self, value, index):
        if not isinstance(value, int):
            raise TypeMismatch('\'P\' expects an int handle, not %s' % type(value).__name__, chain=[index])


class StringField(Field):
    """Represent a contiguous chunk of bytes, the repeat count is its length.

    The value can be shorter than the length, the remaining is filled with
    zeros; this means that unpacking doesn't give back the original value
    but the padded one.
    """
    format = 's'

    def __init__(self, length=1):
        super().__init__(repeat=length)

    def __len__(self):
        return self.length

    @property
    def length(self) -> int:
        return self.repeat

    @property
    def size(self):
        return self.length

    def slots(self):
        return [Slot(SlotKind.BYTES, self.length)]

    def check_length(self, value):
        if len(value) > self.length:
            raise InvalidInput('Buffer length does not match the format '
                               '(buffer size in format: %d, actual size: %d)' % (self.length, len(value)), chain=[0])

    def pack(self, stream, values, prefix):
        value, = values
        if not isinstance(value, BYTES_TYPES):
            raise TypeMismatch('\'%s\' expects bytes, not %s' % (self.format, type(value).__name__), chain=[0])

        value = bytes(value)
        self.check_length(value)

        stream.write_all(value)
        if len(value) != self.length:
            stream.write_all(b'\x00' * (self.length - len(value)))

    def unpack(self, stream, prefix):
        return [stream.read_exact(self.length)]


class FixedLengthString(StringField):
    """This field can contain only binary strings with exactly its length."""
    format = 'S'

    def check_length(self, value):
        if len(value) != self.length:
            raise InvalidInput(f"'{self}' can only accept binary strings of length {self.length}, "
                               f"not {len(value)}", chain=[0])


class PaddingField(Field):
    '''Zero bytes in the stream, invisible at the pack()/unpack() boundary'''
    format = 'x'

    def __init__(self, length=1):
        super().__init__(repeat=length)

    @property
    def size(self):
        return self.repeat

    def slots(self):
        return []

    def pack(self, stream, values, prefix):
        stream.write_all(b'\x00' * self.size)

    def unpack(self, stream, prefix):
        stream.read_exact(self.size)
        return []


def build_field(format, repeat=1, tag=None, word_size=8) -> Field:
    '''Return the field for the type character format.'''
    if format in IntegerField.FORMATS:
        return IntegerField(format, repeat=repeat)
    elif format in FloatField.FORMATS:
        return FloatField(format, repeat=repeat)
    elif format in BooleanField.FORMATS:
        return BooleanField(format, repeat=repeat)
    elif format == PointerField.FORMATS:
        return PointerField(repeat=repeat, tag=tag, word_size=word_size)
    elif format == StringField.format:
        return StringField(repeat)
    elif format == FixedLengthString.format:
        return FixedLengthString(repeat)
    elif format == PaddingField.format:
        return PaddingField(repeat)

    raise ValueError('unknown format character \'%s\'' % format)
