"""
Parsing of the format strings.

    format := [order-marker] field*
    field  := [digit+] type-char [ '<' tag '>' ]

where the tag is allowed only after 'P'. Since the text is supposed to be
written by the programmer, any error is fatal and raised as a subclass of
ConstructionError.
"""
import logging
import os
import struct
import sys
from typing import List, Tuple

from .enum import ByteOrder
from .fields import Field, build_field
from .exceptions import (
    UnknownFormatCharacter,
    DanglingRepeatCount,
    UnterminatedPointerTag,
    EmptyPointerTag,
    NonNativePointer,
    RepeatCountOverflow,
    InvalidWordSize,
)


logger = logging.getLogger(__name__)

TYPE_CHARACTERS = 'bB?hHiIqQfdsSxP'
DIGITS = '0123456789'
WORD_SIZES = (4, 8)

# a schema can't have more arguments than this
MAX_SLOTS = 1 << 24
MAX_REPEAT_DIGITS = len(str(sys.maxsize))


def default_word_size():
    '''Width of 'P': STRUCTURE_WORD_SIZE if set, otherwise the one of the running interpreter.'''
    value = os.environ.get('STRUCTURE_WORD_SIZE')
    if value is None:
        return struct.calcsize('P')

    try:
        return int(value)
    except ValueError:
        raise InvalidWordSize('STRUCTURE_WORD_SIZE must be 4 or 8, not %r' % value)


def check_word_size(word_size, format=None):
    if word_size not in WORD_SIZES:
        raise InvalidWordSize('word size must be 4 or 8, not %r' % (word_size,), format=format)

    return word_size


def parse_byte_order(text: str) -> Tuple[ByteOrder, int]:
    '''Return the byte order and where the fields start.'''
    order = ByteOrder.from_marker(text[:1])
    if order is None:
        return ByteOrder.BIG_ENDIAN, 0

    return order, 1


def parse_tag(text: str, position: int) -> Tuple[str, int]:
    '''Parse "<tag>" starting at position (that is the '<') and return the tag
    and the position after the '>'.'''
    end = text.find('>', position + 1)
    if end == -1:
        raise UnterminatedPointerTag('pointer type must end with \'>\'', format=text, position=position)

    tag = text[position + 1:end]
    if not tag:
        raise EmptyPointerTag('pointer type cannot be empty', format=text, position=position)

    return tag, end + 1


def parse(text: str, word_size=None) -> Tuple[ByteOrder, List[Field]]:
    word_size = check_word_size(default_word_size() if word_size is None else word_size, format=text)
    order, position = parse_byte_order(text)

    logger.debug('parsing \'%s\' with byte order %s' % (text, order.name))

    fields = []
    slots = 0
    length = len(text)
    while position < length:
        start = position
        while position < length and text[position] in DIGITS:
            position += 1

        digits = text[start:position]

        if position == length:
            raise DanglingRepeatCount('no format character is followed by the number %s' % digits,
                                      format=text, position=start)

        c = text[position]
        if c not in TYPE_CHARACTERS:
            raise UnknownFormatCharacter('unknown format \'%s\'' % c, format=text, position=position)

        # int() refuses strings too long, check the digits before converting
        if len(digits.lstrip('0')) > MAX_REPEAT_DIGITS or (digits and int(digits) > sys.maxsize):
            raise RepeatCountOverflow('repeat count %s is too big' % digits[:MAX_REPEAT_DIGITS + 1],
                                      format=text, position=start)

        repeat = int(digits) if digits else 1

        position += 1

        tag = None
        if c == 'P':
            if order != ByteOrder.NATIVE:
                raise NonNativePointer('pointer can be used only if the endianness is native, '
                                       'to change the endianness to native start the format with \'=\'',
                                       format=text, position=position - 1)
            if text[position:position + 1] == '<':
                tag, position = parse_tag(text, position)

        field = build_field(c, repeat=repeat, tag=tag, word_size=word_size)

        slots += field.arity
        if slots > MAX_SLOTS:
            raise RepeatCountOverflow('format takes more than %d values' % MAX_SLOTS, format=text, position=start)

        logger.debug(' parsed field %r' % field)
        fields.append(field)

    return order, fields
