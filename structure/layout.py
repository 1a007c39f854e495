"""
The layout of a format is completely determined by its fields: the total
size in bytes and the list of slots, i.e. the arguments that pack() takes
and unpack() gives back, in order.
"""
from typing import List, NamedTuple, Optional, Tuple

from .enum import SlotKind


class Slot(NamedTuple):
    kind: SlotKind
    width: int
    tag: Optional[str] = None

    def __repr__(self):
        tag = '<%s>' % self.tag if self.tag is not None else ''
        return '<Slot(%s%s:%d)>' % (self.kind.name, tag, self.width)


def calculate(fields) -> Tuple[int, Tuple[Slot, ...]]:
    size = 0
    slots: List[Slot] = []
    for field in fields:
        size += field.size
        slots.extend(field.slots())

    return size, tuple(slots)


def offsets(fields) -> List[Tuple[object, int, int]]:
    '''It returns a list of (field, offset, size) for each field.'''
    result = []
    offset = 0
    for field in fields:
        result.append((field, offset, field.size))
        offset += field.size

    return result
