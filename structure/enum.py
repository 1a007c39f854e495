import sys
from enum import Enum, auto


class ByteOrder(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()
    NETWORK       = auto()
    NATIVE        = auto()

    @classmethod
    def from_marker(cls, marker):
        return _MARKERS.get(marker)

    @property
    def prefix(self):
        '''The struct prefix to use, NATIVE is resolved with the running platform.'''
        if self == ByteOrder.NATIVE:
            return '<' if sys.byteorder == 'little' else '>'

        return '<' if self == ByteOrder.LITTLE_ENDIAN else '>'


_MARKERS = {
    '=': ByteOrder.NATIVE,
    '<': ByteOrder.LITTLE_ENDIAN,
    '>': ByteOrder.BIG_ENDIAN,
    '!': ByteOrder.NETWORK,
}


class SlotKind(Enum):
    '''What a single argument of pack() (or element returned by unpack()) is.'''
    SIGNED_INT   = auto()
    UNSIGNED_INT = auto()
    BOOL         = auto()
    FLOAT        = auto()
    BYTES        = auto()
    OPAQUE_WORD  = auto()
