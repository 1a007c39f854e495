import array
import io
import sys
from concurrent.futures import ThreadPoolExecutor

import pytest

import structure
from structure import build
from structure.core import Schema
from structure.enum import ByteOrder, SlotKind
from structure.exceptions import (
    InvalidWordSize,
    InvalidInput,
    LengthMismatch,
    TypeMismatch,
    UnexpectedEOF,
)
from structure.layout import Slot


def test_pack():
    assert build('I').pack(3) == bytes([0, 0, 0, 3])


def test_pack_into():
    sink = io.BytesIO()
    build('I').pack_into(sink, 3)

    assert sink.getvalue() == bytes([0, 0, 0, 3])

    buffer = bytearray(b'\xff')
    build('I').pack_into(buffer, 3)

    assert buffer == bytearray([0xff, 0, 0, 0, 3])


def test_unpack():
    assert build('I').unpack(bytes([0, 0, 0, 3])) == (3,)
    assert build('I').unpack(bytearray([0, 0, 0, 3])) == (3,)


def test_unpack_from():
    assert build('I').unpack_from(io.BytesIO(bytes([0, 0, 0, 3]))) == (3,)
    assert build('I').unpack_from(bytes([0, 0, 0, 3])) == (3,)


def test_unpack_from_leaves_the_rest():
    source = io.BytesIO(bytes([0, 0, 0, 3, 0xaa]))

    assert build('I').unpack_from(source) == (3,)
    assert source.read() == b'\xaa'


def test_2_values():
    assert build('If').pack(6, 5.2) == bytes([0, 0, 0, 6, 64, 166, 102, 102])

    a, b = build('If').unpack(bytes([0, 0, 0, 6, 64, 166, 102, 102]))

    assert a == 6
    assert b == pytest.approx(5.2)


def test_bool():
    assert build('?').pack(True) == bytes([1])
    assert build('?').pack(False) == bytes([0])
    assert build('?').unpack(bytes([1])) == (True,)
    assert build('?').unpack(bytes([0])) == (False,)


def test_unpack_bool_nonzero():
    for n in (2, 0x80, 0xff):
        assert build('?').unpack(bytes([n])) == (True,)


def test_big_endian():
    for fmt in ('I', '>I', '!I'):
        assert build(fmt).pack(1) == bytes([0, 0, 0, 1])
        assert build(fmt).unpack(bytes([0, 0, 0, 1])) == (1,)


def test_little_endian():
    assert build('<I').pack(1) == bytes([1, 0, 0, 0])
    assert build('<I').unpack(bytes([1, 0, 0, 0])) == (1,)


def test_native_endian():
    s = build('=I')

    assert s.byte_order == ByteOrder.NATIVE

    expected = build('<I') if sys.byteorder == 'little' else build('>I')

    assert s.pack(1) == expected.pack(1)
    assert s.unpack(expected.pack(1)) == (1,)
    assert s == expected


def test_repeat_count():
    assert build('2B2?').pack(2, 3, True, False) == bytes([2, 3, 1, 0])
    assert build('2B2?').unpack(bytes([2, 3, 1, 0])) == (2, 3, True, False)


def test_repeat_count_meaning():
    """For numbers the count repeats the type, for buffers it's the length."""
    s = build('3I')

    assert s.size() == 12
    assert s.arity == 3

    s = build('3S')

    assert s.size() == 3
    assert s.arity == 1
    assert s.slots == (Slot(SlotKind.BYTES, 3),)


def test_buffer():
    assert build('3s').pack(bytes([1, 2, 3])) == bytes([1, 2, 3])
    assert build('s').pack(bytes([4])) == bytes([4])
    assert build('0s').pack(b'') == b''
    assert build('3s').pack(bytes([8, 9])) == bytes([8, 9, 0])

    with pytest.raises(InvalidInput):
        build('2s').pack(bytes([5, 6, 7]))


def test_unpack_buffer():
    assert build('3s').unpack(bytes([1, 2, 3])) == (bytes([1, 2, 3]),)
    assert build('s').unpack(bytes([4])) == (bytes([4]),)
    assert build('0s').unpack(b'') == (b'',)

    # padding is not trimmed
    assert build('3s').unpack(bytes([8, 9, 0])) == (bytes([8, 9, 0]),)

    with pytest.raises(InvalidInput):
        build('2s').unpack(bytes([5, 6, 7]))

    with pytest.raises(InvalidInput):
        build('3s').unpack(bytes([8, 9]))


def test_fixed_buffer():
    assert build('3S').pack(bytes([1, 2, 3])) == bytes([1, 2, 3])
    assert build('S').pack(bytes([4])) == bytes([4])
    assert build('0S').pack(b'') == b''

    with pytest.raises(InvalidInput):
        build('2S').pack(bytes([5, 6, 7]))

    with pytest.raises(InvalidInput):
        build('3S').pack(bytes([8, 9]))


def test_unpack_fixed_buffer():
    assert build('3S').unpack(bytes([1, 2, 3])) == (bytes([1, 2, 3]),)
    assert build('S').unpack(bytes([4])) == (bytes([4]),)
    assert build('0S').unpack(b'') == (b'',)

    with pytest.raises(InvalidInput):
        build('2S').unpack(bytes([5, 6, 7]))

    with pytest.raises(InvalidInput):
        build('3S').unpack(bytes([8, 9]))


def test_padding():
    s = build('BxB')

    assert s.size() == 3
    assert s.arity == 2
    assert s.pack(1, 2) == b'\x01\x00\x02'
    assert s.unpack(b'\x01\xff\x02') == (1, 2)
    assert build('10x').pack() == b'\x00' * 10


def test_pointer():
    s = build('=P')
    handle = 0x1234

    assert s.size() == s.word_size
    assert s.pack(handle) == handle.to_bytes(s.word_size, sys.byteorder)
    assert s.unpack(s.pack(handle)) == (handle,)


def test_typed_pointer():
    s = build('=P<u32>2P<u8>')

    assert [_.tag for _ in s.slots] == ['u32', 'u8', 'u8']
    assert s.unpack(s.pack(6, 7, 8)) == (6, 7, 8)


def test_pointer_word_size():
    s = build('=2P', word_size=4)

    assert s.size() == 8
    assert s.pack(1, 2) == build('=2I').pack(1, 2)

    assert build('=P', word_size=8).size() == 8


def test_size_does_not_depend_on_values():
    s = build('<IH4s2xd?')

    assert s.size() == 4 + 2 + 4 + 2 + 8 + 1
    assert len(s.pack(1, 2, b'', 1.5, True)) == s.size()
    assert len(s.pack(1, 2, b'abcd', 1.5, True)) == s.size()


def test_layout():
    s = build('I3sx?')

    assert [(str(field), offset, size) for field, offset, size in s.layout] == [
        ('1I', 0, 4),
        ('3s', 4, 3),
        ('1x', 7, 1),
        ('1?', 8, 1),
    ]


def test_wrong_number_of_values():
    s = build('2I')

    with pytest.raises(LengthMismatch):
        s.pack(1)

    with pytest.raises(LengthMismatch):
        s.pack(1, 2, 3)

    with pytest.raises(LengthMismatch):
        s.pack_into(io.BytesIO(), 1)


def test_wrong_type():
    with pytest.raises(TypeMismatch) as excinfo:
        build('I').pack('a')

    assert excinfo.value.chain == [0, 0]

    with pytest.raises(TypeMismatch) as excinfo:
        build('Bx2B').pack(1, 2, 'x')

    assert excinfo.value.chain == [2, 2]

    with pytest.raises(TypeMismatch):
        build('?').pack(None)

    with pytest.raises(TypeMismatch):
        build('4s').pack('abcd')


def test_out_of_range():
    for fmt, value in (('B', 256), ('b', -129), ('I', -1), ('H', 1 << 16)):
        with pytest.raises(InvalidInput):
            build(fmt).pack(value)


def test_pack_into_is_not_transactional():
    sink = io.BytesIO()

    with pytest.raises(InvalidInput) as excinfo:
        build('H2s').pack_into(sink, 1, b'abc')

    assert excinfo.value.chain == [1, 1]
    assert sink.getvalue() == b'\x00\x01'


def test_unpack_from_short():
    with pytest.raises(UnexpectedEOF) as excinfo:
        build('IH').unpack_from(io.BytesIO(b'\x00' * 5))

    assert excinfo.value.chain == [1]


def test_unpack_wrong_length():
    with pytest.raises(LengthMismatch):
        build('IH').unpack(b'\x00' * 5)

    with pytest.raises(LengthMismatch):
        build('IH').unpack(b'\x00' * 7)


def test_unpack_memoryview_of_wider_items():
    values = array.array('H', [3, 4])

    assert build('=2H').unpack(memoryview(values)) == (3, 4)

    with pytest.raises(LengthMismatch):
        build('=H').unpack(memoryview(values))


def test_word_size_from_environment(monkeypatch):
    monkeypatch.setenv('STRUCTURE_WORD_SIZE', '4')

    assert Schema('=P').size() == 4

    monkeypatch.setenv('STRUCTURE_WORD_SIZE', 'kebab')
    with pytest.raises(InvalidWordSize):
        Schema('=P')


def test_empty_format():
    s = build('')

    assert s.size() == 0
    assert s.pack() == b''
    assert s.unpack(b'') == ()


def test_schema_is_immutable():
    s = build('I')

    with pytest.raises(AttributeError):
        s._size = 5

    with pytest.raises(AttributeError):
        s.format = 'H'

    with pytest.raises(AttributeError):
        del s._fields

    assert s.size() == 4


def test_build_is_cached():
    assert build('2IB') is build('2IB')
    assert build('=P', word_size=4) is not build('=P', word_size=8)


def test_schema_equality():
    assert Schema('I') == Schema('>I') == Schema('!I')
    assert Schema('I') != Schema('<I')
    assert Schema('3s') != Schema('3S')
    assert hash(Schema('I')) == hash(Schema('!I'))
    assert repr(Schema('!I')) == "<Schema('!I')>"


def test_shared_between_threads():
    s = build('<IH')

    def roundtrip(n):
        return s.unpack(s.pack(n, n & 0xffff))

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = list(executor.map(roundtrip, range(1000)))

    assert results == [(n, n & 0xffff) for n in range(1000)]


def test_module_functions():
    assert structure.calcsize('2IB') == 9
    assert structure.pack('2IB', 1, 2, 3) == bytes([0, 0, 0, 1, 0, 0, 0, 2, 3])
    assert structure.unpack('2IB', bytes([0, 0, 0, 1, 0, 0, 0, 2, 3])) == (1, 2, 3)

    sink = io.BytesIO()
    structure.pack_into('<H', sink, 0x0102)

    assert sink.getvalue() == b'\x02\x01'
    assert structure.unpack_from('<H', io.BytesIO(b'\x02\x01')) == (0x0102,)
