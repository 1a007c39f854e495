'''
Human readable view of a packed record: for each field of the schema its
offset, size, raw bytes (in hex and, optionally, in binary) and the
values unpacked from them.
'''
from typing import List

from bitstring import Bits


def dump_field(field, offset, raw, values, bits=False) -> str:
    line = f'{offset:08x} {len(raw):>6} {str(field):<12} {raw.hex():<24}'
    if bits:
        line += ' ' + Bits(bytes=raw).bin
    if values:
        line += ' ' + ', '.join(repr(_) for _ in values)

    return line.rstrip()


def dump(schema, data, bits=False) -> List[str]:
    '''Return the lines describing data as laid out by schema (raises the
    same exceptions of Schema.unpack() if data doesn't match).'''
    values = schema.unpack(data)
    data = bytes(data)

    lines = [f'{schema.format!r}: {schema.size()} bytes, {schema.byte_order.name}']
    slot = 0
    for field, offset, size in schema.layout:
        arity = field.arity
        lines.append(dump_field(field, offset, data[offset:offset + size], values[slot:slot + arity], bits=bits))
        slot += arity

    return lines
