#!/usr/bin/env python3
import sys
import os
import logging

from structure import build
from structure.dump import dump
from structure.exceptions import StructureException

if 'DEBUG' in os.environ:
    logging.basicConfig()
    logger = logging.getLogger('structure')
    logger.setLevel(logging.DEBUG)


def usage(progname):
    print('usage: %s [--bits] <format> <file>' % progname)
    sys.exit(1)


if __name__ == '__main__':
    args = sys.argv[1:]
    bits = '--bits' in args
    if bits:
        args.remove('--bits')

    if len(args) != 2:
        usage(sys.argv[0])

    fmt, path = args

    with open(path, 'rb') as f:
        data = f.read()

    try:
        schema = build(fmt)
        for line in dump(schema, data[:schema.size()], bits=bits):
            print(line)
    except StructureException as e:
        print('error: %s' % e, file=sys.stderr)
        sys.exit(2)
