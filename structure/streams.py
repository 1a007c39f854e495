import io
import logging

from .exceptions import UnexpectedEOF, ShortWrite


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/file-like objects to
    uniform their properties: mainly we need exact reads and complete
    writes, whatever the underlying object does.

    The wrapped object is never closed, it belongs to the caller.'''
    def __init__(self, obj=b'', flags='r'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self._type = type(obj)
        self.flags = flags
        self.obj = obj

        init_method = getattr(self, 'init_%s' % self.obj.__class__.__name__, None)

        if init_method:
            init_method()
        elif not hasattr(self.obj, 'write' if 'w' in self.flags else 'read'):
            raise TypeError('\'%s\' is not a stream nor a bytes-like object' % self._type.__name__)

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def _check_readonly(self):
        if 'w' in self.flags:
            raise TypeError('cannot write into an immutable \'%s\'' % self._type.__name__)

    def init_bytes(self):
        '''We think these are raw bytes'''
        self._check_readonly()
        self.obj = io.BytesIO(self.obj)

    def init_memoryview(self):
        self._check_readonly()
        self.obj = io.BytesIO(self.obj.tobytes())

    def init_bytearray(self):
        '''When writing, what we write is appended to the bytearray'''
        if 'w' not in self.flags:
            self.obj = io.BytesIO(bytes(self.obj))
            return

        self.obj = _BytearrayWriter(self.obj)

    def read_exact(self, n):
        '''Read exactly n bytes, looping on short reads since sockets and pipes
        are allowed to return less than asked.'''
        chunks = []
        missing = n
        while missing > 0:
            chunk = self.obj.read(missing)
            if not chunk:
                logger.debug('short read: %d bytes missing' % missing)
                raise UnexpectedEOF('stream ended after %d of %d bytes' % (n - missing, n))
            chunks.append(chunk)
            missing -= len(chunk)

        return b''.join(chunks)

    def write_all(self, data):
        written = self.obj.write(data)

        # raw streams return None when the write would block, nothing was written
        if written is None and isinstance(self.obj, io.RawIOBase):
            raise ShortWrite('the stream would block, 0 of %d bytes were written' % len(data))

        # raw streams tell how much they wrote, buffered ones write all or raise
        if written is not None and written < len(data):
            raise ShortWrite('only %d of %d bytes were written' % (written, len(data)))

        return len(data)

    def getvalue(self):
        return self.obj.getvalue()


class _BytearrayWriter(object):

    def __init__(self, buffer):
        self.buffer = buffer

    def write(self, data):
        self.buffer.extend(data)
        return len(data)
