import abc
import io
import logging

from fmtinput.exceptions import EndOfInput, InputIoError
from fmtinput.options import get_block_size


logger = logging.getLogger(__name__)


class ByteSource(abc.ABC):
    """
    Pull-based supplier of raw bytes:
     - fill() returns the unconsumed bytes as a non-empty memoryview, reading
       from the transport only once everything buffered has been consumed
     - consume(n) drops the first n bytes of the last returned view

    A view returned by fill() is only valid until the next fill()/consume().
    """

    def __init__(self):
        self._view = memoryview(b'')
        self._pos = 0

    @abc.abstractmethod
    def read_block(self):
        # return the next bytes-like block from the transport, empty at EOF
        pass

    def fill(self):
        if self._pos >= len(self._view):
            block = self.read_block()
            if not block:
                raise EndOfInput
            logger.debug('refilled %d bytes', len(block))
            self._view = memoryview(block)
            self._pos = 0
        return self._view[self._pos:]

    def consume(self, n):
        if n < 0 or self._pos + n > len(self._view):
            raise ValueError(f'cannot consume {n} bytes, {len(self._view) - self._pos} buffered')
        self._pos += n


class BufferedSource(ByteSource):

    def __init__(self, io_buffer, block_size=None):
        super().__init__()
        if not isinstance(io_buffer, io.IOBase):
            raise InputIoError(f'expected an io buffer, got {type(io_buffer).__name__}')
        if not io_buffer.readable():
            raise InputIoError('io buffer is not readable')
        if isinstance(io_buffer, io.TextIOBase):
            raise InputIoError('io buffer must be binary')
        self.io_buffer = io_buffer
        self.block_size = get_block_size(block_size)

        # read1 returns what is available instead of waiting for a full block
        self._read = getattr(io_buffer, 'read1', io_buffer.read)

    def read_block(self):
        return self._read(self.block_size)


class ChunkedSource(ByteSource):

    def __init__(self, chunks):
        super().__init__()
        self._chunks = iter(chunks)

    def read_block(self):
        for chunk in self._chunks:
            if chunk:
                return chunk
        return b''
