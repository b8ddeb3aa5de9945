import io
import logging
import sys

from fmtinput.exceptions import EndOfInput
from fmtinput.scanning import CARRIAGE_RETURN, find_line_end, find_word_end, skip_whitespace
from fmtinput.sources import BufferedSource, ByteSource
from fmtinput.types import resolve_kind, resolve_text_parser


logger = logging.getLogger(__name__)


class Tokenizer:
    """
    Reads typed, whitespace or line delimited values from a byte source
    without materializing the whole input:
     1. skip leading whitespace (blank lines included, in line mode too)
     2. if the delimiter is inside the buffered chunk, parse the token straight
        from the borrowed view
     3. otherwise gather the token in a reusable buffer across refills

    Exactly one delimiter byte is consumed after each token. A token must be
    followed by a delimiter: input ending in the middle of a token raises
    EndOfInput.

    Not thread-safe; a tokenizer owns its source and must not be shared.
    """

    def __init__(self, source, block_size=None):
        if isinstance(source, ByteSource):
            self.source = source
        elif isinstance(source, (bytes, bytearray, memoryview)):
            self.source = BufferedSource(io.BytesIO(source), block_size=block_size)
        else:
            self.source = BufferedSource(source, block_size=block_size)

        # only holds a token that spans more than one chunk, and only for
        # the duration of a single read
        self.buf = bytearray()

    @classmethod
    def from_stdin(cls, block_size=None):
        return cls(sys.stdin.buffer, block_size=block_size)

    def _accumulate(self, chunk, find_end):
        # the token runs past the buffered chunk; gather it until a delimiter
        self.buf.clear()
        while True:
            self.buf += chunk
            self.source.consume(len(chunk))
            chunk = self.source.fill()
            ix = find_end(chunk)
            if ix >= 0:
                self.buf += chunk[:ix]
                self.source.consume(ix+1)
                logger.debug('token split across chunks, %d bytes', len(self.buf))
                return self.buf

    def read_word(self, kind=None):
        kind = resolve_kind(kind)
        skip_whitespace(self.source)
        chunk = self.source.fill()
        ix = find_word_end(chunk)
        if ix >= 0:
            value = kind.from_ascii(chunk[:ix])
            self.source.consume(ix+1)
            return value
        return kind.from_ascii(self._accumulate(chunk, find_word_end))

    def read_words(self, kind, count):
        kind = resolve_kind(kind)
        return [self.read_word(kind) for _ in range(count)]

    def iter_words(self, kind=None):
        # yield words until only whitespace is left
        kind = resolve_kind(kind)
        while True:
            try:
                skip_whitespace(self.source)
            except EndOfInput:
                return
            yield self.read_word(kind)

    @staticmethod
    def _parse_line(parser, line):
        # a CR right before the LF belongs to the line ending
        if len(line) > 0 and line[-1] == CARRIAGE_RETURN:
            line = line[:-1]
        return parser.from_ascii(line)

    def read_line(self, kind=str):
        parser = resolve_text_parser(kind)
        skip_whitespace(self.source)
        chunk = self.source.fill()
        ix = find_line_end(chunk)
        if ix >= 0:
            value = self._parse_line(parser, chunk[:ix])
            self.source.consume(ix+1)
            return value
        return self._parse_line(parser, self._accumulate(chunk, find_line_end))
