import abc
import re

import numpy as np

from fmtinput.exceptions import InvalidData, LayoutError
from fmtinput.options import OPTIONS, get_optional_entry


SIGNS = b'+-'
MINUS = ord('-')

# digits folded into the accumulator per step, small enough for a fast int()
_DIGIT_STEP = 18

_DIGITS = re.compile(rb'[0-9]+')


def parse_digits(src, mask):
    # ASCII decimal digits to an integer reduced by mask, i.e. wrapping
    # result = result*10 + digit accumulation; src is validated in place and
    # only read _DIGIT_STEP bytes at a time
    src = memoryview(src)
    if _DIGITS.fullmatch(src) is None:
        raise InvalidData(f'not a decimal number: {bytes(src[:32])!r}')
    value = 0
    for start in range(0, len(src), _DIGIT_STEP):
        piece = src[start:start+_DIGIT_STEP]
        value = (value * 10**len(piece) + int(piece.tobytes())) & mask
    return value


class AsciiKind(abc.ABC):
    """
    A target type a finished token can be converted to. from_ascii() takes any
    bytes-like range (a borrowed memoryview on the fast path) and must not keep
    a reference to it.
    """

    name = None

    @abc.abstractmethod
    def from_ascii(self, src):
        pass

    def __repr__(self):
        return f'{self.__class__.__name__}({self.name!r})'


class Integer(AsciiKind):

    def __init__(self, dtype, name=None):
        self.dtype = np.dtype(dtype)
        info = np.iinfo(self.dtype)
        self.bits = info.bits
        self.signed = info.min < 0
        self.mask = (1 << self.bits) - 1
        self.name = name or self.dtype.name

    def wrap(self, value):
        # two's complement reduction to the dtype's width
        value &= self.mask
        if self.signed and value >> (self.bits - 1):
            value -= 1 << self.bits
        return self.dtype.type(value)


class Unsigned(Integer):

    def from_ascii(self, src):
        return self.wrap(parse_digits(src, self.mask))


class Signed(Integer):

    def from_ascii(self, src):
        negative = False
        if len(src) > 0 and src[0] in SIGNS:
            if len(src) == 1:
                raise InvalidData('sign without digits')
            negative = src[0] == MINUS
            src = memoryview(src)[1:]
        value = parse_digits(src, self.mask)
        return self.wrap(-value if negative else value)


class Char(AsciiKind):
    name = 'char'

    def from_ascii(self, src):
        if len(src) != 1:
            raise InvalidData(f'expected a single byte, got {len(src)}')
        return chr(src[0])


class Utf8String(AsciiKind):
    name = 'string'

    def from_ascii(self, src):
        try:
            return str(src, 'utf-8')
        except UnicodeDecodeError as e:
            raise InvalidData('invalid utf-8') from e


class TextParser(AsciiKind):

    def __init__(self, fn):
        if not callable(fn):
            raise TypeError(f'{fn!r} is not callable')
        self.fn = fn
        self.name = getattr(fn, '__name__', repr(fn))

    def from_text(self, text):
        try:
            return self.fn(text)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise InvalidData(f'{self.name} rejected {text!r}') from e

    def from_ascii(self, src):
        return self.from_text(Utf8String().from_ascii(src))


def _build_kind(name, settings):
    family = settings['family']
    if family == 'unsigned':
        return Unsigned(settings['dtype'], name=name)
    elif family == 'signed':
        return Signed(settings['dtype'], name=name)
    elif family == 'char':
        return Char()
    else:
        return Utf8String()


KINDS = {
    name: _build_kind(name, settings)
    for name, settings in OPTIONS['kind']['options'].items()
}

u8 = KINDS['u8']
u16 = KINDS['u16']
u32 = KINDS['u32']
u64 = KINDS['u64']
usize = KINDS['usize']
i8 = KINDS['i8']
i16 = KINDS['i16']
i32 = KINDS['i32']
i64 = KINDS['i64']
isize = KINDS['isize']
char = KINDS['char']
string = KINDS['string']


def resolve_kind(kind):
    # map the accepted spellings of a word kind onto an AsciiKind
    if isinstance(kind, AsciiKind):
        return kind
    elif kind is None or isinstance(kind, str):
        try:
            name, _ = get_optional_entry('kind', kind)
        except LayoutError as e:
            raise TypeError(f'cannot read a word as {kind!r}') from e
        return KINDS[name]
    elif kind is int:
        return i64
    elif kind is str:
        return string
    elif isinstance(kind, type) and issubclass(kind, np.integer):
        if issubclass(kind, np.unsignedinteger):
            return Unsigned(kind)
        return Signed(kind)
    raise TypeError(f'cannot read a word as {kind!r}')


def resolve_text_parser(kind):
    # line mode parses through the type's own text conversion
    if isinstance(kind, TextParser):
        return kind
    elif isinstance(kind, str):
        kind = resolve_kind(kind)
    if isinstance(kind, AsciiKind):
        return TextParser(lambda text: kind.from_ascii(text.encode('utf-8')))
    return TextParser(kind)
