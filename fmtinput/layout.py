"""
Declarative reading of several values at once. A Layout records named fields
in order and reads them from a Tokenizer into a dict:

    layout = (
        Layout()
        .field('n', 'm', kind='usize')
        .field('edges', kind=Seq(Tuple('usize1', 'usize1'), 'm'))
    )
    values = layout.read(Tokenizer(io_buffer))

Field kinds are word kinds ('u32', 'char', str, int, numpy integer types,
AsciiKind instances) or one of the Field classes below. The names 'usize1'
and 'line' are shorthands for Usize1() and Line().
"""

import abc
import logging

from fmtinput.exceptions import FieldReadError, InvalidData, LayoutError, ReadError
from fmtinput.tokenizer import Tokenizer
from fmtinput.types import resolve_kind, resolve_text_parser, usize


logger = logging.getLogger(__name__)


class Field(abc.ABC):

    @abc.abstractmethod
    def read(self, tokenizer, values):
        # values holds the named fields read so far
        pass

    def references(self):
        # names of earlier fields this field depends on
        return set()


class Word(Field):

    def __init__(self, kind=None):
        self.kind = resolve_kind(kind)

    def read(self, tokenizer, values):
        return tokenizer.read_word(self.kind)


class Usize1(Field):
    """One-based index converted to zero-based."""

    def read(self, tokenizer, values):
        value = tokenizer.read_word(usize)
        if value == 0:
            raise InvalidData('one-based index is 0')
        return value - 1


class Line(Field):

    def __init__(self, kind=str):
        self.parser = resolve_text_parser(kind)

    def read(self, tokenizer, values):
        return tokenizer.read_line(self.parser)


class SkipLine(Line):

    def read(self, tokenizer, values):
        super().read(tokenizer, values)


class Array(Field):
    """Fixed number of values, read into a tuple."""

    def __init__(self, kind, length):
        if not isinstance(length, int) or length < 0:
            raise LayoutError(f'invalid array length: {length!r}')
        self.field = as_field(kind)
        self.length = length

    def read(self, tokenizer, values):
        return tuple(self.field.read(tokenizer, values) for _ in range(self.length))

    def references(self):
        return self.field.references()


class Seq(Field):
    """
    Runtime-sized sequence, read into a list. count is an int, the name of an
    earlier field, or a callable taking the values read so far.
    """

    def __init__(self, kind, count):
        if not (isinstance(count, (int, str)) or callable(count)):
            raise LayoutError(f'invalid sequence count: {count!r}')
        self.field = as_field(kind)
        self.count = count

    def get_count(self, values):
        if isinstance(self.count, str):
            return int(values[self.count])
        elif callable(self.count):
            return int(self.count(values))
        return self.count

    def read(self, tokenizer, values):
        count = self.get_count(values)
        if isinstance(self.field, Word):
            return tokenizer.read_words(self.field.kind, count)
        return [self.field.read(tokenizer, values) for _ in range(count)]

    def references(self):
        refs = set(self.field.references())
        if isinstance(self.count, str):
            refs.add(self.count)
        return refs


class Tuple(Field):

    def __init__(self, *kinds):
        self.fields = [as_field(k) for k in kinds]

    def read(self, tokenizer, values):
        return tuple(f.read(tokenizer, values) for f in self.fields)

    def references(self):
        return set().union(*(f.references() for f in self.fields))


class Call(Field):
    """Escape hatch: fn(tokenizer, values) reads the field itself."""

    def __init__(self, fn):
        self.fn = fn

    def read(self, tokenizer, values):
        return self.fn(tokenizer, values)


SHORTHANDS = {
    'usize1': Usize1,
    'line': Line,
}


def as_field(kind):
    if isinstance(kind, Field):
        return kind
    if isinstance(kind, str) and kind in SHORTHANDS:
        return SHORTHANDS[kind]()
    try:
        return Word(kind)
    except TypeError as e:
        raise LayoutError(str(e)) from e


class Layout:

    def __init__(self):
        # ordered (name, field) pairs, name is None for skipped lines
        self.fields = []

    def field(self, *names, kind=None):
        if not names:
            raise LayoutError('a field needs a name')
        field = as_field(kind)
        known = {name for name, _ in self.fields}
        missing = field.references() - known
        if missing:
            raise LayoutError(f'unknown count reference: {", ".join(sorted(missing))}')
        for name in names:
            if name in known:
                raise LayoutError(f'duplicate field: {name}')
            known.add(name)
            self.fields.append((name, field))
        return self

    def skip_line(self):
        self.fields.append((None, SkipLine()))
        return self

    def read(self, tokenizer):
        values = {}
        for name, field in self.fields:
            try:
                value = field.read(tokenizer, values)
            except ReadError as e:
                raise FieldReadError(name or 'line', e) from e
            if name is not None:
                logger.debug('read field %s', name)
                values[name] = value
        return values


def read_input(layout, source=None):
    # read one layout from source, or from standard input
    if source is None:
        tokenizer = Tokenizer.from_stdin()
    elif isinstance(source, Tokenizer):
        tokenizer = source
    else:
        tokenizer = Tokenizer(source)
    return layout.read(tokenizer)
