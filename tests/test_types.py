import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)) + '/../')

import numpy as np
import pytest

from fmtinput.exceptions import InvalidData
from fmtinput.types import Signed, TextParser, Unsigned, parse_digits, \
    char, i8, i32, i64, resolve_kind, resolve_text_parser, string, u8, u32, u64, usize


@pytest.mark.parametrize(
    'kind,src,expected',
    [
        (u32, b'12345', 12345),
        (u32, b'0', 0),
        (u32, b'007', 7),
        (u8, b'255', 255),
        (u8, b'256', 0),
        (u8, b'300', 44),
        (u64, b'18446744073709551615', 2**64 - 1),
        (u64, b'18446744073709551616', 0),
        (usize, b'42', 42),
    ],
)
def test_unsigned(kind, src, expected):
    value = kind.from_ascii(src)
    assert value == expected
    assert isinstance(value, kind.dtype.type)


def test_unsigned_wraps_long_numbers():
    digits = b'1' + b'0' * 39
    assert u64.from_ascii(digits) == 10**39 % 2**64


@pytest.mark.parametrize('src', [b'', b'+5', b'-5', b'12a', b'1_0', b' 1', b'\xd9\xa3'])
def test_unsigned_invalid(src):
    with pytest.raises(InvalidData):
        u32.from_ascii(src)


@pytest.mark.parametrize(
    'kind,src,expected',
    [
        (i32, b'+5', 5),
        (i32, b'-5', -5),
        (i32, b'-0', 0),
        (i32, b'17', 17),
        (i8, b'127', 127),
        (i8, b'128', -128),
        (i8, b'-128', -128),
        (i8, b'-129', 127),
        (i64, b'-9223372036854775808', -2**63),
    ],
)
def test_signed(kind, src, expected):
    value = kind.from_ascii(src)
    assert value == expected
    assert isinstance(value, kind.dtype.type)


@pytest.mark.parametrize('src', [b'', b'-', b'+', b'--1', b'+-1', b'1-'])
def test_signed_invalid(src):
    with pytest.raises(InvalidData):
        i32.from_ascii(src)


def test_parsers_accept_memoryview():
    view = memoryview(b'x -12 y')
    assert i32.from_ascii(view[2:5]) == -12
    assert char.from_ascii(view[:1]) == 'x'
    assert string.from_ascii(view[6:]) == 'y'


def test_char():
    assert char.from_ascii(b'b') == 'b'
    for src in [b'', b'ab', 'é'.encode('utf-8')]:
        with pytest.raises(InvalidData):
            char.from_ascii(src)


def test_string():
    assert string.from_ascii('héllo'.encode('utf-8')) == 'héllo'
    assert string.from_ascii(bytearray(b'Fino.')) == 'Fino.'
    with pytest.raises(InvalidData):
        string.from_ascii(b'\xff\xfe')


def test_text_parser():
    assert TextParser(float).from_text('1.5') == 1.5
    assert TextParser(int).from_ascii(b'-42') == -42
    with pytest.raises(InvalidData):
        TextParser(int).from_text('4 2')
    with pytest.raises(TypeError):
        TextParser('int')


def test_resolve_kind():
    assert resolve_kind('u32') is u32
    assert resolve_kind('char') is char
    assert resolve_kind('str').from_ascii(b'x') == 'x'
    assert resolve_kind(None) is string
    assert resolve_kind(int) is i64
    assert resolve_kind(str) is string
    assert resolve_kind(u8) is u8

    kind = resolve_kind(np.uint16)
    assert isinstance(kind, Unsigned)
    assert kind.from_ascii(b'65537') == 1
    assert isinstance(resolve_kind(np.int16), Signed)

    with pytest.raises(TypeError):
        resolve_kind('u128')
    with pytest.raises(TypeError):
        resolve_kind(float)
    with pytest.raises(TypeError):
        resolve_kind(3.5)


def test_resolve_text_parser():
    assert resolve_text_parser(str).from_text('a b') == 'a b'
    assert resolve_text_parser('u8').from_text('256') == 0
    with pytest.raises(InvalidData):
        resolve_text_parser(u8).from_text('+1')


def test_parse_digits_reads_view_in_place():
    data = bytearray(b'9' * 40 + b' x')
    view = memoryview(data)
    assert parse_digits(view[:40], u64.mask) == int('9' * 40) & u64.mask
    assert i8.from_ascii(view[38:40]) == 99

    # the rejected token is reported only up to a bounded prefix
    with pytest.raises(InvalidData) as exc_info:
        parse_digits(memoryview(b'1' * 1000 + b'x'), u64.mask)
    assert len(str(exc_info.value)) < 100
