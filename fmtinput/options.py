import numpy as np

from fmtinput.exceptions import LayoutError


OPTIONS = {
    'block_size': {
        # bytes requested from the transport per refill
        'default': 64*1024,
    },
    'kind': {
        'default': 'string',
        'options': {
            'u8': {'family': 'unsigned', 'dtype': np.uint8},
            'u16': {'family': 'unsigned', 'dtype': np.uint16},
            'u32': {'family': 'unsigned', 'dtype': np.uint32},
            'u64': {'family': 'unsigned', 'dtype': np.uint64},
            'usize': {'family': 'unsigned', 'dtype': np.uintp},
            'i8': {'family': 'signed', 'dtype': np.int8},
            'i16': {'family': 'signed', 'dtype': np.int16},
            'i32': {'family': 'signed', 'dtype': np.int32},
            'i64': {'family': 'signed', 'dtype': np.int64},
            'isize': {'family': 'signed', 'dtype': np.intp},
            'char': {'family': 'char'},
            'string': {'family': 'string'},
            'str': {'family': 'string'},
        }
    },
}


def get_optional_entry(key, val):
    if val is None:
        if 'default' not in OPTIONS[key]:
            raise LayoutError(f'{key} has no default')
        val = OPTIONS[key]['default']
    if 'options' in OPTIONS[key] and val not in OPTIONS[key]['options']:
        raise LayoutError(f'unknown {key}: {val!r}')
    settings = OPTIONS[key]['options'][val] if 'options' in OPTIONS[key] else {}
    return val, settings


def get_block_size(block_size=None):
    block_size, _ = get_optional_entry('block_size', block_size)
    if not isinstance(block_size, int) or block_size <= 0:
        raise ValueError(f'block_size must be a positive integer, got {block_size!r}')
    return block_size
