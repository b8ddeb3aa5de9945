import re


CARRIAGE_RETURN = ord('\r')

# ASCII whitespace is tab, line feed, form feed, carriage return and space;
# patterns are searched in place over the borrowed view, stopping at the
# first match
_WORD_START = re.compile(rb'[^\t\n\x0c\r ]')
_WORD_END = re.compile(rb'[\t\n\x0c\r ]')
_LINE_END = re.compile(b'\n')


def _first(pattern, chunk):
    match = pattern.search(chunk)
    return match.start() if match else -1


def find_word_start(chunk):
    return _first(_WORD_START, chunk)


def find_word_end(chunk):
    return _first(_WORD_END, chunk)


def find_line_end(chunk):
    return _first(_LINE_END, chunk)


def skip_whitespace(source):
    # advance the source past a run of whitespace, which may span several chunks
    while True:
        chunk = source.fill()
        ix = find_word_start(chunk)
        if ix >= 0:
            source.consume(ix)
            return
        source.consume(len(chunk))
