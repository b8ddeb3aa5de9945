class ReadError(Exception):
    pass


class EndOfInput(ReadError, EOFError):
    pass


class InvalidData(ReadError, ValueError):
    pass


class InputIoError(ReadError):
    pass


class LayoutError(ReadError):
    pass


class FieldReadError(ReadError):

    def __init__(self, field, error):
        super().__init__(f'failed to read {field}: {error!r}')
        self.field = field
        self.error = error
