from typing import Optional


class FinnError(Exception):
    """Base class for every failure the FinnLang pipeline reports."""
    kind = 'error'

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is not None:
            return f"{self.message} at {self.line}:{self.column}"
        return self.message


class ParseFailure(FinnError):
    """Raised when the grammar cannot produce a usable program."""
    kind = 'parse'


class RuntimeFailure(FinnError):
    """Raised for fatal conditions during evaluation."""
    kind = 'runtime'
