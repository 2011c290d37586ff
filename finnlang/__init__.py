# FinnLang language package
# This package provides a lexer, parser and interpreter for the FinnLang language.
from .errors import FinnError, ParseFailure, RuntimeFailure
from .interpreter import Interpreter, run_program
from .parser import parse_program
from .runner import RunResult, run_finn_code

__all__ = [
    'run_finn_code',
    'run_program',
    'parse_program',
    'Interpreter',
    'RunResult',
    'FinnError',
    'ParseFailure',
    'RuntimeFailure',
]
