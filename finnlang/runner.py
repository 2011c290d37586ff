"""Boundary between the FinnLang core and whatever hosts it.

`run_finn_code` is the one place where failures are intercepted. Whatever
happens inside the pipeline, the caller receives a `RunResult`: either
the program output or an error message classified as a parse or a
runtime failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, TextIO

from .ast import Program
from .errors import FinnError, ParseFailure, RuntimeFailure
from .interpreter import DEFAULT_MAX_CALL_DEPTH, Interpreter
from .parser import parse_program


@dataclass(frozen=True)
class RunResult:
    output: str
    error: Optional[str] = None
    error_kind: Optional[str] = None  # 'parse' or 'runtime'

    @property
    def success(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, err: FinnError) -> 'RunResult':
        return cls(output='', error=str(err), error_kind=err.kind)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'output': self.output,
            'error': self.error,
            'error_kind': self.error_kind,
            'success': self.success,
        }


def parse_checked(source: str, debug_level: int = 0, debug_stream: Optional[TextIO] = None) -> Program:
    try:
        return parse_program(source, debug_level=debug_level, debug_stream=debug_stream)
    except RecursionError:
        raise ParseFailure('program nested too deeply') from None
    except FinnError:
        raise
    except Exception as err:
        raise ParseFailure(f'internal error: {type(err).__name__}: {err}') from err


def run_checked(program: Program, interpreter: Interpreter) -> str:
    try:
        return interpreter.run(program)
    except RecursionError:
        raise RuntimeFailure('maximum recursion depth exceeded') from None
    except FinnError:
        raise
    except Exception as err:
        raise RuntimeFailure(f'internal error: {type(err).__name__}: {err}') from err


def run_finn_code(source: str, debug_level: int = 0, debug_stream: Optional[TextIO] = None,
                  max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> RunResult:
    """Lex, parse and run `source`, returning the output or a structured failure."""
    try:
        program = parse_checked(source, debug_level=debug_level, debug_stream=debug_stream)
    except ParseFailure as err:
        if debug_level > 0 and debug_stream is not None:
            debug_stream.write(f"parse failure: {err}\n")
        return RunResult.failure(err)
    return run_ast(program, debug_level=debug_level, debug_stream=debug_stream,
                   max_call_depth=max_call_depth)


def run_ast(program: Program, debug_level: int = 0, debug_stream: Optional[TextIO] = None,
            max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> RunResult:
    """Run an already parsed program, intercepting any failure it raises."""
    interpreter = Interpreter(debug_level=debug_level, debug_stream=debug_stream,
                              max_call_depth=max_call_depth)
    try:
        output = run_checked(program, interpreter)
    except FinnError as err:
        interpreter.debug(f"{err.kind} failure: {err}")
        return RunResult.failure(err)
    return RunResult(output=output)
