"""CLI entry point for the FinnLang interpreter.

Usage:
    python -m finnlang [-v|-vv|-vvv] <program_file>
    python -m finnlang [-v...] -c '<source>'
    python -m finnlang [-v...] --emit-ast <program_file>
    python -m finnlang [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  -c SOURCE     Run the given source text instead of a file
  --emit-ast    Parse the given .finn file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file
  --json        Print the result as a JSON object instead of raw output
  --max-depth   Maximum function call depth (default 1000)

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import json
import sys
from pathlib import Path

from .ast_json import ast_to_obj, ast_from_obj
from .errors import ParseFailure
from .interpreter import DEFAULT_MAX_CALL_DEPTH
from .parser import parse_program
from .runner import RunResult, run_ast, run_finn_code


def read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def report(result: RunResult, as_json: bool) -> int:
    if as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False))
        return 0 if result.success else 1
    if not result.success:
        label = 'Parse error' if result.error_kind == 'parse' else 'Runtime error'
        print(f"{label}: {result.error}", file=sys.stderr)
        return 1
    if result.output:
        print(result.output)
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog='finnlang', description="FinnLang language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--json', action='store_true', help='print the result as a JSON object')
    parser.add_argument('--max-depth', type=int, default=DEFAULT_MAX_CALL_DEPTH, help='maximum function call depth')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-c', dest='source', metavar='SOURCE', help='run the given source text')
    group.add_argument('--emit-ast', metavar='FINN_FILE', help='emit AST JSON for the given .finn file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='FinnLang program file (.finn) to execute')
    args = parser.parse_args(argv)

    debug_stream = open('debug.txt', 'w', encoding='utf-8') if args.v > 0 else None
    try:
        # Emit AST mode
        if args.emit_ast:
            program_file = Path(args.emit_ast)
            source = read_source(program_file)
            try:
                ast_program = parse_program(source, debug_level=args.v, debug_stream=debug_stream)
            except ParseFailure as e:
                print(f"Parse error: {e}", file=sys.stderr)
                sys.exit(1)
            out_path = program_file.with_name(program_file.name + '.ast.json')
            with open(out_path, 'w', encoding='utf-8') as out:
                json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
            print(str(out_path))
            return

        # Execute from AST JSON
        if args.ast:
            ast_path = Path(args.ast)
            if not ast_path.exists():
                print(f"Error: file {ast_path} not found", file=sys.stderr)
                sys.exit(1)
            with open(ast_path, 'r', encoding='utf-8') as f:
                ast_program = ast_from_obj(json.load(f))
            result = run_ast(ast_program, debug_level=args.v, debug_stream=debug_stream,
                             max_call_depth=args.max_depth)
            if report(result, args.json):
                sys.exit(1)
            return

        # Default: execute source text or file
        if args.source is not None:
            source = args.source
        elif args.program:
            source = read_source(Path(args.program))
        else:
            parser.error('missing program file; or use -c/--emit-ast/--ast')
        result = run_finn_code(source, debug_level=args.v, debug_stream=debug_stream,
                               max_call_depth=args.max_depth)
        if report(result, args.json):
            sys.exit(1)
    finally:
        if debug_stream is not None:
            debug_stream.close()


if __name__ == '__main__':
    main()
