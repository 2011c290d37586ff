from pathlib import Path

from finnlang.interpreter import parse_program, Interpreter

EXAMPLES = Path(__file__).resolve().parent.parent / 'examples'


def test_program_3_functions():
    with open(EXAMPLES / 'program_3.finn', 'r', encoding='utf-8') as f:
        source = f.read()
    ast = parse_program(source)
    interp = Interpreter()
    out = interp.run(ast)
    assert out == '3628800\n6765\nHello, Finn!\naverage 2'
