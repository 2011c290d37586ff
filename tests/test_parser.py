import pytest

from finnlang.ast import (
    Program, Let, Assign, Print, While, For, ElifClause, If, Param,
    FunctionDef, Return, ExprStmt, IntLit, DoubleLit, BoolLit, StrLit,
    ArrayLit, Var, Index, IndexAssign, Call, BinaryOp, UnaryOp,
)
from finnlang.errors import ParseFailure
from finnlang.lexer import Lexer
from finnlang.parser import Parser, UnexpectedToken, parse_program
from finnlang.types import Type


def parse_with_diagnostics(source):
    parser = Parser(Lexer(source))
    return parser.parse(), parser.diagnostics


def test_let_defaults_to_int_and_accepts_annotation():
    program = parse_program('let a = 1; let b: double = 1.5; let c: string = "s";')
    assert program == Program((
        Let(Type.INT, 'a', IntLit(1)),
        Let(Type.DOUBLE, 'b', DoubleLit(1.5)),
        Let(Type.STRING, 'c', StrLit('s')),
    ))


def test_assignment_versus_call_statement():
    program = parse_program('x = 2; f(x);')
    assert program.body == (
        Assign('x', IntLit(2)),
        ExprStmt(Call('f', (Var('x'),))),
    )


def test_multiplication_binds_tighter_than_addition():
    program = parse_program('print(1 + 2 * 3);')
    assert program.body == (
        Print(BinaryOp('+', IntLit(1), BinaryOp('*', IntLit(2), IntLit(3)))),
    )


def test_binary_operators_are_left_associative():
    program = parse_program('print(10 - 3 - 2);')
    assert program.body[0].expr == BinaryOp('-', BinaryOp('-', IntLit(10), IntLit(3)), IntLit(2))


def test_or_is_looser_than_and():
    program = parse_program('print(a or b and c);')
    assert program.body[0].expr == BinaryOp('or', Var('a'), BinaryOp('and', Var('b'), Var('c')))


def test_comparison_chain_precedence():
    program = parse_program('print(1 < 2 == true);')
    assert program.body[0].expr == BinaryOp('==', BinaryOp('<', IntLit(1), IntLit(2)), BoolLit(True))


def test_unary_operators_wrap_postfix_index():
    program = parse_program('print(-x[0]); print(!done);')
    assert program.body == (
        Print(UnaryOp('-', Index(Var('x'), IntLit(0)))),
        Print(UnaryOp('not', Var('done'))),
    )


def test_grouping_overrides_precedence():
    program = parse_program('print((1 + 2) * 3);')
    assert program.body[0].expr == BinaryOp('*', BinaryOp('+', IntLit(1), IntLit(2)), IntLit(3))


def test_array_literals_and_nested_index():
    program = parse_program('let g = [[1], []]; print(g[0][0]);')
    assert program.body == (
        Let(Type.INT, 'g', ArrayLit((ArrayLit((IntLit(1),)), ArrayLit(())))),
        Print(Index(Index(Var('g'), IntLit(0)), IntLit(0))),
    )


def test_indexed_assignment():
    program = parse_program('a[1][2] = 5;')
    assert program.body == (
        ExprStmt(IndexAssign(Index(Var('a'), IntLit(1)), IntLit(2), IntLit(5))),
    )


def test_if_elif_else():
    program = parse_program('if (a) { print(1); } elif (b) { print(2); } elif (c) { } else { print(3); }')
    assert program.body == (
        If(
            Var('a'),
            (Print(IntLit(1)),),
            (ElifClause(Var('b'), (Print(IntLit(2)),)), ElifClause(Var('c'), ())),
            (Print(IntLit(3)),),
        ),
    )


def test_while_loop():
    program = parse_program('while (i < 3) { i = i + 1; }')
    assert program.body == (
        While(BinaryOp('<', Var('i'), IntLit(3)), (Assign('i', BinaryOp('+', Var('i'), IntLit(1))),)),
    )


def test_for_loop_full_and_empty_headers():
    program = parse_program('for (let i = 0; i < 2; i = i + 1) { print(i); } for (;;) { }')
    assert program.body == (
        For(
            Let(Type.INT, 'i', IntLit(0)),
            BinaryOp('<', Var('i'), IntLit(2)),
            Assign('i', BinaryOp('+', Var('i'), IntLit(1))),
            (Print(Var('i')),),
        ),
        For(None, None, None, ()),
    )


def test_function_definition_and_returns():
    program = parse_program('funct add(a: int, b: int): int { return a + b; } funct noop() { return; }')
    assert program.body == (
        FunctionDef(
            'add',
            (Param('a', Type.INT), Param('b', Type.INT)),
            Type.INT,
            (Return(BinaryOp('+', Var('a'), Var('b'))),),
        ),
        FunctionDef('noop', (), None, (Return(None),)),
    )


def test_call_arguments():
    program = parse_program('print(f(1, "two", [3]));')
    assert program.body[0].expr == Call('f', (IntLit(1), StrLit('two'), ArrayLit((IntLit(3),))))


def test_failed_statement_is_skipped():
    program, diagnostics = parse_with_diagnostics('let = 5; print(1);')
    assert program.body == (Print(IntLit(1)),)
    # the failed let, then `5` and `;` are each skipped on their own
    assert len(diagnostics) == 3
    assert all(isinstance(d, UnexpectedToken) for d in diagnostics)


def test_unknown_characters_are_skipped():
    program, diagnostics = parse_with_diagnostics('print(1); @ print(2);')
    assert program.body == (Print(IntLit(1)), Print(IntLit(2)))
    assert len(diagnostics) == 1


def test_missing_semicolon_skips_only_one_more_token():
    program, diagnostics = parse_with_diagnostics('print(1) print(2);')
    # the second `print` is the skipped token, so its arguments are skipped too
    assert program.body == ()
    assert len(diagnostics) == 5


def test_unclosed_block_yields_partial_program():
    program, diagnostics = parse_with_diagnostics('if (true) { print(1);')
    assert program.body == ()
    assert diagnostics


def test_failure_inside_block_keeps_rest_of_block():
    program = parse_program('while (x) { print(; print(2); }')
    assert program.body == (While(Var('x'), (Print(IntLit(2)),)),)


@pytest.mark.parametrize('source', [
    'let a = [1, 2;',
    'print(a[0;);',
    'print("abc);',
    'print(9223372036854775808);',
])
def test_unrecoverable_failures(source):
    with pytest.raises(ParseFailure) as excinfo:
        parse_program(source)
    assert not isinstance(excinfo.value, UnexpectedToken)


def test_largest_integer_literal_is_accepted():
    program = parse_program('print(9223372036854775807);')
    assert program.body == (Print(IntLit(9223372036854775807)),)


def test_empty_source():
    assert parse_program('') == Program(())
