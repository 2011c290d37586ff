"""Parser for the FinnLang language.

A recursive-descent parser that pulls tokens from a `Lexer` one at a time
and builds the AST defined in `finnlang.ast`. It looks at the current
token, plus at most one buffered token (`peek`) to tell an assignment
`x = ...;` apart from an expression statement such as `f(x);`.

Recovery is lenient: when a statement cannot be parsed, the tokens that
the failed attempt consumed stay consumed, exactly one more token is
skipped, and parsing resumes from there. A malformed program therefore
yields a partial AST rather than no AST at all. A missing `]`, an
unterminated string and an out-of-range integer literal are not
recoverable: they raise a plain `ParseFailure` that aborts the parse.

Expression precedence, lowest first:

    or -> and -> == != -> < > <= >= -> + - -> * / % -> not ! unary-
       -> primary -> postfix [index]
"""

from __future__ import annotations

from typing import List, Optional, TextIO

from .ast import (
    Program, Stmt, Expr, Let, Assign, Print, While, For, ElifClause, If,
    Param, FunctionDef, Return, ExprStmt, IntLit, DoubleLit, BoolLit,
    StrLit, ArrayLit, Var, Index, IndexAssign, Call, BinaryOp, UnaryOp,
)
from .errors import ParseFailure
from .lexer import Lexer, Token
from .types import Type, in_int_range


class UnexpectedToken(ParseFailure):
    """A token that cannot continue the current statement.

    Caught by the statement loops, which skip one token and carry on.
    """
    pass


TYPE_TOKENS = {
    'TYPE_INT': Type.INT,
    'TYPE_BOOL': Type.BOOL,
    'TYPE_STRING': Type.STRING,
    'TYPE_DOUBLE': Type.DOUBLE,
}

EQUALITY_OPS = {'EQ': '==', 'NEQ': '!='}
RELATIONAL_OPS = {'LT': '<', 'GT': '>', 'LE': '<=', 'GE': '>='}
ADDITIVE_OPS = {'PLUS': '+', 'MINUS': '-'}
MULTIPLICATIVE_OPS = {'STAR': '*', 'SLASH': '/', 'PERCENT': '%'}


def describe(token: Token) -> str:
    if token.type == 'EOF':
        return 'end of input'
    return f"{token.type} {token.value!r}"


class Parser:
    def __init__(self, lexer: Lexer, debug_level: int = 0, debug_stream: Optional[TextIO] = None):
        self.lexer = lexer
        self.debug_level = debug_level
        self.debug_stream = debug_stream
        self.diagnostics: List[ParseFailure] = []
        self._peeked: Optional[Token] = None
        self.current = self._accept(lexer.next_token())

    def debug(self, msg: str, level: int = 1):
        if self.debug_level >= level and self.debug_stream is not None:
            self.debug_stream.write(msg + '\n')
            self.debug_stream.flush()

    # Token handling

    def _accept(self, token: Token) -> Token:
        if token.type == 'UNTERMINATED_STRING':
            raise ParseFailure('unterminated string literal', token.line, token.column)
        return token

    def advance(self):
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
        else:
            token = self.lexer.next_token()
        self.current = self._accept(token)

    def peek(self) -> Token:
        """Return the token after the current one without consuming anything."""
        if self._peeked is None:
            self._peeked = self.lexer.next_token()
        return self._peeked

    def check(self, *types: str) -> bool:
        return self.current.type in types

    def expect(self, type_: str, what: Optional[str] = None) -> Token:
        token = self.current
        if token.type != type_:
            raise UnexpectedToken(f"expected {what or type_}, got {describe(token)}", token.line, token.column)
        self.advance()
        return token

    def unexpected(self) -> UnexpectedToken:
        token = self.current
        return UnexpectedToken(f"unexpected {describe(token)}", token.line, token.column)

    # Statements

    def parse(self) -> Program:
        return Program(tuple(self.parse_statements()))

    def parse_statements(self, closing: Optional[str] = None) -> List[Stmt]:
        """Parse statements until EOF or the `closing` token, skipping failures."""
        statements: List[Stmt] = []
        while not self.check('EOF') and not (closing and self.check(closing)):
            try:
                statements.append(self.parse_statement())
            except UnexpectedToken as failure:
                self.diagnostics.append(failure)
                self.debug(f"skip: {failure}")
                self.advance()
        return statements

    def parse_statement(self) -> Stmt:
        kind = self.current.type
        if kind == 'LET':
            return self.parse_let()
        if kind == 'PRINT':
            return self.parse_print()
        if kind == 'WHILE':
            return self.parse_while()
        if kind == 'FOR':
            return self.parse_for()
        if kind == 'IF':
            return self.parse_if()
        if kind == 'FUNCT':
            return self.parse_function_def()
        if kind == 'RETURN':
            return self.parse_return()
        if kind == 'IDENT':
            if self.peek().type == 'ASSIGN':
                return self.parse_assign()
            return self.parse_expr_stmt()
        raise self.unexpected()

    def parse_block(self) -> tuple:
        self.expect('LBRACE', "'{'")
        body = self.parse_statements(closing='RBRACE')
        self.expect('RBRACE', "'}'")
        return tuple(body)

    def parse_type(self) -> Type:
        var_type = TYPE_TOKENS.get(self.current.type)
        if var_type is None:
            raise UnexpectedToken(f"expected a type, got {describe(self.current)}", self.current.line, self.current.column)
        self.advance()
        return var_type

    # let name (: type)? = expr ;
    def parse_let(self, semicolon: bool = True) -> Let:
        self.expect('LET')
        name = self.expect('IDENT', 'variable name').value
        var_type = Type.INT
        if self.check('COLON'):
            self.advance()
            var_type = self.parse_type()
        self.expect('ASSIGN', "'='")
        expr = self.parse_expression()
        if semicolon:
            self.expect('SEMICOLON', "';'")
        return Let(var_type, name, expr)

    # name = expr ;
    def parse_assign(self, semicolon: bool = True) -> Assign:
        name = self.expect('IDENT', 'variable name').value
        self.expect('ASSIGN', "'='")
        expr = self.parse_expression()
        if semicolon:
            self.expect('SEMICOLON', "';'")
        return Assign(name, expr)

    def parse_print(self) -> Print:
        self.expect('PRINT')
        self.expect('LPAREN', "'('")
        expr = self.parse_expression()
        self.expect('RPAREN', "')'")
        self.expect('SEMICOLON', "';'")
        return Print(expr)

    def parse_condition(self) -> Expr:
        self.expect('LPAREN', "'('")
        condition = self.parse_expression()
        self.expect('RPAREN', "')'")
        return condition

    def parse_while(self) -> While:
        self.expect('WHILE')
        condition = self.parse_condition()
        return While(condition, self.parse_block())

    # for (init?; condition?; update?) { ... }
    def parse_for(self) -> For:
        self.expect('FOR')
        self.expect('LPAREN', "'('")
        init: Optional[Stmt] = None
        if self.check('LET'):
            init = self.parse_let(semicolon=False)
        elif self.check('IDENT'):
            init = self.parse_assign(semicolon=False)
        elif not self.check('SEMICOLON'):
            raise self.unexpected()
        self.expect('SEMICOLON', "';'")
        condition: Optional[Expr] = None
        if not self.check('SEMICOLON'):
            condition = self.parse_expression()
        self.expect('SEMICOLON', "';'")
        update: Optional[Stmt] = None
        if self.check('IDENT'):
            update = self.parse_assign(semicolon=False)
        elif not self.check('RPAREN'):
            raise self.unexpected()
        self.expect('RPAREN', "')'")
        return For(init, condition, update, self.parse_block())

    def parse_if(self) -> If:
        self.expect('IF')
        condition = self.parse_condition()
        body = self.parse_block()
        elifs: List[ElifClause] = []
        while self.check('ELIF'):
            self.advance()
            elif_condition = self.parse_condition()
            elifs.append(ElifClause(elif_condition, self.parse_block()))
        else_body = None
        if self.check('ELSE'):
            self.advance()
            else_body = self.parse_block()
        return If(condition, body, tuple(elifs), else_body)

    # funct name(a: int, b: int): int { ... }
    def parse_function_def(self) -> FunctionDef:
        self.expect('FUNCT')
        name = self.expect('IDENT', 'function name').value
        self.expect('LPAREN', "'('")
        params: List[Param] = []
        while not self.check('RPAREN'):
            param_name = self.expect('IDENT', 'parameter name').value
            self.expect('COLON', "':'")
            params.append(Param(param_name, self.parse_type()))
            if self.check('COMMA'):
                self.advance()
            elif not self.check('RPAREN'):
                raise self.unexpected()
        self.advance()
        return_type = None
        if self.check('COLON'):
            self.advance()
            return_type = self.parse_type()
        return FunctionDef(name, tuple(params), return_type, self.parse_block())

    def parse_return(self) -> Return:
        self.expect('RETURN')
        value = None
        if not self.check('SEMICOLON'):
            value = self.parse_expression()
        self.expect('SEMICOLON', "';'")
        return Return(value)

    def parse_expr_stmt(self) -> ExprStmt:
        expr = self.parse_expression()
        if self.check('ASSIGN') and isinstance(expr, Index):
            self.advance()
            value = self.parse_expression()
            expr = IndexAssign(expr.target, expr.index, value)
        self.expect('SEMICOLON', "';'")
        return ExprStmt(expr)

    # Expressions

    def parse_expression(self) -> Expr:
        return self.parse_or()

    def parse_or(self) -> Expr:
        node = self.parse_and()
        while self.check('OR'):
            self.advance()
            node = BinaryOp('or', node, self.parse_and())
        return node

    def parse_and(self) -> Expr:
        node = self.parse_equality()
        while self.check('AND'):
            self.advance()
            node = BinaryOp('and', node, self.parse_equality())
        return node

    def parse_binary_layer(self, ops: dict, operand) -> Expr:
        node = operand()
        while self.current.type in ops:
            op = ops[self.current.type]
            self.advance()
            node = BinaryOp(op, node, operand())
        return node

    def parse_equality(self) -> Expr:
        return self.parse_binary_layer(EQUALITY_OPS, self.parse_relational)

    def parse_relational(self) -> Expr:
        return self.parse_binary_layer(RELATIONAL_OPS, self.parse_additive)

    def parse_additive(self) -> Expr:
        return self.parse_binary_layer(ADDITIVE_OPS, self.parse_multiplicative)

    def parse_multiplicative(self) -> Expr:
        return self.parse_binary_layer(MULTIPLICATIVE_OPS, self.parse_unary)

    def parse_unary(self) -> Expr:
        if self.check('NOT'):
            self.advance()
            return UnaryOp('not', self.parse_unary())
        if self.check('MINUS'):
            self.advance()
            return UnaryOp('-', self.parse_unary())
        return self.parse_postfix()

    def parse_postfix(self) -> Expr:
        node = self.parse_primary()
        while self.check('LBRACKET'):
            self.advance()
            index = self.parse_expression()
            if not self.check('RBRACKET'):
                raise ParseFailure('expected closing bracket for index', self.current.line, self.current.column)
            self.advance()
            node = Index(node, index)
        return node

    def parse_primary(self) -> Expr:
        token = self.current
        kind = token.type
        if kind == 'INT':
            if not in_int_range(token.value):
                raise ParseFailure(f"integer literal {token.value} out of range", token.line, token.column)
            self.advance()
            return IntLit(token.value)
        if kind == 'OVERSIZED_INT':
            raise ParseFailure(f"integer literal {token.value[:20]}... out of range", token.line, token.column)
        if kind == 'DOUBLE':
            self.advance()
            return DoubleLit(token.value)
        if kind == 'BOOL':
            self.advance()
            return BoolLit(token.value)
        if kind == 'STRING':
            self.advance()
            return StrLit(token.value)
        if kind == 'IDENT':
            self.advance()
            if self.check('LPAREN'):
                self.advance()
                args = self.parse_expression_list('RPAREN')
                self.expect('RPAREN', "')'")
                return Call(token.value, tuple(args))
            return Var(token.value)
        if kind == 'LBRACKET':
            self.advance()
            elements = self.parse_expression_list('RBRACKET')
            if not self.check('RBRACKET'):
                raise ParseFailure('expected closing bracket for array literal', self.current.line, self.current.column)
            self.advance()
            return ArrayLit(tuple(elements))
        if kind == 'LPAREN':
            self.advance()
            expr = self.parse_expression()
            self.expect('RPAREN', "')'")
            return expr
        raise self.unexpected()

    def parse_expression_list(self, closing: str) -> List[Expr]:
        items: List[Expr] = []
        if self.check(closing):
            return items
        items.append(self.parse_expression())
        while self.check('COMMA'):
            self.advance()
            items.append(self.parse_expression())
        return items


def parse_program(source: str, debug_level: int = 0, debug_stream: Optional[TextIO] = None) -> Program:
    """Parse FinnLang source code into a Program AST.

    Statements that cannot be parsed are skipped; a ParseFailure is raised
    only for the unrecoverable cases.
    """
    parser = Parser(Lexer(source), debug_level=debug_level, debug_stream=debug_stream)
    return parser.parse()
