"""Lexer for the FinnLang language.

The terminal set is declared as a Lark grammar and scanned with Lark's
basic lexer, which produces tokens lazily. The `Lexer` class adapts each
Lark token into a FinnLang `Token` carrying a decoded payload and hands
them out one at a time through `next_token()`.

The lexer never fails. A character that starts no known token becomes an
UNKNOWN token carrying that character, and a string literal missing its
closing quote becomes an UNTERMINATED_STRING token. An integer literal
with more digits than any 64-bit integer becomes OVERSIZED_INT and keeps
its text. Rejecting these is left to the parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from lark import Lark


FINN_TERMINALS = r"""
    start: (LET | PRINT | WHILE | FOR | IF | ELIF | ELSE | FUNCT | RETURN
           | TYPE_INT | TYPE_BOOL | TYPE_STRING | TYPE_DOUBLE
           | TRUE | FALSE | AND | OR | NOT
           | IDENT | NUMBER | STRING
           | EQ | NEQ | LE | GE | ASSIGN | LT | GT | BANG | AMPAMP | PIPEPIPE
           | PLUS | MINUS | STAR | SLASH | PERCENT
           | LPAREN | RPAREN | LBRACE | RBRACE | LBRACKET | RBRACKET
           | COMMA | SEMICOLON | COLON
           | UNKNOWN)*

    // Keywords are matched against whole identifiers only
    LET: "let"
    PRINT: "print"
    WHILE: "while"
    FOR: "for"
    IF: "if"
    ELIF: "elif"
    ELSE: "else"
    FUNCT: "funct"
    RETURN: "return"
    TYPE_INT: "int"
    TYPE_BOOL: "bool"
    TYPE_STRING: "string"
    TYPE_DOUBLE: "double"
    TRUE: "true"
    FALSE: "false"
    AND: "and"
    OR: "or"
    NOT: "not"

    IDENT: /[A-Za-z][A-Za-z0-9]*/
    NUMBER: /[0-9]+(\.[0-9]*)?/
    STRING: /"[^"]*"?/

    EQ: "=="
    NEQ: "!="
    LE: "<="
    GE: ">="
    ASSIGN: "="
    LT: "<"
    GT: ">"
    BANG: "!"
    AMPAMP: "&&"
    PIPEPIPE: "||"
    PLUS: "+"
    MINUS: "-"
    STAR: "*"
    SLASH: "/"
    PERCENT: "%"
    LPAREN: "("
    RPAREN: ")"
    LBRACE: "{"
    RBRACE: "}"
    LBRACKET: "["
    RBRACKET: "]"
    COMMA: ","
    SEMICOLON: ";"
    COLON: ":"

    UNKNOWN.-1: /./s

    %ignore /\s+/
"""


FINN_LEXER = Lark(
    FINN_TERMINALS,
    parser='lalr',
    lexer='basic',
)


# digits in INT_MAX (9223372036854775807)
MAX_INT_DIGITS = 19


# symbolic spellings of the logical operators
ALIASES = {
    'AMPAMP': 'AND',
    'PIPEPIPE': 'OR',
    'BANG': 'NOT',
}


@dataclass(frozen=True)
class Token:
    type: str
    value: Any
    line: int = 0
    column: int = 0

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r})"


def convert_token(raw) -> Token:
    """Turn a Lark token into a FinnLang token with a decoded payload."""
    kind = ALIASES.get(raw.type, raw.type)
    text = str(raw)
    if kind == 'NUMBER':
        if '.' in text:
            return Token('DOUBLE', float(text), raw.line, raw.column)
        if len(text.lstrip('0')) > MAX_INT_DIGITS:
            # too long for any i64; never handed to int()
            return Token('OVERSIZED_INT', text, raw.line, raw.column)
        return Token('INT', int(text), raw.line, raw.column)
    if kind == 'STRING':
        if len(text) >= 2 and text.endswith('"'):
            return Token('STRING', text[1:-1], raw.line, raw.column)
        return Token('UNTERMINATED_STRING', text[1:], raw.line, raw.column)
    if kind in ('TRUE', 'FALSE'):
        return Token('BOOL', kind == 'TRUE', raw.line, raw.column)
    return Token(kind, text, raw.line, raw.column)


class Lexer:
    """Hands out the tokens of one source string, one per call.

    Once the input is exhausted every further call returns the same EOF
    token.
    """

    def __init__(self, source: str):
        self.source = source
        self._stream: Iterator = FINN_LEXER.lex(source)
        self._eof: Optional[Token] = None
        self._line = 1
        self._column = 1

    def next_token(self) -> Token:
        if self._eof is not None:
            return self._eof
        raw = next(self._stream, None)
        if raw is None:
            self._eof = Token('EOF', None, self._line, self._column)
            return self._eof
        if raw.end_line is not None:
            self._line = raw.end_line
            self._column = raw.end_column
        return convert_token(raw)

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.next_token()
            yield token
            if token.type == 'EOF':
                return


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens, ending with EOF."""
    return list(Lexer(source))
