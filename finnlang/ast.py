"""Abstract Syntax Tree (AST) definitions for the FinnLang language.

The AST classes defined in this module represent the syntactic structure
of parsed FinnLang programs. Nodes are frozen dataclasses holding tuples,
so a tree never changes once the parser has built it. Statements and
expressions form two closed families, `Stmt` and `Expr`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .types import Type


@dataclass(frozen=True)
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass(frozen=True)
class Stmt(Node):
    pass


@dataclass(frozen=True)
class Expr(Node):
    pass


@dataclass(frozen=True)
class Program(Node):
    body: Tuple[Stmt, ...]


# Statements

@dataclass(frozen=True)
class Let(Stmt):
    var_type: Type
    name: str
    expr: Expr


@dataclass(frozen=True)
class Assign(Stmt):
    name: str
    expr: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expr: Expr


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class For(Stmt):
    init: Optional[Stmt]  # Let or Assign
    condition: Optional[Expr]
    update: Optional[Stmt]  # Assign
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class ElifClause(Node):
    condition: Expr
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    body: Tuple[Stmt, ...]
    elifs: Tuple[ElifClause, ...] = ()
    else_body: Optional[Tuple[Stmt, ...]] = None


@dataclass(frozen=True)
class Param(Node):
    name: str
    param_type: Type


@dataclass(frozen=True)
class FunctionDef(Stmt):
    name: str
    params: Tuple[Param, ...]
    return_type: Optional[Type]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Return(Stmt):
    value: Optional[Expr]


@dataclass(frozen=True)
class ExprStmt(Stmt):
    expr: Expr


# Expressions

@dataclass(frozen=True)
class IntLit(Expr):
    value: int


@dataclass(frozen=True)
class DoubleLit(Expr):
    value: float


@dataclass(frozen=True)
class BoolLit(Expr):
    value: bool


@dataclass(frozen=True)
class StrLit(Expr):
    value: str


@dataclass(frozen=True)
class ArrayLit(Expr):
    elements: Tuple[Expr, ...]


@dataclass(frozen=True)
class Var(Expr):
    name: str


@dataclass(frozen=True)
class Index(Expr):
    target: Expr
    index: Expr


@dataclass(frozen=True)
class IndexAssign(Expr):
    target: Expr  # Var or Index
    index: Expr
    value: Expr


@dataclass(frozen=True)
class Call(Expr):
    name: str
    args: Tuple[Expr, ...]


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: str  # + - * / % == != < > <= >= and or
    left: Expr
    right: Expr


@dataclass(frozen=True)
class UnaryOp(Expr):
    op: str  # 'not' or '-'
    operand: Expr
