"""JSON serialization/deserialization for the FinnLang AST.

This module converts between FinnLang AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node becomes a dict
tagged with `__node__`, declared types become `{"__type__": name}`, and
tuples of nodes become lists.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict

from .ast import (
    Node, Program, Let, Assign, Print, While, For, ElifClause, If, Param,
    FunctionDef, Return, ExprStmt, IntLit, DoubleLit, BoolLit, StrLit,
    ArrayLit, Var, Index, IndexAssign, Call, BinaryOp, UnaryOp,
)
from .types import Type


NODE_TYPES: Dict[str, type] = {
    cls.__name__: cls for cls in (
        Program, Let, Assign, Print, While, For, ElifClause, If, Param,
        FunctionDef, Return, ExprStmt, IntLit, DoubleLit, BoolLit, StrLit,
        ArrayLit, Var, Index, IndexAssign, Call, BinaryOp, UnaryOp,
    )
}


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (bool, int, float, str)):
        return node
    if isinstance(node, Type):
        return {"__type__": node.value}
    if isinstance(node, tuple):
        return [ast_to_obj(item) for item in node]
    if isinstance(node, Node):
        obj: Dict[str, Any] = {"__node__": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"cannot serialize {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if isinstance(obj, list):
        return tuple(ast_from_obj(item) for item in obj)
    if isinstance(obj, dict):
        if "__type__" in obj:
            return Type(obj["__type__"])
        name = obj.get("__node__")
        cls = NODE_TYPES.get(name)
        if cls is None:
            raise ValueError(f"unknown AST node {name!r}")
        return cls(**{f.name: ast_from_obj(obj[f.name]) for f in fields(cls)})
    return obj
