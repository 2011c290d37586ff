"""Tree-walking interpreter for the FinnLang language.

The interpreter evaluates a `Program` produced by `finnlang.parser`
depth-first on a single thread. Printed lines are collected in order and
returned from `Interpreter.run` as one newline-separated string.

Statement execution returns either None or a `ReturnSignal`. Loops,
conditionals and statement sequences stop as soon as they see a signal
and hand it outward, so a `return` nested anywhere inside a function body
ends the whole call. Every fatal condition raises `RuntimeFailure`; none
of them is caught inside this module.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Sequence, TextIO
import sys

from .ast import (
    Program, Stmt, Expr, Let, Assign, Print, While, For, If, FunctionDef,
    Return, ExprStmt, IntLit, DoubleLit, BoolLit, StrLit, ArrayLit, Var,
    Index, IndexAssign, Call, BinaryOp, UnaryOp,
)
from .environment import Environment
from .errors import RuntimeFailure
from .parser import parse_program
from .types import (
    ArrayVal, ReturnSignal, equal_values, in_int_range, is_double, is_int,
    to_string, type_name,
)


DEFAULT_MAX_CALL_DEPTH = 1000

# Python frames reserved per FinnLang call when sizing the recursion limit
FRAMES_PER_CALL = 10
RECURSION_CEILING = 12000


@contextmanager
def recursion_budget(max_call_depth: int) -> Iterator[None]:
    """Raise the interpreter recursion limit to fit `max_call_depth` nested calls."""
    previous = sys.getrecursionlimit()
    wanted = min(RECURSION_CEILING, max_call_depth * FRAMES_PER_CALL + 1000)
    if wanted > previous:
        sys.setrecursionlimit(wanted)
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


class Interpreter:
    """Core interpreter that executes a FinnLang AST."""
    def __init__(self, debug_level: int = 0, debug_stream: Optional[TextIO] = None,
                 max_call_depth: int = DEFAULT_MAX_CALL_DEPTH):
        self.debug_level = debug_level
        self.debug_stream = debug_stream
        self.max_call_depth = max_call_depth
        self.output: List[str] = []
        self.call_depth = 0

    def debug(self, msg: str, level: int = 1):
        if self.debug_level >= level and self.debug_stream is not None:
            self.debug_stream.write(msg + '\n')
            self.debug_stream.flush()

    # Public API
    def run(self, program: Program, env: Optional[Environment] = None) -> str:
        """Execute `program` and return its printed lines joined by newlines."""
        if env is None:
            env = Environment()
        self.output = []
        self.call_depth = 0
        with recursion_budget(self.max_call_depth):
            signal = self.execute_block(program.body, env)
        if signal is not None:
            self.debug("return at top level, program stopped", 3)
        return '\n'.join(self.output)

    def execute_block(self, statements: Sequence[Stmt], env: Environment) -> Optional[ReturnSignal]:
        for stmt in statements:
            signal = self.execute(stmt, env)
            if signal is not None:
                return signal
        return None

    def execute(self, node: Stmt, env: Environment) -> Optional[ReturnSignal]:
        if isinstance(node, Let):
            value = self.evaluate(node.expr, env)
            env.declare(node.name, node.var_type, value)
            self.debug(f"declare {node.name}: {node.var_type.value} = {to_string(value)}", 2)
            return None
        if isinstance(node, Assign):
            value = self.evaluate(node.expr, env)
            env.set(node.name, value)
            self.debug(f"assign {node.name}: {env.types[node.name].value} = {to_string(value)}", 2)
            return None
        if isinstance(node, Print):
            self.output.append(to_string(self.evaluate(node.expr, env)))
            return None
        if isinstance(node, While):
            while self.is_true(self.evaluate(node.condition, env)):
                signal = self.execute_block(node.body, env)
                if signal is not None:
                    return signal
            return None
        if isinstance(node, For):
            if node.init is not None:
                self.execute(node.init, env)
            while node.condition is None or self.is_true(self.evaluate(node.condition, env)):
                signal = self.execute_block(node.body, env)
                if signal is not None:
                    return signal
                if node.update is not None:
                    self.execute(node.update, env)
            return None
        if isinstance(node, If):
            if self.is_true(self.evaluate(node.condition, env)):
                self.debug("if branch taken", 3)
                return self.execute_block(node.body, env)
            for clause in node.elifs:
                if self.is_true(self.evaluate(clause.condition, env)):
                    self.debug("elif branch taken", 3)
                    return self.execute_block(clause.body, env)
            if node.else_body is not None:
                self.debug("else branch taken", 3)
                return self.execute_block(node.else_body, env)
            return None
        if isinstance(node, FunctionDef):
            env.define_function(node)
            self.debug(f"define function {node.name}")
            return None
        if isinstance(node, Return):
            value = self.evaluate(node.value, env) if node.value is not None else None
            self.debug(f"return {to_string(value) if value is not None else '(nothing)'}", 3)
            return ReturnSignal(value)
        if isinstance(node, ExprStmt):
            self.evaluate(node.expr, env)
            return None
        raise NotImplementedError(f"execute: unexpected node type {type(node)}")

    def is_true(self, value: Any) -> bool:
        # only the boolean true selects a branch or continues a loop
        return value is True

    def evaluate(self, node: Expr, env: Environment) -> Any:
        if isinstance(node, (IntLit, DoubleLit, BoolLit, StrLit)):
            return node.value
        if isinstance(node, Var):
            return env.get(node.name)
        if isinstance(node, ArrayLit):
            return ArrayVal(tuple(self.evaluate(el, env) for el in node.elements))
        if isinstance(node, Index):
            target = self.evaluate(node.target, env)
            index = self.evaluate(node.index, env)
            self.check_index(target, index)
            return target.items[index]
        if isinstance(node, IndexAssign):
            return self.assign_index(node, env)
        if isinstance(node, Call):
            return self.call_function(node, env)
        if isinstance(node, UnaryOp):
            return self.apply_unary_op(node.op, self.evaluate(node.operand, env))
        if isinstance(node, BinaryOp):
            return self.evaluate_chain(node, env)
        raise NotImplementedError(f"evaluate: unexpected node type {type(node)}")

    def evaluate_chain(self, node: BinaryOp, env: Environment) -> Any:
        # the parser builds left-deep trees for `a + b + c ...`; fold them in a loop
        chain: List[BinaryOp] = []
        operand: Expr = node
        while isinstance(operand, BinaryOp):
            chain.append(operand)
            operand = operand.left
        value = self.evaluate(operand, env)
        for link in reversed(chain):
            if link.op in ('and', 'or'):
                value = self.apply_logical(link, value, env)
            else:
                value = self.apply_binary_op(link.op, value, self.evaluate(link.right, env))
        return value

    def apply_logical(self, node: BinaryOp, left: Any, env: Environment) -> bool:
        if not isinstance(left, bool):
            raise RuntimeFailure(f"Expected boolean in {node.op}, got {type_name(left)}")
        # short-circuit: the right side is neither evaluated nor checked
        if node.op == 'and' and not left:
            return False
        if node.op == 'or' and left:
            return True
        right = self.evaluate(node.right, env)
        if not isinstance(right, bool):
            raise RuntimeFailure(f"Expected boolean in {node.op}, got {type_name(right)}")
        return right

    def check_index(self, container: Any, index: Any):
        if not isinstance(container, ArrayVal) or not is_int(index):
            raise RuntimeFailure(
                f"Invalid indexing operation: cannot index {type_name(container)} with {type_name(index)}")
        if index < 0 or index >= len(container):
            raise RuntimeFailure(f"Index out of bounds: index {index}, length {len(container)}")

    def assign_index(self, node: IndexAssign, env: Environment) -> Any:
        # a[i][j] = v: collect the index chain down to the variable holding the array
        index_nodes = [node.index]
        target = node.target
        while isinstance(target, Index):
            index_nodes.append(target.index)
            target = target.target
        if not isinstance(target, Var):
            raise RuntimeFailure("Invalid array assignment: target must be a variable")
        index_nodes.reverse()
        root = env.get(target.name)
        positions = [self.evaluate(index_node, env) for index_node in index_nodes]
        value = self.evaluate(node.value, env)
        env.set(target.name, self.replace_at(root, positions, value))
        self.debug(f"assign {target.name}{''.join(f'[{p}]' for p in positions)} = {to_string(value)}", 2)
        return value

    def replace_at(self, container: Any, positions: List[Any], value: Any) -> ArrayVal:
        index = positions[0]
        self.check_index(container, index)
        if len(positions) == 1:
            return container.replace(index, value)
        return container.replace(index, self.replace_at(container.items[index], positions[1:], value))

    def call_function(self, node: Call, env: Environment) -> Any:
        func = env.lookup_function(node.name)
        if len(node.args) != len(func.params):
            raise RuntimeFailure(
                f"Function {node.name} expects {len(func.params)} arguments, got {len(node.args)}")
        args = [self.evaluate(arg, env) for arg in node.args]
        if self.call_depth >= self.max_call_depth:
            raise RuntimeFailure(f"Maximum call depth of {self.max_call_depth} exceeded in {node.name}")
        call_env = env.child()
        for param, arg in zip(func.params, args):
            call_env.declare(param.name, param.param_type, arg)
        self.debug(f"call {node.name}({', '.join(to_string(a) for a in args)})")
        self.call_depth += 1
        try:
            signal = self.execute_block(func.body, call_env)
        finally:
            self.call_depth -= 1
        if signal is None or signal.value is None:
            return 0
        return signal.value

    def checked(self, value: int) -> int:
        if not in_int_range(value):
            raise RuntimeFailure("Integer overflow")
        return value

    def apply_unary_op(self, op: str, operand: Any) -> Any:
        if op == 'not':
            if not isinstance(operand, bool):
                raise RuntimeFailure(f"Expected boolean in not, got {type_name(operand)}")
            return not operand
        if op == '-':
            if is_int(operand):
                return self.checked(-operand)
            if is_double(operand):
                return -operand
            raise RuntimeFailure(f"Unsupported negation type: {type_name(operand)}")
        raise RuntimeFailure(f"Unknown unary operator {op}")

    def apply_binary_op(self, op: str, a: Any, b: Any) -> Any:
        both_int = is_int(a) and is_int(b)
        both_double = is_double(a) and is_double(b)
        if op == '+':
            if both_int:
                return self.checked(a + b)
            if both_double:
                return a + b
            if isinstance(a, str) or isinstance(b, str):
                return to_string(a) + to_string(b)
        elif op == '-':
            if both_int:
                return self.checked(a - b)
            if both_double:
                return a - b
        elif op == '*':
            if both_int:
                return self.checked(a * b)
            if both_double:
                return a * b
        elif op == '/':
            if both_int or both_double:
                if b == 0:
                    raise RuntimeFailure("Division by zero")
                return self.checked(truncating_div(a, b)) if both_int else a / b
        elif op == '%':
            if both_int:
                if b == 0:
                    raise RuntimeFailure("Modulo by zero")
                # remainder takes the sign of the dividend
                return a - b * truncating_div(a, b)
        elif op == '==':
            return equal_values(a, b)
        elif op == '!=':
            return not equal_values(a, b)
        elif op in ('<', '>', '<=', '>='):
            if both_int or both_double:
                if op == '<':
                    return a < b
                if op == '>':
                    return a > b
                if op == '<=':
                    return a <= b
                return a >= b
        else:
            raise RuntimeFailure(f"Unknown operator {op}")
        raise RuntimeFailure(f"Unsupported operand types for {op}: {type_name(a)} and {type_name(b)}")


def run_program(source: str, debug_level: int = 0, debug_stream: Optional[TextIO] = None,
                max_call_depth: int = DEFAULT_MAX_CALL_DEPTH) -> str:
    """Parse and run FinnLang source, returning its output.

    Failures propagate as ParseFailure or RuntimeFailure; see
    `finnlang.runner.run_finn_code` for the wrapped variant.
    """
    program = parse_program(source, debug_level=debug_level, debug_stream=debug_stream)
    interpreter = Interpreter(debug_level=debug_level, debug_stream=debug_stream,
                              max_call_depth=max_call_depth)
    return interpreter.run(program)
