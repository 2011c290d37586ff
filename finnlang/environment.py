from typing import Any, Dict, Optional

from .ast import FunctionDef
from .errors import RuntimeFailure
from .types import Type


class Environment:
    """Variable storage of one activation: the program root or one function call.

    Environments do not chain. A function body sees only its own
    parameters and locals, plus the function table it was handed when the
    call started.
    """
    def __init__(self, functions: Optional[Dict[str, FunctionDef]] = None):
        self.values: Dict[str, Any] = {}
        self.types: Dict[str, Type] = {}
        self.functions: Dict[str, FunctionDef] = dict(functions) if functions else {}

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        raise RuntimeFailure(f'Undefined variable: {name}')

    def declare(self, name: str, var_type: Type, value: Any):
        # redeclaring rebinds; the declared type is recorded but not enforced
        self.values[name] = value
        self.types[name] = var_type

    def set(self, name: str, value: Any):
        if name not in self.values:
            raise RuntimeFailure(f'Cannot assign to undeclared variable: {name}')
        self.values[name] = value

    def define_function(self, func: FunctionDef):
        self.functions[func.name] = func

    def lookup_function(self, name: str) -> FunctionDef:
        if name in self.functions:
            return self.functions[name]
        raise RuntimeFailure(f'Undefined function: {name}')

    def child(self) -> 'Environment':
        """Fresh environment for a call, seeded with a copy of the function table."""
        return Environment(self.functions)
