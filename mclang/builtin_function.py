"""Built-in functions that intercept ordinary call syntax.

The registry is consulted before a call name is looked up in the
environment, so a user binding named ``len`` never shadows the built-in.
Each entry receives the interpreter, the original `Call` node and the
current environment, and returns a ``(value, environment)`` pair like any
other evaluation step.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, TYPE_CHECKING

from mclang.ast import Call
from mclang.environment import Environment
from mclang.errors import MclError, ErrorVal
from mclang.types import IntegerVal, ListVal, StringVal, Value

if TYPE_CHECKING:
    from mclang.interpreter import Interpreter


@dataclass(frozen=True)
class BuiltinFunction:
    name: str
    arity: Optional[int]
    fn: Callable[['Interpreter', Call, Environment], Tuple[Value, Environment]]

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


def evaluate_len(interpreter: 'Interpreter', node: Call, env: Environment) -> Tuple[Value, Environment]:
    value, _ = interpreter.evaluate(node.args[0], env)
    if isinstance(value, ListVal):
        return IntegerVal(len(value.items)), env
    if isinstance(value, StringVal):
        return IntegerVal(len(value.value)), env
    raise MclError(ErrorVal('TypeError', "Can't get length"))


BUILTIN_FUNCTIONS: Dict[str, BuiltinFunction] = {
    'len': BuiltinFunction('len', 1, evaluate_len),
}
