"""Runtime value definitions for MCL.

Every value the evaluator produces is one of the frozen dataclasses below.
Values are never mutated after construction: lists hold tuples, strings hold
Python ``str`` objects, and a function's captured environment is itself an
immutable snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from .ast import Node
    from .environment import Environment


@dataclass(frozen=True)
class IntegerVal:
    value: int

    def __repr__(self) -> str:
        return f"Integer({self.value})"


@dataclass(frozen=True)
class CharVal:
    """A single Unicode scalar. Compared with other chars by code point."""
    value: str

    def __repr__(self) -> str:
        return f"Char({self.value!r})"


@dataclass(frozen=True)
class BoolVal:
    value: bool

    def __repr__(self) -> str:
        return f"Bool({self.value})"


@dataclass(frozen=True)
class StringVal:
    value: str

    def __repr__(self) -> str:
        return f"String({self.value!r})"


@dataclass(frozen=True)
class ListVal:
    """An ordered, heterogeneous sequence of values."""
    items: Tuple['Value', ...]

    def __repr__(self) -> str:
        return f"List({list(self.items)!r})"


@dataclass(frozen=True)
class FunctionVal:
    """A user-defined function.

    `closure` starts out empty when the function literal is evaluated; the
    call mechanism fills it in when a function is returned from a call, so
    that it carries the bindings visible where it was created.
    """
    closure: 'Environment'
    params: Tuple[str, ...]
    body: 'Node'

    def __repr__(self) -> str:
        return f"<function({', '.join(self.params)})>"


@dataclass(frozen=True)
class EmptyVal:
    """Marker for statements that produce no value."""

    def __repr__(self) -> str:
        return 'Empty'


EMPTY = EmptyVal()

Value = Union[IntegerVal, CharVal, BoolVal, StringVal, ListVal, FunctionVal, EmptyVal]


def type_name(value: Value) -> str:
    """Return the MCL type name of a runtime value."""
    if isinstance(value, IntegerVal):
        return 'Integer'
    if isinstance(value, CharVal):
        return 'Char'
    if isinstance(value, BoolVal):
        return 'Bool'
    if isinstance(value, StringVal):
        return 'String'
    if isinstance(value, ListVal):
        return 'List'
    if isinstance(value, FunctionVal):
        return 'Function'
    if isinstance(value, EmptyVal):
        return 'Empty'
    return type(value).__name__


def to_string(value: Value) -> str:
    """Convert an MCL value to its printed form.

    Top-level strings and chars print bare. Inside a list they are quoted so
    that `["a", 'b']` and `[a, b]` can be told apart.
    """
    if isinstance(value, IntegerVal):
        return str(value.value)
    if isinstance(value, BoolVal):
        return 'true' if value.value else 'false'
    if isinstance(value, (CharVal, StringVal)):
        return value.value
    if isinstance(value, ListVal):
        return '[' + ', '.join(_show_item(item) for item in value.items) + ']'
    if isinstance(value, FunctionVal):
        return f"<function({', '.join(value.params)})>"
    if isinstance(value, EmptyVal):
        return ''
    return str(value)


def _show_item(value: Value) -> str:
    if isinstance(value, StringVal):
        return '"' + value.value.replace('\\', '\\\\').replace('"', '\\"') + '"'
    if isinstance(value, CharVal):
        return "'" + value.value.replace('\\', '\\\\').replace("'", "\\'") + "'"
    return to_string(value)
