"""Abstract Syntax Tree (AST) definitions for the MCL language.

The AST classes defined in this module represent the syntactic structure
of parsed MCL programs. The parser produces them and the interpreter
evaluates them. The set of node types is closed: every class below has a
matching branch in `Interpreter.evaluate`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Any


UNARY_OPS = ('-', '+', '!')
BINARY_OPS = ('+', '-', '*', '/', '%', '||', '&&', '>', '>=', '<', '<=', '==', '!=')


@dataclass
class Node:
    """Base class for all AST nodes."""
    pass


@dataclass
class Literal(Node):
    value: Any
    literal_type: str  # 'Integer', 'Char', 'Str', 'Bool'


@dataclass
class ListLit(Node):
    elements: List[Node]


@dataclass
class FunctionLit(Node):
    params: List[str]
    body: Node


@dataclass
class Call(Node):
    name: str
    args: List[Node]


@dataclass
class If(Node):
    condition: Node
    then_body: Node
    else_body: Optional[Node] = None


@dataclass
class Let(Node):
    name: str
    expr: Node


@dataclass
class Ident(Node):
    name: str


@dataclass
class UnaryOp(Node):
    op: str
    operand: Node


@dataclass
class BinaryOp(Node):
    op: str
    left: Node
    right: Node


@dataclass
class Block(Node):
    expressions: List[Node]


@dataclass
class Concat(Node):
    left: Node
    right: Node
