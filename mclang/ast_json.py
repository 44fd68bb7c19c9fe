"""JSON serialization/deserialization for the MCL AST.

This module converts between MCL AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Every node becomes an
object whose ``"type"`` key names the node class.
"""

from __future__ import annotations

from typing import Any, Dict

from .ast import (
    Literal,
    ListLit,
    FunctionLit,
    Call,
    If,
    Let,
    Ident,
    UnaryOp,
    BinaryOp,
    Block,
    Concat,
    UNARY_OPS,
    BINARY_OPS,
)


LITERAL_TYPES = {'Integer': int, 'Char': str, 'Str': str, 'Bool': bool}


def ast_to_obj(node: Any) -> Any:
    if node is None:
        return None

    if isinstance(node, Literal):
        return {"type": "Literal", "value": node.value, "literal_type": node.literal_type}
    if isinstance(node, ListLit):
        return {"type": "ListLit", "elements": [ast_to_obj(e) for e in node.elements]}
    if isinstance(node, FunctionLit):
        return {"type": "FunctionLit", "params": list(node.params), "body": ast_to_obj(node.body)}
    if isinstance(node, Call):
        return {"type": "Call", "name": node.name, "args": [ast_to_obj(a) for a in node.args]}
    if isinstance(node, If):
        return {
            "type": "If",
            "condition": ast_to_obj(node.condition),
            "then_body": ast_to_obj(node.then_body),
            "else_body": ast_to_obj(node.else_body),
        }
    if isinstance(node, Let):
        return {"type": "Let", "name": node.name, "expr": ast_to_obj(node.expr)}
    if isinstance(node, Ident):
        return {"type": "Ident", "name": node.name}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "op": node.op, "operand": ast_to_obj(node.operand)}
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "op": node.op, "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}
    if isinstance(node, Block):
        return {"type": "Block", "expressions": [ast_to_obj(e) for e in node.expressions]}
    if isinstance(node, Concat):
        return {"type": "Concat", "left": ast_to_obj(node.left), "right": ast_to_obj(node.right)}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def _literal_from_obj(obj: Dict[str, Any]) -> Literal:
    literal_type = obj["literal_type"]
    value = obj["value"]
    expected = LITERAL_TYPES.get(literal_type)
    if expected is None:
        raise ValueError(f"Unknown literal type: {literal_type}")
    # bool is a subclass of int, so Integer literals must reject it explicitly
    if not isinstance(value, expected) or (literal_type == 'Integer' and isinstance(value, bool)):
        raise ValueError(f"Invalid {literal_type} literal: {value!r}")
    if literal_type == 'Char' and len(value) != 1:
        raise ValueError(f"Char literal must be a single character: {value!r}")
    return Literal(value=value, literal_type=literal_type)


def ast_from_obj(obj: Any) -> Any:
    if obj is None:
        return None
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    if t == "Literal":
        return _literal_from_obj(obj)
    if t == "ListLit":
        return ListLit(elements=[ast_from_obj(e) for e in obj["elements"]])
    if t == "FunctionLit":
        return FunctionLit(params=[str(p) for p in obj["params"]], body=ast_from_obj(obj["body"]))
    if t == "Call":
        return Call(name=obj["name"], args=[ast_from_obj(a) for a in obj["args"]])
    if t == "If":
        return If(
            condition=ast_from_obj(obj["condition"]),
            then_body=ast_from_obj(obj["then_body"]),
            else_body=ast_from_obj(obj.get("else_body")),
        )
    if t == "Let":
        return Let(name=obj["name"], expr=ast_from_obj(obj["expr"]))
    if t == "Ident":
        return Ident(name=obj["name"])
    if t == "UnaryOp":
        if obj["op"] not in UNARY_OPS:
            raise ValueError(f"Unknown unary operator: {obj['op']}")
        return UnaryOp(op=obj["op"], operand=ast_from_obj(obj["operand"]))
    if t == "BinaryOp":
        if obj["op"] not in BINARY_OPS:
            raise ValueError(f"Unknown binary operator: {obj['op']}")
        return BinaryOp(op=obj["op"], left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))
    if t == "Block":
        return Block(expressions=[ast_from_obj(e) for e in obj["expressions"]])
    if t == "Concat":
        return Concat(left=ast_from_obj(obj["left"]), right=ast_from_obj(obj["right"]))

    raise ValueError(f"Unknown AST node type: {t}")
