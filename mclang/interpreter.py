"""Tree-walking interpreter for the MCL language.

`Interpreter.evaluate` takes an AST node and an immutable environment and
returns the resulting value together with the environment the next
sibling in a block should see. Only `Let` ever hands back an extended
environment; every other construct returns the one it was given, which is
how block-local bindings stay inside their block.

Runtime errors are raised as `MclError`. Nothing in this module catches
them, so the first failure aborts the whole evaluation.
"""

from __future__ import annotations

import operator
from typing import Callable, Dict, List, Optional, Tuple

from .ast import (
    Node, Literal, ListLit, FunctionLit, Call, If, Let, Ident,
    UnaryOp, BinaryOp, Block, Concat,
)
from .builtin_function import BUILTIN_FUNCTIONS
from .environment import Environment
from .errors import MclError, ErrorVal
from .parser import parse_program
from .types import (
    Value, IntegerVal, CharVal, BoolVal, StringVal, ListVal, FunctionVal,
    EMPTY, type_name, to_string,
)


ALGEBRAIC_OPS: Dict[str, Callable[[int, int], int]] = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
}

BOOLEAN_OPS: Dict[str, Callable[[bool, bool], bool]] = {
    '||': lambda a, b: a or b,
    '&&': lambda a, b: a and b,
}

COMPARISON_OPS: Dict[str, Callable[[int, int], bool]] = {
    '>': operator.gt,
    '>=': operator.ge,
    '<': operator.lt,
    '<=': operator.le,
    '==': operator.eq,
    '!=': operator.ne,
}


def _error(name: str, message: str) -> MclError:
    return MclError(ErrorVal(name, message))


def _string_to_list(text: str) -> List[Value]:
    return [StringVal(c) for c in text]


class Interpreter:
    """Core interpreter that evaluates MCL expression trees."""
    def __init__(self, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt'):
        self.debug_level = debug_level
        self.debug_file = debug_file
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 and debug_file else None

    def debug(self, msg: str):
        if self.debug_level > 0:
            if self.debug_fp:
                self.debug_fp.write(msg + '\n')
                self.debug_fp.flush()
            else:
                print(msg)

    # Public API
    def run(self, node: Node) -> Value:
        """Evaluate `node` against an empty environment and return its value."""
        if self.debug_level > 0 and self.debug_file and self.debug_fp is None:
            # An earlier run closed the trace; later runs append to it.
            self.debug_fp = open(self.debug_file, 'a', encoding='utf-8')
        self.debug(f"evaluate {type(node).__name__}")
        try:
            value, _ = self.evaluate(node, Environment())
            self.debug(f"result {type_name(value)} = {to_string(value)}")
            return value
        except MclError as ex:
            self.debug(f"error {ex}")
            raise
        except RecursionError:
            raise _error('RecursionError', 'Maximum recursion depth exceeded') from None
        finally:
            if self.debug_fp:
                self.debug_fp.close()
                self.debug_fp = None

    def evaluate(self, node: Node, env: Environment) -> Tuple[Value, Environment]:
        if isinstance(node, Literal):
            return self.evaluate_literal(node), env
        if isinstance(node, ListLit):
            return ListVal(tuple(self.evaluate_each(node.elements, env))), env
        if isinstance(node, FunctionLit):
            # Nothing is captured here; see call_function.
            return FunctionVal(Environment(), tuple(node.params), node.body), env
        if isinstance(node, Call):
            return self.evaluate_call(node, env)
        if isinstance(node, If):
            return self.evaluate_if(node, env), env
        if isinstance(node, Let):
            value, _ = self.evaluate(node.expr, env)
            if self.debug_level >= 2:
                self.debug(f"let {node.name}: {type_name(value)} = {to_string(value)}")
            return EMPTY, env.insert(node.name, value)
        if isinstance(node, Ident):
            return env.get(node.name), env
        if isinstance(node, UnaryOp):
            return self.evaluate_unary(node, env), env
        if isinstance(node, BinaryOp):
            return self.evaluate_binary(node, env), env
        if isinstance(node, Block):
            value, _ = self.evaluate_sequence(node.expressions, env)
            return value, env
        if isinstance(node, Concat):
            return self.evaluate_concat(node, env), env
        raise NotImplementedError(f"evaluate: unexpected node type {type(node).__name__}")

    def evaluate_literal(self, node: Literal) -> Value:
        if node.literal_type == 'Integer':
            return IntegerVal(node.value)
        if node.literal_type == 'Char':
            return CharVal(node.value)
        if node.literal_type == 'Str':
            return StringVal(node.value)
        if node.literal_type == 'Bool':
            return BoolVal(node.value)
        raise NotImplementedError(f"evaluate: unknown literal type {node.literal_type}")

    def evaluate_each(self, nodes: List[Node], env: Environment) -> List[Value]:
        """Evaluate sibling expressions left to right against the same environment."""
        values: List[Value] = []
        for node in nodes:
            value, _ = self.evaluate(node, env)
            values.append(value)
        return values

    def evaluate_sequence(self, nodes: List[Node], env: Environment) -> Tuple[Value, Environment]:
        """Evaluate a block body, threading each step's environment into the next."""
        value: Value = EMPTY
        for node in nodes:
            value, env = self.evaluate(node, env)
        return value, env

    def evaluate_if(self, node: If, env: Environment) -> Value:
        branch = self.select_branch(node, env)
        if branch is None:
            return EMPTY
        value, _ = self.evaluate(branch, env)
        return value

    def select_branch(self, node: If, env: Environment) -> Optional[Node]:
        cond, _ = self.evaluate(node.condition, env)
        if not isinstance(cond, BoolVal):
            raise _error('ConditionError', 'The condition is not a boolean')
        if self.debug_level >= 3:
            self.debug(f"if condition -> {to_string(cond)}")
        return node.then_body if cond.value else node.else_body

    # Calls
    def evaluate_call(self, node: Call, env: Environment) -> Tuple[Value, Environment]:
        builtin = BUILTIN_FUNCTIONS.get(node.name)
        if builtin is not None:
            if builtin.arity is not None and len(node.args) != builtin.arity:
                raise _error('ArityError', f"Wrong number of arguments provided for function '{node.name}'")
            if self.debug_level >= 2:
                self.debug(f"builtin {node.name}")
            return builtin.fn(self, node, env)
        callee = env.get(node.name)
        if isinstance(callee, FunctionVal):
            return self.call_function(node.name, callee, node.args, env)
        if isinstance(callee, ListVal):
            return self.evaluate_list_access(node.name, callee, node.args, env)
        raise _error('CallError', f"{node.name} is not a function or list")

    def call_function(self, name: str, func: FunctionVal, args: List[Node],
                      env: Environment) -> Tuple[Value, Environment]:
        """Call `func` with the argument expressions `args`.

        The body runs in the call-site environment overlaid with the
        function's closure and then with the parameter bindings, so
        parameters shadow closure bindings, which shadow the caller's.
        A function returned from the body keeps the bindings that were
        visible when it was created.
        """
        if len(args) != len(func.params):
            raise _error('ArityError', f"Wrong number of arguments provided for {name}")
        values = self.evaluate_each(args, env)
        call_env = Environment.merge(env, func.closure, Environment(dict(zip(func.params, values))))
        if self.debug_level >= 2:
            self.debug(f"call {name}({', '.join(to_string(v) for v in values)})")
        result, produced = self.evaluate_body(func.body, call_env)
        if isinstance(result, FunctionVal):
            closure = Environment.merge(call_env, produced, result.closure)
            result = FunctionVal(closure, result.params, result.body)
        if self.debug_level >= 2:
            self.debug(f"return from {name}: {type_name(result)}")
        return result, env

    def evaluate_body(self, body: Node, env: Environment) -> Tuple[Value, Environment]:
        # The body's tail hands back the environment it ran in, following a
        # taken if branch or a trailing inner block, so that a returned
        # function sees the let bindings in scope where it was created.
        if isinstance(body, Block):
            if not body.expressions:
                return EMPTY, env
            _, env = self.evaluate_sequence(body.expressions[:-1], env)
            return self.evaluate_body(body.expressions[-1], env)
        if isinstance(body, If):
            branch = self.select_branch(body, env)
            if branch is None:
                return EMPTY, env
            return self.evaluate_body(branch, env)
        return self.evaluate(body, env)

    def evaluate_list_access(self, name: str, items: ListVal, args: List[Node],
                             env: Environment) -> Tuple[Value, Environment]:
        if len(args) != 1:
            raise _error('ArityError', 'Wrong number of arguments provided for list element access')
        index, _ = self.evaluate(args[0], env)
        if not isinstance(index, IntegerVal):
            raise _error('TypeError', f"List index for {name} must be an integer, got {type_name(index)}")
        if self.debug_level >= 3:
            self.debug(f"index {name}({index.value})")
        if index.value < 0 or index.value >= len(items.items):
            raise _error('IndexError', f"Index {index.value} out of bound for {name}")
        return items.items[index.value], env

    # Operators
    def evaluate_unary(self, node: UnaryOp, env: Environment) -> Value:
        value, _ = self.evaluate(node.operand, env)
        if node.op == '!':
            if isinstance(value, BoolVal):
                return BoolVal(not value.value)
            raise _error('TypeError', 'Can invert only booleans')
        if node.op in ('-', '+'):
            if isinstance(value, IntegerVal):
                return IntegerVal(-value.value) if node.op == '-' else value
            raise _error('TypeError', f"Unary '{node.op}' can be applied only to integers")
        raise NotImplementedError(f"evaluate: unknown unary operator {node.op}")

    def evaluate_binary(self, node: BinaryOp, env: Environment) -> Value:
        left, _ = self.evaluate(node.left, env)
        right, _ = self.evaluate(node.right, env)
        op = node.op
        if op in ALGEBRAIC_OPS:
            if isinstance(left, IntegerVal) and isinstance(right, IntegerVal):
                return IntegerVal(ALGEBRAIC_OPS[op](left.value, right.value))
            raise _error('TypeError', 'Can perform algebraic operation only on numbers')
        if op in ('/', '%'):
            if isinstance(left, IntegerVal) and isinstance(right, IntegerVal):
                if right.value == 0:
                    raise _error('ZeroDivisionError', "Can't divide by 0" if op == '/' else "Can't take modulo by 0")
                # Floor semantics, matching Python's // and %.
                if op == '/':
                    return IntegerVal(left.value // right.value)
                return IntegerVal(left.value % right.value)
            if op == '/':
                raise _error('TypeError', 'Can divide only integers')
            raise _error('TypeError', 'Can perform algebraic operation only on numbers')
        if op in BOOLEAN_OPS:
            if isinstance(left, BoolVal) and isinstance(right, BoolVal):
                return BoolVal(BOOLEAN_OPS[op](left.value, right.value))
            raise _error('TypeError', 'Can perform operation only on booleans')
        if op in COMPARISON_OPS:
            if isinstance(left, IntegerVal) and isinstance(right, IntegerVal):
                return BoolVal(COMPARISON_OPS[op](left.value, right.value))
            if isinstance(left, CharVal) and isinstance(right, CharVal):
                return BoolVal(COMPARISON_OPS[op](ord(left.value), ord(right.value)))
            raise _error('TypeError', 'Can only compare two comparable types')
        raise NotImplementedError(f"evaluate: unknown binary operator {op}")

    def evaluate_concat(self, node: Concat, env: Environment) -> Value:
        left, _ = self.evaluate(node.left, env)
        right, _ = self.evaluate(node.right, env)
        if isinstance(left, ListVal) and isinstance(right, ListVal):
            return ListVal(left.items + right.items)
        if isinstance(left, StringVal) and isinstance(right, StringVal):
            return StringVal(left.value + right.value)
        if isinstance(left, StringVal) and isinstance(right, ListVal):
            return ListVal(tuple(_string_to_list(left.value)) + right.items)
        if isinstance(left, ListVal) and isinstance(right, StringVal):
            return ListVal(left.items + tuple(_string_to_list(right.value)))
        raise _error('TypeError', "Can't concatenate")


def start_evaluation(node: Node, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt') -> Value:
    """Evaluate an AST against an empty environment and return the final value."""
    return Interpreter(debug_level=debug_level, debug_file=debug_file).run(node)


def run_program(source: str, debug_level: int = 0, debug_file: Optional[str] = 'debug.txt') -> Value:
    """Convenience function to parse and evaluate an MCL program from a source string."""
    return start_evaluation(parse_program(source), debug_level=debug_level, debug_file=debug_file)
