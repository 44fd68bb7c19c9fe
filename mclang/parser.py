"""Parser for the MCL language.

This module implements a two-stage parsing pipeline:

1. **Preprocessing**: comments are stripped and newline characters that
   logically terminate statements are replaced with semicolons, so the
   grammar only has to deal with one statement separator. Newlines inside
   parentheses or brackets, after a trailing operator or comma, and directly
   before ``else``, do not terminate anything.

2. **Parsing**: the preprocessed source is fed into a Lark LALR parser and
   the resulting parse tree is transformed into the AST defined in
   `mclang.ast`.

`parse_program` is the public entry point. It returns a `Block` holding
the program's top-level statements.
"""

from __future__ import annotations

from typing import List
import ast as py_ast

from lark import Lark, Transformer

from .ast import (
    Node, Literal, ListLit, FunctionLit, Call, If, Let, Ident,
    UnaryOp, BinaryOp, Block, Concat,
)


# A line ending in one of these continues on the next line.
_CONTINUATION_CHARS = '+-*/%|&<>=!,'


def _next_word(source: str, i: int) -> str:
    length = len(source)
    while i < length and source[i].isspace():
        i += 1
    start = i
    while i < length and (source[i].isalnum() or source[i] == '_'):
        i += 1
    return source[start:i]


def preprocess(source: str) -> str:
    """Strip comments and turn statement-ending newlines into semicolons.

    A newline ends a statement when it is not nested inside ``(...)`` or
    ``[...]``. Braces open a new statement list, so newlines directly
    inside ``{...}`` still separate statements even when the braces are
    themselves nested inside a call's parentheses. Strings and char
    literals are copied untouched.
    """
    result: List[str] = []
    brackets: List[str] = []
    i = 0
    length = len(source)
    in_single_quote = False
    in_double_quote = False
    escape = False
    in_line_comment = False
    in_block_comment = False
    while i < length:
        c = source[i]
        if in_block_comment:
            if c == '*' and i + 1 < length and source[i + 1] == '/':
                in_block_comment = False
                i += 2
                continue
            # keep line structure intact
            if c == '\n':
                result.append('\n')
            i += 1
            continue
        if in_line_comment:
            if c != '\n':
                i += 1
                continue
            # newline ends the comment and is handled below
            in_line_comment = False
        if in_single_quote or in_double_quote:
            result.append(c)
            if escape:
                escape = False
            elif c == '\\':
                escape = True
            elif c == '\'' and in_single_quote:
                in_single_quote = False
            elif c == '"' and in_double_quote:
                in_double_quote = False
            i += 1
            continue
        if c == '#' or (c == '/' and i + 1 < length and source[i + 1] == '/'):
            in_line_comment = True
            i += 1
            continue
        if c == '/' and i + 1 < length and source[i + 1] == '*':
            in_block_comment = True
            i += 2
            continue
        if c == '\'':
            in_single_quote = True
        elif c == '"':
            in_double_quote = True
        elif c in '([{':
            brackets.append(c)
        elif c in ')]}':
            if brackets:
                brackets.pop()
        elif c == '\n':
            if not brackets or brackets[-1] == '{':
                j = len(result) - 1
                while j >= 0 and result[j].isspace():
                    j -= 1
                prev = result[j] if j >= 0 else ''
                if (prev not in ('', ';', '{') and prev not in _CONTINUATION_CHARS
                        and _next_word(source, i + 1) != 'else'):
                    result.append(';')
            result.append(' ')
            i += 1
            continue
        result.append(c)
        i += 1
    return ''.join(result)


MCL_GRAMMAR = r"""
    ?start: program

    program: (statement? ";")* statement?
    block: "{" (statement? ";")* statement? "}"

    ?statement: let_expr
              | expression

    let_expr: "let" NAME "=" expression

    ?expression: if_expr
               | fn_expr
               | or_expr

    if_expr: "if" "(" expression ")" block ["else" (block | if_expr)]
    fn_expr: "fn" "(" [params] ")" block
    params: NAME ("," NAME)*

    // Binary operators, loosest first
    ?or_expr: and_expr
            | or_expr "||" and_expr           -> or_op
    ?and_expr: comparison
             | and_expr "&&" comparison       -> and_op
    ?comparison: concat
               | concat ">" concat            -> gt
               | concat ">=" concat           -> gte
               | concat "<" concat            -> lt
               | concat "<=" concat           -> lte
               | concat "==" concat           -> eq
               | concat "!=" concat           -> neq
    ?concat: sum
           | concat "++" sum                  -> concat_op
    ?sum: product
        | sum "+" product                     -> add
        | sum "-" product                     -> sub
    ?product: unary
            | product "*" unary               -> mul
            | product "/" unary               -> div
            | product "%" unary               -> mod
    ?unary: call
          | "-" unary                         -> neg
          | "+" unary                         -> pos
          | "!" unary                         -> not_op
    ?call: atom
         | NAME "(" [args] ")"                -> func_call
    ?atom: INT                                -> integer
         | CHAR_LIT                           -> char
         | STRING_LIT                         -> string
         | "true"                             -> true
         | "false"                            -> false
         | "[" [args] "]"                     -> list_lit
         | NAME                               -> ident
         | "(" expression ")"
         | block
    args: expression ("," expression)*

    // Tokens
    NAME: /[A-Za-z_][A-Za-z0-9_]*/
    INT: /[0-9]+/
    CHAR_LIT: /'(\\.|[^'\\])'/
    STRING_LIT: /"(\\.|[^"\\])*"/

    %import common.WS
    %ignore WS
"""


MCL_PARSER = Lark(
    MCL_GRAMMAR,
    parser='lalr',
    propagate_positions=True,
    maybe_placeholders=False,
)


class ASTTransformer(Transformer):
    """Transforms the raw parse tree into an AST."""

    def program(self, items):
        return Block(list(items))

    def block(self, items):
        return Block(list(items))

    def let_expr(self, items):
        return Let(str(items[0]), items[1])

    def if_expr(self, items):
        condition = items[0]
        then_body = items[1]
        else_body = items[2] if len(items) > 2 else None
        return If(condition, then_body, else_body)

    def fn_expr(self, items):
        params: List[str] = items[0] if len(items) > 1 else []
        return FunctionLit(params, items[-1])

    def params(self, items):
        return [str(token) for token in items]

    def args(self, items):
        return list(items)

    def func_call(self, items):
        name = str(items[0])
        args: List[Node] = items[1] if len(items) > 1 else []
        return Call(name, args)

    # Operators
    def or_op(self, items):
        return BinaryOp('||', items[0], items[1])

    def and_op(self, items):
        return BinaryOp('&&', items[0], items[1])

    def gt(self, items):
        return BinaryOp('>', items[0], items[1])

    def gte(self, items):
        return BinaryOp('>=', items[0], items[1])

    def lt(self, items):
        return BinaryOp('<', items[0], items[1])

    def lte(self, items):
        return BinaryOp('<=', items[0], items[1])

    def eq(self, items):
        return BinaryOp('==', items[0], items[1])

    def neq(self, items):
        return BinaryOp('!=', items[0], items[1])

    def concat_op(self, items):
        return Concat(items[0], items[1])

    def add(self, items):
        return BinaryOp('+', items[0], items[1])

    def sub(self, items):
        return BinaryOp('-', items[0], items[1])

    def mul(self, items):
        return BinaryOp('*', items[0], items[1])

    def div(self, items):
        return BinaryOp('/', items[0], items[1])

    def mod(self, items):
        return BinaryOp('%', items[0], items[1])

    def neg(self, items):
        return UnaryOp('-', items[0])

    def pos(self, items):
        return UnaryOp('+', items[0])

    def not_op(self, items):
        return UnaryOp('!', items[0])

    # Atoms
    def integer(self, items):
        return Literal(int(items[0]), 'Integer')

    def char(self, items):
        # Use Python's literal syntax to unescape
        return Literal(py_ast.literal_eval(items[0].value), 'Char')

    def string(self, items):
        return Literal(py_ast.literal_eval(items[0].value), 'Str')

    def true(self, items):
        return Literal(True, 'Bool')

    def false(self, items):
        return Literal(False, 'Bool')

    def list_lit(self, items):
        elements: List[Node] = items[0] if items else []
        return ListLit(elements)

    def ident(self, items):
        return Ident(str(items[0]))


def parse_program(source: str) -> Block:
    """Parse MCL source code into a `Block` of top-level statements.

    Syntax errors are raised as exceptions from the parser.
    """
    pre = preprocess(source)
    tree = MCL_PARSER.parse(pre)
    return ASTTransformer().transform(tree)
