"""CLI entry point for the MCL interpreter.

Usage:
    python -m mclang [-v|-vv|-vvv] <program_file>
    python -m mclang [-v...] --emit-ast <program_file>
    python -m mclang [-v...] --ast <ast_json_file>

Options:
  -v                   Increase debug verbosity (can be repeated)
  --emit-ast           Parse the given .mcl file and emit an AST JSON file
  --ast                Evaluate a previously emitted AST JSON file
  --recursion-limit N  Raise the host recursion limit before evaluating

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. The value of the program's last expression
is printed to stdout; nothing is printed when it has no value.
"""

import argparse
import json
import sys
from pathlib import Path

from lark.exceptions import LarkError

from .ast import Node
from .ast_json import ast_to_obj, ast_from_obj
from .errors import MclError
from .interpreter import Interpreter
from .parser import parse_program
from .types import EmptyVal, to_string


def _read_source(path: Path) -> str:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _parse(source: str) -> Node:
    try:
        return parse_program(source)
    except LarkError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        sys.exit(1)


def _evaluate(ast_program: Node, debug_level: int) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        value = interpreter.run(ast_program)
    except MclError as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(value, EmptyVal):
        print(to_string(value))


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="MCL language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--recursion-limit', type=int, metavar='N', help='raise the host recursion limit')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='MCL_FILE', help='emit AST JSON for the given .mcl file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='evaluate AST from a JSON file')
    parser.add_argument('program', nargs='?', help='MCL program file (.mcl) to evaluate')
    args = parser.parse_args(argv)

    if args.recursion_limit is not None:
        if args.recursion_limit <= 0:
            parser.error('--recursion-limit must be positive')
        sys.setrecursionlimit(args.recursion_limit)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        ast_program = _parse(_read_source(program_file))
        obj = ast_to_obj(ast_program)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(obj, out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Evaluate from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        data = json.loads(_read_source(ast_path))
        try:
            ast_program = ast_from_obj(data)
        except (TypeError, ValueError, KeyError) as e:
            print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
            sys.exit(1)
        _evaluate(ast_program, args.v)
        return

    # Default: evaluate source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    _evaluate(_parse(_read_source(Path(args.program))), args.v)


if __name__ == '__main__':
    main()
