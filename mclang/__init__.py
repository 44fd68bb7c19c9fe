# MCL language package
# This package provides a parser and tree-walking interpreter for MCL.
from .interpreter import run_program, start_evaluation, Interpreter
from .errors import MclError, ErrorVal

__all__ = [
    'run_program',
    'start_evaluation',
    'Interpreter',
    'MclError',
    'ErrorVal',
]
