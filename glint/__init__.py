# Glint language package
# A small expression language: lexer, parser and tree-walking interpreter
# with compiler-style diagnostics.
from .diagnostics import render_diagnostic
from .environment import Environment
from .errors import Diagnostic, ErrorKind, EvaluationError, GlintError, LexError, ParseError
from .interpreter import Interpreter, evaluate, run_source
from .lexer import Token, TokenKind, tokenize
from .parser import parse
from .span import Span

__all__ = [
    'tokenize',
    'parse',
    'evaluate',
    'run_source',
    'render_diagnostic',
    'Interpreter',
    'Environment',
    'Token',
    'TokenKind',
    'Span',
    'Diagnostic',
    'ErrorKind',
    'GlintError',
    'LexError',
    'ParseError',
    'EvaluationError',
]
