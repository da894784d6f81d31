"""CLI entry point for the Glint interpreter.

Usage:
    python -m glint [-v|-vv|-vvv]                    interactive session
    python -m glint [-v...] <program_file>
    python -m glint [-v...] -e <source>
    python -m glint [-v...] --emit-ast <program_file>
    python -m glint [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  -e            Run the given source text
  --emit-ast    Parse the given .glint file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory (or the
file named by --debug-file) when verbosity is greater than zero. Errors are
rendered to stderr; running a file or a source string exits with status 1 on
the first error.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Callable, List, Optional, TextIO

from .ast_json import statements_from_json_obj, statements_to_json_obj
from .diagnostics import render_diagnostic
from .errors import GlintError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse
from .types import to_display

PROMPT = '>>> '

REPL_COMMANDS = [
    (':help', 'Show this help message'),
    (':vars', 'Show all defined variables'),
    (':clear', 'Clear all variables'),
    (':quit', 'Exit the interpreter'),
    (':exit', 'Exit the interpreter'),
]


class Repl:
    """Line-at-a-time session sharing one interpreter.

    An error aborts the current line only; the variables defined by earlier
    lines stay available.
    """
    def __init__(self, interpreter: Interpreter, read_line: Callable[[str], str] = input,
                 stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self.interpreter = interpreter
        self.read_line = read_line
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def write(self, text: str = '') -> None:
        print(text, file=self.stdout)

    def run(self) -> None:
        self.write('Glint interpreter. Type :help for help, :quit to exit.')
        while True:
            try:
                line = self.read_line(PROMPT)
            except EOFError:
                self.write()
                return
            except KeyboardInterrupt:
                self.write()
                continue
            if not self.handle_line(line):
                return

    def handle_line(self, line: str) -> bool:
        """Process one input line; return False when the session should end."""
        text = line.strip()
        if not text:
            return True
        if text.startswith(':'):
            return self.command(text)
        try:
            result = self.interpreter.execute(parse(tokenize(line)))
        except GlintError as e:
            print(render_diagnostic(e.diagnostic, line, '<repl>'), file=self.stderr)
            return True
        if result is not None:
            self.write(to_display(result))
        return True

    def command(self, text: str) -> bool:
        if text in (':quit', ':exit'):
            return False
        if text == ':help':
            self.show_help()
        elif text == ':vars':
            self.show_vars()
        elif text == ':clear':
            self.interpreter.environment.clear()
            self.write('Variables cleared.')
        else:
            print(f"Unknown command '{text}'. Type :help for a list of commands.", file=self.stderr)
        return True

    def show_help(self) -> None:
        self.write('Commands:')
        for name, description in REPL_COMMANDS:
            self.write(f"  {name:<9} - {description}")
        self.write()
        self.write('Built-in functions:')
        for name in sorted(self.interpreter.functions):
            signature = self.interpreter.functions[name]
            self.write(f"  {signature.usage():<18} {signature.doc}")
        self.write()
        self.write('Syntax:')
        self.write('  Values:      42, 3.14, true, "text", [1, 2], {"key": 1}')
        self.write('  Assignment:  x = 10, x += 1')
        self.write('  Operators:   + - * /  == != < > <= >=  and or not  in, not in')
        self.write('  Calls:       max(1, 2), max(a=1, b=2), sum(1, 2, 3)')

    def show_vars(self) -> None:
        environment = self.interpreter.environment
        if len(environment) == 0:
            self.write('No variables defined.')
            return
        self.write('Variables:')
        for name in environment.names():
            self.write(f"  {name} = {to_display(environment.get(name))}")


def run_unit(source: str, filename: str, interpreter: Interpreter) -> int:
    """Run a whole program, printing its final value; return the exit status."""
    try:
        result = interpreter.execute(parse(tokenize(source)))
    except GlintError as e:
        print(render_diagnostic(e.diagnostic, source, filename), file=sys.stderr)
        return 1
    if result is not None:
        print(to_display(result))
    return 0


def read_source(path: Path) -> Optional[str]:
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        return None
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def emit_ast(program_file: Path) -> int:
    source = read_source(program_file)
    if source is None:
        return 1
    try:
        statements = parse(tokenize(source))
    except GlintError as e:
        print(render_diagnostic(e.diagnostic, source, str(program_file)), file=sys.stderr)
        return 1
    out_path = program_file.with_name(program_file.name + '.ast.json')
    with open(out_path, 'w', encoding='utf-8') as out:
        json.dump(statements_to_json_obj(statements, source), out, ensure_ascii=False, indent=2)
    print(str(out_path))
    return 0


def run_ast(ast_path: Path, interpreter: Interpreter) -> int:
    if not ast_path.exists():
        print(f"Error: file {ast_path} not found", file=sys.stderr)
        return 1
    try:
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        statements = statements_from_json_obj(data)
    except (ValueError, KeyError, IndexError, TypeError, RecursionError) as e:
        print(f"Error: invalid AST file {ast_path}: {e}", file=sys.stderr)
        return 1
    source = data.get('source') if isinstance(data, dict) else None
    if not isinstance(source, str):
        source = ''
    try:
        result = interpreter.execute(statements)
    except GlintError as e:
        print(render_diagnostic(e.diagnostic, source, str(ast_path)), file=sys.stderr)
        return 1
    if result is not None:
        print(to_display(result))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog='glint', description='Glint language interpreter')
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='where debug output goes (default: debug.txt)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('-e', metavar='SOURCE', dest='source', help='run the given source text')
    group.add_argument('--emit-ast', metavar='GLINT_FILE', help='emit AST JSON for the given .glint file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='Glint program file (.glint) to execute')
    args = parser.parse_args(argv)

    if args.emit_ast:
        return emit_ast(Path(args.emit_ast))

    debug_file = args.debug_file if args.v > 0 else None
    with Interpreter(debug_level=args.v, debug_file=debug_file) as interpreter:
        if args.ast:
            return run_ast(Path(args.ast), interpreter)
        if args.source is not None:
            if args.program:
                parser.error('cannot combine -e with a program file')
            return run_unit(args.source, '<input>', interpreter)
        if args.program:
            program_file = Path(args.program)
            source = read_source(program_file)
            if source is None:
                return 1
            return run_unit(source, str(program_file), interpreter)
        Repl(interpreter).run()
        return 0


if __name__ == '__main__':
    sys.exit(main())
