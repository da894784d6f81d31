"""Plain-text rendering of Glint diagnostics.

`render_diagnostic` turns a `Diagnostic` plus the source it refers to into
a compiler-style report:

    error[E0601]: Runtime error: division by zero
     --> <input>:1:4
      |
    1 | 10 / 0
      |    ^ division by zero occurs here
      |      - divisor evaluates to zero
      |
      = help: check the divisor value before dividing

Rendering never inspects how the error was raised; it only reads the
diagnostic's spans, labels and help text.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import Diagnostic
from .span import Span, line_col


def _line_starts(source: str) -> List[int]:
    starts = [0]
    for i, ch in enumerate(source):
        if ch == '\n':
            starts.append(i + 1)
    return starts


def _segments(span: Span, starts: List[int], lines: List[str]) -> Iterator[Tuple[int, int, int]]:
    """Yield (line index, start column, end column) for each line `span` touches."""
    if len(span) == 0:
        index = bisect_right(starts, span.start) - 1
        col = span.start - starts[index]
        yield index, col, col + 1
        return
    first = bisect_right(starts, span.start) - 1
    last = bisect_right(starts, span.end - 1) - 1
    for index in range(first, last + 1):
        begin = span.start - starts[index] if index == first else 0
        end = span.end - starts[index] if index == last else len(lines[index])
        yield index, begin, max(end, begin + 1)


def render_diagnostic(diagnostic: Diagnostic, source: str, filename: Optional[str] = None) -> str:
    """Render `diagnostic` against `source` as a multi-line report."""
    filename = filename or '<input>'
    lines = source.split('\n')
    starts = _line_starts(source)
    kind = diagnostic.kind

    markers = [(diagnostic.primary_span, '^', diagnostic.label)]
    markers.extend((label.span, '-', label.message) for label in diagnostic.secondary)

    # line index -> list of (start col, end col, marker char, message)
    underlines: Dict[int, List[Tuple[int, int, str, str]]] = {}
    for span, char, message in markers:
        segments = list(_segments(span, starts, lines))
        for n, (index, begin, end) in enumerate(segments):
            text = message if n == len(segments) - 1 else ''
            underlines.setdefault(index, []).append((begin, end, char, text))

    gutter = len(str(max(underlines) + 1)) if underlines else 1
    pad = ' ' * gutter
    line, col = line_col(source, diagnostic.primary_span.start)

    out = [f"error[{kind.code}]: {kind.category}: {diagnostic.message}",
           f"{pad}--> {filename}:{line}:{col}",
           f"{pad} |"]
    previous = None
    for index in sorted(underlines):
        if previous is not None and index > previous + 1:
            out.append(f"{pad} ...")
        out.append(f"{str(index + 1).rjust(gutter)} | {lines[index]}")
        for begin, end, char, text in underlines[index]:
            underline = ' ' * begin + char * (end - begin)
            out.append(f"{pad} | {underline} {text}".rstrip())
        previous = index
    out.append(f"{pad} |")

    if diagnostic.help_text:
        out.append(f"{pad} = help: {diagnostic.help_text}")
    if diagnostic.suggestions:
        out.append(f"{pad} = help: did you mean '{diagnostic.suggestions[0]}'?")
    return '\n'.join(out)


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """One-line summary used by the debug trace."""
    span = diagnostic.primary_span
    return f"{diagnostic.kind.code} [{span.start}..{span.end}]: {diagnostic.message}"
