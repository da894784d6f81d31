"""Tokenizer for the Glint language.

The lexer walks the source string once and produces a list of tokens, each
carrying the exact span of the text it was read from. The list always ends
with an `EOF` token whose span is the empty span at the end of the input.

Lexing stops at the first problem: an unknown character, a malformed number
or an unterminated string raises `LexError` and no tokens are returned.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List

from .errors import invalid_character, malformed_number, unterminated_string
from .span import Span
from .types import INT_MAX, quote_string


class TokenKind(Enum):
    """Closed set of token kinds; the value is the name used in messages."""

    INTEGER = 'integer'
    FLOAT = 'float'
    STRING = 'string'
    BOOLEAN = 'boolean'
    IDENT = 'identifier'

    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'

    EQ = '=='
    NE = '!='
    LT = '<'
    GT = '>'
    LE = '<='
    GE = '>='

    AND = 'and'
    OR = 'or'
    NOT = 'not'
    IN = 'in'
    NOT_IN = 'not in'

    ASSIGN = '='
    PLUS_ASSIGN = '+='
    MINUS_ASSIGN = '-='
    STAR_ASSIGN = '*='
    SLASH_ASSIGN = '/='

    LPAREN = '('
    RPAREN = ')'
    LBRACKET = '['
    RBRACKET = ']'
    LBRACE = '{'
    RBRACE = '}'
    COMMA = ','
    COLON = ':'
    SEMICOLON = ';'

    EOF = 'end of input'


KEYWORDS: Dict[str, TokenKind] = {
    'true': TokenKind.BOOLEAN,
    'false': TokenKind.BOOLEAN,
    'and': TokenKind.AND,
    'or': TokenKind.OR,
    'not': TokenKind.NOT,
    'in': TokenKind.IN,
}

# Operators that may be followed by '=' to form a two-character operator.
TWO_CHAR_OPS: Dict[str, TokenKind] = {
    '==': TokenKind.EQ,
    '!=': TokenKind.NE,
    '<=': TokenKind.LE,
    '>=': TokenKind.GE,
    '+=': TokenKind.PLUS_ASSIGN,
    '-=': TokenKind.MINUS_ASSIGN,
    '*=': TokenKind.STAR_ASSIGN,
    '/=': TokenKind.SLASH_ASSIGN,
}

SINGLE_CHAR_OPS: Dict[str, TokenKind] = {
    '+': TokenKind.PLUS,
    '-': TokenKind.MINUS,
    '*': TokenKind.STAR,
    '/': TokenKind.SLASH,
    '<': TokenKind.LT,
    '>': TokenKind.GT,
    '=': TokenKind.ASSIGN,
    '(': TokenKind.LPAREN,
    ')': TokenKind.RPAREN,
    '[': TokenKind.LBRACKET,
    ']': TokenKind.RBRACKET,
    '{': TokenKind.LBRACE,
    '}': TokenKind.RBRACE,
    ',': TokenKind.COMMA,
    ':': TokenKind.COLON,
    ';': TokenKind.SEMICOLON,
}

ESCAPES: Dict[str, str] = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '\\': '\\',
    '"': '"',
}

# Hints for characters people commonly bring over from other languages.
CHARACTER_HINTS: Dict[str, str] = {
    '!': "use 'not' for negation or '!=' for inequality",
    '&': "use 'and' for logical conjunction",
    '|': "use 'or' for logical disjunction",
    '%': 'there is no modulo operator',
    "'": 'strings use double quotes: "text"',
}


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    span: Span
    value: Any = None

    def describe(self) -> str:
        """Human-readable description used in syntax errors."""
        if self.kind is TokenKind.EOF:
            return 'end of input'
        if self.kind is TokenKind.IDENT:
            return f"identifier '{self.value}'"
        if self.kind is TokenKind.STRING:
            return f"string {quote_string(self.value)}"
        if self.kind is TokenKind.BOOLEAN:
            return f"boolean '{'true' if self.value else 'false'}'"
        if self.kind in (TokenKind.INTEGER, TokenKind.FLOAT):
            return f"{self.kind.value} '{self.value!r}'"
        return f"'{self.kind.value}'"


def is_ident_start(c: str) -> bool:
    return c == '_' or ('a' <= c <= 'z') or ('A' <= c <= 'Z')


def is_ident_char(c: str) -> bool:
    return is_ident_start(c) or ('0' <= c <= '9')


def is_digit(c: str) -> bool:
    return '0' <= c <= '9'


class Lexer:
    """Converts Glint source text into a token list."""
    def __init__(self, source: str):
        self.source = source
        self.pos = 0

    def peek(self, offset: int = 0) -> str:
        i = self.pos + offset
        if i < len(self.source):
            return self.source[i]
        return ''

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        source = self.source
        length = len(source)
        while True:
            self.skip_whitespace_and_comments()
            if self.pos >= length:
                tokens.append(Token(TokenKind.EOF, Span.empty(length)))
                return tokens
            c = source[self.pos]
            if is_ident_start(c):
                tokens.append(self.read_word())
                continue
            if is_digit(c):
                tokens.append(self.read_number())
                continue
            if c == '"':
                tokens.append(self.read_string())
                continue
            # Multi-character operators take precedence over single ones
            pair = source[self.pos:self.pos + 2]
            if pair in TWO_CHAR_OPS:
                tokens.append(Token(TWO_CHAR_OPS[pair], Span(self.pos, self.pos + 2)))
                self.pos += 2
                continue
            if c in SINGLE_CHAR_OPS:
                tokens.append(Token(SINGLE_CHAR_OPS[c], Span.single(self.pos)))
                self.pos += 1
                continue
            raise invalid_character(c, Span.single(self.pos), CHARACTER_HINTS.get(c))

    def skip_whitespace_and_comments(self) -> None:
        source = self.source
        while self.pos < len(source):
            c = source[self.pos]
            if c.isspace():
                self.pos += 1
            elif c == '#':
                while self.pos < len(source) and source[self.pos] != '\n':
                    self.pos += 1
            else:
                break

    def read_word(self) -> Token:
        start = self.pos
        while is_ident_char(self.peek()):
            self.pos += 1
        word = self.source[start:self.pos]
        kind = KEYWORDS.get(word)
        if kind is None:
            return Token(TokenKind.IDENT, Span(start, self.pos), word)
        if kind is TokenKind.BOOLEAN:
            return Token(kind, Span(start, self.pos), word == 'true')
        if kind is TokenKind.NOT:
            end = self.match_following_in()
            if end is not None:
                self.pos = end
                return Token(TokenKind.NOT_IN, Span(start, end))
        return Token(kind, Span(start, self.pos))

    def match_following_in(self):
        """Return the end offset of an `in` keyword following `not`, if any."""
        i = self.pos
        source = self.source
        while i < len(source) and source[i].isspace():
            i += 1
        if i == self.pos:
            # 'not' directly followed by something else is still a separate word
            return None
        if source[i:i + 2] == 'in' and not (i + 2 < len(source) and is_ident_char(source[i + 2])):
            return i + 2
        return None

    def read_number(self) -> Token:
        start = self.pos
        dots = 0
        while is_digit(self.peek()) or self.peek() == '.':
            if self.peek() == '.':
                dots += 1
            self.pos += 1
        # Letters glued to a number (12abc) belong to the malformed literal
        glued = False
        while is_ident_char(self.peek()):
            glued = True
            self.pos += 1
        text = self.source[start:self.pos]
        span = Span(start, self.pos)
        if glued:
            raise malformed_number(text, span, 'unexpected letters in number')
        if dots > 1:
            raise malformed_number(text, span, 'more than one decimal point')
        if text.endswith('.'):
            raise malformed_number(text, span, 'missing digits after the decimal point')
        if dots == 1:
            number = float(text)
            if math.isinf(number):
                raise malformed_number(text, span, 'float does not fit in 64 bits')
            return Token(TokenKind.FLOAT, span, number)
        # int() refuses very long digit strings, so check the length first
        value = int(text) if len(text.lstrip('0')) <= len(str(INT_MAX)) else INT_MAX + 1
        if value > INT_MAX:
            raise malformed_number(text, span, 'integer does not fit in 64 bits')
        return Token(TokenKind.INTEGER, span, value)

    def read_string(self) -> Token:
        start = self.pos
        self.pos += 1  # opening quote
        chars: List[str] = []
        source = self.source
        while self.pos < len(source):
            ch = source[self.pos]
            if ch == '"':
                self.pos += 1
                return Token(TokenKind.STRING, Span(start, self.pos), ''.join(chars))
            if ch == '\\':
                if self.pos + 1 >= len(source):
                    break
                nxt = source[self.pos + 1]
                # Unknown escapes are kept verbatim
                chars.append(ESCAPES.get(nxt, '\\' + nxt))
                self.pos += 2
                continue
            chars.append(ch)
            self.pos += 1
        raise unterminated_string(Span(start, len(source)))


def tokenize(source: str) -> List[Token]:
    """Convert source code into a list of tokens terminated by `EOF`."""
    return Lexer(source).tokenize()
