"""Recursive-descent parser for the Glint language.

The parser consumes the token list produced by `glint.lexer.tokenize` and
builds the statement nodes defined in `glint.ast`. Expressions are parsed
with one method per precedence tier, lowest first:

    or -> and -> equality -> relational -> additive -> multiplicative
       -> unary -> postfix -> primary

Binary operators are left-associative. Unary operators recurse into
themselves so `--x` and `not not x` parse. The parser never backtracks; the
only lookahead beyond the current token is the one extra peek needed to
recognise `name =`, `name op=` and keyword arguments.

The first problem raises `ParseError`. So does input nested deeper than
`MAX_NESTING` brackets or unary operators, or a statement whose tree is
taller than `MAX_EXPRESSION_DEPTH`, which keeps both parsing and evaluation
well inside Python's recursion limit.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from .ast import (
    Assign,
    BinaryOp,
    BinaryOperator,
    BoolLiteral,
    Call,
    CompoundAssign,
    CompoundOperator,
    DictEntry,
    DictLiteral,
    Expr,
    ExprStmt,
    FloatLiteral,
    Identifier,
    Index,
    IntLiteral,
    KeywordArg,
    ListLiteral,
    Stmt,
    StrLiteral,
    UnaryOp,
    UnaryOperator,
    expression_depth,
)
from .errors import (
    ParseError,
    nesting_too_deep,
    unclosed_delimiter,
    unexpected_eof,
    unexpected_token,
)
from .lexer import Token, TokenKind, tokenize


# Brackets and unary operators open one level each; every level costs the
# parser about ten Python frames.
MAX_NESTING = 48

# Height of a finished expression tree, which bounds evaluation depth.
MAX_EXPRESSION_DEPTH = 200


COMPOUND_OPERATORS: Dict[TokenKind, CompoundOperator] = {
    TokenKind.PLUS_ASSIGN: CompoundOperator.ADD,
    TokenKind.MINUS_ASSIGN: CompoundOperator.SUB,
    TokenKind.STAR_ASSIGN: CompoundOperator.MUL,
    TokenKind.SLASH_ASSIGN: CompoundOperator.DIV,
}

EQUALITY_OPERATORS: Dict[TokenKind, BinaryOperator] = {
    TokenKind.EQ: BinaryOperator.EQ,
    TokenKind.NE: BinaryOperator.NE,
}

RELATIONAL_OPERATORS: Dict[TokenKind, BinaryOperator] = {
    TokenKind.LT: BinaryOperator.LT,
    TokenKind.GT: BinaryOperator.GT,
    TokenKind.LE: BinaryOperator.LE,
    TokenKind.GE: BinaryOperator.GE,
    TokenKind.IN: BinaryOperator.IN,
    TokenKind.NOT_IN: BinaryOperator.NOT_IN,
}

ADDITIVE_OPERATORS: Dict[TokenKind, BinaryOperator] = {
    TokenKind.PLUS: BinaryOperator.ADD,
    TokenKind.MINUS: BinaryOperator.SUB,
}

MULTIPLICATIVE_OPERATORS: Dict[TokenKind, BinaryOperator] = {
    TokenKind.STAR: BinaryOperator.MUL,
    TokenKind.SLASH: BinaryOperator.DIV,
}

UNARY_OPERATORS: Dict[TokenKind, UnaryOperator] = {
    TokenKind.NOT: UnaryOperator.NOT,
    TokenKind.MINUS: UnaryOperator.NEG,
    TokenKind.PLUS: UnaryOperator.POS,
}

# Tokens that may begin an expression (and therefore a statement).
EXPRESSION_START = frozenset([
    TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.STRING, TokenKind.BOOLEAN,
    TokenKind.IDENT, TokenKind.NOT, TokenKind.MINUS, TokenKind.PLUS,
    TokenKind.LPAREN, TokenKind.LBRACKET, TokenKind.LBRACE,
])

CLOSERS: Dict[TokenKind, TokenKind] = {
    TokenKind.LPAREN: TokenKind.RPAREN,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LBRACE: TokenKind.RBRACE,
}


def expected_name(kind: TokenKind) -> str:
    """Name of a token kind as it appears in an expected-token list."""
    if kind in (TokenKind.INTEGER, TokenKind.FLOAT, TokenKind.STRING,
                TokenKind.BOOLEAN, TokenKind.IDENT, TokenKind.EOF):
        return kind.value
    return f"'{kind.value}'"


class Parser:
    def __init__(self, tokens: List[Token]):
        if not tokens or tokens[-1].kind is not TokenKind.EOF:
            raise ValueError('token list must end with an EOF token')
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    ###########################################################################
    # Token helpers
    ###########################################################################

    def peek(self, offset: int = 0) -> Token:
        i = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[i]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind is not TokenKind.EOF:
            self.pos += 1
        return token

    def check(self, *kinds: TokenKind) -> bool:
        return self.peek().kind in kinds

    def match(self, *kinds: TokenKind) -> Optional[Token]:
        if self.check(*kinds):
            return self.advance()
        return None

    def consume(self, kind: TokenKind) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.error([expected_name(kind)])

    def error(self, expected: Sequence[str]) -> ParseError:
        token = self.peek()
        if token.kind is TokenKind.EOF:
            return unexpected_eof(token.span, expected)
        return unexpected_token(token.describe(), token.span, expected)

    def close(self, opener: Token) -> Token:
        """Consume the delimiter closing `opener` or report it as unclosed."""
        closer = CLOSERS[opener.kind]
        if self.check(closer):
            return self.advance()
        token = self.peek()
        raise unclosed_delimiter(opener.kind.value, closer.value, opener.span,
                                 token.describe(), token.span)

    def enter(self, token: Token) -> None:
        """Open one nesting level at `token`."""
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise nesting_too_deep(token.span, MAX_NESTING)

    def leave(self) -> None:
        self.depth -= 1

    def check_depth(self, expr: Expr) -> Expr:
        if expression_depth(expr) > MAX_EXPRESSION_DEPTH:
            raise nesting_too_deep(expr.span, MAX_EXPRESSION_DEPTH, 'expression is too deep')
        return expr

    ###########################################################################
    # Statements
    ###########################################################################

    def parse_program(self) -> List[Stmt]:
        statements: List[Stmt] = []
        while True:
            while self.match(TokenKind.SEMICOLON):
                pass
            if self.check(TokenKind.EOF):
                return statements
            statements.append(self.parse_statement())
            # A statement ends at ';', end of input or the start of the next one
            if not self.check(TokenKind.SEMICOLON, TokenKind.EOF, *EXPRESSION_START):
                raise self.error(["';'", 'end of input'])

    def parse_statement(self) -> Stmt:
        token = self.peek()
        if token.kind is TokenKind.IDENT:
            following = self.peek(1)
            if following.kind is TokenKind.ASSIGN:
                self.advance()
                self.advance()
                value = self.check_depth(self.parse_expression())
                return Assign(token.value, token.span, value, token.span.merge(value.span))
            if following.kind in COMPOUND_OPERATORS:
                self.advance()
                op_token = self.advance()
                value = self.check_depth(self.parse_expression())
                return CompoundAssign(token.value, token.span, COMPOUND_OPERATORS[op_token.kind],
                                      op_token.span, value, token.span.merge(value.span))
        expr = self.check_depth(self.parse_expression())
        return ExprStmt(expr, expr.span)

    ###########################################################################
    # Expressions
    ###########################################################################

    def parse_expression(self) -> Expr:
        return self.parse_or()

    def binary(self, left: Expr, op_token: Token, op: BinaryOperator, right: Expr) -> BinaryOp:
        return BinaryOp(op, left, right, op_token.span, left.span.merge(right.span))

    def parse_or(self) -> Expr:
        node = self.parse_and()
        while self.check(TokenKind.OR):
            op_token = self.advance()
            node = self.binary(node, op_token, BinaryOperator.OR, self.parse_and())
        return node

    def parse_and(self) -> Expr:
        node = self.parse_equality()
        while self.check(TokenKind.AND):
            op_token = self.advance()
            node = self.binary(node, op_token, BinaryOperator.AND, self.parse_equality())
        return node

    def parse_equality(self) -> Expr:
        node = self.parse_relational()
        while self.check(*EQUALITY_OPERATORS):
            op_token = self.advance()
            node = self.binary(node, op_token, EQUALITY_OPERATORS[op_token.kind], self.parse_relational())
        return node

    def parse_relational(self) -> Expr:
        node = self.parse_additive()
        while self.check(*RELATIONAL_OPERATORS):
            op_token = self.advance()
            node = self.binary(node, op_token, RELATIONAL_OPERATORS[op_token.kind], self.parse_additive())
        return node

    def parse_additive(self) -> Expr:
        node = self.parse_multiplicative()
        while self.check(*ADDITIVE_OPERATORS):
            op_token = self.advance()
            node = self.binary(node, op_token, ADDITIVE_OPERATORS[op_token.kind], self.parse_multiplicative())
        return node

    def parse_multiplicative(self) -> Expr:
        node = self.parse_unary()
        while self.check(*MULTIPLICATIVE_OPERATORS):
            op_token = self.advance()
            node = self.binary(node, op_token, MULTIPLICATIVE_OPERATORS[op_token.kind], self.parse_unary())
        return node

    def parse_unary(self) -> Expr:
        if self.check(*UNARY_OPERATORS):
            op_token = self.advance()
            self.enter(op_token)
            operand = self.parse_unary()
            self.leave()
            return UnaryOp(UNARY_OPERATORS[op_token.kind], operand, op_token.span,
                           op_token.span.merge(operand.span))
        return self.parse_postfix()

    def parse_postfix(self) -> Expr:
        node = self.parse_primary()
        while True:
            if self.check(TokenKind.LBRACKET):
                opener = self.advance()
                self.enter(opener)
                index = self.parse_expression()
                closer = self.close(opener)
                self.leave()
                node = Index(node, index, node.span.merge(closer.span))
                continue
            if self.check(TokenKind.LPAREN):
                # Only a bare name can be called; see parse_primary
                raise unexpected_token("'('", self.peek().span, ["';'", 'end of input', 'operator'])
            return node

    def parse_primary(self) -> Expr:
        token = self.peek()
        kind = token.kind
        if kind is TokenKind.INTEGER:
            self.advance()
            return IntLiteral(token.value, token.span)
        if kind is TokenKind.FLOAT:
            self.advance()
            return FloatLiteral(token.value, token.span)
        if kind is TokenKind.STRING:
            self.advance()
            return StrLiteral(token.value, token.span)
        if kind is TokenKind.BOOLEAN:
            self.advance()
            return BoolLiteral(token.value, token.span)
        if kind is TokenKind.IDENT:
            self.advance()
            if self.check(TokenKind.LPAREN):
                return self.parse_call(token)
            return Identifier(token.value, token.span)
        if kind is TokenKind.LPAREN:
            opener = self.advance()
            self.enter(opener)
            expr = self.parse_expression()
            self.close(opener)
            self.leave()
            # Grouping leaves no trace in the tree
            return expr
        if kind is TokenKind.LBRACKET:
            return self.parse_list()
        if kind is TokenKind.LBRACE:
            return self.parse_dict()
        raise self.error(['expression'])

    def parse_call(self, name: Token) -> Call:
        opener = self.advance()
        self.enter(opener)
        args: List[Expr] = []
        kwargs: List[KeywordArg] = []
        while not self.check(TokenKind.RPAREN):
            if self.check(TokenKind.IDENT) and self.peek(1).kind is TokenKind.ASSIGN:
                kw_token = self.advance()
                self.advance()
                kwargs.append(KeywordArg(kw_token.value, kw_token.span, self.parse_expression()))
            else:
                arg = self.parse_expression()
                if kwargs:
                    raise unexpected_token('positional argument after keyword argument',
                                           arg.span, ['keyword argument (name = value)'])
                args.append(arg)
            if not self.match(TokenKind.COMMA):
                break
        closer = self.close(opener)
        self.leave()
        return Call(name.value, name.span, tuple(args), tuple(kwargs), name.span.merge(closer.span))

    def parse_list(self) -> ListLiteral:
        opener = self.advance()
        self.enter(opener)
        elements: List[Expr] = []
        while not self.check(TokenKind.RBRACKET):
            elements.append(self.parse_expression())
            if not self.match(TokenKind.COMMA):
                break
        closer = self.close(opener)
        self.leave()
        return ListLiteral(tuple(elements), opener.span.merge(closer.span))

    def parse_dict(self) -> DictLiteral:
        opener = self.advance()
        self.enter(opener)
        entries: List[DictEntry] = []
        while not self.check(TokenKind.RBRACE):
            if not self.check(TokenKind.STRING):
                raise self.error([expected_name(TokenKind.STRING), "'}'"])
            key = self.advance()
            self.consume(TokenKind.COLON)
            entries.append(DictEntry(key.value, key.span, self.parse_expression()))
            if not self.match(TokenKind.COMMA):
                break
        closer = self.close(opener)
        self.leave()
        return DictLiteral(tuple(entries), opener.span.merge(closer.span))


def parse(tokens: List[Token]) -> List[Stmt]:
    """Parse a token list into a list of statements."""
    return Parser(tokens).parse_program()


def parse_source(source: str) -> List[Stmt]:
    """Tokenize and parse `source` in one step."""
    return parse(tokenize(source))
