"""
Expression Parser

Tokenizer plus operator-precedence parser turning expression text, canonical
or hand written, into an expression tree. Grammar, loosest binding first:

    expression := additive
    additive   := term (('+' | '-') term)*
    term       := unary (('*' | '/') unary)*
    unary      := '-' unary | power
    power      := primary ('^' unary)?
    primary    := NUMBER | IDENT | FUNCTION '(' expression ')' | '(' expression ')'

'+', '-', '*' and '/' associate to the left, '^' to the right. Prefix minus
binds looser than '^', so -x^2 is -(x^2), and is built as (0 - operand).
A '-' glued to a digit in operand position belongs to the number literal,
which keeps rendered negative constants re-parseable.

Open parentheses, calls and prefix minus signs count towards max_depth.
Canonical text of a tree of depth d nests d - 1 of them.
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from .errors import ParseError, RecursionLimitExceeded
from .expression_tree.builders import NodeBuilder, get_global_builder
from .expression_tree.core.node import Node
from .expression_tree.core.operators import MAX_PARSE_DEPTH, UNARY_FUNCTIONS
from .logging_system import log_debug

TOKEN_NUMBER = 'NUMBER'
TOKEN_IDENT = 'IDENT'
TOKEN_OPERATOR = 'OPERATOR'
TOKEN_LPAREN = 'LPAREN'
TOKEN_RPAREN = 'RPAREN'
TOKEN_COMMA = 'COMMA'
TOKEN_EOF = 'EOF'


@dataclass(frozen=True)
class Token:
    type: str
    value: str
    position: int


class Tokenizer:
    TOKEN_SPECS = [
        (r'\s+', None),
        (r'\d+(?:\.\d+)?', TOKEN_NUMBER),
        (r'[A-Za-z_][A-Za-z0-9_]*', TOKEN_IDENT),
        (r'[-+*/^]', TOKEN_OPERATOR),
        (r'\(', TOKEN_LPAREN),
        (r'\)', TOKEN_RPAREN),
        (r',', TOKEN_COMMA),
    ]
    _COMPILED_SPECS = [(re.compile(pattern), ttype) for pattern, ttype in TOKEN_SPECS]
    _NEGATIVE_NUMBER = re.compile(r'-\d+(?:\.\d+)?')

    # Token types after which the next token starts an operand
    _OPERAND_POSITION = (None, TOKEN_OPERATOR, TOKEN_LPAREN, TOKEN_COMMA)

    def __init__(self, text: str):
        self.text = text
        self.tokens = self._tokenize()

    def _tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        pos = 0
        while pos < len(self.text):
            previous = tokens[-1].type if tokens else None
            if previous in self._OPERAND_POSITION:
                match = self._NEGATIVE_NUMBER.match(self.text, pos)
                if match:
                    tokens.append(Token(TOKEN_NUMBER, match.group(0), pos))
                    pos = match.end()
                    continue

            for regex, ttype in self._COMPILED_SPECS:
                match = regex.match(self.text, pos)
                if match:
                    if ttype:
                        tokens.append(Token(ttype, match.group(0), pos))
                    pos = match.end()
                    break
            else:
                raise ParseError(pos, f"unexpected character {self.text[pos]!r}")
        tokens.append(Token(TOKEN_EOF, "", len(self.text)))
        return tokens


# Binding strength of pending operators; prefix minus sits between '*' and '^'
_PRECEDENCE = {'+': 1, '-': 1, '*': 2, '/': 2, 'neg': 3, '^': 4}
_RIGHT_ASSOCIATIVE = frozenset({'^'})

FRAME_OPERATOR = 'operator'
FRAME_NEGATE = 'negate'
FRAME_GROUP = 'group'
FRAME_CALL = 'call'


@dataclass
class _Frame:
    kind: str
    token: Token
    name: Optional[Token] = None
    arguments: int = 1


class Parser:
    """
    Operator-precedence parser driven by explicit operand and operator
    stacks, so nesting costs heap rather than interpreter frames.
    """

    def __init__(self, text: str, max_depth: int = MAX_PARSE_DEPTH,
                 builder: Optional[NodeBuilder] = None):
        if not isinstance(text, str):
            raise TypeError(f"expression text must be a string, got {type(text).__name__}")
        self.text = text
        self.max_depth = max_depth
        self.builder = builder if builder is not None else get_global_builder()
        self.tokens = Tokenizer(text).tokens
        self.index = 0
        self.depth = 0
        self.operands: List[Node] = []
        self.frames: List[_Frame] = []

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def _advance(self) -> Token:
        token = self.tokens[self.index]
        if token.type != TOKEN_EOF:
            self.index += 1
        return token

    def _open(self, frame: _Frame):
        self.depth += 1
        if self.depth > self.max_depth:
            raise RecursionLimitExceeded(self.max_depth, "parser")
        self.frames.append(frame)

    def parse(self) -> Node:
        if self.current.type == TOKEN_EOF:
            raise ParseError(self.current.position, "empty expression")

        expect_operand = True
        while True:
            if expect_operand:
                expect_operand = self._parse_operand()
            elif self._parse_continuation():
                break

        node = self.operands.pop()
        log_debug(f"parsed {len(self.tokens) - 1} tokens into {node.size()} nodes")
        return node

    def _parse_operand(self) -> bool:
        """Consume one operand or prefix; returns whether another operand is expected"""
        token = self.current

        if token.type == TOKEN_NUMBER:
            self._advance()
            self.operands.append(self.builder.constant(float(token.value)))
            return False

        if token.type == TOKEN_IDENT:
            self._advance()
            if self.current.type == TOKEN_LPAREN:
                if token.value not in UNARY_FUNCTIONS:
                    raise ParseError(token.position, f"unknown function {token.value!r}")
                opening = self._advance()
                if self.current.type == TOKEN_RPAREN:
                    raise ParseError(token.position, f"function {token.value!r} expects exactly one argument, got 0")
                self._open(_Frame(FRAME_CALL, opening, name=token))
                return True
            if token.value in UNARY_FUNCTIONS:
                raise ParseError(token.position, f"function {token.value!r} used without an argument list")
            self.operands.append(self.builder.variable(token.value))
            return False

        if token.type == TOKEN_LPAREN:
            self._advance()
            self._open(_Frame(FRAME_GROUP, token))
            return True

        if token.type == TOKEN_OPERATOR and token.value == '-':
            self._advance()
            self._open(_Frame(FRAME_NEGATE, token))
            return True

        if token.type == TOKEN_EOF:
            raise ParseError(token.position, "unexpected end of input")
        raise ParseError(token.position, f"unexpected token {token.value!r}")

    def _parse_continuation(self) -> bool:
        """Handle the token after a complete operand; returns True at end of input"""
        token = self.current

        if token.type == TOKEN_OPERATOR:
            self._reduce(_PRECEDENCE[token.value], token.value in _RIGHT_ASSOCIATIVE)
            self._advance()
            self.frames.append(_Frame(FRAME_OPERATOR, token))
            return False

        self._reduce(0, False)
        enclosing = self.frames[-1] if self.frames else None

        if token.type == TOKEN_EOF:
            if enclosing is not None:
                self._check_arity(enclosing)
                raise ParseError(enclosing.token.position, "unmatched parenthesis")
            return True

        if token.type == TOKEN_COMMA and enclosing is not None and enclosing.kind == FRAME_CALL:
            self._advance()
            enclosing.arguments += 1
            return False

        if token.type == TOKEN_RPAREN:
            if enclosing is None:
                raise ParseError(token.position, "unmatched parenthesis")
            self._check_arity(enclosing)
            self._advance()
            self.frames.pop()
            self.depth -= 1
            if enclosing.kind == FRAME_CALL:
                argument = self.operands.pop()
                self.operands.append(self.builder.unary(enclosing.name.value, argument))
            return False

        if enclosing is None:
            raise ParseError(token.position, f"unexpected token {token.value!r} after complete expression")
        self._check_arity(enclosing)
        raise ParseError(token.position, f"expected ')' but found {token.value!r}")

    def _reduce(self, precedence: int, right_associative: bool):
        """Apply pending operators that bind at least as tightly as the incoming one"""
        while self.frames and self.frames[-1].kind in (FRAME_OPERATOR, FRAME_NEGATE):
            frame = self.frames[-1]
            pending = _PRECEDENCE['neg'] if frame.kind == FRAME_NEGATE else _PRECEDENCE[frame.token.value]
            if pending < precedence or (pending == precedence and right_associative):
                return
            self.frames.pop()
            operand = self.operands.pop()
            if frame.kind == FRAME_NEGATE:
                self.depth -= 1
                self.operands.append(self.builder.sub(self.builder.constant(0.0), operand))
            else:
                left = self.operands.pop()
                self.operands.append(self.builder.binary(frame.token.value, left, operand))

    def _check_arity(self, frame: _Frame):
        if frame.kind == FRAME_CALL and frame.arguments != 1:
            raise ParseError(frame.name.position,
                             f"function {frame.name.value!r} expects exactly one argument, got {frame.arguments}")


def tokenize(text: str) -> List[Token]:
    return Tokenizer(text).tokens


def parse(text: str, max_depth: int = MAX_PARSE_DEPTH) -> Node:
    """Parse expression text into an expression tree"""
    return Parser(text, max_depth=max_depth).parse()
