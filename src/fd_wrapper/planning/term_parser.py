"""
Term Parser

Turns single lines of the planner's answer file into structured terms.

Two line shapes exist:
- State lines: ``(on(a,b) clear(c) handempty)``. Facts are separated by
  whitespace; a fact is a bare functor or ``functor(arg,...)``.
- Action lines: ``(pick-up a table)``. The first token names the action,
  the rest are its arguments.

Lines are split into lexical tokens by ``tokenize`` and consumed in one pass
by ``parse_state`` / ``parse_action``. Only one level of argument nesting is
supported; anything deeper raises ``MalformedLineError``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from .utils.term_types import State, Term, make_state

COMMENT_MARKER = ";"


class TokenKind(Enum):
    """Lexical token categories."""
    OPEN = "("
    CLOSE = ")"
    COMMA = ","
    SPACE = "space"
    ATOM = "atom"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    column: int


class MalformedLineError(ValueError):
    """Raised when a line does not follow the answer-file grammar."""

    def __init__(self, message: str, line: str, column: Optional[int] = None):
        self.line = line
        self.column = column
        where = f" at column {column}" if column is not None else ""
        super().__init__(f"{message}{where}: {line!r}")


_PUNCTUATION = {
    "(": TokenKind.OPEN,
    ")": TokenKind.CLOSE,
    ",": TokenKind.COMMA,
}


def tokenize(line: str) -> Iterator[Token]:
    """
    Lazily split a line into tokens.

    Whitespace runs collapse into a single SPACE token and any other run of
    characters becomes an ATOM. Calling again restarts from the beginning.
    """
    i = 0
    n = len(line)
    while i < n:
        c = line[i]
        if c in _PUNCTUATION:
            yield Token(_PUNCTUATION[c], c, i)
            i += 1
        elif c.isspace():
            start = i
            while i < n and line[i].isspace():
                i += 1
            yield Token(TokenKind.SPACE, line[start:i], start)
        else:
            start = i
            while i < n and line[i] not in _PUNCTUATION and not line[i].isspace():
                i += 1
            yield Token(TokenKind.ATOM, line[start:i], start)


def is_comment(line: str) -> bool:
    return line.startswith(COMMENT_MARKER)


class _TokenCursor:
    """One-token lookahead over a token stream."""

    def __init__(self, line: str):
        self.line = line
        self._tokens = tokenize(line)
        self._peeked: Optional[Token] = None

    def peek(self) -> Optional[Token]:
        if self._peeked is None:
            self._peeked = next(self._tokens, None)
        return self._peeked

    def take(self) -> Optional[Token]:
        token = self.peek()
        self._peeked = None
        return token

    def skip_space(self) -> None:
        token = self.peek()
        if token is not None and token.kind is TokenKind.SPACE:
            self.take()

    def expect(self, kind: TokenKind, what: str) -> Token:
        token = self.take()
        if token is None:
            raise MalformedLineError(f"expected {what}, reached end of line", self.line)
        if token.kind is not kind:
            raise MalformedLineError(f"expected {what}, found {token.text!r}", self.line, token.column)
        return token

    def expect_end(self) -> None:
        self.skip_space()
        token = self.peek()
        if token is not None:
            raise MalformedLineError(f"unexpected {token.text!r} after closing parenthesis", self.line, token.column)


def _parse_arguments(cursor: _TokenCursor) -> List[str]:
    """Consume ``a, b ,c)`` after the opening parenthesis of an argument list."""
    args: List[str] = []
    current = ""
    while True:
        token = cursor.take()
        if token is None:
            raise MalformedLineError("unterminated argument list", cursor.line)
        if token.kind is TokenKind.ATOM:
            current += token.text
        elif token.kind is TokenKind.SPACE:
            continue
        elif token.kind is TokenKind.COMMA:
            args.append(current)
            current = ""
        elif token.kind is TokenKind.CLOSE:
            args.append(current)
            return args
        else:
            raise MalformedLineError("nested argument lists are not supported", cursor.line, token.column)


def _parse_fact(cursor: _TokenCursor, functor: Token) -> Term:
    token = cursor.peek()
    if token is not None and token.kind is TokenKind.OPEN:
        cursor.take()
        return Term(functor.text, tuple(_parse_arguments(cursor)))
    return Term(functor.text)


def parse_state(line: str) -> State:
    """
    Parse a state line into a set of facts.

    Args:
        line: Text such as ``(on(a,b) clear(c) handempty)``

    Returns:
        Frozen set of terms (duplicates collapse)

    Raises:
        MalformedLineError: unbalanced parentheses, nesting deeper than one
            argument list, or stray text outside the outer parentheses
    """
    line = line.rstrip("\r\n")
    cursor = _TokenCursor(line)
    cursor.skip_space()
    cursor.expect(TokenKind.OPEN, "'('")

    facts: List[Term] = []
    while True:
        token = cursor.take()
        if token is None:
            raise MalformedLineError("missing closing parenthesis", line)
        if token.kind is TokenKind.CLOSE:
            break
        if token.kind is TokenKind.SPACE:
            continue
        if token.kind is TokenKind.ATOM:
            facts.append(_parse_fact(cursor, token))
            continue
        if token.kind is TokenKind.OPEN:
            raise MalformedLineError("argument list without a functor", line, token.column)
        raise MalformedLineError(f"unexpected {token.text!r} between facts", line, token.column)

    cursor.expect_end()
    return make_state(facts)


def parse_action(line: str) -> Term:
    """
    Parse an action line into a single term.

    Args:
        line: Text such as ``(pick-up a table)``

    Returns:
        Term whose functor is the action name

    Raises:
        MalformedLineError: unbalanced parentheses, commas or nested
            parentheses, or an empty action
    """
    line = line.rstrip("\r\n")
    cursor = _TokenCursor(line)
    cursor.skip_space()
    cursor.expect(TokenKind.OPEN, "'('")

    words: List[str] = []
    while True:
        token = cursor.take()
        if token is None:
            raise MalformedLineError("missing closing parenthesis", line)
        if token.kind is TokenKind.CLOSE:
            break
        if token.kind is TokenKind.SPACE:
            continue
        if token.kind is TokenKind.ATOM:
            words.append(token.text)
            continue
        raise MalformedLineError(f"unexpected {token.text!r} in action", line, token.column)

    cursor.expect_end()
    if not words:
        raise MalformedLineError("action has no name", line)
    return Term(words[0], tuple(words[1:]))
