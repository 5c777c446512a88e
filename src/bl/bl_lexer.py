"""
Lexical analyzer for the BL (Block Language).

This module turns raw BL source text into the token stream the parsers consume:

Classes:
    CharacterStream: Stream abstraction for reading characters with line tracking.
    Tokenizer: Splits a CharacterStream into string tokens and appends the end-of-input sentinel.
    TokenQueue: A consumable FIFO of tokens (peek front / dequeue front only).

Token classification:
    is_keyword(token):     structural keyword (IF, WHILE, END, ...)
    is_condition(token):   condition spelling (next-is-empty, random, ...)
    is_identifier(token):  [a-zA-Z][a-zA-Z0-9-]* that is neither a keyword nor a condition
    is_reserved(token):    keyword or primitive instruction name

Lexing rules:
    - Whitespace separates tokens.
    - `#` starts a comment that runs to the end of the line.
    - A maximal run of letters, digits and `-` is one token.
    - Any other non-whitespace character is a token on its own.

Example:
    >>> queue = Tokenizer(CharacterStream("IF true THEN move END IF")).tokens()
    >>> queue.front()
    'IF'
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator

from bl.bl_constants import CONDITIONS, END_OF_INPUT, KEYWORDS, PRIMITIVE_INSTRUCTIONS

logger = logging.getLogger(__name__)

_IDENTIFIER_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9-]*")


def is_keyword(token: str) -> bool:
    return token in KEYWORDS


def is_condition(token: str) -> bool:
    return token in CONDITIONS


def is_identifier(token: str) -> bool:
    """Whether ``token`` is identifier-shaped and not a keyword or condition."""
    return (
        _IDENTIFIER_RE.fullmatch(token) is not None
        and not is_keyword(token)
        and not is_condition(token)
    )


def is_reserved(token: str) -> bool:
    """Whether ``token`` may not be used as a declared instruction name."""
    return is_keyword(token) or token in PRIMITIVE_INSTRUCTIONS


class CharacterStream:
    """
    A utility for reading characters from a string source with line tracking.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Line number (1-indexed) of the next character.
    """

    def __init__(self, source: str):
        self.source = source
        self.position = 0
        self.line = 1

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.position >= len(self.source):
            raise EOFError(
                f"Attempted to read past end of source at position=<{self.position}>, line=<{self.line}>"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
        self.position += 1
        return char

    def peek(self) -> str:
        """Returns the next character without advancing, or "" at end of source."""
        if self.position >= len(self.source):
            return ""
        return self.source[self.position]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class TokenQueue:
    """
    Consumable FIFO of BL tokens.

    Only the front token can be inspected, and a token is gone once dequeued.
    Internally this is an index cursor over an immutable tuple, so `consumed`
    doubles as the stream position of the front token for diagnostics.

    Queues built by the `Tokenizer` also know the source line of every token;
    queues built from bare strings do not, and `line_at` returns None.

    Attributes:
        consumed (int): Number of tokens dequeued so far.
    """

    def __init__(self, tokens: Iterable[str], lines: Iterable[int] | None = None) -> None:
        self._tokens: tuple[str, ...] = tuple(tokens)
        self._lines: tuple[int, ...] | None = None if lines is None else tuple(lines)
        assert self._lines is None or len(self._lines) == len(
            self._tokens
        ), "Violation of: one line number per token"
        self.consumed: int = 0

    @classmethod
    def of(cls, tokens: "TokenQueue | Iterable[str]") -> "TokenQueue":
        """Return ``tokens`` itself if already a queue, otherwise wrap it."""
        if isinstance(tokens, TokenQueue):
            return tokens
        return cls(tokens)

    def __len__(self) -> int:
        return len(self._tokens) - self.consumed

    def __iter__(self) -> Iterator[str]:
        return iter(self.remaining())

    def __repr__(self) -> str:
        preview = ", ".join(repr(t) for t in self._tokens[self.consumed : self.consumed + 5])
        if len(self) > 5:
            preview += ", ..."
        return f"TokenQueue([{preview}])"

    @property
    def position(self) -> int:
        """Index of the front token in the original stream."""
        return self.consumed

    def line_at(self, position: int) -> int | None:
        """Source line of the token at stream index ``position``, when known."""
        if self._lines is None or not 0 <= position < len(self._lines):
            return None
        return self._lines[position]

    def front(self) -> str:
        assert len(self) > 0, "Violation of: tokens is not empty"
        return self._tokens[self.consumed]

    def dequeue(self) -> str:
        assert len(self) > 0, "Violation of: tokens is not empty"
        token = self._tokens[self.consumed]
        self.consumed += 1
        return token

    def remaining(self) -> list[str]:
        return list(self._tokens[self.consumed :])

    def ends_with_sentinel(self) -> bool:
        return len(self) > 0 and self._tokens[-1] == END_OF_INPUT


class Tokenizer:
    """Splits BL source text into string tokens.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        token_line (int): Line on which the most recently read token starts.
    """

    def __init__(self, stream: CharacterStream) -> None:
        self.stream = stream
        self.token_line = stream.line

    def skip_whitespace(self) -> None:
        """Skips all whitespace and `#` comments in the stream."""
        while not self.stream.end_of_file():
            ch = self.stream.peek()
            if ch.isspace():
                self.stream.next()
            elif ch == "#":
                while not self.stream.end_of_file() and self.stream.peek() != "\n":
                    self.stream.next()
            else:
                break

    def next_token(self) -> str | None:
        """Consumes and returns the next token, or None at end of input."""
        self.skip_whitespace()
        if self.stream.end_of_file():
            return None
        self.token_line = self.stream.line

        if _is_word_char(self.stream.peek()):
            word = ""
            while not self.stream.end_of_file() and _is_word_char(self.stream.peek()):
                word += self.stream.next()
            return word

        return self.stream.next()

    def tokens(self) -> TokenQueue:
        """Tokenize the whole stream and append the end-of-input sentinel.

        Each token is recorded with the line it starts on; the sentinel gets
        the line on which the source ends.
        """
        collected: list[str] = []
        lines: list[int] = []
        while True:
            tok = self.next_token()
            if tok is None:
                break
            collected.append(tok)
            lines.append(self.token_line)
        collected.append(END_OF_INPUT)
        lines.append(self.stream.line)
        logger.debug("Tokenized %d tokens over %d lines", len(collected) - 1, lines[-1])
        return TokenQueue(collected, lines)


def _is_word_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "-")


def tokenize(source: str) -> TokenQueue:
    """Shorthand for ``Tokenizer(CharacterStream(source)).tokens()``."""
    return Tokenizer(CharacterStream(source)).tokens()


__all__ = [
    "CharacterStream",
    "END_OF_INPUT",
    "TokenQueue",
    "Tokenizer",
    "is_condition",
    "is_identifier",
    "is_keyword",
    "is_reserved",
    "tokenize",
]
