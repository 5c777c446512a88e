"""
BL Statement Parser

Parses BL statement tokens into `Statement` trees.

This module implements the statement-level recursive descent: a statement is an
IF, IF/ELSE, WHILE or CALL, and a block is an ordered (possibly empty) sequence of
statements. `parse_statement` and `parse_block` are mutually recursive: IF and
WHILE bodies are blocks, and blocks are made of statements.

Grammar
-------
    statement  := if | while | call
    if         := IF condition THEN block [ELSE block] END IF
    while      := WHILE condition DO block END WHILE
    call       := identifier
    block      := statement*          terminated by ELSE, END or end-of-input

Parser Behavior
---------------
- One token of lookahead (`TokenQueue.front`), no pushback.
- Fail-fast: the first violation raises a `BLSyntaxError` subclass and no
  partial tree is returned.
- A block never consumes its terminator; the enclosing construct does.
- IF and WHILE may nest at most `MAX_NESTING_DEPTH` levels deep; one more
  raises `NestingTooDeepError` instead of exhausting the interpreter stack.

Entry Points
------------
- `parse_statement(tokens)`: Parse one statement.
- `parse_block(tokens)`: Parse a block.
- `parse_statement_source(text)`: Tokenize and parse one statement.
- `parse_block_source(text)`: Tokenize and parse a block spanning the whole input.

Raises
------
BLSyntaxError
    On malformed tokens, identifiers or conditions, mismatched delimiters, and
    nesting deeper than `MAX_NESTING_DEPTH`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bl.bl_ast import Statement
from bl.bl_constants import (
    BLOCK_TERMINATORS,
    END_OF_INPUT,
    MAX_NESTING_DEPTH,
    Condition,
)
from bl.bl_errors import (
    MalformedConditionError,
    MalformedIdentifierError,
    MalformedTokenError,
    MismatchedDelimiterError,
    NestingTooDeepError,
    assert_else_fatal_error,
)
from bl.bl_lexer import TokenQueue, is_condition, is_identifier, is_keyword, tokenize

logger = logging.getLogger(__name__)


class StatementParser:
    """
    BL Statement Parser Class

    Turns a prefix of a token queue into one `Statement`, or a block of them.
    The queue is shared with the caller and is advanced past exactly the tokens
    that make up the parsed construct.

    Attributes
    ----------
    tokens : TokenQueue
        The token stream being consumed. Must end with the end-of-input sentinel.
    depth : int
        Number of IF/WHILE constructs currently open.

    Methods
    -------
    parse_statement() -> Statement
        Parse one IF, IF/ELSE, WHILE or CALL statement.
    parse_block() -> Statement
        Parse statements up to (not including) ELSE, END or end-of-input.
    parse_nested(opening) -> Statement
        Parse an IF or WHILE, enforcing the nesting limit.
    parse_if() -> Statement
        Parse an IF or IF/ELSE statement.
    parse_while() -> Statement
        Parse a WHILE statement.
    parse_call() -> Statement
        Parse a CALL statement.
    """

    def __init__(self, tokens: TokenQueue | Iterable[str]) -> None:
        self.tokens: TokenQueue = TokenQueue.of(tokens)
        assert (
            self.tokens.ends_with_sentinel()
        ), "Violation of: END_OF_INPUT is a suffix of tokens"
        self.depth = 0

    # Token helpers

    def expect(self, literal: str) -> str:
        """Consume the front token, requiring it to be ``literal``."""
        position = self.tokens.position
        tok = self.tokens.dequeue()
        assert_else_fatal_error(
            tok == literal,
            f"Invalid token: expected {literal!r}",
            MalformedTokenError,
            token=tok,
            position=position,
            line=self.tokens.line_at(position),
        )
        return tok

    def expect_identifier(self, what: str = "identifier") -> str:
        """Consume the front token, requiring it to be an identifier."""
        position = self.tokens.position
        tok = self.tokens.dequeue()
        assert_else_fatal_error(
            is_identifier(tok),
            f"Invalid identifier: expected {what}",
            MalformedIdentifierError,
            token=tok,
            position=position,
            line=self.tokens.line_at(position),
        )
        return tok

    def expect_condition(self) -> Condition:
        position = self.tokens.position
        tok = self.tokens.dequeue()
        assert_else_fatal_error(
            is_condition(tok),
            "Invalid condition",
            MalformedConditionError,
            token=tok,
            position=position,
            line=self.tokens.line_at(position),
        )
        return Condition.from_token(tok)

    def expect_closing_keyword(self, opening: str) -> None:
        """Consume the keyword after END and require it to match ``opening``."""
        position = self.tokens.position
        closing = self.tokens.dequeue()
        assert_else_fatal_error(
            is_keyword(closing),
            f"Invalid token: expected {opening!r} after 'END'",
            MalformedTokenError,
            token=closing,
            position=position,
            line=self.tokens.line_at(position),
        )
        assert_else_fatal_error(
            closing == opening,
            f"Two different keywords used to open and close the construct: "
            f"{opening} ... END {closing}",
            MismatchedDelimiterError,
            token=closing,
            position=position,
            line=self.tokens.line_at(position),
        )

    # Grammar

    def parse_statement(self) -> Statement:
        """Parse a single statement starting at the front token."""
        assert len(self.tokens) > 0, "Violation of: END_OF_INPUT is a suffix of tokens"

        front = self.tokens.front()
        if front in ("IF", "WHILE"):
            return self.parse_nested(front)

        assert_else_fatal_error(
            is_identifier(front),
            "Invalid token: expected 'IF', 'WHILE' or an instruction name",
            MalformedTokenError,
            token=front,
            position=self.tokens.position,
            line=self.tokens.line_at(self.tokens.position),
        )
        return self.parse_call()

    def parse_nested(self, opening: str) -> Statement:
        """Parse an IF or WHILE one nesting level below the current one."""
        position = self.tokens.position
        assert_else_fatal_error(
            self.depth < MAX_NESTING_DEPTH,
            f"Statements nested more than {MAX_NESTING_DEPTH} levels deep",
            NestingTooDeepError,
            token=opening,
            position=position,
            line=self.tokens.line_at(position),
        )
        self.depth += 1
        try:
            return self.parse_if() if opening == "IF" else self.parse_while()
        finally:
            self.depth -= 1

    def parse_block(self) -> Statement:
        """Parse statements until ELSE, END or end-of-input; the terminator is left in place."""
        assert len(self.tokens) > 0, "Violation of: END_OF_INPUT is a suffix of tokens"

        statements: list[Statement] = []
        while self.tokens.front() not in BLOCK_TERMINATORS:
            statements.append(self.parse_statement())
        return Statement.block(statements)

    def parse_if(self) -> Statement:
        """Parse an IF condition with optional ELSE block."""
        assert self.tokens.front() == "IF", "Violation of: <'IF'> is a prefix of tokens"

        opening = self.tokens.dequeue()
        condition = self.expect_condition()
        self.expect("THEN")

        then_block = self.parse_block()
        if self.tokens.front() == "ELSE":
            self.tokens.dequeue()
            else_block = self.parse_block()
            node = Statement.if_else(condition, then_block, else_block)
        else:
            node = Statement.if_(condition, then_block)

        self.expect("END")
        self.expect_closing_keyword(opening)
        return node

    def parse_while(self) -> Statement:
        """Parse a WHILE loop with condition and body block."""
        assert (
            self.tokens.front() == "WHILE"
        ), "Violation of: <'WHILE'> is a prefix of tokens"

        opening = self.tokens.dequeue()
        condition = self.expect_condition()
        self.expect("DO")

        body = self.parse_block()
        node = Statement.while_(condition, body)

        self.expect("END")
        self.expect_closing_keyword(opening)
        return node

    def parse_call(self) -> Statement:
        name = self.expect_identifier("instruction name")
        return Statement.call(name)


def parse_statement(tokens: TokenQueue | Iterable[str]) -> Statement:
    """Parse one statement from ``tokens``. A passed `TokenQueue` is advanced in place."""
    return StatementParser(tokens).parse_statement()


def parse_block(tokens: TokenQueue | Iterable[str]) -> Statement:
    """Parse one block from ``tokens``. A passed `TokenQueue` is advanced in place."""
    block = StatementParser(tokens).parse_block()
    logger.debug("Parsed block of %d statements", len(block.children))
    return block


def parse_statement_source(source: str) -> Statement:
    """Tokenize ``source`` and parse exactly one statement from it."""
    queue = tokenize(source)
    statement = StatementParser(queue).parse_statement()
    _expect_end_of_input(queue, "statement")
    return statement


def parse_block_source(source: str) -> Statement:
    """Tokenize ``source`` and parse it as one block that must span the whole input."""
    queue = tokenize(source)
    block = StatementParser(queue).parse_block()
    _expect_end_of_input(queue, "block")
    return block


def _expect_end_of_input(queue: TokenQueue, what: str) -> None:
    assert_else_fatal_error(
        queue.front() == END_OF_INPUT,
        f"Unexpected tokens after {what}",
        MalformedTokenError,
        token=queue.front(),
        position=queue.position,
        line=queue.line_at(queue.position),
    )


__all__ = [
    "StatementParser",
    "parse_block",
    "parse_block_source",
    "parse_statement",
    "parse_statement_source",
]
