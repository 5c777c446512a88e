"""
BL Program Parser

Parses a complete BL program:

    PROGRAM name IS
        (INSTRUCTION name IS block END name)*
    BEGIN
        block
    END name
    <end-of-input>

The header and footer names must match, each instruction's opening and closing
names must match, and instruction names must be unique and not reserved words.
Instruction bodies and the main block are parsed by `StatementParser` over the
same token queue.

The parse moves through HEADER -> DECLARATIONS* -> BEGIN -> MAIN_BLOCK -> FOOTER,
each step gated by a validated token. Any failed gate raises a `BLSyntaxError`
and no `Program` is returned.

The end-of-input sentinel is checked but not consumed, so after a successful
parse the queue holds exactly the sentinel.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from bl.bl_ast import Program, Statement
from bl.bl_constants import END_OF_INPUT
from bl.bl_errors import (
    DuplicateInstructionError,
    MalformedTokenError,
    MismatchedDelimiterError,
    ReservedNameError,
    assert_else_fatal_error,
)
from bl.bl_lexer import TokenQueue, is_reserved, tokenize
from bl.bl_parser import StatementParser

logger = logging.getLogger(__name__)


class ProgramParser:
    """
    Builds a `Program` from a token queue.

    Attributes
    ----------
    tokens : TokenQueue
        The token stream being consumed.
    statements : StatementParser
        Statement-level parser sharing the same queue.
    """

    def __init__(self, tokens: TokenQueue | Iterable[str]) -> None:
        self.statements = StatementParser(tokens)
        self.tokens: TokenQueue = self.statements.tokens

    def parse_instruction(self) -> tuple[str, Statement]:
        """
        Parse one ``INSTRUCTION name IS block END name`` declaration.

        Returns
        -------
        tuple[str, Statement]
            The instruction name and its body block.

        Raises
        ------
        BLSyntaxError
            If the declaration is malformed or its two names differ.
        """
        self.statements.expect("INSTRUCTION")
        opening = self.statements.expect_identifier("instruction name")
        self.statements.expect("IS")

        body = self.statements.parse_block()

        self.statements.expect("END")
        position = self.tokens.position
        closing = self.statements.expect_identifier("instruction name after 'END'")
        assert_else_fatal_error(
            opening == closing,
            f"More than one identifier used for instruction name: "
            f"{opening} ... END {closing}",
            MismatchedDelimiterError,
            token=closing,
            position=position,
            line=self.tokens.line_at(position),
        )
        return opening, body

    def parse_program(self) -> Program:
        """Parse a whole program; the queue must hold nothing after it but the sentinel."""
        assert len(self.tokens) > 0, "Violation of: END_OF_INPUT is a suffix of tokens"

        # HEADER
        self.statements.expect("PROGRAM")
        name = self.statements.expect_identifier("program name")
        self.statements.expect("IS")
        logger.debug("Parsing program %s", name)

        # DECLARATIONS
        context: dict[str, Statement] = {}
        while self.tokens.front() != "BEGIN":
            position = self.tokens.position + 1
            instruction, body = self.parse_instruction()
            assert_else_fatal_error(
                not is_reserved(instruction),
                "Keyword cannot be an identifier",
                ReservedNameError,
                token=instruction,
                position=position,
                line=self.tokens.line_at(position),
            )
            assert_else_fatal_error(
                instruction not in context,
                "Duplicate instruction name",
                DuplicateInstructionError,
                token=instruction,
                position=position,
                line=self.tokens.line_at(position),
            )
            context[instruction] = body
            logger.debug(
                "Declared instruction %s (%d statements)",
                instruction,
                len(body.children),
            )

        # BEGIN / MAIN_BLOCK
        self.statements.expect("BEGIN")
        main = self.statements.parse_block()

        # FOOTER
        self.statements.expect("END")
        position = self.tokens.position
        closing = self.statements.expect_identifier("program name after 'END'")
        assert_else_fatal_error(
            name == closing,
            f"Multiple identifiers used as program name: {name} ... END {closing}",
            MismatchedDelimiterError,
            token=closing,
            position=position,
            line=self.tokens.line_at(position),
        )
        assert_else_fatal_error(
            self.tokens.front() == END_OF_INPUT,
            "Program does not end correctly",
            MalformedTokenError,
            token=self.tokens.front(),
            position=self.tokens.position,
            line=self.tokens.line_at(self.tokens.position),
        )

        logger.debug(
            "Parsed program %s: %d instructions, %d statements in main block",
            name,
            len(context),
            len(main.children),
        )
        return Program(name, context, main)


def parse_program(tokens: TokenQueue | Iterable[str]) -> Program:
    """Parse a program from ``tokens``. A passed `TokenQueue` is advanced in place."""
    return ProgramParser(tokens).parse_program()


def parse_program_source(source: str) -> Program:
    """Tokenize BL source text and parse it as a program."""
    return ProgramParser(tokenize(source)).parse_program()


__all__ = ["ProgramParser", "parse_program", "parse_program_source"]
