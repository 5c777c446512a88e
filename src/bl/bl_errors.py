"""
Diagnostics for the BL parser.

Every grammar or semantic violation is fatal: the parser raises on the first one
and no partial AST ever reaches the caller. All errors derive from
`BLSyntaxError`, itself a `SyntaxError`, so callers can catch either.

Exception Hierarchy
-------------------
BLSyntaxError
├── MalformedTokenError        - expected a literal keyword, found something else
├── MalformedIdentifierError   - expected an identifier
├── MalformedConditionError    - expected a condition spelling
├── MismatchedDelimiterError   - opening and closing names/keywords differ
├── NestingTooDeepError        - IF/WHILE nested past MAX_NESTING_DEPTH
└── SemanticError
    ├── ReservedNameError          - instruction declared with a reserved name
    └── DuplicateInstructionError  - instruction declared twice

Contract violations (calling into the parser with an empty token queue, or
dispatching a construct parser on the wrong front token) are plain
`AssertionError`s: they signal a defect in the caller, not bad input.
"""

from __future__ import annotations


class BLSyntaxError(SyntaxError):
    """
    Base class for all fatal BL parse errors.

    Attributes:
        message: Human-readable description of the violation.
        token: The offending token, when known.
        position: Index of the offending token in the original stream, when known.
        lineno: Source line (1-indexed) of the offending token, when the tokens
            came from the tokenizer. This is the standard `SyntaxError` field.
    """

    def __init__(
        self,
        message: str,
        token: str | None = None,
        position: int | None = None,
        line: int | None = None,
    ) -> None:
        self.message = message
        self.token = token
        self.position = position
        super().__init__(self._format(line))
        self.lineno = line

    def _format(self, line: int | None = None) -> str:
        where = "" if line is None else f"line {line}, "
        if self.token is None:
            return self.message if line is None else f"{self.message} (line {line})"
        if self.position is None:
            return f"{self.message} ({where}token {self.token!r})"
        return f"{self.message} ({where}token #{self.position}: {self.token!r})"

    def __str__(self) -> str:
        return self._format(self.lineno)


class MalformedTokenError(BLSyntaxError):
    pass


class MalformedIdentifierError(BLSyntaxError):
    pass


class MalformedConditionError(BLSyntaxError):
    pass


class MismatchedDelimiterError(BLSyntaxError):
    pass


class NestingTooDeepError(BLSyntaxError):
    pass


class SemanticError(BLSyntaxError):
    pass


class ReservedNameError(SemanticError):
    pass


class DuplicateInstructionError(SemanticError):
    pass


def assert_else_fatal_error(
    condition: bool,
    message: str,
    kind: type[BLSyntaxError] = BLSyntaxError,
    token: str | None = None,
    position: int | None = None,
    line: int | None = None,
) -> None:
    """
    Raise ``kind(message)`` unless ``condition`` holds.

    This is the single reporting path for every check the parsers make.

    Args:
        condition: The property that must hold.
        message: Description used when it does not.
        kind: The `BLSyntaxError` subclass to raise.
        token: Offending token, included in the message.
        position: Index of the offending token in the stream.
        line: Source line of the offending token.

    Raises:
        BLSyntaxError: ``kind`` when ``condition`` is false.
    """
    if not condition:
        raise kind(message, token=token, position=position, line=line)


__all__ = [
    "BLSyntaxError",
    "DuplicateInstructionError",
    "MalformedConditionError",
    "MalformedIdentifierError",
    "MalformedTokenError",
    "MismatchedDelimiterError",
    "NestingTooDeepError",
    "ReservedNameError",
    "SemanticError",
    "assert_else_fatal_error",
]
