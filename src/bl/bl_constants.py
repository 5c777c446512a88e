"""
Lexicon of the BL (Block Language).

Holds the fixed word lists used by the tokenizer, the parsers and the emitters:

    KEYWORDS:                structural keywords (never valid identifiers)
    PRIMITIVE_INSTRUCTIONS:  built-in instruction names (callable, never declarable)
    CONDITIONS:              recognized condition spellings
    BLOCK_TERMINATORS:       tokens that end a block without being consumed by it
    END_OF_INPUT:            sentinel appended to every token stream
    MAX_NESTING_DEPTH:       deepest IF/WHILE nesting the parser and renderer accept

The `Condition` enum is the condition table: a closed set of symbolic codes, one
per condition spelling. `Condition.from_token("next-is-empty")` normalizes the
hyphenated spelling to `Condition.NEXT_IS_EMPTY`.
"""

from enum import Enum

END_OF_INPUT = "### END OF INPUT ###"

KEYWORDS: frozenset[str] = frozenset(
    {
        "PROGRAM",
        "IS",
        "BEGIN",
        "END",
        "INSTRUCTION",
        "IF",
        "THEN",
        "ELSE",
        "WHILE",
        "DO",
    }
)

PRIMITIVE_INSTRUCTIONS: frozenset[str] = frozenset(
    {"move", "turnleft", "turnright", "infect", "skip"}
)

CONDITIONS: tuple[str, ...] = (
    "next-is-empty",
    "next-is-not-empty",
    "next-is-wall",
    "next-is-not-wall",
    "next-is-friend",
    "next-is-not-friend",
    "next-is-enemy",
    "next-is-not-enemy",
    "random",
    "true",
)

BLOCK_TERMINATORS: frozenset[str] = frozenset({"ELSE", "END", END_OF_INPUT})

# Keeps parse and render recursion well inside the default interpreter limit.
MAX_NESTING_DEPTH = 64


class Condition(Enum):
    """Symbolic condition codes tested by IF and WHILE."""

    NEXT_IS_EMPTY = "next-is-empty"
    NEXT_IS_NOT_EMPTY = "next-is-not-empty"
    NEXT_IS_WALL = "next-is-wall"
    NEXT_IS_NOT_WALL = "next-is-not-wall"
    NEXT_IS_FRIEND = "next-is-friend"
    NEXT_IS_NOT_FRIEND = "next-is-not-friend"
    NEXT_IS_ENEMY = "next-is-enemy"
    NEXT_IS_NOT_ENEMY = "next-is-not-enemy"
    RANDOM = "random"
    TRUE = "true"

    @property
    def token(self) -> str:
        """The surface spelling of this condition, e.g. ``next-is-empty``."""
        return self.value

    @classmethod
    def from_token(cls, token: str) -> "Condition":
        """Look up the condition for a condition spelling.

        Raises:
            KeyError: If ``token`` is not a condition spelling.
        """
        if token not in CONDITIONS:
            raise KeyError(token)
        return cls[token.replace("-", "_").upper()]


__all__ = [
    "BLOCK_TERMINATORS",
    "CONDITIONS",
    "Condition",
    "END_OF_INPUT",
    "KEYWORDS",
    "MAX_NESTING_DEPTH",
    "PRIMITIVE_INSTRUCTIONS",
]
