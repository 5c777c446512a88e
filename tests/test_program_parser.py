from collections.abc import Callable

import pytest

from bl.bl_ast import Program, Statement
from bl.bl_constants import END_OF_INPUT, Condition
from bl.bl_errors import (
    BLSyntaxError,
    DuplicateInstructionError,
    MalformedIdentifierError,
    MalformedTokenError,
    MismatchedDelimiterError,
    ReservedNameError,
    SemanticError,
)
from bl.bl_lexer import TokenQueue, tokenize
from bl.bl_program_parser import ProgramParser, parse_program, parse_program_source

MakeQueue = Callable[..., TokenQueue]

EXAMPLE = """
PROGRAM Example IS

    # spin in place
    INSTRUCTION turnaround IS
        turnleft
        turnleft
    END turnaround

    INSTRUCTION step IS
        IF next-is-empty THEN
            move
        ELSE
            turnaround
        END IF
    END step

BEGIN
    WHILE true DO
        step
    END WHILE
END Example
"""


def test_minimal_program(make_queue: MakeQueue) -> None:
    queue = make_queue("PROGRAM", "P", "IS", "BEGIN", "x", "END", "P")
    program = parse_program(queue)
    assert program.name == "P"
    assert dict(program.context) == {}
    assert program.body == Statement.block([Statement.call("x")])
    assert queue.remaining() == [END_OF_INPUT]


def test_empty_main_block(make_queue: MakeQueue) -> None:
    program = parse_program(make_queue("PROGRAM", "P", "IS", "BEGIN", "END", "P"))
    assert program == Program("P")


def test_program_with_instructions() -> None:
    program = parse_program_source(EXAMPLE)
    assert program.name == "Example"
    assert list(program.context) == ["turnaround", "step"]
    assert program.context["turnaround"] == Statement.block(
        [Statement.call("turnleft"), Statement.call("turnleft")]
    )
    assert program.context["step"] == Statement.block(
        [
            Statement.if_else(
                Condition.NEXT_IS_EMPTY,
                Statement.block([Statement.call("move")]),
                Statement.block([Statement.call("turnaround")]),
            )
        ]
    )
    assert program.body == Statement.block(
        [Statement.while_(Condition.TRUE, Statement.block([Statement.call("step")]))]
    )


def test_whole_parse_consumes_all_but_sentinel() -> None:
    queue = tokenize(EXAMPLE)
    total = len(queue)
    parse_program(queue)
    assert queue.consumed == total - 1
    assert queue.remaining() == [END_OF_INPUT]


def test_undefined_call_targets_are_not_checked(make_queue: MakeQueue) -> None:
    program = parse_program(
        make_queue("PROGRAM", "P", "IS", "BEGIN", "nowhere", "END", "P")
    )
    assert program.body.children[0] == Statement.call("nowhere")


def test_parse_instruction_returns_name_and_body(make_queue: MakeQueue) -> None:
    queue = make_queue("INSTRUCTION", "f", "IS", "move", "END", "f", "BEGIN")
    name, body = ProgramParser(queue).parse_instruction()
    assert name == "f"
    assert body == Statement.block([Statement.call("move")])
    assert queue.front() == "BEGIN"


def test_duplicate_instruction_aborts_before_begin(make_queue: MakeQueue) -> None:
    queue = make_queue(
        "PROGRAM", "P", "IS",
        "INSTRUCTION", "f", "IS", "move", "END", "f",
        "INSTRUCTION", "f", "IS", "skip", "END", "f",
        "BEGIN", "f", "END", "P",
    )  # fmt: skip
    with pytest.raises(DuplicateInstructionError, match="Duplicate instruction name"):
        parse_program(queue)
    assert queue.front() == "BEGIN"


def test_reserved_instruction_name(make_queue: MakeQueue) -> None:
    queue = make_queue(
        "PROGRAM", "P", "IS",
        "INSTRUCTION", "move", "IS", "skip", "END", "move",
        "BEGIN", "END", "P",
    )  # fmt: skip
    with pytest.raises(ReservedNameError, match="Keyword cannot be an identifier") as e:
        parse_program(queue)
    assert isinstance(e.value, SemanticError)
    assert e.value.token == "move"
    assert e.value.position == 4


def test_keyword_instruction_name_is_malformed(make_queue: MakeQueue) -> None:
    queue = make_queue(
        "PROGRAM", "P", "IS", "INSTRUCTION", "WHILE", "IS", "END", "WHILE",
        "BEGIN", "END", "P",
    )  # fmt: skip
    with pytest.raises(MalformedIdentifierError):
        parse_program(queue)


@pytest.mark.parametrize(
    "tokens,error,message",
    [
        (
            ["PROGRAM", "P", "IS", "INSTRUCTION", "f", "IS", "END", "g", "BEGIN", "END", "P"],
            MismatchedDelimiterError,
            "More than one identifier used for instruction name",
        ),
        (
            ["PROGRAM", "P", "IS", "BEGIN", "END", "Q"],
            MismatchedDelimiterError,
            "Multiple identifiers used as program name",
        ),
        (
            ["PROGRAM", "P", "IS", "BEGIN", "END", "P", "move"],
            MalformedTokenError,
            "Program does not end correctly",
        ),
        (["PROGRAMME", "P", "IS", "BEGIN", "END", "P"], MalformedTokenError, "'PROGRAM'"),
        (["PROGRAM", "IF", "IS", "BEGIN", "END", "IF"], MalformedIdentifierError, "program name"),
        (["PROGRAM", "P", "BEGIN", "END", "P"], MalformedTokenError, "'IS'"),
        (["PROGRAM", "P", "IS"], MalformedTokenError, "'INSTRUCTION'"),
        (["PROGRAM", "P", "IS", "move", "BEGIN", "END", "P"], MalformedTokenError, "'INSTRUCTION'"),
        (["PROGRAM", "P", "IS", "BEGIN", "move"], MalformedTokenError, "'END'"),
        (["PROGRAM", "P", "IS", "BEGIN", "END"], MalformedIdentifierError, "program name"),
        (
            ["PROGRAM", "P", "IS", "INSTRUCTION", "f", "move", "END", "f", "BEGIN", "END", "P"],
            MalformedTokenError,
            "'IS'",
        ),
        (
            ["PROGRAM", "P", "IS", "BEGIN", "IF", "true", "THEN", "END", "WHILE", "END", "P"],
            MismatchedDelimiterError,
            "Two different keywords",
        ),
        ([], MalformedTokenError, "'PROGRAM'"),
    ],
)  # type: ignore[misc]
def test_program_errors(
    make_queue: MakeQueue,
    tokens: list[str],
    error: type[BLSyntaxError],
    message: str,
) -> None:
    with pytest.raises(error, match=message):
        parse_program(make_queue(*tokens))


def test_errors_are_syntax_errors() -> None:
    with pytest.raises(SyntaxError):
        parse_program_source("PROGRAM P IS BEGIN END Q")


def test_missing_sentinel_is_a_contract_violation() -> None:
    with pytest.raises(AssertionError):
        parse_program(["PROGRAM", "P", "IS", "BEGIN", "END", "P"])


def test_mismatched_keyword_reports_line() -> None:
    source = "PROGRAM P IS\nBEGIN\n  move\n  IF true THEN\n  END WHILE\nEND P"
    with pytest.raises(MismatchedDelimiterError) as exc_info:
        parse_program_source(source)
    err = exc_info.value
    assert err.lineno == 5
    assert err.position == 9
    assert str(err) == (
        "Two different keywords used to open and close the construct: "
        "IF ... END WHILE (line 5, token #9: 'WHILE')"
    )


def test_semantic_errors_report_instruction_line() -> None:
    source = """PROGRAM P IS
    INSTRUCTION f IS move END f
    INSTRUCTION g IS skip END g
    INSTRUCTION f IS
        turnleft
    END f
BEGIN
END P"""
    with pytest.raises(DuplicateInstructionError) as exc_info:
        parse_program_source(source)
    assert exc_info.value.lineno == 4


def test_truncated_program_reports_last_line() -> None:
    with pytest.raises(MalformedTokenError) as exc_info:
        parse_program_source("PROGRAM P IS\nBEGIN\n  move\n")
    assert exc_info.value.token == END_OF_INPUT
    assert exc_info.value.lineno == 4


def test_bare_token_errors_have_no_line(make_queue: MakeQueue) -> None:
    with pytest.raises(MismatchedDelimiterError) as exc_info:
        parse_program(make_queue("PROGRAM", "P", "IS", "BEGIN", "END", "Q"))
    assert exc_info.value.lineno is None
    assert str(exc_info.value).endswith("(token #5: 'Q')")
