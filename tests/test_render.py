import json
from typing import Any

import pytest

from bl.bl_ast import Program, Statement
from bl.bl_constants import MAX_NESTING_DEPTH, Condition
from bl.bl_render import EMITTERS, Emitter, Renderer, to_source
from bl.emitters.bl_emitter import INDENT, BLEmitter
from bl.emitters.json_emitter import JSONEmitter

EXAMPLE = Program(
    "Example",
    {
        "turnaround": Statement.block(
            [Statement.call("turnleft"), Statement.call("turnleft")]
        )
    },
    Statement.block(
        [
            Statement.while_(
                Condition.TRUE,
                Statement.block(
                    [
                        Statement.if_else(
                            Condition.NEXT_IS_EMPTY,
                            Statement.block([Statement.call("move")]),
                            Statement.block([Statement.call("turnaround")]),
                        )
                    ]
                ),
            )
        ]
    ),
)

EXAMPLE_TEXT = """\
PROGRAM Example IS

    INSTRUCTION turnaround IS
        turnleft
        turnleft
    END turnaround

BEGIN
    WHILE true DO
        IF next-is-empty THEN
            move
        ELSE
            turnaround
        END IF
    END WHILE
END Example"""


def test_force_protocol_reference() -> None:
    assert hasattr(Emitter, "get_output")


def test_bl_program_output() -> None:
    assert to_source(EXAMPLE) == EXAMPLE_TEXT


def test_bl_empty_program_output() -> None:
    assert to_source(Program("P")) == "PROGRAM P IS\n\nBEGIN\nEND P"


def test_bl_statement_output() -> None:
    node = Statement.if_(
        Condition.NEXT_IS_NOT_WALL, Statement.block([Statement.call("move")])
    )
    assert to_source(node) == "IF next-is-not-wall THEN\n    move\nEND IF"


def test_bl_empty_block_output() -> None:
    assert to_source(Statement.block()) == ""


def test_bl_emitter_tracks_indentation() -> None:
    emitter = BLEmitter()
    emitter.indent = 2
    emitter.emit_call(Statement.call("skip"))
    assert emitter.get_output() == "        skip"


def test_json_program_output() -> None:
    data = json.loads(Renderer("json").render(EXAMPLE))
    assert data == EXAMPLE.to_dict()
    assert data["context"]["turnaround"]["children"][0]["name"] == "turnleft"


def test_json_statement_output() -> None:
    data = json.loads(Renderer("JSON").render(Statement.call("move")))
    assert data == {"kind": "call", "condition": None, "name": "move", "children": []}


def test_json_emitter_collects_several_nodes() -> None:
    emitter = JSONEmitter(indent=None)
    emitter.emit_call(Statement.call("a"))
    emitter.emit_block(Statement.block())
    assert json.loads(emitter.get_output()) == [
        Statement.call("a").to_dict(),
        Statement.block().to_dict(),
    ]


def test_renderer_uses_fresh_emitter_per_render() -> None:
    renderer = Renderer("bl")
    assert renderer.render(Statement.call("a")) == "a"
    assert renderer.render(Statement.call("b")) == "b"


def test_renderer_invalid_target_raises() -> None:
    with pytest.raises(ValueError, match="Unknown render target"):
        Renderer("xml")


def test_renderer_rejects_non_nodes() -> None:
    with pytest.raises(TypeError, match="Program or Statement"):
        Renderer("bl").render("move")  # type: ignore[arg-type]


def test_renderer_missing_emit_method_raises(monkeypatch: Any) -> None:
    class IncompleteEmitter:
        def get_output(self) -> str:
            return ""

    monkeypatch.setitem(EMITTERS, "bl", IncompleteEmitter)
    with pytest.raises(NotImplementedError, match="No emitter method for node kind 'call'"):
        Renderer("bl").render(Statement.call("move"))


def test_renderer_builds_emitter_only_when_rendering(monkeypatch: Any) -> None:
    created: list[BLEmitter] = []

    class CountingEmitter(BLEmitter):
        def __init__(self) -> None:
            super().__init__()
            created.append(self)

    monkeypatch.setitem(EMITTERS, "bl", CountingEmitter)
    renderer = Renderer("bl")
    assert created == []
    renderer.render(Statement.call("move"))
    renderer.render(Statement.call("skip"))
    assert len(created) == 2
    assert not hasattr(renderer, "emitter")


def nested_whiles(depth: int) -> Statement:
    node = Statement.block([Statement.call("move")])
    for _ in range(depth):
        node = Statement.block([Statement.while_(Condition.TRUE, node)])
    return node


def test_render_at_nesting_limit() -> None:
    text = to_source(nested_whiles(MAX_NESTING_DEPTH))
    lines = text.splitlines()
    assert len(lines) == 2 * MAX_NESTING_DEPTH + 1
    assert lines[MAX_NESTING_DEPTH] == INDENT * MAX_NESTING_DEPTH + "move"


@pytest.mark.parametrize("target", ["bl", "json"])  # type: ignore[misc]
@pytest.mark.parametrize("depth", [MAX_NESTING_DEPTH + 1, 1000])  # type: ignore[misc]
def test_render_past_nesting_limit_raises(target: str, depth: int) -> None:
    with pytest.raises(ValueError, match=f"nested {depth} levels deep"):
        Renderer(target).render(nested_whiles(depth))
    with pytest.raises(ValueError, match="levels deep"):
        Renderer(target).render(Program("P", body=nested_whiles(depth)))
