"""
Defines the abstract syntax tree (AST) for the BL (Block Language).

Classes:
    Statement:
        A tagged union of BL statements. The `kind` field selects the active variant:

            "block"    children = (stmt, stmt, ...)          possibly empty
            "if"       condition, children = (then_block,)
            "if_else"  condition, children = (then_block, else_block)
            "while"    condition, children = (body,)
            "call"     name

    Program:
        A named program: a context of user-declared instructions plus a main body.

    StatementDict, ProgramDict:
        TypedDict shapes produced by `to_dict()`, suitable for JSON output or debugging.

Nodes are built bottom-up from finished children through the class-method
constructors (`Statement.block`, `Statement.if_`, ...) and are immutable
afterwards: children are tuples and attribute assignment raises
`AttributeError`.

Example:
    body = Statement.block([Statement.call("move")])
    node = Statement.while_(Condition.TRUE, body)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, TypedDict

from bl.bl_constants import Condition

STATEMENT_KINDS = ("block", "if", "if_else", "while", "call")


class StatementDict(TypedDict, total=False):
    """
    Serialized form of a Statement.

    Fields:
        kind (str): One of "block", "if", "if_else", "while", "call".
        condition (str | None): Condition spelling for if/if_else/while.
        name (str | None): Instruction name for call.
        children (list[StatementDict]): Sub-statements or sub-blocks.
    """

    kind: str
    condition: str | None
    name: str | None
    children: list["StatementDict"]


class ProgramDict(TypedDict):
    name: str
    context: dict[str, StatementDict]
    body: StatementDict


class Statement:
    """
    A node of the BL statement tree.

    Args:
        kind (str): The active variant.
        condition (Condition, optional): Tested condition for "if", "if_else" and "while".
        name (str, optional): Instruction name for "call".
        children (Iterable[Statement], optional): Sub-statements ("block") or sub-blocks.

    Prefer the class-method constructors, which enforce the shape of each variant.
    Nodes are frozen once built; `depth` counts the IF/WHILE levels at and below
    this node.
    """

    __slots__ = ("kind", "condition", "name", "children", "depth")

    kind: str
    condition: Condition | None
    name: str | None
    children: tuple["Statement", ...]
    depth: int

    def __init__(
        self,
        kind: str,
        condition: Condition | None = None,
        name: str | None = None,
        children: Iterable["Statement"] = (),
    ) -> None:
        assert kind in STATEMENT_KINDS, f"Violation of: {kind!r} is a statement kind"
        children = tuple(children)
        nested = max((c.depth for c in children), default=0)
        set_field = object.__setattr__
        set_field(self, "kind", kind)
        set_field(self, "condition", condition)
        set_field(self, "name", name)
        set_field(self, "children", children)
        # IF/WHILE nesting below and including this node
        set_field(self, "depth", nested if kind in ("block", "call") else nested + 1)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Statement is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Statement is immutable; cannot delete {name!r}")

    # Constructors

    @classmethod
    def block(cls, statements: Iterable["Statement"] = ()) -> "Statement":
        return cls("block", children=statements)

    @classmethod
    def if_(cls, condition: Condition, then_block: "Statement") -> "Statement":
        assert then_block.kind == "block", "Violation of: then_block is a block"
        return cls("if", condition=condition, children=(then_block,))

    @classmethod
    def if_else(
        cls, condition: Condition, then_block: "Statement", else_block: "Statement"
    ) -> "Statement":
        assert then_block.kind == "block", "Violation of: then_block is a block"
        assert else_block.kind == "block", "Violation of: else_block is a block"
        return cls("if_else", condition=condition, children=(then_block, else_block))

    @classmethod
    def while_(cls, condition: Condition, body: "Statement") -> "Statement":
        assert body.kind == "block", "Violation of: body is a block"
        return cls("while", condition=condition, children=(body,))

    @classmethod
    def call(cls, name: str) -> "Statement":
        return cls("call", name=name)

    # Accessors

    @property
    def then_block(self) -> "Statement":
        assert self.kind in ("if", "if_else"), f"{self.kind} has no then block"
        return self.children[0]

    @property
    def else_block(self) -> "Statement":
        assert self.kind == "if_else", f"{self.kind} has no else block"
        return self.children[1]

    @property
    def body(self) -> "Statement":
        assert self.kind == "while", f"{self.kind} has no loop body"
        return self.children[0]

    def __repr__(self) -> str:
        parts = [self.kind]
        if self.condition is not None:
            parts.append(f"condition={self.condition.name}")
        if self.name is not None:
            parts.append(f"name={self.name!r}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        return f"Statement({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Statement):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.condition is other.condition
            and self.name == other.name
            and self.children == other.children
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.condition, self.name, self.children))

    def to_dict(self) -> StatementDict:
        return {
            "kind": self.kind,
            "condition": self.condition.token if self.condition else None,
            "name": self.name,
            "children": [c.to_dict() for c in self.children],
        }


class Program:
    """
    A parsed BL program.

    Attributes:
        name (str): The program name.
        context (Mapping[str, Statement]): Read-only, declaration-ordered mapping
            from instruction name to its body block.
        body (Statement): The main block.
    """

    __slots__ = ("name", "context", "body")

    name: str
    context: Mapping[str, Statement]
    body: Statement

    def __init__(
        self,
        name: str,
        context: Mapping[str, Statement] | None = None,
        body: Statement | None = None,
    ) -> None:
        body = body if body is not None else Statement.block()
        frozen_context = MappingProxyType(dict(context or {}))
        assert body.kind == "block", "Violation of: body is a block"
        assert all(
            b.kind == "block" for b in frozen_context.values()
        ), "Violation of: every instruction body is a block"
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", frozen_context)
        object.__setattr__(self, "body", body)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"Program is immutable; cannot set {name!r}")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"Program is immutable; cannot delete {name!r}")

    @property
    def depth(self) -> int:
        """Deepest IF/WHILE nesting in the main block or any instruction body."""
        return max((b.depth for b in (self.body, *self.context.values())), default=0)

    def __repr__(self) -> str:
        names = ", ".join(self.context)
        return f"Program({self.name!r}, context=[{names}], body={self.body!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Program):
            return NotImplemented
        return (
            self.name == other.name
            and dict(self.context) == dict(other.context)
            and self.body == other.body
        )

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> ProgramDict:
        return {
            "name": self.name,
            "context": {k: v.to_dict() for k, v in self.context.items()},
            "body": self.body.to_dict(),
        }


__all__ = ["Program", "ProgramDict", "STATEMENT_KINDS", "Statement", "StatementDict"]
