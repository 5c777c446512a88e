"""Serializes BL AST nodes as JSON, for debugging and tooling."""

import json
from typing import Any

from bl.bl_ast import Program, Statement


class JSONEmitter:
    """Collects the `to_dict()` form of each emitted node.

    A single emitted node is written as one JSON object; several are written
    as a JSON array, in emission order.
    """

    def __init__(self, indent: int | None = 2) -> None:
        self.items: list[Any] = []
        self.json_indent = indent

    def get_output(self) -> str:
        payload = self.items[0] if len(self.items) == 1 else self.items
        return json.dumps(payload, indent=self.json_indent)

    def emit_program(self, program: Program) -> None:
        self.items.append(program.to_dict())

    def emit_statement(self, node: Statement) -> None:
        self.items.append(node.to_dict())

    emit_block = emit_statement
    emit_if = emit_statement
    emit_if_else = emit_statement
    emit_while = emit_statement
    emit_call = emit_statement
