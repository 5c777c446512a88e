"""
Pretty-prints BL AST nodes back into BL source text.

This module defines the `BLEmitter` class, used by the `Renderer` to turn a
parsed `Program` or `Statement` into canonical BL:

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
    END Example

Behavior:
    - Four spaces of indentation per nesting level.
    - Instructions are separated by blank lines.
    - Conditions are written with their hyphenated spelling.
    - Tokenizing and re-parsing the output yields a structurally equal tree.
"""

from bl.bl_ast import Program, Statement

INDENT = "    "


class BLEmitter:
    """Emits BL source text from AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of output.
        indent (int): Current indentation level.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return INDENT * self.indent

    def get_output(self) -> str:
        return "\n".join(self.lines)

    def _line(self, text: str) -> None:
        self.lines.append(self.indent_str() + text)

    def _visit(self, node: Statement) -> None:
        getattr(self, f"emit_{node.kind}")(node)

    def _nested(self, block: Statement) -> None:
        self.indent += 1
        self._visit(block)
        self.indent -= 1

    def emit_program(self, program: Program) -> None:
        self._line(f"PROGRAM {program.name} IS")
        self.lines.append("")
        self.indent += 1
        for name, body in program.context.items():
            self._line(f"INSTRUCTION {name} IS")
            self._nested(body)
            self._line(f"END {name}")
            self.lines.append("")
        self.indent -= 1
        self._line("BEGIN")
        self._nested(program.body)
        self._line(f"END {program.name}")

    def emit_block(self, node: Statement) -> None:
        for child in node.children:
            self._visit(child)

    def emit_if(self, node: Statement) -> None:
        assert node.condition is not None  # for mypy
        self._line(f"IF {node.condition.token} THEN")
        self._nested(node.then_block)
        self._line("END IF")

    def emit_if_else(self, node: Statement) -> None:
        assert node.condition is not None  # for mypy
        self._line(f"IF {node.condition.token} THEN")
        self._nested(node.then_block)
        self._line("ELSE")
        self._nested(node.else_block)
        self._line("END IF")

    def emit_while(self, node: Statement) -> None:
        assert node.condition is not None  # for mypy
        self._line(f"WHILE {node.condition.token} DO")
        self._nested(node.body)
        self._line("END WHILE")

    def emit_call(self, node: Statement) -> None:
        self._line(str(node.name))
