"""
Provides the `Renderer` class and emitter interface for turning BL ASTs into text.

Classes and Features:
    - Emitter (Protocol): Interface for all backend emitters. Requires `__init__` and `get_output`.
    - BLEmitter: Pretty-prints the AST as canonical BL source.
    - JSONEmitter: Dumps the AST's `to_dict()` form as JSON.
    - Renderer: Picks an emitter by target name ("bl", "json") and dispatches nodes
      to its `emit_*` methods.

Example:
    >>> Renderer("bl").render(program)

Raises:
    ValueError: If the target is not supported, or the tree nests IF/WHILE deeper
        than `MAX_NESTING_DEPTH`.
    TypeError: If asked to render something other than a Program or Statement.
    NotImplementedError: If the emitter lacks an `emit_*` method for a node kind.
"""

from typing import Protocol

from bl.bl_ast import Program, Statement
from bl.bl_constants import MAX_NESTING_DEPTH
from bl.emitters.bl_emitter import BLEmitter
from bl.emitters.json_emitter import JSONEmitter


class Emitter(Protocol):  # pragma: no cover
    """Protocol for all BL emitters.

    Methods:
        __init__(): Initializes the emitter.
        get_output(): Returns the complete emitted text.
    """

    def __init__(self) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EmitterType = type[Emitter]
"""Alias for a concrete Emitter class type."""

EMITTERS: dict[str, EmitterType] = {
    "bl": BLEmitter,
    "json": JSONEmitter,
}


class Renderer:
    """Dispatches BL AST nodes to the emitter for an output target.

    Attributes:
        target (str): Normalized target name.
    """

    def __init__(self, target: str = "bl") -> None:
        """Initializes the renderer with the desired output target.

        Args:
            target: The output format ("bl" or "json").

        Raises:
            ValueError: If the target is not supported.
        """
        target = target.lower()
        if target not in EMITTERS:
            raise ValueError(f"Unknown render target: {target!r}")
        self.target = target

    def render(self, node: Program | Statement) -> str:
        """Renders a program or statement with a fresh emitter.

        Args:
            node: The tree to render.

        Returns:
            The emitted text.

        Raises:
            TypeError: If ``node`` is neither a Program nor a Statement.
            ValueError: If ``node`` nests IF/WHILE deeper than `MAX_NESTING_DEPTH`.
        """
        if not isinstance(node, (Program, Statement)):
            raise TypeError("Can only render Program or Statement instances.")
        if node.depth > MAX_NESTING_DEPTH:
            raise ValueError(
                f"Cannot render statements nested {node.depth} levels deep "
                f"(limit {MAX_NESTING_DEPTH})"
            )
        emitter: Emitter = EMITTERS[self.target]()
        kind = "program" if isinstance(node, Program) else node.kind
        self._emit(emitter, kind, node)
        return emitter.get_output()

    def _emit(self, emitter: Emitter, kind: str, node: Program | Statement) -> None:
        method_name = f"emit_{kind}"
        if hasattr(emitter, method_name):
            getattr(emitter, method_name)(node)
        else:
            raise NotImplementedError(
                f"No emitter method for node kind '{kind}' "
                f"on {type(emitter).__name__}"
            )


def to_source(node: Program | Statement) -> str:
    """Pretty-print ``node`` as BL source."""
    return Renderer("bl").render(node)


__all__ = ["EMITTERS", "Emitter", "Renderer", "to_source"]
