"""Protocol for front-ends producing the declaration tree."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import tree_sitter

from dtsflat.nodes import Program


@runtime_checkable
class FrontEnd(Protocol):
    """Protocol that all front-ends must implement."""

    extensions: list[str]
    language_name: str

    def get_language(self) -> tree_sitter.Language:
        """Return the tree-sitter Language object for this front-end."""
        ...

    def build(self, tree: tree_sitter.Tree, source: bytes) -> Program:
        """Convert a parsed tree into the declaration tree."""
        ...
