"""Errors raised by the flattening pass and the lenient-mode reporter."""

from __future__ import annotations

import logging

from dtsflat.config import Diagnostic, FlattenConfig
from dtsflat.nodes import Node, describe

logger = logging.getLogger(__name__)


class DtsFlatError(Exception):
    """Base class for all errors raised by dtsflat."""


class ParseError(DtsFlatError):
    """The front-end could not read or parse a source file."""


class UnsupportedShapeError(DtsFlatError):
    """A well-formed tree contains a shape the pass cannot express."""

    def __init__(self, node: Node, reason: str) -> None:
        self.node = node
        self.reason = reason
        self.description = describe(node)
        super().__init__(f"Unsupported {self.description}: {reason}")


class ShapeReporter:
    """Applies the strict/lenient policy to unsupported shapes.

    Strict mode raises UnsupportedShapeError. Lenient mode records a
    Diagnostic and hands back a placeholder for the caller to emit.
    One reporter is created per pass.
    """

    def __init__(self, config: FlattenConfig) -> None:
        self.config = config
        self.diagnostics: list[Diagnostic] = []
        # Nodes can be visited by more than one stage; report each once.
        self._reported: set[int] = set()

    @property
    def strict(self) -> bool:
        return self.config.strict

    def unsupported(self, node: Node, reason: str, placeholder: str | None = None) -> str:
        if self.config.strict:
            raise UnsupportedShapeError(node, reason)
        if id(node) not in self._reported:
            self._reported.add(id(node))
            description = describe(node)
            logger.warning(f"Unsupported {description}: {reason}")
            self.diagnostics.append(Diagnostic(node=description, reason=reason))
        return self.config.placeholder if placeholder is None else placeholder

    def unsupported_type(self, node: Node, reason: str) -> str:
        return self.unsupported(node, reason, placeholder=self.config.type_placeholder)
