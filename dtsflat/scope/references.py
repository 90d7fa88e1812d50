"""Find and resolve references to namespaces inside a namespace body.

Given

    declare module M { export class A { } }
    declare module N {
        var x: M.A;
        var y: W.A;
    }

the candidates found in N are {"M", "W"}. Only "M" names a namespace in
scope, so resolution yields a single alias M -> "M"; "W" is assumed to be
defined elsewhere and is dropped.
"""

from __future__ import annotations

import logging

from dtsflat.config import FlattenConfig, ResolvedImport, Scope
from dtsflat.errors import ShapeReporter
from dtsflat.nodes import (
    ExportAssignment,
    GenericType,
    Identifier,
    NamespaceDecl,
    Statement,
    VariableDecl,
)
from dtsflat.scope.mangling import demangle

logger = logging.getLogger(__name__)

MULTI_BINDER_REASON = "only single-binder variable declarations are supported"
PATTERN_REASON = "only identifier binding patterns are supported"


def variable_binder(decl: VariableDecl, reporter: ShapeReporter) -> Identifier | None:
    """The single identifier bound by `decl`, or None for unsupported shapes."""
    if len(decl.declarators) != 1:
        reporter.unsupported(decl, MULTI_BINDER_REASON)
        return None
    binder = decl.declarators[0]
    if not isinstance(binder, Identifier):
        reporter.unsupported(binder, PATTERN_REASON)
        return None
    return binder


def find_candidates(statements: tuple[Statement, ...], reporter: ShapeReporter) -> frozenset[str]:
    """Names in `statements` that may refer to a namespace.

    This over-approximates: every root of a dotted variable annotation,
    every direct child namespace and every export-assignment target.
    Child namespaces always count as used so that dotted access through
    the parent keeps working once they are hoisted.
    """
    candidates: set[str] = set()
    for stmt in statements:
        match stmt:
            case VariableDecl():
                binder = variable_binder(stmt, reporter)
                if binder is not None and isinstance(binder.annotation, GenericType):
                    candidates.add(binder.annotation.root)
            case NamespaceDecl():
                # Multi-segment names are reported by the scope collector.
                if len(stmt.path) == 1:
                    candidates.add(stmt.path[0].name)
            case ExportAssignment():
                candidates.add(stmt.id.name)
    return frozenset(candidates)


def resolve_imports(
    scope: Scope, candidates: frozenset[str], config: FlattenConfig
) -> tuple[ResolvedImport, ...]:
    """Match candidates against the scope, one alias per matched candidate."""
    resolved: list[ResolvedImport] = []
    for name in sorted(candidates):
        matches = [e for e in scope if demangle(e, config.separator) == name]
        if not matches:
            logger.debug(f"'{name}' is not a namespace in scope, treating as external")
            continue
        if len(matches) > 1:
            logger.debug(f"'{name}' matches {matches}, using nearest '{matches[0]}'")
        resolved.append(ResolvedImport(local_name=name, identity=matches[0]))
    return tuple(resolved)
