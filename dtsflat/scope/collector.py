"""Collect the namespace identities introduced at one nesting level.

For the body of namespace N below

    declare module M {
        declare module N {
            declare module P { }
            declare module Q { }
        }
    }

the collected scope starts with "M___N___P", "M___N___Q" and continues with
everything inherited from the enclosing levels.
"""

from __future__ import annotations

import logging

from dtsflat.config import FlattenConfig, Scope
from dtsflat.errors import ShapeReporter
from dtsflat.nodes import NamespaceDecl, Statement
from dtsflat.scope.mangling import mangle

logger = logging.getLogger(__name__)

MULTI_SEGMENT_REASON = "namespace names with more than one segment are not supported"


def is_simple_namespace(stmt: Statement) -> bool:
    """True for a namespace declaration the flattener can hoist."""
    return isinstance(stmt, NamespaceDecl) and len(stmt.path) == 1


def namespace_name(decl: NamespaceDecl, reporter: ShapeReporter) -> str | None:
    """Return the simple name of `decl`, or None for a multi-segment name."""
    if len(decl.path) != 1:
        reporter.unsupported(decl, MULTI_SEGMENT_REASON)
        return None
    return decl.path[0].name


def collect_scope(
    statements: tuple[Statement, ...],
    prefix: str,
    inherited: Scope,
    config: FlattenConfig,
    reporter: ShapeReporter,
) -> Scope:
    """Scope of `statements`: their direct child namespaces, then `inherited`."""
    introduced: list[str] = []
    for stmt in statements:
        if not isinstance(stmt, NamespaceDecl):
            continue
        name = namespace_name(stmt, reporter)
        if name is None:
            continue
        identity = mangle(name, prefix, config.separator)
        if identity in introduced:
            # Same-named siblings would share one flattened identity.
            reporter.unsupported(stmt, f"duplicate namespace identity '{identity}'")
            continue
        introduced.append(identity)

    if introduced:
        logger.debug(f"Scope under '{prefix or '<global>'}' introduces {introduced}")
    return inherited.extend(introduced)
