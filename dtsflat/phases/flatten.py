"""Phase 2: hoist nested namespaces into top-level flattened units."""

from __future__ import annotations

import logging

from dtsflat.config import FlatProgram, FlattenConfig, FlattenedUnit, Scope
from dtsflat.errors import ShapeReporter
from dtsflat.nodes import NamespaceDecl, Program, Statement
from dtsflat.scope.collector import collect_scope, is_simple_namespace
from dtsflat.scope.mangling import mangle
from dtsflat.scope.references import find_candidates, resolve_imports

logger = logging.getLogger(__name__)


def partition(
    statements: tuple[Statement, ...],
) -> tuple[list[NamespaceDecl], list[Statement]]:
    """Split statements into hoistable namespaces and everything else."""
    namespaces: list[NamespaceDecl] = []
    rest: list[Statement] = []
    for stmt in statements:
        if is_simple_namespace(stmt):
            namespaces.append(stmt)
        else:
            rest.append(stmt)
    return namespaces, rest


def build_unit(
    decl: NamespaceDecl,
    prefix: str,
    inherited: Scope,
    config: FlattenConfig,
    reporter: ShapeReporter,
    depth: int = 0,
) -> FlattenedUnit:
    """Build the flattened unit for one namespace declared under `prefix`."""
    identity = mangle(decl.path[0].name, prefix, config.separator)
    scope = collect_scope(decl.body, identity, inherited, config, reporter)
    candidates = find_candidates(decl.body, reporter)
    imports = resolve_imports(scope, candidates, config)
    _, rest = partition(decl.body)
    return FlattenedUnit(
        identity=identity,
        scope=scope,
        imports=imports,
        statements=tuple(rest),
        parent=prefix or None,
        depth=depth,
    )


def _flatten_namespace(
    decl: NamespaceDecl,
    prefix: str,
    inherited: Scope,
    config: FlattenConfig,
    reporter: ShapeReporter,
    units: list[FlattenedUnit],
    depth: int,
) -> None:
    unit = build_unit(decl, prefix, inherited, config, reporter, depth)
    units.append(unit)

    children, _ = partition(decl.body)
    for child in children:
        _flatten_namespace(child, unit.identity, unit.scope, config, reporter, units, depth + 1)


def flatten_program(
    program: Program,
    config: FlattenConfig,
    reporter: ShapeReporter | None = None,
) -> FlatProgram:
    """Flatten every namespace of `program` into depth-first ordered units."""
    if reporter is None:
        reporter = ShapeReporter(config)

    scope = collect_scope(program.statements, "", Scope(), config, reporter)
    namespaces, rest = partition(program.statements)

    units: list[FlattenedUnit] = []
    for decl in namespaces:
        _flatten_namespace(decl, "", scope, config, reporter, units, depth=0)

    logger.debug(f"Flattened {len(namespaces)} top-level namespaces into {len(units)} units")
    return FlatProgram(units=tuple(units), statements=tuple(rest), scope=scope)
