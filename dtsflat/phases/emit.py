"""Phase 3: print flattened units as ambient declaration text."""

from __future__ import annotations

from dtsflat.config import FlatProgram, FlattenConfig, FlattenedUnit, ResolvedImport, Scope
from dtsflat.errors import ShapeReporter
from dtsflat.nodes import (
    ArrayType,
    ClassDecl,
    DestructuringPattern,
    ExportAssignment,
    ExportNamespaceDecl,
    FunctionType,
    GenericType,
    Identifier,
    Indexer,
    InterfaceDecl,
    NamespaceDecl,
    Node,
    ObjectType,
    Param,
    PrimitiveType,
    Property,
    Statement,
    TypeParam,
    UnsupportedMember,
    UnsupportedStatement,
    UnsupportedType,
    VariableDecl,
)
from dtsflat.scope.collector import MULTI_SEGMENT_REASON
from dtsflat.scope.references import (
    PATTERN_REASON,
    find_candidates,
    resolve_imports,
    variable_binder,
)


EXPORT_NESTED_REASON = "namespaces inside an export namespace are not supported"


class Printer:
    def __init__(self, config: FlattenConfig, reporter: ShapeReporter | None = None):
        self._config = config
        self._reporter = reporter if reporter is not None else ShapeReporter(config)

    def _indent(self, level: int) -> str:
        return " " * self._config.indent * level

    def _block(self, header: str, lines: list[str], level: int) -> str:
        return "\n".join([f"{self._indent(level)}{header} {{"] + lines + [f"{self._indent(level)}}}"])

    # --- Units and statements ---

    def _print_alias(self, imp: ResolvedImport, level: int) -> str:
        marker = self._config.import_marker
        return f"{self._indent(level)}declare var {imp.local_name}: {marker}<'{imp.identity}'>;"

    def _print_module(
        self,
        name: str,
        imports: tuple[ResolvedImport, ...],
        statements: tuple[Statement, ...],
        scope: Scope,
        level: int,
    ) -> str:
        lines = [self._print_alias(imp, level + 1) for imp in imports]
        lines += [self.print(s, level=level + 1, scope=scope) for s in statements]
        return self._block(f"declare module {name}", lines, level)

    def print_unit(self, unit: FlattenedUnit, level: int = 0) -> str:
        return self._print_module(unit.identity, unit.imports, unit.statements, unit.scope, level)

    def _print_export_namespace(self, n: ExportNamespaceDecl, level: int, scope: Scope) -> str:
        # Aliases resolve against the enclosing scope.
        candidates = find_candidates(n.body, self._reporter)
        imports = resolve_imports(scope, candidates, self._config)
        lines = [self._print_alias(imp, level + 1) for imp in imports]
        for s in n.body:
            if isinstance(s, NamespaceDecl):
                lines.append(self._print_unsupported_statement(s, EXPORT_NESTED_REASON, level + 1))
            else:
                lines.append(self.print(s, level=level + 1, scope=scope))
        return self._block(f"declare module {n.name}", lines, level)

    def _print_variable(self, v: VariableDecl, level: int) -> str:
        binder = variable_binder(v, self._reporter)
        if binder is None:
            return self._indent(level) + self._config.placeholder
        return f"{self._indent(level)}declare var {self._print_identifier(binder, level)};"

    def _print_type_params(self, params: tuple[TypeParam, ...], level: int) -> str:
        if not params:
            return ""
        return "<" + ", ".join(self._print_identifier(p.id, level) for p in params) + ">"

    def _print_heritage(
        self, keyword: str, owner: Node, targets: tuple[GenericType | UnsupportedType, ...], level: int
    ) -> str:
        if not targets:
            return ""
        if len(targets) > 1:
            reason = f"more than one '{keyword}' target is not supported"
            return " " + self._reporter.unsupported(owner, reason)
        if isinstance(targets[0], UnsupportedType):
            reason = f"'{keyword}' targets must be type references"
            return " " + self._reporter.unsupported(targets[0], reason)
        return f" {keyword} {self._print_generic(targets[0], level)}"

    def _print_interface(self, i: InterfaceDecl, level: int) -> str:
        return (
            f"{self._indent(level)}declare class {i.id.name}"
            + self._print_type_params(i.type_params, level)
            + self._print_heritage("extends", i, i.extends, level)
            + " "
            + self._print_object(i.body, level)
        )

    def _print_class(self, c: ClassDecl, level: int) -> str:
        return (
            f"{self._indent(level)}declare class {c.id.name}"
            + self._print_type_params(c.type_params, level)
            + self._print_heritage("extends", c, c.extends, level)
            + self._print_heritage("implements", c, c.implements, level)
            + " "
            + self._print_object(c.body, level)
        )

    def _print_export_assignment(self, e: ExportAssignment, level: int) -> str:
        return f"{self._indent(level)}declare var exports: typeof {e.id.name};"

    def _print_unsupported_statement(self, n: Node, reason: str, level: int) -> str:
        return self._indent(level) + self._reporter.unsupported(n, reason)

    # --- Types ---

    def _print_identifier(self, i: Identifier, level: int) -> str:
        if i.annotation is None:
            return i.name
        return f"{i.name}: {self.print(i.annotation, level=level)}"

    def _print_generic(self, g: GenericType, level: int) -> str:
        path = ".".join(i.name for i in g.path)
        if not g.type_args:
            return path
        args = ", ".join(self.print(t, level=level) for t in g.type_args)
        return f"{path}<{args}>"

    def _print_param(self, p: Param, level: int) -> str:
        mark = "?" if p.optional else ""
        return f"{p.name.name}{mark}: {self.print(p.type, level=level)}"

    def _print_signature(self, f: FunctionType, level: int) -> str:
        params = [self._print_param(p, level) for p in f.params]
        if f.rest is not None:
            params.append("..." + self._print_param(f.rest, level))
        return self._print_type_params(f.type_params, level) + "(" + ", ".join(params) + ")"

    def _print_function(self, f: FunctionType, level: int) -> str:
        return f"{self._print_signature(f, level)} => {self.print(f.return_type, level=level)}"

    def _print_method(self, f: FunctionType, level: int) -> str:
        return f"{self._print_signature(f, level)}: {self.print(f.return_type, level=level)}"

    def _print_property(self, p: Property, level: int) -> str:
        if not isinstance(p.key, Identifier):
            return self._reporter.unsupported(p.key, "only identifier property keys are supported")
        name = p.key.name
        if isinstance(p.value, FunctionType) and not p.optional:
            return f"{name}{self._print_method(p.value, level)};"
        mark = "?" if p.optional else ""
        return f"{name}{mark}: {self.print(p.value, level=level)};"

    def _print_indexer(self, i: Indexer, level: int) -> str:
        key = self.print(i.key, level=level)
        value = self.print(i.value, level=level)
        return f"[{i.id.name}: {key}]: {value};"

    def _print_object(self, o: ObjectType, level: int) -> str:
        members = [self._print_property(p, level + 1) for p in o.properties]
        members += [self._print_indexer(i, level + 1) for i in o.indexers]
        members += [self._reporter.unsupported(m, "member kind is not supported") for m in o.unsupported]
        if not members:
            return "{ }"
        inner = self._indent(level + 1)
        return "{\n" + "\n".join(inner + m for m in members) + f"\n{self._indent(level)}}}"

    def print(self, n: Node, *, level: int, scope: Scope = Scope()) -> str:
        match n:
            case VariableDecl():
                return self._print_variable(n, level)
            case InterfaceDecl():
                return self._print_interface(n, level)
            case ClassDecl():
                return self._print_class(n, level)
            case ExportAssignment():
                return self._print_export_assignment(n, level)
            case ExportNamespaceDecl():
                return self._print_export_namespace(n, level, scope)
            case NamespaceDecl() if len(n.path) != 1:
                return self._print_unsupported_statement(n, MULTI_SEGMENT_REASON, level)
            case NamespaceDecl():
                reason = "nested namespace declarations must be flattened before printing"
                return self._print_unsupported_statement(n, reason, level)
            case UnsupportedStatement():
                return self._print_unsupported_statement(n, "statement kind is not supported", level)
            case PrimitiveType():
                return n.kind.value
            case FunctionType():
                return self._print_function(n, level)
            case ObjectType():
                return self._print_object(n, level)
            case ArrayType():
                return f"Array<{self.print(n.element, level=level)}>"
            case GenericType():
                return self._print_generic(n, level)
            case Identifier():
                return self._print_identifier(n, level)
            case UnsupportedType():
                return self._reporter.unsupported_type(n, "type kind is not supported")
            case DestructuringPattern():
                return self._reporter.unsupported(n, PATTERN_REASON)
            case _:
                return self._reporter.unsupported(n, f"cannot print {type(n).__name__}")

    def print_program(self, flat: FlatProgram) -> str:
        parts = [self.print_unit(u) for u in flat.units]
        parts += [self.print(s, level=0, scope=flat.scope) for s in flat.statements]
        return "\n".join(parts) + "\n" if parts else ""


def print_program(
    flat: FlatProgram, config: FlattenConfig, reporter: ShapeReporter | None = None
) -> str:
    return Printer(config, reporter).print_program(flat)
