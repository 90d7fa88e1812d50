"""Tests for Phase 1: tree-sitter front-end."""

from __future__ import annotations

import logging
import os

import pytest

from dtsflat.errors import ParseError
from dtsflat.nodes import (
    ClassDecl,
    ExportAssignment,
    FunctionType,
    GenericType,
    Identifier,
    InterfaceDecl,
    NamespaceDecl,
    Primitive,
    PrimitiveType,
    UnsupportedType,
    VariableDecl,
)
from dtsflat.phases.parsing import parse_file, parse_source

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def _names(path):
    return [i.name for i in path]


class TestNamespaces:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.program = parse_file(os.path.join(FIXTURES_DIR, "nested.d.ts"))

    def test_top_level_modules(self):
        modules = [s for s in self.program.statements if isinstance(s, NamespaceDecl)]
        assert [_names(m.path) for m in modules] == [["M"], ["P"]]

    def test_nested_namespaces(self):
        outer = self.program.statements[0]
        inner = [s for s in outer.body if isinstance(s, NamespaceDecl)]
        assert [_names(n.path) for n in inner] == [["N"], ["O"]]
        assert isinstance(inner[0].body[0], ClassDecl)
        assert inner[0].body[0].id.name == "A"
        assert isinstance(inner[1].body[0], InterfaceDecl)

    def test_dotted_variable_annotation(self):
        module_p = self.program.statements[1]
        first = module_p.body[0]
        assert isinstance(first, VariableDecl)
        binder = first.declarators[0]
        assert binder.name == "x"
        assert isinstance(binder.annotation, GenericType)
        assert _names(binder.annotation.path) == ["M", "N", "A"]


class TestDeclarations:
    def test_interface_extends(self):
        program = parse_file(os.path.join(FIXTURES_DIR, "two_extends.d.ts"))
        iface = program.statements[0].body[0]
        assert isinstance(iface, InterfaceDecl)
        assert [_names(t.path) for t in iface.extends] == [["A"], ["B"]]

    def test_interface_members(self):
        program = parse_source(
            "declare module M {\n"
            "  export interface Point {\n"
            "    x: number;\n"
            "    label?: string;\n"
            "  }\n"
            "}\n"
        )
        iface = program.statements[0].body[0]
        props = {p.key.name: p for p in iface.body.properties}
        assert props["x"].value == PrimitiveType(Primitive.NUMBER)
        assert props["label"].optional is True

    def test_method_signature(self):
        program = parse_source("interface I {\n  move(dx: number): void;\n}\n")
        method = program.statements[0].body.properties[0]
        assert method.key == Identifier("move")
        assert isinstance(method.value, FunctionType)
        assert [p.name.name for p in method.value.params] == ["dx"]
        assert method.value.return_type == PrimitiveType(Primitive.VOID)

    def test_export_assignment(self):
        program = parse_source("export = Shapes;\n")
        assert program.statements == (ExportAssignment(Identifier("Shapes")),)

    def test_multiple_declarators(self):
        program = parse_source("declare var a: number, b: string;\n")
        decl = program.statements[0]
        assert isinstance(decl, VariableDecl)
        assert [d.name for d in decl.declarators] == ["a", "b"]

    def test_comments_skipped(self):
        program = parse_source("// leading\ndeclare module M { }\n")
        assert len(program.statements) == 1


class TestParseFile:
    def test_missing_file(self):
        with pytest.raises(ParseError):
            parse_file(os.path.join(FIXTURES_DIR, "missing.d.ts"))

    def test_default_front_end_missing(self, monkeypatch):
        monkeypatch.setattr("dtsflat.phases.parsing.get_front_end", lambda name: None)
        with pytest.raises(ParseError, match="No front-end"):
            parse_source("declare var x: number;\n")

    def test_syntax_errors_warned_once(self, caplog):
        with caplog.at_level(logging.WARNING):
            parse_source("declare module M {\n  var x: number;\n")
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Syntax errors" in warnings[0].getMessage()


class TestUnmappedMembers:
    def _members(self, body):
        program = parse_source(f"interface I {{\n{body}\n}}\n")
        return program.statements[0].body

    def test_call_signature(self):
        body = self._members("  (x: number): string;")
        assert body.properties == ()
        assert [m.kind for m in body.unsupported] == ["call signature"]

    def test_construct_signature(self):
        body = self._members("  new (): I;")
        assert [m.kind for m in body.unsupported] == ["construct signature"]

    def test_mapped_index_signature(self):
        body = self._members("  [K in keyof T]: string;")
        assert body.indexers == ()
        assert [m.kind for m in body.unsupported] == ["mapped index signature"]

    def test_supported_members_kept_alongside(self):
        body = self._members("  x: number;\n  (x: number): string;")
        assert [p.key.name for p in body.properties] == ["x"]
        assert len(body.unsupported) == 1

    def test_class_extends_call_expression(self):
        program = parse_source("declare class C extends mixin(Base) { }\n")
        cls = program.statements[0]
        assert isinstance(cls, ClassDecl)
        assert len(cls.extends) == 1
        assert isinstance(cls.extends[0], UnsupportedType)
        assert cls.extends[0].kind == "non-reference heritage target"
