"""Tests for NamespaceGraph."""

from __future__ import annotations

from dtsflat.config import FlattenConfig
from dtsflat.graph.namespace_graph import NamespaceGraph
from dtsflat.nodes import ClassDecl, GenericType, Identifier, NamespaceDecl, Program, VariableDecl
from dtsflat.output import build_graph_report
from dtsflat.phases.flatten import flatten_program


def _ns(name, *body):
    return NamespaceDecl(path=(Identifier(name),), body=body)


def _flat():
    ref = GenericType(path=(Identifier("Lib"), Identifier("T")))
    program = Program(statements=(
        _ns("Lib", ClassDecl(Identifier("T"))),
        _ns("App", _ns("Views", VariableDecl(declarators=(Identifier("v", ref),))), _ns("Models")),
    ))
    return flatten_program(program, FlattenConfig())


class TestNamespaceGraph:
    def test_units(self):
        graph = NamespaceGraph.from_flat(_flat())
        assert set(graph.units()) == {"Lib", "App", "App___Views", "App___Models"}
        assert graph.unit_count() == 4

    def test_children(self):
        graph = NamespaceGraph.from_flat(_flat())
        assert graph.children("App") == ["App___Views", "App___Models"]
        assert graph.children("Lib") == []

    def test_imports(self):
        graph = NamespaceGraph.from_flat(_flat())
        assert graph.imports("App") == {"Views": "App___Views", "Models": "App___Models"}
        assert graph.imports("App___Views") == {"Lib": "Lib"}

    def test_preorder_matches_flatten_order(self):
        flat = _flat()
        graph = NamespaceGraph.from_flat(flat)
        assert graph.preorder() == [u.identity for u in flat.units]

    def test_nesting_tree_excludes_aliases(self):
        graph = NamespaceGraph.from_flat(_flat())
        tree = graph.nesting_tree()
        assert set(tree.edges()) == {("App", "App___Views"), ("App", "App___Models")}

    def test_report(self):
        report = build_graph_report(_flat())
        assert report["order"] == ["Lib", "App", "App___Views", "App___Models"]
        app = next(u for u in report["units"] if u["id"] == "App")
        assert app["children"] == ["App___Views", "App___Models"]
        edge_types = {(e["from"], e["to"]): e["type"] for e in report["edges"]}
        assert edge_types[("App", "App___Views")] == "NESTS"
        assert edge_types[("App___Views", "Lib")] == "IMPORTS"
