"""Namespace nesting and alias graph backed by networkx.DiGraph."""

from __future__ import annotations

import networkx as nx

from dtsflat.config import FlatProgram, FlattenedUnit, ResolvedImport


class NamespaceGraph:
    """Wrapper around networkx.DiGraph with typed node/edge methods.

    Nodes are flattened unit identities. NESTS edges run from a parent unit
    to each hoisted child, IMPORTS edges from a unit to every namespace it
    aliases.
    """

    def __init__(self) -> None:
        self.graph = nx.DiGraph()
        self._roots: list[str] = []

    @classmethod
    def from_flat(cls, flat: FlatProgram) -> NamespaceGraph:
        ng = cls()
        for unit in flat.units:
            ng.add_unit(unit)
        for unit in flat.units:
            for imp in unit.imports:
                ng.add_import(unit.identity, imp)
        return ng

    # --- Node addition ---

    def add_unit(self, unit: FlattenedUnit) -> None:
        self.graph.add_node(
            unit.identity,
            node_type="namespace",
            depth=unit.depth,
            statements=len(unit.statements),
            order=self.graph.number_of_nodes(),
        )
        if unit.parent is None:
            self._roots.append(unit.identity)
        else:
            self.graph.add_edge(unit.parent, unit.identity, edge_type="NESTS")

    def add_import(self, identity: str, imp: ResolvedImport) -> None:
        # A parent aliasing its own child already has a NESTS edge; keep it.
        if self.graph.has_edge(identity, imp.identity):
            self.graph.edges[identity, imp.identity]["local_name"] = imp.local_name
            return
        self.graph.add_edge(
            identity,
            imp.identity,
            edge_type="IMPORTS",
            local_name=imp.local_name,
        )

    # --- Queries ---

    def units(self) -> list[str]:
        return [n for n, d in self.graph.nodes(data=True) if d.get("node_type") == "namespace"]

    def unit_count(self) -> int:
        return len(self.units())

    def children(self, identity: str) -> list[str]:
        children = [
            v for _, v, d in self.graph.out_edges(identity, data=True)
            if d.get("edge_type") == "NESTS"
        ]
        return sorted(children, key=lambda n: self.graph.nodes[n]["order"])

    def imports(self, identity: str) -> dict[str, str]:
        """local name -> identity for every alias declared in a unit."""
        return {
            d["local_name"]: v
            for _, v, d in self.graph.out_edges(identity, data=True)
            if "local_name" in d
        }

    def nesting_tree(self) -> nx.DiGraph:
        tree = nx.DiGraph()
        tree.add_nodes_from(self.units())
        tree.add_edges_from(
            (u, v) for u, v, d in self.graph.edges(data=True) if d.get("edge_type") == "NESTS"
        )
        return tree

    def preorder(self) -> list[str]:
        """Depth-first, parent-before-child order of all units."""
        tree = self.nesting_tree()
        order: list[str] = []
        for root in self._roots:
            order.extend(nx.dfs_preorder_nodes(tree, root))
        return order

    def to_dict(self) -> dict:
        return {
            "units": [
                {
                    "id": n,
                    "depth": d.get("depth", 0),
                    "statements": d.get("statements", 0),
                    "children": self.children(n),
                    "imports": self.imports(n),
                }
                for n, d in self.graph.nodes(data=True)
                if d.get("node_type") == "namespace"
            ],
            "edges": [
                {"from": u, "to": v, "type": d.get("edge_type", ""), "local_name": d.get("local_name")}
                for u, v, d in self.graph.edges(data=True)
            ],
        }
