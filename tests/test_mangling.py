"""Tests for namespace name mangling."""

import pytest

from dtsflat.config import FlattenConfig
from dtsflat.nodes import Identifier, NamespaceDecl, Program
from dtsflat.phases.flatten import flatten_program
from dtsflat.scope.mangling import demangle, mangle


class TestMangle:
    def test_empty_prefix_returns_name(self):
        assert mangle("M", "") == "M"

    def test_prefix_joined_with_separator(self):
        assert mangle("N", "M") == "M___N"

    def test_nested_prefix(self):
        assert mangle("P", "M___N") == "M___N___P"

    def test_custom_separator(self):
        assert mangle("N", "M", separator="$") == "M$N"


class TestDemangle:
    def test_single_level(self):
        assert demangle("M___N") == "N"

    def test_multi_level_recovers_innermost(self):
        assert demangle("M___N___P") == "P"

    def test_no_separator_unchanged(self):
        assert demangle("Plain") == "Plain"

    def test_inverts_mangle(self):
        for name, prefix in [("A", "B"), ("Inner", "Outer"), ("x1", "ns")]:
            assert demangle(mangle(name, prefix)) == name

    def test_custom_separator(self):
        assert demangle("M$N$P", separator="$") == "P"


class TestSeparatorConfig:
    def test_empty_separator_rejected(self):
        with pytest.raises(ValueError, match="separator"):
            FlattenConfig(separator="")

    def test_custom_separator_used_for_identities(self):
        inner = NamespaceDecl((Identifier("N"),))
        program = Program((NamespaceDecl((Identifier("M"),), (inner,)),))
        flat = flatten_program(program, FlattenConfig(separator="$"))
        assert [u.identity for u in flat.units] == ["M", "M$N"]
