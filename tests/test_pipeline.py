"""End-to-end tests for the pipeline and the CLI."""

from __future__ import annotations

import json
import os

import pytest
from click.testing import CliRunner

from dtsflat.cli import cli
from dtsflat.config import FlattenConfig, PipelineConfig
from dtsflat.errors import UnsupportedShapeError
from dtsflat.output import write_output
from dtsflat.phases.parsing import parse_source
from dtsflat.pipeline import run_pipeline, transpile

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")
NESTED = os.path.join(FIXTURES_DIR, "nested.d.ts")
TWO_EXTENDS = os.path.join(FIXTURES_DIR, "two_extends.d.ts")
MEMBERS = os.path.join(FIXTURES_DIR, "members.d.ts")

NESTED_EXPECTED = (
    "declare module M {\n"
    "  declare var N: $Exports<'M___N'>;\n"
    "  declare var O: $Exports<'M___O'>;\n"
    "}\n"
    "declare module M___N {\n"
    "  declare class A { }\n"
    "}\n"
    "declare module M___O {\n"
    "  declare class B { }\n"
    "}\n"
    "declare module P {\n"
    "  declare var M: $Exports<'M'>;\n"
    "  declare var x: M.N.A;\n"
    "  declare var y: W.A;\n"
    "}\n"
)


class TestRunPipeline:
    def test_nested_fixture(self):
        result = run_pipeline(PipelineConfig(input_path=NESTED))
        assert result.text == NESTED_EXPECTED
        assert result.stats["units"] == 4
        assert result.stats["max_depth"] == 1
        assert result.stats["aliases"] == 3
        assert result.diagnostics == []

    def test_progress_callback(self):
        phases = []

        def on_phase(name, label):
            phases.append(name)

        run_pipeline(PipelineConfig(input_path=NESTED), progress_callback=on_phase)
        assert phases == ["parsing", "flattening", "printing"]

    def test_timings_recorded(self):
        result = run_pipeline(PipelineConfig(input_path=NESTED))
        assert set(result.metadata["phase_timings"]) == {"parsing", "flattening", "printing"}

    def test_members_fixture(self):
        result = run_pipeline(PipelineConfig(input_path=MEMBERS))
        assert result.text == (
            "declare module Shapes {\n"
            "  declare class Point {\n"
            "    x: number;\n"
            "    label?: string;\n"
            "    move(dx: number, dy: number): void;\n"
            "  }\n"
            "  declare class Circle extends Base implements Drawable {\n"
            "    radius: number;\n"
            "    area(): number;\n"
            "  }\n"
            "}\n"
            "declare var exports: typeof Shapes;\n"
        )

    def test_lenient_records_diagnostics(self):
        config = PipelineConfig(input_path=TWO_EXTENDS, flatten=FlattenConfig(strict=False))
        result = run_pipeline(config)
        assert "declare class I /* unsupported */ { }" in result.text
        assert result.stats["diagnostics"] == 1


class TestUnmappedMembers:
    SOURCE = (
        "declare module M {\n"
        "  export interface I {\n"
        "    (x: number): string;\n"
        "    new (): I;\n"
        "    [K in keyof T]: string;\n"
        "  }\n"
        "}\n"
    )

    def test_strict_aborts(self):
        with pytest.raises(UnsupportedShapeError, match="call signature"):
            transpile(parse_source(self.SOURCE), FlattenConfig())

    def test_lenient_placeholders(self):
        text, diagnostics = transpile(parse_source(self.SOURCE), FlattenConfig(strict=False))
        assert text == (
            "declare module M {\n"
            "  declare class I {\n"
            "    /* unsupported */\n"
            "    /* unsupported */\n"
            "    /* unsupported */\n"
            "  }\n"
            "}\n"
        )
        assert [d.node.split(" '")[0] for d in diagnostics] == [
            "call signature",
            "construct signature",
            "mapped index signature",
        ]

    def test_class_extends_expression_lenient(self):
        program = parse_source("declare class C extends mixin(Base) { }\n")
        text, diagnostics = transpile(program, FlattenConfig(strict=False))
        assert text == "declare class C /* unsupported */ { }\n"
        assert len(diagnostics) == 1


class TestWriteOutput:
    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "out" / "flat.d.ts"
        write_output("declare module M {\n}\n", str(target))
        assert target.read_text() == "declare module M {\n}\n"


class TestCli:
    def test_flatten_to_stdout(self):
        result = CliRunner().invoke(cli, ["flatten", NESTED])
        assert result.exit_code == 0
        assert result.output == NESTED_EXPECTED

    def test_flatten_import_marker(self):
        result = CliRunner().invoke(cli, ["flatten", NESTED, "--import-marker", "Import"])
        assert result.exit_code == 0
        assert "declare var N: Import<'M___N'>;" in result.output

    def test_flatten_to_file(self, tmp_path):
        target = tmp_path / "flat.d.ts"
        result = CliRunner().invoke(cli, ["flatten", NESTED, "-o", str(target)])
        assert result.exit_code == 0
        assert target.read_text() == NESTED_EXPECTED

    def test_strict_failure_exit_code(self):
        result = CliRunner().invoke(cli, ["flatten", TWO_EXTENDS])
        assert result.exit_code == 1
        assert "Unsupported interface" in result.output

    def test_lenient_flag(self):
        result = CliRunner().invoke(cli, ["flatten", TWO_EXTENDS, "--lenient", "--quiet"])
        assert result.exit_code == 0
        assert "/* unsupported */" in result.output

    def test_graph_command(self, tmp_path):
        target = tmp_path / "graph.json"
        result = CliRunner().invoke(cli, ["graph", NESTED, "-o", str(target)])
        assert result.exit_code == 0
        report = json.loads(target.read_text())
        assert report["order"] == ["M", "M___N", "M___O", "P"]

    def test_missing_input(self):
        result = CliRunner().invoke(cli, ["flatten", os.path.join(FIXTURES_DIR, "missing.d.ts")])
        assert result.exit_code != 0

    def test_empty_separator_rejected(self):
        result = CliRunner().invoke(cli, ["flatten", NESTED, "--separator", ""])
        assert result.exit_code == 2
        assert "must not be empty" in result.output
