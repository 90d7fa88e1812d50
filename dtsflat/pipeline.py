"""Sequential phase orchestrator with timing."""

from __future__ import annotations

import time

from dtsflat.config import Diagnostic, FlatProgram, FlattenConfig, PipelineConfig, PipelineResult
from dtsflat.errors import ShapeReporter
from dtsflat.nodes import Program
from dtsflat.output import build_result
from dtsflat.phases.emit import print_program
from dtsflat.phases.flatten import flatten_program
from dtsflat.phases.parsing import run_parsing_phase


_PHASE_LABELS = {
    "parsing": "Parsing declarations",
    "flattening": "Flattening namespaces",
    "printing": "Printing declarations",
}


def transpile(program: Program, config: FlattenConfig) -> tuple[str, list[Diagnostic]]:
    """Flatten and print a program in one pass.

    Raises UnsupportedShapeError in strict mode; in lenient mode the
    placeholder substitutions are returned alongside the text.
    """
    reporter = ShapeReporter(config)
    flat = flatten_program(program, config, reporter)
    text = print_program(flat, config, reporter)
    return text, reporter.diagnostics


def run_pipeline(
    config: PipelineConfig,
    progress_callback=None,
) -> PipelineResult:
    """Execute the three-phase pass over one input file and return the result.

    Args:
        config: Pipeline configuration.
        progress_callback: Optional callable(phase_name, label) invoked
            when each phase starts. Used by the CLI for Rich progress.
    """
    reporter = ShapeReporter(config.flatten)
    state: dict[str, object] = {}
    timings: dict[str, float] = {}
    total_start = time.monotonic()

    def _parse() -> None:
        state["program"] = run_parsing_phase(config)

    def _flatten() -> None:
        state["flat"] = flatten_program(state["program"], config.flatten, reporter)

    def _print() -> None:
        state["text"] = print_program(state["flat"], config.flatten, reporter)

    phases = [
        ("parsing", _parse),
        ("flattening", _flatten),
        ("printing", _print),
    ]

    for name, phase_fn in phases:
        if progress_callback:
            progress_callback(name, _PHASE_LABELS.get(name, name))
        start = time.monotonic()
        phase_fn()
        timings[name] = time.monotonic() - start

    total_ms = (time.monotonic() - total_start) * 1000

    flat = state["flat"]
    assert isinstance(flat, FlatProgram)
    return build_result(config, flat, str(state["text"]), reporter.diagnostics, timings, total_ms)
