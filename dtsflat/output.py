"""Result assembly and file output."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from dtsflat.config import Diagnostic, FlatProgram, PipelineConfig, PipelineResult
from dtsflat.graph.namespace_graph import NamespaceGraph


def _count_aliases(flat: FlatProgram) -> int:
    return sum(len(u.imports) for u in flat.units)


def build_result(
    config: PipelineConfig,
    flat: FlatProgram,
    text: str,
    diagnostics: list[Diagnostic],
    timings: dict[str, float],
    total_ms: float,
) -> PipelineResult:
    """Build the PipelineResult from a finished pass."""
    input_path = Path(config.input_path).resolve()

    return PipelineResult(
        text=text,
        flat=flat,
        diagnostics=list(diagnostics),
        metadata={
            "input_path": str(input_path),
            "processed_at": datetime.now(timezone.utc).isoformat(),
            "dtsflat_version": "0.1.0",
            "strict": config.flatten.strict,
            "duration_ms": round(total_ms, 1),
            "phase_timings": timings,
        },
        stats={
            "units": len(flat.units),
            "max_depth": max((u.depth for u in flat.units), default=0),
            "aliases": _count_aliases(flat),
            "top_level_statements": len(flat.statements),
            "diagnostics": len(diagnostics),
        },
    )


def build_graph_report(flat: FlatProgram) -> dict[str, Any]:
    """JSON-ready description of the namespace nesting and alias graph."""
    graph = NamespaceGraph.from_flat(flat)
    report = graph.to_dict()
    report["order"] = graph.preorder()
    return report


def write_output(text: str, output_path: str) -> None:
    """Write declaration text to a file, creating parent directories."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def write_json(data: dict[str, Any], output_path: str) -> None:
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2, default=str)
