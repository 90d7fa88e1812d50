"""Phase 1: tree-sitter source to declaration tree."""

from __future__ import annotations

import logging
import os

import tree_sitter

from dtsflat.config import PipelineConfig
from dtsflat.errors import ParseError
from dtsflat.languages import get_front_end
from dtsflat.languages.base import FrontEnd
from dtsflat.nodes import Program

logger = logging.getLogger(__name__)

# Cache parsers per language to avoid re-creating
_parsers: dict[str, tree_sitter.Parser] = {}


def _get_parser(front_end: FrontEnd) -> tree_sitter.Parser:
    """Get or create a parser for the given front-end."""
    key = front_end.language_name
    if key not in _parsers:
        _parsers[key] = tree_sitter.Parser(front_end.get_language())
    return _parsers[key]


def _default_front_end() -> FrontEnd:
    front_end = get_front_end(".d.ts")
    if front_end is None:
        raise ParseError("No front-end registered for TypeScript declarations")
    return front_end


def parse_source(source: bytes | str, front_end: FrontEnd | None = None) -> Program:
    """Parse declaration source text into a Program."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    if front_end is None:
        front_end = _default_front_end()
    tree = _get_parser(front_end).parse(source)
    if tree.root_node.has_error:
        logger.warning("Syntax errors in declaration source; affected nodes are skipped")
    return front_end.build(tree, source)


def parse_file(path: str) -> Program:
    """Read and parse a declaration file."""
    front_end = get_front_end(os.path.basename(path))
    if front_end is None:
        logger.warning(f"No front-end registered for {path}, assuming TypeScript declarations")
        front_end = _default_front_end()

    try:
        with open(path, "rb") as f:
            source = f.read()
    except OSError as e:
        raise ParseError(f"Failed to read {path}: {e}") from e

    program = parse_source(source, front_end)
    logger.debug(f"Parsed {len(program.statements)} top-level statements from {path}")
    return program


def run_parsing_phase(config: PipelineConfig) -> Program:
    """Parse the configured input file."""
    return parse_file(config.input_path)
