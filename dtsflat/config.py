"""Core data types and configuration for the flattening pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from dtsflat.nodes import Statement

DEFAULT_SEPARATOR = "___"
DEFAULT_IMPORT_MARKER = "$Exports"


@dataclass(frozen=True)
class FlattenConfig:
    """Settings threaded through every flattening and printing call."""
    strict: bool = True
    separator: str = DEFAULT_SEPARATOR
    import_marker: str = DEFAULT_IMPORT_MARKER
    indent: int = 2
    placeholder: str = "/* unsupported */"
    type_placeholder: str = "any"

    def __post_init__(self) -> None:
        # Mangled identities must split back into their segments.
        if not self.separator:
            raise ValueError("separator must be a non-empty string")


@dataclass(frozen=True)
class Scope:
    """Mangled namespace identities visible at one nesting point.

    Entries declared at the deepest level come first, so the first match
    during a lookup is the nearest enclosing declaration.
    """
    entries: tuple[str, ...] = ()

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, identity: object) -> bool:
        return identity in self.entries

    def extend(self, identities: list[str] | tuple[str, ...]) -> Scope:
        """Return a new scope with `identities` in front of the current entries."""
        return Scope(tuple(identities) + self.entries)


@dataclass(frozen=True)
class ResolvedImport:
    """Alias binding a local name to a flattened namespace identity."""
    local_name: str
    identity: str


@dataclass(frozen=True)
class FlattenedUnit:
    identity: str
    scope: Scope
    imports: tuple[ResolvedImport, ...]
    statements: tuple[Statement, ...]
    parent: str | None = None
    depth: int = 0


@dataclass(frozen=True)
class FlatProgram:
    """Result of the flattening pass: top-level units then loose statements."""
    units: tuple[FlattenedUnit, ...]
    statements: tuple[Statement, ...]
    scope: Scope = Scope()


@dataclass(frozen=True)
class Diagnostic:
    """A placeholder substitution made in lenient mode."""
    node: str
    reason: str


@dataclass
class PipelineConfig:
    input_path: str = ""
    output_path: str | None = None
    flatten: FlattenConfig = field(default_factory=FlattenConfig)
    verbose: bool = False
    quiet: bool = False


@dataclass
class PipelineResult:
    text: str = ""
    flat: FlatProgram | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    stats: dict[str, Any] = field(default_factory=dict)
