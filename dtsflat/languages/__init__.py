"""Front-end registry - maps file names to declaration builders."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dtsflat.languages.base import FrontEnd

_REGISTRY: dict[str, FrontEnd] = {}
_INITIALISED = False


def _init_registry() -> None:
    global _INITIALISED
    if _INITIALISED:
        return

    from dtsflat.languages.typescript import DeclarationBuilder

    front_ends: list[FrontEnd] = [DeclarationBuilder()]

    for front_end in front_ends:
        for ext in front_end.extensions:
            _REGISTRY[ext] = front_end

    _INITIALISED = True


def get_front_end(file_name: str) -> FrontEnd | None:
    """Get the front-end for a file name, matching the longest suffix ('.d.ts' before '.ts')."""
    _init_registry()
    for ext in sorted(_REGISTRY, key=len, reverse=True):
        if file_name.endswith(ext):
            return _REGISTRY[ext]
    return None


def supported_extensions() -> set[str]:
    """Return all supported file extensions."""
    _init_registry()
    return set(_REGISTRY.keys())
