"""Mapping between a namespace's simple name and its flattened identity."""

from __future__ import annotations

from dtsflat.config import DEFAULT_SEPARATOR


def mangle(name: str, prefix: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Return the top-level identity of namespace `name` declared under `prefix`.

    Two sibling namespaces sharing a simple name get the same identity;
    the scope collector reports that case.
    """
    if not prefix:
        return name
    return f"{prefix}{separator}{name}"


def demangle(identity: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Inverse of mangle: the innermost simple name of an identity."""
    return identity.rsplit(separator, 1)[-1]
