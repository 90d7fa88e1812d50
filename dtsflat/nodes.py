"""Immutable declaration tree consumed by the flattener and the printer."""

from __future__ import annotations

import dataclasses
from enum import Enum


class Primitive(str, Enum):
    ANY = "any"
    VOID = "void"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"


@dataclasses.dataclass(frozen=True)
class Node:
    pass


@dataclasses.dataclass(frozen=True)
class Identifier(Node):
    name: str
    annotation: Type | None = None


@dataclasses.dataclass(frozen=True)
class DestructuringPattern(Node):
    text: str


Pattern = Identifier | DestructuringPattern


# --- Types ---


@dataclasses.dataclass(frozen=True)
class PrimitiveType(Node):
    kind: Primitive


@dataclasses.dataclass(frozen=True)
class TypeParam(Node):
    id: Identifier


@dataclasses.dataclass(frozen=True)
class Param(Node):
    name: Identifier
    type: Type
    optional: bool = False


@dataclasses.dataclass(frozen=True)
class FunctionType(Node):
    params: tuple[Param, ...]
    return_type: Type
    rest: Param | None = None
    type_params: tuple[TypeParam, ...] = ()


@dataclasses.dataclass(frozen=True)
class LiteralKey(Node):
    value: str


@dataclasses.dataclass(frozen=True)
class Property(Node):
    key: Identifier | LiteralKey
    value: Type
    optional: bool = False


@dataclasses.dataclass(frozen=True)
class Indexer(Node):
    id: Identifier
    key: Type
    value: Type


@dataclasses.dataclass(frozen=True)
class UnsupportedMember(Node):
    """An object or class member the front-end could not map onto the tree."""
    kind: str
    text: str = ""


@dataclasses.dataclass(frozen=True)
class ObjectType(Node):
    properties: tuple[Property, ...] = ()
    indexers: tuple[Indexer, ...] = ()
    unsupported: tuple[UnsupportedMember, ...] = ()


@dataclasses.dataclass(frozen=True)
class ArrayType(Node):
    element: Type


@dataclasses.dataclass(frozen=True)
class GenericType(Node):
    path: tuple[Identifier, ...]
    type_args: tuple[Type, ...] = ()

    @property
    def root(self) -> str:
        return self.path[0].name


@dataclasses.dataclass(frozen=True)
class UnsupportedType(Node):
    """A type the front-end could not map onto the tree."""
    kind: str
    text: str = ""


Type = PrimitiveType | FunctionType | ObjectType | ArrayType | GenericType | UnsupportedType


# --- Statements ---


@dataclasses.dataclass(frozen=True)
class NamespaceDecl(Node):
    path: tuple[Identifier, ...]
    body: tuple[Statement, ...] = ()


@dataclasses.dataclass(frozen=True)
class VariableDecl(Node):
    declarators: tuple[Pattern, ...]
    kind: str = "var"


@dataclasses.dataclass(frozen=True)
class InterfaceDecl(Node):
    id: Identifier
    body: ObjectType = ObjectType()
    type_params: tuple[TypeParam, ...] = ()
    extends: tuple[GenericType | UnsupportedType, ...] = ()


@dataclasses.dataclass(frozen=True)
class ClassDecl(Node):
    id: Identifier
    body: ObjectType = ObjectType()
    type_params: tuple[TypeParam, ...] = ()
    extends: tuple[GenericType | UnsupportedType, ...] = ()
    implements: tuple[GenericType | UnsupportedType, ...] = ()


@dataclasses.dataclass(frozen=True)
class ExportAssignment(Node):
    id: Identifier


@dataclasses.dataclass(frozen=True)
class ExportNamespaceDecl(Node):
    name: str
    body: tuple[Statement, ...] = ()


@dataclasses.dataclass(frozen=True)
class UnsupportedStatement(Node):
    """A statement the front-end could not map onto the tree."""
    kind: str
    text: str = ""


Statement = (
    NamespaceDecl
    | VariableDecl
    | InterfaceDecl
    | ClassDecl
    | ExportAssignment
    | ExportNamespaceDecl
    | UnsupportedStatement
)


@dataclasses.dataclass(frozen=True)
class Program(Node):
    statements: tuple[Statement, ...] = ()


def _path_text(path: tuple[Identifier, ...]) -> str:
    return ".".join(i.name for i in path)


def _shorten(text: str, limit: int = 60) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


def describe(node: Node) -> str:
    """One-line description of a node for error messages."""
    match node:
        case NamespaceDecl():
            return f"namespace '{_path_text(node.path)}'"
        case ExportNamespaceDecl():
            return f"export namespace '{node.name}'"
        case VariableDecl():
            names = ", ".join(
                d.name if isinstance(d, Identifier) else _shorten(d.text)
                for d in node.declarators
            )
            return f"variable declaration '{names}'"
        case InterfaceDecl():
            return f"interface '{node.id.name}'"
        case ClassDecl():
            return f"class '{node.id.name}'"
        case ExportAssignment():
            return f"export assignment '{node.id.name}'"
        case Identifier():
            return f"identifier '{node.name}'"
        case DestructuringPattern():
            return f"binding pattern '{_shorten(node.text)}'"
        case GenericType():
            return f"type reference '{_path_text(node.path)}'"
        case Property():
            key = node.key.name if isinstance(node.key, Identifier) else node.key.value
            return f"property '{key}'"
        case LiteralKey():
            return f"property key '{node.value}'"
        case UnsupportedStatement() | UnsupportedType() | UnsupportedMember():
            detail = f" '{_shorten(node.text)}'" if node.text else ""
            return f"{node.kind}{detail}"
        case _:
            return type(node).__name__
