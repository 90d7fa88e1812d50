"""TypeScript declaration-file front-end built on tree-sitter."""

from __future__ import annotations

import logging

import tree_sitter
import tree_sitter_typescript as ts_typescript

from dtsflat.nodes import (
    ArrayType,
    ClassDecl,
    DestructuringPattern,
    ExportAssignment,
    ExportNamespaceDecl,
    FunctionType,
    GenericType,
    Identifier,
    Indexer,
    InterfaceDecl,
    LiteralKey,
    NamespaceDecl,
    ObjectType,
    Param,
    Primitive,
    PrimitiveType,
    Program,
    Property,
    Statement,
    Type,
    TypeParam,
    UnsupportedMember,
    UnsupportedStatement,
    UnsupportedType,
    VariableDecl,
)

logger = logging.getLogger(__name__)

_PRIMITIVES = {p.value: p for p in Primitive}

_MODULE_TYPES = {"module", "internal_module"}

_MEMBER_TYPES = {
    "property_signature",
    "public_field_definition",
    "method_signature",
    "abstract_method_signature",
    "method_definition",
    "index_signature",
}


def _text(node: tree_sitter.Node) -> str:
    return node.text.decode("utf-8")


def _named(node: tree_sitter.Node) -> list[tree_sitter.Node]:
    """Named children without comments."""
    return [c for c in node.named_children if c.type != "comment"]


def _has_token(node: tree_sitter.Node, token: str) -> bool:
    return any(not c.is_named and c.type == token for c in node.children)


def _path(text: str) -> tuple[Identifier, ...]:
    return tuple(Identifier(part.strip()) for part in text.split("."))


def _unsupported_member(node: tree_sitter.Node, kind: str | None = None) -> UnsupportedMember:
    if kind is None:
        kind = "syntax error" if node.type == "ERROR" else node.type.replace("_", " ")
    logger.debug(f"Unmapped {kind}: {_text(node)}")
    return UnsupportedMember(kind=kind, text=_text(node))


class DeclarationBuilder:
    """Maps a tree-sitter TypeScript tree onto the declaration tree.

    Anything outside the supported subset becomes an UnsupportedStatement,
    UnsupportedMember or UnsupportedType so the printer's strict/lenient
    policy applies.
    """

    extensions = [".d.ts", ".ts"]
    language_name = "ts"

    def get_language(self) -> tree_sitter.Language:
        return tree_sitter.Language(ts_typescript.language_typescript())

    def build(self, tree: tree_sitter.Tree, source: bytes) -> Program:
        return Program(statements=self._statements(tree.root_node))

    # --- Statements ---

    def _statements(self, node: tree_sitter.Node) -> tuple[Statement, ...]:
        statements: list[Statement] = []
        for child in _named(node):
            if child.type == "ERROR":
                continue
            stmt = self._statement(child)
            if stmt is not None:
                statements.append(stmt)
        return tuple(statements)

    def _statement(self, node: tree_sitter.Node) -> Statement | None:
        kind = node.type
        if kind == "ambient_declaration":
            inner = _named(node)
            if len(inner) == 1:
                return self._statement(inner[0])
            return UnsupportedStatement(kind="global augmentation", text=_text(node))
        if kind == "export_statement":
            return self._export(node)
        if kind == "expression_statement":
            inner = _named(node)
            if len(inner) == 1 and inner[0].type in _MODULE_TYPES:
                return self._statement(inner[0])
        if kind in _MODULE_TYPES:
            return self._module(node)
        if kind in ("variable_declaration", "lexical_declaration"):
            return self._variable(node)
        if kind == "interface_declaration":
            return self._interface(node)
        if kind in ("class_declaration", "abstract_class_declaration"):
            return self._class(node)
        if kind == "empty_statement":
            return None
        return UnsupportedStatement(kind=kind.replace("_", " "), text=_text(node))

    def _export(self, node: tree_sitter.Node) -> Statement | None:
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            return self._statement(declaration)
        inner = _named(node)
        if _has_token(node, "=") and len(inner) == 1 and inner[0].type == "identifier":
            return ExportAssignment(id=Identifier(_text(inner[0])))
        return UnsupportedStatement(kind="export statement", text=_text(node))

    def _module(self, node: tree_sitter.Node) -> Statement:
        name_node = node.child_by_field_name("name")
        body_node = node.child_by_field_name("body")
        body = self._statements(body_node) if body_node is not None else ()
        if name_node is None:
            return UnsupportedStatement(kind="anonymous module", text=_text(node))
        if name_node.type == "string":
            return ExportNamespaceDecl(name=_text(name_node), body=body)
        return NamespaceDecl(path=_path(_text(name_node)), body=body)

    def _variable(self, node: tree_sitter.Node) -> Statement:
        declarators = []
        for child in _named(node):
            if child.type != "variable_declarator":
                continue
            name = child.child_by_field_name("name")
            if name is None or name.type != "identifier":
                declarators.append(DestructuringPattern(text=_text(child)))
                continue
            declarators.append(Identifier(_text(name), self._annotation(child)))
        kind_node = node.child_by_field_name("kind")
        kind = _text(kind_node) if kind_node is not None else "var"
        return VariableDecl(declarators=tuple(declarators), kind=kind)

    def _interface(self, node: tree_sitter.Node) -> Statement:
        extends: list[GenericType | UnsupportedType] = []
        for child in _named(node):
            if child.type == "extends_type_clause":
                extends.extend(self._heritage_type(t) for t in _named(child))
        body_node = node.child_by_field_name("body")
        return InterfaceDecl(
            id=Identifier(_text(node.child_by_field_name("name"))),
            body=self._object(body_node) if body_node is not None else ObjectType(),
            type_params=self._type_params(node),
            extends=tuple(extends),
        )

    def _class(self, node: tree_sitter.Node) -> Statement:
        extends: list[GenericType | UnsupportedType] = []
        implements: list[GenericType | UnsupportedType] = []
        for child in _named(node):
            if child.type != "class_heritage":
                continue
            for clause in _named(child):
                if clause.type == "extends_clause":
                    extends.extend(self._heritage_value(v) for v in _named(clause) if v.type != "type_arguments")
                elif clause.type == "implements_clause":
                    implements.extend(self._heritage_type(c) for c in _named(clause))
        body_node = node.child_by_field_name("body")
        return ClassDecl(
            id=Identifier(_text(node.child_by_field_name("name"))),
            body=self._object(body_node) if body_node is not None else ObjectType(),
            type_params=self._type_params(node),
            extends=tuple(extends),
            implements=tuple(implements),
        )

    def _heritage_type(self, node: tree_sitter.Node) -> GenericType | UnsupportedType:
        t = self._type(node)
        if isinstance(t, GenericType):
            return t
        return UnsupportedType(kind="non-reference heritage target", text=_text(node))

    def _heritage_value(self, node: tree_sitter.Node) -> GenericType | UnsupportedType:
        # `extends M.Base<T>` parses as an expression followed by type arguments.
        if node.type not in ("identifier", "member_expression"):
            return UnsupportedType(kind="non-reference heritage target", text=_text(node))
        args: tuple[Type, ...] = ()
        sibling = node.next_named_sibling
        if sibling is not None and sibling.type == "type_arguments":
            args = tuple(self._type(t) for t in _named(sibling))
        return GenericType(path=_path(_text(node)), type_args=args)

    # --- Types ---

    def _annotation(self, node: tree_sitter.Node) -> Type | None:
        annotation = node.child_by_field_name("type")
        if annotation is None:
            return None
        if annotation.type == "type_annotation":
            inner = _named(annotation)
            return self._type(inner[0]) if inner else None
        return self._type(annotation)

    def _type_params(self, node: tree_sitter.Node) -> tuple[TypeParam, ...]:
        params_node = node.child_by_field_name("type_parameters")
        if params_node is None:
            return ()
        params = []
        for p in _named(params_node):
            name = p.child_by_field_name("name")
            constraint = p.child_by_field_name("constraint")
            bound = None
            if constraint is not None:
                inner = _named(constraint)
                bound = self._type(inner[0]) if inner else None
            params.append(TypeParam(Identifier(_text(name), bound)))
        return tuple(params)

    def _type(self, node: tree_sitter.Node) -> Type:
        kind = node.type
        if kind == "predefined_type":
            primitive = _PRIMITIVES.get(_text(node))
            if primitive is None:
                return UnsupportedType(kind="predefined type", text=_text(node))
            return PrimitiveType(primitive)
        if kind in ("type_identifier", "nested_type_identifier", "identifier", "member_expression"):
            return GenericType(path=_path(_text(node)))
        if kind == "generic_type":
            name = node.child_by_field_name("name")
            args = node.child_by_field_name("type_arguments")
            type_args = tuple(self._type(t) for t in _named(args)) if args is not None else ()
            return GenericType(path=_path(_text(name)), type_args=type_args)
        if kind == "array_type":
            return ArrayType(element=self._type(_named(node)[0]))
        if kind == "parenthesized_type":
            return self._type(_named(node)[0])
        if kind in ("object_type", "interface_body", "class_body"):
            return self._object(node)
        if kind == "function_type":
            return self._function(node, node.child_by_field_name("return_type"))
        return UnsupportedType(kind=kind.replace("_", " "), text=_text(node))

    def _function(self, node: tree_sitter.Node, return_node: tree_sitter.Node | None) -> FunctionType:
        params: list[Param] = []
        rest = None
        params_node = node.child_by_field_name("parameters")
        for p in _named(params_node) if params_node is not None else []:
            pattern = p.child_by_field_name("pattern")
            param_type = self._annotation(p) or PrimitiveType(Primitive.ANY)
            if pattern is not None and pattern.type == "rest_pattern":
                rest = Param(Identifier(_text(pattern).lstrip(".")), param_type)
                continue
            name = _text(pattern) if pattern is not None else _text(p)
            params.append(Param(Identifier(name), param_type, optional=p.type == "optional_parameter"))

        return_type: Type = PrimitiveType(Primitive.VOID)
        if return_node is not None:
            if return_node.type == "type_annotation":
                inner = _named(return_node)
                return_type = self._type(inner[0]) if inner else return_type
            else:
                return_type = self._type(return_node)
        return FunctionType(
            params=tuple(params),
            return_type=return_type,
            rest=rest,
            type_params=self._type_params(node),
        )

    def _object(self, node: tree_sitter.Node) -> ObjectType:
        properties: list[Property] = []
        indexers: list[Indexer] = []
        unsupported: list[UnsupportedMember] = []
        for member in _named(node):
            if member.type not in _MEMBER_TYPES:
                unsupported.append(_unsupported_member(member))
                continue
            if member.type == "index_signature":
                name = member.child_by_field_name("name")
                key = member.child_by_field_name("index_type")
                if name is None or key is None:
                    unsupported.append(_unsupported_member(member, "mapped index signature"))
                    continue
                indexers.append(Indexer(
                    id=Identifier(_text(name)),
                    key=self._type(key),
                    value=self._annotation(member) or PrimitiveType(Primitive.ANY),
                ))
                continue

            name_node = member.child_by_field_name("name")
            if name_node is None:
                unsupported.append(_unsupported_member(member))
                continue
            if name_node.type in ("property_identifier", "identifier"):
                key: Identifier | LiteralKey = Identifier(_text(name_node))
            else:
                key = LiteralKey(_text(name_node))
            optional = _has_token(member, "?")

            if member.type in ("method_signature", "abstract_method_signature", "method_definition"):
                value: Type = self._function(member, member.child_by_field_name("return_type"))
            else:
                value = self._annotation(member) or PrimitiveType(Primitive.ANY)
            properties.append(Property(key=key, value=value, optional=optional))
        return ObjectType(
            properties=tuple(properties),
            indexers=tuple(indexers),
            unsupported=tuple(unsupported),
        )
