"""DeclarationWalker: classifies the exports and imports of one module.

Walks the top-level statements of a tree-sitter syntax tree in source order
and produces ExportRecords plus unresolved RawDependencies.

Usage:
    walker = DeclarationWalker(resolve=resolver.resolve)
    result = walker.walk(tree, ModuleId("./src/app.ts"))
    result.exports, result.dependencies

Shapes the walker does not recognize become ``Unknown`` records carrying the
tree-sitter node type. They are logged at DEBUG and never raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from ..logging_config import get_logger
from .models import DeclarationKind, ExportRecord, RawDependency

logger = get_logger(__name__)

Resolve = Callable[[str, str], str]

FUNCTION_TYPES = (
    "function_declaration",
    "generator_function_declaration",
    "function_signature",
    "function_expression",
    "function",
    "generator_function",
)
CLASS_TYPES = ("class_declaration", "abstract_class_declaration", "class")
VARIABLE_TYPES = ("lexical_declaration", "variable_declaration")
TS_KINDS = {
    "interface_declaration": DeclarationKind.TS_INTERFACE,
    "type_alias_declaration": DeclarationKind.TS_TYPE_ALIAS,
    "enum_declaration": DeclarationKind.TS_ENUM,
}
DECLARATION_TYPES = FUNCTION_TYPES + CLASS_TYPES + VARIABLE_TYPES + tuple(TS_KINDS)


# ── Node helpers ───────────────────────────────────────────────────


def node_text(node: Any) -> str:
    if node is None or not node.text:
        return ""
    return str(node.text.decode("utf-8", errors="replace"))


def string_value(node: Any) -> str:
    """Text of a string literal without its quotes."""
    text = node_text(node)
    if len(text) >= 2 and text[0] in "'\"`" and text[-1] == text[0]:
        return text[1:-1]
    return text


def named_children(node: Any) -> list[Any]:
    """Named children, skipping comments."""
    return [c for c in node.named_children if c.type != "comment"]


def first_child_of_type(node: Any, types: tuple[str, ...]) -> Any | None:
    for child in node.children:
        if child.type in types:
            return child
    return None


def has_token(node: Any, token: str) -> bool:
    """True if node has an anonymous child token such as ``default`` or ``static``."""
    return any(not c.is_named and c.type == token for c in node.children)


def unwrap_parens(node: Any) -> Any:
    while node is not None and node.type == "parenthesized_expression":
        inner = named_children(node)
        if not inner:
            break
        node = inner[0]
    return node


def bound_names(pattern: Any) -> list[str]:
    """Every identifier a binding pattern introduces, in source order."""
    if pattern is None:
        return []
    kind = pattern.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [node_text(pattern)]
    if kind == "pair_pattern":
        return bound_names(pattern.child_by_field_name("value"))
    if kind in ("object_assignment_pattern", "assignment_pattern"):
        return bound_names(pattern.child_by_field_name("left"))
    if kind in ("object_pattern", "array_pattern", "rest_pattern"):
        names: list[str] = []
        for child in named_children(pattern):
            names.extend(bound_names(child))
        return names
    return []


# ── Parameter signatures ───────────────────────────────────────────


def _property_name(node: Any) -> str:
    kind = node.type
    if kind == "shorthand_property_identifier_pattern":
        return node_text(node)
    if kind == "pair_pattern":
        key = node.child_by_field_name("key")
        return string_value(key) if key is not None and key.type == "string" else node_text(key)
    if kind == "object_assignment_pattern":
        return node_text(node.child_by_field_name("left"))
    if kind == "rest_pattern":
        inner = named_children(node)
        return "..." + (node_text(inner[0]) if inner else "")
    return node_text(node)


def render_parameter(param: Any) -> str:
    """Render one formal parameter.

    identifier -> its name; default-valued -> its left identifier; object
    pattern -> ``{a, b}``; any other shape -> ``" : <node_type>"``.
    """
    outer = param
    default_value = None
    if param.type in ("required_parameter", "optional_parameter"):
        default_value = param.child_by_field_name("value")
        param = param.child_by_field_name("pattern") or param
    elif param.type == "assignment_pattern":
        default_value = param.child_by_field_name("right")
        param = param.child_by_field_name("left") or param

    if param.type == "identifier":
        return node_text(param)
    if default_value is not None:
        # Default-valued parameter whose left side is a pattern
        return " : " + outer.type
    if param.type == "object_pattern":
        props = [_property_name(p) for p in named_children(param)]
        return "{" + ", ".join(props) + "}"
    return " : " + param.type


def render_parameters(params: Any) -> str:
    """Parenthesized, comma-joined signature of a parameter list node."""
    if params is None:
        return "()"
    if params.type != "formal_parameters":
        # Arrow function with a single bare parameter: x => ...
        return "(" + render_parameter(params) + ")"
    return "(" + ", ".join(render_parameter(p) for p in named_children(params)) + ")"


def signature_of(node: Any) -> str:
    params = node.child_by_field_name("parameters")
    if params is None:
        params = node.child_by_field_name("parameter")
    return render_parameters(params)


# ── Walker ─────────────────────────────────────────────────────────


@dataclass
class WalkResult:
    """Exports and unresolved imports found in one module."""

    exports: list[ExportRecord] = field(default_factory=list)
    dependencies: list[RawDependency] = field(default_factory=list)


class DeclarationWalker:
    """Classifies export and import statements of a module.

    Args:
        resolve: Callable ``(raw_specifier, source_module_id) -> module id``
            used to fill ``source_module`` on re-exports. Without it the raw
            specifier is recorded.
    """

    def __init__(self, resolve: Optional[Resolve] = None) -> None:
        self._resolve = resolve

    def walk(self, tree: Any, module_id: str) -> WalkResult:
        """Walk a tree (or its root node) for module_id."""
        root = getattr(tree, "root_node", tree)
        result = WalkResult()
        for statement in named_children(root):
            if statement.type == "import_statement":
                self._visit_import(statement, module_id, result)
            elif statement.type == "export_statement":
                self._visit_export(statement, module_id, result)
        return result

    # ── Imports ────────────────────────────────────────────────────

    def _visit_import(self, node: Any, module_id: str, result: WalkResult) -> None:
        source = node.child_by_field_name("source")
        if source is None:
            # import x = require("y")
            logger.debug(f"{module_id}: skipping import without source")
            return
        specifier = string_value(source)

        clause = first_child_of_type(node, ("import_clause",))
        if clause is None:
            logger.debug(f"{module_id}: side-effect import {specifier!r} not tracked")
            return

        for child in named_children(clause):
            if child.type == "identifier":
                result.dependencies.append(RawDependency(module_id, specifier, node_text(child)))
            elif child.type == "named_imports":
                for spec in named_children(child):
                    if spec.type != "import_specifier":
                        continue
                    name = spec.child_by_field_name("name")
                    imported = string_value(name) if name.type == "string" else node_text(name)
                    result.dependencies.append(RawDependency(module_id, specifier, imported))
            elif child.type == "namespace_import":
                logger.debug(f"{module_id}: namespace import of {specifier!r} not tracked")

    # ── Exports ────────────────────────────────────────────────────

    def _visit_export(self, node: Any, module_id: str, result: WalkResult) -> None:
        source = node.child_by_field_name("source")
        if source is not None:
            self._visit_reexport(node, string_value(source), module_id, result)
            return

        is_default = has_token(node, "default")
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            self._visit_declaration(declaration, module_id, result, is_default)
            return

        value = node.child_by_field_name("value")
        if value is not None:
            self._visit_default_value(value, module_id, result)
            return

        clause = first_child_of_type(node, ("export_clause",))
        if clause is not None:
            for spec in named_children(clause):
                if spec.type != "export_specifier":
                    continue
                name, alias = self._specifier_names(spec)
                result.exports.append(
                    ExportRecord(module_id, alias or name, DeclarationKind.IDENTIFIER)
                )
            return

        # export = x, export as namespace X, ...
        inner = named_children(node)
        self._unknown(inner[0] if inner else node, module_id, result, is_default)

    def _visit_reexport(
        self, node: Any, specifier: str, module_id: str, result: WalkResult
    ) -> None:
        clause = first_child_of_type(node, ("export_clause",))
        if clause is None:
            # export * from "x" / export * as ns from "x"
            logger.debug(f"{module_id}: export-all from {specifier!r} not tracked")
            return

        origin = self._resolve(specifier, module_id) if self._resolve else specifier
        for spec in named_children(clause):
            if spec.type != "export_specifier":
                continue
            name, alias = self._specifier_names(spec)
            result.exports.append(
                ExportRecord(
                    module_id,
                    alias or name,
                    DeclarationKind.RE_EXPORT,
                    source_module=origin,
                )
            )
            result.dependencies.append(RawDependency(module_id, specifier, name))

    @staticmethod
    def _specifier_names(spec: Any) -> tuple[str, Optional[str]]:
        def text(n: Any) -> Optional[str]:
            if n is None:
                return None
            return string_value(n) if n.type == "string" else node_text(n)

        return text(spec.child_by_field_name("name")) or "", text(
            spec.child_by_field_name("alias")
        )

    def _visit_declaration(
        self, node: Any, module_id: str, result: WalkResult, is_default: bool = False
    ) -> None:
        kind = node.type

        if kind == "ambient_declaration":
            # export declare function f(): void;
            for child in named_children(node):
                if child.type in DECLARATION_TYPES:
                    self._visit_declaration(child, module_id, result, is_default)
                    return
            self._unknown(node, module_id, result, is_default)
            return

        if kind in FUNCTION_TYPES:
            result.exports.append(
                ExportRecord(
                    module_id,
                    self._declared_name(node, is_default),
                    DeclarationKind.FUNCTION,
                    parameter_signature=signature_of(node),
                )
            )
        elif kind in CLASS_TYPES:
            result.exports.append(
                ExportRecord(module_id, self._declared_name(node, is_default), DeclarationKind.CLASS)
            )
        elif kind in VARIABLE_TYPES:
            for declarator in named_children(node):
                if declarator.type != "variable_declarator":
                    continue
                for name in bound_names(declarator.child_by_field_name("name")):
                    result.exports.append(ExportRecord(module_id, name, DeclarationKind.VARIABLE))
        elif kind in TS_KINDS:
            result.exports.append(
                ExportRecord(module_id, self._declared_name(node, is_default), TS_KINDS[kind])
            )
        else:
            self._unknown(node, module_id, result, is_default)

    def _visit_default_value(self, value: Any, module_id: str, result: WalkResult) -> None:
        node = unwrap_parens(value)
        kind = node.type

        if kind == "identifier":
            result.exports.append(
                ExportRecord(module_id, node_text(node), DeclarationKind.IDENTIFIER)
            )
        elif kind == "object":
            self._visit_object(node, module_id, result)
        elif kind == "arrow_function":
            result.exports.append(
                ExportRecord(
                    module_id,
                    "default",
                    DeclarationKind.ARROW_FUNCTION,
                    parameter_signature=signature_of(node),
                )
            )
        elif kind == "ternary_expression":
            condition = unwrap_parens(node.child_by_field_name("condition"))
            if condition is not None and condition.type == "identifier":
                name = node_text(condition)
            else:
                name = "default"
            result.exports.append(ExportRecord(module_id, name, DeclarationKind.CONDITIONAL))
        elif kind == "call_expression":
            callee = node.child_by_field_name("function")
            while callee is not None and callee.type == "call_expression":
                callee = callee.child_by_field_name("function")
            name = node_text(callee) if callee is not None else "default"
            result.exports.append(ExportRecord(module_id, name, DeclarationKind.CALL))
        elif kind in FUNCTION_TYPES or kind in CLASS_TYPES:
            self._visit_declaration(node, module_id, result, is_default=True)
        else:
            self._unknown(node, module_id, result, is_default=True)

    def _visit_object(self, node: Any, module_id: str, result: WalkResult) -> None:
        for member in named_children(node):
            if member.type == "pair":
                key = member.child_by_field_name("key")
                name = string_value(key) if key.type == "string" else node_text(key)
            elif member.type == "shorthand_property_identifier":
                name = node_text(member)
            elif member.type == "method_definition":
                name = node_text(member.child_by_field_name("name"))
            else:
                logger.debug(f"[MA200] {module_id}: object member {member.type} not exported")
                continue
            result.exports.append(ExportRecord(module_id, name, DeclarationKind.OBJECT_PROPERTY))

    @staticmethod
    def _declared_name(node: Any, is_default: bool) -> str:
        name = node.child_by_field_name("name")
        if name is not None:
            return node_text(name)
        return "default" if is_default else f"Unknown-{node.type}"

    def _unknown(self, node: Any, module_id: str, result: WalkResult, is_default: bool) -> None:
        name = self._declared_name(node, is_default)
        logger.debug(f"[MA200] {module_id}: unrecognized export shape {node.type}")
        result.exports.append(
            ExportRecord(module_id, name, DeclarationKind.UNKNOWN, node_type=node.type)
        )
