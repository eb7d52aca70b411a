"""Class detail extraction: methods, properties and superclass of each class."""

from __future__ import annotations

from typing import Any, Iterator, Optional

from ..logging_config import get_logger
from .models import ClassRecord, MethodInfo, PropertyInfo
from .walker import has_token, named_children, node_text, render_parameters, string_value

logger = get_logger(__name__)

CLASS_DECLARATIONS = ("class_declaration", "abstract_class_declaration")
FIELD_TYPES = ("field_definition", "public_field_definition")

# TypeScript annotations reported by name; everything else is "unknown"
_PREDEFINED = {"string", "number", "boolean", "any", "void", "null", "undefined"}
_STRUCTURAL = {"object_type": "object", "array_type": "array"}


def _iter_classes(node: Any) -> Iterator[Any]:
    if node.type in CLASS_DECLARATIONS or node.type == "class":
        yield node
    for child in node.named_children:
        yield from _iter_classes(child)


def _is_exported(node: Any) -> bool:
    parent = node.parent
    return parent is not None and parent.type == "export_statement"


def super_class_name(class_node: Any) -> Optional[str]:
    """Name of the extended class: ``Bar`` or a dotted ``ns.Bar``."""
    for child in class_node.named_children:
        if child.type != "class_heritage":
            continue
        for heritage in named_children(child):
            # TypeScript wraps the expression in extends_clause
            if heritage.type == "extends_clause":
                heritage = heritage.child_by_field_name("value")
            if heritage is not None and heritage.type in ("identifier", "member_expression"):
                return node_text(heritage)
            return None
    return None


def _member_name(node: Any) -> str:
    if node is None:
        return "unknown"
    if node.type in ("string", "template_string"):
        return string_value(node)
    return node_text(node)


def _is_private(member: Any, name_node: Any) -> bool:
    if name_node is not None and name_node.type == "private_property_identifier":
        return True
    for child in member.children:
        if child.type == "accessibility_modifier" and node_text(child) == "private":
            return True
    return False


def annotation_type(annotation: Any) -> Optional[str]:
    """Simplified name of a TypeScript type annotation."""
    if annotation is None:
        return None
    inner = named_children(annotation)
    if not inner:
        return "unknown"
    type_node = inner[0]
    if type_node.type in ("predefined_type", "literal_type"):
        text = node_text(type_node)
        return text if text in _PREDEFINED else "unknown"
    return _STRUCTURAL.get(type_node.type, "unknown")


def method_info(member: Any) -> MethodInfo:
    name_node = member.child_by_field_name("name")
    name = _member_name(name_node)
    if name == "constructor":
        kind = "constructor"
    elif has_token(member, "get"):
        kind = "get"
    elif has_token(member, "set"):
        kind = "set"
    else:
        kind = "method"
    return MethodInfo(
        name=name,
        kind=kind,
        is_static=has_token(member, "static"),
        is_private=_is_private(member, name_node),
        parameters=render_parameters(member.child_by_field_name("parameters")),
    )


def property_info(member: Any) -> PropertyInfo:
    # JS grammar names the field "property", TypeScript names it "name"
    name_node = member.child_by_field_name("property") or member.child_by_field_name("name")
    return PropertyInfo(
        name=_member_name(name_node),
        is_static=has_token(member, "static"),
        is_private=_is_private(member, name_node),
        type=annotation_type(member.child_by_field_name("type")),
        has_default_value=member.child_by_field_name("value") is not None,
    )


def extract_classes(tree: Any, module_id: str) -> list[ClassRecord]:
    """ClassRecords for every named or exported class in the module, in source order.

    Unnamed class expressions that are not exported are skipped.
    """
    root = getattr(tree, "root_node", tree)
    records: list[ClassRecord] = []

    for node in _iter_classes(root):
        exported = _is_exported(node)
        name_node = node.child_by_field_name("name")
        if name_node is None and not exported:
            continue

        record = ClassRecord(
            name=node_text(name_node) if name_node is not None else "AnonymousClass",
            module_id=module_id,
            super_class_name=super_class_name(node),
            is_exported=exported,
        )

        body = node.child_by_field_name("body")
        for member in named_children(body) if body is not None else []:
            if member.type == "method_definition":
                record.methods.append(method_info(member))
            elif member.type in FIELD_TYPES:
                record.properties.append(property_info(member))

        records.append(record)

    logger.debug(f"{module_id}: {len(records)} classes")
    return records
