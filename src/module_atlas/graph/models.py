"""Data models for module relationship analysis.

Layers:
  Modules: one ModuleDescriptor per enumerated source file
  Declarations: ExportRecord / ClassRecord, extracted by the walker
  Relationships: RawDependency (walker) -> DependencyRecord (resolver, normalizer)
  Run: AnalysisResult, the accumulator returned by one analysis pass
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..exceptions import ErrorCode


class ModuleId(str):
    """Canonical, project-root-relative module id such as ``./server/api/x.js``.

    Resolving a ModuleId again returns it unchanged.
    """

    __slots__ = ()


def module_id_for(directory: str, file: str) -> ModuleId:
    """Build the canonical id for a file inside a project-relative directory."""
    parts = [p for p in directory.replace("\\", "/").split("/") if p not in ("", ".")]
    return ModuleId("./" + "/".join(parts + [file]))


# ── Modules ────────────────────────────────────────────────────────


@dataclass
class ModuleDescriptor:
    """One source file, identified by project-relative directory and filename.

    The counters are filled in by the aggregator once per run.
    """

    directory: str
    file: str
    depends_on_count: int = 0
    used_by_count: int = 0
    export_count: int = 0

    @property
    def module_id(self) -> ModuleId:
        return module_id_for(self.directory, self.file)

    def to_dict(self) -> dict[str, Any]:
        return {
            "dir": self.directory,
            "file": self.file,
            "dependsOnCnt": self.depends_on_count,
            "usedByCnt": self.used_by_count,
            "exportCnt": self.export_count,
        }


# ── Declarations ───────────────────────────────────────────────────


class DeclarationKind(Enum):
    """Closed set of export shapes the walker recognizes."""

    FUNCTION = "Function"
    CLASS = "Class"
    VARIABLE = "Variable"
    IDENTIFIER = "Identifier"
    OBJECT_PROPERTY = "ObjectProperty"
    ARROW_FUNCTION = "ArrowFunction"
    CONDITIONAL = "Conditional"
    CALL = "Call"
    TS_INTERFACE = "TSInterface"
    TS_TYPE_ALIAS = "TSTypeAlias"
    TS_ENUM = "TSEnum"
    RE_EXPORT = "ReExport"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ExportRecord:
    """A single name exported by a module."""

    module_id: str
    exported_name: str
    kind: DeclarationKind
    parameter_signature: Optional[str] = None
    # Resolved origin module, only for re-exports
    source_module: Optional[str] = None
    # tree-sitter node type, only for Unknown shapes
    node_type: Optional[str] = None

    @property
    def kind_tag(self) -> str:
        if self.kind is DeclarationKind.UNKNOWN and self.node_type:
            return f"Unknown-{self.node_type}"
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "module": self.module_id,
            "exported": self.exported_name,
            "kind": self.kind_tag,
        }
        if self.parameter_signature is not None:
            data["params"] = self.parameter_signature
        if self.source_module is not None:
            data["source"] = self.source_module
        return data


@dataclass
class MethodInfo:
    name: str
    kind: str = "method"  # constructor / method / get / set
    is_static: bool = False
    is_private: bool = False
    parameters: str = "()"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind,
            "isStatic": self.is_static,
            "isPrivate": self.is_private,
            "parameters": self.parameters,
        }


@dataclass
class PropertyInfo:
    name: str
    is_static: bool = False
    is_private: bool = False
    type: Optional[str] = None
    has_default_value: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "isStatic": self.is_static,
            "isPrivate": self.is_private,
            "hasDefaultValue": self.has_default_value,
        }
        if self.type is not None:
            data["type"] = self.type
        return data


@dataclass
class ClassRecord:
    """Member-level detail for a class declared in a module."""

    name: str
    module_id: str
    methods: list[MethodInfo] = field(default_factory=list)
    properties: list[PropertyInfo] = field(default_factory=list)
    super_class_name: Optional[str] = None
    is_exported: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "module": self.module_id,
            "methods": [m.to_dict() for m in self.methods],
            "properties": [p.to_dict() for p in self.properties],
            "isExported": self.is_exported,
        }
        if self.super_class_name is not None:
            data["superClass"] = self.super_class_name
        return data


# ── Relationships ──────────────────────────────────────────────────


def is_external_specifier(specifier: str) -> bool:
    """Bare specifiers (``react``, ``@scope/pkg``) name node modules."""
    return not specifier.startswith(".")


@dataclass(frozen=True)
class RawDependency:
    """An import as written, before resolution."""

    source_module_id: str
    raw_specifier: str
    imported_name: str


@dataclass(frozen=True)
class DependencyRecord:
    """An import edge with its canonical target.

    External records keep ``resolved_module_id == raw_specifier``.
    """

    source_module_id: str
    raw_specifier: str
    resolved_module_id: str
    imported_name: str

    @property
    def is_external(self) -> bool:
        return is_external_specifier(self.raw_specifier)

    def to_dict(self) -> dict[str, Any]:
        return {
            "src": self.source_module_id,
            "importSrc": self.raw_specifier,
            "resolvedSrc": self.resolved_module_id,
            "import": self.imported_name,
        }


# ── Errors ─────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ErrorRecord:
    """A per-file failure collected instead of aborting the run."""

    file: str
    message: str
    code: ErrorCode = ErrorCode.MA900

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "message": self.message, "code": self.code.value}


# ── Run ────────────────────────────────────────────────────────────


@dataclass
class AnalysisResult:
    """Everything one analysis run produced.

    The query methods are derived from the lists on every call.
    """

    modules: list[ModuleDescriptor] = field(default_factory=list)
    dependencies: list[DependencyRecord] = field(default_factory=list)
    exports: list[ExportRecord] = field(default_factory=list)
    classes: list[ClassRecord] = field(default_factory=list)
    errors: list[ErrorRecord] = field(default_factory=list)
    cancelled: bool = False
    # Extension-less id -> file id for targets the normalizer collapsed
    collapsed: dict[str, str] = field(default_factory=dict)

    def module(self, module_id: str) -> Optional[ModuleDescriptor]:
        for descriptor in self.modules:
            if descriptor.module_id == module_id:
                return descriptor
        return None

    def used_by(self, module_id: str) -> list[DependencyRecord]:
        from .aggregator import used_by

        return used_by(self.dependencies, module_id, self.collapsed)

    def depends_on(self, module_id: str) -> list[DependencyRecord]:
        return [d for d in self.dependencies if d.source_module_id == module_id]

    def exported_by(self, module_id: str) -> list[ExportRecord]:
        return [e for e in self.exports if e.module_id == module_id]

    def node_modules(self) -> list[str]:
        """Distinct external specifiers, sorted."""
        return sorted({d.raw_specifier for d in self.dependencies if d.is_external})

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        return {
            "ModuleArray": [m.to_dict() for m in self.modules],
            "DependencyList": [d.to_dict() for d in self.dependencies],
            "ExportList": [e.to_dict() for e in self.exports],
            "ClassList": [c.to_dict() for c in self.classes],
            "Errors": [e.to_dict() for e in self.errors],
        }
