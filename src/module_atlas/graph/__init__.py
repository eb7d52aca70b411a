"""Module graph extraction: declarations, resolution, normalization, metrics."""

from .models import (
    AnalysisResult,
    ClassRecord,
    DeclarationKind,
    DependencyRecord,
    ErrorRecord,
    ExportRecord,
    ModuleDescriptor,
    ModuleId,
    RawDependency,
)
from .builder import ModuleAnalyzer, analyze_modules

__all__ = [
    "AnalysisResult",
    "ClassRecord",
    "DeclarationKind",
    "DependencyRecord",
    "ErrorRecord",
    "ExportRecord",
    "ModuleDescriptor",
    "ModuleId",
    "RawDependency",
    "ModuleAnalyzer",
    "analyze_modules",
]
