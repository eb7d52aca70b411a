"""
module-atlas - Dependency & Export Maps for JavaScript/TypeScript Projects

Static analysis of a source tree: what each module exports, what it imports,
and which file on disk every import resolves to.
"""

__version__ = "0.1.0"

from .api import analyze
from .config import AtlasConfig, load_config
from .graph.models import (
    AnalysisResult,
    ClassRecord,
    DeclarationKind,
    DependencyRecord,
    ErrorRecord,
    ExportRecord,
    ModuleDescriptor,
)

__all__ = [
    "analyze",  # Main entry point
    "AtlasConfig",
    "load_config",
    "AnalysisResult",
    "ClassRecord",
    "DeclarationKind",
    "DependencyRecord",
    "ErrorRecord",
    "ExportRecord",
    "ModuleDescriptor",
]
