"""Source discovery and parsing for JavaScript and TypeScript modules."""

from .enumerator import enumerate_modules, project_root_for
from .languages import detect_language
from .treesitter_parser import TreeSitterParser, get_supported_languages

__all__ = [
    "enumerate_modules",
    "project_root_for",
    "detect_language",
    "TreeSitterParser",
    "get_supported_languages",
]
