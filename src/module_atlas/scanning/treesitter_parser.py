"""Tree-sitter parser wrapper.

Provides one interface over the JavaScript, TypeScript and TSX grammars.
``tree_sitter.Parser`` objects are not safe to share between threads, so each
thread lazily builds its own; the compiled ``Language`` objects are shared.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "typescript")
    root = tree.root_node
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from ..exceptions import ParsingError, UnsupportedLanguageError

logger = logging.getLogger(__name__)

# Grammar name -> function returning the raw language capsule
_GRAMMARS: dict[str, Callable[[], Any]] = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

_languages: dict[str, tree_sitter.Language] = {}
_languages_lock = threading.Lock()


def get_supported_languages() -> list[str]:
    """Get list of languages with bundled grammars."""
    return list(_GRAMMARS.keys())


def _get_language(name: str) -> tree_sitter.Language:
    with _languages_lock:
        lang = _languages.get(name)
        if lang is None:
            # tree-sitter >= 0.23 returns PyCapsule; wrap in Language()
            lang = tree_sitter.Language(_GRAMMARS[name]())
            _languages[name] = lang
        return lang


class TreeSitterParser:
    """Thread-safe wrapper around tree-sitter parsing."""

    def __init__(self) -> None:
        self._local = threading.local()

    def _parser_for(self, language: str) -> tree_sitter.Parser:
        if language not in _GRAMMARS:
            raise UnsupportedLanguageError(language, get_supported_languages())

        parsers: dict[str, tree_sitter.Parser] | None = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = {}
            self._local.parsers = parsers

        parser = parsers.get(language)
        if parser is None:
            parser = tree_sitter.Parser(_get_language(language))
            parsers[language] = parser
        return parser

    def parse(self, code: bytes, language: str) -> tree_sitter.Tree:
        """Parse code and return the syntax tree.

        Args:
            code: Source code as bytes
            language: Grammar name ("javascript", "typescript" or "tsx")

        Raises:
            UnsupportedLanguageError: If no grammar exists for the language
        """
        return self._parser_for(language).parse(code)

    def parse_strict(self, code: bytes, language: str, filepath: Path | str) -> tree_sitter.Tree:
        """Parse and reject trees containing syntax errors.

        tree-sitter always produces a tree; error recovery inserts ERROR and
        MISSING nodes. A module with such nodes is reported instead of walked.

        Raises:
            ParsingError: If the tree contains syntax errors
            UnsupportedLanguageError: If no grammar exists for the language
        """
        tree = self.parse(code, language)
        if tree.root_node.has_error:
            node = first_error_node(tree.root_node)
            if node is not None:
                row, col = node.start_point
                reason = f"syntax error at line {row + 1}, column {col + 1}"
            else:
                reason = "syntax error"
            raise ParsingError(Path(filepath), language, reason)
        return tree

    def is_language_supported(self, language: str) -> bool:
        """Check if a language is supported."""
        return language in _GRAMMARS


def first_error_node(node: tree_sitter.Node) -> tree_sitter.Node | None:
    """Depth-first search for the first ERROR or MISSING node."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = first_error_node(child)
            if found is not None:
                return found
    return None
