"""Language detection for JavaScript and TypeScript sources.

Adding an extension:
  1. Map it to a grammar name in EXTENSION_LANGUAGES below.
  2. Make sure the grammar is registered in treesitter_parser.
"""

from pathlib import Path

EXTENSION_LANGUAGES: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}


def detect_language(file_path: Path | str) -> str:
    """Grammar name for a file, or "unknown" for unrecognized extensions.

    Matching is case-insensitive (``App.JS`` is javascript).
    """
    suffix = Path(file_path).suffix.lower()
    return EXTENSION_LANGUAGES.get(suffix, "unknown")
