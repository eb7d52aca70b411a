"""Import specifier resolution to canonical module ids.

Given ``import x from "../lib/util"`` in ``./server/api/a.js`` the resolver
produces ``./server/lib/util.ts`` (or whichever extension exists on disk).
Resolution is pure for the lifetime of a run: the filesystem is only read
through a DirectoryListingCache that is populated once per directory.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Iterable

from ..config import DEFAULT_EXTENSIONS
from ..logging_config import get_logger
from .models import ModuleId, is_external_specifier

logger = get_logger(__name__)


class DirectoryListingCache:
    """One ``os.scandir`` listing per directory, shared across threads."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._listings: dict[str, frozenset[str]] = {}
        self._lock = threading.Lock()
        self.scans = 0

    def _listing(self, rel_dir: str) -> frozenset[str]:
        with self._lock:
            cached = self._listings.get(rel_dir)
        if cached is not None:
            return cached

        files: set[str] = set()
        try:
            with os.scandir(self.root / rel_dir if rel_dir else self.root) as entries:
                for entry in entries:
                    try:
                        if entry.is_file():
                            files.add(entry.name)
                    except OSError:
                        continue
        except (FileNotFoundError, NotADirectoryError, PermissionError):
            pass

        listing = frozenset(files)
        with self._lock:
            # Another thread may have won the race; keep the first listing
            listing = self._listings.setdefault(rel_dir, listing)
            self.scans += 1
        return listing

    def is_file(self, rel_path: str) -> bool:
        """True if the project-relative posix path names an existing file."""
        rel_dir, _, name = rel_path.rpartition("/")
        return name in self._listing(rel_dir)


def normalize_segments(base_dir: list[str], specifier: str) -> list[str]:
    """Join a relative specifier onto a directory as a segment stack.

    ``..`` pops a segment; popping past the root stays at the root.
    """
    stack = list(base_dir)
    for segment in specifier.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if stack:
                stack.pop()
            continue
        stack.append(segment)
    return stack


def module_dir_segments(module_id: str) -> list[str]:
    """Directory segments of a module id (``./a/b/c.js`` -> ``["a", "b"]``)."""
    parts = [p for p in module_id.split("/") if p not in ("", ".")]
    return parts[:-1]


def as_module_id(segments: list[str]) -> ModuleId:
    return ModuleId("./" + "/".join(segments)) if segments else ModuleId(".")


class ModuleResolver:
    """Turns raw import specifiers into canonical project-relative ids.

    Args:
        project_root: Directory module ids are relative to
        extensions: Ordered extensions probed for extension-less specifiers
        listing_cache: Shared cache; one is created when omitted
    """

    def __init__(
        self,
        project_root: Path,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        listing_cache: DirectoryListingCache | None = None,
    ) -> None:
        self.project_root = Path(project_root)
        self.extensions = tuple(extensions)
        self._ext_lower = {ext.lower() for ext in self.extensions}
        self.cache = listing_cache or DirectoryListingCache(self.project_root)

    def has_known_extension(self, path: str) -> bool:
        name = path.rsplit("/", 1)[-1]
        return os.path.splitext(name)[1].lower() in self._ext_lower

    def resolve(self, raw_specifier: str, source_module_id: str) -> str:
        """Resolve a specifier written in source_module_id.

        Returns:
            The raw specifier for node modules; otherwise a ModuleId naming the
            file on disk, or the normalized path when nothing matched.
        """
        if isinstance(raw_specifier, ModuleId):
            return raw_specifier
        if is_external_specifier(raw_specifier):
            return raw_specifier

        segments = normalize_segments(module_dir_segments(source_module_id), raw_specifier)
        rel = "/".join(segments)

        if rel and self.has_known_extension(rel):
            return as_module_id(segments)

        if rel:
            for ext in self.extensions:
                if self.cache.is_file(rel + ext):
                    return ModuleId(f"./{rel}{ext}")

        for ext in self.extensions:
            candidate = f"{rel}/index{ext}" if rel else f"index{ext}"
            if self.cache.is_file(candidate):
                return ModuleId(f"./{candidate}")

        unresolved = as_module_id(segments)
        logger.debug(f"[MA300] {raw_specifier!r} from {source_module_id} matched no file")
        return unresolved
