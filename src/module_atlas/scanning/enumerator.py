"""Module enumeration: find the source files an analysis run covers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from ..exceptions import InvalidPathError
from ..graph.models import ModuleDescriptor
from ..logging_config import get_logger

logger = get_logger(__name__)


def project_root_for(path: Path) -> Path:
    """Directory that module ids are relative to (a file's parent for a file)."""
    return path.parent if path.is_file() else path


def _relative_dir(root: Path, dirpath: str) -> str:
    rel = Path(dirpath).relative_to(root).as_posix()
    return "." if rel in ("", ".") else f"./{rel}"


def enumerate_modules(
    root: Path,
    extensions: Iterable[str],
    ignored_dirs: Iterable[str] = (),
    allow_hidden_files: bool = False,
    follow_symlinks: bool = False,
    max_file_size_bytes: int | None = None,
) -> list[ModuleDescriptor]:
    """
    Enumerate recognized source files under root.

    Args:
        root: Project directory, or a single source file
        extensions: Recognized extensions (matched case-insensitively)
        ignored_dirs: Directory names that are never descended into
        allow_hidden_files: Include dot-files and dot-directories
        follow_symlinks: Follow symbolic links to directories
        max_file_size_bytes: Skip files larger than this

    Returns:
        Descriptors sorted by directory, then file name

    Raises:
        InvalidPathError: If root does not exist
    """
    root = Path(root)
    if not root.exists():
        raise InvalidPathError(root, "path does not exist")

    ext_set = {ext.lower() for ext in extensions}

    if root.is_file():
        if root.suffix.lower() not in ext_set:
            logger.warning(f"Skipped {root}: extension not in {sorted(ext_set)}")
            return []
        return [ModuleDescriptor(directory=".", file=root.name)]

    ignored = set(ignored_dirs)
    modules: list[ModuleDescriptor] = []
    skipped = 0

    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_symlinks):
        # Prune in place so os.walk never enters them; sorted for stable order
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in ignored and (allow_hidden_files or not d.startswith("."))
        )

        directory = _relative_dir(root, dirpath)
        for name in sorted(filenames):
            if not allow_hidden_files and name.startswith("."):
                continue
            if os.path.splitext(name)[1].lower() not in ext_set:
                continue

            if max_file_size_bytes is not None:
                full_path = os.path.join(dirpath, name)
                try:
                    size = os.path.getsize(full_path)
                except OSError as e:
                    logger.warning(f"Cannot stat {full_path}: {e}")
                    skipped += 1
                    continue
                if size > max_file_size_bytes:
                    logger.debug(f"Skipped (size): {full_path} ({size} bytes)")
                    skipped += 1
                    continue

            modules.append(ModuleDescriptor(directory=directory, file=name))

    modules.sort(key=lambda m: m.module_id)
    logger.info(f"Enumerated {len(modules)} modules under {root} ({skipped} skipped)")
    return modules
