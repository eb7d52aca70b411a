"""Extension-variant reconciliation for resolved dependencies.

``import a from "./util"`` and ``import b from "./util.js"`` name the same file.
When both spellings occur in a run and resolve to that same file, every record
written with either spelling is rewritten to the extension-less one; duplicates
are then dropped.

Spellings are compared after joining them against the importing module's
directory, so ``./util`` in ``./a.js`` and ``./util.js`` in ``./lib/b.js`` are
different spellings. A directory import (``./lib`` resolving to
``./lib/index.js``) never collapses with ``./lib/index.js``.
"""

from __future__ import annotations

import os
from collections import defaultdict
from dataclasses import replace
from typing import Iterable

from ..config import DEFAULT_EXTENSIONS
from ..logging_config import get_logger
from .models import DependencyRecord, ModuleId
from .resolver import as_module_id, module_dir_segments, normalize_segments

logger = get_logger(__name__)


def strip_extension(path: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> str:
    """Remove a recognized extension from the last path segment.

    Unrecognized suffixes (``./styles.css``, ``./jquery.min``) are kept.
    """
    head, sep, name = path.rpartition("/")
    stem, ext = os.path.splitext(name)
    if stem and ext.lower() in {e.lower() for e in extensions}:
        return f"{head}{sep}{stem}"
    return path


def written_path(record: DependencyRecord) -> str:
    """The raw specifier joined against the importing module's directory."""
    segments = normalize_segments(
        module_dir_segments(record.source_module_id), record.raw_specifier
    )
    return as_module_id(segments)


def collapsed_targets(
    records: Iterable[DependencyRecord],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> dict[str, str]:
    """Extension-less id -> file id, for every file reached through both spellings.

    A file qualifies when one record spells it with an extension and another
    record resolving to the same file spells it without.
    """
    extensions = tuple(extensions)
    spellings: dict[str, set[str]] = defaultdict(set)
    for record in records:
        if not record.is_external:
            spellings[record.resolved_module_id].add(written_path(record))

    collapsed: dict[str, str] = {}
    for resolved, written in spellings.items():
        for path in written:
            bare = strip_extension(path, extensions)
            if bare != path and bare in written:
                collapsed[bare] = resolved
                break
    return collapsed


def normalize_dependencies(
    records: Iterable[DependencyRecord],
    extensions: Iterable[str] = DEFAULT_EXTENSIONS,
) -> list[DependencyRecord]:
    """Collapse extension variants and deduplicate.

    Dedup key is ``(source_module_id, resolved file, imported_name)``; the
    first occurrence wins and input order is otherwise preserved. External
    records are never rewritten. Normalizing a normalized list returns it
    unchanged.
    """
    extensions = tuple(extensions)
    records = list(records)
    collapsed = collapsed_targets(records, extensions)

    result: list[DependencyRecord] = []
    seen: set[tuple[str, str, str]] = set()
    rewritten = 0
    for record in records:
        target = record.resolved_module_id
        if collapsed and not record.is_external:
            bare = strip_extension(written_path(record), extensions)
            if collapsed.get(bare) == target:
                record = replace(
                    record,
                    raw_specifier=strip_extension(record.raw_specifier, extensions),
                    resolved_module_id=ModuleId(bare),
                )
                rewritten += 1

        dedup_key = (record.source_module_id, target, record.imported_name)
        if dedup_key in seen:
            continue
        seen.add(dedup_key)
        result.append(record)

    if rewritten or len(result) != len(records):
        logger.debug(
            f"Normalized dependencies: {rewritten} rewritten, "
            f"{len(records) - len(result)} duplicates dropped"
        )
    return result
