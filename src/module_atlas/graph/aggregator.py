"""Per-module metrics and the reverse used-by index."""

from __future__ import annotations

from collections import defaultdict
from typing import Mapping, Optional

from ..logging_config import get_logger
from .models import DependencyRecord, ExportRecord, ModuleDescriptor

logger = get_logger(__name__)


def _target(dep: DependencyRecord, collapsed: Mapping[str, str]) -> str:
    # A collapsed "./b" still points at the file "./b.js"
    return collapsed.get(dep.resolved_module_id, dep.resolved_module_id)


def used_by(
    dependencies: list[DependencyRecord],
    module_id: str,
    collapsed: Optional[Mapping[str, str]] = None,
) -> list[DependencyRecord]:
    """Records whose resolved target is module_id. External records never match.

    ``collapsed`` maps extension-less ids written by the normalizer back to
    their file ids.
    """
    collapsed = collapsed or {}
    return [
        d for d in dependencies if not d.is_external and _target(d, collapsed) == module_id
    ]


def aggregate(
    modules: list[ModuleDescriptor],
    dependencies: list[DependencyRecord],
    exports: list[ExportRecord],
    collapsed: Optional[Mapping[str, str]] = None,
) -> None:
    """Fill depends_on_count, used_by_count and export_count on each descriptor.

    Counters are overwritten, so aggregating twice gives the same numbers.
    """
    collapsed = collapsed or {}

    targets: dict[str, set[str]] = defaultdict(set)
    users: dict[str, set[str]] = defaultdict(set)
    export_counts: dict[str, int] = defaultdict(int)

    for dep in dependencies:
        targets[dep.source_module_id].add(dep.resolved_module_id)
        if not dep.is_external:
            users[_target(dep, collapsed)].add(dep.source_module_id)

    for export in exports:
        export_counts[export.module_id] += 1

    for module in modules:
        module_id = module.module_id
        module.depends_on_count = len(targets.get(module_id, ()))
        module.used_by_count = len(users.get(module_id, ()))
        module.export_count = export_counts.get(module_id, 0)

    logger.debug(
        f"Aggregated {len(modules)} modules, {len(dependencies)} dependencies, "
        f"{len(exports)} exports"
    )
