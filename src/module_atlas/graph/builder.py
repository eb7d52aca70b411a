"""ModuleAnalyzer: runs parse -> walk -> resolve for every module, then merges.

Per-file work is independent and runs on a thread pool for larger projects.
Normalization and aggregation need the complete set of per-file results and
run once, after all files are done.

Usage:
    analyzer = ModuleAnalyzer(project_root, config)
    result = analyzer.analyze(modules)
    # or: analyze_modules(modules, project_root, config)

Cancellation:
    Set the ``cancel_event`` to stop scheduling files. Files already finished
    are kept, the rest are skipped, and the result has ``cancelled=True``.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from ..config import AtlasConfig
from ..exceptions import AtlasError, ErrorCode, FileAccessError, UnsupportedLanguageError
from ..logging_config import get_logger
from ..scanning.languages import detect_language
from ..scanning.treesitter_parser import TreeSitterParser, get_supported_languages
from .aggregator import aggregate
from .classes import extract_classes
from .models import (
    AnalysisResult,
    ClassRecord,
    DependencyRecord,
    ErrorRecord,
    ExportRecord,
    ModuleDescriptor,
)
from .normalizer import collapsed_targets, normalize_dependencies
from .resolver import DirectoryListingCache, ModuleResolver
from .walker import DeclarationWalker

logger = get_logger(__name__)


@dataclass
class ModuleOutcome:
    """What one file contributed; ``error`` set means it contributed nothing."""

    module_id: str
    exports: list[ExportRecord] = field(default_factory=list)
    dependencies: list[DependencyRecord] = field(default_factory=list)
    classes: list[ClassRecord] = field(default_factory=list)
    error: Optional[ErrorRecord] = None


class ModuleAnalyzer:
    """Extracts and cross-references exports and imports for a set of modules.

    Args:
        project_root: Directory the module ids are relative to
        config: Run configuration (extensions, workers, class detail)
    """

    def __init__(self, project_root: Path, config: Optional[AtlasConfig] = None) -> None:
        self.project_root = Path(project_root)
        self.config = config or AtlasConfig()
        self.listing_cache = DirectoryListingCache(self.project_root)
        self.resolver = ModuleResolver(
            self.project_root, self.config.extensions, self.listing_cache
        )
        self.parser = TreeSitterParser()
        self.walker = DeclarationWalker(resolve=self.resolver.resolve)

    def process(self, module: ModuleDescriptor) -> ModuleOutcome:
        """Parse, walk and resolve one module.

        Per-file failures are returned as an ErrorRecord, never raised.
        """
        module_id = module.module_id
        try:
            return self._process(module)
        except AtlasError as e:
            logger.warning(f"[{e.code.value}] {module_id}: {e}")
            return ModuleOutcome(module_id, error=ErrorRecord(module_id, str(e), e.code))
        except Exception as e:
            logger.error(f"Unexpected error analyzing {module_id}: {e}")
            return ModuleOutcome(
                module_id,
                error=ErrorRecord(module_id, f"{type(e).__name__}: {e}", ErrorCode.MA900),
            )

    def _process(self, module: ModuleDescriptor) -> ModuleOutcome:
        module_id = module.module_id
        path = self.project_root / module_id

        language = detect_language(path)
        if not self.parser.is_language_supported(language):
            raise UnsupportedLanguageError(language, get_supported_languages())

        try:
            code = path.read_bytes()
        except OSError as e:
            raise FileAccessError(path, str(e))

        tree = self.parser.parse_strict(code, language, module_id)
        walked = self.walker.walk(tree, module_id)

        dependencies = [
            DependencyRecord(
                source_module_id=raw.source_module_id,
                raw_specifier=raw.raw_specifier,
                resolved_module_id=self.resolver.resolve(raw.raw_specifier, module_id),
                imported_name=raw.imported_name,
            )
            for raw in walked.dependencies
        ]
        classes = extract_classes(tree, module_id) if self.config.include_classes else []

        logger.debug(
            f"Analyzed {module_id}: {len(walked.exports)} exports, {len(dependencies)} imports"
        )
        return ModuleOutcome(module_id, walked.exports, dependencies, classes)

    def analyze(
        self,
        modules: list[ModuleDescriptor],
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisResult:
        """Analyze all modules and return the merged, aggregated result."""
        cancel_event = cancel_event or threading.Event()
        outcomes: dict[str, ModuleOutcome] = {}

        workers = self.config.effective_workers
        if workers == 1 or len(modules) < self.config.parallel_threshold:
            # Sequential for small batches (parallel overhead not worth it)
            for module in modules:
                if cancel_event.is_set():
                    break
                outcome = self.process(module)
                outcomes[outcome.module_id] = outcome
        else:
            outcomes = self._analyze_parallel(modules, workers, cancel_event)

        cancelled = cancel_event.is_set() and len(outcomes) < len(modules)
        if cancelled:
            logger.warning(f"Analysis cancelled after {len(outcomes)}/{len(modules)} modules")

        return self._merge(modules, outcomes, cancelled)

    def _analyze_parallel(
        self,
        modules: list[ModuleDescriptor],
        workers: int,
        cancel_event: threading.Event,
    ) -> dict[str, ModuleOutcome]:
        outcomes: dict[str, ModuleOutcome] = {}

        def _task(module: ModuleDescriptor) -> Optional[ModuleOutcome]:
            # Checked when the task starts, so queued work is abandoned
            if cancel_event.is_set():
                return None
            return self.process(module)

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures: dict[Future, ModuleDescriptor] = {
                executor.submit(_task, module): module for module in modules
            }
            for future in as_completed(futures):
                if cancel_event.is_set():
                    for pending in futures:
                        pending.cancel()
                if future.cancelled():
                    continue
                try:
                    outcome = future.result()
                except Exception as e:
                    module_id = futures[future].module_id
                    logger.error(f"Unexpected error analyzing {module_id}: {e}")
                    outcome = ModuleOutcome(
                        module_id, error=ErrorRecord(module_id, str(e), ErrorCode.MA900)
                    )
                if outcome is not None:
                    outcomes[outcome.module_id] = outcome

        return outcomes

    def _merge(
        self,
        modules: list[ModuleDescriptor],
        outcomes: dict[str, ModuleOutcome],
        cancelled: bool,
    ) -> AnalysisResult:
        result = AnalysisResult(
            modules=sorted(modules, key=lambda m: m.module_id), cancelled=cancelled
        )

        raw_dependencies: list[DependencyRecord] = []
        # Module-id order makes the merge independent of completion order
        for module_id in sorted(outcomes):
            outcome = outcomes[module_id]
            if outcome.error is not None:
                result.errors.append(outcome.error)
                continue
            result.exports.extend(outcome.exports)
            raw_dependencies.extend(outcome.dependencies)
            result.classes.extend(outcome.classes)

        result.collapsed = collapsed_targets(raw_dependencies, self.config.extensions)
        result.dependencies = sorted(
            normalize_dependencies(raw_dependencies, self.config.extensions),
            key=lambda d: (d.source_module_id, d.raw_specifier, d.imported_name),
        )
        result.errors.sort(key=lambda e: (e.file, e.code.value))

        aggregate(result.modules, result.dependencies, result.exports, result.collapsed)

        logger.info(
            f"Analyzed {len(outcomes)} modules: {len(result.exports)} exports, "
            f"{len(result.dependencies)} dependencies, {len(result.errors)} errors"
        )
        return result


def analyze_modules(
    modules: list[ModuleDescriptor],
    project_root: Path,
    config: Optional[AtlasConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> AnalysisResult:
    """Run the full extraction pipeline over already-enumerated modules."""
    return ModuleAnalyzer(project_root, config).analyze(modules, cancel_event)
