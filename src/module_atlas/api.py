"""Public API for module-atlas.

This module provides the main entry point for analysis. Users should call
analyze() instead of wiring the enumerator and analyzer by hand.

Example:
    >>> from module_atlas import analyze
    >>>
    >>> # Simple usage
    >>> result = analyze("/path/to/project")
    >>>
    >>> # With customization
    >>> result = analyze(
    ...     "/path/to/project",
    ...     include_classes=True,
    ...     workers=4,
    ... )
    >>> result.used_by("./src/util.ts")
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from .config import load_config
from .graph.builder import analyze_modules
from .graph.models import AnalysisResult
from .logging_config import get_logger, setup_logging
from .scanning.enumerator import enumerate_modules, project_root_for

logger = get_logger(__name__)


def analyze(
    path: str | Path = ".",
    config_file: Optional[Path] = None,
    cancel_event: Optional[threading.Event] = None,
    **overrides,
) -> AnalysisResult:
    """Analyze a JavaScript/TypeScript project.

    Pipeline:
    1. Load configuration (auto-discover TOML + apply overrides)
    2. Enumerate modules under path
    3. Parse, walk and resolve every module
    4. Normalize dependencies and aggregate per-module counts

    Args:
        path: Project root, or a single source file (default: current directory)
        config_file: Optional explicit config file path
        cancel_event: Set it from another thread to stop after the running files
        **overrides: Configuration overrides (e.g., include_classes=True, workers=1)

    Returns:
        AnalysisResult with modules, dependencies, exports, classes and errors

    Raises:
        AtlasError: If configuration is invalid
        InvalidPathError: If path doesn't exist
    """
    config = load_config(config_file=config_file, **overrides)
    setup_logging(config.verbosity)

    logger.info(f"Starting analysis of {path}")
    logger.debug(f"Configuration loaded: {config.verbosity} mode, extensions={config.extensions}")

    target = Path(path)
    modules = enumerate_modules(
        target,
        extensions=config.extensions,
        ignored_dirs=config.ignored_dirs,
        allow_hidden_files=config.allow_hidden_files,
        follow_symlinks=config.follow_symlinks,
        max_file_size_bytes=config.max_file_size_bytes,
    )

    result = analyze_modules(modules, project_root_for(target), config, cancel_event)

    logger.info(
        f"Analysis complete: {len(result.modules)} modules, "
        f"{len(result.node_modules())} node modules, {len(result.errors)} errors"
    )
    return result
