"""Configuration loading and management for module-atlas.

Configuration sources are merged in priority order:
    1. Defaults (defined in AtlasConfig)
    2. Global config (~/.module-atlas.toml)
    3. Project config (./module-atlas.toml)
    4. Explicit config file
    5. Environment variables (ATLAS_* prefix)
    6. Overrides (passed as kwargs, typically from CLI flags)

Example:
    >>> config = load_config(include_classes=True, workers=2)
    >>> config.include_classes
    True
    >>> config.extensions
    ('.ts', '.tsx', '.js', '.jsx')
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import AtlasError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

# Probe order matters: the first extension that exists on disk wins.
DEFAULT_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx")

DEFAULT_IGNORED_DIRS: tuple[str, ...] = (
    "node_modules",
    "bower_components",
    "dist",
    "build",
    "coverage",
    "out",
)

_TUPLE_FIELDS = ("extensions", "ignored_dirs")


@dataclass(frozen=True)
class AtlasConfig:
    """Configuration for one analysis run.

    Attributes:
        Module discovery:
            extensions: Recognized source extensions, in resolver probe order
            ignored_dirs: Directory names never descended into
            allow_hidden_files: Include files and directories starting with "."
            follow_symlinks: Follow symbolic links while enumerating
            max_file_size_mb: Files larger than this are skipped

        Extraction:
            include_classes: Also produce ClassRecords with member detail

        Performance tuning:
            workers: Number of parallel workers (None = auto-detect)
            parallel_threshold: Below this many files, process sequentially

        Output control:
            verbosity: Logging verbosity level
    """

    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ignored_dirs: tuple[str, ...] = DEFAULT_IGNORED_DIRS
    allow_hidden_files: bool = False
    follow_symlinks: bool = False
    max_file_size_mb: float = 5.0

    include_classes: bool = False

    workers: Optional[int] = None
    parallel_threshold: int = 10

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.extensions:
            raise InvalidConfigError("extensions", self.extensions, "at least one extension required")
        for ext in self.extensions:
            if not ext.startswith(".") or len(ext) < 2:
                raise InvalidConfigError("extensions", ext, "extensions must look like '.js'")
        lowered = [ext.lower() for ext in self.extensions]
        if len(set(lowered)) != len(lowered):
            raise InvalidConfigError("extensions", self.extensions, "duplicate extension")

        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.parallel_threshold < 1:
            raise InvalidConfigError("parallel_threshold", self.parallel_threshold, "must be at least 1")
        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet/normal/verbose")

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    @property
    def effective_workers(self) -> int:
        """Worker count with auto-detection applied (capped at 8)."""
        if self.workers is not None:
            return self.workers
        return min(os.cpu_count() or 4, 8)


def load_config(config_file: Optional[Path] = None, **overrides) -> AtlasConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated AtlasConfig instance

    Raises:
        AtlasError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".module-atlas.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise AtlasError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "module-atlas.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise AtlasError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise AtlasError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise AtlasError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    for key in _TUPLE_FIELDS:
        if key in merged and isinstance(merged[key], (list, tuple)):
            merged[key] = tuple(merged[key])

    try:
        return AtlasConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise AtlasError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from ATLAS_* environment variables.

    Supported environment variables:
        ATLAS_EXTENSIONS: comma-separated list (".ts,.js")
        ATLAS_IGNORED_DIRS: comma-separated list
        ATLAS_ALLOW_HIDDEN_FILES: bool (true/false/1/0)
        ATLAS_FOLLOW_SYMLINKS: bool
        ATLAS_MAX_FILE_SIZE_MB: float
        ATLAS_INCLUDE_CLASSES: bool
        ATLAS_WORKERS: int
        ATLAS_PARALLEL_THRESHOLD: int
        ATLAS_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any ATLAS_* vars found.
    """
    type_hints = get_type_hints(AtlasConfig)

    result: dict[str, Any] = {}

    for field_name in AtlasConfig.__dataclass_fields__:
        env_key = f"ATLAS_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint, field_name)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise AtlasError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any, field_name: str) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Handle Optional[X] which is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return tuple(part.strip() for part in value.split(",") if part.strip())

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        AtlasError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise AtlasError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
