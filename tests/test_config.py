"""Tests for configuration loading and validation."""

import dataclasses
import os

import pytest

from module_atlas.config import DEFAULT_EXTENSIONS, AtlasConfig, load_config
from module_atlas.exceptions import AtlasError, InvalidConfigError


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """No global/project config files and no ATLAS_* vars leak in."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for key in list(os.environ):
        if key.startswith("ATLAS_"):
            monkeypatch.delenv(key)
    return home, work


class TestDefaults:
    def test_defaults(self):
        config = load_config()
        assert config == AtlasConfig()
        assert config.extensions == DEFAULT_EXTENSIONS
        assert "node_modules" in config.ignored_dirs
        assert config.include_classes is False
        assert config.verbosity == "normal"

    def test_max_file_size_bytes(self):
        assert AtlasConfig(max_file_size_mb=1.0).max_file_size_bytes == 1024 * 1024

    def test_effective_workers(self):
        assert AtlasConfig(workers=3).effective_workers == 3
        assert 1 <= AtlasConfig().effective_workers <= 8

    def test_frozen(self):
        config = AtlasConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.workers = 2


class TestValidation:
    """__post_init__ rejects bad values."""

    @pytest.mark.parametrize(
        "kwargs,key",
        [
            ({"extensions": ()}, "extensions"),
            ({"extensions": ("js",)}, "extensions"),
            ({"extensions": (".js", ".JS")}, "extensions"),
            ({"workers": 0}, "workers"),
            ({"parallel_threshold": 0}, "parallel_threshold"),
            ({"max_file_size_mb": 0}, "max_file_size_mb"),
            ({"verbosity": "loud"}, "verbosity"),
        ],
    )
    def test_invalid_values(self, kwargs, key):
        with pytest.raises(InvalidConfigError) as exc_info:
            AtlasConfig(**kwargs)
        assert exc_info.value.key == key


class TestConfigFiles:
    """TOML files merge in priority order."""

    def test_global_config(self, isolated_env):
        home, _ = isolated_env
        (home / ".module-atlas.toml").write_text("include_classes = true\nworkers = 2\n")
        config = load_config()
        assert config.include_classes is True
        assert config.workers == 2

    def test_project_overrides_global(self, isolated_env):
        home, work = isolated_env
        (home / ".module-atlas.toml").write_text("workers = 2\n")
        (work / "module-atlas.toml").write_text("workers = 3\n")
        assert load_config().workers == 3

    def test_explicit_file_overrides_project(self, isolated_env, tmp_path):
        _, work = isolated_env
        (work / "module-atlas.toml").write_text("workers = 3\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text('workers = 4\nextensions = [".js", ".mjs"]\n')
        config = load_config(explicit)
        assert config.workers == 4
        assert config.extensions == (".js", ".mjs")

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(AtlasError, match="not found"):
            load_config(tmp_path / "missing.toml")

    def test_malformed_toml(self, tmp_path):
        bad = tmp_path / "bad.toml"
        bad.write_text("workers = = 2\n")
        with pytest.raises(AtlasError, match="Invalid config file"):
            load_config(bad)

    def test_unknown_key(self, tmp_path):
        unknown = tmp_path / "unknown.toml"
        unknown.write_text("colour = 'blue'\n")
        with pytest.raises(AtlasError, match="Invalid configuration"):
            load_config(unknown)


class TestEnvironment:
    """ATLAS_* variables sit above files and below overrides."""

    def test_env_overrides_files(self, isolated_env, monkeypatch):
        _, work = isolated_env
        (work / "module-atlas.toml").write_text("workers = 3\n")
        monkeypatch.setenv("ATLAS_WORKERS", "5")
        assert load_config().workers == 5

    def test_env_types(self, monkeypatch):
        monkeypatch.setenv("ATLAS_EXTENSIONS", ".js, .ts")
        monkeypatch.setenv("ATLAS_INCLUDE_CLASSES", "yes")
        monkeypatch.setenv("ATLAS_MAX_FILE_SIZE_MB", "0.5")
        monkeypatch.setenv("ATLAS_VERBOSITY", "quiet")
        config = load_config()
        assert config.extensions == (".js", ".ts")
        assert config.include_classes is True
        assert config.max_file_size_mb == 0.5
        assert config.verbosity == "quiet"

    @pytest.mark.parametrize(
        "key,value",
        [("ATLAS_WORKERS", "many"), ("ATLAS_FOLLOW_SYMLINKS", "maybe")],
    )
    def test_bad_env_values(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)
        with pytest.raises(AtlasError, match=key):
            load_config()


class TestOverrides:
    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("ATLAS_WORKERS", "5")
        assert load_config(workers=1).workers == 1

    def test_none_overrides_are_ignored(self, monkeypatch):
        monkeypatch.setenv("ATLAS_WORKERS", "5")
        assert load_config(workers=None).workers == 5

    def test_verbose_and_quiet_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"

    def test_list_overrides_become_tuples(self):
        config = load_config(extensions=[".js"])
        assert config.extensions == (".js",)

    def test_invalid_override(self):
        with pytest.raises(InvalidConfigError):
            load_config(workers=0)
