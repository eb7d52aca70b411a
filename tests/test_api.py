"""Tests for the public analyze() entry point."""

import json
import threading

import pytest

import module_atlas
from module_atlas import analyze
from module_atlas.exceptions import AtlasError, InvalidPathError

PROJECT = {
    "src/index.ts": (
        'import { helper } from "./util";\n'
        'import React from "react";\n'
        'export { Button } from "./components/Button";\n'
        "export default function main(argv: string[]) {}\n"
    ),
    "src/util.ts": "export function helper(a, b) {}\nexport const VERSION = 1;\n",
    "src/components/Button.tsx": (
        'import React from "react";\n'
        "export class Button extends React.Component {}\n"
    ),
    "node_modules/react/index.js": "export default {};\n",
    "README.md": "# docs\n",
}


@pytest.fixture(autouse=True)
def no_config_files(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


class TestAnalyze:
    def test_end_to_end(self, make_project):
        root = make_project(PROJECT)
        result = analyze(root / "src")

        assert [m.module_id for m in result.modules] == [
            "./components/Button.tsx",
            "./index.ts",
            "./util.ts",
        ]
        assert result.node_modules() == ["react"]
        assert result.errors == []
        assert result.module("./util.ts").used_by_count == 1
        assert result.module("./components/Button.tsx").used_by_count == 1
        assert result.module("./index.ts").export_count == 2
        assert [d.source_module_id for d in result.used_by("./util.ts")] == ["./index.ts"]

    def test_ignored_dirs_not_enumerated(self, make_project):
        root = make_project(PROJECT)
        result = analyze(root)
        assert all(not m.module_id.startswith("./node_modules") for m in result.modules)

    def test_overrides_reach_config(self, make_project):
        root = make_project(PROJECT)
        result = analyze(root / "src", include_classes=True, workers=1)
        assert [c.name for c in result.classes] == ["Button"]
        assert result.classes[0].super_class_name == "React.Component"

    def test_extensions_override(self, make_project):
        root = make_project(PROJECT)
        result = analyze(root / "src", extensions=(".tsx",))
        assert [m.module_id for m in result.modules] == ["./components/Button.tsx"]

    def test_single_file(self, make_project):
        root = make_project(PROJECT)
        result = analyze(root / "src" / "util.ts")
        assert [m.module_id for m in result.modules] == ["./util.ts"]
        assert result.module("./util.ts").export_count == 2

    def test_cancel_event(self, make_project):
        root = make_project(PROJECT)
        event = threading.Event()
        event.set()
        result = analyze(root / "src", cancel_event=event)
        assert result.cancelled is True
        assert result.exports == []

    def test_missing_path(self, tmp_path):
        with pytest.raises(InvalidPathError):
            analyze(tmp_path / "missing")

    def test_bad_override(self, make_project):
        root = make_project(PROJECT)
        with pytest.raises(AtlasError):
            analyze(root, workers=0)

    def test_to_dict_is_json_ready(self, make_project):
        root = make_project(PROJECT)
        data = analyze(root / "src").to_dict()
        assert set(data) == {"ModuleArray", "DependencyList", "ExportList", "ClassList", "Errors"}
        json.dumps(data)


class TestPackageExports:
    def test_version(self):
        assert module_atlas.__version__ == "0.1.0"

    def test_public_names(self):
        for name in module_atlas.__all__:
            assert hasattr(module_atlas, name)
