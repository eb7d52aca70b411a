"""End-to-end tests for ModuleAnalyzer over on-disk projects."""

import threading

import pytest

from module_atlas.config import AtlasConfig
from module_atlas.exceptions import ErrorCode
from module_atlas.graph.builder import ModuleAnalyzer, analyze_modules
from module_atlas.graph.models import DeclarationKind, ModuleDescriptor
from module_atlas.scanning.enumerator import enumerate_modules


def run(root, **config):
    cfg = AtlasConfig(**config)
    modules = enumerate_modules(root, cfg.extensions, cfg.ignored_dirs)
    return analyze_modules(modules, root, cfg)


class TestEndToEnd:
    """Small projects through the full pipeline."""

    def test_named_import_of_local_function(self, make_project):
        root = make_project(
            {
                "a.js": 'import { foo } from "./b";\n',
                "b.js": "export function foo(){}\n",
            }
        )
        result = run(root)

        assert [d.to_dict() for d in result.dependencies] == [
            {"src": "./a.js", "importSrc": "./b", "resolvedSrc": "./b.js", "import": "foo"}
        ]
        assert [e.to_dict() for e in result.exports] == [
            {"module": "./b.js", "exported": "foo", "kind": "Function", "params": "()"}
        ]
        assert result.module("./b.js").used_by_count == 1
        assert result.module("./a.js").depends_on_count == 1

    def test_node_module_import(self, make_project):
        root = make_project({"a.js": 'import { IndexRoute } from "react-router";\n'})
        result = run(root)

        [dep] = result.dependencies
        assert dep.resolved_module_id == "react-router"
        assert dep.is_external
        assert result.module("./a.js").used_by_count == 0
        assert result.node_modules() == ["react-router"]

    def test_parent_traversal_clamps_at_root(self, make_project):
        root = make_project(
            {"server/api/assignments.js": 'import { lib } from "../../lib";\n'}
        )
        result = run(root)
        assert result.dependencies[0].resolved_module_id == "./lib"
        assert result.errors == []

    def test_extension_variants_collapse(self, make_project):
        root = make_project(
            {
                "a.js": 'import x from "./util";\nimport y from "./util.js";\n',
                "util.js": "export default function () {}\n",
            }
        )
        result = run(root)

        assert len(result.dependencies) == 2
        for dep in result.dependencies:
            assert dep.raw_specifier == "./util"
            assert dep.resolved_module_id == "./util"
        assert result.module("./util.js").used_by_count == 1
        assert [d.source_module_id for d in result.used_by("./util.js")] == ["./a.js", "./a.js"]

    def test_same_stem_files_stay_separate(self, make_project):
        root = make_project(
            {
                "a.js": 'import x from "./util";\nimport y from "./util.js";\n',
                "util.ts": "export default function () {}\n",
                "util.js": "export default function () {}\n",
            }
        )
        result = run(root)

        assert [(d.raw_specifier, d.resolved_module_id) for d in result.dependencies] == [
            ("./util", "./util.ts"),
            ("./util.js", "./util.js"),
        ]
        assert result.module("./util.ts").used_by_count == 1
        assert result.module("./util.js").used_by_count == 1
        assert result.module("./a.js").depends_on_count == 2

    def test_directory_import_beside_index_import(self, make_project):
        root = make_project(
            {
                "a.js": 'import { x } from "./lib";\n',
                "b.js": 'import { y } from "./lib/index.js";\n',
                "lib/index.js": "export const x = 1;\nexport const y = 2;\n",
            }
        )
        result = run(root)

        assert [d.to_dict() for d in result.dependencies] == [
            {"src": "./a.js", "importSrc": "./lib", "resolvedSrc": "./lib/index.js", "import": "x"},
            {
                "src": "./b.js",
                "importSrc": "./lib/index.js",
                "resolvedSrc": "./lib/index.js",
                "import": "y",
            },
        ]
        assert result.module("./lib/index.js").used_by_count == 2

    def test_default_class_with_superclass(self, make_project):
        root = make_project({"foo.js": "export default class Foo extends Bar {}\n"})

        result = run(root, include_classes=True)
        [export] = result.exports
        assert export.kind is DeclarationKind.CLASS
        [cls] = result.classes
        assert cls.super_class_name == "Bar"
        assert cls.is_exported

        assert run(root).classes == []


class TestReExports:
    """Re-exports resolve their origin module and count as dependencies."""

    def test_barrel_file(self, make_project):
        root = make_project(
            {
                "index.ts": 'export { Button, Link as Anchor } from "./components";\n',
                "components/index.ts": "export const Button = 1;\nexport const Link = 2;\n",
            }
        )
        result = run(root)

        reexports = result.exported_by("./index.ts")
        assert [(e.exported_name, e.kind) for e in reexports] == [
            ("Button", DeclarationKind.RE_EXPORT),
            ("Anchor", DeclarationKind.RE_EXPORT),
        ]
        assert all(e.source_module == "./components/index.ts" for e in reexports)
        assert [d.imported_name for d in result.depends_on("./index.ts")] == ["Button", "Link"]
        assert result.module("./components/index.ts").used_by_count == 1


class TestPartialFailure:
    """A broken file is reported and does not affect the others."""

    def test_syntax_error_is_isolated(self, make_project):
        root = make_project(
            {
                "a.js": 'import { foo } from "./b";\n',
                "b.js": "export function foo(){}\n",
                "broken.js": "export function (\n",
            }
        )
        result = run(root)

        [error] = result.errors
        assert error.file == "./broken.js"
        assert error.code is ErrorCode.MA101
        assert "syntax error at line" in error.message
        assert result.exported_by("./broken.js") == []
        assert len(result.dependencies) == 1
        assert result.module("./b.js").used_by_count == 1
        assert [m.module_id for m in result.modules] == ["./a.js", "./b.js", "./broken.js"]

    def test_missing_file(self, make_project):
        root = make_project({"a.js": "export const a = 1;\n"})
        modules = [ModuleDescriptor(".", "a.js"), ModuleDescriptor(".", "ghost.js")]
        result = analyze_modules(modules, root, AtlasConfig())

        [error] = result.errors
        assert error.file == "./ghost.js"
        assert error.code is ErrorCode.MA100
        assert len(result.exports) == 1

    def test_unsupported_language(self, make_project):
        root = make_project({"widget.vue": "<template></template>\n"})
        result = analyze_modules([ModuleDescriptor(".", "widget.vue")], root, AtlasConfig())
        assert result.errors[0].code is ErrorCode.MA102

    def test_process_never_raises(self, make_project):
        root = make_project({"bad.ts": "export const = ;\n"})
        outcome = ModuleAnalyzer(root).process(ModuleDescriptor(".", "bad.ts"))
        assert outcome.error is not None
        assert outcome.exports == []


def _project_files(count):
    files = {"shared/util.ts": "export function helper(a, b) {}\n"}
    for i in range(count):
        files[f"pkg{i % 3}/mod{i}.ts"] = (
            'import { helper } from "../shared/util";\n'
            'import React from "react";\n'
            f"export const value{i} = helper;\n"
        )
    files["pkg0/broken.ts"] = "export class {\n"
    return files


class TestDeterminism:
    """Output does not depend on worker count or completion order."""

    def test_sequential_and_parallel_match(self, make_project):
        root = make_project(_project_files(24))
        sequential = run(root, workers=1)
        parallel = run(root, workers=4, parallel_threshold=1)
        assert sequential.to_dict() == parallel.to_dict()

    def test_repeated_runs_match(self, make_project):
        root = make_project(_project_files(12))
        first = run(root, workers=3, parallel_threshold=1)
        second = run(root, workers=3, parallel_threshold=1)
        assert first.to_dict() == second.to_dict()

    def test_dependencies_sorted(self, make_project):
        root = make_project(_project_files(12))
        result = run(root, workers=2, parallel_threshold=1)
        keys = [(d.source_module_id, d.raw_specifier, d.imported_name) for d in result.dependencies]
        assert keys == sorted(keys)
        assert result.module("./shared/util.ts").used_by_count == 12


class TestCancellation:
    """Cooperative cancellation between file tasks."""

    @pytest.mark.parametrize("workers", [1, 4])
    def test_preset_event_skips_all_files(self, make_project, workers):
        root = make_project(_project_files(12))
        cfg = AtlasConfig(workers=workers, parallel_threshold=1)
        modules = enumerate_modules(root, cfg.extensions)
        event = threading.Event()
        event.set()

        result = analyze_modules(modules, root, cfg, cancel_event=event)

        assert result.cancelled is True
        assert result.exports == []
        assert result.dependencies == []
        assert len(result.modules) == len(modules)

    def test_uncancelled_run(self, make_project):
        root = make_project(_project_files(3))
        result = run(root)
        assert result.cancelled is False

    def test_cancel_midway_keeps_finished_files(self, make_project):
        root = make_project(_project_files(6))
        cfg = AtlasConfig(workers=1)
        modules = enumerate_modules(root, cfg.extensions)
        event = threading.Event()
        analyzer = ModuleAnalyzer(root, cfg)

        original = analyzer.process
        calls = []

        def process_then_cancel(module):
            calls.append(module.module_id)
            if len(calls) == 2:
                event.set()
            return original(module)

        analyzer.process = process_then_cancel
        result = analyzer.analyze(modules, cancel_event=event)

        assert result.cancelled is True
        assert len(calls) == 2
        assert {e.module_id for e in result.exports} <= set(calls)
