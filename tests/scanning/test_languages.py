"""Tests for extension-based language detection."""

import pytest

from module_atlas.scanning.languages import detect_language


class TestDetectLanguage:
    @pytest.mark.parametrize(
        "path,language",
        [
            ("a.js", "javascript"),
            ("a.jsx", "javascript"),
            ("a.mjs", "javascript"),
            ("a.ts", "typescript"),
            ("a.cts", "typescript"),
            ("a.tsx", "tsx"),
            ("dir/App.JS", "javascript"),
            ("Component.TSX", "tsx"),
        ],
    )
    def test_known_extensions(self, path, language):
        assert detect_language(path) == language

    @pytest.mark.parametrize("path", ["a.vue", "a.css", "Makefile", "a.d"])
    def test_unknown(self, path):
        assert detect_language(path) == "unknown"
