"""Tests for per-file structural scanning."""

from unittest.mock import patch

import pytest

from skillscan.analyzers.models import Category
from skillscan.analyzers.scanner import StructuralScanner, detect_language


class TestDetectLanguage:
    @pytest.mark.parametrize("path,language", [
        ("a.py", "python"),
        ("a.JSX", "javascript"),
        ("a.tsx", "typescript"),
        ("main.go", "go"),
        ("styles.scss", "css"),
        ("Makefile", "unknown"),
    ])
    def test_languages(self, path, language):
        assert detect_language(path) == language


class TestScan:
    def test_routes_python(self):
        findings = StructuralScanner().scan("app.py", "def f():\n    return 1\n")
        assert findings.language == "python"
        assert [f.name for f in findings.functions] == ["f"]

    def test_routes_javascript(self):
        findings = StructuralScanner().scan("app.js", "function f() { return 1; }\n")
        assert findings.language == "javascript"
        assert [f.name for f in findings.functions] == ["f"]

    def test_unsupported_language_keeps_line_count(self):
        findings = StructuralScanner().scan("main.go", "package main\n\nfunc main() {}\n")
        assert findings.language == "go"
        assert findings.line_count == 4
        assert findings.parsed
        assert findings.functions == ()

    def test_python_syntax_error_becomes_warning(self):
        findings = StructuralScanner().scan("bad.py", "def broken(:\n")
        assert not findings.parsed
        assert findings.line_count == 2
        assert len(findings.warnings) == 1
        assert findings.warnings[0].startswith("bad.py: Syntax error")
        assert "(line 1)" in findings.warnings[0]

    def test_javascript_scan_error_becomes_warning(self):
        findings = StructuralScanner().scan("bad.js", "let a;\nfunction broken( {\n")
        assert not findings.parsed
        assert findings.functions == ()
        assert len(findings.warnings) == 1
        assert findings.warnings[0].startswith("bad.js: ")
        assert "(line " in findings.warnings[0]

    def test_tsx_generic_arrow_keeps_signals(self):
        source = (
            "const identity = <T,>(value: T): T => value;\n"
            "export function Header() { return (<h1>Hi</h1>); }\n"
            "export function Footer() { return (<footer>Bye</footer>); }\n"
        )
        findings = StructuralScanner().scan("src/components/Layout.tsx", source)
        assert findings.parsed
        assert findings.warnings == ()
        assert [c.name for c in findings.components] == ["Header", "Footer"]
        assert len(findings.functions) == 3

    def test_unclosed_jsx_becomes_warning(self):
        findings = StructuralScanner().scan(
            "src/components/Layout.tsx", "export function Header() { return (<h1>Hi); }\n",
        )
        assert not findings.parsed
        assert findings.components == ()
        assert findings.warnings[0].startswith("src/components/Layout.tsx: ")

    def test_unexpected_failure_becomes_warning(self):
        scanner = StructuralScanner()
        with patch.object(scanner._javascript, "analyze", side_effect=RuntimeError("boom")):
            findings = scanner.scan("a.js", "const a = 1;\n")
        assert not findings.parsed
        assert findings.warnings == ("a.js: scan failed (boom)",)


class TestScanAll:
    def _files(self, make_file, count):
        return [
            make_file(f"src/mod{i}.py", f"def f{i}():\n    return {i}\n", Category.BACKEND)
            for i in range(count)
        ]

    def test_sequential_order(self, make_file):
        files = self._files(make_file, 4)
        paths = [f.path for f in StructuralScanner().scan_all(files)]
        assert paths == [f.path for f in files]

    def test_concurrent_scan_keeps_input_order(self, make_file):
        files = self._files(make_file, 12)
        findings = list(StructuralScanner(workers=4).scan_all(files))
        assert [f.path for f in findings] == [f.path for f in files]
        assert [f.functions[0].name for f in findings] == [f"f{i}" for i in range(12)]

    def test_concurrent_matches_sequential(self, make_file):
        files = self._files(make_file, 6)
        assert list(StructuralScanner(workers=3).scan_all(files)) == list(StructuralScanner().scan_all(files))

    def test_workers_floor(self):
        assert StructuralScanner(workers=0).workers == 1
