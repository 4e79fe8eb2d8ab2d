"""Tests for the analysis pipeline orchestrator."""

from unittest.mock import patch

import pytest

from skillscan.analyzers.models import HttpMethod
from skillscan.analyzers.project_analyzer import ProjectAnalyzer, load_directory
from skillscan.analyzers.summary import Report
from skillscan.config import AnalyzerSettings
from skillscan.errors import IngestionError


# ── ProjectAnalyzer.analyze ────────────────────────────────────────


class TestAnalyze:
    def test_mern_project(self, mern_snapshot):
        report = ProjectAnalyzer().analyze(mern_snapshot)

        assert report.overview.total_files == 4
        assert [c.name for c in report.architecture.components] == ["UserCard"]
        assert [(e.method, e.route) for e in report.architecture.api_endpoints] == [
            (HttpMethod.GET, "/api/users"),
            (HttpMethod.POST, "/api/login"),
        ]
        assert {"React", "Express.js"} <= set(report.technologies.frameworks)
        assert "MongoDB" in report.technologies.database
        assert report.testing.test_count == 2
        assert report.testing.coverage
        assert report.quality.has_tests
        assert report.quality.has_linting
        assert report.warnings == ()
        assert 0 < report.scores.overall <= 10

    def test_empty_input(self):
        assert ProjectAnalyzer().analyze({}) == Report.empty()

    def test_only_rejected_files(self):
        report = ProjectAnalyzer().analyze({"node_modules/react/index.js": "x" * 200, "logo.png": "x" * 200})
        assert report == Report.empty()

    def test_idempotent(self, mern_snapshot):
        analyzer = ProjectAnalyzer()
        assert analyzer.analyze(mern_snapshot) == analyzer.analyze(mern_snapshot)

    def test_concurrent_scan_matches_sequential(self, mern_snapshot):
        sequential = ProjectAnalyzer().analyze(mern_snapshot)
        concurrent = ProjectAnalyzer(AnalyzerSettings(workers=4)).analyze(mern_snapshot)
        assert concurrent == sequential

    def test_oversized_file_is_never_scanned(self, mern_snapshot):
        analyzer = ProjectAnalyzer()
        files = dict(mern_snapshot, **{"server/huge.js": "const a = 1;\n" * 10})
        sizes = {"server/huge.js": 2_000_000}
        with patch.object(analyzer.scanner, "scan", wraps=analyzer.scanner.scan) as scan:
            analyzer.analyze(files, sizes)
        scanned = [call.args[0] for call in scan.call_args_list]
        assert "server/huge.js" not in scanned
        assert "server/routes.js" in scanned

    def test_readme_is_scored_but_not_scanned(self, mern_snapshot):
        analyzer = ProjectAnalyzer()
        with patch.object(analyzer.scanner, "scan", wraps=analyzer.scanner.scan) as scan:
            analyzer.analyze(mern_snapshot)
        assert "README.md" not in [call.args[0] for call in scan.call_args_list]

        without = dict(mern_snapshot)
        del without["README.md"]
        assert analyzer.analyze(mern_snapshot).scores.documentation > analyzer.analyze(without).scores.documentation

    def test_vendored_readme_does_not_count(self, mern_snapshot):
        without = dict(mern_snapshot)
        del without["README.md"]
        vendored = dict(without, **{"node_modules/leftpad/README.md": mern_snapshot["README.md"]})
        analyzer = ProjectAnalyzer()
        assert analyzer.analyze(vendored).scores == analyzer.analyze(without).scores

    def test_readme_named_source_file_is_not_a_readme(self, mern_snapshot):
        without = dict(mern_snapshot)
        del without["README.md"]
        parser = "export function parseReadme(text) {\n  return text.split('\\n').filter(Boolean);\n}\n"
        analyzer = ProjectAnalyzer()
        with patch.object(analyzer.scanner, "scan", wraps=analyzer.scanner.scan) as scan:
            report = analyzer.analyze(dict(without, **{"src/readmeParser.js": parser}))
        assert "src/readmeParser.js" in [call.args[0] for call in scan.call_args_list]
        renamed = analyzer.analyze(dict(without, **{"src/textParser.js": parser}))
        assert report.scores.documentation == renamed.scores.documentation

    def test_shallowest_readme_is_scored(self, mern_snapshot):
        stub = dict(mern_snapshot, **{"README.md": "# Shop\n"})
        nested = dict(stub, **{"docs/README.md": mern_snapshot["README.md"]})
        analyzer = ProjectAnalyzer()
        assert analyzer.analyze(nested).scores == analyzer.analyze(stub).scores
        assert analyzer.analyze(nested).scores.documentation < analyzer.analyze(mern_snapshot).scores.documentation

    def test_unparseable_file_becomes_warning(self, mern_snapshot):
        files = dict(mern_snapshot, **{"server/broken.js": "const a = 1;\nfunction broken( {\n  return " + "x" * 60 + ";\n"})
        report = ProjectAnalyzer().analyze(files)
        assert len(report.warnings) == 1
        assert report.warnings[0].startswith("server/broken.js:")
        assert len(report.architecture.api_endpoints) == 2

    def test_detailed_section(self, mern_snapshot):
        report = ProjectAnalyzer().analyze(mern_snapshot, include_detailed=True)
        assert report.detailed is not None
        assert report.detailed.total_files == 4
        assert report.detailed.documentation["readme_quality"] == 1.0
        assert report.detailed_scores is not None
        data = report.to_dict()
        assert "detailed" in data
        assert "detailed_scores" in data

    def test_detailed_follows_settings(self, mern_snapshot):
        analyzer = ProjectAnalyzer(AnalyzerSettings(include_detailed=True))
        assert analyzer.analyze(mern_snapshot).detailed is not None
        assert analyzer.analyze(mern_snapshot, include_detailed=False).detailed is None

    def test_detailed_does_not_change_scores(self, mern_snapshot):
        analyzer = ProjectAnalyzer()
        plain = analyzer.analyze(mern_snapshot)
        detailed = analyzer.analyze(mern_snapshot, include_detailed=True)
        assert plain.scores == detailed.scores


class TestSelect:
    def test_selection_and_quality(self, mern_snapshot):
        categorized, quality = ProjectAnalyzer().select(mern_snapshot)
        assert [f.path for f in categorized.frontend] == ["src/components/UserCard.jsx"]
        assert [f.path for f in categorized.backend] == ["server/routes.js"]
        assert [f.path for f in categorized.test] == ["__tests__/routes.test.js"]
        assert [f.path for f in categorized.config] == ["package.json"]
        assert quality.is_valid


# ── Reading from disk ──────────────────────────────────────────────


class TestLoadDirectory:
    def test_reads_text_files(self, tmp_path):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "app.js").write_text("console.log('hi');\n")
        (tmp_path / ".github" / "workflows").mkdir(parents=True)
        (tmp_path / ".github" / "workflows" / "ci.yml").write_text("on: push\n")

        files, sizes = load_directory(tmp_path)
        assert files["src/app.js"] == "console.log('hi');\n"
        assert sizes["src/app.js"] == len("console.log('hi');\n")
        assert ".github/workflows/ci.yml" in files

    def test_skips_vendor_hidden_and_binary(self, tmp_path):
        (tmp_path / "node_modules" / "react").mkdir(parents=True)
        (tmp_path / "node_modules" / "react" / "index.js").write_text("module.exports = 1;\n")
        (tmp_path / ".cache").mkdir()
        (tmp_path / ".cache" / "x.js").write_text("let x;\n")
        (tmp_path / "logo.js").write_bytes(b"GIF89a\x00\x01")
        (tmp_path / "main.py").write_text("print(1)\n")

        files, _ = load_directory(tmp_path)
        assert list(files) == ["main.py"]

    def test_truncates_but_keeps_disk_size(self, tmp_path):
        (tmp_path / "big.js").write_text("a" * 200)
        files, sizes = load_directory(tmp_path, max_read_bytes=100)
        assert len(files["big.js"]) == 100
        assert sizes["big.js"] == 200

    def test_not_a_directory(self, tmp_path):
        missing = tmp_path / "nope"
        with pytest.raises(IngestionError) as exc_info:
            load_directory(missing)
        assert exc_info.value.exit_code == 2
        assert exc_info.value.context["path"] == str(missing)

    def test_analyze_directory(self, tmp_path, mern_snapshot):
        for rel, content in mern_snapshot.items():
            target = tmp_path / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content)
        from_disk = ProjectAnalyzer().analyze_directory(tmp_path)
        assert from_disk == ProjectAnalyzer().analyze(mern_snapshot)
