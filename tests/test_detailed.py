"""Tests for the dense statistical pass."""

import pytest

from skillscan.analyzers.detailed import DetailedAggregator, DetailedStats, statistical_scores
from skillscan.analyzers.models import Category, ScoreBreakdown


def _run(make_file, files, documents=None):
    agg = DetailedAggregator()
    for path, content in files:
        agg.ingest(make_file(path, content))
    return agg.finalize(documents)


BUTTON_TSX = """\
    import React, { useState } from 'react';

    interface Props { label: string }

    export default function Button(props: Props) {
      const [on, setOn] = useState(false);
      return <button>{props.label}</button>;
    }
"""

API_TEST = """\
    describe('api', () => {
      it('works', () => { expect(1).toBe(1); });
      test('also', () => { expect(2).toBe(2); });
    });
"""


# ── Per-file signals ───────────────────────────────────────────────


class TestIngest:
    def test_empty_content_is_skipped(self, make_file):
        stats = _run(make_file, [("src/a.js", "")])
        assert stats.total_files == 0

    def test_component_and_types(self, make_file):
        stats = _run(make_file, [("src/components/Button.tsx", BUTTON_TSX)])
        assert stats.total_files == 1
        assert stats.file_types == {"tsx": 1}
        assert stats.components["count"] == 1
        assert stats.components["quality"] == 1.0
        assert stats.components["state_complexity"] == 1.0
        assert stats.components["reusability"] == 100
        assert stats.types["has_typescript"]
        assert stats.types["interfaces"] == 1
        assert stats.technologies["frameworks"] == ["react"]

    def test_hook_usage(self, make_file):
        stats = _run(make_file, [("src/components/Button.tsx", BUTTON_TSX)])
        # import specifier and call site both count
        assert stats.hooks["count"] == 2
        assert stats.hooks["usage"]["useState"] == 2
        assert stats.hooks["custom"] == 0

    def test_custom_hook(self, make_file):
        content = "const useToggle = () => { return useState(false); };\n"
        stats = _run(make_file, [("src/hooks/useToggle.js", content)])
        assert stats.hooks["custom"] == 1
        assert stats.hooks["usage"]["custom"] == 1

    def test_tests_by_type(self, make_file):
        stats = _run(make_file, [("tests/integration/api.test.js", API_TEST)])
        assert stats.tests["count"] == 3
        assert stats.tests["type_distribution"] == {"unit": 0, "integration": 3, "e2e": 0}
        assert stats.tests["assertions_per_test"] == 0.7
        assert not stats.tests["coverage"]

    def test_non_test_file_has_no_tests(self, make_file):
        stats = _run(make_file, [("src/api.js", API_TEST)])
        assert stats.tests["count"] == 0

    def test_error_handling(self, make_file):
        content = """\
            function load() {
              try { run(); } catch (e) { report(e); }
            }
            window.onerror = report;
        """
        stats = _run(make_file, [("src/load.js", content)])
        assert stats.error_handling["try_catch_blocks"] == 2
        assert stats.error_handling["global_handlers"] == 1
        assert stats.error_handling["error_boundaries"] == 0

    def test_performance_signals(self, make_file):
        content = "const v = useMemo(() => 1, [a]);\nuseEffect(() => go(), []);\n"
        stats = _run(make_file, [("src/view.js", content)])
        assert stats.performance["optimizations"] == ["useMemo"]
        assert stats.performance["issues"] == ["empty dependency arrays"]


# ── Finalize ───────────────────────────────────────────────────────


class TestFinalize:
    def test_empty(self):
        stats = DetailedAggregator().finalize()
        assert stats.total_files == 0
        assert stats.components["count"] == 0
        assert stats.health == {"linting": False, "formatting": False, "ci_cd": False}
        assert stats.architecture["dependency_health"] == 5

    def test_health_from_package_json(self, make_file):
        package = '{"scripts": {"lint": "eslint ."}, "devDependencies": {"prettier": "^3"}, ' \
                  '"dependencies": {"react": "^18", "redux": "^4"}}'
        stats = _run(make_file, [("package.json", package)])
        assert stats.health == {"linting": True, "formatting": True, "ci_cd": False}
        assert "react" in stats.technologies["frameworks"]
        assert "redux" in stats.technologies["libraries"]

    def test_ci_from_test_script(self, make_file):
        stats = _run(make_file, [("package.json", '{"scripts": {"test": "jest"}}')])
        assert stats.health["ci_cd"]
        assert not stats.health["linting"]

    def test_invalid_package_json_is_ignored(self, make_file):
        stats = _run(make_file, [("package.json", "{not json")])
        assert stats.health == {"linting": False, "formatting": False, "ci_cd": False}

    def test_strict_tsconfig(self, make_file):
        stats = _run(make_file, [("tsconfig.json", '{"compilerOptions": {"strict": true}}')])
        assert stats.types["strictness"]

    def test_readme_from_documents(self):
        stats = DetailedAggregator().finalize({"README.md": "## Installation\n## Usage\n"})
        assert stats.documentation["readme_quality"] == 1.0

    def test_vendored_readme_ignored(self):
        stats = DetailedAggregator().finalize({"node_modules/pkg/README.md": "## Installation\n## Usage\n"})
        assert stats.documentation["readme_quality"] == 0.0

    def test_to_dict_is_plain(self, make_file):
        data = _run(make_file, [("src/components/Button.tsx", BUTTON_TSX)]).to_dict()
        assert data["components"]["size_distribution"] == {"small": 1, "medium": 0, "large": 0}
        assert isinstance(data["technologies"]["frameworks"], list)


# ── statistical_scores ─────────────────────────────────────────────


class TestStatisticalScores:
    def test_empty_stats(self):
        assert statistical_scores(DetailedStats()) == ScoreBreakdown()

    def test_undefined_areas_stay_zero(self, make_file):
        stats = _run(make_file, [
            ("src/components/Button.tsx", BUTTON_TSX),
            ("tests/integration/api.test.js", API_TEST),
        ])
        scores = statistical_scores(stats)
        assert scores.complexity == 0.0
        assert scores.technology == 0.0
        for value in scores.as_dict().values():
            assert 0 <= value <= 10
        assert scores.overall > 0

    def test_deterministic(self, make_file):
        files = [("src/components/Button.tsx", BUTTON_TSX)]
        assert statistical_scores(_run(make_file, files)) == statistical_scores(_run(make_file, files))

    @pytest.mark.parametrize("category", [Category.FRONTEND, Category.TEST])
    def test_category_does_not_matter(self, make_file, category):
        agg = DetailedAggregator()
        agg.ingest(make_file("tests/integration/api.test.js", API_TEST, category))
        assert agg.finalize().tests["count"] == 3
