"""Tests for file classification, ranking and selection checks."""

import pytest

from skillscan.analyzers.classifier import (
    CONFIG_CAP,
    SOURCE_CAP,
    FileClassifier,
    is_readme,
    normalize_path,
    select_readme,
    validate_selection,
)
from skillscan.analyzers.models import CategorizedFiles, Category, SourceFile

BODY = "x" * 200


def _source(path: str, size: int = 200, category: Category = Category.BACKEND) -> SourceFile:
    return SourceFile(path=path, content="x" * size, size=size, extension=".js", category=category)


# ── classify ───────────────────────────────────────────────────────


class TestClassify:
    def setup_method(self):
        self.classifier = FileClassifier()

    @pytest.mark.parametrize("path,expected", [
        ("src/components/Button.jsx", Category.FRONTEND),
        ("app/views/index.html", Category.FRONTEND),
        ("api/handlers.py", Category.BACKEND),
        ("cmd/main.go", Category.BACKEND),
        ("styles/main.scss", Category.STYLE),
        ("package.json", Category.CONFIG),
        ("frontend/vite.config.ts", Category.CONFIG),
        ("Dockerfile", Category.CONFIG),
        ("src/utils/format.test.js", Category.TEST),
        ("tests/test_models.py", Category.TEST),
        ("__tests__/App.jsx", Category.TEST),
    ])
    def test_categories(self, path, expected):
        assert self.classifier.classify(path, 500) is expected

    def test_ambiguous_extension_uses_directory_hints(self):
        assert self.classifier.classify("src/components/store.js", 500) is Category.FRONTEND
        assert self.classifier.classify("server/routes/users.ts", 500) is Category.BACKEND

    def test_ambiguous_extension_falls_back_to_default(self):
        assert self.classifier.classify("lib/helpers.js", 500) is Category.BACKEND
        frontend_first = FileClassifier(ambiguous_default=Category.FRONTEND)
        assert frontend_first.classify("lib/helpers.js", 500) is Category.FRONTEND

    def test_invalid_ambiguous_default(self):
        with pytest.raises(ValueError):
            FileClassifier(ambiguous_default=Category.CONFIG)

    def test_ignored_directory_on_segment_boundary(self):
        assert self.classifier.classify("node_modules/pkg/index.js", 500) is Category.IGNORED
        assert self.classifier.classify("web/node_modules/pkg/index.js", 500) is Category.IGNORED

    def test_directory_name_inside_file_name_is_not_ignored(self):
        assert self.classifier.classify("mynode_modulesthing.js", 500) is not Category.IGNORED
        assert self.classifier.classify("src/distance.js", 500) is not Category.IGNORED

    def test_multi_segment_ignored_directory(self):
        assert self.classifier.classify("public/assets/app.js", 500) is Category.IGNORED
        assert self.classifier.classify("public/app.js", 500) is not Category.IGNORED

    @pytest.mark.parametrize("path", [
        "dist/bundle.min.js",
        "src/app.min.js",
        "yarn.lock",
        "package-lock.json",
        "README.md",
        "docs/readme.md",
        "LICENSE",
        "src/app.js.map",
    ])
    def test_ignored_files(self, path):
        assert self.classifier.classify(path, 500) is Category.IGNORED

    def test_size_bounds(self):
        assert self.classifier.classify("src/app.py", 49) is Category.IGNORED
        assert self.classifier.classify("src/app.py", 50) is Category.BACKEND
        assert self.classifier.classify("src/app.py", 1_000_000) is Category.BACKEND
        assert self.classifier.classify("src/huge.py", 2_000_000) is Category.IGNORED

    def test_unsupported_type(self):
        assert self.classifier.classify("docs/diagram.svg", 500) is Category.IGNORED
        assert "unsupported" in self.classifier.rejection_reason("docs/diagram.svg", 500)

    def test_rejection_reason(self):
        assert self.classifier.rejection_reason("src/app.py", 500) is None
        assert "node_modules" in self.classifier.rejection_reason("node_modules/a/b.js", 500)
        assert "larger than" in self.classifier.rejection_reason("src/huge.py", 2_000_000)

    def test_windows_separators(self):
        assert self.classifier.classify("node_modules\\pkg\\index.js", 500) is Category.IGNORED
        assert self.classifier.classify("src\\components\\Nav.jsx", 500) is Category.FRONTEND


class TestNormalizePath:
    def test_strips_prefixes(self):
        assert normalize_path("./src/app.js") == "src/app.js"
        assert normalize_path("/src/app.js") == "src/app.js"

    def test_backslashes(self):
        assert normalize_path("src\\lib\\a.py") == "src/lib/a.py"


class TestReadme:
    @pytest.mark.parametrize("path", ["README.md", "readme", "docs/Readme.rst", "README.txt"])
    def test_readme_names(self, path):
        assert is_readme(path)

    @pytest.mark.parametrize("path", [
        "src/readmeParser.js",
        "README.md.bak",
        "docs/readme-old.md",
        "node_modules/leftpad/README.md",
        "vendor/lib/readme.txt",
    ])
    def test_not_project_readmes(self, path):
        assert not is_readme(path)

    def test_shallowest_wins(self):
        paths = ["packages/web/README.md", "README.md", "docs/README.md"]
        assert select_readme(paths) == "README.md"

    def test_ties_broken_by_path(self):
        assert select_readme(["web/README.md", "api/README.md"]) == "api/README.md"

    def test_none_found(self):
        assert select_readme(["src/app.js", "node_modules/x/README.md"]) is None


# ── priority ───────────────────────────────────────────────────────


class TestPriority:
    def test_src_beats_peripheral(self):
        core = _source("src/app.js")
        other = _source("scripts/app2.js")
        assert FileClassifier.priority(core) > FileClassifier.priority(other)

    def test_size_contribution_is_capped(self):
        huge = _source("lib/big.js", size=900_000)
        assert FileClassifier.priority(huge) == 50 + 20

    def test_entrypoint_bonus(self):
        gap = FileClassifier.priority(_source("x/index.js")) - FileClassifier.priority(_source("x/other.js"))
        assert gap == pytest.approx(10)

    def test_test_penalty(self):
        assert FileClassifier.priority(_source("x/spec_helpers.js")) < FileClassifier.priority(_source("x/helpers.js"))


# ── categorize ─────────────────────────────────────────────────────


class TestCategorize:
    def test_caps_each_category(self):
        files = {f"src/mod{i:02d}.py": BODY for i in range(SOURCE_CAP + 5)}
        result = FileClassifier().categorize(files)
        assert len(result.backend) == SOURCE_CAP
        assert result.stats["backend_candidates"] == SOURCE_CAP + 5
        assert result.stats["selected"] == SOURCE_CAP

    def test_highest_priority_kept(self):
        files = {f"scripts/tool{i:02d}.py": BODY for i in range(SOURCE_CAP)}
        files["src/core.py"] = BODY
        result = FileClassifier().categorize(files)
        assert result.backend[0].path == "src/core.py"
        assert len(result.backend) == SOURCE_CAP

    def test_manifests_first_in_config(self):
        files = {
            "tsconfig.json": BODY,
            "deep/nested/package.json": BODY,
            "requirements.txt": BODY,
            "package.json": BODY,
            ".eslintrc.json": BODY,
            "Dockerfile": BODY,
            "jest.config.js": BODY,
        }
        result = FileClassifier().categorize(files)
        paths = [f.path for f in result.config]
        assert len(paths) == CONFIG_CAP
        assert paths[:3] == ["package.json", "deep/nested/package.json", "requirements.txt"]

    def test_stats(self):
        files = {
            "src/app.py": BODY,
            "node_modules/x/index.js": BODY,
            "tiny.py": "x",
        }
        result = FileClassifier().categorize(files)
        assert result.stats["total_files"] == 3
        assert result.stats["quality_files"] == 1
        assert result.stats["filtered_out"] == 2

    def test_sizes_mapping_overrides_content_length(self):
        files = {"src/big.py": BODY}
        result = FileClassifier().categorize(files, {"src/big.py": 2_000_000})
        assert result.selected() == []

    def test_selected_order(self):
        files = {
            "package.json": BODY,
            "src/app.py": BODY,
            "src/components/App.jsx": BODY,
            "tests/test_app.py": BODY,
            "styles/app.css": BODY,
        }
        categories = [f.category for f in FileClassifier().categorize(files).selected()]
        assert categories == [
            Category.FRONTEND, Category.BACKEND, Category.STYLE, Category.TEST, Category.CONFIG,
        ]

    def test_source_file_fields(self):
        result = FileClassifier().categorize({"./src/App.TSX": BODY})
        file = result.frontend[0]
        assert file.path == "src/App.TSX"
        assert file.extension == ".tsx"
        assert file.size == 200
        assert file.name == "App.TSX"

    def test_empty_input(self):
        result = FileClassifier().categorize({})
        assert result.selected() == []
        assert result.stats["total_files"] == 0


# ── validate_selection ─────────────────────────────────────────────


class TestValidateSelection:
    def test_empty_selection(self):
        quality = validate_selection(CategorizedFiles())
        assert not quality.is_valid
        assert "No source code files found" in quality.issues
        assert quality.quality == "medium"

    def test_good_selection(self):
        selection = CategorizedFiles(
            backend=[_source("src/app.py")],
            config=[_source("package.json", category=Category.CONFIG)],
        )
        quality = validate_selection(selection)
        assert quality.is_valid
        assert quality.issues == ()
        assert quality.quality == "high"

    def test_peripheral_and_tiny_files(self):
        selection = CategorizedFiles(backend=[_source(f"scripts/s{i}.py", size=60) for i in range(6)])
        quality = validate_selection(selection)
        assert quality.quality == "low"
        assert len(quality.issues) == 3
