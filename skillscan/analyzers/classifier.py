"""File classification and prioritization.

Partitions a snapshot of ``path -> content`` into frontend, backend, config,
test and style buckets. Noise is dropped up front: build output, dependency
caches, lockfiles, minified bundles, empty stubs and vendored blobs. Each
bucket is then ranked by relevance and capped so large repositories stay
cheap to scan.
"""
from __future__ import annotations

import logging
import posixpath
from typing import Iterable, Mapping

from .models import CategorizedFiles, Category, SelectionQuality, SourceFile

logger = logging.getLogger(__name__)

MIN_FILE_BYTES = 50
MAX_FILE_BYTES = 1_000_000
SOURCE_CAP = 15
CONFIG_CAP = 5

FRONTEND_EXTENSIONS: set[str] = {".jsx", ".tsx", ".vue", ".svelte", ".html", ".htm"}

STYLE_EXTENSIONS: set[str] = {".css", ".scss", ".sass", ".less", ".styl"}

BACKEND_EXTENSIONS: set[str] = {
    ".py",
    ".java",
    ".go",
    ".rs",
    ".php",
    ".rb",
    ".cs",
    ".cpp",
    ".c",
    ".kt",
    ".scala",
    ".clj",
    ".ex",
    ".exs",
    ".lua",
    ".dart",
}

# Shared by browser and server code; resolved from the directory layout
AMBIGUOUS_EXTENSIONS: set[str] = {".js", ".ts", ".mjs", ".cjs"}

# Matched as substrings of the lowercased file name
CONFIG_NAMES: tuple[str, ...] = (
    "package.json",
    "tsconfig.json",
    "requirements.txt",
    "pyproject.toml",
    "cargo.toml",
    "pom.xml",
    "composer.json",
    "gemfile",
    "pipfile",
    "poetry.lock",
    "dockerfile",
    "docker-compose",
    "makefile",
    "cmake",
    "build.gradle",
    "settings.gradle",
    ".eslintrc",
    "eslint.config",
    ".prettierrc",
    "prettier.config",
    "jest.config",
    "vitest.config",
    "vite.config",
    "webpack.config",
    "babel.config",
    ".babelrc",
)

# Matched against directory segments only, aligned to path boundaries
IGNORED_DIRS: tuple[str, ...] = (
    "node_modules",
    "vendor",
    ".git",
    ".svn",
    ".hg",
    "dist",
    "build",
    "out",
    "target",
    "bin",
    "obj",
    ".next",
    ".nuxt",
    ".vscode",
    ".idea",
    ".vs",
    "coverage",
    ".nyc_output",
    "test-results",
    "logs",
    "tmp",
    "temp",
    "cache",
    ".cache",
    "public/assets",
    "assets/dist",
    "static/dist",
    "bower_components",
    "jspm_packages",
    ".bundle",
    "venv",
    "env",
    ".env",
    "__pycache__",
    ".pytest_cache",
    ".tox",
    ".gradle",
    ".maven",
    "target/classes",
    "target/test-classes",
)

# Matched as suffixes of the lowercased file name
IGNORED_FILES: tuple[str, ...] = (
    ".min.js",
    ".min.css",
    ".bundle.js",
    ".bundle.css",
    ".map",
    "yarn.lock",
    "composer.lock",
    "gemfile.lock",
    "package-lock.json",
    "pnpm-lock.yaml",
    ".log",
    ".logs",
    ".ds_store",
    "thumbs.db",
    "desktop.ini",
    ".swp",
    ".swo",
    ".tmp",
    "~",
    "lcov.info",
    "coverage.xml",
    "readme.md",
    "license",
    "changelog",
    "contributing.md",
)

FRONTEND_HINTS: set[str] = {"components", "pages", "client", "ui"}
BACKEND_HINTS: set[str] = {"api", "server", "controllers", "models", "routes", "services", "db"}

TEST_DIRS: set[str] = {"__tests__", "test", "tests", "spec", "e2e", "cypress"}
TEST_NAME_MARKERS: tuple[str, ...] = (".test.", ".spec.", "_test.")

ENTRYPOINT_TOKENS: tuple[str, ...] = ("index.", "main.", "app.")

# Manifests read first so the tech stack is always visible
CONFIG_ORDER: tuple[str, ...] = ("package.json", "requirements.txt")

# Exact base names scored as the project README
README_NAMES: set[str] = {"readme", "readme.md", "readme.rst", "readme.txt"}


def normalize_path(path: str) -> str:
    """Forward slashes, no leading ``./`` or ``/``."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def _dir_segments(path: str) -> list[str]:
    return [part for part in path.lower().split("/")[:-1] if part]


def _contains_run(segments: list[str], entry: str) -> bool:
    """True if the ``/``-separated entry occurs as consecutive segments."""
    wanted = entry.split("/")
    width = len(wanted)
    return any(segments[i:i + width] == wanted for i in range(len(segments) - width + 1))


def in_ignored_dir(path: str) -> bool:
    dirs = _dir_segments(normalize_path(path))
    return any(_contains_run(dirs, entry) for entry in IGNORED_DIRS)


def is_readme(path: str) -> bool:
    """True for a README base name outside ignored directories."""
    name = posixpath.basename(normalize_path(path)).lower()
    return name in README_NAMES and not in_ignored_dir(path)


def select_readme(paths: Iterable[str]) -> str | None:
    """The shallowest README among ``paths``, ties broken by path."""
    candidates = [path for path in paths if is_readme(path)]
    if not candidates:
        return None
    return min(candidates, key=lambda path: (normalize_path(path).count("/"), path))


class FileClassifier:
    """Categorizes, filters and ranks the files of one project snapshot."""

    def __init__(
        self,
        min_bytes: int = MIN_FILE_BYTES,
        max_bytes: int = MAX_FILE_BYTES,
        source_cap: int = SOURCE_CAP,
        config_cap: int = CONFIG_CAP,
        ambiguous_default: Category = Category.BACKEND,
    ):
        if ambiguous_default not in (Category.FRONTEND, Category.BACKEND):
            raise ValueError(f"ambiguous_default must be frontend or backend, not {ambiguous_default}")
        self.min_bytes = min_bytes
        self.max_bytes = max_bytes
        self.source_cap = source_cap
        self.config_cap = config_cap
        self.ambiguous_default = ambiguous_default

    # ── Classification ─────────────────────────────────────────────

    def classify(self, path: str, size_bytes: int) -> Category:
        """Return the file's category, or ``Category.IGNORED`` if rejected."""
        return self._evaluate(path, size_bytes)[0]

    def rejection_reason(self, path: str, size_bytes: int) -> str | None:
        """Human-readable reason a file is rejected, ``None`` if accepted."""
        return self._evaluate(path, size_bytes)[1]

    def _evaluate(self, path: str, size_bytes: int) -> tuple[Category, str | None]:
        path = normalize_path(path)
        dirs = _dir_segments(path)
        name = posixpath.basename(path).lower()

        for entry in IGNORED_DIRS:
            if _contains_run(dirs, entry):
                return Category.IGNORED, f"inside ignored directory '{entry}'"
        for suffix in IGNORED_FILES:
            if name.endswith(suffix):
                return Category.IGNORED, "generated, lock or metadata file"
        if size_bytes < self.min_bytes:
            return Category.IGNORED, f"smaller than {self.min_bytes} bytes"
        if size_bytes > self.max_bytes:
            return Category.IGNORED, f"larger than {self.max_bytes} bytes"

        if any(marker in name for marker in CONFIG_NAMES):
            return Category.CONFIG, None

        ext = posixpath.splitext(name)[1]
        if ext in STYLE_EXTENSIONS:
            return Category.STYLE, None
        is_source = ext in FRONTEND_EXTENSIONS or ext in BACKEND_EXTENSIONS or ext in AMBIGUOUS_EXTENSIONS
        if not is_source:
            return Category.IGNORED, f"unsupported file type '{ext or name}'"
        if self._is_test(dirs, name):
            return Category.TEST, None
        if ext in FRONTEND_EXTENSIONS:
            return Category.FRONTEND, None
        if ext in BACKEND_EXTENSIONS:
            return Category.BACKEND, None
        return self._disambiguate(dirs), None

    def _disambiguate(self, dirs: list[str]) -> Category:
        present = set(dirs)
        if present & FRONTEND_HINTS:
            return Category.FRONTEND
        if present & BACKEND_HINTS:
            return Category.BACKEND
        return self.ambiguous_default

    @staticmethod
    def _is_test(dirs: list[str], name: str) -> bool:
        if any(marker in name for marker in TEST_NAME_MARKERS):
            return True
        if name.startswith("test_") and name.endswith(".py"):
            return True
        return bool(set(dirs) & TEST_DIRS)

    # ── Prioritization ─────────────────────────────────────────────

    @staticmethod
    def priority(file: SourceFile) -> float:
        """Relevance score used to rank files inside a category."""
        path = "/" + file.path.lower()
        score = min(file.size / 1000, 50)
        if "/src/" in path or "/lib/" in path:
            score += 20
        if "/components/" in path or "/pages/" in path:
            score += 15
        if "/controllers/" in path or "/models/" in path:
            score += 15
        if "test" in path or "spec" in path:
            score -= 10
        if any(token in file.name.lower() for token in ENTRYPOINT_TOKENS):
            score += 10
        return score

    @staticmethod
    def _config_rank(file: SourceFile) -> tuple[int, int, str]:
        name = file.name.lower()
        rank = CONFIG_ORDER.index(name) if name in CONFIG_ORDER else len(CONFIG_ORDER)
        return rank, file.path.count("/"), file.path

    def categorize(
        self,
        files: Mapping[str, str],
        sizes: Mapping[str, int] | None = None,
    ) -> CategorizedFiles:
        """Classify every file, then rank and cap each category."""
        sizes = sizes or {}
        buckets: dict[Category, list[SourceFile]] = {
            Category.FRONTEND: [],
            Category.BACKEND: [],
            Category.CONFIG: [],
            Category.TEST: [],
            Category.STYLE: [],
        }
        filtered_out = 0

        for raw_path, content in files.items():
            path = normalize_path(raw_path)
            size = sizes.get(raw_path)
            if size is None:
                size = len(content.encode("utf-8"))
            category, reason = self._evaluate(path, size)
            if category is Category.IGNORED:
                filtered_out += 1
                logger.debug("Skipping %s: %s", path, reason)
                continue
            buckets[category].append(SourceFile(
                path=path,
                content=content,
                size=size,
                extension=posixpath.splitext(path)[1].lower(),
                category=category,
            ))

        stats = {
            "total_files": len(files),
            "quality_files": sum(len(b) for b in buckets.values()),
            "filtered_out": filtered_out,
        }
        for category, bucket in buckets.items():
            stats[f"{category.value}_candidates"] = len(bucket)

        result = CategorizedFiles(stats=stats)
        for category, bucket in buckets.items():
            if category is Category.CONFIG:
                ranked = sorted(bucket, key=self._config_rank)
                cap = self.config_cap
            else:
                ranked = sorted(bucket, key=lambda f: (-self.priority(f), f.path))
                cap = self.source_cap
            if len(ranked) > cap:
                logger.info(
                    "Keeping %d of %d %s files", cap, len(ranked), category.value,
                )
            setattr(result, category.value, ranked[:cap])

        stats["selected"] = len(result.selected())
        logger.info(
            "Categorized %d files: %d accepted, %d filtered, %d selected",
            stats["total_files"], stats["quality_files"], filtered_out, stats["selected"],
        )
        return result


def validate_selection(categorized: CategorizedFiles) -> SelectionQuality:
    """Flag selections that are unlikely to describe the project well."""
    issues: list[str] = []
    sources = [*categorized.frontend, *categorized.backend]

    if not sources:
        issues.append("No source code files found")
    if not categorized.config:
        issues.append("No configuration files found - might be missing tech stack info")

    small = [f for f in sources if f.size < 100]
    if len(small) > 5:
        issues.append(f"{len(small)} very small files selected - might be empty or minimal")

    in_src = [f for f in sources if "/src/" in "/" + f.path.lower() or "/lib/" in "/" + f.path.lower()]
    if len(sources) > 5 and not in_src:
        issues.append("No files from /src/ or /lib/ directories - might be selecting peripheral files")

    if not issues:
        quality = "high"
    elif len(issues) < 3:
        quality = "medium"
    else:
        quality = "low"
    return SelectionQuality(is_valid=not issues, issues=tuple(issues), quality=quality)
