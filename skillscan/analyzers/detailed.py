"""Dense statistical pass over the selected files.

An alternative aggregation to ``MetricsAggregator``: text heuristics over
whole-file content produce size histograms, prop/state complexity, type
usage, error-handling and health indicators, and a separate statistical
score breakdown. It is reported as an optional ``detailed`` section and
never feeds the canonical scores.
"""
from __future__ import annotations

import json
import logging
import math
import posixpath
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping

from .aggregator import readme_quality
from .classifier import select_readme
from .imports import extract_imports, normalize_package
from .models import ScoreBreakdown, SourceFile
from .scoring import clamp, round1

logger = logging.getLogger(__name__)

NON_MENTIONABLE: tuple[str, ...] = (
    "eslint", "@eslint", "@types", "path", "http", "@vitejs", "webpack", "babel",
    "vite", "globals", "prettier", "jest", "mocha", "react-dom",
    "eslint-plugin-", "plugin-", "postcss", "autoprefixer", "@tailwindcss/",
)
LOCAL_ALIAS_RE = re.compile(r"^(src|components|pages|utils|hooks)")
FRAMEWORK_NAME_RE = re.compile(r"react|vue|angular|svelte", re.IGNORECASE)
STATE_LIBRARY_RE = re.compile(r"redux|mobx|recoil|zustand", re.IGNORECASE)
LIBRARY_NAME_RE = re.compile(r"redux|mobx|recoil|zustand|graphql|axios", re.IGNORECASE)

COMPONENT_DECL_RE = re.compile(r"function\s+[A-Z]\w*|class\s+[A-Z]\w*|export\s+default\s+function\s+[A-Z]\w*")
FUNCTION_DECL_RE = re.compile(r"(?:function\s+\w+|const\s+\w+\s*=\s*(?:\([^)]*\)\s*=>|function))")
PROP_RE = re.compile(r"props\.\w+|{\s*\w+\s*}")
BRANCH_RE = re.compile(r"if\s*\(|else\s*|case\s+|default\s*:|&&|\|\|")
PARAMS_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"function\s*\w*\s*\(([^)]*)\)"),
    re.compile(r"const\s*\w*\s*=\s*\(([^)]*)\)\s*=>"),
)
DOC_COMPONENT_RE = re.compile(r"/\*\*.*@component", re.DOTALL)
RENDER_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"render\(\)\s*\{([^}]+)\}"),
    re.compile(r"return\s*\(([^)]+)\)"),
)
HOOK_TOKEN_RE = re.compile(r"use[A-Z]\w*")
CUSTOM_HOOK_RE = re.compile(r"const\s+use[A-Z]\w*\s*=")
TEST_FILE_RE = re.compile(r"(test|spec)\.(js|jsx|ts|tsx)$")
TEST_CALL_RE = re.compile(r"test\(|it\(|describe\(")
ASSERT_RE = re.compile(r"expect\(|assert\(")
INTERFACE_RE = re.compile(r"interface\s+\w+")
TYPE_ANNOTATION_RE = re.compile(r":\s*\w+")
TRY_CATCH_RE = re.compile(r"try\s*\{|catch\s*\(")
ERROR_BOUNDARY_RE = re.compile(r"componentDidCatch|ErrorBoundary")
GLOBAL_HANDLER_RE = re.compile(r"window\.onerror|process\.on\('unhandledRejection'|unhandledRejection")
JSDOC_RE = re.compile(r"/\*\*[^*]*\*/|@param|@return")
COMMENT_MARK_RE = re.compile(r"//|/\*|\* @|jsdoc")
UNBATCHED_STATE_RE = re.compile(r"setState\(.*\)\s*[^,]*$", re.MULTILINE)
EMPTY_DEPS_RE = re.compile(r"useEffect\(.*,\s*\[\s*\]\s*\)")

MODULE_DIRS: tuple[str, ...] = ("components/", "hooks/", "utils/", "services/", "store/")
TRACKED_HOOKS: tuple[str, ...] = ("useState", "useEffect", "useContext")

STATISTICAL_WEIGHTS: dict[str, float] = {
    "size": 0.10,
    "quality": 0.30,
    "architecture": 0.25,
    "testing": 0.15,
    "documentation": 0.10,
    "performance": 0.10,
}


def _lines(content: str) -> int:
    return content.count("\n") + 1


def _avg(total: float, count: int, digits: int = 1) -> float:
    return round(total / count, digits) if count else 0.0


def _size_bucket(lines: int, small: int, medium: int) -> str:
    if lines < small:
        return "small"
    if lines < medium:
        return "medium"
    return "large"


@dataclass(frozen=True)
class DetailedStats:
    """Result of the dense pass. Sections are plain JSON-ready mappings."""
    total_files: int = 0
    total_lines: int = 0
    file_types: dict[str, int] = field(default_factory=dict)
    components: dict[str, Any] = field(default_factory=dict)
    functions: dict[str, Any] = field(default_factory=dict)
    hooks: dict[str, Any] = field(default_factory=dict)
    tests: dict[str, Any] = field(default_factory=dict)
    types: dict[str, Any] = field(default_factory=dict)
    architecture: dict[str, Any] = field(default_factory=dict)
    error_handling: dict[str, Any] = field(default_factory=dict)
    documentation: dict[str, Any] = field(default_factory=dict)
    performance: dict[str, Any] = field(default_factory=dict)
    technologies: dict[str, list[str]] = field(default_factory=dict)
    health: dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "file_types": dict(self.file_types),
            "components": dict(self.components),
            "functions": dict(self.functions),
            "hooks": dict(self.hooks),
            "tests": dict(self.tests),
            "types": dict(self.types),
            "architecture": dict(self.architecture),
            "error_handling": dict(self.error_handling),
            "documentation": dict(self.documentation),
            "performance": dict(self.performance),
            "technologies": {k: list(v) for k, v in self.technologies.items()},
            "health": dict(self.health),
        }


class DetailedAggregator:
    """Accumulates the dense statistics one file at a time."""

    def __init__(self) -> None:
        self.files = 0
        self.lines = 0
        self.file_types: Counter[str] = Counter()

        self.component_count = 0
        self.component_quality = 0
        self.component_sizes: Counter[str] = Counter()
        self.prop_complexity = 0
        self.state_complexity = 0
        self.reusable = 0

        self.function_count = 0
        self.function_complexity = 0
        self.function_params = 0
        self.function_sizes: Counter[str] = Counter()

        self.hook_count = 0
        self.custom_hooks = 0
        self.hook_usage: Counter[str] = Counter()

        self.test_count = 0
        self.assertions = 0
        self.coverage = False
        self.test_types: Counter[str] = Counter()

        self.has_typescript = False
        self.interfaces = 0
        self.type_annotations = 0

        self.modularity = 0
        self.separation = 0.0

        self.try_catch = 0
        self.error_boundaries = 0
        self.global_handlers = 0

        self.component_docs = 0
        self.function_docs = 0
        self.comment_marks = 0

        self.optimizations: set[str] = set()
        self.issues: set[str] = set()
        self.large_renders = 0

        self.frameworks: set[str] = set()
        self.libraries: set[str] = set()
        self.tools: set[str] = set()
        self.state_management: set[str] = set()

        self._package_json: str | None = None
        self._tsconfig: str | None = None

    # ── Per file ───────────────────────────────────────────────────

    def ingest(self, file: SourceFile) -> None:
        path, content = file.path, file.content
        if not content:
            return
        self.files += 1
        self.lines += _lines(content)
        ext = posixpath.splitext(path)[1].lstrip(".").lower() or posixpath.basename(path).lower()
        self.file_types[ext] += 1

        name = posixpath.basename(path).lower()
        if name == "package.json" and self._package_json is None:
            self._package_json = content
        elif name == "tsconfig.json" and self._tsconfig is None:
            self._tsconfig = content

        self._technologies(content)

        is_component = ext in ("jsx", "tsx") and (
            COMPONENT_DECL_RE.search(content) is not None or "components/" in path
        )
        if is_component:
            self.component_count += 1
            self._component(content)

        declarations = FUNCTION_DECL_RE.findall(content)
        for _ in declarations:
            self._function(content)

        hooks = HOOK_TOKEN_RE.findall(content)
        self.hook_count += len(hooks)
        for hook in hooks:
            if hook in TRACKED_HOOKS:
                self.hook_usage[hook] += 1
        if CUSTOM_HOOK_RE.search(content):
            self.custom_hooks += 1
            self.hook_usage["custom"] += 1

        if TEST_FILE_RE.search(path):
            self._tests(path, content)

        if ext in ("ts", "tsx"):
            self.has_typescript = True
            self.interfaces += len(INTERFACE_RE.findall(content))
            self.type_annotations += len(TYPE_ANNOTATION_RE.findall(content))

        if any(d in path for d in MODULE_DIRS):
            self.modularity += 1
        if "components/" in path and ("utils/" in path or "hooks/" in path):
            self.separation -= 0.5

        self.try_catch += len(TRY_CATCH_RE.findall(content))
        self.error_boundaries += len(ERROR_BOUNDARY_RE.findall(content))
        self.global_handlers += len(GLOBAL_HANDLER_RE.findall(content))

        has_jsdoc = JSDOC_RE.search(content) is not None
        if is_component and has_jsdoc:
            self.component_docs += 1
        if declarations and has_jsdoc:
            self.function_docs += 1
        self.comment_marks += len(COMMENT_MARK_RE.findall(content))

        self._performance(content)

    def _technologies(self, content: str) -> None:
        for specifier in extract_imports(content):
            package = normalize_package(specifier)
            if not package or LOCAL_ALIAS_RE.match(package):
                continue
            if (
                package.startswith(NON_MENTIONABLE)
                or "-plugin-" in package
                or package.endswith(("-loader", "-config"))
            ):
                continue
            if FRAMEWORK_NAME_RE.search(package):
                self.frameworks.add(package)
            elif LIBRARY_NAME_RE.search(package):
                if STATE_LIBRARY_RE.search(package):
                    self.state_management.add(package)
                self.libraries.add(package)
            else:
                self.tools.add(package)

    def _component(self, content: str) -> None:
        self.component_sizes[_size_bucket(_lines(content), 50, 150)] += 1

        props = len(PROP_RE.findall(content))
        self.prop_complexity += props
        self.state_complexity += content.count("useState(")
        self.reusable += 1 if props else 0

        quality = 0
        if "PropTypes" in content or "interface Props" in content:
            quality += 1
        if "memo(" in content:
            quality += 1
        if "useCallback(" in content:
            quality += 1
        if "useMemo(" in content:
            quality += 1
        if "ErrorBoundary" in content or "componentDidCatch" in content:
            quality += 1
        if DOC_COMPONENT_RE.search(content):
            quality += 1
        self.component_quality += min(quality, 5)

        for pattern in RENDER_RES:
            match = pattern.search(content)
            if match:
                if _lines(match.group(0)) > 100:
                    self.large_renders += 1
                break

    def _function(self, content: str) -> None:
        self.function_sizes[_size_bucket(_lines(content), 10, 30)] += 1
        self.function_complexity += 1 + len(BRANCH_RE.findall(content))
        params = 0
        for pattern in PARAMS_RES:
            match = pattern.search(content)
            if match:
                params = len([p for p in match.group(1).split(",") if p.strip()])
                break
        self.function_params += params
        self.function_count += 1

    def _tests(self, path: str, content: str) -> None:
        count = len(TEST_CALL_RE.findall(content))
        self.test_count += count
        if "integration" in path:
            self.test_types["integration"] += count
        elif "e2e" in path:
            self.test_types["e2e"] += count
        else:
            self.test_types["unit"] += count
        self.assertions += len(ASSERT_RE.findall(content))
        if "coverage" in content or "istanbul" in content:
            self.coverage = True

    def _performance(self, content: str) -> None:
        if "useMemo(" in content:
            self.optimizations.add("useMemo")
        if "useCallback(" in content:
            self.optimizations.add("useCallback")
        if "React.memo" in content:
            self.optimizations.add("memo")
        if "lazy(" in content:
            self.optimizations.add("lazy loading")
        if UNBATCHED_STATE_RE.search(content):
            self.issues.add("unbatched state updates")
        if EMPTY_DEPS_RE.search(content):
            self.issues.add("empty dependency arrays")

    # ── Finalize ───────────────────────────────────────────────────

    def _load_json(self, content: str | None, label: str) -> dict | None:
        if content is None:
            return None
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.debug("Ignoring unparseable %s: %s", label, e)
            return None
        return data if isinstance(data, dict) else None

    def _health(self) -> dict[str, bool]:
        health = {"linting": False, "formatting": False, "ci_cd": False}
        pkg = self._load_json(self._package_json, "package.json")
        if pkg is None:
            return health
        dev = pkg.get("devDependencies") if isinstance(pkg.get("devDependencies"), dict) else {}
        scripts = pkg.get("scripts") if isinstance(pkg.get("scripts"), dict) else {}
        health["linting"] = bool(dev.get("eslint")) or bool(scripts.get("lint"))
        health["formatting"] = bool(dev.get("prettier")) or bool(scripts.get("format"))
        health["ci_cd"] = bool(scripts.get("test")) or bool(scripts.get("build"))

        deps = pkg.get("dependencies") if isinstance(pkg.get("dependencies"), dict) else {}
        for dep in deps:
            if dep.startswith(NON_MENTIONABLE):
                continue
            if FRAMEWORK_NAME_RE.search(dep):
                self.frameworks.add(dep)
            elif LIBRARY_NAME_RE.search(dep):
                self.libraries.add(dep)
        return health

    def _strict_types(self) -> bool:
        tsconfig = self._load_json(self._tsconfig, "tsconfig.json")
        if tsconfig is None:
            return False
        options = tsconfig.get("compilerOptions")
        return bool(isinstance(options, dict) and options.get("strict"))

    def _dependency_health(self) -> int:
        total = len(self.frameworks) + len(self.libraries) + len(self.tools)
        if total == 0:
            return 5
        outdated_risk = 1 if len(self.libraries) > 5 else 0
        framework_risk = 1 if len(self.frameworks) > 1 else 0
        return max(0, 5 - outdated_risk - framework_risk)

    def finalize(self, documents: Mapping[str, str] | None = None) -> DetailedStats:
        """Derive averages and 0-5 sub-scores.

        Args:
            documents: Non-source files (README and friends) keyed by path.
        """
        documents = documents or {}
        health = self._health()
        strict = self._strict_types()

        readme_path = select_readme(documents)
        readme = readme_quality(documents[readme_path]) if readme_path is not None else 0.0

        comment_density = min(1, self.comment_marks / (self.lines / 100)) if self.lines else 0
        doc_score = min(
            5,
            (self.component_docs / self.component_count if self.component_count else 0) * 2
            + self.function_docs / max(1, self.function_count) * 2
            + comment_density,
        )
        performance_score = min(
            5,
            len(self.optimizations) * 0.5
            + (5 - min(5, len(self.issues) * 0.5))
            - (1 if self.large_renders > 0 else 0),
        )
        error_score = min(
            5,
            math.floor(self.error_boundaries * 2)
            + min(2, self.try_catch / 5)
            + min(1, self.global_handlers),
        )
        estimated_vars = self.lines * 0.3

        return DetailedStats(
            total_files=self.files,
            total_lines=self.lines,
            file_types=dict(sorted(self.file_types.items())),
            components={
                "count": self.component_count,
                "quality": _avg(self.component_quality, self.component_count),
                "size_distribution": {k: self.component_sizes[k] for k in ("small", "medium", "large")},
                "prop_complexity": _avg(self.prop_complexity, self.component_count),
                "state_complexity": _avg(self.state_complexity, self.component_count),
                "reusability": round(self.reusable / self.component_count * 100) if self.component_count else 0,
            },
            functions={
                "count": self.function_count,
                "complexity": _avg(self.function_complexity, self.function_count),
                "size_distribution": {k: self.function_sizes[k] for k in ("small", "medium", "large")},
                "params": _avg(self.function_params, self.function_count),
            },
            hooks={
                "count": self.hook_count,
                "custom": self.custom_hooks,
                "usage": {k: self.hook_usage[k] for k in (*TRACKED_HOOKS, "custom")},
            },
            tests={
                "count": self.test_count,
                "coverage": self.coverage,
                "type_distribution": {k: self.test_types[k] for k in ("unit", "integration", "e2e")},
                "assertions_per_test": _avg(self.assertions, self.test_count),
            },
            types={
                "has_typescript": self.has_typescript,
                "interfaces": self.interfaces,
                "type_usage": round(self.type_annotations / estimated_vars * 100) if estimated_vars else 0,
                "strictness": strict,
            },
            architecture={
                "modularity": min(5, self.modularity // 5),
                "separation": max(0.0, min(5.0, 3 + self.separation)),
                "dependency_health": self._dependency_health(),
                "circular_dependencies": 0,
            },
            error_handling={
                "score": error_score,
                "error_boundaries": self.error_boundaries,
                "try_catch_blocks": self.try_catch,
                "global_handlers": self.global_handlers,
            },
            documentation={
                "score": round(doc_score, 2),
                "component_docs": self.component_docs,
                "function_docs": self.function_docs,
                "readme_quality": readme,
            },
            performance={
                "score": performance_score,
                "optimizations": sorted(self.optimizations),
                "issues": sorted(self.issues),
                "large_renders": self.large_renders,
            },
            technologies={
                "frameworks": sorted(self.frameworks),
                "libraries": sorted(self.libraries),
                "tools": sorted(self.tools),
                "state_management": sorted(self.state_management),
            },
            health=health,
        )


def statistical_scores(stats: DetailedStats) -> ScoreBreakdown:
    """Score breakdown of the dense pass.

    Only size, quality, architecture, testing, documentation and
    performance are defined here; complexity and technology stay 0.
    """
    if stats.total_files == 0:
        return ScoreBreakdown()

    size = 0.0
    size += math.log(stats.total_files) * 3
    if stats.total_lines > 0:
        size += math.log(stats.total_lines / 100) * 2

    quality = (
        stats.components["quality"] * 2
        + (5 - min(5, stats.functions["complexity"] / 2))
        + (2 if stats.types["has_typescript"] else 0)
        + (1 if stats.types["strictness"] else 0)
        + min(2, stats.hooks["custom"] * 0.5)
    )
    arch = stats.architecture
    architecture = (
        arch["modularity"] * 2
        + arch["separation"] * 2
        + arch["dependency_health"]
        + (5 - min(5, arch["circular_dependencies"]))
    )
    tests = stats.tests
    testing = (
        min(5, tests["count"] / 5)
        + (3 if tests["coverage"] else 0)
        + (1 if tests["type_distribution"]["integration"] > 0 else 0)
        + (1 if tests["type_distribution"]["e2e"] > 0 else 0)
    )
    documentation = stats.documentation["score"] * 2 + stats.documentation["readme_quality"] * 2
    performance = stats.performance["score"] * 2 + (5 - min(5, len(stats.performance["issues"])))

    parts = {
        "size": clamp(size),
        "quality": clamp(quality),
        "architecture": clamp(architecture),
        "testing": clamp(testing),
        "documentation": clamp(documentation),
        "performance": clamp(performance),
    }
    overall = clamp(sum(parts[k] * w for k, w in STATISTICAL_WEIGHTS.items()) * 1.2)
    return ScoreBreakdown(
        size=round1(parts["size"]),
        quality=round1(parts["quality"]),
        architecture=round1(parts["architecture"]),
        testing=round1(parts["testing"]),
        documentation=round1(parts["documentation"]),
        performance=round1(parts["performance"]),
        overall=round1(overall),
    )
