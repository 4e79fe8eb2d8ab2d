"""Project-wide metrics accumulation.

``MetricsAggregator`` is the single writer for one run: the pipeline
calls ``ingest`` once per accepted file, in file-list order, and
``freeze`` hands out an immutable ``ProjectMetrics`` snapshot. Scanners and
extractors never see this object.
"""
from __future__ import annotations

import logging
import re
from collections import Counter

from .models import (
    ArchitectureMetrics,
    Category,
    ComplexityMetrics,
    ComponentInfo,
    DocumentationMetrics,
    EndpointInfo,
    HookMetrics,
    ImportResults,
    PerformanceMetrics,
    ProjectMetrics,
    QualityMetrics,
    SourceFile,
    StructuralFindings,
    TechnologyMetrics,
    TestingMetrics,
)

logger = logging.getLogger(__name__)

LIBRARY_LIMIT = 8

TEST_CONFIG_RE = re.compile(r"test|spec|jest")
LINT_PATH_RE = re.compile(r"eslint|prettier|ruff|flake8|pylint")
TYPESCRIPT_PATH_RE = re.compile(r"\.(ts|tsx)$|tsconfig")
E2E_PATH_RE = re.compile(r"e2e|cypress|playwright")

README_SECTIONS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^#+\s*installation\b", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^#+\s*usage\b", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^#+\s*examples?\b", re.IGNORECASE | re.MULTILINE),
)
README_MIN_LINES = 50


def readme_quality(content: str) -> float:
    """0-2: +0.5 per Installation/Usage/Examples section, +0.5 past 50 lines."""
    score = sum(0.5 for pattern in README_SECTIONS if pattern.search(content))
    if content.count("\n") + 1 > README_MIN_LINES:
        score += 0.5
    return min(score, 2.0)


class MetricsAggregator:
    """Accumulates per-file signals into project metrics.

    Sums are stored and averages derived at read time. Quality flags only
    ever go from False to True.
    """

    def __init__(self, library_limit: int = LIBRARY_LIMIT):
        self.library_limit = library_limit

        self._files = 0
        self._lines = 0
        self._components: list[ComponentInfo] = []
        self._endpoints: list[EndpointInfo] = []

        self._cyclomatic = 0
        self._functions = 0
        self._function_lines = 0
        self._nesting = 0

        self._frameworks: set[str] = set()
        self._libraries: set[str] = set()
        self._databases: set[str] = set()
        self._patterns: set[str] = set()
        self._detected: set[str] = set()
        self._tech_labels: set[str] = set()
        self._library_usage: Counter[str] = Counter()

        self._has_tests = False
        self._has_typescript = False
        self._has_linting = False
        self._test_files = 0

        self._test_count = 0
        self._assertions = 0
        self._coverage = False
        self._unit = 0
        self._integration = 0
        self._e2e = 0

        self._component_docs = 0
        self._function_docs = 0
        self._comments = 0
        self._readme = 0.0

        self._optimizations: set[str] = set()
        self._issues: set[str] = set()
        self._large_renders = 0

        self._hook_calls = 0
        self._custom_hooks = 0

        self._warnings: list[str] = []

    # ── Ingestion ──────────────────────────────────────────────────

    def ingest(
        self,
        file: SourceFile,
        category: Category,
        imports: ImportResults,
        findings: StructuralFindings,
    ) -> None:
        """Merge one file's signals. Called once per accepted file."""
        path = file.path.lower()
        self._files += 1
        self._lines += findings.line_count

        # Quality flags
        if category is Category.TEST or (category is Category.CONFIG and TEST_CONFIG_RE.search(path)):
            self._has_tests = True
            self._test_files += 1
        if LINT_PATH_RE.search(path) or imports.lint_configured:
            self._has_linting = True
        if TYPESCRIPT_PATH_RE.search(path):
            self._has_typescript = True

        # Technologies
        self._frameworks |= imports.frameworks | findings.frameworks
        self._libraries |= imports.libraries
        self._databases |= imports.databases
        self._patterns |= findings.patterns
        self._detected |= imports.detected
        self._tech_labels |= imports.tech_labels
        self._library_usage.update(imports.libraries)

        # Architecture and complexity
        self._components.extend(findings.components)
        self._endpoints.extend(findings.endpoints)
        self._cyclomatic += findings.cyclomatic
        self._functions += len(findings.functions)
        self._function_lines += sum(f.size for f in findings.functions)
        self._nesting = max(self._nesting, findings.nesting_depth)

        # Testing
        if category is Category.TEST:
            self._test_count += findings.test_cases
            self._assertions += findings.assertions
            if "integration" in path:
                self._integration += findings.test_cases
            elif E2E_PATH_RE.search(path):
                self._e2e += findings.test_cases
            else:
                self._unit += findings.test_cases
            if "coverage" in file.content or "istanbul" in file.content:
                self._coverage = True
        if imports.coverage_configured:
            self._coverage = True

        # Documentation and performance
        self._component_docs += sum(1 for c in findings.components if c.documented)
        self._function_docs += sum(1 for f in findings.functions if f.documented)
        self._comments += findings.comment_count
        self._optimizations |= findings.optimizations
        self._issues |= findings.issues
        self._large_renders += findings.large_renders

        self._hook_calls += len(findings.hook_calls)
        self._custom_hooks += len(findings.custom_hooks)

        self._warnings.extend(imports.warnings)
        self._warnings.extend(findings.warnings)

    def record_readme(self, content: str) -> None:
        """Score a README; the best one seen wins."""
        self._readme = max(self._readme, readme_quality(content))

    def record_warning(self, path: str, message: str) -> None:
        self._warnings.append(f"{path}: {message}")

    # ── Snapshot ───────────────────────────────────────────────────

    def ranked_libraries(self) -> tuple[tuple[str, int], ...]:
        """Libraries by number of files using them, then by name."""
        ranked = sorted(self._library_usage.items(), key=lambda item: (-item[1], item[0]))
        return tuple(ranked[:self.library_limit])

    def freeze(self) -> ProjectMetrics:
        """Immutable snapshot of everything ingested so far."""
        logger.info(
            "Aggregated %d files: %d components, %d endpoints, %d functions",
            self._files, len(self._components), len(self._endpoints), self._functions,
        )
        return ProjectMetrics(
            architecture=ArchitectureMetrics(
                components=tuple(self._components),
                api_endpoints=tuple(self._endpoints),
                total_files=self._files,
                total_lines=self._lines,
            ),
            complexity=ComplexityMetrics(
                cyclomatic_complexity=self._cyclomatic,
                total_functions=self._functions,
                total_function_lines=self._function_lines,
                nesting_depth=self._nesting,
            ),
            technologies=TechnologyMetrics(
                frameworks=frozenset(self._frameworks),
                libraries=frozenset(self._libraries),
                database=frozenset(self._databases),
                patterns=frozenset(self._patterns),
                detected=frozenset(self._detected),
                tech_labels=frozenset(self._tech_labels),
                library_usage=self.ranked_libraries(),
            ),
            quality=QualityMetrics(
                has_tests=self._has_tests,
                has_typescript=self._has_typescript,
                has_linting=self._has_linting,
                test_files=self._test_files,
            ),
            testing=TestingMetrics(
                test_count=self._test_count,
                assertions=self._assertions,
                coverage=self._coverage,
                unit_tests=self._unit,
                integration_tests=self._integration,
                e2e_tests=self._e2e,
            ),
            documentation=DocumentationMetrics(
                component_docs=self._component_docs,
                function_docs=self._function_docs,
                comment_count=self._comments,
                readme_quality=self._readme,
            ),
            performance=PerformanceMetrics(
                optimizations=frozenset(self._optimizations),
                issues=frozenset(self._issues),
                large_renders=self._large_renders,
            ),
            hooks=HookMetrics(calls=self._hook_calls, custom=self._custom_hooks),
            warnings=tuple(self._warnings),
        )
