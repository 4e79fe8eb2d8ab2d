"""Import extraction and technology categorization.

Scans file content for module specifiers (ES ``import ... from``, bare
``import '...'`` and CommonJS ``require(...)``; ``import``/``from`` lines in
Python) and reads dependency manifests. External package names are then
mapped onto technology labels through the tables in ``tech_stack``.
"""
from __future__ import annotations

import functools
import json
import logging
import re
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator

from skillscan.errors import ManifestError

from .models import Category, ImportResults, SourceFile, TechCategory
from .tech_stack import (
    DATABASE_PATTERNS,
    FRAMEWORK_PATTERNS,
    LABEL_CATEGORIES,
    LIBRARY_PATTERNS,
    TECH_EXCEPTIONS,
    TECH_GROUPS,
    TECH_STACK_MAP,
)

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger(__name__)

_JS_IMPORT_RE = re.compile(
    r"""import\s+(?:[^'"]*)\s+from\s+['"](?P<named>[^'"]+)['"]"""
    r"""|import\s+['"](?P<bare>[^'"]+)['"]"""
    r"""|require\s*\(\s*['"](?P<cjs>[^'"]+)['"]\s*\)"""
)

_PY_IMPORT_RE = re.compile(
    r"^[ \t]*(?:from[ \t]+(?P<source>[\w.]+)[ \t]+import\b"
    r"|import[ \t]+(?P<modules>[\w.]+(?:[ \t]*,[ \t]*[\w.]+)*))",
    re.MULTILINE,
)

_REQUIREMENT_NAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._\-]*")

JS_EXTENSIONS: set[str] = {".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".vue", ".svelte"}

LINT_PACKAGES: set[str] = {"eslint", "ruff", "flake8", "pylint", "black"}
COVERAGE_PACKAGES: set[str] = {"nyc", "c8", "istanbul", "coverage", "pytest-cov", "@vitest/coverage-v8"}


# ── Specifiers and package names ───────────────────────────────────


def extract_imports(content: str, language: str = "javascript") -> Iterator[str]:
    """Yield module specifiers in source order.

    The generator keeps no state outside the regex scan, so a second call
    on the same content yields the same sequence.
    """
    if language == "python":
        for match in _PY_IMPORT_RE.finditer(content):
            if match.group("source"):
                yield match.group("source")
            else:
                for module in match.group("modules").split(","):
                    yield module.strip()
        return

    for match in _JS_IMPORT_RE.finditer(content):
        yield match.group("named") or match.group("bare") or match.group("cjs")


def normalize_package(specifier: str) -> str | None:
    """Reduce a specifier to its package name.

    ``@scope/name/deep`` -> ``@scope/name``, ``lodash/fp`` -> ``lodash``.
    Relative and absolute paths are project-internal and return ``None``.
    """
    spec = specifier.strip()
    if not spec or spec.startswith((".", "/")):
        return None
    parts = spec.split("/")
    if spec.startswith("@"):
        return "/".join(parts[:2])
    return parts[0]


def _normalize_python_module(module: str) -> str | None:
    if not module or module.startswith("."):
        return None
    top = module.split(".")[0]
    if top in sys.stdlib_module_names:
        return None
    return top


def normalize_tech(package: str) -> str:
    """Map a package to a technology label: exceptions, then groups, then name."""
    if package in TECH_EXCEPTIONS:
        return TECH_EXCEPTIONS[package]
    for label, prefixes in TECH_GROUPS.items():
        if package.startswith(prefixes):
            return label
    return package.split("/")[0].lstrip("@")


def categorize(package: str) -> TechCategory:
    """Bucket a package as framework, database, library or tool."""
    if not package or package.startswith((".", "/")):
        return TechCategory.NONE
    label = normalize_tech(package)
    for category, labels in LABEL_CATEGORIES.items():
        if label in labels:
            return category
    return TechCategory.LIBRARY


def _first_match(name: str, table: tuple[tuple[str, str], ...]) -> str | None:
    for needle, label in table:
        if needle in name:
            return label
    return None


def import_signals(packages: Iterable[str]) -> tuple[set[str], set[str], set[str]]:
    """Split packages into (frameworks, databases, libraries) signal sets.

    Every package name longer than one character is also kept verbatim as a
    library signal.
    """
    frameworks: set[str] = set()
    databases: set[str] = set()
    libraries: set[str] = set()
    for package in packages:
        lowered = package.lower()
        framework = _first_match(lowered, FRAMEWORK_PATTERNS)
        if framework:
            frameworks.add(framework)
        database = _first_match(lowered, DATABASE_PATTERNS)
        if database:
            databases.add(database)
        library = _first_match(lowered, LIBRARY_PATTERNS)
        if library:
            libraries.add(library)
        if len(package) > 1:
            libraries.add(package)
    return frameworks, databases, libraries


@functools.lru_cache(maxsize=None)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w-]){re.escape(keyword)}(?![\w-])")


def match_tech_stack(dependencies: Iterable[str], text: str = "") -> set[str]:
    """Labels from the curated technology map.

    Dependency entries need an exact package name; keyword entries match
    whole words in the dependency names or in ``text``.
    """
    names = {d.lower() for d in dependencies}
    haystack = "\n".join(sorted(names)) + "\n" + text.lower()
    detected: set[str] = set()
    for label, entry in TECH_STACK_MAP.items():
        if any(dep in names for dep in entry.get("dependencies", ())):
            detected.add(label)
        elif any(_keyword_pattern(kw).search(haystack) for kw in entry.get("keywords", ())):
            detected.add(label)
    return detected


def _dedupe(items: Iterable[str | None]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for item in items:
        if item and item not in seen:
            seen[item] = None
    return tuple(seen)


# ── Manifests ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Manifest:
    """Dependency names and tooling hints read from one manifest file."""
    dependencies: tuple[str, ...] = ()
    lint_configured: bool = False
    coverage_configured: bool = False


def _requirement_name(line: str) -> str | None:
    line = line.strip()
    if not line or line.startswith(("#", "-")):
        return None
    match = _REQUIREMENT_NAME_RE.match(line)
    return match.group(0).lower() if match else None


def _parse_package_json(path: str, content: str) -> Manifest:
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON: {e}", path=path) from e
    if not isinstance(data, dict):
        raise ManifestError("Expected a JSON object at the top level", path=path)

    deps: list[str] = []
    for section in ("dependencies", "devDependencies"):
        entries = data.get(section) or {}
        if isinstance(entries, dict):
            deps.extend(entries)
    dev = data.get("devDependencies") or {}
    scripts = data.get("scripts") or {}
    if not isinstance(dev, dict):
        dev = {}
    if not isinstance(scripts, dict):
        scripts = {}

    script_text = " ".join(str(v) for v in scripts.values())
    jest = data.get("jest") if isinstance(data.get("jest"), dict) else {}
    return Manifest(
        dependencies=tuple(deps),
        lint_configured="eslint" in dev or "lint" in scripts,
        coverage_configured=(
            "--coverage" in script_text
            or bool(jest.get("collectCoverage"))
            or bool(COVERAGE_PACKAGES & set(deps))
        ),
    )


def _parse_requirements(content: str) -> Manifest:
    deps = _dedupe(_requirement_name(line) for line in content.splitlines())
    return Manifest(
        dependencies=deps,
        lint_configured=bool(LINT_PACKAGES & set(deps)),
        coverage_configured=bool(COVERAGE_PACKAGES & set(deps)),
    )


def _parse_pyproject(path: str, content: str) -> Manifest:
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML: {e}", path=path) from e

    specs: list[str] = list(data.get("project", {}).get("dependencies", []))
    for extra in data.get("project", {}).get("optional-dependencies", {}).values():
        specs.extend(extra)
    tool = data.get("tool", {})
    poetry_deps = tool.get("poetry", {}).get("dependencies", {})
    specs.extend(name for name in poetry_deps if name != "python")

    deps = _dedupe(_requirement_name(spec) for spec in specs)
    return Manifest(
        dependencies=deps,
        lint_configured=bool(LINT_PACKAGES & set(deps)) or any(t in tool for t in ("ruff", "pylint", "black")),
        coverage_configured=bool(COVERAGE_PACKAGES & set(deps)) or "coverage" in tool,
    )


def parse_manifest(path: str, content: str) -> Manifest:
    """Read dependencies from a known manifest; unknown files yield nothing.

    Raises:
        ManifestError: if a known manifest is malformed.
    """
    name = path.rsplit("/", 1)[-1].lower()
    if name == "package.json":
        return _parse_package_json(path, content)
    if name.startswith("requirements") and name.endswith(".txt"):
        return _parse_requirements(content)
    if name == "pyproject.toml":
        return _parse_pyproject(path, content)
    return Manifest()


# ── Per-file extraction ────────────────────────────────────────────


class ImportExtractor:
    """Produces the technology signals of one accepted file."""

    def extract(self, file: SourceFile) -> ImportResults:
        if file.category is Category.CONFIG:
            return self._extract_manifest(file)

        if file.extension == ".py":
            specifiers = tuple(extract_imports(file.content, "python"))
            packages = _dedupe(_normalize_python_module(s) for s in specifiers)
        elif file.extension in JS_EXTENSIONS:
            specifiers = tuple(extract_imports(file.content))
            packages = _dedupe(normalize_package(s) for s in specifiers)
        else:
            return ImportResults()
        return self._signals(specifiers, packages)

    def _extract_manifest(self, file: SourceFile) -> ImportResults:
        try:
            manifest = parse_manifest(file.path, file.content)
        except ManifestError as e:
            logger.warning("No dependency signal from %s: %s", file.path, e)
            return ImportResults(warnings=(f"{file.path}: {e}",))

        packages = _dedupe(normalize_package(d) for d in manifest.dependencies)
        results = self._signals(manifest.dependencies, packages, text=f"{file.path}\n{file.content}")
        return ImportResults(
            specifiers=results.specifiers,
            packages=results.packages,
            frameworks=results.frameworks,
            databases=results.databases,
            libraries=results.libraries,
            tech_labels=results.tech_labels,
            detected=results.detected,
            lint_configured=manifest.lint_configured,
            coverage_configured=manifest.coverage_configured,
        )

    @staticmethod
    def _signals(
        specifiers: tuple[str, ...],
        packages: tuple[str, ...],
        text: str = "",
    ) -> ImportResults:
        frameworks, databases, libraries = import_signals(packages)
        return ImportResults(
            specifiers=specifiers,
            packages=packages,
            frameworks=frozenset(frameworks),
            databases=frozenset(databases),
            libraries=frozenset(libraries),
            tech_labels=frozenset(normalize_tech(p) for p in packages),
            detected=frozenset(match_tech_stack(packages, text)),
        )
