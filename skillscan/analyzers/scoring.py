"""Deterministic 0-10 scores computed from frozen project metrics.

Every function here is pure. Ratios with an empty denominator contribute
zero, so no score can become NaN.
"""
from __future__ import annotations

import math

from .insights import TECH_CATEGORIES
from .models import ProjectMetrics, ScoreBreakdown

# Categories whose modern members raise the technology score
SCORED_TECH_CATEGORIES: tuple[str, ...] = ("frontend", "backend", "database", "testing")
MODERN_TECHNOLOGIES: dict[str, tuple[str, ...]] = {
    category: TECH_CATEGORIES[category]["modern"] for category in SCORED_TECH_CATEGORIES
}
_MODERN = frozenset(tech for group in MODERN_TECHNOLOGIES.values() for tech in group)

OVERALL_WEIGHTS: dict[str, float] = {
    "size": 0.10,
    "quality": 0.30,
    "architecture": 0.25,
    "testing": 0.15,
    "documentation": 0.10,
    "performance": 0.10,
}
OVERALL_AMPLIFIER = 1.2

# (average decisions per file above which, score, rating), highest first
COMPLEXITY_BANDS: tuple[tuple[float, float, str], ...] = (
    (15, 8, "Very High"),
    (10, 6, "High"),
    (5, 4, "Medium"),
    (2, 3, "Low"),
)


def clamp(value: float, low: float = 0.0, high: float = 10.0) -> float:
    return min(high, max(low, value))


def round1(value: float) -> float:
    """Round half up to one decimal."""
    return math.floor(value * 10 + 0.5) / 10


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole else 0.0


# ── Subscores ──────────────────────────────────────────────────────


def architecture_score(metrics: ProjectMetrics) -> float:
    arch = metrics.architecture
    score = 1.0

    components = len(arch.components)
    if components > 5:
        score += 2
    elif components > 2:
        score += 1

    endpoints = len(arch.api_endpoints)
    if endpoints > 5:
        score += 3
    elif endpoints > 2:
        score += 2
    elif endpoints > 0:
        score += 1

    score += 1 if arch.total_files > 10 else 0.5
    score += 1 if len(metrics.technologies.patterns) > 3 else 0.5
    return clamp(score, high=9)


def average_complexity(metrics: ProjectMetrics) -> float:
    return metrics.complexity.cyclomatic_complexity / max(metrics.architecture.total_files, 1)


def complexity_score(metrics: ProjectMetrics) -> float:
    avg = average_complexity(metrics)
    for threshold, score, _ in COMPLEXITY_BANDS:
        if avg > threshold:
            return score
    return 2


def complexity_rating(metrics: ProjectMetrics) -> str:
    avg = average_complexity(metrics)
    for threshold, _, rating in COMPLEXITY_BANDS:
        if avg > threshold:
            return rating
    return "Very Low"


def quality_score(metrics: ProjectMetrics) -> float:
    quality = metrics.quality
    score = 1.0
    if quality.has_tests:
        score += 2
    if quality.has_typescript:
        score += 2
    if quality.has_linting:
        score += 1
    if quality.test_files > 2:
        score += 1
    return clamp(score, high=9)


def has_coherent_stack(metrics: ProjectMetrics) -> bool:
    """React/Angular + Express + MongoDB, or a meta-framework with any database."""
    tech = metrics.technologies
    mern_like = (
        ("React" in tech.frameworks or "Angular" in tech.frameworks)
        and "Express.js" in tech.frameworks
        and "MongoDB" in tech.database
    )
    meta_framework = ("Next.js" in tech.frameworks or "Nuxt.js" in tech.frameworks) and bool(tech.database)
    return mern_like or meta_framework


def technology_score(metrics: ProjectMetrics) -> float:
    tech = metrics.technologies
    total = tech.total
    everything = [*tech.frameworks, *tech.libraries, *tech.database]
    modern = sum(1 for name in everything if name in _MODERN)

    score = 1 + _ratio(modern, total) * 6
    if has_coherent_stack(metrics):
        score += 2
    if "TypeScript" in tech.libraries:
        score += 1
    if total > 15:
        score -= 2
    elif total > 12:
        score -= 1
    return clamp(score, low=1, high=9)


def testing_score(metrics: ProjectMetrics) -> float:
    testing = metrics.testing
    score = (
        min(5, testing.test_count / 5)
        + (3 if testing.coverage else 0)
        + (1 if testing.integration_tests > 0 else 0)
        + (1 if testing.e2e_tests > 0 else 0)
    )
    return clamp(score)


def documentation_score(metrics: ProjectMetrics) -> float:
    docs = metrics.documentation
    components = len(metrics.architecture.components)
    lines = metrics.architecture.total_lines

    comment_density = min(1, _ratio(docs.comment_count, lines / 100))
    base = min(
        5,
        _ratio(docs.component_docs, components) * 2
        + docs.function_docs / max(1, metrics.complexity.total_functions) * 2
        + comment_density,
    )
    return clamp(base * 2 + docs.readme_quality * 2)


def performance_score(metrics: ProjectMetrics) -> float:
    perf = metrics.performance
    score = (
        len(perf.optimizations) * 0.5
        + (5 - min(5, len(perf.issues) * 0.5))
        - (1 if perf.large_renders > 0 else 0)
    )
    return clamp(score)


def size_score(metrics: ProjectMetrics) -> float:
    files = metrics.architecture.total_files
    lines = metrics.architecture.total_lines
    score = 0.0
    if files > 0:
        score += math.log(files) * 3
    if lines > 0:
        score += math.log(lines / 100) * 2
    return clamp(score)


# ── Breakdown ──────────────────────────────────────────────────────


class ScoreCalculator:
    """Computes the full ``ScoreBreakdown`` for a metrics snapshot."""

    def compute(self, metrics: ProjectMetrics) -> ScoreBreakdown:
        if metrics.is_empty:
            return ScoreBreakdown()

        parts = {
            "size": size_score(metrics),
            "quality": quality_score(metrics),
            "architecture": architecture_score(metrics),
            "testing": testing_score(metrics),
            "documentation": documentation_score(metrics),
            "performance": performance_score(metrics),
        }
        weighted = sum(parts[name] * weight for name, weight in OVERALL_WEIGHTS.items())
        overall = clamp(weighted * OVERALL_AMPLIFIER)

        return ScoreBreakdown(
            architecture=round1(parts["architecture"]),
            complexity=round1(complexity_score(metrics)),
            quality=round1(parts["quality"]),
            technology=round1(technology_score(metrics)),
            testing=round1(parts["testing"]),
            documentation=round1(parts["documentation"]),
            performance=round1(parts["performance"]),
            size=round1(parts["size"]),
            overall=round1(overall),
        )
