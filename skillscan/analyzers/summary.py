"""Report assembly.

``SummaryGenerator.assemble`` turns frozen metrics and a score breakdown
into a ``Report``: an immutable nested value whose ``to_dict()`` form
holds only strings, numbers, booleans, lists and string-keyed dicts, so
it can be handed to JSON/YAML encoders or a prompt template as-is.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .aggregator import LIBRARY_LIMIT
from .detailed import DetailedStats
from .insights import TechnologyInsights, technology_insights
from .models import (
    ComponentInfo,
    EndpointInfo,
    ProjectMetrics,
    QualityMetrics,
    ScoreBreakdown,
    TestingMetrics,
)
from .scoring import complexity_rating


def _component_dict(component: ComponentInfo) -> dict[str, Any]:
    return {
        "name": component.name,
        "kind": component.kind.value,
        "file": component.file,
        "has_props": component.has_props,
        "has_state": component.has_state,
        "has_hooks": component.has_hooks,
        "size": component.size,
        "dependencies": list(component.dependencies),
        "documented": component.documented,
    }


def _endpoint_dict(endpoint: EndpointInfo) -> dict[str, Any]:
    return {"method": endpoint.method.value, "route": endpoint.route, "file": endpoint.file}


@dataclass(frozen=True)
class Overview:
    total_files: int = 0
    total_lines: int = 0
    components: int = 0
    api_endpoints: int = 0
    total_functions: int = 0


@dataclass(frozen=True)
class TechnologySummary:
    frameworks: tuple[str, ...] = ()
    libraries: tuple[str, ...] = ()
    database: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()
    detected: tuple[str, ...] = ()
    tech_labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class ComplexitySummary:
    cyclomatic: int = 0
    avg_function_length: int = 0
    nesting_depth: int = 0
    rating: str = "Very Low"


@dataclass(frozen=True)
class ArchitectureSummary:
    separation_level: str = "Poor"
    descriptors: tuple[str, ...] = ()
    components: tuple[ComponentInfo, ...] = ()
    api_endpoints: tuple[EndpointInfo, ...] = ()


@dataclass(frozen=True)
class Report:
    """Final analysis output for one run."""
    overview: Overview = field(default_factory=Overview)
    scores: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    technologies: TechnologySummary = field(default_factory=TechnologySummary)
    complexity: ComplexitySummary = field(default_factory=ComplexitySummary)
    quality: QualityMetrics = field(default_factory=QualityMetrics)
    architecture: ArchitectureSummary = field(default_factory=ArchitectureSummary)
    testing: TestingMetrics = field(default_factory=TestingMetrics)
    insights: TechnologyInsights | None = None
    warnings: tuple[str, ...] = ()
    detailed: DetailedStats | None = None
    detailed_scores: ScoreBreakdown | None = None

    @classmethod
    def empty(cls) -> Report:
        """The well-defined report for a run with no accepted files."""
        return cls()

    def to_dict(self) -> dict[str, Any]:
        tech = self.technologies
        data: dict[str, Any] = {
            "overview": {
                "total_files": self.overview.total_files,
                "total_lines": self.overview.total_lines,
                "components": self.overview.components,
                "api_endpoints": self.overview.api_endpoints,
                "total_functions": self.overview.total_functions,
            },
            "scores": self.scores.as_dict(),
            "technologies": {
                "frameworks": list(tech.frameworks),
                "libraries": list(tech.libraries),
                "database": list(tech.database),
                "patterns": list(tech.patterns),
                "detected": list(tech.detected),
                "tech_labels": list(tech.tech_labels),
            },
            "complexity": {
                "cyclomatic": self.complexity.cyclomatic,
                "avg_function_length": self.complexity.avg_function_length,
                "nesting_depth": self.complexity.nesting_depth,
                "rating": self.complexity.rating,
            },
            "quality": {
                "has_tests": self.quality.has_tests,
                "has_typescript": self.quality.has_typescript,
                "has_linting": self.quality.has_linting,
                "test_files": self.quality.test_files,
            },
            "architecture": {
                "separation_level": self.architecture.separation_level,
                "descriptors": list(self.architecture.descriptors),
                "components": [_component_dict(c) for c in self.architecture.components],
                "api_endpoints": [_endpoint_dict(e) for e in self.architecture.api_endpoints],
            },
            "testing": {
                "test_count": self.testing.test_count,
                "assertions": self.testing.assertions,
                "coverage": self.testing.coverage,
                "unit_tests": self.testing.unit_tests,
                "integration_tests": self.testing.integration_tests,
                "e2e_tests": self.testing.e2e_tests,
            },
            "warnings": list(self.warnings),
        }
        if self.insights is not None:
            data["insights"] = self.insights.to_dict()
        if self.detailed is not None:
            data["detailed"] = self.detailed.to_dict()
        if self.detailed_scores is not None:
            data["detailed_scores"] = self.detailed_scores.as_dict()
        return data


# ── Derived labels ─────────────────────────────────────────────────


def separation_level(metrics: ProjectMetrics) -> str:
    components = len(metrics.architecture.components)
    endpoints = len(metrics.architecture.api_endpoints)
    if components > 5 and endpoints > 3 and metrics.technologies.frameworks:
        return "Excellent"
    if components > 3 and endpoints > 1:
        return "Good"
    if components > 1 or endpoints > 0:
        return "Basic"
    return "Poor"


def architecture_descriptors(metrics: ProjectMetrics) -> tuple[str, ...]:
    """Named architectural patterns, in a fixed order."""
    tech = metrics.technologies
    components = len(metrics.architecture.components)
    endpoints = len(metrics.architecture.api_endpoints)

    descriptors: list[str] = []
    if "React Hooks" in tech.patterns:
        descriptors.append("Hook Pattern")
    if components > 3:
        descriptors.append("Component Architecture")
    if endpoints > 2:
        descriptors.append("RESTful API")
    if "API Calls" in tech.patterns:
        descriptors.append("Service Layer")
    if "Express.js" in tech.frameworks and endpoints > 1:
        descriptors.append("MVC Architecture")
    return tuple(descriptors)


class SummaryGenerator:
    """Builds a ``Report``. Pure: same inputs, same report."""

    def __init__(self, library_limit: int = LIBRARY_LIMIT):
        self.library_limit = library_limit

    def assemble(
        self,
        metrics: ProjectMetrics,
        breakdown: ScoreBreakdown,
        detailed: DetailedStats | None = None,
        detailed_scores: ScoreBreakdown | None = None,
    ) -> Report:
        if metrics.is_empty:
            return Report(
                warnings=metrics.warnings,
                detailed=detailed,
                detailed_scores=detailed_scores,
            )

        arch = metrics.architecture
        tech = metrics.technologies
        complexity = metrics.complexity

        ranked = [name for name, _ in tech.library_usage[:self.library_limit]]

        return Report(
            overview=Overview(
                total_files=arch.total_files,
                total_lines=arch.total_lines,
                components=len(arch.components),
                api_endpoints=len(arch.api_endpoints),
                total_functions=complexity.total_functions,
            ),
            scores=breakdown,
            technologies=TechnologySummary(
                frameworks=tuple(sorted(tech.frameworks)),
                libraries=tuple(ranked),
                database=tuple(sorted(tech.database)),
                patterns=tuple(sorted(tech.patterns)),
                detected=tuple(sorted(tech.detected)),
                tech_labels=tuple(sorted(tech.tech_labels)),
            ),
            complexity=ComplexitySummary(
                cyclomatic=complexity.cyclomatic_complexity,
                avg_function_length=round(complexity.avg_function_length),
                nesting_depth=complexity.nesting_depth,
                rating=complexity_rating(metrics),
            ),
            quality=metrics.quality,
            architecture=ArchitectureSummary(
                separation_level=separation_level(metrics),
                descriptors=architecture_descriptors(metrics),
                components=arch.components,
                api_endpoints=arch.api_endpoints,
            ),
            testing=metrics.testing,
            insights=technology_insights(metrics),
            warnings=metrics.warnings,
            detailed=detailed,
            detailed_scores=detailed_scores,
        )
