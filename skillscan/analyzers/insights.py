"""Derived narrative signals: technology insights and a heuristic profile.

Both are deterministic readings of already-computed metrics. The profile
is the fallback narrative a consumer can show when no language model is
available to write one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .models import ProjectMetrics

if TYPE_CHECKING:
    from .summary import Report

TECH_CATEGORIES: dict[str, dict[str, Any]] = {
    "frontend": {
        "members": ("React", "Vue.js", "Vue", "Angular", "Svelte", "Next.js", "Nuxt.js"),
        "modern": ("React", "Vue.js", "Angular", "Svelte", "Next.js", "Nuxt.js"),
        "legacy": ("jQuery", "Backbone.js"),
    },
    "backend": {
        "members": ("Express.js", "Fastify", "Koa", "NestJS"),
        "modern": ("Express.js", "Fastify", "Next.js", "NestJS", "Koa"),
        "legacy": (),
    },
    "database": {
        "members": ("MongoDB", "PostgreSQL", "MySQL", "Redis", "Firebase", "Prisma"),
        "modern": ("Prisma", "MongoDB", "PostgreSQL", "Firebase"),
        "legacy": ("MySQL",),
    },
    "testing": {
        "members": ("Jest", "Vitest", "Cypress", "Playwright", "Testing Library", "Mocha", "Jasmine"),
        "modern": ("Jest", "Vitest", "Cypress", "Playwright", "Testing Library"),
        "legacy": ("Mocha", "Jasmine"),
    },
    "tooling": {
        "members": ("TypeScript", "ESLint", "Prettier", "Webpack", "Vite", "Rollup"),
        "modern": ("Vite", "ESLint", "Prettier", "TypeScript", "Webpack"),
        "legacy": ("Grunt", "Gulp"),
    },
    # Anything not claimed above
    "utilities": {
        "members": (),
        "modern": ("Lodash", "Axios", "Socket.IO", "Joi", "Yup"),
        "legacy": (),
    },
}

TECH_OVERLOAD = 12
LEGACY_OVERLOAD = 2

ESSENTIAL_CATEGORIES = ("frontend", "backend")
IMPORTANT_CATEGORIES = ("database", "testing")


@dataclass(frozen=True)
class TechnologyInsights:
    stack_type: str
    modernization_level: str
    categories: dict[str, tuple[str, ...]]
    coverage: float = 1.0
    recommendations: tuple[str, ...] = ()
    strengths: tuple[str, ...] = ()
    concerns: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "stack_type": self.stack_type,
            "modernization_level": self.modernization_level,
            "coverage": self.coverage,
            "categories": {k: list(v) for k, v in self.categories.items()},
            "recommendations": list(self.recommendations),
            "strengths": list(self.strengths),
            "concerns": list(self.concerns),
        }


def categorize_technologies(metrics: ProjectMetrics) -> dict[str, tuple[str, ...]]:
    tech = metrics.technologies
    buckets: dict[str, set[str]] = {name: set() for name in TECH_CATEGORIES}
    for name in (*tech.frameworks, *tech.libraries, *tech.database):
        for category, spec in TECH_CATEGORIES.items():
            if name in spec["members"]:
                buckets[category].add(name)
                break
        else:
            buckets["utilities"].add(name)
    return {category: tuple(sorted(names)) for category, names in buckets.items()}


def stack_type(metrics: ProjectMetrics) -> str:
    frameworks = metrics.technologies.frameworks
    if "React" in frameworks and "Express.js" in frameworks and "MongoDB" in metrics.technologies.database:
        return "MERN Stack"
    if "Next.js" in frameworks:
        return "Next.js Full-Stack"
    if "Vue.js" in frameworks:
        return "Vue.js Application"
    if "Angular" in frameworks:
        return "Angular Application"
    if "Express.js" in frameworks:
        return "Node.js Backend"
    return "Custom Stack"


def _count(categories: dict[str, tuple[str, ...]], key: str) -> int:
    return sum(
        1
        for category, names in categories.items()
        for name in names
        if name in TECH_CATEGORIES[category][key]
    )


def modernization_level(categories: dict[str, tuple[str, ...]]) -> str:
    modern = _count(categories, "modern")
    legacy = _count(categories, "legacy")
    if modern > legacy * 2:
        return "Highly Modern"
    if modern > legacy:
        return "Modern"
    if modern == legacy:
        return "Mixed"
    return "Needs Modernization"


def coverage_score(categories: dict[str, tuple[str, ...]]) -> float:
    """1-6: how many of the important stack areas are covered."""
    score = 1.0
    score += sum(1.5 for name in ESSENTIAL_CATEGORIES if categories[name])
    score += sum(1.0 for name in IMPORTANT_CATEGORIES if categories[name])
    if categories["tooling"]:
        score += 0.5
    return min(score, 6.0)


def technology_insights(metrics: ProjectMetrics) -> TechnologyInsights:
    """Stack type, modernization level, recommendations, strengths and concerns."""
    categories = categorize_technologies(metrics)
    libraries = metrics.technologies.libraries

    recommendations: list[str] = []
    if not categories["testing"]:
        recommendations.append("Add testing framework (Jest/Vitest recommended)")
    if "TypeScript" not in libraries:
        recommendations.append("Consider migrating to TypeScript for better type safety")
    if "ESLint" not in libraries:
        recommendations.append("Add ESLint for code quality consistency")
    if categories["backend"] and not categories["database"]:
        recommendations.append("Backend project should include database integration")

    strengths: list[str] = []
    if categories["frontend"] and categories["backend"]:
        strengths.append("Full-stack development capability")
    if categories["testing"]:
        strengths.append("Testing infrastructure in place")
    if len(categories["tooling"]) > 1:
        strengths.append("Good development tooling setup")

    concerns: list[str] = []
    if sum(len(names) for names in categories.values()) > TECH_OVERLOAD:
        concerns.append("High number of technologies may indicate over-engineering")
    if not categories["testing"]:
        concerns.append("No testing framework detected")
    if _count(categories, "legacy") > LEGACY_OVERLOAD:
        concerns.append("Multiple legacy technologies detected")

    return TechnologyInsights(
        stack_type=stack_type(metrics),
        modernization_level=modernization_level(categories),
        categories=categories,
        coverage=coverage_score(categories),
        recommendations=tuple(recommendations),
        strengths=tuple(strengths),
        concerns=tuple(concerns),
    )


# ── Heuristic profile ──────────────────────────────────────────────


def hiring_level(score: float) -> str:
    if score >= 7:
        return "Senior"
    if score >= 5:
        return "Mid"
    if score >= 3:
        return "Junior"
    return "Entry"


def build_profile(report: Report) -> dict[str, Any]:
    """Deterministic profile narrative for a report."""
    score = report.scores.overall
    overview = report.overview
    quality = report.quality
    technologies = [
        *report.technologies.frameworks,
        *report.technologies.libraries,
        *report.technologies.database,
    ]

    if score >= 6:
        skill = "strong"
    elif score >= 4:
        skill = "decent"
    else:
        skill = "basic"
    details = f"Shows {skill} development skills"
    if technologies:
        details += f" with {', '.join(technologies[:3])}"

    if score >= 7:
        verdict = "Excellent"
    elif score >= 5:
        verdict = "Good"
    elif score >= 3:
        verdict = "Decent"
    else:
        verdict = "Basic"

    return {
        "score": score,
        "rationale": [
            f"Analyzed {overview.total_files} files with {overview.total_lines} lines",
            f"Found {overview.components} components and {overview.api_endpoints} API endpoints",
        ],
        "technologies": technologies,
        "strengths": [
            "Uses TypeScript" if quality.has_typescript else "Good JavaScript structure",
            "Well-organized components" if overview.components > 3 else "Basic project structure",
        ],
        "weaknesses": [
            "Limited test coverage" if quality.has_tests else "No tests detected",
            "Small project scope" if overview.total_files < 10 else "Could improve documentation",
        ],
        "improvements": [
            "Add comprehensive tests",
            "Improve documentation",
            "Consider TypeScript if not used",
        ],
        "hiring_potential": {
            "level": hiring_level(score),
            "details": details + ".",
            "watch_areas": [
                "Test coverage" if quality.has_tests else "Testing practices",
                "Code documentation",
                "Project complexity",
            ],
        },
        "conclusion": f"{score}/10 - {verdict} profile with growth potential.",
    }
