"""Data models for project analysis results."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum


class Category(str, Enum):
    """Bucket a file lands in after classification."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    CONFIG = "config"
    TEST = "test"
    STYLE = "style"
    IGNORED = "ignored"


class ComponentKind(str, Enum):
    FUNCTION = "function-component"
    ARROW = "arrow-component"
    CLASS = "class-component"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    USE = "USE"
    ALL = "ALL"


class TechCategory(str, Enum):
    FRAMEWORK = "framework"
    DATABASE = "database"
    LIBRARY = "library"
    TOOL = "tool"
    NONE = "none"


# ── Per-file values ────────────────────────────────────────────────


@dataclass(frozen=True)
class SourceFile:
    """One ingested file. Owned by a single analysis run."""
    path: str
    content: str
    size: int
    extension: str
    category: Category = Category.IGNORED

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ComponentInfo:
    """A detected UI component."""
    name: str
    kind: ComponentKind
    file: str
    has_props: bool = False
    has_state: bool = False
    has_hooks: bool = False
    size: int = 0
    dependencies: tuple[str, ...] = ()
    documented: bool = False


@dataclass(frozen=True)
class EndpointInfo:
    """A detected route registration."""
    method: HttpMethod
    route: str
    file: str


@dataclass(frozen=True)
class FunctionInfo:
    """A function-like declaration with its line span."""
    name: str | None
    kind: str  # "function", "arrow", "def"
    start_line: int
    end_line: int
    complexity: int = 1
    params: int = 0
    documented: bool = False

    @property
    def size(self) -> int:
        return self.end_line - self.start_line + 1


@dataclass(frozen=True)
class StructuralFindings:
    """Everything the structural scanner learned about one file."""
    path: str
    language: str
    line_count: int = 0
    parsed: bool = True
    functions: tuple[FunctionInfo, ...] = ()
    components: tuple[ComponentInfo, ...] = ()
    endpoints: tuple[EndpointInfo, ...] = ()
    cyclomatic: int = 0
    nesting_depth: int = 0
    hook_calls: tuple[str, ...] = ()
    custom_hooks: tuple[str, ...] = ()
    patterns: frozenset[str] = frozenset()
    frameworks: frozenset[str] = frozenset()
    test_cases: int = 0
    assertions: int = 0
    comment_count: int = 0
    optimizations: frozenset[str] = frozenset()
    issues: frozenset[str] = frozenset()
    large_renders: int = 0
    warnings: tuple[str, ...] = ()

    @classmethod
    def unparsed(cls, path: str, language: str, line_count: int, warning: str) -> StructuralFindings:
        return cls(
            path=path,
            language=language,
            line_count=line_count,
            parsed=False,
            warnings=(warning,),
        )


@dataclass(frozen=True)
class ImportResults:
    """Technology signals extracted from one file's imports or manifest."""
    specifiers: tuple[str, ...] = ()
    packages: tuple[str, ...] = ()
    frameworks: frozenset[str] = frozenset()
    databases: frozenset[str] = frozenset()
    libraries: frozenset[str] = frozenset()
    tech_labels: frozenset[str] = frozenset()
    detected: frozenset[str] = frozenset()
    lint_configured: bool = False
    coverage_configured: bool = False
    warnings: tuple[str, ...] = ()


# ── Classification ─────────────────────────────────────────────────


@dataclass
class CategorizedFiles:
    """Prioritized, capped file lists per category."""
    frontend: list[SourceFile] = field(default_factory=list)
    backend: list[SourceFile] = field(default_factory=list)
    config: list[SourceFile] = field(default_factory=list)
    test: list[SourceFile] = field(default_factory=list)
    style: list[SourceFile] = field(default_factory=list)
    stats: dict[str, int] = field(default_factory=dict)

    def selected(self) -> list[SourceFile]:
        """All files that proceed to deep scanning."""
        return [*self.frontend, *self.backend, *self.style, *self.test, *self.config]


@dataclass(frozen=True)
class SelectionQuality:
    is_valid: bool
    issues: tuple[str, ...] = ()
    quality: str = "high"


# ── Project-wide metrics (frozen at handoff) ───────────────────────


@dataclass(frozen=True)
class ArchitectureMetrics:
    components: tuple[ComponentInfo, ...] = ()
    api_endpoints: tuple[EndpointInfo, ...] = ()
    total_files: int = 0
    total_lines: int = 0


@dataclass(frozen=True)
class ComplexityMetrics:
    cyclomatic_complexity: int = 0
    total_functions: int = 0
    total_function_lines: int = 0
    nesting_depth: int = 0

    @property
    def avg_function_length(self) -> float:
        if not self.total_functions:
            return 0.0
        return self.total_function_lines / self.total_functions


@dataclass(frozen=True)
class TechnologyMetrics:
    frameworks: frozenset[str] = frozenset()
    libraries: frozenset[str] = frozenset()
    database: frozenset[str] = frozenset()
    patterns: frozenset[str] = frozenset()
    detected: frozenset[str] = frozenset()
    tech_labels: frozenset[str] = frozenset()
    # (library, number of files that pulled it in), most used first
    library_usage: tuple[tuple[str, int], ...] = ()

    @property
    def total(self) -> int:
        return len(self.frameworks) + len(self.libraries) + len(self.database)


@dataclass(frozen=True)
class QualityMetrics:
    has_tests: bool = False
    has_typescript: bool = False
    has_linting: bool = False
    test_files: int = 0


@dataclass(frozen=True)
class TestingMetrics:
    test_count: int = 0
    assertions: int = 0
    coverage: bool = False
    unit_tests: int = 0
    integration_tests: int = 0
    e2e_tests: int = 0


@dataclass(frozen=True)
class DocumentationMetrics:
    component_docs: int = 0
    function_docs: int = 0
    comment_count: int = 0
    readme_quality: float = 0.0


@dataclass(frozen=True)
class PerformanceMetrics:
    optimizations: frozenset[str] = frozenset()
    issues: frozenset[str] = frozenset()
    large_renders: int = 0


@dataclass(frozen=True)
class HookMetrics:
    calls: int = 0
    custom: int = 0


@dataclass(frozen=True)
class ProjectMetrics:
    """Aggregated signals for one run. Never mutated after ``freeze()``."""
    architecture: ArchitectureMetrics = field(default_factory=ArchitectureMetrics)
    complexity: ComplexityMetrics = field(default_factory=ComplexityMetrics)
    technologies: TechnologyMetrics = field(default_factory=TechnologyMetrics)
    quality: QualityMetrics = field(default_factory=QualityMetrics)
    testing: TestingMetrics = field(default_factory=TestingMetrics)
    documentation: DocumentationMetrics = field(default_factory=DocumentationMetrics)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    hooks: HookMetrics = field(default_factory=HookMetrics)
    warnings: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return self.architecture.total_files == 0


@dataclass(frozen=True)
class ScoreBreakdown:
    """Subscores in [0, 10] plus the weighted overall score."""
    architecture: float = 0.0
    complexity: float = 0.0
    quality: float = 0.0
    technology: float = 0.0
    testing: float = 0.0
    documentation: float = 0.0
    performance: float = 0.0
    size: float = 0.0
    overall: float = 0.0

    def as_dict(self) -> dict[str, float]:
        return asdict(self)
