"""Project analyzer orchestrator.

Takes a snapshot of ``path -> content`` (or reads one from a local
directory), classifies the files, extracts imports and structure per
file, folds everything into one ``MetricsAggregator`` and scores it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from skillscan.config import AnalyzerSettings
from skillscan.errors import IngestionError

from .aggregator import MetricsAggregator
from .classifier import FileClassifier, select_readme, validate_selection
from .detailed import DetailedAggregator, statistical_scores
from .imports import ImportExtractor
from .models import CategorizedFiles, SelectionQuality
from .scanner import StructuralScanner
from .scoring import ScoreCalculator
from .summary import Report, SummaryGenerator

logger = logging.getLogger(__name__)

# Directories never walked when reading a project from disk
SKIP_DIRS: set[str] = {
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "__pycache__",
    ".mypy_cache",
    ".pytest_cache",
    ".ruff_cache",
    ".tox",
    ".nox",
    ".venv",
    "venv",
    "env",
    "dist",
    "build",
    ".build",
    "target",
    ".idea",
    ".vscode",
    ".vs",
    ".next",
    ".nuxt",
    ".output",
    "vendor",
    "Pods",
    ".terraform",
    ".serverless",
    "coverage",
    "htmlcov",
    ".eggs",
}

# Hidden directories that still carry project signal
KEEP_HIDDEN_DIRS: set[str] = {".github"}

# Upper bound on files read from disk (avoid huge repos)
MAX_DISCOVERED_FILES = 5000


def _skipped(rel_parts: tuple[str, ...]) -> bool:
    dirs = rel_parts[:-1]
    if set(dirs) & SKIP_DIRS:
        return True
    if any(part.endswith(".egg-info") for part in dirs):
        return True
    return any(part.startswith(".") and part not in KEEP_HIDDEN_DIRS for part in dirs)


def load_directory(root: Path, max_read_bytes: int = 1_000_000) -> tuple[dict[str, str], dict[str, int]]:
    """Read a project tree into ``(path -> content, path -> size on disk)``.

    Paths are relative with forward slashes. Binary files (a NUL byte in
    the first chunk) are skipped; text is decoded as UTF-8 with
    replacement and truncated at ``max_read_bytes``.

    Raises:
        IngestionError: if ``root`` is not a readable directory.
    """
    root = Path(root)
    if not root.is_dir():
        raise IngestionError(f"Not a directory: {root}", path=str(root))

    files: dict[str, str] = {}
    sizes: dict[str, int] = {}
    try:
        candidates = sorted(root.rglob("*"))
    except OSError as e:
        raise IngestionError(f"Cannot read {root}: {e}", path=str(root)) from e

    for item in candidates:
        rel_parts = item.relative_to(root).parts
        if _skipped(rel_parts) or not item.is_file():
            continue
        try:
            size = item.stat().st_size
            with open(item, "rb") as f:
                raw = f.read(max_read_bytes)
        except OSError as e:
            logger.warning("Cannot read %s: %s", item, e)
            continue
        if b"\x00" in raw:
            logger.debug("Skipping binary file %s", item)
            continue
        rel = "/".join(rel_parts)
        files[rel] = raw.decode("utf-8", errors="replace")
        sizes[rel] = size
        if len(files) >= MAX_DISCOVERED_FILES:
            logger.warning("Hit file limit (%d), skipping remaining files", MAX_DISCOVERED_FILES)
            break

    logger.info("Read %d files from %s", len(files), root)
    return files, sizes


class ProjectAnalyzer:
    """Runs the full pipeline for one snapshot at a time.

    Each ``analyze`` call builds a fresh aggregator, so instances can be
    reused and the same input always yields the same report.
    """

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or AnalyzerSettings()
        self.classifier = FileClassifier(
            min_bytes=self.settings.min_bytes,
            max_bytes=self.settings.max_bytes,
            source_cap=self.settings.source_cap,
            config_cap=self.settings.config_cap,
            ambiguous_default=self.settings.ambiguous_default,
        )
        self.extractor = ImportExtractor()
        self.scanner = StructuralScanner(workers=self.settings.workers)
        self.calculator = ScoreCalculator()
        self.summary = SummaryGenerator(library_limit=self.settings.library_limit)

    def select(
        self,
        files: Mapping[str, str],
        sizes: Optional[Mapping[str, int]] = None,
    ) -> tuple[CategorizedFiles, SelectionQuality]:
        """Classify and cap the input, and judge the resulting selection."""
        categorized = self.classifier.categorize(files, sizes)
        quality = validate_selection(categorized)
        for issue in quality.issues:
            logger.info("Selection: %s", issue)
        return categorized, quality

    def analyze(
        self,
        files: Mapping[str, str],
        sizes: Optional[Mapping[str, int]] = None,
        include_detailed: Optional[bool] = None,
    ) -> Report:
        """Analyze a snapshot and return its report.

        Args:
            files: Project-relative path to decoded text content.
            sizes: Optional raw sizes in bytes; content length is used otherwise.
            include_detailed: Add the dense statistical section. Defaults
                to the ``report.include_detailed`` setting.
        """
        if include_detailed is None:
            include_detailed = self.settings.include_detailed

        # Step 1: Classify, rank and cap
        categorized, _ = self.select(files, sizes)
        selected = categorized.selected()

        aggregator = MetricsAggregator(library_limit=self.settings.library_limit)

        # Step 2: the README is excluded from scanning but still scored
        readme = select_readme(files)
        documents = {readme: files[readme]} if readme is not None else {}
        for content in documents.values():
            aggregator.record_readme(content)

        # Step 3: Imports and structure per file, merged in input order
        for file, findings in zip(selected, self.scanner.scan_all(selected)):
            imports = self.extractor.extract(file)
            aggregator.ingest(file, file.category, imports, findings)

        # Step 4: Freeze and score
        metrics = aggregator.freeze()
        breakdown = self.calculator.compute(metrics)

        # Step 5: Optional dense pass
        detailed = detailed_scores = None
        if include_detailed:
            dense = DetailedAggregator()
            for file in selected:
                dense.ingest(file)
            detailed = dense.finalize(documents)
            detailed_scores = statistical_scores(detailed)

        logger.info("Overall score %.1f for %d files", breakdown.overall, metrics.architecture.total_files)
        return self.summary.assemble(metrics, breakdown, detailed, detailed_scores)

    def analyze_directory(self, path: Path, include_detailed: Optional[bool] = None) -> Report:
        """Read a local project directory and analyze it."""
        files, sizes = load_directory(Path(path), self.settings.max_read_bytes)
        return self.analyze(files, sizes, include_detailed=include_detailed)
