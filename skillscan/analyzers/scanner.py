"""Per-file structural scanning.

Routes each file to the analyzer for its language. Files in languages
without a structural analyzer still report their line count. A file that
fails to scan yields an unparsed ``StructuralFindings`` carrying a warning
instead of raising, so one bad file never aborts a run.
"""
from __future__ import annotations

import logging
import posixpath
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Iterator

from skillscan.errors import ScanError

from . import javascript_analyzer, python_ast_analyzer
from .models import SourceFile, StructuralFindings

logger = logging.getLogger(__name__)

LANGUAGE_MAP: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".go": "go",
    ".rs": "rust",
    ".java": "java",
    ".kt": "kotlin",
    ".scala": "scala",
    ".rb": "ruby",
    ".php": "php",
    ".cs": "c_sharp",
    ".c": "c",
    ".cpp": "cpp",
    ".clj": "clojure",
    ".ex": "elixir",
    ".exs": "elixir",
    ".lua": "lua",
    ".dart": "dart",
    ".vue": "vue",
    ".svelte": "svelte",
    ".html": "html",
    ".htm": "html",
    ".css": "css",
    ".scss": "css",
    ".sass": "css",
    ".less": "css",
    ".styl": "css",
    ".json": "json",
    ".toml": "toml",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def detect_language(path: str) -> str:
    return LANGUAGE_MAP.get(posixpath.splitext(path)[1].lower(), "unknown")


class StructuralScanner:
    """Produces one immutable ``StructuralFindings`` per file.

    Args:
        workers: Scans to run concurrently in ``scan_all``. 1 scans
            sequentially. Results are always returned in input order.
    """

    def __init__(self, workers: int = 1):
        self.workers = max(1, workers)
        self._javascript = javascript_analyzer.JavaScriptAnalyzer()

    def scan(self, path: str, content: str) -> StructuralFindings:
        language = detect_language(path)
        line_count = content.count("\n") + 1 if content else 0
        try:
            if python_ast_analyzer.can_analyze(path):
                return python_ast_analyzer.analyze_python(path, content)
            if javascript_analyzer.can_analyze(path):
                return self._javascript.analyze(path, content)
        except ScanError as e:
            location = f" (line {e.line})" if e.line else ""
            logger.warning("Skipping structure of %s%s: %s", path, location, e)
            return StructuralFindings.unparsed(path, language, line_count, f"{path}: {e}{location}")
        except Exception as e:
            logger.warning("Failed to scan %s: %s", path, e)
            return StructuralFindings.unparsed(path, language, line_count, f"{path}: scan failed ({e})")
        return StructuralFindings(path=path, language=language, line_count=line_count)

    def scan_all(self, files: Iterable[SourceFile]) -> Iterator[StructuralFindings]:
        """Scan files, yielding findings in the order the files were given."""
        files = list(files)
        if self.workers == 1 or len(files) < 2:
            for file in files:
                yield self.scan(file.path, file.content)
            return

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            yield from executor.map(lambda f: self.scan(f.path, f.content), files)
