"""Structural analysis of JavaScript and TypeScript sources.

Walks the nodes produced by ``syntax.parse`` and derives components, route
registrations, complexity, hook usage, test counts and the performance
vocabulary for a single file. Nothing here touches shared state; the
result is one immutable ``StructuralFindings`` value.
"""
from __future__ import annotations

import logging
import posixpath
import re

from .models import (
    ComponentInfo,
    ComponentKind,
    EndpointInfo,
    FunctionInfo,
    HttpMethod,
    StructuralFindings,
)
from .syntax import (
    ArrowFunction,
    AwaitExpr,
    Block,
    CallExpr,
    ClassDecl,
    Decision,
    FunctionDecl,
    FunctionLike,
    ImportDecl,
    Program,
    SyntaxVisitor,
    parse,
)

logger = logging.getLogger(__name__)

# Grammar per extension; everything else goes through the javascript grammar, which accepts JSX
DIALECTS: dict[str, str] = {".ts": "typescript", ".tsx": "tsx"}
SCRIPT_EXTENSIONS: set[str] = {".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx"}

JSX_SIGNALS: tuple[re.Pattern[str], ...] = (
    re.compile(r"<[A-Z]\w*"),
    re.compile(r"<>|</>"),
    re.compile(r"return\s*\(\s*<"),
    re.compile(r"<\w+[^>]*=\{"),
)

COMPONENT_BASES: set[str] = {"Component", "PureComponent", "React.Component", "React.PureComponent"}

STATE_RE = re.compile(r"\buse(?:State|Reducer)\s*[<(]|this\.state\b")
HOOK_RE = re.compile(r"\buse[A-Z]\w*\s*\(")
HOOK_NAME_RE = re.compile(r"^use[A-Z]")
HOC_NAME_RE = re.compile(r"^with[A-Z]")

ROUTE_RECEIVERS: set[str] = {"app", "router", "express"}
ROUTE_METHODS: set[str] = {"get", "post", "put", "delete", "patch", "use", "all"}

TEST_CALLEES: set[str] = {"it", "test"}
ASSERT_CALLEES: set[str] = {"expect", "assert"}

UNBATCHED_STATE_RE = re.compile(r"setState\(.*\)\s*[^,]*$", re.MULTILINE)
EMPTY_DEPS_RE = re.compile(r"useEffect\(.*,\s*\[\s*\]\s*\)")
RENDER_BODY_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"render\(\)\s*\{([^}]+)\}"),
    re.compile(r"return\s*\(([^)]+)\)"),
)
LARGE_RENDER_LINES = 100

# Size reported when a declaration has no usable line span
FALLBACK_COMPONENT_SIZE = 10


def can_analyze(path: str) -> bool:
    """Return True if this analyzer can handle the given file."""
    return posixpath.splitext(path)[1].lower() in SCRIPT_EXTENSIONS


def has_jsx_signal(content: str) -> bool:
    return any(pattern.search(content) for pattern in JSX_SIGNALS)


def _stem_name(path: str) -> str:
    stem = posixpath.basename(path).split(".")[0]
    return stem[:1].upper() + stem[1:] if stem else "Component"


class _Collector(SyntaxVisitor):
    """Sorts parsed nodes into per-kind lists."""

    def __init__(self) -> None:
        self.functions: list[FunctionLike] = []
        self.classes: list[ClassDecl] = []
        self.calls: list[CallExpr] = []
        self.imports: list[str] = []
        self.decisions: list[Decision] = []
        self.max_depth = 0
        self.awaits = 0

    def visit_FunctionDecl(self, node: FunctionDecl) -> None:
        self.functions.append(node)

    def visit_ArrowFunction(self, node: ArrowFunction) -> None:
        self.functions.append(node)

    def visit_ClassDecl(self, node: ClassDecl) -> None:
        self.classes.append(node)

    def visit_CallExpr(self, node: CallExpr) -> None:
        self.calls.append(node)
        if node.callee == ("require",) and node.first_arg:
            self.imports.append(node.first_arg)

    def visit_ImportDecl(self, node: ImportDecl) -> None:
        self.imports.append(node.source)

    def visit_Decision(self, node: Decision) -> None:
        self.decisions.append(node)

    def visit_AwaitExpr(self, node: AwaitExpr) -> None:
        self.awaits += 1

    def visit_Block(self, node: Block) -> None:
        self.max_depth = max(self.max_depth, node.depth)


class JavaScriptAnalyzer:
    """Derives ``StructuralFindings`` for one script file.

    Raises ``ScanError`` (from ``syntax.parse``) when the file does not parse
    as script; callers turn that into a recorded warning.
    """

    def analyze(self, path: str, content: str) -> StructuralFindings:
        ext = posixpath.splitext(path)[1].lower()
        program = parse(content, DIALECTS.get(ext, "javascript"))
        collected = _Collector()
        program.accept(collected)

        functions = tuple(self._function_info(program, node, collected.decisions) for node in collected.functions)
        dependencies = tuple(dict.fromkeys(collected.imports))
        components = self._components(path, content, program, collected, dependencies)
        endpoints = self._endpoints(path, collected.calls)

        frameworks: set[str] = set()
        if components:
            frameworks.add("React")
        if endpoints:
            frameworks.add("Express.js")

        hook_calls = tuple(
            call.callee[-1] for call in collected.calls if HOOK_NAME_RE.match(call.callee[-1])
        )
        custom_hooks = tuple(
            node.name for node in collected.functions if node.name and HOOK_NAME_RE.match(node.name)
        )

        findings = StructuralFindings(
            path=path,
            language="typescript" if ext in (".ts", ".tsx") else "javascript",
            line_count=program.line_count,
            functions=functions,
            components=components,
            endpoints=endpoints,
            cyclomatic=len(collected.decisions),
            nesting_depth=collected.max_depth,
            hook_calls=hook_calls,
            custom_hooks=custom_hooks,
            patterns=frozenset(self._patterns(content, collected, custom_hooks)),
            frameworks=frozenset(frameworks),
            test_cases=sum(1 for c in collected.calls if c.callee[0] in TEST_CALLEES and len(c.callee) <= 2),
            assertions=sum(1 for c in collected.calls if c.callee[0] in ASSERT_CALLEES),
            comment_count=len(program.comments),
            optimizations=frozenset(self._optimizations(content)),
            issues=frozenset(self._issues(content)),
            large_renders=self._large_renders(content) if components else 0,
        )
        logger.debug(
            "%s: %d functions, %d components, %d endpoints",
            path, len(functions), len(components), len(endpoints),
        )
        return findings

    # ── Declarations ───────────────────────────────────────────────

    @staticmethod
    def _documented(program: Program, line: int) -> bool:
        return any(c.is_doc and c.end_line in (line - 1, line) for c in program.comments)

    def _function_info(
        self,
        program: Program,
        node: FunctionLike,
        decisions: list[Decision],
    ) -> FunctionInfo:
        start, end = node.body
        inner = sum(1 for d in decisions if start <= d.pos <= end)
        return FunctionInfo(
            name=node.name,
            kind="arrow" if isinstance(node, ArrowFunction) else "function",
            start_line=node.line,
            end_line=node.end_line,
            complexity=1 + inner,
            params=node.params,
            documented=self._documented(program, node.line),
        )

    def _components(
        self,
        path: str,
        content: str,
        program: Program,
        collected: _Collector,
        dependencies: tuple[str, ...],
    ) -> tuple[ComponentInfo, ...]:
        jsx = has_jsx_signal(content)
        has_state = bool(STATE_RE.search(content))
        has_hooks = bool(HOOK_RE.search(content))
        props_access = "props." in content

        candidates: list[tuple[int, ComponentInfo]] = []

        def add(name: str | None, kind: ComponentKind, line: int, end_line: int, first_param: str | None) -> None:
            size = end_line - line + 1 if end_line >= line > 0 else FALLBACK_COMPONENT_SIZE
            candidates.append((line, ComponentInfo(
                name=name or _stem_name(path),
                kind=kind,
                file=path,
                has_props=first_param in ("props", "{") or props_access,
                has_state=has_state,
                has_hooks=has_hooks,
                size=size,
                dependencies=dependencies,
                documented=self._documented(program, line),
            )))

        if jsx:
            for node in collected.functions:
                if node.name and node.name[0].isupper():
                    kind = ComponentKind.ARROW if isinstance(node, ArrowFunction) else ComponentKind.FUNCTION
                    add(node.name, kind, node.line, node.end_line, node.first_param)
        for node in collected.classes:
            named = bool(node.name and node.name[0].isupper())
            if node.superclass in COMPONENT_BASES or (jsx and named):
                add(node.name, ComponentKind.CLASS, node.line, node.end_line, None)

        candidates.sort(key=lambda item: item[0])
        return tuple(info for _, info in candidates)

    # ── Calls ──────────────────────────────────────────────────────

    @staticmethod
    def _endpoints(path: str, calls: list[CallExpr]) -> tuple[EndpointInfo, ...]:
        endpoints: list[EndpointInfo] = []
        for call in calls:
            if len(call.callee) != 2 or call.first_arg is None:
                continue
            receiver, method = call.callee
            if receiver in ROUTE_RECEIVERS and method in ROUTE_METHODS:
                endpoints.append(EndpointInfo(
                    method=HttpMethod(method.upper()),
                    route=call.first_arg or "/",
                    file=path,
                ))
        return tuple(endpoints)

    @staticmethod
    def _patterns(
        content: str,
        collected: _Collector,
        custom_hooks: tuple[str, ...],
    ) -> set[str]:
        patterns: set[str] = set()
        for call in collected.calls:
            name = call.callee[-1]
            if HOOK_NAME_RE.match(name):
                patterns.add("React Hooks")
            if call.callee == ("fetch",) or call.callee[0] == "axios":
                patterns.add("API Calls")
            if name == "createContext":
                patterns.add("Context API")
            if len(call.callee) == 1 and (HOC_NAME_RE.match(name) or name == "connect"):
                patterns.add("Higher-Order Components")
            if call.callee == ("app", "use"):
                patterns.add("Middleware")
        if custom_hooks:
            patterns.add("Custom Hooks")
        if ".Provider" in content:
            patterns.add("Context API")
        if "componentDidCatch" in content or "getDerivedStateFromError" in content:
            patterns.add("Error Boundary")
        if collected.awaits or any(node.is_async for node in collected.functions):
            patterns.add("Async/Await")
        return patterns

    # ── Performance vocabulary ─────────────────────────────────────

    @staticmethod
    def _optimizations(content: str) -> set[str]:
        found: set[str] = set()
        if "useMemo(" in content:
            found.add("useMemo")
        if "useCallback(" in content:
            found.add("useCallback")
        if "React.memo" in content:
            found.add("memo")
        if "lazy(" in content:
            found.add("lazy loading")
        return found

    @staticmethod
    def _issues(content: str) -> set[str]:
        found: set[str] = set()
        if UNBATCHED_STATE_RE.search(content):
            found.add("unbatched state updates")
        if EMPTY_DEPS_RE.search(content):
            found.add("empty dependency arrays")
        return found

    @staticmethod
    def _large_renders(content: str) -> int:
        for pattern in RENDER_BODY_RES:
            match = pattern.search(content)
            if match:
                return 1 if match.group(0).count("\n") + 1 > LARGE_RENDER_LINES else 0
        return 0


def analyze_javascript(path: str, content: str) -> StructuralFindings:
    """Module-level shortcut for ``JavaScriptAnalyzer().analyze``."""
    return JavaScriptAnalyzer().analyze(path, content)
