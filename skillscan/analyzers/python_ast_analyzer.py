"""Python analyzer using the stdlib ast module.

Counts functions, decision points, nesting, docstrings and tests, and
detects route handlers declared through Flask/FastAPI style decorators.
"""
from __future__ import annotations

import ast
import logging
import posixpath

from skillscan.errors import ScanError

from .models import EndpointInfo, FunctionInfo, HttpMethod, StructuralFindings

logger = logging.getLogger(__name__)

ROUTE_RECEIVERS: set[str] = {"app", "router", "api", "bp", "blueprint"}
ROUTE_METHODS: set[str] = {"get", "post", "put", "delete", "patch"}

WEB_FRAMEWORKS: dict[str, str] = {
    "flask": "Flask",
    "fastapi": "FastAPI",
    "django": "Django",
}

HTTP_CLIENTS: set[str] = {"requests", "httpx", "aiohttp"}

_NESTING_NODES = (
    ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.If, ast.For,
    ast.AsyncFor, ast.While, ast.With, ast.AsyncWith, ast.Try, ast.match_case,
)


def can_analyze(path: str) -> bool:
    """Return True if this analyzer can handle the given file."""
    return posixpath.splitext(path)[1].lower() == ".py"


def _decisions(node: ast.AST) -> int:
    count = 0
    for child in ast.walk(node):
        if isinstance(child, ast.If | ast.For | ast.AsyncFor | ast.While | ast.IfExp
                      | ast.ExceptHandler | ast.match_case):
            count += 1
        elif isinstance(child, ast.BoolOp):
            count += len(child.values) - 1
    return count


def _max_nesting(node: ast.AST, level: int = 0) -> int:
    deepest = level
    for child in ast.iter_child_nodes(node):
        child_level = level + 1 if isinstance(child, _NESTING_NODES) else level
        deepest = max(deepest, _max_nesting(child, child_level))
    return deepest


def _constant_str(node: ast.AST | None) -> str | None:
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        return node.value
    return None


def _route_endpoints(func: ast.FunctionDef | ast.AsyncFunctionDef, path: str) -> list[EndpointInfo]:
    endpoints: list[EndpointInfo] = []
    for decorator in func.decorator_list:
        if not (isinstance(decorator, ast.Call) and isinstance(decorator.func, ast.Attribute)):
            continue
        receiver = decorator.func.value
        if not (isinstance(receiver, ast.Name) and receiver.id in ROUTE_RECEIVERS):
            continue
        attr = decorator.func.attr
        route = _constant_str(decorator.args[0] if decorator.args else None) or "/"
        if attr in ROUTE_METHODS:
            endpoints.append(EndpointInfo(HttpMethod(attr.upper()), route, path))
        elif attr == "route":
            methods = ["GET"]
            for keyword in decorator.keywords:
                if keyword.arg == "methods" and isinstance(keyword.value, ast.List | ast.Tuple):
                    methods = [m for m in (_constant_str(e) for e in keyword.value.elts) if m]
            for method in methods:
                if method.upper() in HttpMethod.__members__:
                    endpoints.append(EndpointInfo(HttpMethod(method.upper()), route, path))
    return endpoints


def analyze_python(path: str, content: str) -> StructuralFindings:
    """Analyze Python source text.

    Raises:
        ScanError: if the source does not parse.
    """
    line_count = content.count("\n") + 1 if content else 0
    try:
        tree = ast.parse(content, filename=path)
    except SyntaxError as e:
        raise ScanError(f"Syntax error: {e.msg}", path=path, line=e.lineno or 0) from e
    except ValueError as e:
        raise ScanError(f"Unparseable source: {e}", path=path) from e

    functions: list[FunctionInfo] = []
    endpoints: list[EndpointInfo] = []
    imported: set[str] = set()
    patterns: set[str] = set()
    test_cases = 0
    assertions = 0

    for node in ast.walk(tree):
        if isinstance(node, ast.FunctionDef | ast.AsyncFunctionDef):
            args = node.args
            functions.append(FunctionInfo(
                name=node.name,
                kind="def",
                start_line=node.lineno,
                end_line=node.end_lineno or node.lineno,
                complexity=1 + _decisions(node),
                params=len(args.posonlyargs) + len(args.args) + len(args.kwonlyargs),
                documented=ast.get_docstring(node) is not None,
            ))
            endpoints.extend(_route_endpoints(node, path))
            if node.name.startswith("test_"):
                test_cases += 1
            if isinstance(node, ast.AsyncFunctionDef):
                patterns.add("Async/Await")
        elif isinstance(node, ast.Import):
            imported.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.module and not node.level:
                imported.add(node.module.split(".")[0])
        elif isinstance(node, ast.Assert):
            assertions += 1
        elif isinstance(node, ast.Call) and isinstance(node.func, ast.Attribute):
            if node.func.attr.startswith("assert"):
                assertions += 1
            receiver = node.func.value
            if isinstance(receiver, ast.Name) and receiver.id in HTTP_CLIENTS:
                patterns.add("API Calls")

    frameworks = {label for module, label in WEB_FRAMEWORKS.items() if module in imported} if endpoints else set()
    comment_count = sum(1 for line in content.splitlines() if line.lstrip().startswith("#"))

    logger.debug("%s: %d functions, %d endpoints", path, len(functions), len(endpoints))
    return StructuralFindings(
        path=path,
        language="python",
        line_count=line_count,
        functions=tuple(functions),
        endpoints=tuple(endpoints),
        cyclomatic=_decisions(tree),
        nesting_depth=_max_nesting(tree),
        patterns=frozenset(patterns),
        frameworks=frozenset(frameworks),
        test_cases=test_cases,
        assertions=assertions,
        comment_count=comment_count,
    )
