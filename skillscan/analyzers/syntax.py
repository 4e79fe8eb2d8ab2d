"""JavaScript/TypeScript front end built on tree-sitter.

``parse`` runs the grammar for the file's dialect and lowers the concrete
syntax tree into a closed set of node types:

    Node
    ├── FunctionLike
    │   ├── FunctionDecl   function foo(a, b) { ... }
    │   └── ArrowFunction  const Foo = (props) => ...
    ├── ClassDecl          class Foo extends React.Component { ... }
    ├── CallExpr           app.get('/users', handler)
    ├── ImportDecl         import x from 'pkg' / import('pkg')
    ├── Decision           if / while / for / case / catch / ?: / && / ||
    ├── AwaitExpr          await fetch(url)
    └── Block              statement block or class body

Nodes are consumed through ``SyntaxVisitor``, which dispatches on the node
class the same way ``ast.NodeVisitor`` does. ``Node.pos`` is a byte offset
into the UTF-8 encoded source.
"""
from __future__ import annotations

from dataclasses import dataclass

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Parser

from skillscan.errors import ScanError

# The javascript grammar accepts JSX; plain .ts keeps "<" for type arguments
LANGUAGES: dict[str, Language] = {
    "javascript": Language(tree_sitter_javascript.language()),
    "typescript": Language(tree_sitter_typescript.language_typescript()),
    "tsx": Language(tree_sitter_typescript.language_tsx()),
}

FUNCTION_NODE_TYPES: set[str] = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
}
ARROW_NODE_TYPES: set[str] = {"arrow_function"}
CLASS_NODE_TYPES: set[str] = {"class_declaration", "abstract_class_declaration", "class"}
BLOCK_NODE_TYPES: set[str] = {"statement_block", "class_body"}

DECISION_NODE_TYPES: dict[str, str] = {
    "if_statement": "if",
    "while_statement": "while",
    "do_statement": "while",
    "for_statement": "for",
    "for_in_statement": "for",
    "switch_case": "case",
    "catch_clause": "catch",
    "ternary_expression": "ternary",
}
LOGICAL_OPERATORS: set[str] = {"&&", "||"}

# Wrappers whose callback is still named by the enclosing declarator
WRAPPERS = frozenset({"memo", "forwardRef", "observer"})

# Parent node types that name the function or class assigned to them, with the field holding the name
_NAMING_PARENTS: dict[str, str] = {
    "variable_declarator": "name",
    "assignment_expression": "left",
    "field_definition": "property",
    "public_field_definition": "name",
}
_NAME_TYPES = {"identifier", "property_identifier", "private_property_identifier", "type_identifier"}


# ── Nodes ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Node:
    line: int
    pos: int


@dataclass(frozen=True)
class FunctionLike(Node):
    name: str | None
    params: int
    first_param: str | None  # identifier, or "{" / "[" for destructuring
    end_line: int
    body: tuple[int, int]
    is_async: bool = False


@dataclass(frozen=True)
class FunctionDecl(FunctionLike):
    pass


@dataclass(frozen=True)
class ArrowFunction(FunctionLike):
    pass


@dataclass(frozen=True)
class ClassDecl(Node):
    name: str | None
    superclass: str | None
    end_line: int


@dataclass(frozen=True)
class CallExpr(Node):
    callee: tuple[str, ...]
    first_arg: str | None = None


@dataclass(frozen=True)
class ImportDecl(Node):
    source: str


@dataclass(frozen=True)
class Decision(Node):
    kind: str


@dataclass(frozen=True)
class AwaitExpr(Node):
    pass


@dataclass(frozen=True)
class Block(Node):
    depth: int


@dataclass(frozen=True)
class Comment:
    text: str
    line: int
    end_line: int

    @property
    def is_doc(self) -> bool:
        return self.text.startswith("/**")


class SyntaxVisitor:
    """Base visitor. Override ``visit_<NodeClass>`` for the nodes you need."""

    def visit(self, node: Node) -> None:
        if not isinstance(node, Node):
            raise TypeError(f"Not a syntax node: {node!r}")
        getattr(self, "visit_" + type(node).__name__, self.generic_visit)(node)

    def generic_visit(self, node: Node) -> None:
        pass


@dataclass(frozen=True)
class Program:
    nodes: tuple[Node, ...]
    comments: tuple[Comment, ...]
    line_count: int

    def accept(self, visitor: SyntaxVisitor) -> None:
        for node in self.nodes:
            visitor.visit(node)


# ── Tree helpers ───────────────────────────────────────────────────


def _text(node) -> str:
    return node.text.decode("utf-8", errors="replace")


def _line(node) -> int:
    return node.start_point[0] + 1


def _end_line(node) -> int:
    return node.end_point[0] + 1


def _callee(call) -> tuple[str, ...]:
    """Trailing identifier chain of a call target: ``a.b.c()`` -> ``("a", "b", "c")``."""
    target = call.child_by_field_name("function")
    parts: list[str] = []
    while target is not None and target.type == "member_expression":
        prop = target.child_by_field_name("property")
        if prop is None:
            break
        parts.append(_text(prop))
        target = target.child_by_field_name("object")
    if target is not None and target.type == "identifier":
        parts.append(_text(target))
    return tuple(reversed(parts))


def _string_value(node) -> str | None:
    if node.type == "string":
        return _text(node)[1:-1]
    if node.type == "template_string" and not any(
        child.type == "template_substitution" for child in node.named_children
    ):
        return _text(node)[1:-1]
    return None


def _first_argument(call) -> str | None:
    args = call.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return None
    values = [child for child in args.named_children if child.type != "comment"]
    return _string_value(values[0]) if values else None


def _declared_name(node) -> str | None:
    """Name given to an anonymous function or class by what it is assigned to."""
    parent = node.parent
    while parent is not None and parent.type in ("arguments", "parenthesized_expression"):
        if parent.type == "arguments":
            call = parent.parent
            if call is None or call.type != "call_expression":
                return None
            callee = _callee(call)
            if not callee or callee[-1] not in WRAPPERS:
                return None
            parent = call.parent
        else:
            parent = parent.parent
    if parent is None or parent.type not in _NAMING_PARENTS:
        return None
    target = parent.child_by_field_name(_NAMING_PARENTS[parent.type])
    if target is not None and target.type == "member_expression":
        target = target.child_by_field_name("property")
    if target is not None and target.type in _NAME_TYPES:
        return _text(target)
    return None


def _param_head(param) -> str | None:
    if param.type in ("required_parameter", "optional_parameter"):
        param = param.child_by_field_name("pattern")
    if param is not None and param.type == "assignment_pattern":
        param = param.child_by_field_name("left")
    if param is None:
        return None
    if param.type == "identifier":
        return _text(param)
    if param.type == "object_pattern":
        return "{"
    if param.type == "array_pattern":
        return "["
    return None


def _superclass(node) -> str | None:
    for child in node.named_children:
        if child.type != "class_heritage":
            continue
        target = child.named_children[0] if child.named_children else None
        if target is not None and target.type == "extends_clause":
            target = target.child_by_field_name("value")
        if target is not None and target.type in ("identifier", "member_expression"):
            return _text(target)
        return None
    return None


def _first_error(root):
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        stack.extend(reversed([c for c in node.children if c.has_error or c.is_missing]))
    return root


def _syntax_error(root) -> ScanError:
    node = _first_error(root)
    if node.is_missing:
        return ScanError(f"Missing {node.type!r}", line=_line(node))
    snippet = _text(node).strip().splitlines()
    near = f" near {snippet[0][:40]!r}" if snippet else ""
    return ScanError(f"Syntax error{near}", line=_line(node))


# ── Lowering ───────────────────────────────────────────────────────


def _function(node, cls: type[FunctionLike]) -> FunctionLike:
    params_node = node.child_by_field_name("parameters")
    if params_node is not None:
        params = [c for c in params_node.named_children if c.type != "comment"]
    else:
        single = node.child_by_field_name("parameter")
        params = [single] if single is not None else []
    name_node = node.child_by_field_name("name")
    body = node.child_by_field_name("body")
    if body is None:
        body = node
    return cls(
        line=_line(node),
        pos=node.start_byte,
        name=_text(name_node) if name_node is not None else _declared_name(node),
        params=len(params),
        first_param=_param_head(params[0]) if params else None,
        end_line=_end_line(node),
        body=(body.start_byte, body.end_byte),
        is_async=any(child.type == "async" for child in node.children),
    )


def _lower(node, depth: int) -> Node | None:
    kind = node.type
    if kind in FUNCTION_NODE_TYPES:
        return _function(node, FunctionDecl)
    if kind in ARROW_NODE_TYPES:
        return _function(node, ArrowFunction)
    if kind in CLASS_NODE_TYPES:
        name_node = node.child_by_field_name("name")
        return ClassDecl(
            line=_line(node),
            pos=node.start_byte,
            name=_text(name_node) if name_node is not None else _declared_name(node),
            superclass=_superclass(node),
            end_line=_end_line(node),
        )
    if kind == "call_expression":
        target = node.child_by_field_name("function")
        if target is not None and target.type == "import":
            source = _first_argument(node)
            return ImportDecl(_line(node), node.start_byte, source) if source is not None else None
        callee = _callee(node)
        if not callee:
            return None
        return CallExpr(_line(node), node.start_byte, callee, _first_argument(node))
    if kind == "import_statement":
        source = node.child_by_field_name("source")
        if source is None:
            return None
        return ImportDecl(_line(node), node.start_byte, _text(source)[1:-1])
    if kind in DECISION_NODE_TYPES:
        return Decision(_line(node), node.start_byte, DECISION_NODE_TYPES[kind])
    if kind == "binary_expression":
        operator = node.child_by_field_name("operator")
        if operator is not None and operator.type in LOGICAL_OPERATORS:
            return Decision(_line(node), node.start_byte, operator.type)
        return None
    if kind == "await_expression":
        return AwaitExpr(_line(node), node.start_byte)
    if kind in BLOCK_NODE_TYPES:
        return Block(_line(node), node.start_byte, depth + 1)
    return None


def parse(source: str, dialect: str = "javascript") -> Program:
    """Parse ``source`` with the grammar for ``dialect``.

    ``dialect`` is one of ``javascript`` (JSX included), ``typescript`` or
    ``tsx``. Nodes come back in document order.

    Raises:
        ScanError: if the tree contains a syntax error or a missing token.
    """
    parser = Parser(LANGUAGES[dialect])
    tree = parser.parse(source.encode("utf-8", errors="replace"))
    root = tree.root_node
    if root.has_error:
        raise _syntax_error(root)

    nodes: list[Node] = []
    comments: list[Comment] = []
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        if node.type == "comment":
            comments.append(Comment(_text(node), _line(node), _end_line(node)))
            continue
        lowered = _lower(node, depth)
        if lowered is not None:
            nodes.append(lowered)
        if isinstance(lowered, Block):
            depth = lowered.depth
        stack.extend((child, depth) for child in reversed(node.named_children))

    return Program(
        nodes=tuple(nodes),
        comments=tuple(comments),
        line_count=source.count("\n") + 1 if source else 0,
    )
