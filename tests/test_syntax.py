"""Tests for the tree-sitter JavaScript/TypeScript front end."""

import textwrap

import pytest

from skillscan.analyzers.syntax import (
    ArrowFunction,
    AwaitExpr,
    Block,
    CallExpr,
    ClassDecl,
    Decision,
    FunctionDecl,
    ImportDecl,
    SyntaxVisitor,
    parse,
)
from skillscan.errors import ScanError


def _nodes(program, cls):
    return [n for n in program.nodes if isinstance(n, cls)]


# ── Declarations ───────────────────────────────────────────────────


class TestFunctions:
    def test_function_declaration(self):
        program = parse(textwrap.dedent("""\
            function add(a, b) {
              if (a > b) {
                return a;
              }
              return b;
            }
        """))
        fn = _nodes(program, FunctionDecl)[0]
        assert fn.name == "add"
        assert fn.params == 2
        assert fn.first_param == "a"
        assert (fn.line, fn.end_line) == (1, 6)

    def test_arrow_takes_declarator_name(self):
        program = parse("const Header = ({ title }) => title;")
        arrow = _nodes(program, ArrowFunction)[0]
        assert arrow.name == "Header"
        assert arrow.first_param == "{"
        assert arrow.params == 1

    def test_single_parameter_arrow(self):
        arrow = _nodes(parse("const twice = x => x * 2;"), ArrowFunction)[0]
        assert (arrow.name, arrow.params, arrow.first_param) == ("twice", 1, "x")

    def test_arrow_through_memo_wrapper(self):
        program = parse("const Row = React.memo((props) => props.x);")
        assert _nodes(program, ArrowFunction)[0].name == "Row"

    def test_callback_is_anonymous(self):
        program = parse("items.map((item) => item.id);")
        assert _nodes(program, ArrowFunction)[0].name is None

    def test_async_arrow(self):
        program = parse("const load = async (id) => { await get(id); };")
        arrow = _nodes(program, ArrowFunction)[0]
        assert arrow.is_async
        assert arrow.name == "load"
        assert len(_nodes(program, AwaitExpr)) == 1

    def test_typescript_parameters(self):
        program = parse("function greet(name: string, loud?: boolean): string { return name; }", "typescript")
        fn = _nodes(program, FunctionDecl)[0]
        assert (fn.params, fn.first_param) == (2, "name")

    def test_generic_arrow_in_tsx(self):
        program = parse(textwrap.dedent("""\
            const identity = <T,>(value: T): T => value;
            export function Header() { return (<h1>Hi</h1>); }
        """), "tsx")
        assert [n.name for n in program.nodes if isinstance(n, (FunctionDecl, ArrowFunction))] == [
            "identity", "Header",
        ]

    def test_method_definition_is_not_a_function(self):
        program = parse("class A {\n  render() { return 1; }\n}\n")
        assert _nodes(program, FunctionDecl) == []
        assert _nodes(program, CallExpr) == []


class TestClasses:
    def test_dotted_superclass(self):
        program = parse("class Panel extends React.Component {\n  render() { return null; }\n}\n")
        cls = _nodes(program, ClassDecl)[0]
        assert cls.name == "Panel"
        assert cls.superclass == "React.Component"
        assert cls.end_line == 3

    def test_typescript_superclass(self):
        program = parse("class Store extends Base<State> implements Disposable {}\n", "typescript")
        cls = _nodes(program, ClassDecl)[0]
        assert (cls.name, cls.superclass) == ("Store", "Base")

    def test_class_expression_takes_declarator_name(self):
        cls = _nodes(parse("const Modal = class extends Component {};"), ClassDecl)[0]
        assert (cls.name, cls.superclass) == ("Modal", "Component")


# ── Calls and imports ──────────────────────────────────────────────


class TestCalls:
    def test_member_call_with_string_argument(self):
        call = _nodes(parse("router.get('/items', list);"), CallExpr)[0]
        assert call.callee == ("router", "get")
        assert call.first_arg == "/items"

    def test_plain_template_argument(self):
        call = _nodes(parse("app.use(`/static`, serve);"), CallExpr)[0]
        assert call.first_arg == "/static"

    def test_interpolated_argument_is_not_a_literal(self):
        call = _nodes(parse("app.get(`/users/${id}`, show);"), CallExpr)[0]
        assert call.first_arg is None

    def test_callee_stops_at_call_result(self):
        program = parse("mongoose.model('User').find();")
        assert [c.callee for c in _nodes(program, CallExpr)] == [("find",), ("mongoose", "model")]

    def test_imports(self):
        program = parse(textwrap.dedent("""\
            import React from 'react';
            import './global.css';
            const page = import('./page');
        """))
        assert [n.source for n in _nodes(program, ImportDecl)] == ["react", "./global.css", "./page"]


# ── Control flow ───────────────────────────────────────────────────


class TestDecisions:
    def test_kinds(self):
        program = parse("if (a && b) { x = c ? 1 : 2; } else { for (;;) {} }")
        assert sorted(n.kind for n in _nodes(program, Decision)) == ["&&", "for", "if", "ternary"]

    def test_catch_clause_counts(self):
        program = parse("try { run(); } catch (err) { log(err); }")
        assert [n.kind for n in _nodes(program, Decision)] == ["catch"]

    def test_promise_catch_is_a_call(self):
        program = parse("p.catch(err => log(err));\np?.catch(log);")
        assert _nodes(program, Decision) == []
        assert [c.callee for c in _nodes(program, CallExpr)][:1] == [("p", "catch")]

    def test_nullish_and_arithmetic_are_not_decisions(self):
        assert _nodes(parse("const v = a ?? b + c * d;"), Decision) == []

    def test_block_depth(self):
        program = parse("function f() {\n  if (x) {\n    while (y) { step(); }\n  }\n}\n")
        assert max(b.depth for b in _nodes(program, Block)) == 3


# ── Program ────────────────────────────────────────────────────────


class TestProgram:
    def test_comments_collected(self):
        program = parse("/** Docs. */\nfunction f() {}\n// trailing\n")
        assert [c.is_doc for c in program.comments] == [True, False]
        assert program.line_count == 4

    def test_comments_inside_strings_are_text(self):
        program = parse('const s = "// not a comment";\n')
        assert program.comments == ()

    def test_empty_source(self):
        program = parse("")
        assert program.nodes == ()
        assert program.line_count == 0

    def test_syntax_error_raises_with_line(self):
        with pytest.raises(ScanError) as exc_info:
            parse("const a = 1;\nfunction broken( {\n")
        assert exc_info.value.line >= 1

    def test_unclosed_jsx_raises(self):
        with pytest.raises(ScanError):
            parse("export function Header() { return (<h1>Hi); }\n", "tsx")


# ── Visitor ────────────────────────────────────────────────────────


class TestSyntaxVisitor:
    def test_dispatch_by_node_class(self):
        class Counter(SyntaxVisitor):
            def __init__(self):
                self.functions = 0
                self.other = 0

            def visit_FunctionDecl(self, node):
                self.functions += 1

            def generic_visit(self, node):
                self.other += 1

        counter = Counter()
        parse("function a() {}\nfunction b() { if (x) {} }").accept(counter)
        assert counter.functions == 2
        assert counter.other > 0

    def test_rejects_non_nodes(self):
        with pytest.raises(TypeError):
            SyntaxVisitor().visit("not a node")
