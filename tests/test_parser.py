"""Tests for the recursive-descent parser."""

from lox.expr import (Assign, Binary, Call, Get, Grouping, Lambda, Literal, Set,
                      Super, Ternary, This, Unary, Variable)
from lox.parser import Parser
from lox.scanner import Scanner
from lox.stmt import Block, Class, Expression, Function, Logic, Print, Repl, Var, While
from lox.tokens import TokenType as T


def _parse(lox, source: str):
    tokens = Scanner(source, lox).scan_tokens()
    return Parser(tokens, lox).parse()


def _expr(lox, source: str):
    statements = _parse(lox, source)
    assert not lox.had_error, lox.stderr.getvalue()
    assert len(statements) == 1
    return statements[0].expression


def test_precedence_of_arithmetic(lox):
    expr = _expr(lox, "1 + 2 * 3;")
    assert isinstance(expr, Binary)
    assert expr.operator.type == T.PLUS
    assert isinstance(expr.right, Binary)
    assert expr.right.operator.type == T.STAR


def test_unary_prefix_operators(lox):
    expr = _expr(lox, "-+!x;")
    assert isinstance(expr, Unary) and expr.operator.type == T.MINUS
    assert isinstance(expr.right, Unary) and expr.right.operator.type == T.PLUS
    assert isinstance(expr.right.right, Unary) and expr.right.right.operator.type == T.BANG


def test_comma_sequence_is_left_associative(lox):
    expr = _expr(lox, "a, b, c;")
    assert isinstance(expr, Binary) and expr.operator.type == T.COMMA
    assert isinstance(expr.left, Binary) and expr.left.operator.type == T.COMMA
    assert expr.right.name.lexeme == "c"


def test_commas_in_call_separate_arguments(lox):
    expr = _expr(lox, "f(a, b);")
    assert isinstance(expr, Call)
    assert [a.name.lexeme for a in expr.arguments] == ["a", "b"]


def test_grouping_inside_arguments_allows_comma(lox):
    expr = _expr(lox, "f((a, b));")
    assert len(expr.arguments) == 1
    assert isinstance(expr.arguments[0], Grouping)
    assert expr.arguments[0].expression.operator.type == T.COMMA


def test_comma_resumes_after_argument_list(lox):
    expr = _expr(lox, "f(a), b;")
    assert isinstance(expr, Binary) and expr.operator.type == T.COMMA
    assert isinstance(expr.left, Call)


def test_ternary_is_right_associative(lox):
    expr = _expr(lox, "a ? b : c ? d : e;")
    assert isinstance(expr, Ternary)
    assert expr.then_branch.name.lexeme == "b"
    assert isinstance(expr.else_branch, Ternary)
    assert expr.else_branch.condition.name.lexeme == "c"


def test_ternary_without_colon_is_an_error(lox):
    _parse(lox, "a ? b;")
    assert lox.had_error
    assert "Expect ':'" in lox.stderr.getvalue()


def test_assignment_is_right_associative(lox):
    expr = _expr(lox, "a = b = c;")
    assert isinstance(expr, Assign)
    assert isinstance(expr.value, Assign)
    assert expr.value.name.lexeme == "b"


def test_property_assignment_becomes_set(lox):
    expr = _expr(lox, "o.p.q = 1;")
    assert isinstance(expr, Set)
    assert expr.name.lexeme == "q"
    assert isinstance(expr.object, Get)


def test_invalid_assignment_target(lox):
    _parse(lox, "1 = 2;")
    assert "[line 1] Error at '=': Invalid assignment target." in lox.stderr.getvalue()


def test_call_and_property_chain(lox):
    expr = _expr(lox, "a.b(1)(2).c;")
    assert isinstance(expr, Get) and expr.name.lexeme == "c"
    assert isinstance(expr.object, Call)
    assert isinstance(expr.object.callee, Call)
    assert isinstance(expr.object.callee.callee, Get)


def test_this_and_super(lox):
    statements = _parse(lox, "class A < B { m() { this.x; super.m(); } }")
    method = statements[0].methods[0]
    assert isinstance(method.body[0].expression.object, This)
    assert isinstance(method.body[1].expression.callee, Super)
    assert method.body[1].expression.callee.method.lexeme == "m"


def test_lambda_expression(lox):
    statements = _parse(lox, "var f = fun (x, y) { return x, y; };")
    assert not lox.had_error
    init = statements[0].initializer
    assert isinstance(init, Lambda)
    assert [p.lexeme for p in init.params] == ["x", "y"]


def test_lambda_as_argument_keeps_commas_in_body(lox):
    expr = _expr(lox, "apply(fun (n) { n, n; }, 4);")
    assert len(expr.arguments) == 2
    body = expr.arguments[0].body
    assert body[0].expression.operator.type == T.COMMA


def test_class_members_by_lookahead(lox):
    statements = _parse(lox, """
    class Shape < Base {
        class unit() { return Shape(); }
        area { return 1; }
        init(w) { this.w = w; }
    }
    """)
    assert not lox.had_error
    klass = statements[0]
    assert isinstance(klass, Class)
    assert isinstance(klass.superclass, Variable)
    assert [f.name.lexeme for f in klass.statics] == ["unit"]
    assert [f.name.lexeme for f in klass.getters] == ["area"]
    assert klass.getters[0].params == []
    assert [f.name.lexeme for f in klass.methods] == ["init"]


def test_for_desugars_into_while(lox):
    statements = _parse(lox, "for (var i = 0; i < 3; i = i + 1) print i;")
    outer = statements[0]
    assert isinstance(outer, Block)
    assert isinstance(outer.statements[0], Var)
    loop = outer.statements[1]
    assert isinstance(loop, While)
    assert isinstance(loop.body, Print)
    assert isinstance(loop.increment, Expression)
    assert isinstance(loop.increment.expression, Assign)


def test_empty_for_clauses(lox):
    statements = _parse(lox, "for (;;) {}")
    loop = statements[0]
    assert isinstance(loop, While)
    assert isinstance(loop.condition, Literal) and loop.condition.value is True
    assert loop.increment is None


def test_break_and_continue_inside_loops(lox):
    statements = _parse(lox, "while (true) { break; continue; }")
    assert not lox.had_error
    body = statements[0].body.statements
    assert [type(s) for s in body] == [Logic, Logic]
    assert body[0].keyword.type == T.BREAK
    assert body[1].keyword.type == T.CONTINUE


def test_break_outside_loop_is_an_error(lox):
    _parse(lox, "break;")
    assert "[line 1] Error at 'break': Can't use 'break' outside of a loop." in lox.stderr.getvalue()


def test_break_in_function_nested_in_loop_is_accepted(lox):
    _parse(lox, "while (true) { fun f() { break; } f(); }")
    assert not lox.had_error


def test_missing_semicolon_makes_repl_statement(lox):
    statements = _parse(lox, "1 + 2")
    assert isinstance(statements[0], Repl)


def test_function_declaration(lox):
    statements = _parse(lox, "fun add(a, b) { return a + b; }")
    function = statements[0]
    assert isinstance(function, Function)
    assert [p.lexeme for p in function.params] == ["a", "b"]


def test_error_recovery_reports_each_error_and_keeps_good_statements(lox):
    statements = _parse(lox, "var = 1;\nprint 2;\nvar x = ;")
    errors = lox.stderr.getvalue().splitlines()
    assert errors == [
        "[line 1] Error at '=': Expect variable name.",
        "[line 3] Error at ';': Expect expression.",
    ]
    assert len(statements) == 1
    assert isinstance(statements[0], Print)


def test_failed_statement_in_block_is_skipped(lox):
    statements = _parse(lox, "{ print ; print 1; }")
    assert lox.had_error
    block = statements[0]
    assert all(s is not None for s in block.statements)
    assert len(block.statements) == 1


def test_error_at_end(lox):
    _parse(lox, "print 1")
    assert "[line 1] Error at end: Expect ';' after value." in lox.stderr.getvalue()
