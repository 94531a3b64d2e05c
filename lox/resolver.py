##################################
############IMPORTS###############
##################################
from enum import Enum

from .callable import INIT, SUPER, THIS, FunctionType
from .expr import ExprVisitor
from .stmt import Block, If, Return, StmtVisitor, While
##################################
############CLASSES###############
##################################
class ClassType(Enum):
    NONE = "none"
    CLASS = "class"
    SUBCLASS = "subclass"
##################################
class Resolver(ExprVisitor, StmtVisitor):
    """Computes how many scopes out each local variable lives.

    Every variable, assignment, ``this`` and ``super`` node that refers to a
    local binding is handed to ``interpreter.resolve(node, distance)``; nodes
    left unresolved are globals. Static misuse of the language is reported
    to ``lox.error`` along the way.
    """

    def __init__(self, interpreter, lox):
        self.interpreter = interpreter
        self.lox = lox
        self.scopes = [] # name -> False while declared, True once defined
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.in_static = False
        self.known_globals = set(interpreter.globals.values)

    def resolve(self, statements):
        for statement in statements:
            self.resolve_stmt(statement)

    def resolve_stmt(self, stmt):
        stmt.accept(self)

    def resolve_expr(self, expr):
        expr.accept(self)

    ##############SCOPES##############
    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        if not self.scopes:
            self.known_globals.add(name.lexeme)
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.lox.error(name, "Already a variable with this name in this scope.")

        scope[name.lexeme] = False

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name, skip_innermost=False):
        last = len(self.scopes) - 1
        if skip_innermost:
            last -= 1
        for i in range(last, -1, -1):
            if name.lexeme in self.scopes[i]:
                self.interpreter.resolve(expr, len(self.scopes) - 1 - i)
                return True
        return False # Global

    def resolve_function(self, function, type):
        enclosing_function = self.current_function
        enclosing_static = self.in_static
        self.current_function = type
        if type == FunctionType.STATIC:
            self.in_static = True

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve(function.body)
        self.end_scope()

        if type == FunctionType.GETTER and not self.has_return(function.body):
            self.lox.error(function.name, "A class getter must have a return statement.")

        self.current_function = enclosing_function
        self.in_static = enclosing_static

    def has_return(self, statements):
        # Nested function bodies do not count
        for statement in statements:
            if isinstance(statement, Return):
                return True
            if isinstance(statement, Block) and self.has_return(statement.statements):
                return True
            if isinstance(statement, If):
                branches = [statement.then_branch]
                if statement.else_branch is not None:
                    branches.append(statement.else_branch)
                if self.has_return(branches):
                    return True
            if isinstance(statement, While) and self.has_return([statement.body]):
                return True
        return False

    ##############STATEMENTS##########
    def visit_block_statement(self, stmt):
        self.begin_scope()
        self.resolve(stmt.statements)
        self.end_scope()

    def visit_class_stmt(self, stmt):
        enclosing_class = self.current_class
        enclosing_static = self.in_static
        self.current_class = ClassType.CLASS
        self.in_static = False

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.name.lexeme == stmt.superclass.name.lexeme:
                self.lox.error(stmt.superclass.name, "A class can't inherit from itself.")
            self.current_class = ClassType.SUBCLASS
            self.resolve_expr(stmt.superclass)

            self.begin_scope()
            self.scopes[-1][SUPER] = True

        # Static methods close over the class scope without a 'this' frame
        for method in stmt.statics:
            if method.name.lexeme == INIT:
                self.lox.error(method.name, "The name of a static method can't be 'init'.")
            self.resolve_function(method, FunctionType.STATIC)

        self.begin_scope()
        self.scopes[-1][THIS] = True

        for method in stmt.getters:
            if method.name.lexeme == INIT:
                self.lox.error(method.name, "The name of a class getter can't be 'init'.")
            self.resolve_function(method, FunctionType.GETTER)

        for method in stmt.methods:
            declaration = FunctionType.METHOD
            if method.name.lexeme == INIT:
                declaration = FunctionType.INITIALIZER
            self.resolve_function(method, declaration)

        self.end_scope()

        if stmt.superclass is not None:
            self.end_scope()

        self.current_class = enclosing_class
        self.in_static = enclosing_static

    def visit_expression_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def visit_repl_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def visit_function_stmt(self, stmt):
        # Defined before the body so the function can recurse
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt, FunctionType.FUNCTION)

    def visit_if_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        self.resolve_stmt(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve_stmt(stmt.else_branch)

    def visit_print_stmt(self, stmt):
        self.resolve_expr(stmt.expression)

    def visit_return_stmt(self, stmt):
        if self.current_function == FunctionType.NONE:
            self.lox.error(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            if self.current_function == FunctionType.INITIALIZER:
                self.lox.error(stmt.keyword, "Can't return a value from an initializer.")
            self.resolve_expr(stmt.value)

    def visit_var_stmt(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve_expr(stmt.initializer)
        self.define(stmt.name)

    def visit_while_stmt(self, stmt):
        self.resolve_expr(stmt.condition)
        self.resolve_stmt(stmt.body)
        if stmt.increment is not None:
            self.resolve_stmt(stmt.increment)

    def visit_logic_stmt(self, stmt):
        pass

    ##############EXPRESSIONS#########
    def visit_variable(self, expr):
        name = expr.name
        if self.scopes and self.scopes[-1].get(name.lexeme) is False:
            # Inside its own initializer the new binding is invisible, so the
            # name means whatever it meant in the enclosing scopes.
            if not self.resolve_local(expr, name, skip_innermost=True) \
                    and name.lexeme not in self.known_globals:
                self.lox.error(name, "Can't read local variable in its own initializer.")
            return

        self.resolve_local(expr, name)

    def visit_assign_expr(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_local(expr, expr.name)

    def visit_binary(self, expr):
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def visit_call_expr(self, expr):
        self.resolve_expr(expr.callee)
        for argument in expr.arguments:
            self.resolve_expr(argument)

    def visit_get_expr(self, expr):
        self.resolve_expr(expr.object)

    def visit_set_expr(self, expr):
        self.resolve_expr(expr.value)
        self.resolve_expr(expr.object)

    def visit_this_expr(self, expr):
        if self.current_class == ClassType.NONE:
            self.lox.error(expr.keyword, "Can't use 'this' outside of a class.")
            return
        if self.in_static:
            self.lox.error(expr.keyword, "Can't use 'this' in a static method.")
            return

        self.resolve_local(expr, expr.keyword)

    def visit_super_expr(self, expr):
        if self.current_class == ClassType.NONE:
            self.lox.error(expr.keyword, "Can't use 'super' outside of a class.")
            return
        if self.current_class != ClassType.SUBCLASS:
            self.lox.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
            return
        if self.in_static:
            self.lox.error(expr.keyword, "Can't use 'super' in a static method.")
            return

        self.resolve_local(expr, expr.keyword)

    def visit_lambda_expr(self, expr):
        enclosing_function = self.current_function
        self.current_function = FunctionType.LAMBDA

        self.begin_scope()
        for param in expr.params:
            self.declare(param)
            self.define(param)
        self.resolve(expr.body)
        self.end_scope()

        self.current_function = enclosing_function

    def visit_grouping(self, expr):
        self.resolve_expr(expr.expression)

    def visit_literal(self, expr):
        pass

    def visit_logical_expr(self, expr):
        self.resolve_expr(expr.left)
        self.resolve_expr(expr.right)

    def visit_unary(self, expr):
        self.resolve_expr(expr.right)

    def visit_ternary_expr(self, expr):
        self.resolve_expr(expr.condition)
        self.resolve_expr(expr.then_branch)
        self.resolve_expr(expr.else_branch)
