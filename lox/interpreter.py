##################################
############IMPORTS###############
##################################
import weakref

from .callable import (INIT, SUPER, THIS, Clock, FunctionType, Lox_Callable, Lox_Class,
                       Lox_Function, Lox_Instance)
from .control import LoopSignal, Return_Value
from .environment import Environment, VariableValue
from .errors import InterpreterError, Runtime_Error
from .expr import Expr, ExprVisitor
from .stmt import StmtVisitor
from .tokens import Token, TokenType
##################################
############CLASSES###############
##################################
DIVISION_EPSILON = 1e-10
##################################
class Interpreter(ExprVisitor, StmtVisitor):
    def __init__(self, lox):
        self.lox = lox # Owns stdout and the runtime error report
        self.globals = Environment()
        self.environment = self.globals
        # Expr node (by identity) -> scope distance. Weak keys let nodes from
        # earlier prompt lines go once nothing can run them any more
        self.locals = weakref.WeakKeyDictionary()

        self.globals.define("clock", Clock())

    def interpret(self, statements):
        # A runtime error abandons only the top-level statement it came from
        for statement in statements:
            try:
                self.execute(statement)
            except Runtime_Error as e:
                self.lox.runtime_error(e)

    def resolve(self, expr: Expr, depth: int):
        self.locals[expr] = depth

    ##############STATEMENTS##########
    def execute(self, statement):
        return statement.accept(self)

    def execute_block(self, statements, environment):
        previous = self.environment
        try:
            self.environment = environment

            for statement in statements:
                signal = self.execute(statement)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    def visit_block_statement(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_class_stmt(self, stmt):
        superclass = None
        if stmt.superclass is not None:
            superclass = self.evaluate(stmt.superclass)
            if not isinstance(superclass, Lox_Class):
                raise Runtime_Error(stmt.superclass.name, "Superclass must be a class.")

        # Bound first so methods can name the class
        self.environment.define(stmt.name.lexeme, None)

        if superclass is not None:
            self.environment = Environment(self.environment)
            self.environment.define(SUPER, superclass)

        methods = {}
        for method in stmt.methods:
            type = FunctionType.INITIALIZER if method.name.lexeme == INIT else FunctionType.METHOD
            methods[method.name.lexeme] = Lox_Function(method, self.environment, type)
        for method in stmt.statics:
            methods[method.name.lexeme] = Lox_Function(method, self.environment, FunctionType.STATIC)
        for method in stmt.getters:
            methods[method.name.lexeme] = Lox_Function(method, self.environment, FunctionType.GETTER)

        klass = Lox_Class(stmt.name.lexeme, superclass, methods)

        if superclass is not None:
            self.environment = self.environment.enclosing

        self.environment.assign(stmt.name, klass)
        return None

    def visit_expression_stmt(self, stmt):
        self.evaluate(stmt.expression)
        return None

    def visit_function_stmt(self, stmt):
        function = Lox_Function(stmt, self.environment, FunctionType.FUNCTION)
        self.environment.define(stmt.name.lexeme, function)
        return None

    def visit_if_stmt(self, stmt):
        if self.isTruthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self.execute(stmt.else_branch)

        return None

    def visit_print_stmt(self, stmt):
        value = self.evaluate(stmt.expression)
        print(self.stringify(value), file=self.lox.stdout)
        return None

    def visit_repl_stmt(self, stmt):
        value = self.evaluate(stmt.expression)
        print(self.stringify(value), file=self.lox.stdout)
        return None

    def visit_return_stmt(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)

        return Return_Value(value)

    def visit_var_stmt(self, stmt):
        value = VariableValue.UNINIT
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)  # Evaluate the initializer

        self.environment.define(stmt.name.lexeme, value)  # Define the variable
        return None

    def visit_while_stmt(self, stmt):
        while self.isTruthy(self.evaluate(stmt.condition)):
            signal = self.execute(stmt.body)
            if signal is LoopSignal.BREAK:
                break
            if isinstance(signal, Return_Value):
                return signal
            # Normal completion or 'continue': both still run the increment
            if stmt.increment is not None:
                self.execute(stmt.increment)

        return None

    def visit_logic_stmt(self, stmt):
        if stmt.keyword.type == TokenType.BREAK:
            return LoopSignal.BREAK
        return LoopSignal.CONTINUE

    ##############EXPRESSIONS#########
    def evaluate(self, expr: Expr):
        return expr.accept(self)

    def visit_literal(self, literal):
        return literal.value

    def visit_grouping(self, expr):
        return self.evaluate(expr.expression)

    def visit_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type == TokenType.BANG:
            return not self.isTruthy(right)
        elif expr.operator.type == TokenType.MINUS:
            self.checkNumberOperand(expr.operator, right)
            return -right
        elif expr.operator.type == TokenType.PLUS:
            self.checkNumberOperand(expr.operator, right)
            return right

        return None

    def visit_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        type = expr.operator.type

        if type == TokenType.COMMA:
            return right
        elif type == TokenType.GREATER:
            self.checkNumberOperands(expr.operator, left, right)
            return left > right
        elif type == TokenType.GREATER_EQUAL:
            self.checkNumberOperands(expr.operator, left, right)
            return left >= right
        elif type == TokenType.LESS:
            self.checkNumberOperands(expr.operator, left, right)
            return left < right
        elif type == TokenType.LESS_EQUAL:
            self.checkNumberOperands(expr.operator, left, right)
            return left <= right
        elif type == TokenType.MINUS:
            self.checkNumberOperands(expr.operator, left, right)
            return left - right
        elif type == TokenType.PLUS:
            if self.is_number(left) and self.is_number(right):
                return left + right

            if isinstance(left, str) or isinstance(right, str):
                return self.stringify(left) + self.stringify(right)

            raise Runtime_Error(expr.operator, "Operands must be two numbers or at least one string.")
        elif type == TokenType.SLASH:
            self.checkNumberOperands(expr.operator, left, right)
            if abs(right) < DIVISION_EPSILON:
                raise Runtime_Error(expr.operator, "You cannot divide a number by zero.")
            return left / right
        elif type == TokenType.STAR:
            self.checkNumberOperands(expr.operator, left, right)
            return left * right
        elif type == TokenType.BANG_EQUAL:
            return not self.isEqual(left, right)
        elif type == TokenType.EQUAL_EQUAL:
            return self.isEqual(left, right)
        return None

    def visit_ternary_expr(self, expr):
        if self.isTruthy(self.evaluate(expr.condition)):
            return self.evaluate(expr.then_branch)
        return self.evaluate(expr.else_branch)

    def visit_logical_expr(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.type == TokenType.OR:
            if self.isTruthy(left):
                return left
        else:
            if not self.isTruthy(left):
                return left

        return self.evaluate(expr.right)

    def visit_variable(self, expr):
        return self.look_up_variable(expr.name, expr)

    def visit_assign_expr(self, expr):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    def visit_call_expr(self, expr):
        callee = self.evaluate(expr.callee)

        arguments = []
        for argument in expr.arguments:
            arguments.append(self.evaluate(argument))

        if not isinstance(callee, Lox_Callable):
            raise Runtime_Error(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise Runtime_Error(expr.paren,
                                f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise Runtime_Error(expr.paren, "Stack overflow.") from None

    def visit_get_expr(self, expr):
        object = self.evaluate(expr.object)
        if isinstance(object, (Lox_Instance, Lox_Class)):
            try:
                return self.call_getter(object.get(expr.name))
            except RecursionError:
                raise Runtime_Error(expr.name, "Stack overflow.") from None

        raise Runtime_Error(expr.name, "Only instances have properties.")

    def visit_set_expr(self, expr):
        object = self.evaluate(expr.object)

        if not isinstance(object, Lox_Instance):
            raise Runtime_Error(expr.name, "Only instances have fields.")

        value = self.evaluate(expr.value)
        object.set(expr.name, value)
        return value

    def visit_this_expr(self, expr):
        return self.look_up_variable(expr.keyword, expr)

    def visit_super_expr(self, expr):
        distance = self.locals.get(expr)
        if distance is None:
            raise InterpreterError("Unresolved 'super'. This is an interpreter bug.")

        superclass = self.environment.get_at(distance, SUPER)
        # The 'this' frame is always the one just inside the 'super' frame
        instance = self.environment.get_at(distance - 1, THIS)

        method = superclass.find_method(expr.method.lexeme)
        if method is None:
            raise Runtime_Error(expr.method, f"Undefined property '{expr.method.lexeme}'.")
        if method.function_type == FunctionType.STATIC:
            return method

        try:
            return self.call_getter(method.bind(instance))
        except RecursionError:
            raise Runtime_Error(expr.method, "Stack overflow.") from None

    def visit_lambda_expr(self, expr):
        if not expr.body:
            raise Runtime_Error(expr.keyword,
                                "It's not allowed to define a lambda function without any statements.")
        return Lox_Function(expr, self.environment, FunctionType.LAMBDA)

    ##############HELPERS#############
    def call_getter(self, value):
        # Getters read like fields: run them as soon as they are looked up
        if isinstance(value, Lox_Function) and value.function_type == FunctionType.GETTER:
            return value.call(self, [])
        return value

    def look_up_variable(self, name: Token, expr: Expr):
        distance = self.locals.get(expr)
        if distance is None:
            return self.globals.get(name)

        value = self.environment.get_at(distance, name.lexeme)
        if value is VariableValue.UNINIT:
            raise Runtime_Error(name, f"Uninitialized variable '{name.lexeme}'.")
        return value

    def is_number(self, value):
        return isinstance(value, (float, int)) and not isinstance(value, bool)

    def checkNumberOperand(self, operator, operand):
        if self.is_number(operand):
            return
        raise Runtime_Error(operator, "Operand must be a number.")

    def checkNumberOperands(self, operator: Token, left, right):
        if self.is_number(left) and self.is_number(right):
            return
        raise Runtime_Error(operator, "Operands must be numbers.")

    def isTruthy(self, object):
        if object is None:
            return False
        if isinstance(object, bool):
            return object

        return True

    def isEqual(self, left, right):
        if left is None and right is None:
            return True
        if left is None or right is None:
            return False
        # Keep true == 1 false, as Python would say otherwise
        if isinstance(left, bool) != isinstance(right, bool):
            return False

        return left == right

    def stringify(self, object):
        if object is None:
            return "nil"

        if isinstance(object, bool):
            return "true" if object else "false"

        if isinstance(object, float):
            text = str(object)
            if text.endswith(".0"):
                text = text[0: len(text) - 2]
            return text

        return str(object)
