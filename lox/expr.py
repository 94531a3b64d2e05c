##################################
############IMPORTS###############
##################################
from abc import ABC, abstractmethod
##################################
############CLASSES###############
##################################
# Nodes compare and hash by identity; the resolver keys its distance table on them.
class Expr(ABC):
    @abstractmethod
    def accept(self, visitor):
        pass
##################################
class ExprVisitor(ABC):
    @abstractmethod
    def visit_binary(self, expr):
        pass

    @abstractmethod
    def visit_call_expr(self, expr):
        pass

    @abstractmethod
    def visit_get_expr(self, expr):
        pass

    @abstractmethod
    def visit_this_expr(self, expr):
        pass

    @abstractmethod
    def visit_super_expr(self, expr):
        pass

    @abstractmethod
    def visit_set_expr(self, expr):
        pass

    @abstractmethod
    def visit_lambda_expr(self, expr):
        pass

    @abstractmethod
    def visit_grouping(self, expr):
        pass

    @abstractmethod
    def visit_literal(self, expr):
        pass

    @abstractmethod
    def visit_unary(self, expr):
        pass

    @abstractmethod
    def visit_ternary_expr(self, expr):
        pass

    @abstractmethod
    def visit_variable(self, expr):
        pass

    @abstractmethod
    def visit_assign_expr(self, expr):
        pass

    @abstractmethod
    def visit_logical_expr(self, expr):
        pass
##################################
class Binary(Expr):
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def accept(self, visitor):
        return visitor.visit_binary(self)
##################################
class Call(Expr):
    def __init__(self, callee, paren, arguments):
        self.callee = callee
        self.paren = paren
        self.arguments = arguments

    def accept(self, visitor):
        return visitor.visit_call_expr(self)
##################################
class Get(Expr):
    def __init__(self, object, name):
        self.object = object
        self.name = name

    def accept(self, visitor):
        return visitor.visit_get_expr(self)
##################################
class This(Expr):
    def __init__(self, keyword):
        self.keyword = keyword

    def accept(self, visitor):
        return visitor.visit_this_expr(self)
##################################
class Super(Expr):
    def __init__(self, keyword, method):
        self.keyword = keyword
        self.method = method

    def accept(self, visitor):
        return visitor.visit_super_expr(self)
##################################
class Set(Expr):
    def __init__(self, object, name, value):
        self.object = object
        self.name = name
        self.value = value

    def accept(self, visitor):
        return visitor.visit_set_expr(self)
##################################
class Lambda(Expr):
    def __init__(self, keyword, params, body):
        self.keyword = keyword # The 'fun' token, used for error lines
        self.params = params
        self.body = body

    def accept(self, visitor):
        return visitor.visit_lambda_expr(self)
##################################
class Grouping(Expr):
    def __init__(self, expression):
        self.expression = expression

    def accept(self, visitor):
        return visitor.visit_grouping(self)
##################################
class Literal(Expr):
    def __init__(self, value):
        self.value = value

    def accept(self, visitor):
        return visitor.visit_literal(self)
##################################
class Unary(Expr):
    def __init__(self, operator, right):
        self.operator = operator
        self.right = right

    def accept(self, visitor):
        return visitor.visit_unary(self)
##################################
class Ternary(Expr):
    def __init__(self, condition, then_branch, else_branch):
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch

    def accept(self, visitor):
        return visitor.visit_ternary_expr(self)
##################################
class Variable(Expr):
    def __init__(self, name):
        self.name = name

    def accept(self, visitor):
        return visitor.visit_variable(self)
##################################
class Assign(Expr):
    def __init__(self, name, value):
        self.name = name # The variable being assigned to
        self.value = value # The new value being assigned

    def accept(self, visitor):
        return visitor.visit_assign_expr(self)
##################################
class Logical(Expr):
    def __init__(self, left, operator, right):
        self.left = left
        self.operator = operator
        self.right = right

    def accept(self, visitor):
        return visitor.visit_logical_expr(self)
