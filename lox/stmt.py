##################################
############IMPORTS###############
##################################
from abc import ABC, abstractmethod
##################################
############CLASSES###############
##################################
class Stmt(ABC):
    @abstractmethod
    def accept(self, visitor):
        pass
##################################
class StmtVisitor(ABC):
    @abstractmethod
    def visit_expression_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_function_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_return_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_print_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_var_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_block_statement(self, stmt):
        pass

    @abstractmethod
    def visit_class_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_repl_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_if_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_while_stmt(self, stmt):
        pass

    @abstractmethod
    def visit_logic_stmt(self, stmt):
        pass
##################################
class Expression(Stmt):
    def __init__(self, expression):
        self.expression = expression

    def accept(self, visitor):
        return visitor.visit_expression_stmt(self)
##################################
class Function(Stmt):
    def __init__(self, name, params, body):
        self.name = name
        self.params = params
        self.body = body

    def accept(self, visitor):
        return visitor.visit_function_stmt(self)
##################################
class Return(Stmt):
    def __init__(self, keyword, value):
        self.keyword = keyword
        self.value = value

    def accept(self, visitor):
        return visitor.visit_return_stmt(self)
##################################
class Print(Stmt):
    def __init__(self, expression):
        self.expression = expression

    def accept(self, visitor):
        return visitor.visit_print_stmt(self)
##################################
class Var(Stmt):
    def __init__(self, name, initializer):
        self.name = name
        self.initializer = initializer

    def accept(self, visitor):
        return visitor.visit_var_stmt(self)
##################################
class Block(Stmt):
    def __init__(self, statements):
        self.statements = statements

    def accept(self, visitor):
        return visitor.visit_block_statement(self)
##################################
class Class(Stmt):
    def __init__(self, name, superclass, statics, getters, methods):
        self.name = name
        self.superclass = superclass # A Variable expression, or None
        self.statics = statics
        self.getters = getters
        self.methods = methods

    def accept(self, visitor):
        return visitor.visit_class_stmt(self)
##################################
class Repl(Stmt):
    """A bare expression whose value is printed, as typed at the prompt."""
    def __init__(self, expression):
        self.expression = expression

    def accept(self, visitor):
        return visitor.visit_repl_stmt(self)
##################################
class If(Stmt):
    def __init__(self, condition, then_branch, else_branch):
        self.condition = condition
        self.then_branch = then_branch
        self.else_branch = else_branch

    def accept(self, visitor):
        return visitor.visit_if_stmt(self)
##################################
class While(Stmt):
    def __init__(self, condition, body, increment=None):
        self.condition = condition
        self.body = body
        self.increment = increment # Only set for desugared 'for' loops

    def accept(self, visitor):
        return visitor.visit_while_stmt(self)
##################################
class Logic(Stmt):
    """A 'break' or 'continue'; the keyword token says which."""
    def __init__(self, keyword):
        self.keyword = keyword

    def accept(self, visitor):
        return visitor.visit_logic_stmt(self)
