##################################
############IMPORTS###############
##################################
import time
from abc import ABC, abstractmethod
from enum import Enum

from .control import Return_Value
from .environment import Environment
from .errors import Runtime_Error
##################################
############CLASSES###############
##################################
THIS = "this"
SUPER = "super"
INIT = "init"
##################################
class FunctionType(Enum):
    NONE = "none" # Only used by the resolver, for top-level code
    FUNCTION = "function"
    METHOD = "method"
    INITIALIZER = "initializer"
    GETTER = "getter"
    STATIC = "static method"
    LAMBDA = "lambda"
##################################
class Lox_Callable(ABC):
    @abstractmethod
    def arity(self):
        pass
    @abstractmethod
    def call(self, interpreter, arguments):
        pass
##################################
class Clock(Lox_Callable):
    def arity(self):
        return 0

    def call(self, interpreter, arguments):
        return time.time()

    def __str__(self):
        return "<native fn>"
##################################
class Lox_Function(Lox_Callable):
    def __init__(self, declaration, closure, function_type=FunctionType.FUNCTION):
        self.declaration = declaration # A Function statement, or a Lambda expression
        self.closure = closure
        self.function_type = function_type

    @property
    def name(self):
        if self.function_type == FunctionType.LAMBDA:
            return "lambda"
        return self.declaration.name.lexeme

    def bind(self, instance):
        environment = Environment(self.closure)
        environment.define(THIS, instance)
        return Lox_Function(self.declaration, environment, self.function_type)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)

        if self.function_type == FunctionType.INITIALIZER:
            return self.closure.get_at(0, THIS)
        # A stray break/continue signal stops the body but never leaves the call
        if isinstance(signal, Return_Value):
            return signal.value
        return None

    def arity(self):
        return len(self.declaration.params)

    def __str__(self):
        return "<fn " + self.name + ">"
##################################
class Lox_Class(Lox_Callable):
    def __init__(self, name, superclass, methods):
        self.name = name
        self.superclass = superclass
        self.methods = methods # name -> Lox_Function, all three member kinds

    def find_method(self, name):
        if name in self.methods:
            return self.methods[name]

        if self.superclass is not None:
            return self.superclass.find_method(name)

        return None

    def get(self, name):
        # Class-level access only reaches static methods, which are never bound
        method = self.find_method(name.lexeme)
        if method is not None and method.function_type == FunctionType.STATIC:
            return method

        raise Runtime_Error(name, f"Undefined property '{name.lexeme}'.")

    def arity(self):
        initializer = self.find_method(INIT)
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter, arguments):
        instance = Lox_Instance(self)
        initializer = self.find_method(INIT)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance

    def __str__(self):
        return self.name
##################################
class Lox_Instance:
    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            if method.function_type == FunctionType.STATIC:
                return method
            return method.bind(self)

        raise Runtime_Error(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return self.klass.name + " instance"
