##################################
############IMPORTS###############
##################################
from enum import Enum

from .errors import InterpreterError, Runtime_Error
from .tokens import Token
##################################
############CLASSES###############
##################################
class VariableValue(Enum):
    UNINIT = "uninitialized" # Bound by `var x;` until the first assignment
##################################
class Environment:
    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        self.values[name] = value #Add the variable to the current environment

    def get(self, name: Token):
        lexeme = name.lexeme  # The variable name as a string
        if lexeme in self.values:  # Check if the variable exists in the current scope
            value = self.values[lexeme]
            if value is VariableValue.UNINIT:
                raise Runtime_Error(name, f"Uninitialized variable '{lexeme}'.")
            return value

        if self.enclosing is not None:  # Check in outer scope
            return self.enclosing.get(name)

        # Throw an error if the variable isn't found
        raise Runtime_Error(name, f"Undefined variable '{lexeme}'.")

    def assign(self, name: Token, value):
        # Check if the variable exists in the current environment
        if name.lexeme in self.values:
            # Update the variable's value
            self.values[name.lexeme] = value
            return

        if self.enclosing is not None:
            # Check in the enclosing environment (if in a nested scope)
            self.enclosing.assign(name, value)
            return

        # Throw an error if the variable isn't found in any scope
        raise Runtime_Error(name, f"Undefined variable '{name.lexeme}'.")

    def ancestor(self, distance: int):
        environment = self
        for _ in range(distance):
            environment = environment.enclosing
            if environment is None:
                raise InterpreterError(
                    f"No scope at distance {distance}. This is an interpreter bug.")
        return environment

    def get_at(self, distance: int, name: str):
        values = self.ancestor(distance).values
        if name not in values:
            raise InterpreterError(
                f"'{name}' is not bound at distance {distance}. This is an interpreter bug.")
        return values[name]

    def assign_at(self, distance: int, name: Token, value):
        values = self.ancestor(distance).values
        if name.lexeme not in values:
            raise InterpreterError(
                f"'{name.lexeme}' is not bound at distance {distance}. This is an interpreter bug.")
        values[name.lexeme] = value

    def __repr__(self):
        text = repr(self.values)
        if self.enclosing is not None:
            text += " -> " + repr(self.enclosing)
        return text
