from .errors import InterpreterError, ParseError, Runtime_Error
from .interpreter import Interpreter
from .lox import Lox, main
from .parser import Parser
from .resolver import Resolver
from .scanner import Scanner
from .tokens import Token, TokenType

__all__ = [
    "Interpreter",
    "InterpreterError",
    "Lox",
    "ParseError",
    "Parser",
    "Resolver",
    "Runtime_Error",
    "Scanner",
    "Token",
    "TokenType",
    "main",
]
