##################################
############IMPORTS###############
##################################
import sys

from .interpreter import Interpreter
from .parser import Parser
from .resolver import Resolver
from .scanner import Scanner
from .tokens import TokenType
##################################
############CLASSES###############
##################################
USAGE = "Usage: lox [script]"
# Each Lox call costs about a dozen Python frames
RECURSION_LIMIT = 10000
##################################
class Lox:
    """Runs source through the pipeline and is the sink for every diagnostic.

    One instance keeps one interpreter, so globals defined by one call to
    run() are visible to the next (this is what the prompt relies on).
    """

    def __init__(self, stdout=None, stderr=None):
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self.interpreter = Interpreter(self)
        self.had_error = False
        self.had_runtimeError = False

        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)

    def run_file(self, path: str):
        with open(path, 'r', encoding='utf-8') as file:
            self.run(file.read())
        if self.had_error:
            return 65
        if self.had_runtimeError:
            return 70
        return 0

    def run_prompt(self):
        while True:
            try:
                line = input("> ")
            except EOFError:
                print(file=self.stdout)
                break
            self.run(line)
            self.had_error = False

    def run(self, source: str):
        scanner = Scanner(source, self)
        tokens = scanner.scan_tokens()

        parser = Parser(tokens, self)
        statements = parser.parse()

        # Stop if there was a syntax error
        if self.had_error:
            return

        resolver = Resolver(self.interpreter, self)
        resolver.resolve(statements)

        # Stop if there was a resolution error
        if self.had_error:
            return

        self.interpreter.interpret(statements)

    ##############DIAGNOSTICS#########
    def report(self, line: int, where: str, message: str):
        print(f"[line {line}] Error{where}: {message}", file=self.stderr)
        self.had_error = True

    def line_error(self, line: int, message: str):
        self.report(line, "", message)

    def error(self, token, message):
        if token.type == TokenType.EOF:
            self.report(token.line, " at end", message)
        else:
            self.report(token.line, f" at '{token.lexeme}'", message)

    def runtime_error(self, error):
        print(f"{error.message}\n[line {error.token.line}]", file=self.stderr)
        self.had_runtimeError = True
##################################
def main(args=None):
    args = sys.argv[1:] if args is None else args
    lox = Lox()
    if len(args) > 1:
        print(USAGE)
        return 64
    elif len(args) == 1:
        return lox.run_file(args[0])
    lox.run_prompt()
    return 0
