##################################
############IMPORTS###############
##################################
from .errors import ParseError
from .expr import (Assign, Binary, Call, Get, Grouping, Lambda, Literal, Logical,
                   Set, Super, Ternary, This, Unary, Variable)
from .stmt import (Block, Class, Expression, Function, If, Logic, Print, Repl,
                   Return, Var, While)
from .tokens import TokenType
##################################
############CLASSES###############
##################################
MAX_ARGUMENTS = 255
##################################
class Parser:
    def __init__(self, tokens, lox):
        self.tokens = tokens
        self.lox = lox # Receives parse errors
        self.current = 0
        # Cleared inside argument and parameter lists so ',' separates items there
        self.allow_comma = True
        self.loop_depth = 0

    def parse(self):
        statements = []
        while not self.isAtEnd():
            stmt = self.declaration()
            if stmt is not None:  # Exclude statements that failed to parse
                statements.append(stmt)
        return statements

    ##############EXPRESSIONS#########
    def expression(self):
        if self.match(TokenType.FUN):
            return self.lambda_expr()
        return self.comma()

    def lambda_expr(self):
        keyword = self.previous()
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'fun' in lambda expression.")
        parameters = self.parameters()
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before lambda body.")

        previous = self.allow_comma
        self.allow_comma = True
        try:
            body = self.block()
        finally:
            self.allow_comma = previous
        return Lambda(keyword, parameters, body)

    def comma(self):
        expr = self.ternary()

        while self.allow_comma and self.match(TokenType.COMMA):
            operator = self.previous()
            right = self.ternary()
            expr = Binary(expr, operator, right)

        return expr

    def ternary(self):
        expr = self.assignment()

        if self.match(TokenType.QUESTION_MARK):
            then_branch = self.ternary()
            self.consume(TokenType.COLON, "Expect ':' after then branch of conditional expression.")
            else_branch = self.ternary()
            return Ternary(expr, then_branch, else_branch)

        return expr

    def assignment(self):
        expr = self._or()  # Parse the left-hand side of the assignment

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()  # Right-associative

            if isinstance(expr, Variable):
                return Assign(expr.name, value)
            if isinstance(expr, Get):
                return Set(expr.object, expr.name, value)

            # Reported but not thrown: the parser is not confused, only the target is wrong
            self.error(equals, "Invalid assignment target.")

        return expr

    def _or(self):
        expr = self._and()

        while self.match(TokenType.OR):
            operator = self.previous()
            right = self._and()
            expr = Logical(expr, operator, right)

        return expr

    def _and(self):
        expr = self.equality()

        while self.match(TokenType.AND):
            operator = self.previous()
            right = self.equality()
            expr = Logical(expr, operator, right)

        return expr

    def equality(self):
        expr = self.comparison()

        while self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            operator = self.previous()
            right = self.comparison()
            expr = Binary(expr, operator, right)

        return expr

    def comparison(self):
        expr = self.term()

        while self.match(TokenType.GREATER, TokenType.GREATER_EQUAL,
                         TokenType.LESS, TokenType.LESS_EQUAL):
            operator = self.previous()
            right = self.term()
            expr = Binary(expr, operator, right)
        return expr

    def term(self):
        expr = self.factor()

        while self.match(TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.factor()
            expr = Binary(expr, operator, right)
        return expr

    def factor(self):
        expr = self.unary()

        while self.match(TokenType.SLASH, TokenType.STAR):
            operator = self.previous()
            right = self.unary()
            expr = Binary(expr, operator, right)

        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS, TokenType.PLUS):
            operator = self.previous()
            right = self.unary()
            return Unary(operator, right)
        return self.call()

    def call(self):
        expr = self.primary()

        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                break

        return expr

    def finish_call(self, callee):
        arguments = []

        if not self.check(TokenType.RIGHT_PAREN):
            previous = self.allow_comma
            self.allow_comma = False
            try:
                while True:
                    if len(arguments) >= MAX_ARGUMENTS:
                        self.error(self.peek(), "Can't have more than 255 arguments.")

                    arguments.append(self.expression())
                    if not self.match(TokenType.COMMA):
                        break
            finally:
                self.allow_comma = previous

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")

        return Call(callee, paren, arguments)

    def primary(self):
        # Handle literals
        if self.match(TokenType.FALSE):
            return Literal(False)
        if self.match(TokenType.TRUE):
            return Literal(True)
        if self.match(TokenType.NIL):
            return Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return Literal(self.previous().literal)

        if self.match(TokenType.THIS):
            return This(self.previous())

        if self.match(TokenType.SUPER):
            keyword = self.previous()
            self.consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self.consume(TokenType.IDENTIFIER, "Expect superclass method name.")
            return Super(keyword, method)

        if self.match(TokenType.IDENTIFIER):
            return Variable(self.previous())

        # Handle grouped expressions with parentheses
        if self.match(TokenType.LEFT_PAREN):
            previous = self.allow_comma
            self.allow_comma = True
            try:
                expr = self.expression()
            finally:
                self.allow_comma = previous
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)

        # If no valid primary expression is found, throw an error
        raise self.error(self.peek(), "Expect expression.")

    ##############STATEMENTS##########
    def declaration(self):
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.varDeclaration()

            return self.statement()

        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect class name.")

        superclass = None
        if self.match(TokenType.LESS):
            self.consume(TokenType.IDENTIFIER, "Expect superclass name.")
            superclass = Variable(self.previous())

        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")

        statics = []
        getters = []
        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.isAtEnd():
            if self.match(TokenType.CLASS):
                statics.append(self.function("static method"))
            elif self.peek_next().type == TokenType.LEFT_PAREN:
                methods.append(self.function("method"))
            else:
                getters.append(self.function("getter"))

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return Class(name, superclass, statics, getters, methods)

    def function(self, kind):
        name = self.consume(TokenType.IDENTIFIER, "Expect " + kind + " name.")

        parameters = []
        if kind != "getter":
            self.consume(TokenType.LEFT_PAREN, "Expect '(' after " + kind + " name.")
            parameters = self.parameters()

        self.consume(TokenType.LEFT_BRACE, "Expect '{' before " + kind + " body.")
        body = self.block()
        return Function(name, parameters, body)

    def parameters(self):
        # Called just after '('; consumes through ')'
        parameters = []
        if not self.check(TokenType.RIGHT_PAREN):
            previous = self.allow_comma
            self.allow_comma = False
            try:
                while True:
                    if len(parameters) >= MAX_ARGUMENTS:
                        self.error(self.peek(), "Can't have more than 255 parameters.")

                    parameters.append(
                        self.consume(TokenType.IDENTIFIER, "Expect parameter name.")
                    )

                    if not self.match(TokenType.COMMA):
                        break
            finally:
                self.allow_comma = previous
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        return parameters

    def varDeclaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return Var(name, initializer)

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_Statement()
        if self.match(TokenType.PRINT):
            return self.printStatement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.BREAK, TokenType.CONTINUE):
            return self.logic_statement()
        if self.match(TokenType.LEFT_BRACE):
            return Block(self.block())

        return self.expressionStatement()

    def return_statement(self):
        keyword = self.previous()
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def for_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.varDeclaration()
        else:
            initializer = self.expressionStatement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.loop_body()

        if condition is None:
            condition = Literal(True)
        # The increment stays outside the body so 'continue' still runs it
        loop = While(condition, body, Expression(increment) if increment is not None else None)

        if initializer is not None:
            loop = Block([initializer, loop])

        return loop

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        body = self.loop_body()

        return While(condition, body)

    def loop_body(self):
        # Not reset by function or lambda bodies, so a 'break' inside a
        # function literal in a loop body is accepted here.
        self.loop_depth += 1
        try:
            return self.statement()
        finally:
            self.loop_depth -= 1

    def logic_statement(self):
        keyword = self.previous()
        if self.loop_depth == 0:
            raise self.error(keyword, f"Can't use '{keyword.lexeme}' outside of a loop.")
        self.consume(TokenType.SEMICOLON, f"Expect ';' after '{keyword.lexeme}'.")
        return Logic(keyword)

    def if_Statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None

        if self.match(TokenType.ELSE):
            else_branch = self.statement()

        return If(condition, then_branch, else_branch)

    def block(self):
        statements = []

        while not self.check(TokenType.RIGHT_BRACE) and not self.isAtEnd():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def printStatement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def expressionStatement(self):
        expr = self.expression()
        if self.match(TokenType.SEMICOLON):
            return Expression(expr)
        # No ';': the value is echoed, as at the prompt
        return Repl(expr)

    ##############HELPERS#############
    def match(self, *types):
        for type in types:
            if self.check(type):
                self.advance()
                return True
        return False

    def check(self, type):
        if self.isAtEnd():
            return False
        return self.peek().type == type

    def advance(self):
        if not self.isAtEnd():
            self.current += 1
        return self.previous()

    def isAtEnd(self):
        return self.peek().type == TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.tokens):
            return self.tokens[-1]
        return self.tokens[self.current + 1]

    def previous(self):
        return self.tokens[self.current - 1]

    def consume(self, type, message):
        if self.check(type):
            return self.advance()

        raise self.error(self.peek(), message)

    def error(self, token, message):
        self.lox.error(token, message)
        return ParseError(message)

    def synchronize(self):
        self.advance()
        while not self.isAtEnd():
            if self.previous().type == TokenType.SEMICOLON:
                return

            if self.peek().type in {
                TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
                TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
            }:
                return

            self.advance()
