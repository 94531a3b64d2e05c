##################################
############IMPORTS###############
##################################
from .tokens import Token, TokenType
##################################
############CLASSES###############
##################################
class Scanner:
    def __init__(self, source: str, lox):
        self.source = source
        self.lox = lox # Receives scan errors
        self.tokens = []
        self.start = 0
        self.current = 0
        self.line = 1
        self.comment_nest = 0
        self.comment_line = 0

    reserved_words = {
        "and": TokenType.AND,
        "break": TokenType.BREAK,
        "class": TokenType.CLASS,
        "continue": TokenType.CONTINUE,
        "else": TokenType.ELSE,
        "false": TokenType.FALSE,
        "fun": TokenType.FUN,
        "for": TokenType.FOR,
        "if": TokenType.IF,
        "nil": TokenType.NIL,
        "or": TokenType.OR,
        "print": TokenType.PRINT,
        "return": TokenType.RETURN,
        "super": TokenType.SUPER,
        "this": TokenType.THIS,
        "var": TokenType.VAR,
        "while": TokenType.WHILE,
        "true": TokenType.TRUE,
    }

    single_tokens = {
        '(': TokenType.LEFT_PAREN,
        ')': TokenType.RIGHT_PAREN,
        '{': TokenType.LEFT_BRACE,
        '}': TokenType.RIGHT_BRACE,
        ',': TokenType.COMMA,
        '.': TokenType.DOT,
        '-': TokenType.MINUS,
        '+': TokenType.PLUS,
        ';': TokenType.SEMICOLON,
        '*': TokenType.STAR,
        '?': TokenType.QUESTION_MARK,
        ':': TokenType.COLON,
    }

    def scan_tokens(self):
        while not self.is_at_end():
            self.start = self.current
            if self.comment_nest > 0:
                self.skip_comment()
            else:
                self.scan_token()

        if self.comment_nest > 0:
            self.lox.line_error(self.comment_line, "Unterminated block comment.")
        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        c = self.advance()
        #Tokens with exactly one character
        if c in self.single_tokens:
            self.add_token(self.single_tokens[c])
        #Tokens made of one or two characters
        elif c == '!':
            self.add_token(TokenType.BANG_EQUAL if self.match('=') else TokenType.BANG)
        elif c == '=':
            self.add_token(TokenType.EQUAL_EQUAL if self.match('=') else TokenType.EQUAL)
        elif c == '<':
            self.add_token(TokenType.LESS_EQUAL if self.match('=') else TokenType.LESS)
        elif c == '>':
            self.add_token(TokenType.GREATER_EQUAL if self.match('=') else TokenType.GREATER)
        #Token that may or may not be a comment
        elif c == '/':
            if self.match('/'):
                while self.peek() != '\n' and not self.is_at_end():
                    self.advance()
            elif self.match('*'):
                self.comment_nest = 1
                self.comment_line = self.line
            else:
                self.add_token(TokenType.SLASH)
        #Tokens that are whitespace
        elif c in {' ', '\r', '\t'}:
            pass
        elif c == '\n':
            self.line += 1
        elif c == '"':
            self.string()
        elif self.is_digit(c):
            self.number()
        elif self.isAlpha(c):
            self.identifier()
        else:
            self.lox.line_error(self.line, f"Unexpected character: {c}")

    def skip_comment(self):
        # Inside /* ... */ nothing is tokenized, only nesting and lines are tracked
        c = self.advance()
        if c == '\n':
            self.line += 1
        elif c == '/' and self.match('*'):
            self.comment_nest += 1
        elif c == '*' and self.match('/'):
            self.comment_nest -= 1

    def string(self):
        while self.peek() != '"' and not self.is_at_end():
            if self.peek() == '\n':
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.lox.line_error(self.line, "Unterminated string.")
            return

        self.advance()  # Closing quote
        text = self.source[self.start + 1:self.current - 1]
        self.add_token(TokenType.STRING, text)

    def number(self):
        while self.is_digit(self.peek()):
            self.advance()

        # A trailing '.' without digits after it is left for the DOT token
        if self.peek() == '.' and self.is_digit(self.peek_next()):
            self.advance()
            while self.is_digit(self.peek()):
                self.advance()

        value = float(self.source[self.start:self.current])
        self.add_token(TokenType.NUMBER, value)

    def match(self, expected: str):
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return '\0' if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        return '\0' if self.current + 1 >= len(self.source) else self.source[self.current + 1]

    def is_digit(self, c: str):
        return '0' <= c <= '9'

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        self.current += 1
        return self.source[self.current - 1]

    def add_token(self, type: TokenType, literal=None):
        text = self.source[self.start:self.current]
        self.tokens.append(Token(type, text, literal, self.line))

    def identifier(self):
        while self.isAlphaNumeric(self.peek()):
            self.advance()

        # Resolve reserved keywords (e.g., `print`, `class`) or fallback to IDENTIFIER
        text = self.source[self.start:self.current]
        type = self.reserved_words.get(text, TokenType.IDENTIFIER)
        self.add_token(type)

    def isAlpha(self, c):
        return (c >= 'a' and c <= 'z') or (c >= 'A' and c <= 'Z') or c == '_'

    def isAlphaNumeric(self, c):
        return self.isAlpha(c) or self.is_digit(c)
