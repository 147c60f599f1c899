from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


class TokenType(Enum):
    """
    The different kinds of tokens found in a .map file.
    """
    # Section keywords
    GRAPH = "GRAPH"
    VEHICLES = "VEHICLES"
    SPAWNERS = "SPAWNERS"
    INTERSECTIONS = "INTERSECTIONS"

    # Object definition keywords
    NODE = "NODE"
    UEDGE = "UEDGE"  # One-way road
    BEDGE = "BEDGE"  # Two-way road
    CAR = "CAR"
    BIKE = "BIKE"
    BUS = "BUS"
    SPAWNER = "SPAWNER"
    TRAFFIC_LIGHT = "TRAFFIC_LIGHT"

    # Punctuation
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    COLON = "COLON"
    COMMA = "COMMA"
    EQUALS = "EQUALS"

    # Literals and identifiers
    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"

    # Control tokens
    EOF = "EOF"
    NEWLINE = "NEWLINE"


KEYWORDS = {
    token_type.value: token_type
    for token_type in (
        TokenType.GRAPH, TokenType.VEHICLES, TokenType.SPAWNERS, TokenType.INTERSECTIONS,
        TokenType.NODE, TokenType.UEDGE, TokenType.BEDGE, TokenType.CAR, TokenType.BIKE,
        TokenType.BUS, TokenType.SPAWNER, TokenType.TRAFFIC_LIGHT,
    )
}

VEHICLE_KEYWORDS = (TokenType.CAR, TokenType.BIKE, TokenType.BUS)

PUNCTUATION = {
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ':': TokenType.COLON,
    ',': TokenType.COMMA,
    '=': TokenType.EQUALS,
}


@dataclass
class Token:
    """
    A single token, with its position in the source for error messages.
    """
    type: TokenType
    value: Any
    line: int
    column: int


class Tokenizer:
    """
    Scans the text of a .map file and turns it into a list of tokens.

    Everything from a '#' to the end of the line is a comment.
    """

    def __init__(self, content: str):
        self.content = content
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []

    def current_char(self) -> Optional[str]:
        if self.pos >= len(self.content):
            return None
        return self.content[self.pos]

    def peek_char(self, offset: int = 1) -> Optional[str]:
        pos = self.pos + offset
        if pos >= len(self.content):
            return None
        return self.content[pos]

    def advance(self):
        if self.pos < len(self.content):
            if self.content[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace_and_comments(self):
        while self.current_char() is not None:
            char = self.current_char()
            if char in (' ', '\t', '\r'):
                self.advance()
            elif char == '#':
                while self.current_char() not in (None, '\n'):
                    self.advance()
            else:
                break

    def read_number(self) -> Token:
        """Reads an integer or decimal number, optionally negative."""
        start_col = self.column
        num_str = ""
        if self.current_char() == '-':
            num_str += '-'
            self.advance()

        has_dot = False
        while self.current_char() is not None and (self.current_char().isdigit() or self.current_char() == '.'):
            if self.current_char() == '.':
                if has_dot:
                    break
                has_dot = True
            num_str += self.current_char()
            self.advance()

        value = float(num_str) if has_dot else int(num_str)
        return Token(TokenType.NUMBER, value, self.line, start_col)

    def read_identifier(self) -> Token:
        """Reads a word, which is either a keyword or an identifier."""
        start_col = self.column
        ident = ""
        while self.current_char() is not None and (self.current_char().isalnum() or self.current_char() == '_'):
            ident += self.current_char()
            self.advance()
        return Token(KEYWORDS.get(ident, TokenType.IDENTIFIER), ident, self.line, start_col)

    def tokenize(self) -> List[Token]:
        while True:
            self.skip_whitespace_and_comments()
            char = self.current_char()
            if char is None:
                break
            col = self.column

            if char == '\n':
                self.tokens.append(Token(TokenType.NEWLINE, '\n', self.line, col))
                self.advance()
            elif char in PUNCTUATION:
                self.tokens.append(Token(PUNCTUATION[char], char, self.line, col))
                self.advance()
            elif char.isdigit() or (char == '-' and self.peek_char() is not None and self.peek_char().isdigit()):
                self.tokens.append(self.read_number())
            elif char.isalpha() or char == '_':
                self.tokens.append(self.read_identifier())
            else:
                raise SyntaxError(f"Unexpected character '{char}' at line {self.line}, column {col}")

        self.tokens.append(Token(TokenType.EOF, None, self.line, self.column))
        return self.tokens
