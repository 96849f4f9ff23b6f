"""
Tokenizer for machine definition files.

Lines end at "\n" only. Each line is split on spaces, tabs and other ASCII
whitespace. Brackets and parentheses are always tokens of their own, a word
starting with '#' turns the rest of the line into a single COMMENT token,
and every line ends with a NEWLINE token so the parser can tell where a
clause was cut short.
"""

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    WORD = "WORD"
    LBRACKET = "["
    RBRACKET = "]"
    LPAREN = "("
    RPAREN = ")"
    COMMENT = "#"
    NEWLINE = "NEWLINE"
    EOF = "EOF"


DELIMITERS = {
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    line: int

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, L{self.line})"


def _tokenize_line(text, lineno):
    tokens = []
    buffer = ""
    for idx, char in enumerate(text):
        if char in " \t\r\f\v":
            if buffer:
                tokens.append(Token(TokenType.WORD, buffer, lineno))
                buffer = ""
        elif char in DELIMITERS:
            if buffer:
                tokens.append(Token(TokenType.WORD, buffer, lineno))
                buffer = ""
            tokens.append(Token(DELIMITERS[char], char, lineno))
        elif char == "#" and not buffer:
            tokens.append(Token(TokenType.COMMENT, text[idx:].rstrip(), lineno))
            return tokens
        else:
            buffer += char
    if buffer:
        tokens.append(Token(TokenType.WORD, buffer, lineno))
    return tokens


def tokenize(source):
    """Return the full token list for a definition, ending with an EOF token."""
    tokens = []
    lines = source.split("\n")
    if lines[-1] == "":
        lines.pop()
    lineno = 0
    for lineno, text in enumerate(lines, start=1):
        tokens.extend(_tokenize_line(text.rstrip("\r"), lineno))
        tokens.append(Token(TokenType.NEWLINE, "\n", lineno))
    tokens.append(Token(TokenType.EOF, "", max(lineno, 1)))
    return tokens
