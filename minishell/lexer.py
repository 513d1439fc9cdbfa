"""Tokenizer for shell command lines and a cursor over its tokens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from .utils import is_name_char


class TokenType(Enum):
    WORD = 1
    ASSIGNMENT_WORD = 2
    PIPE = 3
    AND = 4
    OR = 5
    SEMI = 6
    AMP = 7
    REDIR_IN = 8
    REDIR_OUT = 9
    REDIR_APPEND = 10
    HEREDOC = 11
    LPAREN = 12
    RPAREN = 13
    EOF = 14


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: Optional[str] = None


_SPACES = frozenset(" \t\n")
_META = frozenset("|&;()<>")

_DOUBLE_META = {
    "||": TokenType.OR,
    "&&": TokenType.AND,
    ">>": TokenType.REDIR_APPEND,
    "<<": TokenType.HEREDOC,
}

_SINGLE_META = {
    "|": TokenType.PIPE,
    "&": TokenType.AMP,
    ">": TokenType.REDIR_OUT,
    "<": TokenType.REDIR_IN,
    ";": TokenType.SEMI,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


def _classify_word(lexeme: str) -> TokenType:
    """Tell an assignment word (``NAME=value`` / ``NAME+=value``) from a word."""
    if lexeme[0].isascii() and lexeme[0].isdigit():
        return TokenType.WORD
    for i, ch in enumerate(lexeme):
        if ch == "=":
            if 0 < i < len(lexeme) - 1:
                return TokenType.ASSIGNMENT_WORD
            return TokenType.WORD
        if not is_name_char(ch) and ch != "+":
            return TokenType.WORD
    return TokenType.WORD


class Lexer:
    """Splits a command line into tokens, one at a time."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _read_word(self) -> str:
        start = self.pos
        text = self.text
        in_single = in_double = False
        while self.pos < len(text):
            ch = text[self.pos]
            if not in_double and ch == "'":
                in_single = not in_single
            elif not in_single and ch == '"':
                in_double = not in_double
            elif not in_single and not in_double and (ch in _SPACES or ch in _META):
                break
            self.pos += 1
        return text[start : self.pos]

    def next_token(self) -> Token:
        """Return the next token; EOF once the input is used up."""
        text = self.text
        while self.pos < len(text) and text[self.pos] in _SPACES:
            self.pos += 1
        if self.pos >= len(text):
            return Token(TokenType.EOF)
        pair = text[self.pos : self.pos + 2]
        if pair in _DOUBLE_META:
            self.pos += 2
            return Token(_DOUBLE_META[pair])
        ch = text[self.pos]
        if ch in _SINGLE_META:
            self.pos += 1
            return Token(_SINGLE_META[ch])
        lexeme = self._read_word()
        return Token(_classify_word(lexeme), lexeme)

    def __iter__(self) -> Iterator[Token]:
        """Yield the remaining tokens, ending with a single EOF token."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenType.EOF:
                return


class TokenStream:
    """A cursor over a token list; reading past the end repeats the last token."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens: List[Token] = list(tokens) or [Token(TokenType.EOF)]
        self.position = 0
        self.current: Optional[Token] = None

    def peek(self) -> Token:
        return self.tokens[min(self.position, len(self.tokens) - 1)]

    def check(self, kind: TokenType) -> bool:
        return self.peek().kind is kind

    def match(self, kind: TokenType) -> Optional[Token]:
        """Consume and return the next token if it is of ``kind``."""
        if not self.check(kind):
            return None
        self.current = self.peek()
        self.position += 1
        return self.current


def tokenize(text: str) -> TokenStream:
    """Tokenize a whole command line into a stream ending with EOF."""
    return TokenStream(Lexer(text))