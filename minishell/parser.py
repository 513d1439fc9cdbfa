"""Recursive descent parser turning tokens into a syntax tree."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, Callable, List, Optional

from .ast import AndList, Command, CommandLine, Grouping, Node, OrList, Pipeline, Redirect
from .expand import expanded
from .lexer import Token, TokenStream, TokenType, tokenize

if TYPE_CHECKING:
    from .state import Shell

ReadLine = Callable[[str], Optional[str]]

HEREDOC_PROMPT = "heredoc> "

_TOKEN_NAMES = {
    TokenType.PIPE: "|",
    TokenType.AND: "&&",
    TokenType.OR: "||",
    TokenType.SEMI: ";",
    TokenType.AMP: "&",
    TokenType.REDIR_IN: "<",
    TokenType.REDIR_OUT: ">",
    TokenType.REDIR_APPEND: ">>",
    TokenType.HEREDOC: "<<",
    TokenType.LPAREN: "(",
    TokenType.RPAREN: ")",
    TokenType.EOF: "newline",
}

_REDIR_KINDS = (
    TokenType.REDIR_IN,
    TokenType.REDIR_OUT,
    TokenType.REDIR_APPEND,
    TokenType.HEREDOC,
)


class ParseError(Exception):
    """A syntax error at an unexpected token."""

    def __init__(self, token: str) -> None:
        super().__init__(f"syntax error near unexpected token '{token}'")
        self.token = token


class HeredocInterrupted(Exception):
    """Reading a here-document was interrupted by the user."""


def token_name(token: Token) -> str:
    """How a token is shown in syntax error messages."""
    if token.kind in (TokenType.WORD, TokenType.ASSIGNMENT_WORD):
        return token.lexeme or ""
    return _TOKEN_NAMES.get(token.kind, "unknown token")


def _default_read_line(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


class Parser:
    """Parses one command line from a token stream."""

    def __init__(
        self, shell: "Shell", stream: TokenStream, read_line: Optional[ReadLine] = None
    ) -> None:
        self.shell = shell
        self.stream = stream
        self.read_line = read_line or _default_read_line

    def _error(self) -> ParseError:
        return ParseError(token_name(self.stream.peek()))

    def _redir_ahead(self) -> bool:
        return any(self.stream.check(kind) for kind in _REDIR_KINDS)

    def _match_redir(self) -> Optional[TokenType]:
        for kind in _REDIR_KINDS:
            if self.stream.match(kind):
                return kind
        return None

    def parse(self) -> Node:
        return self.parse_command_line()

    def parse_command_line(self) -> CommandLine:
        body = self.parse_or_list()
        terminator = ""
        if self.stream.match(TokenType.SEMI):
            terminator = ";"
        elif self.stream.match(TokenType.AMP):
            terminator = "&"
        return CommandLine(body, terminator)

    def parse_or_list(self) -> Node:
        lhs = self.parse_and_list()
        while self.stream.match(TokenType.OR):
            lhs = OrList(lhs, self.parse_and_list())
        return lhs

    def parse_and_list(self) -> Node:
        lhs = self.parse_pipeline()
        while self.stream.match(TokenType.AND):
            lhs = AndList(lhs, self.parse_pipeline())
        return lhs

    def parse_pipeline(self) -> Pipeline:
        pipeline = Pipeline([self.parse_core()])
        while self.stream.match(TokenType.PIPE):
            pipeline.cores.append(self.parse_core())
        return pipeline

    def parse_core(self) -> Node:
        if self.stream.check(TokenType.LPAREN):
            return self.parse_grouping()
        if (
            self.stream.check(TokenType.WORD)
            or self.stream.check(TokenType.ASSIGNMENT_WORD)
            or self._redir_ahead()
        ):
            return self.parse_command()
        raise self._error()

    def parse_grouping(self) -> Grouping:
        if not self.stream.match(TokenType.LPAREN):
            raise self._error()
        body = self.parse_command_line()
        if not self.stream.match(TokenType.RPAREN):
            raise self._error()
        return Grouping(body, self.parse_core_redirs())

    def parse_command(self) -> Command:
        assignments = self.parse_assignments()
        argv: List[str] = []
        redirs: List[Redirect] = []
        while True:
            token = self.stream.match(TokenType.WORD) or self.stream.match(
                TokenType.ASSIGNMENT_WORD
            )
            if token is not None:
                argv.append(token.lexeme or "")
            elif self._redir_ahead():
                redirs.extend(self.parse_core_redirs())
            else:
                break
        return Command(assignments, argv, redirs)

    def parse_assignments(self) -> List[str]:
        """Collect leading assignment words.

        Nothing is collected before the first token of the line has been
        consumed, so the very first command takes its assignments as words.
        """
        assignments: List[str] = []
        while self.stream.current is not None:
            token = self.stream.match(TokenType.ASSIGNMENT_WORD)
            if token is None:
                break
            assignments.append(token.lexeme or "")
        return assignments

    def parse_core_redirs(self) -> List[Redirect]:
        redirs: List[Redirect] = []
        while self._redir_ahead():
            redir = self.parse_redir()
            if redir is None:
                break
            redirs.append(redir)
        return redirs

    def parse_redir(self) -> Optional[Redirect]:
        kind = self._match_redir()
        if kind is None:
            return None
        token = self.stream.match(TokenType.WORD)
        if token is None:
            raise self._error()
        if kind is TokenType.HEREDOC:
            return Redirect(kind, heredoc=self.read_heredoc(token.lexeme or ""))
        return Redirect(kind, file_name=token.lexeme)

    def read_heredoc(self, delimiter: str) -> str:
        """Read here-document lines up to ``delimiter`` and return the body.

        A quoted delimiter is unquoted and disables variable expansion in
        the body. Interruption sets the exit status to 130.
        """
        quoted = "'" in delimiter or '"' in delimiter
        if quoted:
            delimiter = expanded(None, delimiter, False, True)
        lines: List[str] = []
        while True:
            try:
                line = self.read_line(HEREDOC_PROMPT)
            except KeyboardInterrupt:
                self.shell.last_status = 130
                raise HeredocInterrupted() from None
            if line is None:
                break
            if not quoted:
                line = expanded(self.shell.env, line, True, False)
            if line == delimiter:
                break
            lines.append(line + "\n")
        return "".join(lines)


def parse(
    shell: "Shell", text: str, read_line: Optional[ReadLine] = None
) -> Optional[Node]:
    """Parse ``text``; report errors and return None when parsing fails."""
    parser = Parser(shell, tokenize(text), read_line)
    try:
        return parser.parse()
    except ParseError as exc:
        sys.stderr.write(f"minishell: {exc}\n")
    except HeredocInterrupted:
        sys.stdout.write("\n")
        sys.stdout.flush()
    return None