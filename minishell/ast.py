"""Syntax tree produced by the parser and consumed by the executor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .lexer import TokenType

_INDENT = "    "

_REDIR_NAMES = {
    TokenType.REDIR_IN: "<",
    TokenType.REDIR_OUT: ">",
    TokenType.REDIR_APPEND: ">>",
    TokenType.HEREDOC: "<<",
}


class Node:
    """Base class of every syntax tree node."""


@dataclass
class CommandLine(Node):
    """A list optionally ended by ``;`` or ``&`` (empty string for none)."""

    body: Node
    terminator: str = ""


@dataclass
class OrList(Node):
    """``left || right``."""

    left: Node
    right: Node


@dataclass
class AndList(Node):
    """``left && right``."""

    left: Node
    right: Node


@dataclass
class Pipeline(Node):
    """Cores (commands or groupings) joined by ``|``."""

    cores: List[Node] = field(default_factory=list)


@dataclass
class Redirect(Node):
    """One redirection; ``heredoc`` holds the collected body for ``<<``."""

    kind: TokenType
    file_name: Optional[str] = None
    heredoc: Optional[str] = None


@dataclass
class Command(Node):
    """A simple command: leading assignments, words and redirections."""

    assignments: List[str] = field(default_factory=list)
    argv: List[str] = field(default_factory=list)
    redirs: List[Redirect] = field(default_factory=list)

    @property
    def argc(self) -> int:
        return len(self.argv)


@dataclass
class Grouping(Node):
    """A parenthesised command line with its own redirections."""

    body: Node
    redirs: List[Redirect] = field(default_factory=list)


def _format_strs(strs: List[str]) -> str:
    if not strs:
        return "[N/A]\n"
    return " ".join(f'["{s}"]' for s in strs) + "\n"


def _format(node: Optional[Node], depth: int, out: List[str]) -> None:
    pad = _INDENT * depth
    if node is None:
        out.append(f"{pad}(null)\n")
    elif isinstance(node, CommandLine):
        out.append(f"{pad}[command_line] terminator={node.terminator or '0'}\n")
        _format(node.body, depth + 1, out)
    elif isinstance(node, (OrList, AndList)):
        label = "or_list" if isinstance(node, OrList) else "and_list"
        out.append(f"{pad}[{label}]\n")
        _format(node.left, depth + 1, out)
        _format(node.right, depth + 1, out)
    elif isinstance(node, Pipeline):
        out.append(f"{pad}[pipeline]\n")
        for core in node.cores:
            _format(core, depth + 1, out)
    elif isinstance(node, Command):
        inner = _INDENT * (depth + 1)
        out.append(f"{pad}[command]\n")
        out.append(f"{inner}[assigments]\t{_format_strs(node.assignments)}")
        out.append(f"{inner}[argv]\t\t{_format_strs(node.argv)}")
        out.append(f"{inner}[redirs]\t\t")
        if not node.redirs:
            out.append("[N/A]")
        for index, redir in enumerate(node.redirs):
            if index:
                out.append(" ")
            _format(redir, depth + 2, out)
        out.append("\n")
    elif isinstance(node, Grouping):
        out.append(f"{pad}[grouping] \n")
        out.append(f"{pad}[\n")
        _format(node.body, depth + 1, out)
        out.append(f"{pad}]\n")
    elif isinstance(node, Redirect):
        out.append(f"[{_REDIR_NAMES.get(node.kind, '?')},")
        if node.file_name and node.kind is not TokenType.HEREDOC:
            out.append(f'"{node.file_name}"]')
        else:
            out.append("<missing>")
    else:
        out.append(f"{pad}<unknown node {type(node).__name__}>\n")


def format_ast(node: Optional[Node], depth: int = 0) -> str:
    """Render a tree as indented text, one node per line."""
    out: List[str] = []
    _format(node, depth, out)
    return "".join(out)


def print_ast(node: Optional[Node], depth: int = 0) -> None:
    """Write :func:`format_ast` output to standard output."""
    print(format_ast(node, depth), end="")