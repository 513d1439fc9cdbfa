# minishell

A small command shell for POSIX systems. It reads a command line, parses
it into a syntax tree, prints that tree, and runs it, starting external
programs found along `PATH`.

## Installation

```
pip install .
```

## Usage

Start an interactive session:

```
minishell
```

The prompt is `minishell> `. End the session with Ctrl-D or `exit`.
Ctrl-C prints a new line instead of ending the shell; Ctrl-\ and SIGPIPE
are ignored.

Run a single command line and exit with its status:

```
minishell 'ls -l | grep py && ls missing || ls'
```

Before every line is run, its syntax tree is printed to standard output;
a line with a syntax error prints `(null)` after the error message
`minishell: syntax error near unexpected token '...'`.

## What the shell understands

- Pipelines: `cmd1 | cmd2 | cmd3`. Each member runs in a child process;
  the status is that of the last one, or 128 plus the signal number if
  it was killed by a signal.
- Logical lists: `cmd1 && cmd2`, `cmd1 || cmd2`, evaluated left to right
  with short-circuiting.
- Grouping with parentheses and redirections on the group:
  `(ls && ls /tmp) > out.txt`.
- Redirections `<`, `>`, `>>`, and heredocs with `<<`. A heredoc reads
  lines at the `heredoc> ` prompt up to the delimiter; `$NAME` is
  expanded in its body unless the delimiter contains a quote, in which
  case the delimiter is unquoted and the body kept literal.
- Quotes: single quotes keep text literal, double quotes still allow
  `$NAME`. Quotes are removed from words.
- `$NAME` expansion; unknown variables expand to nothing.
- After expansion a word is split on spaces, and each piece containing
  `*` is matched against the file system, segment by segment
  (`src/*/*.c`). Hidden entries match only patterns starting with a dot.
  A pattern that matches nothing is kept as written.
- The arguments after the command name are sorted after expansion.
- Assignment words before a command (`NAME=value cmd`) are passed to that
  command's environment only; without a command they set shell
  variables. Only assignments after the first token of a line are taken
  this way: on the very first command of a line they are treated as
  ordinary words.

## Builtins

- `export` with no arguments lists exported variables, sorted, as
  `declare -x NAME="value"`.
- `export NAME=value` sets and exports a variable; `export NAME+=more`
  appends to its current value.
- `unset NAME ...` removes variables.
- `exit [code]` leaves the shell with the given status (`exit` with more
  than one argument reports "too many arguments" and exits with 0).

A command that is a lone builtin runs in the shell itself; inside a
pipeline it runs in a child process and cannot change the shell.

## Using it from Python

```python
from minishell.state import Shell
from minishell.shell import exec_line

shell = Shell({"PATH": "/usr/bin:/bin"})
status = exec_line(shell, "ls | wc -l")
```

Other entry points:

- `minishell.lexer.tokenize(text)` returns a `TokenStream` of `Token`s.
- `minishell.parser.parse(shell, text, read_line)` returns the tree (or
  `None` after reporting an error); `Parser` raises `ParseError` and
  `HeredocInterrupted` instead.
- `minishell.ast.format_ast(node)` renders a tree as text.
- `minishell.expand.expanded(env, text, variables, quotes)` and
  `minishell.expand.expand_wildcards(word)` perform expansion.
- `minishell.envp.Environment` holds the shell's variables.

## What it does not do

- `cd`, `echo`, `env` and `pwd` are recognised as builtins but not
  implemented: they do nothing and return status 1, and the programs of
  the same name are not run in their place.
- A trailing `&` or `;` is accepted but `&` does not run the line in the
  background; there is no job control.
- There is no `$?`, no command history and no line editing beyond what
  the terminal provides.
- Only `*` is a wildcard.

## Running the tests

```
pip install .[test]
pytest
```