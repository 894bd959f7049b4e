"""
FILE: jot/repl/parser.py
PURPOSE: Split a REPL line into command, positional args and --flags
EXPORTS:
  - ParseResult (dataclass)
  - parse_command(line) -> ParseResult
DEPENDENCIES:
  - shlex (quote-aware splitting)
NOTES:
  - The command word is lower-cased; args keep their case and order
  - "--name value" and "--name=value" set a value flag, a bare "--name" sets True
  - An empty quoted value (--due "") is kept as ""
  - Unbalanced quotes fall back to whitespace splitting
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class ParseResult:
    """
    One parsed REPL line.

    Attributes:
        command: First word, lower-cased ("" for a blank line)
        args: Positional words, e.g. ['Buy milk'] or ['3,4']
        flags: {"priority": "high", "cancel": True}
        raw_input: The stripped line as typed
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, str | bool] = field(default_factory=dict)
    raw_input: str = ""

    def flag(self, name: str) -> str | None:
        """Value of a value-flag, or None when absent or given without a value."""
        value = self.flags.get(name)
        return value if isinstance(value, str) else None

    def subcommand(self) -> "ParseResult":
        """Shift the first positional arg into the command slot."""
        head, *rest = self.args or [""]
        return ParseResult(head.lower(), rest, dict(self.flags), self.raw_input)


def _tokenize(line: str) -> List[str]:
    try:
        return shlex.split(line)
    except ValueError:
        return line.split()


def parse_command(input_str: str) -> ParseResult:
    """
    Parse one line of REPL input.

    Examples:
        >>> parse_command('add "Call mom" --priority high')
        ParseResult(command='add', args=['Call mom'], flags={'priority': 'high'}, ...)

        >>> parse_command("edit 4 --due=2025-03-01 --cancel")
        ParseResult(command='edit', args=['4'], flags={'due': '2025-03-01', 'cancel': True}, ...)
    """
    line = input_str.strip()
    tokens = _tokenize(line) if line else []
    if not tokens:
        return ParseResult(command="", raw_input=line)

    args: List[str] = []
    flags: Dict[str, str | bool] = {}
    rest = iter(range(1, len(tokens)))

    for i in rest:
        token = tokens[i]
        if not (token.startswith("--") and len(token) > 2):
            args.append(token)
            continue

        name, has_value, value = token[2:].partition("=")
        name = name.lower()
        if has_value:
            flags[name] = value
        elif i + 1 < len(tokens) and not tokens[i + 1].startswith("--"):
            flags[name] = tokens[i + 1]
            next(rest)
        else:
            flags[name] = True

    return ParseResult(command=tokens[0].lower(), args=args, flags=flags, raw_input=line)
