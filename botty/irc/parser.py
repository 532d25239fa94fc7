"""IRC line parsing.

Grammar handled here::

    [':' source ' '] command *(' ' middle) [' :' trailing]

Only the first ``" :"`` separates the trailing argument, which is kept
verbatim. Message tags and CTCP framing are not interpreted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from ..errors.internal import ParseError
from .models import (
    Command,
    Join,
    Msg,
    MsgMeta,
    Notice,
    Numeric,
    Other,
    Part,
    Ping,
    Privmsg,
)

_ASCII_WS = re.compile(r"[ \t\n\v\f\r]+")
_DIGITS = frozenset("0123456789")
_TRAILING_SEP = " :"


@dataclass(slots=True)
class LineParts:
    source: str | None
    command: str
    args: list[str]
    trailing: str | None

    @property
    def first_arg(self) -> str | None:
        return self.args[0] if self.args else None

    def trailing_or_first(self) -> str | None:
        return self.trailing if self.trailing is not None else self.first_arg

    def is_numeric(self) -> bool:
        return len(self.command) == 3 and all(c in _DIGITS for c in self.command)


def split_trailing(line: str) -> tuple[str, str | None]:
    before, sep, trailing = line.partition(_TRAILING_SEP)
    return before, trailing if sep else None


def split_ascii_words(text: str) -> list[str]:
    """Split on ASCII whitespace only; other spaces stay inside words."""
    return [t for t in _ASCII_WS.split(text) if t]


def tokenize_line(line: str) -> LineParts:
    before, trailing = split_trailing(line)
    tokens = split_ascii_words(before)
    if not tokens:
        raise ParseError("empty line", line)

    source: str | None = None
    if tokens[0].startswith(":"):
        source = tokens.pop(0).lstrip(":")
        if not tokens:
            raise ParseError("missing command", line)
    return LineParts(
        source=source, command=tokens[0], args=tokens[1:], trailing=trailing
    )


def _required_first(parts: LineParts, line: str) -> str:
    first = parts.first_arg
    if first is None:
        raise ParseError(f"{parts.command} without target", line)
    return first


def build_command(parts: LineParts, line: str = "") -> Command:
    """Map tokenized parts onto one of the command variants."""
    verb = parts.command
    if verb == "PING":
        return Ping(token=parts.trailing_or_first())
    if verb == "PRIVMSG":
        return Privmsg(
            target=_required_first(parts, line), message=parts.trailing or ""
        )
    if verb == "JOIN":
        return Join(channel=_required_first(parts, line), message=parts.trailing)
    if verb == "PART":
        return Part(channel=_required_first(parts, line), message=parts.trailing)
    if verb == "NOTICE":
        return Notice(
            target=_required_first(parts, line), message=parts.trailing or ""
        )
    if parts.is_numeric():
        return Numeric(
            code=int(verb),
            args=tuple(parts.args),
            trailing=parts.trailing_or_first(),
        )
    return Other()


def parse_line(line: str, now: datetime) -> Msg:
    """Parse one protocol line (without its terminator).

    Raises:
        ParseError: for blank lines, a missing command, or a PRIVMSG, JOIN,
            PART or NOTICE without its first argument.
    """
    parts = tokenize_line(line)
    command = build_command(parts, line)
    return Msg(meta=MsgMeta(raw=line, timestamp=now), source=parts.source, command=command)


__all__ = [
    "LineParts",
    "build_command",
    "parse_line",
    "split_ascii_words",
    "split_trailing",
    "tokenize_line",
]
