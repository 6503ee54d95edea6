"""
Event trees: the parsed form of script text.

An Event is either an Atom (a single token) or an EventList (an ordered
sequence of sub-events). Parsing is pure: the same text always yields
structurally equal trees.

Script syntax:
    PriceOracle SetPrice sZRX 1.5        -- bare tokens separated by whitespace
    Print "quoted strings keep spaces"   -- double quotes, backslash escapes
    From Geoff (PriceOracle SetPrice sBAT [1 2 3])
                                         -- ( ) and [ ] nest into EventLists

A newline ends a statement only when no group is open.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple, Union

from .errors import MalformedScript

_PAIRS = {"(": ")", "[": "]"}
_CLOSERS = {")", "]"}
_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}
_DELIMITERS = set(_PAIRS) | _CLOSERS | {'"'}


@dataclass(frozen=True)
class Atom:
    token: str
    quoted: bool = field(default=False, compare=False)

    def show(self) -> str:
        needs_quotes = (
            self.quoted
            or not self.token
            or self.token.startswith("--")
            or any(ch.isspace() or ch in _DELIMITERS for ch in self.token)
        )
        if not needs_quotes:
            return self.token
        escaped = self.token.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'

    def __str__(self) -> str:
        return self.token


@dataclass(frozen=True)
class EventList:
    items: Tuple["Event", ...] = ()
    line: Optional[int] = field(default=None, compare=False)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator["Event"]:
        return iter(self.items)

    def __getitem__(self, index: int) -> "Event":
        return self.items[index]

    @property
    def head(self) -> Optional["Event"]:
        return self.items[0] if self.items else None

    @property
    def tail(self) -> "EventList":
        return EventList(self.items[1:], line=self.line)

    def show(self) -> str:
        return "(" + " ".join(item.show() for item in self.items) + ")"

    def __str__(self) -> str:
        return " ".join(item.show() for item in self.items)


Event = Union[Atom, EventList]


def show_event(event: Optional[Event]) -> str:
    return "<nothing>" if event is None else event.show()


class _Scanner:
    """Single-pass scanner tracking line and column for error reports."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.index = 0
        self.line = 1
        self.line_start = 0

    @property
    def column(self) -> int:
        return self.index - self.line_start + 1

    def peek(self) -> str:
        return self.text[self.index] if self.index < len(self.text) else ""

    def advance(self) -> str:
        ch = self.text[self.index]
        self.index += 1
        if ch == "\n":
            self.line += 1
            self.line_start = self.index
        return ch

    def read_string(self) -> str:
        line, column = self.line, self.column
        self.advance()  # opening quote
        chars: List[str] = []
        while True:
            ch = self.peek()
            if ch == "" or ch == "\n":
                raise MalformedScript("unterminated string", line, column)
            self.advance()
            if ch == '"':
                return "".join(chars)
            if ch == "\\":
                nxt = self.peek()
                if nxt not in _ESCAPES:
                    raise MalformedScript(
                        f"invalid escape \\{nxt}", self.line, self.column
                    )
                self.advance()
                chars.append(_ESCAPES[nxt])
            else:
                chars.append(ch)

    def read_token(self) -> str:
        start = self.index
        while True:
            ch = self.peek()
            if ch == "" or ch.isspace() or ch in _DELIMITERS:
                break
            self.advance()
        return self.text[start:self.index]

    def skip_comment(self) -> None:
        while self.peek() not in ("", "\n"):
            self.advance()


def parse_script(text: str) -> List[EventList]:
    """Parse a whole script into top-level statements, one EventList each."""
    scanner = _Scanner(text)
    statements: List[EventList] = []
    # (closer, opener line, opener column, parent items)
    stack: List[Tuple[str, int, int, List[Event]]] = []
    items: List[Event] = []
    statement_line: Optional[int] = None

    def emit(event: Event) -> None:
        nonlocal statement_line
        if not stack and statement_line is None:
            statement_line = scanner.line
        items.append(event)

    while True:
        ch = scanner.peek()
        if ch == "":
            break

        if ch == "\n":
            if not stack and items:
                statements.append(EventList(tuple(items), line=statement_line))
                items = []
                statement_line = None
            scanner.advance()
        elif ch.isspace():
            scanner.advance()
        elif ch == '"':
            line = scanner.line
            token = scanner.read_string()
            if not stack and statement_line is None:
                statement_line = line
            items.append(Atom(token, quoted=True))
        elif ch in _PAIRS:
            if not stack and statement_line is None:
                statement_line = scanner.line
            stack.append((_PAIRS[ch], scanner.line, scanner.column, items))
            items = []
            scanner.advance()
        elif ch in _CLOSERS:
            if not stack:
                raise MalformedScript(f"unmatched {ch!r}", scanner.line, scanner.column)
            closer, _, _, parent = stack[-1]
            if ch != closer:
                raise MalformedScript(
                    f"expected {closer!r} but found {ch!r}", scanner.line, scanner.column
                )
            stack.pop()
            group = EventList(tuple(items))
            items = parent
            scanner.advance()
            emit(group)
        elif ch == "-" and scanner.text.startswith("--", scanner.index):
            scanner.skip_comment()
        else:
            emit(Atom(scanner.read_token()))

    if stack:
        closer, line, column, _ = stack[-1]
        opener = next(o for o, c in _PAIRS.items() if c == closer)
        raise MalformedScript(f"unclosed {opener!r}", line, column)

    if items:
        statements.append(EventList(tuple(items), line=statement_line))
    return statements


def parse_line(text: str) -> EventList:
    """Parse exactly one statement; blank input yields an empty EventList."""
    statements = parse_script(text)
    if not statements:
        return EventList(())
    if len(statements) > 1:
        extra = statements[1]
        raise MalformedScript("expected a single statement", extra.line or 1, 1)
    return statements[0]
