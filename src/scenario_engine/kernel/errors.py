"""
Error taxonomy for the scenario interpreter.

Every failure surfaced to a script author derives from ScenarioError and
renders as a single descriptive line. Context (subsystem, command, argument,
position, token, line) is attached with annotate() as the error travels
outward through the binder, dispatcher and engine.

    parse time    -> MalformedScript
    dispatch time -> UnknownSubsystem, UnknownCommand
    bind time     -> MissingArgument, ExtraArguments, CoercionError, LookupFailure
    execute time  -> InvocationFailure, HandlerContractError
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

_CONTEXT_KEYS = ("subsystem", "command", "argument", "position", "token", "line")


class ScenarioError(Exception):
    """Base class for all interpreter errors."""

    kind = "scenario_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = {}

    def annotate(self, **context: Any) -> "ScenarioError":
        """Attach context without overwriting anything set closer to the fault."""
        for key, value in context.items():
            if value is not None and key not in self.context:
                self.context[key] = value
        return self

    def location(self) -> str:
        parts = []
        if "line" in self.context:
            parts.append(f"line {self.context['line']}")
        if "subsystem" in self.context:
            parts.append(self.context["subsystem"])
        if "command" in self.context:
            parts.append(self.context["command"])
        if "argument" in self.context:
            arg = self.context["argument"]
            if "position" in self.context:
                arg = f"{arg}#{self.context['position']}"
            parts.append(f"<{arg}>")
        return " ".join(parts)

    def __str__(self) -> str:
        where = self.location()
        text = f"{self.kind}: {self.message}"
        return f"{text} [{where}]" if where else text


class MalformedScript(ScenarioError):
    kind = "malformed_script"

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"{message} at line {line}, column {column}")
        self.line = line
        self.column = column


class UnknownCommand(ScenarioError):
    kind = "unknown_command"

    def __init__(self, name: str, subsystem: Optional[str] = None) -> None:
        scope = f"{subsystem} " if subsystem else ""
        super().__init__(f"found unknown {scope}command {name!r}")
        self.name = name
        self.annotate(subsystem=subsystem)


class UnknownSubsystem(UnknownCommand):
    """A statement head naming neither a subsystem nor a core command."""

    kind = "unknown_subsystem"

    def __init__(self, name: str) -> None:
        ScenarioError.__init__(self, f"no subsystem or core command named {name!r}")
        self.name = name


class MissingArgument(ScenarioError):
    kind = "missing_argument"

    def __init__(self, name: str) -> None:
        super().__init__(f"missing required argument {name!r}")
        self.name = name


class ExtraArguments(ScenarioError):
    kind = "extra_arguments"

    def __init__(self, tokens: Sequence[str]) -> None:
        shown = " ".join(tokens)
        super().__init__(f"unexpected trailing arguments: {shown}")
        self.tokens = list(tokens)


class CoercionError(ScenarioError):
    kind = "coercion_error"

    def __init__(self, expected: str, received: str) -> None:
        super().__init__(f"expected {expected}, received {received!r}")
        self.expected = expected
        self.received = received
        self.annotate(token=received)


class LookupFailure(ScenarioError, LookupError):
    kind = "lookup_error"

    def __init__(self, name: str, what: str = "name") -> None:
        super().__init__(f"could not resolve {what} {name!r}")
        self.name = name
        self.what = what


class InvocationFailure(ScenarioError):
    kind = "invocation_failure"

    def __init__(
        self,
        description: str,
        error_message: Optional[str] = None,
        receipt: Any = None,
    ) -> None:
        detail = f": {error_message}" if error_message else ""
        super().__init__(f"{description} failed{detail}")
        self.description = description
        self.error_message = error_message
        self.receipt = receipt


class HandlerContractError(ScenarioError):
    kind = "handler_contract"


class CommandDeclarationError(ScenarioError, ValueError):
    kind = "command_declaration"


class ConfigError(ScenarioError):
    kind = "config_error"
