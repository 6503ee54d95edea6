"""
World: the threaded execution context.

A World is an immutable snapshot. Every command handler receives one and, if
it has an effect, returns a new one built with add_action() / with_contract();
nothing ever mutates a World it was given. A World lives for one scenario run.

The Printer is the World's I/O membrane: all user-visible output goes through
its output_sink (the CLI passes print, tests pass a list's append).
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

LOCAL_NETWORKS = ("development", "test", "coverage")

_LOG_PREFIXES = {
    "debug": "[DEBUG]",
    "info": "[SCENARIO]",
    "warn": "[WARN]",
    "error": "[ERROR]",
}


class Contract(BaseModel):
    """Handle for a deployed contract registered in the World."""

    model_config = ConfigDict(frozen=True)

    name: str
    kind: str
    address: str
    description: Optional[str] = None


class Receipt(BaseModel):
    """Opaque result of an external invocation."""

    model_config = ConfigDict(frozen=True)

    success: bool
    error_message: Optional[str] = None
    events: Tuple[Dict[str, Any], ...] = ()
    transaction: Optional[str] = None


class Action(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    receipt: Optional[Receipt] = None


class Printer:
    """Line-oriented output sink; falls back to stdout without a sink."""

    def __init__(
        self,
        output_sink: Optional[Callable[[str], None]] = None,
        verbose: bool = False,
    ) -> None:
        self.output_sink = output_sink
        self.verbose = verbose

    def print_line(self, line: str) -> None:
        if self.output_sink:
            self.output_sink(line)
        else:
            print(line)

    def print_log(self, message: str, level: str = "info") -> None:
        if level == "debug" and not self.verbose:
            return
        prefix = _LOG_PREFIXES.get(level, _LOG_PREFIXES["info"])
        self.print_line(f"{prefix} {message}")

    def print_action(self, action: Action) -> None:
        self.print_line(f"Action: {action.description}")

    def print_actions(self, actions: Iterable[Action]) -> None:
        for index, action in enumerate(actions, start=1):
            self.print_line(f"{index:>4}. {action.description}")

    def print_value(self, name: str, value: Any) -> None:
        self.print_line(f"{name}: {value.show()}")


class World(BaseModel):
    """
    Snapshot of everything a command may read.

    Collaborators (printer, invoker, verifier) are excluded from
    serialization; they are shared by every snapshot derived from this one.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    network: str = "development"
    accounts: Dict[str, str] = Field(default_factory=dict)
    contracts: Dict[str, Contract] = Field(default_factory=dict)
    actions: Tuple[Action, ...] = ()
    read_only: bool = False

    printer: Printer = Field(default_factory=Printer, exclude=True)
    invoker: Optional[Any] = Field(default=None, exclude=True)
    verifier: Optional[Any] = Field(default=None, exclude=True)

    def is_local_network(self) -> bool:
        return self.network in LOCAL_NETWORKS

    def default_from(self) -> Optional[str]:
        """The acting account when a script does not name one: Root, else the first account."""
        for alias, address in self.accounts.items():
            if alias.lower() == "root":
                return address
        return next(iter(self.accounts.values()), None)

    def add_action(self, description: str, receipt: Optional[Receipt] = None) -> "World":
        action = Action(description=description, receipt=receipt)
        return self.model_copy(update={"actions": self.actions + (action,)})

    def with_contract(self, contract: Contract) -> "World":
        contracts = {**self.contracts, contract.name: contract}
        return self.model_copy(update={"contracts": contracts})

    def as_read_only(self) -> "World":
        return self.model_copy(update={"read_only": True})

    def last_action(self) -> Optional[Action]:
        return self.actions[-1] if self.actions else None
