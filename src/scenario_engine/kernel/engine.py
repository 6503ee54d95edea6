"""
ScenarioEngine: the single entry point for running script statements.

Architecture:
    script text ──> parse ──> ScenarioEngine.process_event()
                                 │
                                 ├── head names a subsystem ──> Subsystem command table
                                 └── head names a core command ──> core table (From, Print, History)

A head naming neither raises UnknownSubsystem, a kind of UnknownCommand.

Each statement runs Parse -> Bind -> Execute and yields the next World. Lines
run strictly in order; the first failure stops the run and the caller keeps
the World produced by the last successful line.

Example:
    engine = create_engine()
    world = await engine.process_line(world, "PriceOracle SetPrice sZRX 1.5")
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Tuple

from .command import Bound, Command, find_command, process_command_event
from .errors import MalformedScript, ScenarioError, UnknownSubsystem
from .event import Atom, EventList, parse_line, parse_script
from .registry import Subsystem, SubsystemRegistry
from .world import World

Dispatch = Callable[[World, EventList, Optional[str]], Awaitable[World]]
CoreTable = Callable[[Dispatch], Sequence[Command]]


@dataclass
class BoundCommand:
    """A statement that was routed and bound but not executed."""

    subsystem: Optional[str]
    command: Command
    args: Bound


class ScenarioEngine:
    def __init__(
        self,
        subsystems: Iterable[Subsystem] = (),
        core_table: Optional[CoreTable] = None,
    ) -> None:
        self._registry = SubsystemRegistry()
        for subsystem in subsystems:
            self._registry.register(subsystem)
        self._core: Tuple[Command, ...] = tuple(core_table(self.process_event)) if core_table else ()

    @property
    def registry(self) -> SubsystemRegistry:
        return self._registry

    def register(self, subsystem: Subsystem) -> None:
        self._registry.register(subsystem)

    def subsystems(self) -> List[Subsystem]:
        return self._registry.subsystems()

    def core_commands(self) -> Tuple[Command, ...]:
        return self._core

    def _route(self, event: EventList) -> Tuple[Optional[str], Sequence[Command], EventList]:
        """Pick the command table for a statement: (subsystem name, commands, remaining event)."""
        head = event.head
        if head is None:
            raise MalformedScript("empty statement", event.line or 1, 1)
        if isinstance(head, Atom):
            if head.token in self._registry:
                subsystem = self._registry.get(head.token)
                return subsystem.name, subsystem.commands, event.tail
            if any(command.matches(head.token) for command in self._core):
                return None, self._core, event
            raise UnknownSubsystem(head.token).annotate(line=event.line)
        raise UnknownSubsystem(head.show()).annotate(line=event.line)

    async def process_event(
        self, world: World, event: EventList, from_: Optional[str] = None
    ) -> World:
        subsystem, commands, rest = self._route(event)
        world.printer.print_log(f"{event}", "debug")
        return await process_command_event(subsystem, commands, world, rest, from_)

    async def bind_event(self, world: World, event: EventList) -> BoundCommand:
        """Route and bind a statement without running it."""
        subsystem, commands, rest = self._route(event)
        command = None
        try:
            command = find_command(subsystem, commands, rest)
            args = await command.bind(world, rest.tail)
        except ScenarioError as exc:
            exc.annotate(
                subsystem=subsystem,
                command=command.name if command else None,
                line=event.line,
            )
            raise
        return BoundCommand(subsystem=subsystem, command=command, args=args)

    async def process_line(self, world: World, text: str, from_: Optional[str] = None) -> World:
        event = parse_line(text)
        if not len(event):
            return world
        return await self.process_event(world, event, from_)

    async def run_script(self, world: World, text: str, from_: Optional[str] = None) -> World:
        """Run every statement in order; stops at the first error."""
        for statement in parse_script(text):
            world = await self.process_event(world, statement, from_)
        return world
