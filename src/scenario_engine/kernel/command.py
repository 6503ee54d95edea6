"""
Commands: declared, schema-bound script operations.

A subsystem exposes a table of Command objects. Each declares its arguments as
Arg metadata and a handler; one binder (bind_args) interprets that metadata
for every command, so all commands share identical binding semantics:

    1. implicit Args are resolved from the World and never consume input
    2. a trailing variadic Arg absorbs every remaining sub-event (even zero)
    3. any other Arg consumes exactly one sub-event, falling back to its
       default, or to None when nullable, or failing with MissingArgument
    4. input left over after the last Arg fails with ExtraArguments

Three kinds of command share the dispatch path:

    Command   mutating: handler(world, from_, args) -> World with exactly one new action
    View      read-only: handler(world, args) -> Value, never records an action
    Delegate  routes a nested event back through the processor; the nested
              command owns the action contract
"""
from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from .errors import (
    CommandDeclarationError,
    ExtraArguments,
    HandlerContractError,
    MalformedScript,
    MissingArgument,
    ScenarioError,
    UnknownCommand,
)
from .event import Atom, Event, EventList
from .value import ListV, NothingV, is_value
from .world import World

Coercion = Callable[[World, Optional[Event]], Awaitable[Any]]
Bound = Dict[str, Any]


@dataclass(frozen=True)
class Arg:
    """
    One declared parameter of a Command.

    `coerce` receives (world, event); implicit Args receive event=None.
    `mapped` applies only to variadic Args: coerce each remaining item and
    bind a ListV, instead of coercing the remainder once as an EventList.
    """

    name: str
    coerce: Coercion
    variadic: bool = False
    implicit: bool = False
    nullable: bool = False
    default: Any = None
    mapped: bool = False

    def __post_init__(self) -> None:
        if self.implicit and (self.variadic or self.default is not None or self.nullable):
            raise CommandDeclarationError(
                f"implicit argument {self.name!r} cannot be variadic, nullable or defaulted"
            )
        if self.mapped and not self.variadic:
            raise CommandDeclarationError(f"argument {self.name!r} is mapped but not variadic")
        if self.default is not None and not is_value(self.default):
            raise CommandDeclarationError(f"default for {self.name!r} must be a Value")


def _validate_args(command_name: str, args: Sequence[Arg]) -> None:
    seen = set()
    for index, arg in enumerate(args):
        if arg.name in seen:
            raise CommandDeclarationError(
                f"{command_name}: duplicate argument {arg.name!r}"
            )
        seen.add(arg.name)
        if arg.variadic and index != len(args) - 1:
            raise CommandDeclarationError(
                f"{command_name}: variadic argument {arg.name!r} must be last"
            )


async def _coerce(command: str, arg: Arg, world: World, event: Optional[Event], position: Optional[int]) -> Any:
    try:
        return await arg.coerce(world, event)
    except ScenarioError as exc:
        exc.annotate(command=command, argument=arg.name, position=position)
        raise


async def bind_args(command: str, args: Sequence[Arg], world: World, inputs: EventList) -> Bound:
    """Bind declared Args against the sub-events following a command's name."""
    remaining: List[Event] = list(inputs)
    position = 0
    bound: Bound = {}

    for arg in args:
        if arg.implicit:
            bound[arg.name] = await _coerce(command, arg, world, None, None)
            continue

        if arg.variadic:
            rest, remaining = remaining, []
            if arg.mapped:
                values = []
                for item in rest:
                    position += 1
                    values.append(await _coerce(command, arg, world, item, position))
                bound[arg.name] = ListV(val=tuple(values))
            else:
                group = EventList(tuple(rest), line=inputs.line)
                bound[arg.name] = await _coerce(command, arg, world, group, position + 1)
                position += len(rest)
            continue

        if not remaining:
            if arg.default is not None:
                bound[arg.name] = arg.default
            elif arg.nullable:
                bound[arg.name] = None
            else:
                raise MissingArgument(arg.name).annotate(
                    command=command, argument=arg.name, position=position + 1
                )
            continue

        event = remaining.pop(0)
        position += 1
        bound[arg.name] = await _coerce(command, arg, world, event, position)

    if remaining:
        raise ExtraArguments([event.show() for event in remaining]).annotate(
            command=command, position=position + 1
        )
    return bound


class Command:
    """A mutating command: its handler returns a World with one new action."""

    kind = "mutating"

    def __init__(
        self,
        name: str,
        args: Sequence[Arg],
        handler: Callable[..., Awaitable[Any]],
        doc: str = "",
    ) -> None:
        _validate_args(name, args)
        self.name = name
        self.args = tuple(args)
        self.handler = handler
        self.doc = textwrap.dedent(doc).strip()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

    def matches(self, name: str) -> bool:
        return self.name.lower() == name.lower()

    async def bind(self, world: World, inputs: EventList) -> Bound:
        return await bind_args(self.name, self.args, world, inputs)

    async def process(self, world: World, from_: Optional[str], inputs: EventList) -> World:
        args = await self.bind(world, inputs)
        result = await self.handler(world, from_, args)
        if not isinstance(result, World):
            raise HandlerContractError(
                f"{self.name} must return a World, got {type(result).__name__}"
            )
        self._check_single_action(world, result)
        result.printer.print_action(result.actions[-1])
        return result

    def _check_single_action(self, before: World, after: World) -> None:
        count = len(before.actions)
        added = len(after.actions) - count
        if added != 1 or after.actions[:count] != before.actions:
            raise HandlerContractError(
                f"{self.name} must append exactly one action (appended {added})"
            )


class View(Command):
    """A read-only command: its handler sees a read-only World and returns a Value."""

    kind = "view"

    async def evaluate(self, world: World, args: Bound) -> Any:
        result = await self.handler(world.as_read_only(), args)
        if isinstance(result, World):
            raise HandlerContractError(f"view {self.name} must return a Value, not a World")
        if not is_value(result):
            raise HandlerContractError(
                f"view {self.name} must return a Value, got {type(result).__name__}"
            )
        return result

    async def process(self, world: World, from_: Optional[str], inputs: EventList) -> World:
        args = await self.bind(world, inputs)
        value = await self.evaluate(world, args)
        if not isinstance(value, NothingV):
            world.printer.print_value(self.name, value)
        return world


class Delegate(Command):
    """A command that re-dispatches a nested event; the nested command records the action."""

    kind = "delegate"

    async def process(self, world: World, from_: Optional[str], inputs: EventList) -> World:
        args = await self.bind(world, inputs)
        result = await self.handler(world, from_, args)
        if not isinstance(result, World):
            raise HandlerContractError(
                f"{self.name} must return a World, got {type(result).__name__}"
            )
        return result


def find_command(subsystem: Optional[str], commands: Sequence[Command], event: EventList) -> Command:
    head = event.head
    if head is None:
        scope = f" after {subsystem}" if subsystem else ""
        raise MalformedScript(f"expected a command{scope}", event.line or 1, 1)
    if not isinstance(head, Atom):
        raise UnknownCommand(head.show(), subsystem)
    for command in commands:
        if command.matches(head.token):
            return command
    raise UnknownCommand(head.token, subsystem)


async def process_command_event(
    subsystem: Optional[str],
    commands: Sequence[Command],
    world: World,
    event: EventList,
    from_: Optional[str],
) -> World:
    """Match the event's head to a command, bind the rest, run the handler."""
    command: Optional[Command] = None
    try:
        command = find_command(subsystem, commands, event)
        return await command.process(world, from_, event.tail)
    except ScenarioError as exc:
        exc.annotate(
            subsystem=subsystem,
            command=command.name if command else None,
            line=event.line,
        )
        raise


async def evaluate_view_event(
    subsystem: Optional[str],
    commands: Sequence[Command],
    world: World,
    event: EventList,
) -> Any:
    """Run a view and return its Value instead of printing it."""
    try:
        command = find_command(subsystem, commands, event)
        if not isinstance(command, View):
            raise HandlerContractError(f"{command.name} is not a view")
        args = await command.bind(world, event.tail)
        return await command.evaluate(world, args)
    except ScenarioError as exc:
        exc.annotate(subsystem=subsystem, line=event.line)
        raise
