"""
Domain: Core
Commands available at the top level of a script, without a subsystem prefix.

  From <Account> <Event>   run a nested event as another acting account
  Print <Message...>       print a message to the output sink
  History [Count]          print the action log (or its last Count entries)
"""
from __future__ import annotations

from typing import List, Optional

from ..kernel.command import Arg, Command, Delegate, View
from ..kernel.engine import Dispatch
from ..kernel.event import Atom, EventList
from ..kernel.value import NothingV, NumberV
from ..kernel.world import World
from .core_value import get_address_v, get_count_v, get_event_v


def _unwrap(event: EventList) -> EventList:
    """`From Geoff (PriceOracle SetPrice ...)` and `From Geoff PriceOracle SetPrice ...` are equivalent."""
    if len(event) == 1 and isinstance(event[0], EventList):
        return EventList(event[0].items, line=event.line)
    return event


async def print_message(world: World, message: EventList) -> NothingV:
    text = " ".join(item.token if isinstance(item, Atom) else item.show() for item in message)
    world.printer.print_line(text)
    return NothingV()


async def print_history(world: World, count: Optional[NumberV]) -> NothingV:
    actions = world.actions
    if count is not None:
        limit = int(count.val)
        actions = actions[-limit:] if limit > 0 else ()
    if not actions:
        world.printer.print_line("No actions recorded.")
    else:
        world.printer.print_actions(actions)
    return NothingV()


def core_commands(dispatch: Dispatch) -> List[Command]:
    async def run_from(world: World, from_: Optional[str], args) -> World:
        return await dispatch(world, _unwrap(args["event"].val), args["account"].val)

    return [
        Delegate(
            "From",
            [
                Arg("account", get_address_v),
                Arg("event", get_event_v, variadic=True),
            ],
            run_from,
            doc="""
            #### From

            * "From <Account> <Event>" - Runs the event with the given account as sender
              * E.g. "From Geoff (PriceOracle SetPrice sZRX 1.0)"
            """,
        ),
        View(
            "Print",
            [Arg("message", get_event_v, variadic=True)],
            lambda world, args: print_message(world, args["message"].val),
            doc="""
            #### Print

            * "Print <Message...>" - Prints a message to the output
              * E.g. "Print "Hello world""
            """,
        ),
        View(
            "History",
            [Arg("count", get_count_v, nullable=True)],
            lambda world, args: print_history(world, args["count"]),
            doc="""
            #### History

            * "History [Count]" - Prints the recorded actions, optionally only the last Count
              * E.g. "History 5"
            """,
        ),
    ]
