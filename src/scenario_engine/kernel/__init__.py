"""
Kernel: The machinery of the scenario interpreter.

This module contains the execution infrastructure:
- errors: the error taxonomy
- event: Event trees and the script parser
- value: typed Values with encode/show
- world: the threaded World context and its Printer
- command: Arg/Command declarations, the binder and the dispatcher
- registry: subsystem routing table
- engine: ScenarioEngine orchestration

The kernel is distinct from lib/ (the vocabulary: coercions, core commands,
subsystem tables). Kernel = machinery. Lib = language.
"""
from .errors import (
    CoercionError,
    CommandDeclarationError,
    ConfigError,
    ExtraArguments,
    HandlerContractError,
    InvocationFailure,
    LookupFailure,
    MalformedScript,
    MissingArgument,
    ScenarioError,
    UnknownCommand,
    UnknownSubsystem,
)
from .event import Atom, Event, EventList, parse_line, parse_script
from .value import (
    AddressV,
    BoolV,
    EventV,
    ListV,
    MapV,
    NothingV,
    NumberV,
    StringV,
    Value,
)
from .world import Action, Contract, Printer, Receipt, World
from .command import (
    Arg,
    Command,
    Delegate,
    View,
    bind_args,
    evaluate_view_event,
    process_command_event,
)
from .registry import Subsystem, SubsystemRegistry
from .engine import BoundCommand, ScenarioEngine

__all__ = [
    # Errors
    "CoercionError",
    "CommandDeclarationError",
    "ConfigError",
    "ExtraArguments",
    "HandlerContractError",
    "InvocationFailure",
    "LookupFailure",
    "MalformedScript",
    "MissingArgument",
    "ScenarioError",
    "UnknownCommand",
    "UnknownSubsystem",
    # Events
    "Atom",
    "Event",
    "EventList",
    "parse_line",
    "parse_script",
    # Values
    "AddressV",
    "BoolV",
    "EventV",
    "ListV",
    "MapV",
    "NothingV",
    "NumberV",
    "StringV",
    "Value",
    # World
    "Action",
    "Contract",
    "Printer",
    "Receipt",
    "World",
    # Commands
    "Arg",
    "Command",
    "Delegate",
    "View",
    "bind_args",
    "evaluate_view_event",
    "process_command_event",
    # Registry
    "Subsystem",
    "SubsystemRegistry",
    # Engine
    "BoundCommand",
    "ScenarioEngine",
]
