"""
scenario_engine: a scripting interpreter for scenario tests against deployed services.

Scripts are parsed into Event trees, routed to a subsystem's command table,
bound against declared Args and executed, threading an immutable World through
every line.
"""
from .engine import create_engine, default_subsystems
from .kernel import (
    Arg,
    Command,
    ScenarioEngine,
    ScenarioError,
    Subsystem,
    View,
    World,
    parse_line,
    parse_script,
)

__all__ = [
    "Arg",
    "Command",
    "ScenarioEngine",
    "ScenarioError",
    "Subsystem",
    "View",
    "World",
    "create_engine",
    "default_subsystems",
    "parse_line",
    "parse_script",
]
