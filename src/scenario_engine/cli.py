"""
Scenario command line: inspect and lint scenario scripts.

Usage:
    python -m scenario_engine.cli parse <script>                  # print Event trees
    python -m scenario_engine.cli check <script> [--world path]   # bind every statement
    python -m scenario_engine.cli commands [subsystem]            # command reference

Executing scripts needs an invoker for the target network and is the job of
the test harness that embeds the engine.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List

from .config import build_world, load_world_config, resolve_config_path, resolve_network
from .engine import create_engine
from .help import print_help
from .kernel.errors import ScenarioError
from .kernel.event import parse_script
from .kernel.world import Printer, World


def read_script(path: str) -> str:
    script = Path(path)
    if not script.exists():
        raise FileNotFoundError(path)
    return script.read_text(encoding="utf-8")


def cmd_parse(args: argparse.Namespace) -> int:
    """Print each statement's Event tree, one per line."""
    try:
        statements = parse_script(read_script(args.script))
    except FileNotFoundError:
        print(f"✗ Script not found: {args.script}", file=sys.stderr)
        return 1
    except ScenarioError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    for statement in statements:
        print(f"{statement.line:>4}: {statement.show()}")
    return 0


async def _check(world: World, statements) -> List[str]:
    engine = create_engine()
    failures: List[str] = []
    for statement in statements:
        try:
            bound = await engine.bind_event(world, statement)
        except ScenarioError as e:
            failures.append(str(e))
            print(f"✗ {statement.line:>4}: {e}")
            continue
        scope = f"{bound.subsystem} " if bound.subsystem else ""
        print(f"✓ {statement.line:>4}: {scope}{bound.command.name}")
    return failures


def cmd_check(args: argparse.Namespace) -> int:
    """Parse and bind every statement against the configured World, without executing."""
    try:
        config = load_world_config(resolve_config_path(args.world))
        statements = parse_script(read_script(args.script))
    except FileNotFoundError:
        print(f"✗ Script not found: {args.script}", file=sys.stderr)
        return 1
    except ScenarioError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    world = build_world(config, network=resolve_network(args.network, config), output_sink=print)
    failures = asyncio.run(_check(world, statements))

    print()
    if failures:
        print(f"✗ {len(failures)} of {len(statements)} statements failed to bind")
        return 1
    print(f"✓ {len(statements)} statements bound")
    return 0


def cmd_commands(args: argparse.Namespace) -> int:
    """Print the command reference for one subsystem, or for everything."""
    engine = create_engine()
    try:
        print_help(Printer(output_sink=print), engine, args.subsystem)
    except ScenarioError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        prog="scenario",
        description="Scenario scripting engine - parse, check and document scenario scripts",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Print the Event tree of each statement")
    parse_parser.add_argument("script", help="Path to a scenario script")
    parse_parser.set_defaults(func=cmd_parse)

    # check command
    check_parser = subparsers.add_parser("check", help="Bind every statement without executing")
    check_parser.add_argument("script", help="Path to a scenario script")
    check_parser.add_argument("--world", help="World config path (JSON)")
    check_parser.add_argument("--network", help="Network name override")
    check_parser.set_defaults(func=cmd_check)

    # commands command
    commands_parser = subparsers.add_parser("commands", help="Show the command reference")
    commands_parser.add_argument("subsystem", nargs="?", help="Limit to one subsystem")
    commands_parser.set_defaults(func=cmd_commands)

    args = parser.parse_args()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
