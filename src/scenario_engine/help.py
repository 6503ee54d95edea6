"""
Command documentation, rendered from each command's declaration and docstring.
"""
from __future__ import annotations

from typing import List, Optional

from .kernel.command import Arg, Command
from .kernel.engine import ScenarioEngine
from .kernel.world import Printer


def _arg_usage(arg: Arg) -> str:
    if arg.variadic:
        return f"...{arg.name}"
    if arg.default is not None:
        return f"[{arg.name}={arg.default.show()}]"
    if arg.nullable:
        return f"[{arg.name}]"
    return f"<{arg.name}>"


def usage(command: Command, subsystem: Optional[str] = None) -> str:
    """One-line signature; implicit arguments are not written in scripts."""
    parts = [subsystem] if subsystem else []
    parts.append(command.name)
    parts.extend(_arg_usage(arg) for arg in command.args if not arg.implicit)
    return " ".join(parts)


def render_help(engine: ScenarioEngine, subsystem: Optional[str] = None) -> List[str]:
    sections = []
    if subsystem is None:
        sections.append(("Core", None, engine.core_commands()))
        for entry in engine.subsystems():
            sections.append((entry.name, entry.description, entry.commands))
    else:
        entry = engine.registry.get(subsystem)
        sections.append((entry.name, entry.description, entry.commands))

    lines: List[str] = []
    for title, description, commands in sections:
        lines.append(f"## {title}")
        if description:
            lines.append("")
            lines.append(description)
        for command in commands:
            lines.append("")
            lines.append(f"    {usage(command, None if title == 'Core' else title)}  ({command.kind})")
            if command.doc:
                lines.append("")
                lines.extend(command.doc.splitlines())
        lines.append("")
    return lines


def print_help(printer: Printer, engine: ScenarioEngine, subsystem: Optional[str] = None) -> None:
    for line in render_help(engine, subsystem):
        printer.print_line(line)
