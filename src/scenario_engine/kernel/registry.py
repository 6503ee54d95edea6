from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .command import Command
from .errors import CommandDeclarationError, UnknownSubsystem


@dataclass
class Subsystem:
    """A named, scriptable resource and its command table."""

    name: str
    commands: Sequence[Command]
    description: Optional[str] = None


class SubsystemRegistry:
    def __init__(self) -> None:
        self._registry: Dict[str, Subsystem] = {}

    def register(self, subsystem: Subsystem) -> None:
        key = subsystem.name.lower()
        if key in self._registry:
            raise CommandDeclarationError(f"subsystem {subsystem.name!r} registered twice")
        names = [command.name.lower() for command in subsystem.commands]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise CommandDeclarationError(
                f"subsystem {subsystem.name!r} declares {', '.join(duplicates)} more than once"
            )
        self._registry[key] = subsystem

    def get(self, name: str) -> Subsystem:
        try:
            return self._registry[name.lower()]
        except KeyError:
            raise UnknownSubsystem(name) from None

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._registry

    def subsystems(self) -> List[Subsystem]:
        return sorted(self._registry.values(), key=lambda s: s.name.lower())
