"""
Wiring: builds a ScenarioEngine with the standard subsystems and core commands.

The engine itself lives in kernel/engine.py; this module only decides which
command tables a default engine knows about.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from .kernel.engine import ScenarioEngine
from .kernel.registry import Subsystem
from .lib.core import core_commands
from .lib.price_oracle import SUBSYSTEM as PRICE_ORACLE, price_oracle_commands


def default_subsystems() -> List[Subsystem]:
    return [
        Subsystem(
            name=PRICE_ORACLE,
            commands=tuple(price_oracle_commands()),
            description="Control the registered price oracle",
        ),
    ]


def create_engine(subsystems: Optional[Iterable[Subsystem]] = None) -> ScenarioEngine:
    if subsystems is None:
        subsystems = default_subsystems()
    return ScenarioEngine(subsystems, core_table=core_commands)
