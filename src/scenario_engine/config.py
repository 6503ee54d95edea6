"""
World configuration.

Resolution hierarchy for the config file:
1. Explicit flag (--world)
2. Environment variable SCENARIO_WORLD
3. .scenario/world.json in the current directory (if present)
4. Built-in defaults (development network, no accounts, no contracts)

The network can be overridden independently with --network or SCENARIO_NETWORK.

Example .scenario/world.json:
    {
      "network": "development",
      "accounts": {"Root": "0x...", "Admin": "0x..."},
      "contracts": {"PriceOracle": {"kind": "Simple", "address": "0x..."}}
    }
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from .kernel.errors import ConfigError
from .kernel.world import Contract, Printer, World


class ContractConfig(BaseModel):
    kind: str
    address: str
    description: Optional[str] = None


class WorldConfig(BaseModel):
    network: str = "development"
    accounts: Dict[str, str] = Field(default_factory=dict)
    contracts: Dict[str, ContractConfig] = Field(default_factory=dict)


def get_default_config_file() -> Path:
    return Path.cwd() / ".scenario" / "world.json"


def resolve_config_path(explicit: Optional[str]) -> Optional[Path]:
    if explicit:
        return Path(explicit)

    env_path = os.environ.get("SCENARIO_WORLD")
    if env_path:
        return Path(env_path)

    default = get_default_config_file()
    if default.exists():
        return default
    return None


def load_world_config(path: Optional[Path]) -> WorldConfig:
    if path is None:
        return WorldConfig()
    if not path.exists():
        raise ConfigError(f"world config not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {path}: {e}") from e
    try:
        return WorldConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ConfigError(f"invalid world config {path}: {location}: {first['msg']}") from e


def resolve_network(explicit: Optional[str], config: WorldConfig) -> str:
    if explicit:
        return explicit
    env_network = os.environ.get("SCENARIO_NETWORK")
    if env_network:
        return env_network
    return config.network


def build_world(
    config: WorldConfig,
    network: Optional[str] = None,
    output_sink: Optional[Callable[[str], None]] = None,
    invoker: Any = None,
    verifier: Any = None,
    verbose: bool = False,
) -> World:
    contracts = {
        name: Contract(name=name, kind=entry.kind, address=entry.address, description=entry.description)
        for name, entry in config.contracts.items()
    }
    return World(
        network=network or config.network,
        accounts=dict(config.accounts),
        contracts=contracts,
        printer=Printer(output_sink=output_sink, verbose=verbose),
        invoker=invoker,
        verifier=verifier,
    )
