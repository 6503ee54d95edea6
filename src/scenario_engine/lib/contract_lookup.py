"""
Domain: Lookup
Resolves symbolic names against the World's registries.

  - resolve_contract: contract name -> Contract handle
  - resolve_address:  account alias or contract name -> address
  - contract_getter:  builds an implicit-argument coercion for a named contract
"""
from __future__ import annotations

from typing import Optional

from ..kernel.command import Coercion
from ..kernel.errors import LookupFailure
from ..kernel.event import Event
from ..kernel.world import Contract, World


def resolve_contract(world: World, name: str) -> Contract:
    if name in world.contracts:
        return world.contracts[name]
    wanted = name.lower()
    for key, contract in world.contracts.items():
        if key.lower() == wanted:
            return contract
    raise LookupFailure(name, "contract")


def resolve_address(world: World, alias: str) -> str:
    """Accounts win over contracts when a name is registered as both."""
    wanted = alias.lower()
    for key, address in world.accounts.items():
        if key.lower() == wanted:
            return address
    for key, contract in world.contracts.items():
        if key.lower() == wanted:
            return contract.address
    raise LookupFailure(alias, "address")


def contract_getter(name: str) -> Coercion:
    async def get_contract(world: World, event: Optional[Event] = None) -> Contract:
        return resolve_contract(world, name)

    get_contract.__name__ = f"get_{name.lower()}"
    return get_contract


get_price_oracle = contract_getter("PriceOracle")
