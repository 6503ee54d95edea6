"""
Domain: PriceOracle
Script control of a deployed price oracle.

  PriceOracle Set Standard 0x... "My Oracle"
  PriceOracle SetRefAddress 0x...
  PriceOracle SetPrice sZRX 1.0
  PriceOracle SetDirectPrice (Address Zero) 1.0
  PriceOracle Address
  PriceOracle Verify "myApiKey"
"""
from __future__ import annotations

from typing import List, Optional

from ..kernel.command import Arg, Command, View, process_command_event
from ..kernel.event import EventList
from ..kernel.value import AddressV, NothingV, NumberV, StringV
from ..kernel.world import Contract, World
from .contract_lookup import get_price_oracle
from .core_value import get_address_v, get_exp_number_v, get_string_v
from .invocation import MethodCall, invoke, verify

SUBSYSTEM = "PriceOracle"


async def set_price_oracle(world: World, kind: str, address: str, description: Optional[str]) -> World:
    """Register an already-deployed oracle; the description defaults to its kind."""
    description = description or kind
    contract = Contract(name=SUBSYSTEM, kind=kind, address=address, description=description)
    world = world.with_contract(contract)
    return world.add_action(f"Set PriceOracle ({description}) to address {address}")


async def set_ref_address(world: World, from_: Optional[str], price_oracle: Contract, ref: str) -> World:
    return world.add_action(
        f"Set price oracle ref address to {ref}",
        await invoke(world, MethodCall(price_oracle, "setRefAddress", (ref,)), from_),
    )


async def set_price(
    world: World, from_: Optional[str], price_oracle: Contract, s_token: str, amount: NumberV
) -> World:
    return world.add_action(
        f"Set price oracle price for {s_token} to {amount.show()}",
        await invoke(
            world,
            MethodCall(price_oracle, "setUnderlyingPrice", (s_token, amount.encode())),
            from_,
        ),
    )


async def set_direct_price(
    world: World, from_: Optional[str], price_oracle: Contract, address: str, amount: NumberV
) -> World:
    return world.add_action(
        f"Set price oracle price for {address} to {amount.show()}",
        await invoke(
            world,
            MethodCall(price_oracle, "setDirectPrice", (address, amount.encode())),
            from_,
        ),
    )


async def verify_price_oracle(
    world: World, price_oracle: Contract, api_key: str, contract_name: str
) -> NothingV:
    if world.is_local_network():
        world.printer.print_line(
            f"Politely declining to verify on local network: {world.network}."
        )
    else:
        await verify(world, api_key, SUBSYSTEM, contract_name, price_oracle.address)
    return NothingV()


def price_oracle_commands() -> List[Command]:
    return [
        Command(
            "Set",
            [
                Arg("kind", get_string_v),
                Arg("address", get_address_v),
                Arg("description", get_string_v, nullable=True),
            ],
            lambda world, from_, args: set_price_oracle(
                world,
                args["kind"].val,
                args["address"].val,
                args["description"].val if args["description"] else None,
            ),
            doc="""
            #### Set

            * "Set <Kind> <Address> [Description]" - Sets the price oracle to an already deployed contract
              * E.g. "PriceOracle Set Standard 0x... "My Already Deployed Oracle""
            """,
        ),
        Command(
            "SetRefAddress",
            [
                Arg("priceOracle", get_price_oracle, implicit=True),
                Arg("ref", get_address_v),
            ],
            lambda world, from_, args: set_ref_address(
                world, from_, args["priceOracle"], args["ref"].val
            ),
            doc="""
            #### SetRefAddress

            * "SetRefAddress <RefAddress>" - Sets the ref address for price oracle
              * E.g. "PriceOracle SetRefAddress 0x..."
            """,
        ),
        Command(
            "SetPrice",
            [
                Arg("priceOracle", get_price_oracle, implicit=True),
                Arg("sToken", get_address_v),
                Arg("amount", get_exp_number_v),
            ],
            lambda world, from_, args: set_price(
                world, from_, args["priceOracle"], args["sToken"].val, args["amount"]
            ),
            doc="""
            #### SetPrice

            * "SetPrice <SToken> <Amount>" - Sets the per-ether price for the given sToken
              * E.g. "PriceOracle SetPrice sZRX 1.0"
            """,
        ),
        Command(
            "SetDirectPrice",
            [
                Arg("priceOracle", get_price_oracle, implicit=True),
                Arg("address", get_address_v),
                Arg("amount", get_exp_number_v),
            ],
            lambda world, from_, args: set_direct_price(
                world, from_, args["priceOracle"], args["address"].val, args["amount"]
            ),
            doc="""
            #### SetDirectPrice

            * "SetDirectPrice <Address> <Amount>" - Sets the per-ether price for the given address
              * E.g. "PriceOracle SetDirectPrice (Address Zero) 1.0"
            """,
        ),
        View(
            "Address",
            [Arg("priceOracle", get_price_oracle, implicit=True)],
            lambda world, args: _address(args["priceOracle"]),
            doc="""
            #### Address

            * "Address" - Returns the address of the registered price oracle
              * E.g. "PriceOracle Address"
            """,
        ),
        View(
            "Verify",
            [
                Arg("priceOracle", get_price_oracle, implicit=True),
                Arg("apiKey", get_string_v),
                Arg("contractName", get_string_v, default=StringV(val="PriceOracle")),
            ],
            lambda world, args: verify_price_oracle(
                world, args["priceOracle"], args["apiKey"].val, args["contractName"].val
            ),
            doc="""
            #### Verify

            * "Verify apiKey:<String> contractName:<String>=PriceOracle" - Verifies PriceOracle in Etherscan
              * E.g. "PriceOracle Verify "myApiKey"
            """,
        ),
    ]


async def _address(price_oracle: Contract) -> AddressV:
    return AddressV(val=price_oracle.address)


async def process_price_oracle_event(world: World, event: EventList, from_: Optional[str]) -> World:
    return await process_command_event(SUBSYSTEM, price_oracle_commands(), world, event, from_)
