"""
Pytest configuration and shared fixtures for scenario engine tests.
"""
from typing import List, Optional, Tuple

import pytest

from scenario_engine.engine import create_engine
from scenario_engine.kernel.world import Contract, Printer, Receipt, World

ROOT = "0x0000000000000000000000000000000000000001"
ADMIN = "0x0000000000000000000000000000000000000002"
GEOFF = "0x0000000000000000000000000000000000000003"
ORACLE = "0x00000000000000000000000000000000000000aa"


class RecordingInvoker:
    """Stands in for the network: records every call, optionally rejects them."""

    def __init__(self) -> None:
        self.calls: List[Tuple[object, Optional[str]]] = []
        self.fail_with: Optional[str] = None
        self.raise_with: Optional[Exception] = None

    async def invoke(self, world, call, from_address):
        self.calls.append((call, from_address))
        if self.raise_with is not None:
            raise self.raise_with
        if self.fail_with is not None:
            return Receipt(success=False, error_message=self.fail_with)
        return Receipt(success=True, transaction=f"0xtx{len(self.calls)}")

    @property
    def last_call(self):
        return self.calls[-1][0]

    @property
    def last_sender(self):
        return self.calls[-1][1]


class RecordingVerifier:
    def __init__(self) -> None:
        self.requests: List[Tuple[str, str, str, str]] = []

    async def __call__(self, world, api_key, contract_kind, contract_name, address):
        self.requests.append((api_key, contract_kind, contract_name, address))


@pytest.fixture
def captured() -> List[str]:
    """Lines written to the World's output sink."""
    return []


@pytest.fixture
def invoker() -> RecordingInvoker:
    return RecordingInvoker()


@pytest.fixture
def verifier() -> RecordingVerifier:
    return RecordingVerifier()


@pytest.fixture
def bare_world(captured, invoker, verifier) -> World:
    """A development World with accounts but no contracts."""
    return World(
        network="development",
        accounts={"Root": ROOT, "Admin": ADMIN, "Geoff": GEOFF},
        printer=Printer(output_sink=captured.append),
        invoker=invoker,
        verifier=verifier,
    )


@pytest.fixture
def world(bare_world) -> World:
    """A development World with a registered price oracle."""
    return bare_world.with_contract(
        Contract(name="PriceOracle", kind="Simple", address=ORACLE, description="Simple")
    )


@pytest.fixture
def engine():
    return create_engine()
