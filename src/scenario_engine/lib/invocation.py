"""
Domain: Invocation
The narrow boundary to the external service being driven.

The interpreter never talks to the network itself. Handlers describe a call
as a MethodCall and hand it to invoke(), which delegates to the Invoker the
World was built with and turns a failed Receipt into InvocationFailure.
Retries, timeouts and gas policy belong to the Invoker, not here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, Tuple

from ..kernel.errors import HandlerContractError, InvocationFailure, ScenarioError
from ..kernel.world import Contract, Receipt, World


@dataclass(frozen=True)
class MethodCall:
    contract: Contract
    method: str
    args: Tuple[Any, ...] = ()

    def describe(self) -> str:
        rendered = ", ".join(str(arg) for arg in self.args)
        return f"{self.contract.name}.{self.method}({rendered})"


class Invoker(Protocol):
    async def invoke(self, world: World, call: MethodCall, from_address: Optional[str]) -> Receipt:
        ...


class Verifier(Protocol):
    async def __call__(
        self, world: World, api_key: str, contract_kind: str, contract_name: str, address: str
    ) -> None:
        ...


async def invoke(world: World, call: MethodCall, from_address: Optional[str]) -> Receipt:
    """Send a state-changing call; raises InvocationFailure unless it succeeded."""
    if world.read_only:
        raise HandlerContractError(f"{call.describe()} attempted from a view")
    if world.invoker is None:
        raise InvocationFailure(call.describe(), "no invoker configured")

    sender = from_address or world.default_from()
    try:
        receipt = await world.invoker.invoke(world, call, sender)
    except ScenarioError:
        raise
    except Exception as exc:
        raise InvocationFailure(call.describe(), str(exc) or type(exc).__name__) from exc

    if not receipt.success:
        raise InvocationFailure(call.describe(), receipt.error_message, receipt)
    return receipt


async def verify(world: World, api_key: str, contract_kind: str, contract_name: str, address: str) -> None:
    """Publish a contract's source for verification through the World's verifier."""
    if world.verifier is None:
        raise InvocationFailure(f"Verify {contract_name}", "no verifier configured")
    try:
        await world.verifier(world, api_key, contract_kind, contract_name, address)
    except ScenarioError:
        raise
    except Exception as exc:
        raise InvocationFailure(f"Verify {contract_name}", str(exc) or type(exc).__name__) from exc
