"""
Integration tests for running whole scenario scripts.

These drive the default engine end to end:
1. Parse a multi-line script
2. Route each statement to PriceOracle or a core command
3. Bind, invoke through a recording invoker, thread the World
4. Stop at the first failure with the failing line attached
"""
from __future__ import annotations

import pytest

from scenario_engine.kernel.command import evaluate_view_event
from scenario_engine.kernel.errors import (
    CoercionError,
    InvocationFailure,
    LookupFailure,
    UnknownCommand,
    UnknownSubsystem,
)
from scenario_engine.kernel.event import parse_line
from scenario_engine.kernel.value import AddressV
from scenario_engine.kernel.world import Printer
from scenario_engine.lib.price_oracle import price_oracle_commands


ROOT = "0x0000000000000000000000000000000000000001"
ADMIN = "0x0000000000000000000000000000000000000002"
GEOFF = "0x0000000000000000000000000000000000000003"
ORACLE = "0x00000000000000000000000000000000000000aa"

SETUP_SCRIPT = """
-- register the oracle, then price two tokens
PriceOracle Set Simple {oracle} "Test Oracle"
PriceOracle SetPrice Geoff 1.5
PriceOracle SetDirectPrice (Address Admin) (Exactly 20)
""".format(oracle=ORACLE)


class TestScriptRun:
    """Scripts run statement by statement, threading one World."""

    @pytest.mark.asyncio
    async def test_script_records_one_action_per_statement(self, engine, bare_world, invoker, captured):
        world = await engine.run_script(bare_world, SETUP_SCRIPT)

        assert [action.description for action in world.actions] == [
            f"Set PriceOracle (Test Oracle) to address {ORACLE}",
            f"Set price oracle price for {GEOFF} to 1.5",
            f"Set price oracle price for {ADMIN} to 20",
        ]
        assert [call.method for call, _ in invoker.calls] == ["setUnderlyingPrice", "setDirectPrice"]
        assert invoker.calls[1][0].args == (ADMIN, 20)
        assert captured == [f"Action: {action.description}" for action in world.actions]

    @pytest.mark.asyncio
    async def test_input_world_is_never_mutated(self, engine, world):
        after = await engine.process_line(world, "PriceOracle SetDirectPrice 0x01 1")

        assert world.actions == ()
        assert len(after.actions) == 1
        assert after.actions[0].receipt.transaction == "0xtx1"

    @pytest.mark.asyncio
    async def test_blank_line_is_a_no_op(self, engine, world):
        assert await engine.process_line(world, "   ") is world

    @pytest.mark.asyncio
    async def test_default_sender_is_root(self, engine, world, invoker):
        await engine.process_line(world, "PriceOracle SetRefAddress 0x01")

        assert invoker.last_sender == ROOT

    @pytest.mark.asyncio
    async def test_from_runs_a_nested_event_as_another_account(self, engine, world, invoker):
        world = await engine.process_line(world, "From Geoff (PriceOracle SetRefAddress 0x01)")
        world = await engine.process_line(world, "From Admin PriceOracle SetRefAddress 0x02")

        assert [sender for _, sender in invoker.calls] == [GEOFF, ADMIN]
        assert len(world.actions) == 2

    @pytest.mark.asyncio
    async def test_from_unknown_account_fails_lookup(self, engine, world, invoker):
        with pytest.raises(LookupFailure) as excinfo:
            await engine.process_line(world, "From Nobody (PriceOracle SetRefAddress 0x01)")

        assert excinfo.value.context["command"] == "From"
        assert invoker.calls == []


class TestFailures:
    """The first failing statement stops the run and reports where it happened."""

    @pytest.mark.asyncio
    async def test_error_carries_its_line(self, engine, world, invoker):
        script = "\n".join(
            [
                "-- comment line",
                "PriceOracle SetDirectPrice 0x01 1",
                "PriceOracle SetDirectPrice Nobody 1",
                "PriceOracle SetDirectPrice 0x02 2",
            ]
        )

        with pytest.raises(LookupFailure) as excinfo:
            await engine.run_script(world, script)

        error = excinfo.value
        assert error.context["line"] == 3
        assert error.context["subsystem"] == "PriceOracle"
        assert error.context["command"] == "SetDirectPrice"
        assert error.context["argument"] == "address"
        assert "\n" not in str(error)
        assert str(error).endswith("[line 3 PriceOracle SetDirectPrice <address#1>]")
        assert len(invoker.calls) == 1

    @pytest.mark.asyncio
    async def test_unknown_subsystem_at_top_level(self, engine, world):
        with pytest.raises(UnknownSubsystem) as excinfo:
            await engine.run_script(world, "\nComptroller Support sZRX\n")

        assert excinfo.value.name == "Comptroller"
        assert excinfo.value.context["line"] == 2

    @pytest.mark.asyncio
    async def test_unknown_head_is_an_unknown_command(self, engine, world):
        with pytest.raises(UnknownCommand) as excinfo:
            await engine.process_line(world, "UnknownThing foo")

        assert excinfo.value.name == "UnknownThing"
        assert excinfo.value.kind == "unknown_subsystem"

    @pytest.mark.asyncio
    async def test_invoker_exceptions_become_invocation_failures(self, engine, world, invoker):
        invoker.raise_with = RuntimeError("connection refused")

        with pytest.raises(InvocationFailure) as excinfo:
            await engine.process_line(world, "PriceOracle SetPrice Geoff 1")

        assert "connection refused" in str(excinfo.value)
        assert "PriceOracle.setUnderlyingPrice" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_rejected_receipt_is_kept_on_the_error(self, engine, world, invoker):
        invoker.fail_with = "revert: not admin"

        with pytest.raises(InvocationFailure) as excinfo:
            await engine.process_line(world, "PriceOracle SetRefAddress 0x01")

        assert excinfo.value.error_message == "revert: not admin"
        assert excinfo.value.receipt.success is False


class TestCoreViews:
    """Print and History write to the output sink and record nothing."""

    @pytest.mark.asyncio
    async def test_print_joins_its_message(self, engine, world, captured):
        after = await engine.process_line(world, 'Print "hello there" world (1 2)')

        assert captured == ["hello there world (1 2)"]
        assert after.actions == ()

    @pytest.mark.asyncio
    async def test_history_lists_actions(self, engine, world, captured):
        world = await engine.run_script(
            world,
            "PriceOracle SetDirectPrice 0x01 1\nPriceOracle SetDirectPrice 0x02 2\n",
        )
        captured.clear()

        await engine.process_line(world, "History")
        assert captured == [
            "   1. Set price oracle price for 0x01 to 1",
            "   2. Set price oracle price for 0x02 to 2",
        ]

        captured.clear()
        await engine.process_line(world, "History 1")
        assert captured == ["   1. Set price oracle price for 0x02 to 2"]

    @pytest.mark.asyncio
    async def test_history_without_actions(self, engine, world, captured):
        await engine.process_line(world, "History")

        assert captured == ["No actions recorded."]

    @pytest.mark.asyncio
    async def test_history_count_must_be_whole(self, engine, world, captured):
        with pytest.raises(CoercionError) as excinfo:
            await engine.process_line(world, "History 0.5")

        assert excinfo.value.context["argument"] == "count"
        assert captured == []

    @pytest.mark.asyncio
    async def test_verbose_printer_logs_each_statement(self, engine, world, captured):
        world = world.model_copy(update={"printer": Printer(output_sink=captured.append, verbose=True)})

        await engine.process_line(world, "PriceOracle Address")

        assert captured == [
            "[DEBUG] PriceOracle Address",
            f"Address: {ORACLE}",
        ]

    @pytest.mark.asyncio
    async def test_view_value_can_be_evaluated_without_printing(self, world, captured):
        value = await evaluate_view_event(
            "PriceOracle", price_oracle_commands(), world, parse_line("Address")
        )

        assert value == AddressV(val=ORACLE)
        assert captured == []
