"""
Step definitions for the command line feature.

These tests verify:
- world config resolution (flag > SCENARIO_WORLD > .scenario/world.json)
- config validation errors
- the parse, check and commands subcommands
"""
import json
import sys

import pytest
from pytest_bdd import given, parsers, scenarios, then, when

from scenario_engine.cli import main
from scenario_engine.config import (
    build_world,
    load_world_config,
    resolve_config_path,
    resolve_network,
)
from scenario_engine.kernel.errors import ConfigError

scenarios("../features/command_line.feature")

WORLD_CONFIG = {
    "network": "development",
    "accounts": {
        "Root": "0x0000000000000000000000000000000000000001",
        "Geoff": "0x0000000000000000000000000000000000000003",
    },
    "contracts": {
        "PriceOracle": {
            "kind": "Simple",
            "address": "0x00000000000000000000000000000000000000aa",
        }
    },
}


@pytest.fixture
def test_context():
    """Shared context for passing data between steps."""
    return {
        "config_path": None,
        "script_path": None,
        "world": None,
        "network": None,
        "resolved": None,
        "error": None,
        "exit_code": None,
        "stdout": "",
        "stderr": "",
    }


# =============================================================================
# Given Steps
# =============================================================================


@given("a world config file with a price oracle")
def given_config_file(test_context, tmp_path, monkeypatch):
    monkeypatch.delenv("SCENARIO_WORLD", raising=False)
    monkeypatch.delenv("SCENARIO_NETWORK", raising=False)
    path = tmp_path / "world.json"
    path.write_text(json.dumps(WORLD_CONFIG), encoding="utf-8")
    test_context["config_path"] = path


@given("SCENARIO_WORLD points at the config file")
def given_env_world(test_context, monkeypatch):
    monkeypatch.setenv("SCENARIO_WORLD", str(test_context["config_path"]))


@given(parsers.parse('SCENARIO_NETWORK is "{network}"'))
def given_env_network(monkeypatch, network: str):
    monkeypatch.setenv("SCENARIO_NETWORK", network)


@given("the config file declares a contract without an address")
def given_invalid_config(test_context):
    config = {"contracts": {"PriceOracle": {"kind": "Simple"}}}
    test_context["config_path"].write_text(json.dumps(config), encoding="utf-8")


@given(parsers.parse('a script containing "{text}"'))
def given_script(test_context, tmp_path, text: str):
    path = tmp_path / "scenario.scen"
    path.write_text(text + "\n", encoding="utf-8")
    test_context["script_path"] = path


# =============================================================================
# When Steps
# =============================================================================


@when("the world config is loaded")
def when_loaded(test_context):
    try:
        config = load_world_config(test_context["config_path"])
    except ConfigError as e:
        test_context["error"] = e
        return
    network = resolve_network(None, config)
    test_context["network"] = network
    test_context["world"] = build_world(config, network=network, output_sink=lambda line: None)


@when("a missing config file is loaded")
def when_missing_loaded(test_context, tmp_path):
    try:
        load_world_config(tmp_path / "absent.json")
    except ConfigError as e:
        test_context["error"] = e


@when("the config path is resolved without a flag")
def when_resolved(test_context):
    test_context["resolved"] = resolve_config_path(None)


def _run_cli(test_context, monkeypatch, capsys, argv):
    monkeypatch.setattr(sys, "argv", argv)
    test_context["exit_code"] = main()
    captured = capsys.readouterr()
    test_context["stdout"] = captured.out
    test_context["stderr"] = captured.err


@when(parsers.parse('I run "{command}" on the script'))
def when_run_on_script(test_context, monkeypatch, capsys, command: str):
    argv = command.split() + [str(test_context["script_path"])]
    _run_cli(test_context, monkeypatch, capsys, argv)


@when(parsers.parse('I run "{command}" on the script with the config file'))
def when_run_with_config(test_context, monkeypatch, capsys, command: str):
    argv = command.split() + [
        str(test_context["script_path"]),
        "--world",
        str(test_context["config_path"]),
    ]
    _run_cli(test_context, monkeypatch, capsys, argv)


@when(parsers.parse('I run "{command}"'))
def when_run(test_context, monkeypatch, capsys, command: str):
    _run_cli(test_context, monkeypatch, capsys, command.split())


# =============================================================================
# Then Steps
# =============================================================================


@then(parsers.parse('the loaded World has network "{network}"'))
def then_network(test_context, network: str):
    assert test_context["world"].network == network


@then(parsers.parse('the loaded World knows account "{alias}"'))
def then_account(test_context, alias: str):
    assert alias in test_context["world"].accounts


@then(parsers.parse('the loaded World has a contract "{name}"'))
def then_contract(test_context, name: str):
    assert test_context["world"].contracts[name].name == name


@then("the resolved path is the config file")
def then_resolved(test_context):
    assert test_context["resolved"] == test_context["config_path"]


@then(parsers.parse('the resolved network is "{network}"'))
def then_resolved_network(test_context, network: str):
    assert test_context["network"] == network
    assert test_context["world"].network == network


@then(parsers.parse('loading fails with "{message}"'))
def then_loading_fails(test_context, message: str):
    error = test_context["error"]
    assert isinstance(error, ConfigError), "Expected ConfigError"
    assert message in str(error)


@then(parsers.parse("the exit code is {code:d}"))
def then_exit_code(test_context, code: int):
    assert test_context["exit_code"] == code, test_context["stdout"] + test_context["stderr"]


@then(parsers.parse('stdout contains "{text}"'))
def then_stdout(test_context, text: str):
    assert text in test_context["stdout"]


@then(parsers.parse('stderr contains "{text}"'))
def then_stderr(test_context, text: str):
    assert text in test_context["stderr"]
