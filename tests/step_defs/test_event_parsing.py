"""
Step definitions for the script parsing feature.

These tests verify:
- tokenization of atoms, quoted strings and nested groups
- deterministic parsing
- MalformedScript positions for unbalanced delimiters
"""
import pytest
from pytest_bdd import parsers, scenarios, then, when

from scenario_engine.kernel.errors import MalformedScript
from scenario_engine.kernel.event import Atom, parse_script

scenarios("../features/event_parsing.feature")


@pytest.fixture
def test_context():
    """Shared context for passing data between steps."""
    return {"script": None, "statements": None, "error": None}


# =============================================================================
# When Steps
# =============================================================================


@when(parsers.parse('the script "{script}" is parsed'))
def parse(test_context, script: str):
    test_context["script"] = script
    try:
        test_context["statements"] = parse_script(script)
    except MalformedScript as e:
        test_context["error"] = e


# =============================================================================
# Then Steps
# =============================================================================


@then(parsers.parse("there is {count:d} statement"))
def check_statement_count(test_context, count: int):
    assert test_context["error"] is None, f"Unexpected error: {test_context['error']}"
    assert len(test_context["statements"]) == count


@then(parsers.parse('statement {index:d} shows as "{shown}"'))
def check_shown(test_context, index: int, shown: str):
    statement = test_context["statements"][index - 1]
    assert statement.show() == shown


@then(parsers.parse("statement {index:d} has {count:d} items"))
def check_item_count(test_context, index: int, count: int):
    assert len(test_context["statements"][index - 1]) == count


@then(parsers.parse('item {item:d} of statement {index:d} is the atom "{token}"'))
def check_atom(test_context, item: int, index: int, token: str):
    event = test_context["statements"][index - 1][item - 1]
    assert event == Atom(token)


@then("parsing it again yields an equal tree")
def check_deterministic(test_context):
    again = parse_script(test_context["script"])
    assert again == test_context["statements"]


@then(parsers.parse('parsing fails with "{message}" at line {line:d}, column {column:d}'))
def check_malformed(test_context, message: str, line: int, column: int):
    error = test_context["error"]
    assert isinstance(error, MalformedScript), "Expected MalformedScript"
    assert message in str(error)
    assert (error.line, error.column) == (line, column)
