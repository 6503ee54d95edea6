"""
Domain: Core values
Coercion functions turning Events into typed Values.

Every coercion has the shape `async (world, event) -> Value` so it can be
dropped into an Arg declaration. Each one is total over well-formed input and
raises CoercionError (or LookupFailure for unresolved names) otherwise.

  - get_address_v:    0x-hex, Zero, (Address X), account alias, contract name
  - get_number_v:     integer / decimal / exponent notation, scale 0
  - get_exp_number_v: same syntax, 18-place fixed-point mantissa
  - get_count_v:      a whole, non-negative number
  - get_string_v, get_bool_v, get_event_v
  - get_list_v, get_map_v: combinators for structured arguments
  - get_core_value:   best-effort typing for untyped arguments
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, localcontext
from typing import Any, Optional

from ..kernel.command import Coercion
from ..kernel.errors import CoercionError
from ..kernel.event import Atom, Event, EventList, show_event
from ..kernel.value import (
    AddressV,
    BoolV,
    EventV,
    ListV,
    MapV,
    NumberV,
    StringV,
)
from ..kernel.world import World
from .contract_lookup import resolve_address

ZERO_ADDRESS = "0x" + "0" * 40
EXP_SCALE = 18
MAX_ENCODED = 2**256
_MAX_DIGITS = len(str(MAX_ENCODED))

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]+$")
_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_TRUE = {"true", "yes"}
_FALSE = {"false", "no"}


def _is_keyword(event: Event, keyword: str) -> bool:
    return isinstance(event, Atom) and event.token.lower() == keyword.lower()


def _atom(event: Optional[Event], expected: str) -> Atom:
    if not isinstance(event, Atom):
        raise CoercionError(expected, show_event(event))
    return event


def parse_decimal(token: str) -> Decimal:
    if not _NUMBER_RE.match(token):
        raise CoercionError("number", token)
    try:
        return Decimal(token)
    except InvalidOperation:
        raise CoercionError("number", token) from None


def _number(token: str, scale: int) -> NumberV:
    """A NumberV whose encoded form fits in a 256-bit word."""
    val = parse_decimal(token)
    if val and val.adjusted() + scale >= _MAX_DIGITS:
        raise CoercionError("number below 2**256", token)
    with localcontext() as ctx:
        ctx.prec = _MAX_DIGITS + EXP_SCALE + 2
        if abs(val.scaleb(scale)) >= MAX_ENCODED:
            raise CoercionError("number below 2**256", token)
    return NumberV(val=val, scale=scale)


def _tagged_number(event: EventList) -> Optional[NumberV]:
    """Handle (Exactly n) and (Exp n); None when the list is neither."""
    if len(event) != 2:
        return None
    tag, inner = event[0], event[1]
    if _is_keyword(tag, "Exactly"):
        return _number(_atom(inner, "number").token, 0)
    if _is_keyword(tag, "Exp"):
        return _number(_atom(inner, "number").token, EXP_SCALE)
    return None


async def get_address_v(world: World, event: Optional[Event]) -> AddressV:
    if isinstance(event, EventList):
        if len(event) == 2 and _is_keyword(event[0], "Address"):
            return await get_address_v(world, event[1])
        raise CoercionError("address", event.show())
    token = _atom(event, "address").token
    if _ADDRESS_RE.match(token):
        return AddressV(val=token)
    if token.lower() == "zero":
        return AddressV(val=ZERO_ADDRESS)
    return AddressV(val=resolve_address(world, token))


async def get_number_v(world: World, event: Optional[Event]) -> NumberV:
    if isinstance(event, EventList):
        tagged = _tagged_number(event)
        if tagged is None:
            raise CoercionError("number", event.show())
        return tagged
    return _number(_atom(event, "number").token, 0)


async def get_exp_number_v(world: World, event: Optional[Event]) -> NumberV:
    if isinstance(event, EventList):
        tagged = _tagged_number(event)
        if tagged is None:
            raise CoercionError("number", event.show())
        return tagged
    return _number(_atom(event, "number").token, EXP_SCALE)


async def get_count_v(world: World, event: Optional[Event]) -> NumberV:
    """A whole, non-negative number such as a list length."""
    number = await get_number_v(world, event)
    if number.val < 0 or number.val != number.val.to_integral_value():
        raise CoercionError("non-negative integer", show_event(event))
    return number


async def get_string_v(world: World, event: Optional[Event]) -> StringV:
    return StringV(val=_atom(event, "string").token)


async def get_bool_v(world: World, event: Optional[Event]) -> BoolV:
    token = _atom(event, "bool").token
    if token.lower() in _TRUE:
        return BoolV(val=True)
    if token.lower() in _FALSE:
        return BoolV(val=False)
    raise CoercionError("bool", token)


async def get_event_v(world: World, event: Optional[Event]) -> EventV:
    if event is None:
        raise CoercionError("event", show_event(event))
    return EventV(val=event)


def get_list_v(item: Coercion) -> Coercion:
    """Coerce a bracketed group item by item: [a b c] -> ListV."""

    async def coerce_list(world: World, event: Optional[Event]) -> ListV:
        if not isinstance(event, EventList):
            raise CoercionError("list", show_event(event))
        return ListV(val=tuple([await item(world, entry) for entry in event]))

    return coerce_list


def get_map_v(item: Coercion) -> Coercion:
    """Coerce a group of (key value) pairs: ((a 1) (b 2)) -> MapV."""

    async def coerce_map(world: World, event: Optional[Event]) -> MapV:
        if not isinstance(event, EventList):
            raise CoercionError("map", show_event(event))
        entries = {}
        for pair in event:
            if not (isinstance(pair, EventList) and len(pair) == 2 and isinstance(pair[0], Atom)):
                raise CoercionError("(key value) pair", pair.show())
            if pair[0].token in entries:
                raise CoercionError("unique key", pair.show())
            entries[pair[0].token] = await item(world, pair[1])
        return MapV(val=entries)

    return coerce_map


async def get_core_value(world: World, event: Optional[Event]) -> Any:
    if isinstance(event, EventList):
        if len(event) == 2 and _is_keyword(event[0], "Address"):
            return await get_address_v(world, event)
        tagged = _tagged_number(event)
        if tagged is not None:
            return tagged
        return ListV(val=tuple([await get_core_value(world, entry) for entry in event]))

    atom = _atom(event, "value")
    token = atom.token
    if atom.quoted:
        return StringV(val=token)
    if _NUMBER_RE.match(token):
        return _number(token, 0)
    if _ADDRESS_RE.match(token):
        return AddressV(val=token)
    if token.lower() in _TRUE or token.lower() in _FALSE:
        return await get_bool_v(world, atom)
    return StringV(val=token)
