"""
Typed values produced by coercing Events.

Value is a closed, discriminated union (the `kind` field) of frozen pydantic
models. Every variant offers:

    encode() -> the form handed to the invocation layer (canonical scalar)
    show()   -> a stable human-readable string for logs and diffs

Adding a new kind of value means adding a variant here and to the Value union.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, DecimalException, localcontext
from typing import Annotated, Any, Dict, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import CoercionError
from .event import Atom, EventList

# Enough digits for 256-bit integers plus an 18-place mantissa.
_ENCODE_PRECISION = 120


class _FrozenValue(BaseModel):
    model_config = ConfigDict(frozen=True)


class AddressV(_FrozenValue):
    kind: Literal["address"] = "address"
    val: str

    def encode(self) -> str:
        return self.val

    def show(self) -> str:
        return self.val


class NumberV(_FrozenValue):
    """
    An arbitrary-precision decimal with a fixed-point scale.

    `val` is the human value ("1.5"); `scale` is the number of decimal places
    the invocation layer expects, so encode() yields round(val * 10**scale).
    """

    kind: Literal["number"] = "number"
    val: Decimal
    scale: int = 0

    @field_validator("val")
    @classmethod
    def _finite(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("number must be finite")
        return v

    def encode(self) -> int:
        with localcontext() as ctx:
            ctx.prec = _ENCODE_PRECISION
            try:
                scaled = self.val.scaleb(self.scale)
                return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
            except DecimalException:
                raise CoercionError("encodable number", self.show()) from None

    def show(self) -> str:
        normalized = self.val.normalize()
        if normalized == 0:
            return "0"
        return format(normalized, "f")


class StringV(_FrozenValue):
    kind: Literal["string"] = "string"
    val: str

    def encode(self) -> str:
        return self.val

    def show(self) -> str:
        return self.val


class BoolV(_FrozenValue):
    kind: Literal["bool"] = "bool"
    val: bool

    def encode(self) -> bool:
        return self.val

    def show(self) -> str:
        return "True" if self.val else "False"


class NothingV(_FrozenValue):
    kind: Literal["nothing"] = "nothing"

    def encode(self) -> None:
        return None

    def show(self) -> str:
        return ""


class EventV(_FrozenValue):
    """A raw, uninterpreted event carried through to a handler."""

    kind: Literal["event"] = "event"
    val: Any

    @field_validator("val")
    @classmethod
    def _is_event(cls, v: Any) -> Any:
        if not isinstance(v, (Atom, EventList)):
            raise ValueError(f"expected an Event, got {type(v).__name__}")
        return v

    def encode(self) -> str:
        return self.val.show()

    def show(self) -> str:
        return self.val.show()


class ListV(_FrozenValue):
    kind: Literal["list"] = "list"
    val: Tuple["Value", ...] = ()

    def encode(self) -> list:
        return [item.encode() for item in self.val]

    def show(self) -> str:
        return "[" + ", ".join(item.show() for item in self.val) + "]"


class MapV(_FrozenValue):
    kind: Literal["map"] = "map"
    val: Dict[str, "Value"] = Field(default_factory=dict)

    def encode(self) -> Dict[str, Any]:
        return {key: item.encode() for key, item in self.val.items()}

    def show(self) -> str:
        body = ", ".join(f"{key}: {item.show()}" for key, item in sorted(self.val.items()))
        return "{" + body + "}"


Value = Annotated[
    Union[AddressV, NumberV, StringV, BoolV, NothingV, EventV, ListV, MapV],
    Field(discriminator="kind"),
]

VALUE_TYPES = (AddressV, NumberV, StringV, BoolV, NothingV, EventV, ListV, MapV)

ListV.model_rebuild()
MapV.model_rebuild()


def is_value(obj: Any) -> bool:
    return isinstance(obj, VALUE_TYPES)
