"""Typed values carried by the XML-RPC wire format.

Every value that can travel in a request or response is one of:
- Nil: the explicit absence of a value
- Bool, Int, Double, Str: scalars
- DateTime: a timestamp without timezone, second granularity
- Arr: ordered sequence of values
- Struct: string-keyed members, insertion order preserved
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

logger = logging.getLogger(__name__)


def format_iso8601(when: datetime) -> str:
    """Render a timestamp in the wire pattern ``YYYYMMDDTHH:MM:SS``.

    Timezone and sub-second fields are dropped.
    """
    return (
        f"{when.year:04d}{when.month:02d}{when.day:02d}T"
        f"{when.hour:02d}:{when.minute:02d}:{when.second:02d}"
    )


@dataclass(frozen=True)
class Nil:
    pass


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Int:
    value: int


@dataclass(frozen=True)
class Double:
    value: float


@dataclass(frozen=True, eq=False)
class DateTime:
    """A timestamp, either built locally or received as opaque wire text.

    Two DateTime values compare equal when they render to the same wire
    text, so equality holds at second granularity.
    """

    value: datetime | str

    @property
    def text(self) -> str:
        if isinstance(self.value, datetime):
            return format_iso8601(self.value)
        return self.value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self.text == other.text

    def __hash__(self) -> int:
        return hash(self.text)


@dataclass(frozen=True)
class Str:
    value: str


@dataclass(frozen=True)
class Arr:
    items: tuple["Value", ...] = ()

    def __post_init__(self) -> None:
        # Any sequence is accepted; items are always stored as a tuple
        object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class Struct:
    members: dict[str, "Value"] = field(default_factory=dict)

    def get(self, key: str, default: "Value | None" = None) -> "Value | None":
        return self.members.get(key, default)


Value = Union[Nil, Bool, Int, Double, DateTime, Str, Arr, Struct]

VALUE_TYPES = (Nil, Bool, Int, Double, DateTime, Str, Arr, Struct)


def classify_number(number: int | float) -> Int | Double:
    """Classify a number as Int when it has no fractional part.

    The result depends only on the numeric value: ``5.0`` is an Int.
    """
    if isinstance(number, int):
        return Int(number)
    if math.isfinite(number) and number == int(number):
        return Int(int(number))
    return Double(number)


def to_value(obj: Any) -> Value:
    """Lift a native Python object into a wire Value.

    Args:
        obj: None, bool, int, float, datetime, str, list/tuple, mapping,
            or an existing Value.

    Returns:
        The matching Value. Objects of any other type become Nil.
    """
    if isinstance(obj, VALUE_TYPES):
        return obj
    if obj is None:
        return Nil()
    # bool before int: bool is an int subclass
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, (int, float)):
        return classify_number(obj)
    if isinstance(obj, datetime):
        return DateTime(obj)
    if isinstance(obj, str):
        return Str(obj)
    if isinstance(obj, (list, tuple)):
        return Arr(tuple(to_value(item) for item in obj))
    if isinstance(obj, Mapping):
        return Struct({str(k): to_value(v) for k, v in obj.items()})

    logger.debug("No wire representation for %s, sending nil", type(obj).__name__)
    return Nil()


def to_python(value: Value) -> Any:
    """Lower a wire Value to plain Python data.

    DateTime becomes its wire text, since received timestamps are opaque.
    """
    if isinstance(value, Nil):
        return None
    if isinstance(value, (Bool, Int, Double, Str)):
        return value.value
    if isinstance(value, DateTime):
        return value.text
    if isinstance(value, Arr):
        return [to_python(item) for item in value.items]
    if isinstance(value, Struct):
        return {key: to_python(member) for key, member in value.members.items()}
    raise TypeError(f"Not a wire value: {type(value).__name__}")
