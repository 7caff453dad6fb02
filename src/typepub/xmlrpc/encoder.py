"""Encode wire Values into XML-RPC request text."""

from collections.abc import Iterable
from typing import Any
from xml.sax.saxutils import escape

from .values import (
    Arr,
    Bool,
    DateTime,
    Double,
    Int,
    Nil,
    Str,
    Struct,
    Value,
    classify_number,
    to_value,
)

XML_DECLARATION = '<?xml version="1.0"?>'

_ENTITIES = {'"': "&quot;", "'": "&#39;", "\r": "&#13;"}


def xml_escape(text: str) -> str:
    """Escape the five reserved characters ``& < > " '``.

    Carriage returns become ``&#13;`` so XML line-end normalization
    cannot rewrite them.
    """
    return escape(text, _ENTITIES)


def encode_value(value: Value | Any) -> str:
    """Encode one value as its typed XML fragment.

    Native Python values are lifted with ``to_value`` first, and numbers
    are classified by value, so ``Double(5.0)`` is sent as an int.

    Args:
        value: A wire Value or a plain Python object.

    Returns:
        The typed element, without the surrounding ``<value>`` tag.
    """
    value = to_value(value)

    if isinstance(value, Nil):
        return "<nil/>"
    if isinstance(value, Bool):
        return f"<boolean>{1 if value.value else 0}</boolean>"
    if isinstance(value, Double):
        value = classify_number(value.value)
    if isinstance(value, Int):
        return f"<int>{value.value}</int>"
    if isinstance(value, Double):
        return f"<double>{value.value!r}</double>"
    if isinstance(value, DateTime):
        return f"<dateTime.iso8601>{xml_escape(value.text)}</dateTime.iso8601>"
    if isinstance(value, Str):
        return f"<string>{xml_escape(value.value)}</string>"
    if isinstance(value, Arr):
        items = "".join(f"<value>{encode_value(item)}</value>" for item in value.items)
        return f"<array><data>{items}</data></array>"
    if isinstance(value, Struct):
        members = "".join(
            f"<member><name>{xml_escape(key)}</name>"
            f"<value>{encode_value(member)}</value></member>"
            for key, member in value.members.items()
        )
        return f"<struct>{members}</struct>"

    raise TypeError(f"Not a wire value: {type(value).__name__}")


def encode_call(method_name: str, params: Iterable[Value | Any] = ()) -> str:
    """Build a complete ``methodCall`` request document.

    Args:
        method_name: Remote method, e.g. ``metaWeblog.newPost``.
        params: Positional parameters, in order.

    Returns:
        The request text, starting with the XML declaration.
    """
    encoded = "".join(
        f"<param><value>{encode_value(param)}</value></param>" for param in params
    )
    return (
        f"{XML_DECLARATION}<methodCall>"
        f"<methodName>{xml_escape(method_name)}</methodName>"
        f"<params>{encoded}</params></methodCall>"
    )
