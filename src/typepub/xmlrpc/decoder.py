"""Decode XML-RPC response text into wire Values.

A response either carries a single result value or a fault. Faults are
raised as ``Fault``; a response without parameters decodes to ``Nil``.
Text that is not well-formed XML raises ``xml.etree.ElementTree.ParseError``.
"""

import logging
import xml.etree.ElementTree as ET

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
)

logger = logging.getLogger(__name__)

DEFAULT_FAULT_CODE = -1
DEFAULT_FAULT_MESSAGE = "XML-RPC error"


class XmlRpcError(Exception):
    """Base class for XML-RPC failures."""

    pass


class Fault(XmlRpcError):
    """Raised when the remote end answers with a fault response."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(f"XML-RPC fault {code}: {message}")
        self.code = code
        self.message = message

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Fault):
            return NotImplemented
        return (self.code, self.message) == (other.code, other.message)

    def __hash__(self) -> int:
        return hash((self.code, self.message))


def _first(element: ET.Element | None, tag: str) -> ET.Element | None:
    """First descendant with the given tag, in document order."""
    if element is None:
        return None
    return next(element.iter(tag), None)


def _text(element: ET.Element) -> str:
    return "".join(element.itertext())


def decode_value(element: ET.Element | None) -> Value:
    """Decode one element of a response into a Value.

    Args:
        element: A ``<value>`` element or a typed child of one.

    Returns:
        The decoded Value; ``Nil`` for a missing element.
    """
    if element is None:
        return Nil()

    tag = element.tag

    if tag == "value":
        children = list(element)
        if children:
            # Only the first child counts, siblings are ignored
            return decode_value(children[0])
        # Untyped scalar defaults to string
        return Str(element.text or "")

    if tag == "nil":
        return Nil()
    if tag == "string":
        return Str(_text(element))
    if tag == "boolean":
        return Bool(_text(element).strip() == "1")
    if tag in ("int", "i4"):
        return Int(int(_text(element).strip(), 10))
    if tag == "double":
        return Double(float(_text(element).strip()))
    if tag == "dateTime.iso8601":
        return DateTime(_text(element).strip())
    if tag == "struct":
        members: dict[str, Value] = {}
        for member in element.findall("member"):
            name = member.find("name")
            key = _text(name) if name is not None else ""
            # Later duplicates overwrite earlier ones
            members[key] = decode_value(member.find("value"))
        return Struct(members)
    if tag == "array":
        data = element.find("data")
        if data is None:
            return Arr()
        return Arr(tuple(decode_value(item) for item in data.findall("value")))

    logger.debug("Unknown XML-RPC tag <%s>, decoding as string", tag)
    return Str(_text(element))


def _fault_code(value: Value | None) -> int:
    if isinstance(value, Int):
        return value.value
    if isinstance(value, (Str, Double)):
        try:
            return int(value.value)
        except (ValueError, OverflowError):
            return DEFAULT_FAULT_CODE
    return DEFAULT_FAULT_CODE


def _raise_fault(fault: ET.Element) -> None:
    payload = decode_value(_first(fault, "value"))
    members = payload.members if isinstance(payload, Struct) else {}

    code = _fault_code(members.get("faultCode"))
    message_value = members.get("faultString")
    if isinstance(message_value, Str) and message_value.value:
        message = message_value.value
    else:
        message = DEFAULT_FAULT_MESSAGE

    raise Fault(code, message)


def decode_response(text: str | bytes) -> Value:
    """Decode a ``methodResponse`` document.

    Args:
        text: Raw response body.

    Returns:
        The value of the first parameter, or ``Nil`` when there is none.

    Raises:
        Fault: If the response signals a fault.
        xml.etree.ElementTree.ParseError: If the text is not well-formed.
    """
    root = ET.fromstring(text)

    fault = _first(root, "fault")
    if fault is not None:
        _raise_fault(fault)

    param = _first(_first(root, "params"), "param")
    if param is None:
        return Nil()
    return decode_value(_first(param, "value"))
