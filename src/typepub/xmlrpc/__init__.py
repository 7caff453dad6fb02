"""XML-RPC value model, codec and transport."""

from .client import TransportError, XmlRpcClient, build_proxied_url
from .decoder import Fault, XmlRpcError, decode_response, decode_value
from .encoder import encode_call, encode_value, xml_escape
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
    format_iso8601,
    to_python,
    to_value,
)

__all__ = [
    "Arr",
    "Bool",
    "DateTime",
    "Double",
    "Fault",
    "Int",
    "Nil",
    "Str",
    "Struct",
    "TransportError",
    "Value",
    "XmlRpcClient",
    "XmlRpcError",
    "build_proxied_url",
    "classify_number",
    "decode_response",
    "decode_value",
    "encode_call",
    "encode_value",
    "format_iso8601",
    "to_python",
    "to_value",
    "xml_escape",
]
