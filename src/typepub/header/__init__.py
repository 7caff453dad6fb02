"""Metadata header codec and document composition."""

from .document import HeaderHandler, dumps_document, load_document, rebuild
from .parser import (
    ActiveKey,
    Metadata,
    MetadataValue,
    NoActiveKey,
    parse_header,
    parse_header_lines,
    split_header,
    step,
)
from .writer import format_scalar, needs_quote, write_header

__all__ = [
    "ActiveKey",
    "HeaderHandler",
    "Metadata",
    "MetadataValue",
    "NoActiveKey",
    "dumps_document",
    "format_scalar",
    "load_document",
    "needs_quote",
    "parse_header",
    "parse_header_lines",
    "rebuild",
    "split_header",
    "step",
    "write_header",
]
