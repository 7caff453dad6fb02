"""Parser for the restricted metadata header at the top of a document.

The header is fenced by bare ``---`` lines and holds one ``key: value``
per line, with block lists written as indented ``- item`` lines under an
empty key. Only this small subset of YAML is understood. Malformed header
content never raises; it yields a partial or empty mapping.
"""

import re
from dataclasses import dataclass
from typing import Union

MetadataValue = Union[str, bool, list[str]]
Metadata = dict[str, MetadataValue]

HEADER_PATTERN = re.compile(
    r"\A---\r?\n(.*?)\r?\n---(?:\r?\n(?:\r?\n)?|\Z)",
    re.DOTALL,
)
LINE_SPLIT = re.compile(r"\r?\n")
KEY_LINE = re.compile(r"([A-Za-z0-9_-]+):\s*(.*)")
LIST_ITEM = re.compile(r"\s*-\s*(.+)")
BOOLEAN = re.compile(r"true|false", re.IGNORECASE)
FLOW_LIST = re.compile(r"\[.*\]")


@dataclass(frozen=True)
class NoActiveKey:
    """No block list is being collected."""


@dataclass(frozen=True)
class ActiveKey:
    """Following ``- item`` lines append to ``name``."""

    name: str


ListState = Union[NoActiveKey, ActiveKey]


def unquote(value: str) -> str:
    """Strip one pair of matching single or double quotes.

    Backslash-escaped double quotes inside a double-quoted value are
    restored, mirroring what the writer emits.
    """
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        inner = value[1:-1]
        if value[0] == '"':
            inner = inner.replace('\\"', '"')
        return inner
    return value


def parse_flow_list(value: str) -> list[str]:
    """Parse ``[a, b, c]`` into its trimmed, non-empty elements."""
    return [item.strip() for item in value[1:-1].split(",") if item.strip()]


def parse_scalar(value: str) -> MetadataValue:
    """Interpret the text after ``key:`` on a non-empty key line."""
    if BOOLEAN.fullmatch(value):
        return value.lower() == "true"
    if FLOW_LIST.fullmatch(value):
        return parse_flow_list(value)
    return unquote(value)


def step(state: ListState, line: str, metadata: Metadata) -> ListState:
    """Apply one header line to ``metadata`` and return the next state.

    Args:
        state: Whether a block list is currently being collected.
        line: One header line, without its terminator.
        metadata: Mapping being built; updated in place.

    Returns:
        ActiveKey after an empty ``key:`` line or a list item under an
        active key; NoActiveKey after any other non-blank line. Blank lines
        leave the state unchanged.
    """
    match = KEY_LINE.fullmatch(line)
    if match:
        key, value = match.groups()
        if value == "":
            metadata[key] = ""
            return ActiveKey(key)
        metadata[key] = parse_scalar(value)
        return NoActiveKey()

    item = LIST_ITEM.fullmatch(line)
    if item and isinstance(state, ActiveKey):
        current = metadata.get(state.name)
        if not isinstance(current, list):
            current = []
            metadata[state.name] = current
        current.append(unquote(item.group(1)))
        return state

    if line.strip():
        return NoActiveKey()
    return state


def parse_header_lines(header: str) -> Metadata:
    """Parse the text between the fences into an ordered mapping."""
    metadata: Metadata = {}
    state: ListState = NoActiveKey()
    for line in LINE_SPLIT.split(header):
        state = step(state, line, metadata)
    return metadata


def split_header(text: str) -> tuple[str, str] | None:
    """Split a document into (header text, body).

    Returns:
        None when the document does not start with a fenced header.
    """
    match = HEADER_PATTERN.match(text)
    if match is None:
        return None
    return match.group(1), text[match.end():]


def parse_header(text: str) -> tuple[Metadata, str]:
    """Parse a document into its metadata and body.

    Args:
        text: Full document text.

    Returns:
        Tuple of (metadata, body). Without a header, metadata is empty and
        the body is the entire input.
    """
    parts = split_header(text)
    if parts is None:
        return {}, text
    header, body = parts
    return parse_header_lines(header), body
