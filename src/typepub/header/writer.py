"""Writer for the restricted metadata header."""

import re
from collections.abc import Mapping
from typing import Any

NEEDS_QUOTE = re.compile(r"[:#\-?&*!\[\]{},>|'%@`\s]")


def needs_quote(value: str) -> bool:
    """True when a scalar contains YAML indicator characters or whitespace."""
    return NEEDS_QUOTE.search(value) is not None


def format_scalar(value: Any) -> str:
    """Render a scalar, double-quoting it when required."""
    text = str(value)
    if needs_quote(text):
        escaped = text.replace('"', '\\"')
        return f'"{escaped}"'
    return text


def write_header(metadata: Mapping[str, Any]) -> str:
    """Render metadata as header lines, without the ``---`` fences.

    Args:
        metadata: Ordered mapping of key to string, bool, sequence or None.

    Returns:
        The header text, lines joined with ``\\n`` and no trailing newline.
    """
    lines: list[str] = []
    for key, value in metadata.items():
        if isinstance(value, (list, tuple)):
            lines.append(f"{key}:")
            lines.extend(f"  - {format_scalar(item)}" for item in value)
        elif isinstance(value, bool):
            lines.append(f"{key}: {'true' if value else 'false'}")
        elif value is None:
            lines.append(f"{key}:")
        else:
            lines.append(f"{key}: {format_scalar(value)}")
    return "\n".join(lines)
