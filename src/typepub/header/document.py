"""Documents made of a metadata header and a body.

Documents are ``frontmatter.Post`` objects; ``HeaderHandler`` plugs the
restricted header format into python-frontmatter. The body is kept
byte-for-byte: loading never strips it and dumping never rewraps it.
"""

import re
from collections.abc import Mapping
from typing import Any

import frontmatter
from frontmatter.default_handlers import BaseHandler

from .parser import Metadata, parse_header, parse_header_lines, split_header
from .writer import write_header

DELIMITER = "---"


class HeaderHandler(BaseHandler):
    """python-frontmatter handler for the ``---`` fenced header subset."""

    FM_BOUNDARY = re.compile(r"^-{3}\s*$", re.MULTILINE)
    START_DELIMITER = DELIMITER
    END_DELIMITER = DELIMITER

    def detect(self, text: str) -> bool:
        return split_header(text) is not None

    def split(self, text: str) -> tuple[str, str]:
        parts = split_header(text)
        if parts is None:
            raise ValueError("Document has no metadata header")
        return parts

    def load(self, fm: str, **kwargs: Any) -> Metadata:
        return parse_header_lines(fm)

    def export(self, metadata: Mapping[str, Any], **kwargs: Any) -> str:
        return write_header(metadata)

    def format(self, post: frontmatter.Post, **kwargs: Any) -> str:
        return rebuild(post.metadata, post.content)


def rebuild(metadata: Mapping[str, Any], body: str) -> str:
    """Compose ``---\\n<header>\\n---\\n\\n<body>``."""
    return f"{DELIMITER}\n{write_header(metadata)}\n{DELIMITER}\n\n{body}"


def load_document(text: str) -> frontmatter.Post:
    """Parse document text into a Post.

    A document without a header yields empty metadata and the whole text
    as content.
    """
    metadata, body = parse_header(text)
    post = frontmatter.Post(body, handler=HeaderHandler())
    # Keys such as "content" or "handler" cannot go through Post(**metadata)
    post.metadata.update(metadata)
    return post


def dumps_document(post: frontmatter.Post) -> str:
    """Serialize a Post loaded with ``load_document`` back to text."""
    return frontmatter.dumps(post, handler=HeaderHandler())
