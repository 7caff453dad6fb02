"""Publish documents to a metaWeblog endpoint.

One publish cycle reads the document's header, sends either
``metaWeblog.newPost`` or ``metaWeblog.editPost``, and on success writes
the published fields back into the header. The body is never modified.
"""

import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import frontmatter

from ..logging import JSONLLogger
from ..xmlrpc import (
    Arr,
    DateTime,
    Fault,
    Int,
    Str,
    Struct,
    Value,
    XmlRpcClient,
    format_iso8601,
    to_python,
    to_value,
)
from .config import PublisherConfig

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"
WIRE_TIME_FORMAT = "%Y%m%dT%H:%M:%S"

NEW_POST = "metaWeblog.newPost"
EDIT_POST = "metaWeblog.editPost"
LIST_METHODS = "system.listMethods"


class PublishError(Exception):
    """Raised when a document cannot be published as requested."""

    pass


def parse_list(value: Any) -> list[str]:
    """Parse a value that can be a comma-separated string or a list.

    Returns:
        List of non-empty, trimmed strings.
    """
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, (list, tuple)):
        return [str(t).strip() for t in value if str(t).strip()]
    return []


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a header timestamp in wire or ISO 8601 form.

    Returns:
        A naive datetime, or None if the value is not a timestamp.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return datetime.strptime(text, WIRE_TIME_FORMAT)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parsed.replace(tzinfo=None)


@dataclass
class PostOptions:
    """Overrides for fields otherwise taken from the document header.

    ``None`` keeps the document's value.
    """

    title: str | None = None
    slug: str | None = None
    tags: Sequence[str] | None = None
    categories: Sequence[str] | None = None
    draft: bool | None = None
    published_at: datetime | None = None


@dataclass
class PreparedPost:
    """Fields resolved for one publish call."""

    title: str
    slug: str
    tags: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    draft: bool = False
    published_at: datetime = field(default_factory=datetime.now)
    cid: str = ""

    @property
    def is_update(self) -> bool:
        """True when the document already has a remote content id."""
        return bool(self.cid)


@dataclass
class PublishResult:
    """Outcome of a successful publish call."""

    method: str
    cid: str
    created: bool
    response: Value


def prepare_post(
    post: frontmatter.Post,
    options: PostOptions | None = None,
    config: PublisherConfig | None = None,
    now: datetime | None = None,
) -> PreparedPost:
    """Merge document metadata with overrides into publishable fields.

    Args:
        post: Document loaded with ``load_document``.
        options: Explicit overrides.
        config: Publisher settings (time handling).
        now: Current time, injectable for tests.

    Raises:
        PublishError: If no category is given.
    """
    options = options or PostOptions()
    config = config or PublisherConfig()
    now = now or datetime.now()
    meta = post.metadata

    title = options.title if options.title is not None else str(meta.get("title") or "")
    title = title.strip() or DEFAULT_TITLE

    slug = options.slug if options.slug is not None else str(meta.get("slug") or "")

    tags = parse_list(options.tags if options.tags is not None else meta.get("tags", ""))
    categories = parse_list(
        options.categories if options.categories is not None else meta.get("categories", "")
    )
    if not categories:
        raise PublishError("At least one category is required")

    draft = options.draft if options.draft is not None else bool(meta.get("draft"))

    if options.published_at is not None:
        published_at = options.published_at
    elif config.use_current_time:
        published_at = now
    else:
        published_at = parse_timestamp(meta.get("dateCreated")) or now

    if config.publish_time_offset:
        published_at = published_at + timedelta(hours=config.publish_time_offset)

    cid = meta.get("cid")
    return PreparedPost(
        title=title,
        slug=slug.strip(),
        tags=tags,
        categories=categories,
        draft=draft,
        published_at=published_at,
        cid=str(cid) if cid else "",
    )


def build_post_struct(prepared: PreparedPost, body: str) -> Struct:
    """Build the metaWeblog post struct for a prepared post."""
    return Struct(
        {
            "title": Str(prepared.title),
            "description": Str(body),
            "mt_keywords": Str(",".join(prepared.tags)),
            "categories": Arr(tuple(Str(c) for c in prepared.categories)),
            "post_type": Str("post"),
            "wp_slug": Str(prepared.slug),
            "mt_allow_comments": Int(1),
            "dateCreated": DateTime(prepared.published_at),
        }
    )


def build_call(prepared: PreparedPost, body: str, config: PublisherConfig) -> tuple[str, list[Value]]:
    """Choose the method and positional parameters for a publish call."""
    struct = build_post_struct(prepared, body)
    target = prepared.cid if prepared.is_update else config.blog_id
    method = EDIT_POST if prepared.is_update else NEW_POST
    params = [
        to_value(str(target or "0")),
        to_value(config.username),
        to_value(config.password),
        struct,
        to_value(not prepared.draft),
    ]
    return method, params


def new_post_id(response: Value) -> str:
    """Extract the content id returned by ``metaWeblog.newPost``.

    Raises:
        PublishError: If the result is not an int or a non-empty string.
    """
    if isinstance(response, Int):
        return str(response.value)
    if isinstance(response, Str) and response.value.strip():
        return response.value.strip()
    raise PublishError(f"Server returned no post id: {to_python(response)!r}")


def apply_result(
    post: frontmatter.Post,
    prepared: PreparedPost,
    response: Value,
) -> str:
    """Write the published fields into the document header.

    Existing keys keep their position; new keys are appended. Nothing is
    written when a new post comes back without a usable id.

    Returns:
        The content id of the post.

    Raises:
        PublishError: If a new post result carries no id.
    """
    cid = prepared.cid if prepared.is_update else new_post_id(response)

    meta = post.metadata
    meta["title"] = prepared.title
    meta["tags"] = list(prepared.tags)
    meta["categories"] = list(prepared.categories)
    meta["draft"] = prepared.draft
    meta["dateCreated"] = format_iso8601(prepared.published_at)

    slug = prepared.slug
    if not prepared.is_update:
        meta["cid"] = cid
        if not slug:
            slug = cid
    meta["slug"] = slug
    return cid


async def publish(
    client: XmlRpcClient,
    config: PublisherConfig,
    post: frontmatter.Post,
    options: PostOptions | None = None,
    *,
    now: datetime | None = None,
    event_log: JSONLLogger | None = None,
) -> PublishResult:
    """Create or update the remote post for a document.

    The document's metadata is updated in place only after the call
    succeeds.

    Raises:
        PublishError: If the document cannot be prepared or a new post
            comes back without an id.
        Fault: If the server rejects the call.
        TransportError: If the HTTP exchange fails.
        xml.etree.ElementTree.ParseError: If the response is not XML.
    """
    prepared = prepare_post(post, options, config, now=now)
    method, params = build_call(prepared, post.content, config)

    logger.info("Publishing %r via %s", prepared.title, method)
    if event_log:
        event_log.log_call(client.endpoint, method, cid=prepared.cid or None)

    start = time.monotonic()
    try:
        response = await client.call(method, *params)
        cid = apply_result(post, prepared, response)
    except Exception as e:
        duration_ms = (time.monotonic() - start) * 1000
        if event_log:
            event_log.log_result(
                client.endpoint,
                method,
                False,
                cid=prepared.cid or None,
                duration_ms=duration_ms,
                fault_code=e.code if isinstance(e, Fault) else None,
                error=str(e),
            )
        raise

    duration_ms = (time.monotonic() - start) * 1000
    if event_log:
        event_log.log_result(
            client.endpoint, method, True, cid=cid, duration_ms=duration_ms
        )

    return PublishResult(
        method=method,
        cid=cid,
        created=not prepared.is_update,
        response=response,
    )


async def ping(client: XmlRpcClient) -> list[str]:
    """Check the endpoint by listing its methods."""
    result = await client.call(LIST_METHODS)
    methods = to_python(result)
    if not isinstance(methods, list):
        return []
    return [str(m) for m in methods]
