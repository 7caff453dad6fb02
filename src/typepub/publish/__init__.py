"""Publishing workflow, settings and CLI."""

from .config import PublisherConfig, load_config, save_config
from .publisher import (
    PostOptions,
    PreparedPost,
    PublishError,
    PublishResult,
    apply_result,
    build_call,
    build_post_struct,
    new_post_id,
    parse_list,
    parse_timestamp,
    ping,
    prepare_post,
    publish,
)

__all__ = [
    "PostOptions",
    "PreparedPost",
    "PublishError",
    "PublishResult",
    "PublisherConfig",
    "apply_result",
    "build_call",
    "build_post_struct",
    "load_config",
    "new_post_id",
    "parse_list",
    "parse_timestamp",
    "ping",
    "prepare_post",
    "publish",
    "save_config",
]
