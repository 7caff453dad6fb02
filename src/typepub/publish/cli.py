"""CLI commands for publishing documents.

Provides subcommands for publishing a file, checking the endpoint, and
inspecting or updating settings.
"""

import argparse
import asyncio
import sys
import xml.etree.ElementTree as ET
from dataclasses import asdict, fields
from pathlib import Path

from ..header import dumps_document, load_document
from ..logging import configure_logger, get_logger
from ..xmlrpc import XmlRpcClient, XmlRpcError, encode_call
from .config import PublisherConfig, load_config, save_config
from .publisher import (
    PostOptions,
    PublishError,
    build_call,
    parse_list,
    parse_timestamp,
    ping,
    prepare_post,
    publish,
)

MASK = "********"

# Raised by decoding a response that is not a valid XML-RPC document
MALFORMED_RESPONSE = (ET.ParseError, ValueError)


def _client(config: PublisherConfig) -> XmlRpcClient:
    return XmlRpcClient(
        config.endpoint,
        proxy_url=config.proxy_url or None,
        timeout=config.timeout,
    )


def _require_complete(config: PublisherConfig) -> bool:
    if config.is_complete():
        return True
    print(
        "Publisher is not configured. Set endpoint, username and password with "
        "'typepub config set'.",
        file=sys.stderr,
    )
    return False


def _options_from_args(args: argparse.Namespace) -> PostOptions:
    published_at = None
    if args.date:
        published_at = parse_timestamp(args.date)
        if published_at is None:
            raise PublishError(f"Invalid date: {args.date}")

    return PostOptions(
        title=args.title,
        slug=args.slug,
        tags=parse_list(args.tags) if args.tags is not None else None,
        categories=parse_list(args.categories) if args.categories is not None else None,
        draft=args.draft,
        published_at=published_at,
    )


def cmd_publish(args: argparse.Namespace) -> int:
    """Publish or update a document, then rewrite its header."""
    config = load_config()
    path = Path(args.file)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return 1

    post = load_document(text)

    try:
        options = _options_from_args(args)
        if args.dry_run:
            prepared = prepare_post(post, options, config)
            method, params = build_call(prepared, post.content, config)
            print(encode_call(method, params))
            return 0

        if not _require_complete(config):
            return 1

        result = asyncio.run(
            publish(_client(config), config, post, options, event_log=get_logger())
        )
    except (PublishError, XmlRpcError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MALFORMED_RESPONSE as e:
        print(f"Error: malformed response from server: {e}", file=sys.stderr)
        return 1

    path.write_text(dumps_document(post), encoding="utf-8")

    action = "Published" if result.created else "Updated"
    print(f"✓ {action} '{post.metadata['title']}' (cid {result.cid})")
    return 0


def cmd_ping(args: argparse.Namespace) -> int:
    """Check that the configured endpoint answers."""
    config = load_config()
    if not config.endpoint:
        print("Error: no endpoint configured", file=sys.stderr)
        return 1

    try:
        methods = asyncio.run(ping(_client(config)))
    except XmlRpcError as e:
        print(f"Connection failed: {e}", file=sys.stderr)
        return 1
    except MALFORMED_RESPONSE as e:
        print(f"Connection failed: malformed response from server: {e}", file=sys.stderr)
        return 1

    print(f"✓ Connection OK ({len(methods)} methods)")
    return 0


def _coerce(name: str, value: str) -> object:
    if name == "use_current_time":
        return value.strip().lower() in ("true", "yes", "1", "on")
    if name in ("publish_time_offset", "timeout"):
        return float(value)
    return value


def cmd_config(args: argparse.Namespace) -> int:
    """Show or update publisher settings."""
    config = load_config(use_env=False)

    if args.action == "show":
        for name, value in asdict(config).items():
            if name == "password" and value:
                value = MASK
            print(f"{name:<20} {value}")
        return 0

    known = {f.name for f in fields(PublisherConfig)}
    if args.key not in known:
        print(f"Error: unknown setting '{args.key}'", file=sys.stderr)
        return 1

    try:
        setattr(config, args.key, _coerce(args.key, args.value))
        # Re-run validation on the updated settings
        config = PublisherConfig(**asdict(config))
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    save_config(config)
    print(f"✓ Set {args.key}")
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the publisher CLI."""
    parser = argparse.ArgumentParser(
        prog="typepub",
        description="Publish Markdown documents over metaWeblog XML-RPC",
    )
    parser.add_argument(
        "--log-dir",
        help="Directory for the JSONL event log (default ~/.typepub/logs)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Sub-command help")

    # publish command
    publish_parser = subparsers.add_parser("publish", help="Publish or update a document")
    publish_parser.add_argument("file", help="Document to publish")
    publish_parser.add_argument("--title", help="Post title")
    publish_parser.add_argument("--slug", help="Post slug")
    publish_parser.add_argument("--tags", help="Comma-separated tags")
    publish_parser.add_argument("--categories", help="Comma-separated categories")
    publish_parser.add_argument(
        "--draft",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Save as draft instead of publishing",
    )
    publish_parser.add_argument("--date", help="Publish time (ISO 8601)")
    publish_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the XML-RPC request without sending it",
    )

    # ping command
    subparsers.add_parser("ping", help="Check the configured endpoint")

    # config command
    config_parser = subparsers.add_parser("config", help="Show or change settings")
    config_sub = config_parser.add_subparsers(dest="action", required=True)
    config_sub.add_parser("show", help="Show current settings")
    set_parser = config_sub.add_parser("set", help="Change a setting")
    set_parser.add_argument("key", help="Setting name, e.g. endpoint")
    set_parser.add_argument("value", help="New value")

    return parser


def run_cli(argv: list[str] | None = None) -> int:
    """Run the publisher CLI with given arguments.

    Args:
        argv: Command-line arguments. Uses sys.argv[1:] if None.

    Returns:
        Exit code (0 for success, non-zero for error).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.log_dir:
        configure_logger(log_dir=args.log_dir)

    commands = {
        "publish": cmd_publish,
        "ping": cmd_ping,
        "config": cmd_config,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    return handler(args)


if __name__ == "__main__":
    sys.exit(run_cli())
