"""Command Line Interface for the content graph.

This module provides a CLI for working with cruxes, dimensions and tags stored
in the configured SQLite database. Settings come from ``CRUXGRAPH_*``
environment variables or a ``.env`` file.

The CLI supports the following commands:
    - init: Create the database tables
    - add-crux: Create a crux
    - link: Create a dimension between two cruxes
    - dimensions: List one page of a crux's dimensions with its Link/Pagination headers
    - tags: Show the tags of a resource
    - sync-tags: Replace the tags of a resource
    - delete-crux: Delete a crux with its author's dimensions and its tags
    - graph: Write an author's graph to a JSON file
    - backup: Copy the database to a backup directory

Body arguments accept either a JSON string or a file path prefixed with '@'.

Example Usage:
    cruxgraph add-crux --author alice "Getting started"
    cruxgraph link --author alice SRCKEY growth --target-key DSTKEY --weight 3
    cruxgraph dimensions SRCKEY --type growth --page 2 --per-page 10
    cruxgraph sync-tags --author alice crux SRCKEY python async
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Any, List, Optional

from cruxgraph.config import Settings, configure_logging
from cruxgraph.core.enums import DimensionType, ResourceType, TagSort
from cruxgraph.core.exceptions import ConfigurationError, http_status
from cruxgraph.services import ResourceGraphService, create_resource_graph

logger = logging.getLogger(__name__)


def parse_json_input(json_str: str) -> Any:
    """Parse JSON input from either a string or file.

    Args:
        json_str (str): Either a JSON string or a file path prefixed with '@'.
                       Relative paths are resolved against the current directory.

    Returns:
        Parsed JSON data.

    Raises:
        ValueError: If the JSON is invalid or the specified file is not found.
    """
    if json_str.startswith("@"):
        file_path = json_str[1:]
        if not os.path.isabs(file_path):
            file_path = os.path.join(os.getcwd(), file_path)

        if not os.path.exists(file_path):
            raise ValueError(f"File not found: {file_path}")

        with open(file_path, "r") as f:
            return json.load(f)

    try:
        return json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON input: {e}")


def print_json(data: Any) -> None:
    print(json.dumps(data, indent=2))


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the command-line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(description="Content graph CLI")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("init", help="Create the database tables")

    add_crux = subparsers.add_parser("add-crux", help="Create a crux")
    add_crux.add_argument("title", help="Title of the crux")
    add_crux.add_argument("--author", required=True, help="Author id")
    add_crux.add_argument("--slug", help="URL slug")
    add_crux.add_argument("--home", help="Home id (defaults to the primary home)")

    link = subparsers.add_parser("link", help="Create a dimension between two cruxes")
    link.add_argument("source", help="Key of the source crux")
    link.add_argument(
        "type", nargs="?", choices=[t.value for t in DimensionType], help="Dimension type"
    )
    link.add_argument("--author", required=True, help="Author id")
    target = link.add_mutually_exclusive_group()
    target.add_argument("--target-key", help="Key of the target crux")
    target.add_argument("--target-id", help="Id of the target crux")
    link.add_argument("--weight", type=int, help="Non-negative weight")
    link.add_argument("--note", help="Free-text note")
    link.add_argument(
        "--body", help="JSON body {targetId, type, weight?, note?} or @filename, instead of options"
    )

    dimensions = subparsers.add_parser("dimensions", help="List a crux's dimensions")
    dimensions.add_argument("source", help="Key of the source crux")
    dimensions.add_argument("--type", choices=[t.value for t in DimensionType])
    dimensions.add_argument("--page", type=int, default=1)
    dimensions.add_argument("--per-page", type=int, dest="per_page")

    tags = subparsers.add_parser("tags", help="Show tags of a resource, or the tag directory")
    tags.add_argument("resource_type", nargs="?", choices=[t.value for t in ResourceType])
    tags.add_argument("key", nargs="?", help="Key (crux, dimension) or id of the resource")
    tags.add_argument("--filter", help="Substring the label must contain")
    tags.add_argument("--sort", choices=[s.value for s in TagSort], default=TagSort.COUNT.value)
    tags.add_argument("--page", type=int, default=1)
    tags.add_argument("--per-page", type=int, dest="per_page")

    sync_tags = subparsers.add_parser("sync-tags", help="Replace the tags of a resource")
    sync_tags.add_argument("resource_type", choices=[t.value for t in ResourceType])
    sync_tags.add_argument("key", help="Key (crux, dimension) or id of the resource")
    sync_tags.add_argument("labels", nargs="*", help="Desired labels; none removes all tags")
    sync_tags.add_argument("--author", required=True, help="Author id")

    delete_crux = subparsers.add_parser("delete-crux", help="Delete a crux")
    delete_crux.add_argument("key", help="Key of the crux")
    delete_crux.add_argument("--author", required=True, help="Author id")

    graph = subparsers.add_parser("graph", help="Export an author's graph as JSON")
    graph.add_argument("--author", required=True, help="Author id")
    graph.add_argument("--output", required=True, help="Destination JSON file")

    backup = subparsers.add_parser("backup", help="Back up the database")
    backup.add_argument("--dir", dest="backup_dir", help="Backup directory")

    return parser


async def run_command(service: ResourceGraphService, args: argparse.Namespace) -> None:
    """Execute one parsed command against an initialized service."""
    if args.command == "init":
        print(f"Initialized database at {service.storage.db_path}")

    elif args.command == "add-crux":
        crux = await service.create_crux(args.author, args.title, slug=args.slug, home_id=args.home)
        print_json(crux.to_dict())

    elif args.command == "link":
        if args.body:
            dimension = await service.link_from_body(
                args.source, parse_json_input(args.body), args.author
            )
        else:
            if not args.type:
                raise ValueError("A dimension type is required unless --body is given")
            dimension = await service.link(
                args.source,
                args.type,
                args.author,
                target_id=args.target_id,
                target_key=args.target_key,
                weight=args.weight,
                note=args.note,
            )
        print_json(dimension.to_dict())

    elif args.command == "dimensions":
        query = {"page": args.page}
        if args.per_page:
            query["perPage"] = args.per_page
        listing = await service.get_dimensions(args.source, args.type, query=query)
        for name, value in listing.headers.items():
            print(f"{name}: {value}")
        print_json([dimension.to_dict() for dimension in listing.items])

    elif args.command == "tags":
        if args.resource_type and args.key:
            tags = await service.get_tags(args.resource_type, args.key, args.filter)
            print_json([tag.to_dict() for tag in tags])
        else:
            page = await service.tag_sync.list_labels(
                resource_type=args.resource_type,
                search=args.filter,
                sort=args.sort,
                page=args.page,
                per_page=args.per_page or service.settings.default_per_page,
            )
            print_json(
                {
                    "labels": [entry.to_dict() for entry in page.items],
                    "total": page.total,
                }
            )

    elif args.command == "sync-tags":
        tags = await service.sync_tags(args.resource_type, args.key, args.labels, args.author)
        print_json([tag.to_dict() for tag in tags])

    elif args.command == "delete-crux":
        result = await service.delete_crux(args.key, args.author)
        print(
            f"Deleted crux {result.crux.key}: "
            f"{result.dimensions_removed} dimensions, {result.tags_removed} tags removed"
        )

    elif args.command == "graph":
        data = await service.author_graph(args.author)
        await service.storage.export_json(args.output, data)
        print(
            f"Wrote {len(data['cruxes'])} cruxes and "
            f"{len(data['dimensions'])} dimensions to {args.output}"
        )

    elif args.command == "backup":
        backup_dir = await service.storage.backup(args.backup_dir)
        print(f"Backup written to {backup_dir}")


async def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI application.

    Returns:
        Process exit status: 0 on success, 1 on a failed command, 2 on bad configuration
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        settings = Settings.from_env()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    configure_logging(settings)

    service = await create_resource_graph(settings)
    try:
        await run_command(service, args)
        return 0
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error ({http_status(e)}): {e}", file=sys.stderr)
        return 1
    finally:
        await service.storage.cleanup()


def run() -> None:
    """Console-script entry point; exits with the status returned by ``main``."""
    sys.exit(asyncio.run(main()))
