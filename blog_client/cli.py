"""
Command-line client for browsing and editing blog posts.

Each command performs one request against the API and renders the result.
After a create, edit or delete the post list is fetched again and shown.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, TextIO

import requests

from blog_client.api import DEFAULT_API_URL, ApiError, BlogApiClient, NotFoundError
from blog_client.views import render_post_detail, render_post_list, render_status
from blog_shared.types import PostFields

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blog", description="Blog client")
    parser.add_argument(
        "--api-url",
        type=str,
        default=os.getenv("BLOG_API_URL", DEFAULT_API_URL),
        help="Base URL of the blog API",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log HTTP requests",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="Show all posts")

    show = commands.add_parser("show", help="Show one post")
    show.add_argument("post_id")

    create = commands.add_parser("create", help="Create a post")
    create.add_argument("--title", required=True)
    create.add_argument("--content", required=True)
    create.add_argument("--category", required=True)

    edit = commands.add_parser("edit", help="Edit a post")
    edit.add_argument("post_id")
    edit.add_argument("--title")
    edit.add_argument("--content")
    edit.add_argument("--category")

    delete = commands.add_parser("delete", help="Delete a post")
    delete.add_argument("post_id")
    return parser


def _show_list(client: BlogApiClient, out: TextIO) -> None:
    print(render_post_list(client.list_posts()), file=out)


def run(args: argparse.Namespace, client: BlogApiClient, out: TextIO) -> None:
    if args.command == "list":
        _show_list(client, out)
    elif args.command == "show":
        print(render_post_detail(client.get_post(args.post_id)), file=out)
    elif args.command == "create":
        post = client.create_post(
            PostFields(title=args.title, content=args.content, category=args.category)
        )
        print(render_status(f"Created post {post.id}"), file=out)
        _show_list(client, out)
    elif args.command == "edit":
        post = client.update_post(
            args.post_id,
            PostFields(title=args.title, content=args.content, category=args.category),
        )
        print(render_status(f"Updated post {post.id}"), file=out)
        _show_list(client, out)
    elif args.command == "delete":
        if client.delete_post(args.post_id):
            print(render_status(f"Deleted post {args.post_id}"), file=out)
        else:
            print(render_status(f"No post {args.post_id}"), file=out)
        _show_list(client, out)


def main(
    argv: Optional[list[str]] = None,
    client: Optional[BlogApiClient] = None,
    out: Optional[TextIO] = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "edit" and all(
        value is None for value in (args.title, args.content, args.category)
    ):
        parser.error("edit needs at least one of --title, --content, --category")
    if out is None:
        out = sys.stdout
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s:%(message)s",
    )
    client = client or BlogApiClient(args.api_url)
    try:
        run(args, client, out)
    except NotFoundError:
        print(render_status("Post not found"), file=out)
        return 1
    except ApiError as exc:
        print(render_status(f"Request failed ({exc.status_code}): {exc.detail}"), file=out)
        return 1
    except ValueError as exc:
        print(render_status(str(exc)), file=out)
        return 1
    except requests.RequestException as exc:
        logger.error("Could not reach %s: %s", args.api_url, exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
