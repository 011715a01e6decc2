"""
Plain-text views for posts.
"""

from __future__ import annotations

from blog_shared.types import Post

DATE_FORMAT = "%Y-%m-%d %H:%M"


def render_post_list(posts: list[Post]) -> str:
    if not posts:
        return "No posts yet."
    lines = [f"{len(posts)} post(s)", ""]
    for post in posts:
        lines.append(
            f"- {post.title} [{post.category}] "
            f"{post.created_at.strftime(DATE_FORMAT)} (id: {post.id})"
        )
    return "\n".join(lines)


def render_post_detail(post: Post) -> str:
    return "\n".join(
        [
            post.title,
            "=" * len(post.title),
            f"Category: {post.category}",
            f"Created:  {post.created_at.strftime(DATE_FORMAT)}",
            f"Id:       {post.id}",
            "",
            post.content,
        ]
    )


def render_status(message: str) -> str:
    return f"* {message}"
