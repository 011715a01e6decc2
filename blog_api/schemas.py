"""
Pydantic schemas for the blog API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from blog_shared.types import Post, PostFields


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


PostText = Annotated[str, Field(min_length=1), AfterValidator(_not_blank)]


class PostCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: PostText
    content: PostText
    category: PostText

    def to_fields(self) -> PostFields:
        return PostFields(
            title=self.title, content=self.content, category=self.category
        )


class PostUpdate(BaseModel):
    """Replacement fields; omitted fields are left unchanged."""

    model_config = ConfigDict(extra="ignore")

    title: Optional[PostText] = None
    content: Optional[PostText] = None
    category: Optional[PostText] = None

    def to_fields(self) -> PostFields:
        return PostFields(
            title=self.title, content=self.content, category=self.category
        )


class PostResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    content: str
    category: str
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            content=post.content,
            category=post.category,
            created_at=post.created_at,
        )


class DeleteResponse(BaseModel):
    message: str
    deleted: bool
