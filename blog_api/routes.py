"""
HTTP routes for the blog post CRUD API.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from blog_api.db import PostStore
from blog_api.dependencies import get_post_store
from blog_api.schemas import DeleteResponse, PostCreate, PostResponse, PostUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/posts", response_model=PostResponse, status_code=201)
def create_post(payload: PostCreate, store: PostStore = Depends(get_post_store)):
    post = store.create_post(payload.to_fields())
    logger.info("Created post %s", post.id)
    return PostResponse.from_post(post)


@router.get("/posts", response_model=list[PostResponse])
def list_posts(store: PostStore = Depends(get_post_store)):
    return [PostResponse.from_post(post) for post in store.list_posts()]


@router.get("/posts/{post_id}", response_model=PostResponse)
def get_post(post_id: str, store: PostStore = Depends(get_post_store)):
    post = store.get_post(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return PostResponse.from_post(post)


@router.put("/posts/{post_id}", response_model=PostResponse)
def update_post(
    post_id: str,
    payload: PostUpdate,
    store: PostStore = Depends(get_post_store),
):
    """
    Replace the supplied fields of a post. The id and creation time are kept.
    """
    post = store.update_post(post_id, payload.to_fields())
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    logger.info("Updated post %s", post.id)
    return PostResponse.from_post(post)


@router.delete("/posts/{post_id}", response_model=DeleteResponse)
def delete_post(post_id: str, store: PostStore = Depends(get_post_store)):
    # Deleting an unknown id is not an error; ``deleted`` reports whether
    # anything was removed.
    deleted = store.delete_post(post_id)
    if deleted:
        logger.info("Deleted post %s", post_id)
    return DeleteResponse(message="Post deleted", deleted=deleted)
