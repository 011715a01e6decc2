"""
Post storage: an in-memory implementation for tests plus SQLAlchemy and
MongoDB backed implementations.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError
from sqlalchemy import Column, DateTime, String, Text, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from blog_shared.types import (
    REQUIRED_FIELDS,
    Post,
    PostFields,
    ensure_utc,
    is_blank,
    utcnow,
)

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """A store operation failed in the underlying driver."""


class PostValidationError(ValueError):
    """A write was missing required post fields."""

    def __init__(self, fields: list[str]):
        self.fields = fields
        super().__init__(f"Missing or blank fields: {', '.join(fields)}")


class PostStore(Protocol):
    """Interface the CRUD routes need from post storage."""

    def create_post(self, fields: PostFields) -> Post:
        ...

    def list_posts(self) -> list[Post]:
        ...

    def get_post(self, post_id: str) -> Optional[Post]:
        ...

    def update_post(self, post_id: str, changes: PostFields) -> Optional[Post]:
        ...

    def delete_post(self, post_id: str) -> bool:
        ...


def validate_new_post(fields: PostFields) -> None:
    missing = fields.missing()
    if missing:
        raise PostValidationError(missing)


def validate_changes(changes: PostFields) -> dict:
    """Return the supplied changes, rejecting any blank replacement value."""
    supplied = changes.supplied()
    blank = [name for name, value in supplied.items() if is_blank(value)]
    if blank:
        raise PostValidationError(blank)
    return {name: supplied[name] for name in REQUIRED_FIELDS if name in supplied}


class InMemoryPostStore:
    """Simple in-memory store for development and tests.

    Callers only ever receive copies of the stored posts.
    """

    def __init__(self):
        self.posts: Dict[str, Post] = {}

    def create_post(self, fields: PostFields) -> Post:
        validate_new_post(fields)
        post = Post(
            id=uuid.uuid4().hex,
            title=fields.title,
            content=fields.content,
            category=fields.category,
            created_at=utcnow(),
        )
        self.posts[post.id] = post
        return replace(post)

    def list_posts(self) -> list[Post]:
        return [replace(post) for post in self.posts.values()]

    def get_post(self, post_id: str) -> Optional[Post]:
        post = self.posts.get(post_id)
        return replace(post) if post else None

    def update_post(self, post_id: str, changes: PostFields) -> Optional[Post]:
        updates = validate_changes(changes)
        post = self.posts.get(post_id)
        if not post:
            return None
        post = replace(post, **updates)
        self.posts[post_id] = post
        return replace(post)

    def delete_post(self, post_id: str) -> bool:
        return self.posts.pop(post_id, None) is not None

    def reset(self) -> None:
        """Clear all stored posts (useful in tests)."""
        self.posts.clear()


class SqlPostStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlPostStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_post(self, row: "PostRow") -> Post:
        return Post(
            id=row.id,
            title=row.title,
            content=row.content,
            category=row.category,
            created_at=ensure_utc(row.created_at),
        )

    def create_post(self, fields: PostFields) -> Post:
        validate_new_post(fields)
        try:
            with self.Session() as session:
                row = PostRow(
                    id=uuid.uuid4().hex,
                    title=fields.title,
                    content=fields.content,
                    category=fields.category,
                    created_at=utcnow(),
                )
                session.add(row)
                session.commit()
                session.refresh(row)
                return self._to_post(row)
        except SQLAlchemyError as exc:
            raise StoreError("create_post failed") from exc

    def list_posts(self) -> list[Post]:
        try:
            with self.Session() as session:
                rows = session.execute(
                    select(PostRow).order_by(PostRow.created_at.asc())
                ).scalars()
                return [self._to_post(row) for row in rows]
        except SQLAlchemyError as exc:
            raise StoreError("list_posts failed") from exc

    def get_post(self, post_id: str) -> Optional[Post]:
        try:
            with self.Session() as session:
                row = session.get(PostRow, post_id)
                return self._to_post(row) if row else None
        except SQLAlchemyError as exc:
            raise StoreError("get_post failed") from exc

    def update_post(self, post_id: str, changes: PostFields) -> Optional[Post]:
        updates = validate_changes(changes)
        try:
            with self.Session() as session:
                row = session.get(PostRow, post_id)
                if not row:
                    return None
                for name, value in updates.items():
                    setattr(row, name, value)
                session.commit()
                return self._to_post(row)
        except SQLAlchemyError as exc:
            raise StoreError("update_post failed") from exc

    def delete_post(self, post_id: str) -> bool:
        try:
            with self.Session() as session:
                row = session.get(PostRow, post_id)
                if not row:
                    return False
                session.delete(row)
                session.commit()
                return True
        except SQLAlchemyError as exc:
            raise StoreError("delete_post failed") from exc


def _round_up_to_millis(value: datetime) -> datetime:
    # BSON dates hold milliseconds only; never round below the creation time.
    remainder = value.microsecond % 1000
    if not remainder:
        return value
    return value + timedelta(microseconds=1000 - remainder)


class MongoPostStore:
    """pymongo-backed implementation over a single document collection."""

    def __init__(self, collection: Collection):
        self.collection = collection

    @classmethod
    def from_url(
        cls, mongo_url: str, database: str = "blog", collection: str = "posts"
    ) -> "MongoPostStore":
        if not mongo_url:
            raise ValueError("MONGO_URL is required for MongoPostStore")
        client = MongoClient(
            mongo_url,
            tz_aware=True,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            retryWrites=True,
            retryReads=True,
        )
        logger.info("Using MongoDB collection %s.%s", database, collection)
        return cls(client[database][collection])

    @staticmethod
    def _object_id(post_id: str) -> Optional[ObjectId]:
        try:
            return ObjectId(post_id)
        except (InvalidId, TypeError):
            return None

    def _to_post(self, doc: dict) -> Post:
        try:
            return Post(
                id=str(doc["_id"]),
                title=doc["title"],
                content=doc["content"],
                category=doc["category"],
                created_at=ensure_utc(doc["createdAt"]),
            )
        except (KeyError, AttributeError) as exc:
            raise StoreError(f"malformed post document {doc.get('_id')}") from exc

    def create_post(self, fields: PostFields) -> Post:
        validate_new_post(fields)
        doc = {
            "title": fields.title,
            "content": fields.content,
            "category": fields.category,
            "createdAt": _round_up_to_millis(utcnow()),
        }
        try:
            result = self.collection.insert_one(doc)
        except PyMongoError as exc:
            raise StoreError("create_post failed") from exc
        doc["_id"] = result.inserted_id
        return self._to_post(doc)

    def list_posts(self) -> list[Post]:
        try:
            docs = list(self.collection.find().sort("_id", 1))
        except PyMongoError as exc:
            raise StoreError("list_posts failed") from exc
        return [self._to_post(doc) for doc in docs]

    def get_post(self, post_id: str) -> Optional[Post]:
        oid = self._object_id(post_id)
        if oid is None:
            return None
        try:
            doc = self.collection.find_one({"_id": oid})
        except PyMongoError as exc:
            raise StoreError("get_post failed") from exc
        return self._to_post(doc) if doc else None

    def update_post(self, post_id: str, changes: PostFields) -> Optional[Post]:
        updates = validate_changes(changes)
        oid = self._object_id(post_id)
        if oid is None:
            return None
        try:
            if not updates:
                doc = self.collection.find_one({"_id": oid})
            else:
                doc = self.collection.find_one_and_update(
                    {"_id": oid},
                    {"$set": updates},
                    return_document=ReturnDocument.AFTER,
                )
        except PyMongoError as exc:
            raise StoreError("update_post failed") from exc
        return self._to_post(doc) if doc else None

    def delete_post(self, post_id: str) -> bool:
        oid = self._object_id(post_id)
        if oid is None:
            return False
        try:
            result = self.collection.delete_one({"_id": oid})
        except PyMongoError as exc:
            raise StoreError("delete_post failed") from exc
        return result.deleted_count > 0


Base = declarative_base()


class PostRow(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
