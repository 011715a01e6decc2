import unittest
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from blog_api.db import (
    InMemoryPostStore,
    PostValidationError,
    SqlPostStore,
    StoreError,
)
from blog_shared.types import PostFields, utcnow


def _fields(**overrides) -> PostFields:
    values = {"title": "Hello", "content": "World", "category": "general"}
    values.update(overrides)
    return PostFields(**values)


class PostStoreContract:
    """Behaviour every post store must share. Subclasses set ``self.store``."""

    def test_create_and_get(self):
        started = utcnow()
        post = self.store.create_post(_fields())
        self.assertTrue(post.id)
        self.assertGreaterEqual(post.created_at, started)
        fetched = self.store.get_post(post.id)
        self.assertEqual(fetched, post)

    def test_create_rejects_missing_or_blank_fields(self):
        with self.assertRaises(PostValidationError) as ctx:
            self.store.create_post(PostFields(title="Only title"))
        self.assertEqual(ctx.exception.fields, ["content", "category"])

        with self.assertRaises(PostValidationError):
            self.store.create_post(_fields(category=" \t"))
        self.assertEqual(self.store.list_posts(), [])

    def test_list_returns_all_posts(self):
        titles = ["a", "b", "c"]
        for title in titles:
            self.store.create_post(_fields(title=title))
        posts = self.store.list_posts()
        self.assertEqual(len(posts), 3)
        self.assertEqual(sorted(p.title for p in posts), titles)
        self.assertTrue(all(p.content == "World" for p in posts))

    def test_update_preserves_id_and_created_at(self):
        post = self.store.create_post(_fields())
        updated = self.store.update_post(
            post.id, PostFields(title="Hello2", category="news")
        )
        self.assertEqual(updated.id, post.id)
        self.assertEqual(updated.created_at, post.created_at)
        self.assertEqual(updated.title, "Hello2")
        self.assertEqual(updated.content, "World")
        self.assertEqual(updated.category, "news")
        self.assertEqual(self.store.get_post(post.id).title, "Hello2")

    def test_returned_posts_are_detached_from_the_store(self):
        post = self.store.create_post(_fields())
        post.title = "changed by caller"
        self.assertEqual(self.store.get_post(post.id).title, "Hello")

        fetched = self.store.get_post(post.id)
        updated = self.store.update_post(post.id, PostFields(title="Hello2"))
        self.assertIsNot(updated, fetched)
        self.assertEqual(fetched.title, "Hello")
        updated.category = "changed by caller"
        self.assertEqual(self.store.list_posts()[0].category, "general")

    def test_update_rejects_blank_replacement(self):
        post = self.store.create_post(_fields())
        with self.assertRaises(PostValidationError):
            self.store.update_post(post.id, PostFields(content=""))
        self.assertEqual(self.store.get_post(post.id).content, "World")

    def test_update_missing_returns_none(self):
        self.assertIsNone(self.store.update_post("missing", _fields()))
        self.assertEqual(self.store.list_posts(), [])

    def test_delete(self):
        post = self.store.create_post(_fields())
        self.assertTrue(self.store.delete_post(post.id))
        self.assertFalse(self.store.delete_post(post.id))
        self.assertIsNone(self.store.get_post(post.id))
        self.assertEqual(self.store.list_posts(), [])


class InMemoryPostStoreTests(PostStoreContract, unittest.TestCase):
    def setUp(self):
        self.store = InMemoryPostStore()

    def test_list_keeps_insertion_order(self):
        ids = [self.store.create_post(_fields(title=t)).id for t in "xyz"]
        self.assertEqual([p.id for p in self.store.list_posts()], ids)

    def test_reset(self):
        self.store.create_post(_fields())
        self.store.reset()
        self.assertEqual(self.store.list_posts(), [])


class SqlPostStoreTests(PostStoreContract, unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the SQL store logic.
    """

    def setUp(self):
        self.store = SqlPostStore("sqlite+pysqlite:///:memory:")

    def tearDown(self):
        self.store.engine.dispose()

    def test_requires_url(self):
        with self.assertRaises(ValueError):
            SqlPostStore("")

    def test_driver_errors_become_store_errors(self):
        with patch.object(
            self.store,
            "Session",
            side_effect=OperationalError("SELECT", {}, Exception("db down")),
        ):
            with self.assertRaises(StoreError):
                self.store.list_posts()
            with self.assertRaises(StoreError):
                self.store.create_post(_fields())


if __name__ == "__main__":
    unittest.main()
