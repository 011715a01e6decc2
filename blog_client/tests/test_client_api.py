import unittest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from blog_api.app import create_app
from blog_api.db import InMemoryPostStore, StoreError
from blog_api.dependencies import get_post_store
from blog_client.api import ApiError, BlogApiClient, NotFoundError
from blog_shared.types import PostFields


def _client_for(store) -> BlogApiClient:
    app = create_app()
    app.dependency_overrides[get_post_store] = lambda: store
    return BlogApiClient("http://testserver/api/", session=TestClient(app))


class BlogApiClientTests(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryPostStore()
        self.client = _client_for(self.store)

    def test_create_list_and_get(self):
        post = self.client.create_post(
            PostFields(title="Hello", content="World", category="general")
        )
        self.assertEqual(self.client.list_posts(), [post])
        self.assertEqual(self.client.get_post(post.id), post)
        self.assertEqual(post.created_at, self.store.get_post(post.id).created_at)

    def test_update_and_delete(self):
        post = self.client.create_post(
            PostFields(title="Hello", content="World", category="general")
        )
        updated = self.client.update_post(post.id, PostFields(title="Hello2"))
        self.assertEqual(updated.title, "Hello2")
        self.assertEqual(updated.created_at, post.created_at)

        self.assertTrue(self.client.delete_post(post.id))
        self.assertFalse(self.client.delete_post(post.id))
        self.assertEqual(self.client.list_posts(), [])

    def test_not_found(self):
        with self.assertRaises(NotFoundError):
            self.client.get_post("missing")
        with self.assertRaises(NotFoundError):
            self.client.update_post("missing", PostFields(title="x"))

    def test_empty_post_id_is_rejected_before_any_request(self):
        session = MagicMock()
        client = BlogApiClient("http://testserver/api", session=session)
        for post_id in ("", "   "):
            with self.assertRaises(ValueError):
                client.get_post(post_id)
            with self.assertRaises(ValueError):
                client.update_post(post_id, PostFields(title="x"))
            with self.assertRaises(ValueError):
                client.delete_post(post_id)
        session.request.assert_not_called()

    def test_post_ids_are_quoted_into_the_path(self):
        session = MagicMock()
        session.request.return_value = MagicMock(
            status_code=200, json=MagicMock(return_value={"deleted": False})
        )
        client = BlogApiClient("http://testserver/api", session=session)
        client.delete_post("a/b?c#d")
        self.assertEqual(
            session.request.call_args.args,
            ("DELETE", "http://testserver/api/posts/a%2Fb%3Fc%23d"),
        )

    def test_ids_with_reserved_characters_are_not_found(self):
        self.client.create_post(
            PostFields(title="Hello", content="World", category="general")
        )
        for post_id in ("x?y", "a/b", "#"):
            with self.assertRaises(NotFoundError):
                self.client.get_post(post_id)
        self.assertFalse(self.client.delete_post("x?y"))
        self.assertEqual(len(self.client.list_posts()), 1)

    def test_validation_error(self):
        with self.assertRaises(ApiError) as ctx:
            self.client.create_post(PostFields(title="Hello"))
        self.assertEqual(ctx.exception.status_code, 422)

    def test_server_error(self):
        store = MagicMock()
        store.list_posts.side_effect = StoreError("down")
        client = _client_for(store)
        with self.assertRaises(ApiError) as ctx:
            client.list_posts()
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.detail, "Store operation failed")
        self.assertNotIsInstance(ctx.exception, NotFoundError)


if __name__ == "__main__":
    unittest.main()
