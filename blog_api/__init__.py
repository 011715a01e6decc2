"""
Blog API package.

This package provides a FastAPI application exposing CRUD routes for blog
posts, backed by an in-memory, SQLAlchemy or MongoDB post store.
"""
