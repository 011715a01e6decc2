"""
Client side of the blog: an HTTP API client plus terminal views.
"""
