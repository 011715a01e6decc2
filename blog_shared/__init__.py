"""
Types shared by the blog API server and its clients.
"""
