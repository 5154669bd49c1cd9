"""
CRUD operations for the application.
"""
from piazza.crud import post
from piazza.crud import user

__all__ = ["post", "user"]
