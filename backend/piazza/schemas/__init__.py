"""
Pydantic schemas for the application.
"""
from piazza.schemas import auth
from piazza.schemas import post

__all__ = ["auth", "post"]
