# src/threadboard/api/__init__.py
"""HTTP surface of the forum: dependencies, endpoints and rendering."""

from .router import api_router

__all__ = ["api_router"]
