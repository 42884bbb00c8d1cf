"""
Routers package for FastAPI endpoints.

Organized by domain:
- upload: Identity document upload and extraction
"""

from . import upload

__all__ = ["upload"]
