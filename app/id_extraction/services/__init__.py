"""
Services package for the identity document extraction application.

Contains:
- file_validation: allow-lists and size ceilings for uploads
- storage: transient on-disk storage with guaranteed cleanup
- ai: external model integration and response normalization
"""

from .ai import ExtractionService
from .storage import TransientFileStore

__all__ = ["ExtractionService", "TransientFileStore"]
