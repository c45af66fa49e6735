"""
fluentmodel Persistence Module

Repository backends that store models and many-to-many pivot rows.
"""

from .base import ModelRepository
from .memory import MemoryRepo, get_memory_repository

__all__ = [
    "ModelRepository",
    "MemoryRepo",
    "get_memory_repository",
]
