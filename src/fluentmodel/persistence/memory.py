"""
fluentmodel Persistence Layer - Memory Backend

In-memory model repository for development and testing.
"""

import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional, Type, TYPE_CHECKING

from .base import ModelRepository

if TYPE_CHECKING:
    from ..core.model import Model

logger = logging.getLogger(__name__)

class MemoryRepo(ModelRepository):
    """
    In-memory model repository (Singleton).

    Models are stored per model type and keyed by their primary key; integer
    keys are assigned from a per-type counter when a model has none.
    Data is lost when the application restarts.
    """

    _instance = None
    _initialized = False

    def __new__(cls):
        """Implement singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize memory repository (only once)."""
        if not self._initialized:
            self._data: Dict[type, Dict[Any, 'Model']] = defaultdict(dict)
            self._increments: Dict[type, int] = defaultdict(int)
            self._pivots: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
            MemoryRepo._initialized = True

    def save(self, model: 'Model') -> 'Model':
        model_cls = type(model)
        key = model.get_key()
        if key is None:
            self._increments[model_cls] += 1
            key = self._increments[model_cls]
            setattr(model, model.get_key_name(), key)
        elif isinstance(key, int):
            self._increments[model_cls] = max(self._increments[model_cls], key)

        self._data[model_cls][key] = model
        logger.debug(f"Saved {model_cls.__name__} with key {key!r}")
        return model

    def find(self, model_cls: Type['Model'], key: Any) -> Optional['Model']:
        return self._data[model_cls].get(key)

    def all(self, model_cls: Type['Model']) -> List['Model']:
        return list(self._data[model_cls].values())

    def delete(self, model: 'Model') -> bool:
        existed = self._data[type(model)].pop(model.get_key(), None) is not None
        if existed:
            logger.debug(f"Deleted {type(model).__name__} with key {model.get_key()!r}")
        return existed

    def insert_pivot(self, table: str, row: Dict[str, Any]) -> None:
        self._pivots[table].append(dict(row))

    def pivot_rows(self, table: str, **conditions: Any) -> List[Dict[str, Any]]:
        return [
            row for row in self._pivots[table]
            if all(row.get(column) == value for column, value in conditions.items())
        ]

    def delete_pivot(self, table: str, **conditions: Any) -> int:
        rows = self._pivots[table]
        kept = [
            row for row in rows
            if not all(row.get(column) == value for column, value in conditions.items())
        ]
        self._pivots[table] = kept
        return len(rows) - len(kept)

    def clear(self) -> None:
        self._data.clear()
        self._increments.clear()
        self._pivots.clear()

# Convenience function to get singleton instance
def get_memory_repository() -> MemoryRepo:
    """Get the singleton memory repository instance."""
    return MemoryRepo()
