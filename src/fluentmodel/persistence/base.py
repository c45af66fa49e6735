"""
fluentmodel Persistence Layer - Base Classes

This module provides the abstract interface for model repositories.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.model import Model

class ModelRepository(ABC):
    """
    Abstract base class for model repositories.

    Implementations store model instances per model type and keep the pivot
    rows used by many-to-many relationships.
    """

    @abstractmethod
    def save(self, model: 'Model') -> 'Model':
        """
        Save model instance, assigning a key when it has none.

        Args:
            model: Model instance to persist

        Returns:
            The saved model
        """
        pass

    @abstractmethod
    def find(self, model_cls: Type['Model'], key: Any) -> Optional['Model']:
        """
        Load model instance by key.

        Args:
            model_cls: Model type to look up
            key: Primary key value

        Returns:
            Model instance if found, None otherwise
        """
        pass

    @abstractmethod
    def all(self, model_cls: Type['Model']) -> List['Model']:
        """Return every stored instance of the model type."""
        pass

    @abstractmethod
    def delete(self, model: 'Model') -> bool:
        """
        Delete model instance.

        Returns:
            True if the model was stored, False otherwise
        """
        pass

    @abstractmethod
    def insert_pivot(self, table: str, row: Dict[str, Any]) -> None:
        """Insert a pivot row into the named pivot table."""
        pass

    @abstractmethod
    def pivot_rows(self, table: str, **conditions: Any) -> List[Dict[str, Any]]:
        """Return pivot rows whose columns equal the given conditions."""
        pass

    @abstractmethod
    def delete_pivot(self, table: str, **conditions: Any) -> int:
        """
        Delete pivot rows matching the given conditions.

        Returns:
            Number of deleted rows
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop all stored models and pivot rows."""
        pass
