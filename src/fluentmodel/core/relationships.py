"""
Relationship objects returned by the model relation constructors
(``belongs_to``, ``has_one``, ``has_many``, ``belongs_to_many``).

A relationship knows how to fetch its results from the repository of the
related model. Resolving and caching the results is the model's job, see
``Model.get_relation_value``.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional, Type, Union, TYPE_CHECKING

from .collection import Collection
from .registry import resolve_model

if TYPE_CHECKING:
    from .model import Model


class Relationship(ABC):
    """Base class for relationships between a parent model and a related type."""

    def __init__(self, parent: 'Model', related: Union[str, Type['Model']]):
        self.parent = parent
        self.related = resolve_model(related)
        # set by Model.get_relationship when resolved by name
        self.name: Optional[str] = None

    @abstractmethod
    def get_results(self) -> Any:
        """Fetch the related model(s) for the parent."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {type(self.parent).__name__} -> {self.related.__name__}>"


class BelongsToRelationship(Relationship):
    """The parent holds a foreign key pointing at the related model."""

    def __init__(self, parent, related, foreign_key: str, owner_key: str):
        super().__init__(parent, related)
        self.foreign_key = foreign_key
        self.owner_key = owner_key

    def get_results(self) -> Optional['Model']:
        value = getattr(self.parent, self.foreign_key, None)
        if value is None:
            return None
        return self.related.first_where(**{self.owner_key: value})

    def associate(self, model: Optional['Model']) -> 'Model':
        """Point the parent's foreign key at ``model`` and record it as loaded."""
        value = getattr(model, self.owner_key) if model is not None else None
        setattr(self.parent, self.foreign_key, value)
        if self.name is not None:
            self.parent.set_relation(self.name, model)
        return self.parent

    def dissociate(self) -> 'Model':
        return self.associate(None)


class HasOneOrManyRelationship(Relationship):
    """The related model holds a foreign key pointing at the parent."""

    def __init__(self, parent, related, foreign_key: str, local_key: str):
        super().__init__(parent, related)
        self.foreign_key = foreign_key
        self.local_key = local_key

    def get_parent_key(self) -> Any:
        return getattr(self.parent, self.local_key, None)

    def save(self, model: 'Model') -> 'Model':
        setattr(model, self.foreign_key, self.get_parent_key())
        return model.save()

    def create(self, **attributes: Any) -> 'Model':
        return self.save(self.related(**attributes))


class HasOneRelationship(HasOneOrManyRelationship):

    def get_results(self) -> Optional['Model']:
        key = self.get_parent_key()
        if key is None:
            return None
        return self.related.first_where(**{self.foreign_key: key})


class HasManyRelationship(HasOneOrManyRelationship):

    def get_results(self) -> Collection:
        key = self.get_parent_key()
        if key is None:
            return Collection()
        return self.related.where(**{self.foreign_key: key})


class BelongsToManyRelationship(Relationship):
    """Parent and related models joined through rows of a pivot table."""

    def __init__(
        self,
        parent,
        related,
        table: str,
        foreign_pivot_key: str,
        related_pivot_key: str,
        parent_key: str,
        related_key: str,
    ):
        super().__init__(parent, related)
        self.table = table
        self.foreign_pivot_key = foreign_pivot_key
        self.related_pivot_key = related_pivot_key
        self.parent_key = parent_key
        self.related_key = related_key

    def _repository(self):
        return self.related.get_repository()

    def get_results(self) -> Collection:
        parent_value = getattr(self.parent, self.parent_key, None)
        if parent_value is None:
            return Collection()
        rows = self._repository().pivot_rows(self.table, **{self.foreign_pivot_key: parent_value})
        related_values = [row[self.related_pivot_key] for row in rows]
        return self.related.where_in(self.related_key, related_values)

    def _related_values(self, models: Iterable[Any]) -> list:
        if not isinstance(models, (list, tuple, set)):
            models = [models]
        return [
            getattr(model, self.related_key) if hasattr(model, 'get_key') else model
            for model in models
        ]

    def attach(self, models: Any) -> None:
        """Attach related models (instances or keys) to the parent."""
        parent_value = getattr(self.parent, self.parent_key)
        for value in self._related_values(models):
            self._repository().insert_pivot(self.table, {
                self.foreign_pivot_key: parent_value,
                self.related_pivot_key: value,
            })

    def detach(self, models: Any = None) -> int:
        """Detach the given related models, or all of them when none are given."""
        parent_value = getattr(self.parent, self.parent_key)
        if models is None:
            return self._repository().delete_pivot(self.table, **{self.foreign_pivot_key: parent_value})
        return sum(
            self._repository().delete_pivot(self.table, **{
                self.foreign_pivot_key: parent_value,
                self.related_pivot_key: value,
            })
            for value in self._related_values(models)
        )
