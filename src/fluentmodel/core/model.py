import logging
import threading
from typing import Any, Callable, Dict, Iterable, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, PrivateAttr

from ..persistence import ModelRepository, get_memory_repository
from .collection import Collection
from .exceptions import ModelNotFoundError, RelationNotFoundError
from .registry import register_model, resolve_model
from .relationships import (
    BelongsToManyRelationship,
    BelongsToRelationship,
    HasManyRelationship,
    HasOneRelationship,
    Relationship,
)
from .utils import snake

logger = logging.getLogger(__name__)

M = TypeVar("M", bound="Model")
RelationResolver = Callable[["Model"], Relationship]

# model class -> relation name -> resolver
_relation_resolvers: Dict[type, Dict[str, RelationResolver]] = {}
_booted: set = set()
# classes whose boot() is running, guarded by _boot_lock
_booting: set = set()
_boot_lock = threading.RLock()

class ModelConfig(ConfigDict):
    """Configuration for all model classes."""
    key_name: str
    repository: ModelRepository

class Model(BaseModel):
    """Base class for all models.

    Every instance owns a relations table mapping relation names to loaded
    values. Relations are resolved by name, first through resolvers registered
    with ``resolve_relation_using`` and then through methods of that name
    returning a ``Relationship``. Reading an attribute named after a registered
    relation loads it on first access.
    """
    model_config = ModelConfig(arbitrary_types_allowed=True, key_name="id")

    id: Optional[int] = None

    _relations: Dict[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        register_model(cls)

    def model_post_init(self, context: Any) -> None:
        type(self)._boot_if_not_booted()

    def __copy__(self: M) -> M:
        copied = super().__copy__()
        # the private dict is copied shallowly, give the copy its own table
        copied._relations = dict(self._relations)
        return copied

    # Booting

    @classmethod
    def _boot_if_not_booted(cls) -> None:
        """Boot every model class in the hierarchy exactly once."""
        if cls in _booted:
            return
        with _boot_lock:
            for klass in reversed(cls.__mro__):
                if not (isinstance(klass, type) and issubclass(klass, Model)):
                    continue
                if klass in _booted or klass in _booting:
                    continue
                _booting.add(klass)
                logger.debug(f"Booting model {klass.__name__}")
                try:
                    klass.boot()
                finally:
                    _booting.discard(klass)
                # only fully booted classes are visible to the unlocked check above
                _booted.add(klass)

    @classmethod
    def boot(cls) -> None:
        """Class initialization hook; mixins extend it and call super()."""
        pass

    # Configuration

    @classmethod
    def get_key_name(cls) -> str:
        return cls.model_config.get("key_name", "id")

    @classmethod
    def get_repository(cls) -> ModelRepository:
        return cls.model_config.get("repository") or get_memory_repository()

    def get_key(self) -> Any:
        return self.__dict__.get(self.get_key_name())

    # Relation resolvers

    @classmethod
    def resolve_relation_using(cls, name: str, resolver: RelationResolver) -> None:
        """Register a callable building the relationship ``name`` for an instance."""
        _relation_resolvers.setdefault(cls, {})[name] = resolver

    @classmethod
    def relation_resolver(cls, name: str) -> Optional[RelationResolver]:
        cls._boot_if_not_booted()
        for klass in cls.__mro__:
            resolver = _relation_resolvers.get(klass, {}).get(name)
            if resolver is not None:
                return resolver
        return None

    def get_relationship(self, name: str) -> Relationship:
        resolver = type(self).relation_resolver(name)
        if resolver is not None:
            relationship = resolver(self)
        else:
            method = getattr(type(self), name, None)
            if not callable(method):
                raise RelationNotFoundError(f"{type(self).__name__} has no relation '{name}'")
            relationship = method(self)

        if not isinstance(relationship, Relationship):
            raise RelationNotFoundError(
                f"{type(self).__name__}.{name} must return a Relationship, got {type(relationship).__name__}"
            )
        relationship.name = name
        return relationship

    def is_relation(self, name: str) -> bool:
        return type(self).relation_resolver(name) is not None

    def __getattr__(self, name: str) -> Any:
        if not name.startswith("_") and (self.relation_loaded(name) or self.is_relation(name)):
            return self.get_relation_value(name)
        return super().__getattr__(name)

    # Relations table

    def get_relations(self) -> Dict[str, Any]:
        return self._relations

    def get_relation(self, name: str) -> Any:
        return self._relations[name]

    def relation_loaded(self, name: str) -> bool:
        return name in self._relations

    def set_relation(self: M, name: str, value: Any) -> M:
        self._relations[name] = value
        return self

    def unset_relation(self: M, name: str) -> M:
        self._relations.pop(name, None)
        return self

    def set_relations(self: M, relations: Dict[str, Any]) -> M:
        self._relations = dict(relations)
        return self

    def unset_relations(self: M) -> M:
        self._relations = {}
        return self

    def without_relations(self: M) -> M:
        """Return a copy of the model with no loaded relations."""
        return self.model_copy().unset_relations()

    def get_relation_value(self, name: str) -> Any:
        if self.relation_loaded(name):
            return self._relations[name]
        results = self.get_relationship(name).get_results()
        self.set_relation(name, results)
        return results

    def load(self: M, *names: str) -> M:
        """Load (or reload) the named relations."""
        for name in names:
            self.set_relation(name, self.get_relationship(name).get_results())
        return self

    def new_collection(self, items: Optional[Iterable[Any]] = None) -> Collection:
        return Collection.make(items)

    # Relation constructors

    def belongs_to(
        self,
        related: Union[str, Type["Model"]],
        foreign_key: Optional[str] = None,
        owner_key: Optional[str] = None,
    ) -> BelongsToRelationship:
        related = resolve_model(related)
        owner_key = owner_key or related.get_key_name()
        foreign_key = foreign_key or f"{snake(related.__name__)}_{owner_key}"
        return BelongsToRelationship(self, related, foreign_key, owner_key)

    def has_one(
        self,
        related: Union[str, Type["Model"]],
        foreign_key: Optional[str] = None,
        local_key: Optional[str] = None,
    ) -> HasOneRelationship:
        return HasOneRelationship(self, related, *self._has_keys(foreign_key, local_key))

    def has_many(
        self,
        related: Union[str, Type["Model"]],
        foreign_key: Optional[str] = None,
        local_key: Optional[str] = None,
    ) -> HasManyRelationship:
        return HasManyRelationship(self, related, *self._has_keys(foreign_key, local_key))

    def _has_keys(self, foreign_key: Optional[str], local_key: Optional[str]) -> tuple:
        local_key = local_key or self.get_key_name()
        foreign_key = foreign_key or f"{snake(type(self).__name__)}_{self.get_key_name()}"
        return foreign_key, local_key

    def belongs_to_many(
        self,
        related: Union[str, Type["Model"]],
        table: Optional[str] = None,
        foreign_pivot_key: Optional[str] = None,
        related_pivot_key: Optional[str] = None,
        parent_key: Optional[str] = None,
        related_key: Optional[str] = None,
    ) -> BelongsToManyRelationship:
        related = resolve_model(related)
        parent_name = snake(type(self).__name__)
        related_name = snake(related.__name__)
        return BelongsToManyRelationship(
            self,
            related,
            table=table or "_".join(sorted([parent_name, related_name])),
            foreign_pivot_key=foreign_pivot_key or f"{parent_name}_{self.get_key_name()}",
            related_pivot_key=related_pivot_key or f"{related_name}_{related.get_key_name()}",
            parent_key=parent_key or self.get_key_name(),
            related_key=related_key or related.get_key_name(),
        )

    # Persistence

    def save(self: M) -> M:
        return self.get_repository().save(self)

    def delete(self) -> bool:
        return self.get_repository().delete(self)

    @classmethod
    def create(cls: Type[M], **attributes: Any) -> M:
        return cls(**attributes).save()

    @classmethod
    def find(cls: Type[M], key: Any) -> Optional[M]:
        return cls.get_repository().find(cls, key)

    @classmethod
    def find_or_fail(cls: Type[M], key: Any) -> M:
        model = cls.find(key)
        if model is None:
            raise ModelNotFoundError(f"No {cls.__name__} with {cls.get_key_name()}={key!r}")
        return model

    @classmethod
    def all(cls) -> Collection:
        return Collection(cls.get_repository().all(cls))

    @classmethod
    def where(cls, **conditions: Any) -> Collection:
        return Collection(
            model for model in cls.get_repository().all(cls)
            if all(model.__dict__.get(column) == value for column, value in conditions.items())
        )

    @classmethod
    def first_where(cls: Type[M], **conditions: Any) -> Optional[M]:
        return cls.where(**conditions).first()

    @classmethod
    def where_in(cls, column: str, values: Iterable[Any]) -> Collection:
        values = list(values)
        return Collection(
            model for model in cls.get_repository().all(cls)
            if model.__dict__.get(column) in values
        )
