"""
Collection wrapper used for to-many relation values.
"""

from typing import Any, Callable, Iterable, Optional, get_args

from pydantic_core import core_schema


class Collection(list):
    """List of related models with a few query-style helpers."""

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type: Any, handler) -> core_schema.CoreSchema:
        # Collection[T] validates its items as T, bare Collection accepts anything
        args = get_args(source_type)
        items_schema = handler.generate_schema(list[args[0]] if args else list)
        return core_schema.no_info_after_validator_function(cls, items_schema)

    def first(self, default: Any = None) -> Any:
        return self[0] if self else default

    def last(self, default: Any = None) -> Any:
        return self[-1] if self else default

    def is_empty(self) -> bool:
        return not self

    def pluck(self, attribute: str) -> "Collection":
        """Collect one attribute from every item."""
        return Collection(getattr(item, attribute, None) for item in self)

    def model_keys(self) -> "Collection":
        return Collection(item.get_key() for item in self)

    def map(self, fn: Callable[[Any], Any]) -> "Collection":
        return Collection(fn(item) for item in self)

    def filter(self, fn: Optional[Callable[[Any], bool]] = None) -> "Collection":
        if fn is None:
            return Collection(item for item in self if item)
        return Collection(item for item in self if fn(item))

    @classmethod
    def make(cls, items: Optional[Iterable[Any]] = None) -> "Collection":
        if isinstance(items, cls):
            return items
        return cls(items or [])
