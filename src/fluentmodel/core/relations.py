"""
Relation markers.

Markers are attached to model fields through ``typing.Annotated`` and tell the
fluent binder which relation constructor to call for the field:

.. code-block:: python

    class Post(FluentModel):
        author_id: Optional[int] = None

        author: Annotated[User, BelongsTo()] = None
        comments: Annotated[Collection[Comment], HasMany(Comment)] = None

The constructor name is derived from the marker class name (``BelongsTo`` ->
``belongs_to``), the marker's arguments are passed through as given. To-one
markers (``OneRelation`` subclasses) additionally receive the field's declared
type as the related model, and a default foreign key built from the field name
when none is supplied.
"""

from typing import Any

from .utils import snake


class AbstractRelation:
    """Base class of every relation marker."""

    def __init__(self, *args: Any, **kwargs: Any):
        self.args = args
        self.kwargs = kwargs

    @classmethod
    def method_name(cls) -> str:
        return snake(cls.__name__)

    @classmethod
    def is_concrete(cls) -> bool:
        """Generic and abstract markers carry no binding instructions."""
        return cls not in (AbstractRelation, OneRelation, Relation)

    def __repr__(self) -> str:
        params = [repr(arg) for arg in self.args]
        params += [f"{key}={value!r}" for key, value in self.kwargs.items()]
        return f"{type(self).__name__}({', '.join(params)})"


class Relation(AbstractRelation):
    """Marks a field as a relation without telling how to build it.

    The field is kept in sync with the relations table, the relation itself
    comes from a method or a manually registered resolver.
    """


class OneRelation(AbstractRelation):
    """Base class of to-one markers; the related model is the field's type."""


class BelongsTo(OneRelation):
    pass


class HasOne(AbstractRelation):
    pass


class HasMany(AbstractRelation):
    pass


class BelongsToMany(AbstractRelation):
    pass
