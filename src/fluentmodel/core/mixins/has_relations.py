"""
HasRelationsMixin: relations declared as typed model fields.

Mixed into a ``Model`` subclass, the mixin finds the fields that describe
relations, registers a relation resolver for each of them when the model boots
and keeps those fields in sync with the model's relations table:

.. code-block:: python

    class Post(FluentModel):
        author_id: Optional[int] = None

        author: Annotated[User, BelongsTo()] = None
        tags: Annotated[Collection, BelongsToMany(Tag)] = None

    post = Post.find(1)
    post.author            # loaded through post.belongs_to(User, "author_id")
    post.unset_relation("author")
    "author" in vars(post)  # False, next access loads it again

Fields that do not qualify (no relation marker, a method of the same name,
an untyped field) are skipped without raising so the model's own relation
handling keeps working.
"""

import inspect
import logging
import threading
import types
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Annotated,
    Any,
    Dict,
    ForwardRef,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
    get_args,
    get_origin,
)

from ..collection import Collection
from ..model import Model
from ..relations import AbstractRelation, OneRelation
from ..utils import snake

logger = logging.getLogger(__name__)

# model class -> fluent relations declared on that class
_fluent_relations: Dict[type, Mapping[str, "FluentRelation"]] = {}
_discovery_lock = threading.Lock()

_UNION_TYPES = (Union, types.UnionType)


@dataclass(frozen=True)
class FluentRelation:
    """A public field discovered as a relation candidate."""
    name: str
    annotation: Any
    nullable: bool
    markers: Tuple[AbstractRelation, ...] = ()

    @property
    def is_collection(self) -> bool:
        return self.annotation is Collection or get_origin(self.annotation) is Collection

    def binding_marker(self) -> Optional[AbstractRelation]:
        """First marker that says how to build the relation."""
        return next((marker for marker in self.markers if type(marker).is_concrete()), None)


class RelationBinding:
    """Relation resolver for a fluent field: ``model.<method_name>(*args, **kwargs)``."""

    def __init__(self, method_name: str, args: Tuple[Any, ...], kwargs: Dict[str, Any]):
        self.method_name = method_name
        self.args = args
        self.kwargs = kwargs

    def __call__(self, model: Model):
        return getattr(model, self.method_name)(*self.args, **self.kwargs)

    def __repr__(self) -> str:
        return f"<RelationBinding {self.method_name}{self.args!r} {self.kwargs!r}>"


def _unwrap_annotation(annotation: Any) -> Tuple[Any, bool, List[Any]]:
    """Strip ``Optional`` and ``Annotated`` layers off a field annotation.

    Returns the bare type, whether ``None`` is allowed and the collected
    ``Annotated`` metadata.
    """
    nullable = False
    metadata: List[Any] = []
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation, *extras = get_args(annotation)
            metadata.extend(extras)
        elif origin in _UNION_TYPES:
            args = get_args(annotation)
            members = [arg for arg in args if arg is not type(None)]
            nullable = nullable or len(members) < len(args)
            if len(members) != 1:
                break
            annotation = members[0]
        else:
            break
    return annotation, nullable, metadata


def _relation_markers(metadata: Iterable[Any]) -> Iterable[AbstractRelation]:
    for item in metadata:
        if isinstance(item, AbstractRelation):
            yield item
        elif inspect.isclass(item) and issubclass(item, AbstractRelation):
            # Annotated[User, BelongsTo] without parentheses
            yield item()


def _is_model_type(annotation: Any) -> bool:
    return inspect.isclass(annotation) and get_origin(annotation) is None and issubclass(annotation, Model)


def _defines_method(model_cls: type, name: str) -> bool:
    attribute = inspect.getattr_static(model_cls, name, None)
    return inspect.isfunction(attribute) or isinstance(attribute, (classmethod, staticmethod))


def _related_reference(annotation: Any) -> Any:
    if isinstance(annotation, ForwardRef):
        return annotation.__forward_arg__
    return annotation


def _discover(model_cls: type) -> Dict[str, FluentRelation]:
    # fields annotated on this class, redeclared inherited fields included
    own = inspect.get_annotations(model_cls)

    relations = {}
    for name, field in model_cls.model_fields.items():
        if name not in own or name.startswith("_"):
            continue

        annotation, nullable, metadata = _unwrap_annotation(field.annotation)
        if annotation is None or annotation is Any:
            continue

        markers = tuple(_relation_markers([*field.metadata, *metadata]))
        if not (markers or _is_model_type(annotation)):
            continue

        relations[name] = FluentRelation(name, annotation, nullable, markers)
        logger.debug(f"Discovered fluent relation {model_cls.__name__}.{name}")
    return relations


def _one_relation_arguments(model_cls, relation: FluentRelation, args: list, kwargs: dict) -> list:
    if not args and "foreign_key" not in kwargs:
        args.append(f"{snake(relation.name)}_{model_cls.get_key_name()}")
    return [_related_reference(relation.annotation), *args]


def _given_arguments(model_cls, relation: FluentRelation, args: list, kwargs: dict) -> list:
    return args


# checked in order, the first matching marker kind wins
_ARGUMENT_STRATEGIES = (
    (OneRelation, _one_relation_arguments),
    (AbstractRelation, _given_arguments),
)


class HasRelationsMixin:
    """
    Fluent relations mixin.

    Discovers relation fields, binds them to relation resolvers on boot and
    overrides the relations table operations of ``Model`` so the fields mirror
    the table.
    """

    @classmethod
    def get_fluent_relations(cls) -> Mapping[str, FluentRelation]:
        """Relations declared as fields directly on this class, cached per class."""
        relations = _fluent_relations.get(cls)
        if relations is None:
            with _discovery_lock:
                relations = _fluent_relations.get(cls)
                if relations is None:
                    if not getattr(cls, "__pydantic_complete__", True):
                        cls.model_rebuild(raise_errors=False)
                    relations = _fluent_relations[cls] = MappingProxyType(_discover(cls))
        return relations

    @classmethod
    def get_fluent_relation(cls, name: str) -> Optional[FluentRelation]:
        for klass in cls._fluent_classes():
            relation = klass.get_fluent_relations().get(name)
            if relation is not None:
                return relation
        return None

    @classmethod
    def _fluent_classes(cls) -> List[type]:
        return [
            klass for klass in cls.__mro__
            if issubclass(klass, HasRelationsMixin) and issubclass(klass, Model)
        ]

    @classmethod
    def boot(cls) -> None:
        super().boot()
        cls.boot_has_relations()

    @classmethod
    def boot_has_relations(cls) -> None:
        """Register a relation resolver for every fluent field that says how."""
        for relation in cls.get_fluent_relations().values():
            if _defines_method(cls, relation.name):
                logger.debug(f"{cls.__name__}.{relation.name} is a method, not binding")
                continue

            marker = relation.binding_marker()
            if marker is None:
                logger.debug(f"{cls.__name__}.{relation.name} has no relation marker, not binding")
                continue

            binding = cls._bind_fluent_relation(relation, marker)
            cls.resolve_relation_using(relation.name, binding)
            logger.debug(f"Bound {cls.__name__}.{relation.name} to {binding!r}")

    @classmethod
    def _bind_fluent_relation(cls, relation: FluentRelation, marker: AbstractRelation) -> RelationBinding:
        kwargs = dict(marker.kwargs)
        strategy = next(fn for kind, fn in _ARGUMENT_STRATEGIES if isinstance(marker, kind))
        args = strategy(cls, relation, list(marker.args), kwargs)
        return RelationBinding(marker.method_name(), tuple(args), kwargs)

    def model_post_init(self, context: Any) -> None:
        super().model_post_init(context)
        # relation fields not given to the constructor start unset,
        # so the first read goes through the relation
        for klass in type(self)._fluent_classes():
            for name in klass.get_fluent_relations():
                if name not in self.model_fields_set:
                    self._forget_fluent_field(name)

    def __repr_args__(self):
        for name, value in super().__repr_args__():
            if self.get_fluent_relation(name) is None:
                yield name, value

    def _fill_fluent_field(self, name: str, value: Any) -> None:
        self.__dict__[name] = value
        self.__pydantic_fields_set__.add(name)

    def _forget_fluent_field(self, name: str) -> None:
        self.__dict__.pop(name, None)
        self.__pydantic_fields_set__.discard(name)

    def set_relation(self, name: str, value: Any):
        super().set_relation(name, value)

        relation = self.get_fluent_relation(name)
        if relation is None:
            return self

        if value is None and not relation.nullable:
            return self

        if value is not None and relation.is_collection:
            value = self.new_collection(value)
        self._fill_fluent_field(name, value)
        return self

    def unset_relation(self, name: str):
        super().unset_relation(name)

        if self.get_fluent_relation(name) is not None:
            self._forget_fluent_field(name)
        return self

    def set_relations(self, relations: Dict[str, Any]):
        # unset any relation that is no longer present after this call
        for name in [name for name in self.get_relations() if name not in relations]:
            self.unset_relation(name)

        for name, value in relations.items():
            self.set_relation(name, value)
        return self

    def unset_relations(self):
        for name in list(self.get_relations()):
            if self.get_fluent_relation(name) is not None:
                self._forget_fluent_field(name)

        return super().unset_relations()
