"""
fluentmodel - Relations as Typed Model Fields

Declare a model's relations as annotated pydantic fields; the fields are bound
to relation resolvers when the model boots and stay in sync with the model's
loaded relations.
"""

from .core import (
    AbstractRelation,
    BelongsTo,
    BelongsToMany,
    BelongsToManyRelationship,
    BelongsToRelationship,
    Collection,
    FluentModel,
    FluentModelError,
    FluentRelation,
    HasMany,
    HasManyRelationship,
    HasOne,
    HasOneRelationship,
    HasRelationsMixin,
    Model,
    ModelConfig,
    ModelNotFoundError,
    OneRelation,
    Relation,
    RelationBinding,
    RelationNotFoundError,
    Relationship,
    UnknownModelError,
    resolve_model,
)
from .persistence import MemoryRepo, ModelRepository, get_memory_repository

__all__ = [
    # Models
    'Model',
    'ModelConfig',
    'FluentModel',
    'HasRelationsMixin',
    'FluentRelation',
    'RelationBinding',
    'Collection',
    'resolve_model',

    # Relation markers
    'AbstractRelation',
    'Relation',
    'OneRelation',
    'BelongsTo',
    'HasOne',
    'HasMany',
    'BelongsToMany',

    # Relationships
    'Relationship',
    'BelongsToRelationship',
    'HasOneRelationship',
    'HasManyRelationship',
    'BelongsToManyRelationship',

    # Persistence
    'ModelRepository',
    'MemoryRepo',
    'get_memory_repository',

    # Errors
    'FluentModelError',
    'ModelNotFoundError',
    'RelationNotFoundError',
    'UnknownModelError',
]
