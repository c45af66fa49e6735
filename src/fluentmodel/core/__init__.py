"""
fluentmodel Core Module

Models, relation markers, relationships and the fluent relations mixin.
"""

from .collection import Collection
from .exceptions import FluentModelError, ModelNotFoundError, RelationNotFoundError, UnknownModelError
from .fluent import FluentModel
from .mixins import FluentRelation, HasRelationsMixin, RelationBinding
from .model import Model, ModelConfig
from .registry import resolve_model
from .relations import AbstractRelation, BelongsTo, BelongsToMany, HasMany, HasOne, OneRelation, Relation
from .relationships import (
    BelongsToManyRelationship,
    BelongsToRelationship,
    HasManyRelationship,
    HasOneRelationship,
    Relationship,
)

__all__ = [
    "Collection",
    "FluentModelError",
    "ModelNotFoundError",
    "RelationNotFoundError",
    "UnknownModelError",
    "FluentModel",
    "FluentRelation",
    "HasRelationsMixin",
    "RelationBinding",
    "Model",
    "ModelConfig",
    "resolve_model",
    "AbstractRelation",
    "Relation",
    "OneRelation",
    "BelongsTo",
    "BelongsToMany",
    "HasMany",
    "HasOne",
    "Relationship",
    "BelongsToRelationship",
    "HasOneRelationship",
    "HasManyRelationship",
    "BelongsToManyRelationship",
]
