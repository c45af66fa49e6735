"""
Core mixins for model functionality.

These mixins extend ``Model`` through its boot hook and relation table
operations without changing its base class.
"""

from .has_relations import FluentRelation, HasRelationsMixin, RelationBinding

__all__ = ["FluentRelation", "HasRelationsMixin", "RelationBinding"]
