"""
Model registry: maps model class names to model classes so relations can
name their related model before it is defined.
"""

import logging
from typing import Dict, Type, Union, TYPE_CHECKING

from .exceptions import UnknownModelError

if TYPE_CHECKING:
    from .model import Model

logger = logging.getLogger(__name__)

_models: Dict[str, Type['Model']] = {}

def register_model(model_cls: Type['Model']) -> None:
    previous = _models.get(model_cls.__name__)
    if previous is not None and previous is not model_cls:
        logger.debug(f"Model name {model_cls.__name__} re-registered by {model_cls.__module__}")
    _models[model_cls.__name__] = model_cls

def resolve_model(ref: Union[str, Type['Model']]) -> Type['Model']:
    """Return the model class for a class or a registered class name."""
    if not isinstance(ref, str):
        return ref
    try:
        return _models[ref]
    except KeyError:
        available = ', '.join(sorted(_models))
        raise UnknownModelError(f"Unknown model '{ref}'. Available: {available}") from None

def registered_models() -> Dict[str, Type['Model']]:
    return dict(_models)
