class FluentModelError(Exception):
    """Base exception for model and relation operations"""
    pass

class ModelNotFoundError(FluentModelError):
    """Raised when a model is not found by its key"""
    pass

class UnknownModelError(FluentModelError, LookupError):
    """Raised when a model name is not registered"""
    pass

class RelationNotFoundError(FluentModelError, AttributeError):
    """Raised when a name does not resolve to a relationship"""
    pass
