from .mixins import HasRelationsMixin
from .model import Model

class FluentModel(HasRelationsMixin, Model):
    """Base class for models that declare their relations as typed fields."""
    pass
