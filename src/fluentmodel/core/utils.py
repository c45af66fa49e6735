import re

_FIRST_CAP = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP = re.compile(r"([a-z0-9])([A-Z])")


def snake(name: str) -> str:
    """Convert ``BelongsToMany`` / ``coAuthor`` style names to ``belongs_to_many`` / ``co_author``."""
    name = _FIRST_CAP.sub(r"\1_\2", name.replace("-", "_").replace(" ", "_"))
    name = _ALL_CAP.sub(r"\1_\2", name)
    return re.sub(r"_+", "_", name).lower()
