import pytest

from fluentmodel import get_memory_repository


@pytest.fixture(autouse=True)
def repository():
    """Fresh shared memory repository for every test."""
    repository = get_memory_repository()
    repository.clear()
    yield repository
    repository.clear()
