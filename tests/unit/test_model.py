import pytest

from fluentmodel import (
    Collection,
    MemoryRepo,
    ModelNotFoundError,
    UnknownModelError,
    get_memory_repository,
    resolve_model,
)
from fluentmodel.core.registry import registered_models
from fluentmodel.core.utils import snake

from blog import Customer, Post, Tag, User


class TestPersistence:

    def test_create_assigns_incrementing_keys(self):
        first, second = Tag.create(name="a"), Tag.create(name="b")

        assert (first.id, second.id) == (1, 2)
        assert Tag.find(2) is second

    def test_keys_are_counted_per_model(self):
        Tag.create(name="a")

        assert User.create(name="Ada").id == 1

    def test_explicit_key_moves_the_counter(self):
        Tag.create(id=10, name="ten")

        assert Tag.create(name="next").id == 11

    def test_custom_key_name(self):
        customer = Customer.create()

        assert customer.number == 1
        assert customer.get_key() == 1
        assert Customer.find(1) is customer

    def test_find_or_fail(self):
        with pytest.raises(ModelNotFoundError):
            Tag.find_or_fail(99)

    def test_queries(self):
        a, b, c = (Post.create(title=title, author_id=author) for title, author in [("a", 1), ("b", 2), ("c", 1)])

        assert Post.all() == [a, b, c]
        assert isinstance(Post.where(author_id=1), Collection)
        assert Post.where(author_id=1) == [a, c]
        assert Post.first_where(author_id=2) is b
        assert Post.first_where(author_id=3) is None
        assert Post.where_in("title", ["b", "c"]) == [b, c]

    def test_delete(self):
        tag = Tag.create(name="gone")

        assert tag.delete() is True
        assert Tag.find(tag.id) is None
        assert tag.delete() is False


class TestMemoryRepo:

    def test_singleton(self, repository):
        assert MemoryRepo() is repository
        assert get_memory_repository() is repository
        assert Tag.get_repository() is repository

    def test_pivot_rows(self, repository):
        repository.insert_pivot("post_tag", {"post_id": 1, "tag_id": 1})
        repository.insert_pivot("post_tag", {"post_id": 1, "tag_id": 2})
        repository.insert_pivot("post_tag", {"post_id": 2, "tag_id": 1})

        assert repository.pivot_rows("post_tag", post_id=1) == [
            {"post_id": 1, "tag_id": 1},
            {"post_id": 1, "tag_id": 2},
        ]
        assert repository.delete_pivot("post_tag", tag_id=1) == 2
        assert repository.pivot_rows("post_tag") == [{"post_id": 1, "tag_id": 2}]

    def test_clear(self, repository):
        Tag.create(name="a")
        repository.insert_pivot("post_tag", {"post_id": 1, "tag_id": 1})

        repository.clear()

        assert Tag.all() == []
        assert repository.pivot_rows("post_tag") == []
        assert Tag.create(name="b").id == 1


class TestRegistry:

    def test_resolve_by_name(self):
        assert resolve_model("Post") is Post
        assert resolve_model(Post) is Post

    def test_registered_models_is_a_copy(self):
        models = registered_models()
        models.pop("Post")

        assert registered_models()["Post"] is Post
        assert models["Tag"] is Tag

    def test_unknown_name(self):
        with pytest.raises(UnknownModelError):
            resolve_model("Missing")


@pytest.mark.parametrize("name,expected", [
    ("author", "author"),
    ("BelongsTo", "belongs_to"),
    ("BelongsToMany", "belongs_to_many"),
    ("coAuthor", "co_author"),
    ("HTTPSource", "http_source"),
    ("already_snake", "already_snake"),
])
def test_snake(name, expected):
    assert snake(name) == expected
