import pytest

from fluentmodel import (
    BelongsToManyRelationship,
    BelongsToRelationship,
    HasManyRelationship,
    HasOneRelationship,
    RelationNotFoundError,
    UnknownModelError,
)

from blog import Comment, Customer, Invoice, Post, Profile, Tag, User


@pytest.fixture
def author():
    return User.create(name="Ada")


@pytest.fixture
def post(author):
    return Post.create(title="Engines", author_id=author.id)


class TestConstructorDefaults:

    def test_belongs_to(self, post):
        relationship = post.belongs_to(User)

        assert isinstance(relationship, BelongsToRelationship)
        assert relationship.foreign_key == "user_id"
        assert relationship.owner_key == "id"

    def test_belongs_to_with_custom_owner_key(self):
        relationship = Invoice().belongs_to(Customer)

        assert relationship.foreign_key == "customer_number"
        assert relationship.owner_key == "number"

    def test_has_one_and_has_many(self, author):
        has_one = author.has_one(Profile)
        has_many = author.has_many("Post")

        assert isinstance(has_one, HasOneRelationship)
        assert isinstance(has_many, HasManyRelationship)
        assert (has_one.foreign_key, has_one.local_key) == ("user_id", "id")
        assert has_many.related is Post
        assert (has_many.foreign_key, has_many.local_key) == ("user_id", "id")

    def test_belongs_to_many(self, post):
        relationship = post.belongs_to_many(Tag)

        assert isinstance(relationship, BelongsToManyRelationship)
        assert relationship.table == "post_tag"
        assert relationship.foreign_pivot_key == "post_id"
        assert relationship.related_pivot_key == "tag_id"

    def test_unknown_related_model_name(self, post):
        with pytest.raises(UnknownModelError):
            post.has_many("Nowhere")


class TestGetRelationship:

    def test_names_the_relationship(self, post):
        assert post.get_relationship("author").name == "author"

    def test_field_that_is_not_a_relation(self, post):
        with pytest.raises(RelationNotFoundError):
            post.get_relationship("title")

    def test_method_must_return_a_relationship(self, post):
        with pytest.raises(RelationNotFoundError):
            post.get_relationship("get_key")

    def test_not_found_is_an_attribute_error(self, post):
        with pytest.raises(AttributeError):
            post.get_relationship("missing")


class TestBelongsTo:

    def test_associate_sets_foreign_key_and_field(self, post):
        other = User.create(name="Grace")

        post.get_relationship("author").associate(other)

        assert post.author_id == other.id
        assert post.get_relation("author") is other
        assert vars(post)["author"] is other

    def test_dissociate_keeps_non_nullable_field(self, post, author):
        post.load("author")

        post.get_relationship("author").dissociate()

        assert post.author_id is None
        assert post.get_relation("author") is None
        assert vars(post)["author"] is author

    def test_dissociate_clears_nullable_field(self, post, author):
        post.get_relationship("editor").associate(author)

        post.get_relationship("editor").dissociate()

        assert post.editor_id is None
        assert vars(post)["editor"] is None


class TestHasMany:

    def test_save_sets_foreign_key(self, post):
        comment = post.get_relationship("comments").save(Comment(body="Nice"))

        assert comment.post_id == post.id
        assert Comment.find(comment.id) is comment

    def test_create(self, author):
        created = author.get_relationship("posts").create(title="Notes")

        assert created.author_id == author.id
        assert author.posts == [created]

    def test_unsaved_parent_has_no_results(self):
        assert User(name="Draft").has_many("Post", "author_id").get_results() == []


class TestBelongsToMany:

    def test_attach_and_detach(self, post):
        history, math = Tag.create(name="history"), Tag.create(name="math")
        tags = post.get_relationship("tags")
        tags.attach([history, math])

        assert tags.detach(history) == 1
        assert tags.get_results() == [math]
        assert tags.detach() == 1
        assert tags.get_results() == []

    def test_attach_single_key(self, post):
        history = Tag.create(name="history")

        post.get_relationship("tags").attach(history.id)

        assert post.load("tags").tags == [history]
