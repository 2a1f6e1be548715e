# tests/core/test_domain.py
from sample.core.domain.constants import ServiceKeys
from sample.core.domain.entities import IEntity
from sample.core.domain.exceptions import (
    ConstraintViolationError,
    DomainError,
    EntityNotFoundError,
    PersistenceError,
)
from sample.core.domain.todo_item import TodoItem


class TestTodoItem:

    def test_defaults(self):
        item = TodoItem(title="new")

        assert item.id is None
        assert item.is_done is False
        assert item.created_at.tzinfo is not None

    def test_rename_and_mark_touch_updated_at(self):
        item = TodoItem(title="old")
        before = item.updated_at

        item.rename("new")
        item.mark(True)

        assert item.title == "new"
        assert item.is_done is True
        assert item.updated_at >= before

    def test_satisfies_entity_contract(self):
        assert isinstance(TodoItem(title="x", id=1), IEntity)
        assert not isinstance(object(), IEntity)


class TestExceptions:

    def test_hierarchy(self):
        """
        Scenario: Callers catch the broad persistence error.
        Expected: Constraint violations are caught too; everything is a DomainError.
        """
        assert issubclass(ConstraintViolationError, PersistenceError)
        assert issubclass(PersistenceError, DomainError)
        assert issubclass(EntityNotFoundError, DomainError)

    def test_not_found_message(self):
        error = EntityNotFoundError("TodoItem", 5)

        assert error.message == "TodoItem with key '5' was not found."
        assert error.entity_name == "TodoItem"


def test_service_keys_are_distinct_strings():
    assert ServiceKeys.COMMAND_REPOSITORY != ServiceKeys.QUERY_REPOSITORY
    assert ServiceKeys.QUERY_REPOSITORY == "query.default"
