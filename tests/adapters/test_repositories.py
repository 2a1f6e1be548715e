# tests/adapters/test_repositories.py
import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from sample.adapters.persistence import ApplicationDbContext
from sample.adapters.persistence.repositories import CommandDefaultRepository, QueryDefaultRepository
from sample.core.domain.exceptions import (
    ConstraintViolationError,
    InvalidConfigurationError,
    PersistenceError,
)
from sample.core.domain.todo_item import TodoItem


@pytest.fixture
def queries(db_context):
    return QueryDefaultRepository(db_context, TodoItem)


@pytest.fixture
def commands(db_context, mock_logger):
    return CommandDefaultRepository(db_context, logger=mock_logger)


@pytest.mark.asyncio
class TestQueryRepository:

    async def test_get_by_id_round_trip(self, queries, commands):
        """
        Scenario: An item is added, then looked up by the id the store assigned.
        Expected: The lookup returns it; an unknown id returns None.
        """
        # Arrange
        item = await commands.add(TodoItem(title="write tests"))

        # Act
        found = await queries.get_by_id(item.id)
        missing = await queries.get_by_id(item.id + 1000)

        # Assert
        assert found is not None
        assert found.title == "write tests"
        assert missing is None
        assert await queries.exists(item.id) is True

    async def test_find_filters_and_orders(self, queries, commands):
        await commands.add_range([
            TodoItem(title="b", is_done=True),
            TodoItem(title="a", is_done=True),
            TodoItem(title="c"),
        ])

        done = await queries.find(TodoItem.is_done.is_(True), order_by=TodoItem.title)

        assert [item.title for item in done] == ["a", "b"]
        assert await queries.count() == 3
        assert await queries.count(TodoItem.is_done.is_(False)) == 1
        assert (await queries.first_or_none(TodoItem.title == "c")).title == "c"
        assert await queries.first_or_none(TodoItem.title == "zzz") is None

    async def test_find_limit_and_offset(self, queries, commands):
        await commands.add_range([TodoItem(title=f"item-{i}") for i in range(5)])

        page = await queries.find(order_by=TodoItem.id, limit=2, offset=2)

        assert [item.title for item in page] == ["item-2", "item-3"]

    async def test_find_with_zero_limit_returns_nothing(self, queries, commands):
        """
        Scenario: A page of size zero is requested.
        Expected: An empty list, not the whole table.
        """
        await commands.add_range([TodoItem(title=f"row-{i}") for i in range(3)])

        assert await queries.find(limit=0) == []
        assert len(await queries.find(offset=0)) == 3

    async def test_list_all_empty_store(self, queries):
        assert await queries.list_all() == []


@pytest.mark.asyncio
class TestCommandRepository:

    async def test_add_logs_once_after_commit(self, commands, mock_logger):
        """
        Scenario: A single add succeeds.
        Expected: Exactly one success event, emitted after the commit.
        """
        item = await commands.add(TodoItem(title="log me"))

        assert item.id is not None
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.args[0] == "command_succeeded"
        assert mock_logger.info.call_args.kwargs["operation"] == "add"
        mock_logger.warning.assert_not_called()

    async def test_add_range_logs_once_for_the_batch(self, commands, mock_logger):
        await commands.add_range([TodoItem(title=f"row-{i}") for i in range(10)])

        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.kwargs["count"] == 10

    async def test_duplicate_title_is_a_constraint_violation(self, queries, commands, mock_logger):
        """
        Scenario: A second item reuses a unique title.
        Expected: ConstraintViolationError, one failure event, and the first item
        is still readable through the same context.
        """
        await commands.add(TodoItem(title="unique"))
        mock_logger.reset_mock()

        with pytest.raises(ConstraintViolationError) as exc_info:
            await commands.add(TodoItem(title="unique"))

        assert exc_info.value.__cause__ is not None
        mock_logger.warning.assert_called_once()
        mock_logger.info.assert_not_called()
        assert await queries.count() == 1

    @pytest.mark.filterwarnings("ignore::sqlalchemy.exc.SAWarning")
    async def test_duplicate_primary_key_leaves_original_untouched(self, queries, commands):
        """
        Scenario: A new entity reuses the key of a stored one.
        Expected: PersistenceError; re-reading the key returns the original row.
        """
        # Arrange
        original = await commands.add(TodoItem(title="orig"))
        existing_id = original.id  # the failed write expires held instances

        # Act
        with pytest.raises(PersistenceError):
            await commands.add(TodoItem(id=existing_id, title="dup"))

        # Assert
        found = await queries.get_by_id(existing_id)
        assert found is not None
        assert found.title == "orig"
        assert await queries.count() == 1

    async def test_add_range_is_all_or_nothing(self, queries, commands):
        with pytest.raises(ConstraintViolationError):
            await commands.add_range([TodoItem(title="dup"), TodoItem(title="dup")])

        assert await queries.count() == 0

    async def test_update_persists_changes(self, queries, commands):
        item = await commands.add(TodoItem(title="draft"))
        item.rename("final")
        item.mark(True)

        updated = await commands.update(item)

        assert updated.title == "final"
        stored = await queries.get_by_id(item.id)
        assert stored.is_done is True

    async def test_update_of_unknown_key_does_not_insert(self, queries, commands, mock_logger):
        """
        Scenario: update() is given an entity whose key was never stored.
        Expected: PersistenceError, one failure event, and the store stays empty.
        """
        with pytest.raises(PersistenceError):
            await commands.update(TodoItem(id=999, title="ghost"))

        mock_logger.warning.assert_called_once()
        mock_logger.info.assert_not_called()
        assert await queries.count() == 0

    async def test_update_without_key_is_rejected(self, queries, commands):
        with pytest.raises(PersistenceError):
            await commands.update(TodoItem(title="no id yet"))

        assert await queries.count() == 0

    async def test_remove_and_remove_by_id(self, queries, commands):
        first = await commands.add(TodoItem(title="first"))
        second = await commands.add(TodoItem(title="second"))

        await commands.remove(first)
        assert await commands.remove_by_id(TodoItem, second.id) is True
        assert await commands.remove_by_id(TodoItem, second.id) is False
        assert await queries.count() == 0

    async def test_unmapped_entity_is_a_persistence_error(self, commands):
        class NotMapped:
            pass

        with pytest.raises(PersistenceError):
            await commands.add(NotMapped())

    async def test_cancellation_propagates_without_logging(self, mock_logger):
        """
        Scenario: The task is cancelled while the commit is awaiting the store.
        Expected: CancelledError propagates unchanged; nothing is logged.
        """
        context = MagicMock(spec=ApplicationDbContext)
        context.commit = AsyncMock(side_effect=asyncio.CancelledError())
        repository = CommandDefaultRepository(context, logger=mock_logger)

        with pytest.raises(asyncio.CancelledError):
            await repository.add(TodoItem(title="never"))

        mock_logger.info.assert_not_called()
        mock_logger.warning.assert_not_called()

    async def test_store_failure_propagates(self, mock_logger):
        context = MagicMock(spec=ApplicationDbContext)
        context.commit = AsyncMock(side_effect=PersistenceError("connection lost"))
        repository = CommandDefaultRepository(context, logger=mock_logger)

        with pytest.raises(PersistenceError, match="connection lost"):
            await repository.add(TodoItem(title="lost"))

        mock_logger.warning.assert_called_once()


class TestRepositoryConstruction:

    def test_query_repository_requires_context_and_entity_type(self):
        with pytest.raises(InvalidConfigurationError):
            QueryDefaultRepository(None, TodoItem)
        with pytest.raises(InvalidConfigurationError):
            QueryDefaultRepository(MagicMock(spec=ApplicationDbContext), None)

    def test_command_repository_requires_context(self):
        with pytest.raises(InvalidConfigurationError):
            CommandDefaultRepository(None)
