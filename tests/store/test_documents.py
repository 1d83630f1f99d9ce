"""Unit tests for the document store."""

import asyncio

import pytest

from bookstore.store import DocumentStore, StoreError


@pytest.mark.asyncio
class TestDocumentStore:
    """Test suite for single document operations."""

    async def test_insert_and_find_one(self, store: DocumentStore) -> None:
        doc_id = await store.insert_one("books", {"title": "Emma", "price": 3})

        book = await store.find_one("books", doc_id)

        assert book == {"_id": doc_id, "title": "Emma", "price": 3}
        assert await store.find_one("books", "missing") is None

    async def test_find_one_excludes_fields(self, store: DocumentStore) -> None:
        doc_id = await store.insert_one("users", {"username": "a", "password": "x"})

        user = await store.find_one("users", doc_id, exclude=("password",))

        assert user == {"_id": doc_id, "username": "a"}

    async def test_find_filters_sorts_and_limits(self, store: DocumentStore) -> None:
        await store.insert_one("books", {"title": "A", "language": "en", "n": 2})
        await store.insert_one("books", {"title": "B", "language": "fr", "n": 1})
        await store.insert_one("books", {"title": "C", "language": "en", "n": 3})

        english = await store.find("books", {"language": "en"})
        assert [book["title"] for book in english] == ["A", "C"]

        by_n = await store.find("books", sort="n", descending=True, limit=2)
        assert [book["title"] for book in by_n] == ["C", "A"]

        assert await store.count("books") == 3
        assert await store.count("books", {"language": "fr"}) == 1

    async def test_find_many_skips_missing(self, store: DocumentStore) -> None:
        first = await store.insert_one("books", {"title": "A"})
        second = await store.insert_one("books", {"title": "B"})

        found = await store.find_many("books", [second, "missing", first, first])

        assert set(found) == {first, second}
        assert found[second]["title"] == "B"
        assert await store.find_many("books", []) == {}

    async def test_set_fields_reports_counts(self, store: DocumentStore) -> None:
        doc_id = await store.insert_one("users", {"address": "Old Street"})

        changed = await store.set_fields("users", doc_id, {"address": "New Street"})
        unchanged = await store.set_fields("users", doc_id, {"address": "New Street"})
        missing = await store.set_fields("users", "missing", {"address": "x"})

        assert (changed.matched_count, changed.modified_count) == (1, 1)
        assert (unchanged.matched_count, unchanged.modified_count) == (1, 0)
        assert (missing.matched_count, missing.modified_count) == (0, 0)

    async def test_push_and_pull(self, store: DocumentStore) -> None:
        doc_id = await store.insert_one("users", {"cart": []})

        await store.push("users", doc_id, "cart", "b1")
        await store.push("users", doc_id, "cart", "b2")
        pulled = await store.pull("users", doc_id, "cart", "b1")
        not_there = await store.pull("users", doc_id, "cart", "b1")

        user = await store.find_one("users", doc_id)
        assert user is not None
        assert user["cart"] == ["b2"]
        assert pulled.modified_count == 1
        assert not_there.modified_count == 0

    async def test_unique_push_skips_present_value(self, store: DocumentStore) -> None:
        doc_id = await store.insert_one("users", {"cart": ["b1"]})

        repeated = await store.push("users", doc_id, "cart", "b1", unique=True)
        added = await store.push("users", doc_id, "cart", "b2", unique=True)
        missing = await store.push("users", "missing", "cart", "b1", unique=True)

        user = await store.find_one("users", doc_id)
        assert user is not None
        assert user["cart"] == ["b1", "b2"]
        assert (repeated.matched_count, repeated.modified_count) == (1, 0)
        assert added.modified_count == 1
        assert missing.matched_count == 0

    async def test_delete_one(self, store: DocumentStore) -> None:
        doc_id = await store.insert_one("orders", {"status": "Placed"})

        assert await store.delete_one("orders", doc_id) == 1
        assert await store.delete_one("orders", doc_id) == 0

    async def test_rejects_unknown_collection_and_bad_fields(
        self,
        store: DocumentStore,
    ) -> None:
        with pytest.raises(StoreError, match="Unknown collection"):
            await store.find_one("carts", "x")

        doc_id = await store.insert_one("users", {})
        with pytest.raises(StoreError, match="Invalid field name"):
            await store.push("users", doc_id, "cart') --", "b1")


@pytest.mark.asyncio
class TestTransactions:
    """Test suite for units of work."""

    async def test_commit_on_success(self, store: DocumentStore) -> None:
        async with store.transaction():
            doc_id = await store.insert_one("orders", {"status": "Placed"})
            await store.set_fields("orders", doc_id, {"status": "Delivered"})

        order = await store.find_one("orders", doc_id)
        assert order is not None
        assert order["status"] == "Delivered"

    async def test_rollback_on_error(self, store: DocumentStore) -> None:
        user_id = await store.insert_one("users", {"orders": []})

        with pytest.raises(RuntimeError, match="boom"):
            async with store.transaction():
                order_id = await store.insert_one("orders", {"user": user_id})
                await store.push("users", user_id, "orders", order_id)
                raise RuntimeError("boom")

        user = await store.find_one("users", user_id)
        assert user is not None
        assert user["orders"] == []
        assert await store.count("orders") == 0

    async def test_nested_transaction_joins_outer(self, store: DocumentStore) -> None:
        with pytest.raises(RuntimeError):
            async with store.transaction():
                async with store.transaction():
                    await store.insert_one("books", {"title": "Inner"})
                raise RuntimeError("outer fails")

        assert await store.count("books") == 0

    async def test_other_tasks_wait_for_open_transaction(
        self,
        store: DocumentStore,
    ) -> None:
        user_id = await store.insert_one("users", {"orders": [], "cart": ["b1"]})
        writes_done = asyncio.Event()
        release = asyncio.Event()

        async def failing_batch() -> None:
            async with store.transaction():
                order_id = await store.insert_one("orders", {"user": user_id})
                await store.push("users", user_id, "orders", order_id)
                await store.pull("users", user_id, "cart", "b1")
                writes_done.set()
                await release.wait()
                raise RuntimeError("batch failed")

        batch = asyncio.create_task(failing_batch())
        await writes_done.wait()

        user_read = asyncio.create_task(store.find_one("users", user_id))
        order_count = asyncio.create_task(store.count("orders"))
        await asyncio.sleep(0.01)
        assert not user_read.done()
        assert not order_count.done()

        release.set()
        with pytest.raises(RuntimeError, match="batch failed"):
            await batch

        user = await user_read
        assert user is not None
        assert user["orders"] == []
        assert user["cart"] == ["b1"]
        assert await order_count == 0
