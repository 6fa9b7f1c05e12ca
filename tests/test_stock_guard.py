"""Tests for the guarded stock decrement used by checkout."""

import asyncio

import pytest

from storefront.infrastructure.unit_of_work import UnitOfWork


def run(coro):
    return asyncio.run(coro)


class TestGuardedDecrement:
    def test_decrement_within_stock(self, seed, session_factory):
        item_id = seed.item(stock=5)

        async def scenario():
            async with UnitOfWork(session_factory)() as uow:
                ok = await uow.catalog.decrement_stock(item_id, 5)
                await uow.commit()
                return ok

        assert run(scenario()) is True
        assert seed.stock(item_id) == 0

    def test_decrement_beyond_stock_affects_nothing(self, seed, session_factory):
        item_id = seed.item(stock=3)

        async def scenario():
            async with UnitOfWork(session_factory)() as uow:
                ok = await uow.catalog.decrement_stock(item_id, 4)
                await uow.commit()
                return ok

        assert run(scenario()) is False
        assert seed.stock(item_id) == 3

    def test_second_decrement_loses_race(self, seed, session_factory):
        item_id = seed.item(stock=4)

        async def scenario():
            results = []
            for _ in range(2):
                async with UnitOfWork(session_factory)() as uow:
                    results.append(await uow.catalog.decrement_stock(item_id, 3))
                    await uow.commit()
            return results

        assert run(scenario()) == [True, False]
        assert seed.stock(item_id) == 1

    def test_uncommitted_work_is_rolled_back(self, seed, session_factory):
        item_id = seed.item(stock=4)

        async def scenario():
            async with UnitOfWork(session_factory)() as uow:
                await uow.catalog.decrement_stock(item_id, 2)

        run(scenario())
        assert seed.stock(item_id) == 4

    def test_error_after_commit_keeps_committed_work(self, seed, session_factory):
        item_id = seed.item(stock=4)

        async def scenario():
            async with UnitOfWork(session_factory)() as uow:
                await uow.catalog.decrement_stock(item_id, 1)
                await uow.commit()
                raise LookupError("после commit")

        with pytest.raises(LookupError):
            run(scenario())
        assert seed.stock(item_id) == 3
