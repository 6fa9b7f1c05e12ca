import logging
from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.infrastructure.repositories import (
    SQLAlchemyUserRepository,
    SQLAlchemyCatalogRepository,
    SQLAlchemyBasketRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyReviewRepository,
    SQLAlchemyWishlistRepository,
)

logger = logging.getLogger(__name__)


class UnitOfWork:
    """Граница транзакции use case: одна сессия на блок `async with`.

    Изменения фиксируются только явным commit(). Ошибка внутри блока
    откатывает все, что не было зафиксировано.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def __call__(self):
        async with self._session_factory() as session:
            transaction = _Transaction(session)
            try:
                yield transaction
            except Exception as exc:
                await session.rollback()
                logger.debug(f"Транзакция откатана: {type(exc).__name__}")
                raise
            if not transaction.committed:
                await session.rollback()


class _Transaction:
    def __init__(self, session: AsyncSession):
        self._session = session
        self.committed = False
        self.users = SQLAlchemyUserRepository(session)
        self.catalog = SQLAlchemyCatalogRepository(session)
        self.baskets = SQLAlchemyBasketRepository(session)
        self.orders = SQLAlchemyOrderRepository(session)
        self.reviews = SQLAlchemyReviewRepository(session)
        self.wishlist = SQLAlchemyWishlistRepository(session)

    async def commit(self):
        await self._session.commit()
        self.committed = True
