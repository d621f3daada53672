"""
Unit of Work Pattern - 統一管理 database session 和 repositories

Architecture:
- UoW 負責 session 生命週期管理
- UoW 負責 commit/rollback
- Repositories 透過 UoW 取得 shared session
- Use cases 透過 UoW 協調多個 repositories
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.db_setting import get_async_session


if TYPE_CHECKING:
    from src.service.booking.app.interface.i_booking_command_repo import IBookingCommandRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Abstract Unit of Work for the Booking Service

    Responsibilities:
    - Manage database session lifecycle
    - Scope one transaction per command use case
    - Provide commit/rollback interface

    Usage:
        async with uow:
            booking = await uow.booking_command_repo.create(booking=...)
            await uow.commit()

    Leaving the block always rolls back; after a commit the rollback is a no-op,
    so every exit path (return, raise, cancellation) releases the transaction.
    """

    booking_command_repo: IBookingCommandRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        """Commit the transaction"""
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        from src.service.booking.driven_adapter.repo.booking_command_repo_impl import (
            BookingCommandRepoImpl,
        )

        # Repositories share the UoW session
        self.booking_command_repo = BookingCommandRepoImpl()
        self.booking_command_repo.session = self.session

        return await super().__aenter__()

    async def _commit(self):
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


def get_unit_of_work(
    session: AsyncSession = Depends(get_async_session),
) -> AbstractUnitOfWork:
    """
    FastAPI dependency for Unit of Work

    Usage:
        async def cancel(uow: AbstractUnitOfWork = Depends(get_unit_of_work)):
            async with uow:
                ...
                await uow.commit()
    """
    return SqlAlchemyUnitOfWork(session)
