"""Account persistence.

``AccountStore`` is the contract the account service depends on; any backend
with atomic single-record operations and a unique login satisfies it.
``SqlAlchemyAccountStore`` is the relational implementation used by the app.
"""
import logging
from typing import Protocol, Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.account import Account
from app.utils.exceptions import ConflictError, StoreError

logger = logging.getLogger(__name__)


class AccountStore(Protocol):
    async def list_all(self) -> Sequence[Account]: ...

    async def get(self, account_id: int) -> Account | None: ...

    async def get_by_login(self, login: str) -> Account | None: ...

    async def exists(self, account_id: int) -> bool: ...

    async def add(self, login: str, password_hash: str) -> Account: ...

    async def save(self, account: Account) -> Account: ...

    async def delete(self, account_id: int) -> bool: ...


class SqlAlchemyAccountStore:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> Sequence[Account]:
        try:
            result = await self.session.execute(select(Account).order_by(Account.id))
        except SQLAlchemyError as exc:
            raise self._failure("list accounts", exc) from exc
        return result.scalars().all()

    async def get(self, account_id: int) -> Account | None:
        try:
            return await self.session.get(Account, account_id)
        except SQLAlchemyError as exc:
            raise self._failure("load account", exc) from exc

    async def get_by_login(self, login: str) -> Account | None:
        try:
            result = await self.session.execute(select(Account).where(Account.login == login))
        except SQLAlchemyError as exc:
            raise self._failure("load account by login", exc) from exc
        return result.scalars().first()

    async def exists(self, account_id: int) -> bool:
        try:
            result = await self.session.execute(select(Account.id).where(Account.id == account_id))
        except SQLAlchemyError as exc:
            raise self._failure("check account", exc) from exc
        return result.scalar_one_or_none() is not None

    async def add(self, login: str, password_hash: str) -> Account:
        account = Account(login=login, password_hash=password_hash)
        self.session.add(account)
        await self._commit("insert account", login)
        await self.session.refresh(account)
        return account

    async def save(self, account: Account) -> Account:
        self.session.add(account)
        await self._commit("update account", account.login)
        return account

    async def delete(self, account_id: int) -> bool:
        try:
            result = await self.session.execute(delete(Account).where(Account.id == account_id))
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise self._failure("delete account", exc) from exc
        return result.rowcount > 0

    async def _commit(self, action: str, login: str) -> None:
        try:
            await self.session.commit()
        except IntegrityError as exc:
            # the unique index on login is what makes concurrent sign-ups safe
            await self.session.rollback()
            logger.info("Unique login violated on %s for '%s'", action, login)
            raise ConflictError(f"Login '{login}' is already taken") from exc
        except SQLAlchemyError as exc:
            await self.session.rollback()
            raise self._failure(action, exc) from exc

    @staticmethod
    def _failure(action: str, exc: SQLAlchemyError) -> StoreError:
        logger.error("Account store failed to %s", action, exc_info=exc)
        return StoreError(f"Failed to {action}")
