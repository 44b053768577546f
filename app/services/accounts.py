import logging

from app.repositories.accounts import AccountStore
from app.schemas.person import PersonResponse, to_public
from app.services.passwords import hash_password, verify_password
from app.utils.exceptions import ConflictError, InvalidCredentials, NotFoundError

logger = logging.getLogger(__name__)


class AccountService:
    """Account use cases on top of an AccountStore.

    Every path that writes a password stores a bcrypt hash of it, and every
    account handed back to callers is the public projection.
    """

    def __init__(self, store: AccountStore):
        self.store = store

    async def sign_up(self, login: str, password: str) -> PersonResponse:
        account = await self._register(login, password)
        logger.info("Signed up account %s ('%s')", account.id, account.login)
        return account

    async def create(self, login: str, password: str) -> PersonResponse:
        account = await self._register(login, password)
        logger.info("Created account %s ('%s')", account.id, account.login)
        return account

    async def authenticate(self, login: str, password: str) -> PersonResponse:
        account = await self.store.get_by_login(login)
        if account is None or not verify_password(password, account.password_hash):
            logger.info("Failed login attempt for '%s'", login)
            raise InvalidCredentials()
        return to_public(account)

    async def find_all(self) -> list[PersonResponse]:
        return [to_public(a) for a in await self.store.list_all()]

    async def find_by_id(self, account_id: int) -> PersonResponse:
        account = await self.store.get(account_id)
        if account is None:
            raise NotFoundError(f"Person with id {account_id} not found")
        return to_public(account)

    async def find_by_login(self, login: str) -> PersonResponse:
        account = await self.store.get_by_login(login)
        if account is None:
            raise NotFoundError(f"Person with login '{login}' not found")
        return to_public(account)

    async def update(self, account_id: int, login: str, password: str) -> None:
        account = await self.store.get(account_id)
        if account is None:
            raise NotFoundError(f"Person with id {account_id} not found")
        if login != account.login:
            holder = await self.store.get_by_login(login)
            if holder is not None:
                raise ConflictError(f"Login '{login}' is already taken")
        account.login = login
        account.password_hash = hash_password(password)
        await self.store.save(account)
        logger.info("Updated account %s", account_id)

    async def update_password(self, login: str, password: str) -> None:
        account = await self.store.get_by_login(login)
        if account is None:
            raise NotFoundError(f"Person with login '{login}' not found")
        account.password_hash = hash_password(password)
        await self.store.save(account)
        logger.info("Changed password of account %s", account.id)

    async def delete(self, account_id: int) -> None:
        if not await self.store.exists(account_id):
            raise NotFoundError(f"Person with id {account_id} not found")
        # a concurrent delete may win between the check and the delete
        if not await self.store.delete(account_id):
            raise NotFoundError(f"Person with id {account_id} not found")
        logger.info("Deleted account %s", account_id)

    async def _register(self, login: str, password: str) -> PersonResponse:
        if await self.store.get_by_login(login) is not None:
            raise ConflictError(f"Login '{login}' is already taken")
        account = await self.store.add(login, hash_password(password))
        return to_public(account)
