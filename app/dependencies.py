from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.repositories.accounts import SqlAlchemyAccountStore
from app.schemas.auth import Identity
from app.services.accounts import AccountService
from app.utils.exceptions import AuthenticationRequired


async def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    return AccountService(SqlAlchemyAccountStore(db))


async def get_identity(request: Request) -> Identity:
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise AuthenticationRequired()
    return identity
