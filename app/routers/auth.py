from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.dependencies import get_account_service
from app.schemas.auth import AccessToken, LoginRequest
from app.schemas.person import validate_for_login
from app.services.accounts import AccountService
from app.services.tokens import TOKEN_PREFIX, issue_token

router = APIRouter(tags=["auth"])


@router.post("/login")
async def login(request: LoginRequest, service: AccountService = Depends(get_account_service)):
    validate_for_login(request)
    account = await service.authenticate(request.login, request.password)
    token = issue_token(account.login)
    return JSONResponse(
        content=AccessToken(access_token=token).model_dump(),
        headers={"Authorization": f"{TOKEN_PREFIX} {token}"},
    )
