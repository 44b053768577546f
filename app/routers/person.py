from fastapi import APIRouter, Depends, Response

from app.dependencies import get_account_service, get_identity
from app.schemas.auth import Identity
from app.schemas.person import (
    PersonRequest,
    PersonResponse,
    PersonUpdateRequest,
    validate_for_create,
    validate_for_password_change,
    validate_for_update,
)
from app.services.accounts import AccountService

router = APIRouter(prefix="/person", tags=["person"])


@router.post("/sign-up")
async def sign_up(payload: PersonRequest, service: AccountService = Depends(get_account_service)):
    validate_for_create(payload)
    await service.sign_up(payload.login, payload.password)
    return Response(status_code=200)


@router.get("/", response_model=list[PersonResponse])
async def find_all(
    service: AccountService = Depends(get_account_service),
    identity: Identity = Depends(get_identity),
):
    return await service.find_all()


@router.get("/{person_id}", response_model=PersonResponse)
async def find_by_id(
    person_id: int,
    service: AccountService = Depends(get_account_service),
    identity: Identity = Depends(get_identity),
):
    return await service.find_by_id(person_id)


@router.post("/", status_code=201, response_model=PersonResponse)
async def create(
    payload: PersonRequest,
    service: AccountService = Depends(get_account_service),
    identity: Identity = Depends(get_identity),
):
    validate_for_create(payload)
    return await service.create(payload.login, payload.password)


@router.put("/")
async def update(
    payload: PersonUpdateRequest,
    service: AccountService = Depends(get_account_service),
    identity: Identity = Depends(get_identity),
):
    validate_for_update(payload)
    await service.update(payload.id, payload.login, payload.password)
    return Response(status_code=200)


@router.patch("/")
async def update_password(
    payload: PersonRequest,
    service: AccountService = Depends(get_account_service),
    identity: Identity = Depends(get_identity),
):
    validate_for_password_change(payload)
    await service.update_password(payload.login, payload.password)
    return Response(status_code=200)


@router.delete("/{person_id}")
async def delete(
    person_id: int,
    service: AccountService = Depends(get_account_service),
    identity: Identity = Depends(get_identity),
):
    await service.delete(person_id)
    return Response(status_code=200)
