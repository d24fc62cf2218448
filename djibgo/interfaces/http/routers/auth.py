"""Sign-in, password change and temporary password status."""
from fastapi import APIRouter, Depends

from djibgo.interfaces.http.deps import (
    get_account_service,
    get_current_account,
    get_temporary_credential_service,
)
from djibgo.modules.accounts import Account, AccountService
from djibgo.modules.temporary_credentials import TemporaryCredentialService
from djibgo.schemas import (
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    PasswordChangeResponse,
    TemporaryPasswordStatusResponse,
)

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}},
    summary="Sign in with email and password",
)
async def login(
    payload: LoginRequest,
    account_service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    session = await account_service.authenticate(payload.email, payload.password)
    return LoginResponse(access_token=session.access_token, account_id=session.account_id)


@router.post(
    "/change-password",
    response_model=PasswordChangeResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Replace the current password and leave the temporary regime",
)
async def change_password(
    payload: PasswordChangeRequest,
    account: Account = Depends(get_current_account),
    account_service: AccountService = Depends(get_account_service),
) -> PasswordChangeResponse:
    await account_service.change_password(account.id, payload.new_password, payload.confirm_password)
    return PasswordChangeResponse(message="Mot de passe modifié avec succès")


@router.get(
    "/temporary-password",
    response_model=TemporaryPasswordStatusResponse,
    summary="Whether the signed-in account still uses a temporary password",
)
async def temporary_password_status(
    account: Account = Depends(get_current_account),
    service: TemporaryCredentialService = Depends(get_temporary_credential_service),
) -> TemporaryPasswordStatusResponse:
    return TemporaryPasswordStatusResponse.model_validate(await service.status(account.id))
