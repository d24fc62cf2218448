"""WhatsApp temporary password endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from djibgo.interfaces.http.cors import PREFLIGHT_BODY
from djibgo.interfaces.http.deps import get_temporary_credential_service
from djibgo.modules.temporary_credentials import SUCCESS_MESSAGE, TemporaryCredentialService
from djibgo.schemas import (
    ErrorResponse,
    ReminderResultResponse,
    ReminderSweepResponse,
    TemporaryPasswordRequest,
    TemporaryPasswordResponse,
)

router = APIRouter()

ISSUANCE_PATH = "/send-temporary-password-whatsapp"


@router.options(ISSUANCE_PATH, include_in_schema=False)
async def temporary_password_preflight() -> PlainTextResponse:
    return PlainTextResponse(PREFLIGHT_BODY)


@router.post(
    ISSUANCE_PATH,
    response_model=TemporaryPasswordResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
    summary="Generate a temporary password and a WhatsApp link carrying it",
)
async def send_temporary_password_whatsapp(
    payload: TemporaryPasswordRequest,
    service: TemporaryCredentialService = Depends(get_temporary_credential_service),
) -> TemporaryPasswordResponse:
    issue = await service.issue(payload.email, payload.phone)
    return TemporaryPasswordResponse(
        message=SUCCESS_MESSAGE,
        whatsapp_url=issue.whatsapp_url,
        phone=issue.phone,
        expires_at=issue.expires_at,
    )


@router.post(
    "/send-password-change-reminder",
    response_model=ReminderSweepResponse,
    summary="Remind users whose temporary password is about to expire",
)
async def send_password_change_reminder(
    service: TemporaryCredentialService = Depends(get_temporary_credential_service),
) -> ReminderSweepResponse:
    results = await service.send_change_reminders()
    if not results:
        return ReminderSweepResponse(message="Aucune notification à envoyer")
    return ReminderSweepResponse(
        message=f"{len(results)} rappels traités",
        results=[
            ReminderResultResponse(
                account_id=result.account_id,
                status=result.status,
                phone=result.phone,
                whatsapp_url=result.whatsapp_url,
                error=result.error,
            )
            for result in results
        ],
    )
