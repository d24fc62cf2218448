"""Bearer-token authentication dependency."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from djibgo.core.security import InvalidTokenError, decode_access_token
from djibgo.modules.accounts import Account, IdentityStore

from .stores import get_identity_store

bearer = HTTPBearer(auto_error=False)


async def get_current_account(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    identity: IdentityStore = Depends(get_identity_store),
) -> Account:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentification requise")
    try:
        token_data = decode_access_token(credentials.credentials)
    except InvalidTokenError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session invalide") from exc

    session = await identity.get_session(token_data.session_id)
    if session is None or session.account_id != token_data.account_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expirée")

    account = await identity.get_by_id(token_data.account_id)
    if account is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Compte introuvable")
    return account


__all__ = ["get_current_account"]
