from fastapi import APIRouter

from djibgo.interfaces.http.routers import auth, temporary_password


def create_api_router(prefix: str = "") -> APIRouter:
    router = APIRouter(prefix=prefix)
    router.include_router(temporary_password.router, tags=["temporary-password"])
    router.include_router(auth.router, prefix="/auth", tags=["auth"])
    return router


__all__ = [
    "create_api_router",
]
