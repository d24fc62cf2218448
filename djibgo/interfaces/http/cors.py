"""CORS middleware whose preflight answer matches the bare OPTIONS route."""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import PlainTextResponse, Response

PREFLIGHT_BODY = "ok"


class PreflightCORSMiddleware(CORSMiddleware):
    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return PlainTextResponse(PREFLIGHT_BODY, status_code=200, headers=headers)
