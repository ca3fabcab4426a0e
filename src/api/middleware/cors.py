"""
CORS middleware with empty preflight responses.

Starlette answers preflights with a plain-text "OK" body, and with a
400 when the requested origin or headers are not allowed. Browser
clients of the feedback form get a bare 200 for every preflight; the
allow-* headers still tell the browser what it may send.
"""

from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import Response

_BODY_HEADERS = ("content-length", "content-type")


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose preflight responses are always an empty 200."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in _BODY_HEADERS
        }
        return Response(status_code=200, headers=headers)
