"""Cross-origin policy for the search endpoint."""

from typing import Dict, Sequence

from fastapi.datastructures import Headers
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

ALLOWED_METHODS = ["POST", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type"]


def preflight_headers(allow_origins: Sequence[str]) -> Dict[str, str]:
    """Headers advertised on a preflight answered by the route itself (no Origin sent)."""
    headers = {
        "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
        "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
    }
    if "*" in allow_origins:
        headers["Access-Control-Allow-Origin"] = "*"
    return headers


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware whose preflight responses are always an empty 200.

    Requests the policy does not allow (an unlisted method or header) still
    get 200; the advertised allow-lists are what the browser enforces.
    """

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)
