import httpx
import requests
from notion_client.errors import APIResponseError, APIErrorCode, HTTPResponseError, RequestTimeoutError

# Anything either remote can throw at us for a single call. notion_client only
# wraps timeouts, so raw httpx transport errors come through as-is.
REMOTE_ERRORS = (
    APIResponseError,
    HTTPResponseError,
    RequestTimeoutError,
    httpx.HTTPError,
    requests.RequestException,
)


def is_unauthorized(e: Exception) -> bool:
    if isinstance(e, APIResponseError):
        return e.code == APIErrorCode.Unauthorized
    resp = getattr(e, "response", None)
    return resp is not None and getattr(resp, "status_code", None) in (401, 403)
