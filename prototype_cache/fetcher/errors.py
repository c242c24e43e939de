"""
Error normalization for upstream fetches.

Everything that can go wrong while talking to the upstream API ends up here:
exceptions raised by the fetcher (timeouts, structured API errors, HTTP
errors from `requests`, anything else) as well as `FetchResult` objects with
`ok=False`. Each is mapped to one `FetchFailure` shape so callers only ever
deal with a status code, a message and optional request/response details.

Classification (first match wins):
1. Timeout/abort            -> 504, fixed message, empty detail
2. Structured upstream error -> its status, message and metadata
3. Object with a status     -> coerced status (default 500)
4. Anything else            -> 500
"""

import asyncio
import logging
import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field
from typing import Any, Optional

import requests

from .base import FetchAbortedError, FetchResult, UpstreamApiError

logger = logging.getLogger(__name__)


TIMEOUT_STATUS_CODE = 504
DEFAULT_STATUS_CODE = 500
TIMEOUT_MESSAGE = "Upstream request timed out"
GENERIC_FAILURE_MESSAGE = "Failed to fetch prototypes"

TIMEOUT_ERRORS = (
    TimeoutError,
    asyncio.TimeoutError,
    requests.exceptions.Timeout,
    FetchAbortedError,
)


@dataclass
class FetchFailure:
    """Uniform description of a failed upstream fetch.

    `detail` is always present. It may hold `request` ({method, url}) and
    `response` ({statusText, code}) sub-dicts, each only when at least one of
    its fields is known.
    """

    status_code: int
    message: str
    detail: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class UpstreamFailure(Exception):
    """Raised to repository callers when a fetch fails."""

    def __init__(self, failure: FetchFailure):
        super().__init__(failure.message)
        self.failure = failure

    @property
    def status_code(self) -> int:
        return self.failure.status_code


def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _has_field(obj: Any, name: str) -> bool:
    if isinstance(obj, Mapping):
        return name in obj
    return hasattr(obj, name)


def _coerce_status(value: Any) -> int:
    """Convert a status-like value to int, defaulting to 500."""
    if value is None or isinstance(value, bool):
        return DEFAULT_STATUS_CODE
    try:
        number = float(value)
    except (TypeError, ValueError):
        return DEFAULT_STATUS_CODE
    if not math.isfinite(number):
        return DEFAULT_STATUS_CODE
    return int(number)


def _message_from(error: Any) -> str:
    if isinstance(error, BaseException):
        text = str(error)
        if text:
            return text
    return GENERIC_FAILURE_MESSAGE


def _build_detail(
    method: Optional[str] = None,
    url: Optional[str] = None,
    status_text: Optional[str] = None,
    code: Optional[str] = None,
) -> dict[str, Any]:
    """Assemble a detail dict, omitting sub-dicts that would be empty."""
    detail: dict[str, Any] = {}

    request: dict[str, Any] = {}
    if method is not None:
        request["method"] = method
    if url is not None:
        request["url"] = url
    if request:
        detail["request"] = request

    response: dict[str, Any] = {}
    if status_text is not None:
        response["statusText"] = status_text
    if code is not None:
        response["code"] = code
    if response:
        detail["response"] = response

    return detail


def _from_api_error(error: UpstreamApiError) -> FetchFailure:
    return FetchFailure(
        status_code=_coerce_status(error.status),
        message=error.message or GENERIC_FAILURE_MESSAGE,
        detail=_build_detail(
            method=error.method,
            url=error.url,
            status_text=error.status_text,
        ),
    )


def _from_failed_result(result: FetchResult) -> FetchFailure:
    details = result.details or {}
    request = details.get("request") or {}
    response = details.get("response") or {}
    return FetchFailure(
        status_code=_coerce_status(result.status),
        message=result.message or GENERIC_FAILURE_MESSAGE,
        detail=_build_detail(
            method=_field(request, "method"),
            url=_field(request, "url"),
            status_text=_field(response, "statusText"),
            code=_field(response, "code"),
        ),
    )


def _status_source(error: Any) -> tuple[bool, Any]:
    """Find a status-like value on an arbitrary error object.

    Returns (found, value). HTTP errors from `requests` count as status-like
    even when no response was received.
    """
    for name in ("status", "status_code"):
        if _has_field(error, name):
            return True, _field(error, name)

    response = _field(error, "response")
    if response is not None and hasattr(response, "status_code"):
        return True, response.status_code

    if isinstance(error, requests.exceptions.RequestException):
        return True, None

    return False, None


def _from_status_like(error: Any, status: Any) -> FetchFailure:
    request = _field(error, "request")
    response = _field(error, "response")

    method = _field(error, "method")
    url = _field(error, "url")
    if request is not None and not isinstance(request, (str, bytes)):
        method = method if method is not None else _field(request, "method")
        url = url if url is not None else _field(request, "url")

    status_text = _field(error, "status_text")
    if status_text is None:
        status_text = _field(error, "statusText")
    if status_text is None and response is not None:
        status_text = _field(response, "reason")

    code = _field(error, "code")

    return FetchFailure(
        status_code=_coerce_status(status),
        message=_message_from(error),
        detail=_build_detail(
            method=method,
            url=url,
            status_text=status_text,
            code=code if isinstance(code, str) else None,
        ),
    )


def _classify(error: Any) -> FetchFailure:
    if isinstance(error, TIMEOUT_ERRORS):
        return FetchFailure(status_code=TIMEOUT_STATUS_CODE, message=TIMEOUT_MESSAGE)

    if isinstance(error, UpstreamApiError):
        return _from_api_error(error)

    if isinstance(error, FetchResult) and not error.ok:
        return _from_failed_result(error)

    found, status = _status_source(error)
    if found:
        return _from_status_like(error, status)

    return FetchFailure(status_code=DEFAULT_STATUS_CODE, message=_message_from(error))


def normalize_error(error: Any) -> FetchFailure:
    """
    Map any fetch error or failed result to a `FetchFailure`.

    Args:
        error: Exception raised by a fetcher, a `FetchResult` with `ok=False`,
            or any other value a fetcher produced on failure

    Returns:
        FetchFailure describing the error; this function does not raise

    Examples:
        >>> normalize_error(TimeoutError()).status_code
        504
        >>> normalize_error(UpstreamApiError("Not Found", 404, "Not Found")).detail
        {'response': {'statusText': 'Not Found'}}
    """
    failure = _classify(error)

    logger.error(
        "Upstream fetch failed",
        extra={
            "failure": failure.to_dict(),
            "error_type": type(error).__name__,
        },
    )

    return failure
