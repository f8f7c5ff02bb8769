from __future__ import annotations

from collections.abc import Sequence
from enum import Enum


class ErrorKind(str, Enum):
    GENERIC = "generic"
    BAD_REQUEST = "bad_request"
    RATE_LIMIT = "rate_limit"
    GATEWAY_TIMEOUT = "gateway_timeout"
    API_STATUS = "api_status"
    REMARK = "remark"


class OverpassError(Exception):
    """Base of every error raised by the client; ``kind`` tags the variant."""

    kind = ErrorKind.GENERIC

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(f"Overpass Error: {message}")
        self.status_code = status_code
        self.reason = reason


class OverpassBadRequestError(OverpassError):
    kind = ErrorKind.BAD_REQUEST

    def __init__(self, query: str, errors: Sequence[str]) -> None:
        self.query = query
        self.errors = list(errors)
        joined = "\n".join(self.errors)
        super().__init__(
            f"400 Bad Request\nErrors: {joined}\nQuery: {query}",
            status_code=400,
            reason="Bad Request",
        )


class OverpassRateLimitError(OverpassError):
    kind = ErrorKind.RATE_LIMIT

    def __init__(self) -> None:
        super().__init__(
            "429 Rate Limit Exceeded", status_code=429, reason="Too Many Requests"
        )


class OverpassGatewayTimeoutError(OverpassError):
    kind = ErrorKind.GATEWAY_TIMEOUT

    def __init__(self) -> None:
        super().__init__(
            "504 Gateway Timeout", status_code=504, reason="Gateway Timeout"
        )


class OverpassApiStatusError(OverpassError):
    kind = ErrorKind.API_STATUS

    def __init__(self, message: str) -> None:
        super().__init__(f"API Status error: {message}")


class OverpassRemarkError(OverpassError):
    """The server sent a 200 but reported a failure in a ``remark``."""

    kind = ErrorKind.REMARK

    def __init__(self, remarks: Sequence[str]) -> None:
        self.remarks = list(remarks)
        super().__init__(", ".join(self.remarks))
