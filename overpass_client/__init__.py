from .config import (
    DEFAULT_OPTIONS,
    FRANCE_ENDPOINT,
    KUMI_ENDPOINT,
    MAIN_ENDPOINT,
    SWITZERLAND_ENDPOINT,
    HttpConfig,
    OverpassOptions,
    resolve_options,
)
from .errors import (
    ErrorKind,
    OverpassApiStatusError,
    OverpassBadRequestError,
    OverpassError,
    OverpassGatewayTimeoutError,
    OverpassRateLimitError,
    OverpassRemarkError,
)
from .fetcher import (
    overpass,
    overpass_csv,
    overpass_json,
    overpass_stream,
    overpass_xml,
)
from .frames import (
    build_dataframe,
    csv_to_dataframe,
    elements_to_dataframe,
    load_queries,
)
from .models import ApiStatus
from .status import (
    fetch_api_status,
    parse_api_status,
    should_retry_immediately,
    wait_seconds,
)

__all__ = [
    "DEFAULT_OPTIONS",
    "FRANCE_ENDPOINT",
    "KUMI_ENDPOINT",
    "MAIN_ENDPOINT",
    "SWITZERLAND_ENDPOINT",
    "ApiStatus",
    "ErrorKind",
    "HttpConfig",
    "OverpassApiStatusError",
    "OverpassBadRequestError",
    "OverpassError",
    "OverpassGatewayTimeoutError",
    "OverpassOptions",
    "OverpassRateLimitError",
    "OverpassRemarkError",
    "build_dataframe",
    "csv_to_dataframe",
    "elements_to_dataframe",
    "fetch_api_status",
    "load_queries",
    "overpass",
    "overpass_csv",
    "overpass_json",
    "overpass_stream",
    "overpass_xml",
    "parse_api_status",
    "resolve_options",
    "should_retry_immediately",
    "wait_seconds",
]
