from __future__ import annotations

from datetime import datetime

import httpx
import structlog

from .errors import OverpassApiStatusError
from .models import ApiStatus
from .utils import parse_leading_int

logger = structlog.get_logger(__name__)

# "Connected as: ", "Current time: ", "Rate limit: "
CLIENT_ID_OFFSET = 14
CURRENT_TIME_OFFSET = 14
RATE_LIMIT_OFFSET = 12
# "Slot available after: 2021-03-02T12:00:00Z, in "
SLOT_WAIT_OFFSET = 47


def status_url(endpoint: str) -> str:
    return endpoint.replace("/interpreter", "/status", 1)


def parse_timestamp(s: str) -> datetime | None:
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def parse_api_status(text: str) -> ApiStatus:
    """
    Parse the plain text report served at /api/status.

    A typical report::

        Connected as: 1234567890
        Current time: 2021-03-02T12:00:00Z
        Rate limit: 2
        Slot available after: 2021-03-02T12:00:05Z, in 5 seconds.
        Currently running queries (pid, space limit, time limit, start time):
        12345\t536870912\t180\t2021-03-02T11:59:58Z

    Never raises. A report that can't be read yields a status without a
    client_id.
    """
    status = ApiStatus()

    for line in text.split("\n"):
        first_word = line.split(" ")[0]

        if first_word == "Connected":
            status.client_id = line[CLIENT_ID_OFFSET:]
        elif first_word == "Current":
            status.current_time = parse_timestamp(line[CURRENT_TIME_OFFSET:])
        elif first_word == "Rate":
            status.rate_limit = parse_leading_int(line[RATE_LIMIT_OFFSET:])
        elif first_word == "Slot":
            status.slots_available_after.append(
                parse_leading_int(line[SLOT_WAIT_OFFSET:].split(" ")[0])
            )
        # section header and "N slots available now." are skipped,
        # everything else is a running query, including blank lines and
        # unknown lines such as "Announced endpoint: none"
        elif first_word != "Currently" and "available" not in line:
            status.slots_running.append(line.split("\t"))

    return status


def should_retry_immediately(status: ApiStatus) -> bool:
    """
    True when the server reports free capacity (or no limit at all), in
    which case a 429 was a race and the query can be resent straight away.
    """
    if status.rate_limit is None:
        return False
    occupied = len(status.slots_running) + len(status.slots_available_after)
    return status.rate_limit == 0 or status.rate_limit > occupied


def wait_seconds(status: ApiStatus) -> int:
    waits = [w for w in status.slots_available_after if w is not None]
    return max(0, min(waits, default=0)) + 1


async def fetch_api_status(client: httpx.AsyncClient, endpoint: str) -> ApiStatus:
    r = await client.get(status_url(endpoint))

    content_type = r.headers.get("content-type")
    if not content_type or content_type.split(";")[0] != "text/plain":
        raise OverpassApiStatusError(f"Response type incorrect ({content_type})")

    status = parse_api_status(r.text)
    if not status.is_parsed:
        raise OverpassApiStatusError("Unable to parse API Status")

    logger.debug(
        "api_status",
        client_id=status.client_id,
        rate_limit=status.rate_limit,
        running=len(status.slots_running),
        waiting=len(status.slots_available_after),
    )
    return status
