from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator
from typing import Any
from urllib.parse import quote

import httpx
import structlog

from .config import OverpassOptions, one_less_retry, resolve_options
from .errors import (
    OverpassBadRequestError,
    OverpassError,
    OverpassGatewayTimeoutError,
    OverpassRateLimitError,
    OverpassRemarkError,
)
from .status import fetch_api_status, should_retry_immediately, wait_seconds
from .utils import extract_error_messages, human_readable_bytes

logger = structlog.get_logger(__name__)

REMARK_RE = re.compile(r"<remark>\s*(.+)\s*</remark>")

# characters encodeURIComponent leaves alone on top of quote()'s defaults
URI_COMPONENT_SAFE = "!*'()"


def encode_query(query: str) -> str:
    return f"data={quote(query, safe=URI_COMPONENT_SAFE)}"


async def overpass(
    client: httpx.AsyncClient,
    query: str,
    options: OverpassOptions | None = None,
    **overrides: Any,
) -> httpx.Response:
    """
    Send a query and return the raw, unread (streaming) response.

    Rate limiting (429) and gateway timeouts (504) are retried while
    options.num_retries allows; each retry is a new call with one retry
    fewer. Other failures raise an OverpassError subclass. The caller owns
    the returned response and must read or close it.
    """
    opts = resolve_options(options, **overrides)

    if opts.verbose:
        logger.info("overpass_request", endpoint=opts.endpoint, query=query)

    request = client.build_request(
        "POST",
        opts.endpoint,
        content=encode_query(query),
        headers={
            "Accept": "*",
            "User-Agent": opts.user_agent,
            "Content-Type": "application/x-www-form-urlencoded",
        },
    )
    r = await client.send(request, stream=True, follow_redirects=True)

    if r.is_success:
        content_length = r.headers.get("content-length")
        if opts.verbose and content_length and content_length.isdigit():
            logger.info(
                "overpass_response",
                payload=human_readable_bytes(int(content_length)),
            )
        return r

    try:
        await r.aread()
    finally:
        await r.aclose()

    status_code = r.status_code

    if status_code == 400:
        # error details come back as an html page
        raise OverpassBadRequestError(query, extract_error_messages(r.text))

    if status_code == 429:
        if opts.num_retries <= 0:
            raise OverpassRateLimitError()

        status = await fetch_api_status(client, opts.endpoint)
        if should_retry_immediately(status):
            return await overpass(client, query, one_less_retry(opts))

        sleep_time = wait_seconds(status)
        if opts.verbose:
            logger.info("overpass_rate_limited", wait_seconds=sleep_time)
        await asyncio.sleep(sleep_time)
        return await overpass(client, query, one_less_retry(opts))

    if status_code == 504:
        if opts.num_retries <= 0:
            raise OverpassGatewayTimeoutError()

        await asyncio.sleep(opts.retry_pause / 1000)
        return await overpass(client, query, one_less_retry(opts))

    raise OverpassError(
        f"{status_code} {r.reason_phrase}",
        status_code=status_code,
        reason=r.reason_phrase,
    )


async def read_text(r: httpx.Response) -> str:
    try:
        await r.aread()
    finally:
        await r.aclose()
    return r.text


async def overpass_json(
    client: httpx.AsyncClient,
    query: str,
    options: OverpassOptions | None = None,
    **overrides: Any,
) -> dict:
    r = await overpass(client, query, options, **overrides)
    await read_text(r)
    data = r.json()

    # a remark means the query failed after the 200 was already sent
    if isinstance(data, dict) and data.get("remark"):
        raise OverpassRemarkError([data["remark"]])
    return data


def xml_remarks(text: str) -> list[str]:
    """
    Collect the trailing <remark> lines of an XML result. The closing tag
    sits at a fixed distance from the end of the document, before
    </osm>; the first three lines are the prolog and header.
    """
    if text[-18:-9] != "</remark>":
        return []

    lines = text.split("\n")
    remarks = []
    for i in range(len(lines) - 4, 0, -1):
        match = REMARK_RE.search(lines[i])
        if not match:
            break
        remarks.append(match.group(1))
    return remarks


async def overpass_xml(
    client: httpx.AsyncClient,
    query: str,
    options: OverpassOptions | None = None,
    **overrides: Any,
) -> str:
    r = await overpass(client, query, options, **overrides)
    text = await read_text(r)

    remarks = xml_remarks(text)
    if remarks:
        raise OverpassRemarkError(remarks)
    return text


async def overpass_csv(
    client: httpx.AsyncClient,
    query: str,
    options: OverpassOptions | None = None,
    **overrides: Any,
) -> str:
    r = await overpass(client, query, options, **overrides)
    return await read_text(r)


async def overpass_stream(
    client: httpx.AsyncClient,
    query: str,
    options: OverpassOptions | None = None,
    **overrides: Any,
) -> AsyncIterator[bytes]:
    """
    Run the query, then hand back the body as an async iterator of byte
    chunks. Errors are raised here, before any chunk is produced.

    The response is closed once the iterator is exhausted. A caller that
    stops early must ``await chunks.aclose()`` to release the connection.
    """
    r = await overpass(client, query, options, **overrides)

    async def chunks() -> AsyncIterator[bytes]:
        try:
            async for chunk in r.aiter_bytes():
                yield chunk
        finally:
            await r.aclose()

    return chunks()
