from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
import respx

ENDPOINT = "https://overpass.example/api/interpreter"
STATUS_ENDPOINT = "https://overpass.example/api/status"


def status_report(rate_limit: int, running: int = 0, waits: tuple = ()) -> str:
    """Build an /api/status body the way the server formats it."""
    free = max(rate_limit - running - len(waits), 0)
    lines = [
        "Connected as: 1234567890",
        "Current time: 2021-03-02T12:00:00Z",
        f"Rate limit: {rate_limit}",
        f"{free} slots available now.",
    ]
    lines += [
        f"Slot available after: 2021-03-02T12:00:{w:02d}Z, in {w} seconds."
        for w in waits
    ]
    lines.append(
        "Currently running queries (pid, space limit, time limit, start time):"
    )
    lines += [
        f"{1000 + i}\t536870912\t180\t2021-03-02T11:59:58Z" for i in range(running)
    ]
    return "\n".join(lines)


def status_response(text: str, content_type: str = "text/plain; charset=utf-8"):
    return httpx.Response(200, text=text, headers={"content-type": content_type})


@pytest.fixture
def router():
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest_asyncio.fixture
async def client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def sleep(monkeypatch):
    """Replace the retry delay so tests don't wait."""
    mock = AsyncMock()
    monkeypatch.setattr("overpass_client.fetcher.asyncio.sleep", mock)
    return mock
