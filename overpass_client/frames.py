from __future__ import annotations

import asyncio
import csv
import io
from collections.abc import Iterable

import httpx
import pandas as pd
import structlog
from tqdm import tqdm

from .config import HttpConfig, OverpassOptions
from .errors import OverpassError
from .fetcher import overpass_json

logger = structlog.get_logger(__name__)

ELEMENT_COLUMNS = ["type", "id", "lat", "lon", "num_nodes", "num_members"]


def create_dataframe(
    rows: list[dict], fallback_columns: list[str] | None = None
) -> pd.DataFrame:
    """
    Return pandas DataFrame from a list of records. If list empty
    return an empty DataFrame with fallback_columns
    """

    if rows:
        df = pd.DataFrame(rows)
    else:
        df = pd.DataFrame(columns=fallback_columns)
    return df


def normalize_element_to_row(element: dict) -> dict:
    """
    Flatten one element of an Overpass JSON result. Ways and relations
    only carry coordinates when the query asked for ``out center``.
    """
    center = element.get("center") or {}
    row = {
        "type": element.get("type"),
        "id": element.get("id"),
        "lat": element.get("lat", center.get("lat")),
        "lon": element.get("lon", center.get("lon")),
        "num_nodes": len(element["nodes"]) if "nodes" in element else None,
        "num_members": len(element["members"]) if "members" in element else None,
    }
    for key, value in (element.get("tags") or {}).items():
        row[f"tag:{key}"] = value
    return row


def elements_to_dataframe(result: dict) -> pd.DataFrame:
    rows = [normalize_element_to_row(el) for el in result.get("elements") or []]
    return create_dataframe(rows, fallback_columns=ELEMENT_COLUMNS)


def csv_to_dataframe(text: str, sep: str = "\t") -> pd.DataFrame:
    # [out:csv] defaults to a tab separated table with a header line
    if not text.strip():
        return pd.DataFrame()
    return pd.read_csv(io.StringIO(text), sep=sep)


async def build_dataframe(
    queries: Iterable[str],
    options: OverpassOptions | None = None,
    http: HttpConfig = HttpConfig(),
) -> pd.DataFrame:
    """
    Run every query against the same endpoint, at most http.concurrency at
    a time, and collect all returned elements in one table. Queries that
    fail are logged and left out.
    """
    limits = httpx.Limits(
        max_keepalive_connections=http.concurrency,
        max_connections=http.concurrency,
    )
    timeout = httpx.Timeout(http.timeout)

    async with httpx.AsyncClient(limits=limits, timeout=timeout) as client:
        sem = asyncio.Semaphore(http.concurrency)

        async def process_query(index: int, query: str) -> list[dict] | None:
            async with sem:
                try:
                    result = await overpass_json(client, query, options)
                except OverpassError as e:
                    logger.warning(
                        "query_failed",
                        query_index=index,
                        kind=e.kind.value,
                        error=str(e),
                    )
                    return None
                except httpx.RequestError as e:
                    logger.warning(
                        "query_failed",
                        query_index=index,
                        kind="transport",
                        error=repr(e),
                    )
                    return None
                except ValueError as e:
                    # [out:xml] / [out:csv] queries don't decode as JSON
                    logger.warning(
                        "query_failed",
                        query_index=index,
                        kind="decode",
                        error=str(e),
                    )
                    return None

            return [
                {"query_index": index, **normalize_element_to_row(el)}
                for el in result.get("elements") or []
            ]

        tasks = [
            asyncio.create_task(process_query(i, q)) for i, q in enumerate(queries)
        ]

        element_rows: list[dict] = []
        for fut in tqdm(
            asyncio.as_completed(tasks),
            total=len(tasks),
            desc="Running Overpass queries...",
        ):
            res = await fut
            element_rows.extend(res or [])

    df = create_dataframe(
        element_rows, fallback_columns=["query_index", *ELEMENT_COLUMNS]
    )
    return (
        df.sort_values("query_index", kind="stable")
        .drop_duplicates(subset=["type", "id"])
        .reset_index(drop=True)
    )


def load_queries(file: str) -> list[str]:
    out: list[str] = []
    with open(file, newline="") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            query = (row.get("Query") or "").strip()
            if query:
                out.append(query)
    return list(dict.fromkeys(out))  # dedupes
