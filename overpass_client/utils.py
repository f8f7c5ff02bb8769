import re

ERROR_FRAGMENT_RE = re.compile(r"</strong>: ([^<]+) </p>")
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def human_readable_bytes(num_bytes: int) -> str:
    if num_bytes > 1024 * 1024:
        return f"{round(num_bytes / (1024 * 1024), 2)}MiB"
    return f"{round(num_bytes / 1024, 2)}KiB"


def extract_error_messages(html: str) -> list[str]:
    """
    Pull the human readable messages out of an Overpass 400 error page,
    with &quot; entities turned back into quotes.
    """
    return [m.replace("&quot;", '"') for m in ERROR_FRAGMENT_RE.findall(html)]


def parse_leading_int(s: str) -> int | None:
    """Parse the integer at the start of s, ignoring trailing text."""
    match = LEADING_INT_RE.match(s)
    return int(match.group(1)) if match else None
