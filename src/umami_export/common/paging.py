from __future__ import annotations
from typing import Any, Callable, Iterator, List, Optional, Tuple

Page = List[Any]


def _bare_list(payload: Any) -> Optional[Page]:
    return payload if isinstance(payload, list) else None


def _field(name: str) -> Callable[[Any], Optional[Page]]:
    def match(payload: Any) -> Optional[Page]:
        if isinstance(payload, dict) and isinstance(payload.get(name), list):
            return payload[name]
        return None

    return match


# Tried in order; first match wins.
ROW_SHAPES: Tuple[Tuple[str, Callable[[Any], Optional[Page]]], ...] = (
    ("array", _bare_list),
    ("data", _field("data")),
    ("rows", _field("rows")),
)


def extract_rows(payload: Any) -> Optional[Page]:
    """Rows from a metrics payload, or None when no known shape matches."""
    for _, match in ROW_SHAPES:
        rows = match(payload)
        if rows is not None:
            return rows
    return None


def paginate(
    fetch_page_fn: Callable[[int], Page],
    *,
    limit: int,
) -> Iterator[Page]:
    """
    Offset/limit cursor. Yields each non-empty page and advances by `limit`.

    The only stop condition is an empty page: short pages do not end the
    walk and there is no page cap, so a server that never returns an
    empty page is walked forever.
    """
    offset = 0
    while True:
        batch = fetch_page_fn(offset)
        if not batch:
            return
        yield batch
        offset += limit
