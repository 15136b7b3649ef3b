from __future__ import annotations
import posixpath
import re
from urllib.parse import urlsplit

_ABSOLUTE_URL = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
_SLASH_RUN = re.compile(r"/{2,}")


def normalize_path(name: str | None) -> str:
    """
    Canonical aggregation key for a page name:
      - absolute URLs are reduced to their path, with "." and ".." resolved
      - query and fragment are dropped
      - repeated slashes collapse
      - always starts and ends with "/"
    None/empty input -> "/".
    """
    if name is None:
        return "/"
    raw = str(name).strip()
    if not raw:
        return "/"

    if _ABSOLUTE_URL.match(raw):
        try:
            raw = posixpath.normpath(urlsplit(raw).path or "/")
        except ValueError:
            # unparseable URL (e.g. bad IPv6 host): treat as a plain path
            pass

    cut = [i for i in (raw.find("?"), raw.find("#")) if i >= 0]
    if cut:
        raw = raw[: min(cut)]

    raw = _SLASH_RUN.sub("/", raw)
    if not raw.startswith("/"):
        raw = "/" + raw
    if not raw.endswith("/"):
        raw += "/"
    return raw or "/"
