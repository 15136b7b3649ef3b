from __future__ import annotations
import sys
from dataclasses import dataclass
from typing import Callable, Dict

from umami_export.aggregate import Number, Totals, accumulate
from umami_export.auth import exchange_credentials, resolve_auth
from umami_export.common.paging import paginate
from umami_export.http import UmamiClient
from umami_export.settings import Settings


def stderr_log(msg: str) -> None:
    print(msg, file=sys.stderr)


@dataclass(frozen=True)
class ExportResult:
    website_id: str
    totals: Dict[str, Number]
    pages: int
    rows: int


def export_path_visitors(
    cfg: Settings,
    client: UmamiClient | None = None,
    log: Callable[[str], None] = stderr_log,
) -> ExportResult:
    """
    auth -> credentials -> paginated rows -> normalized totals.

    Any UmamiError aborts the export; nothing partial is returned.
    """
    cfg.validate()
    spec = resolve_auth(
        share_id=cfg.share_id,
        username=cfg.username,
        password=cfg.password,
        token=cfg.token,
    )
    client = client or UmamiClient(base_url=cfg.base_url, timeout_s=cfg.request_timeout_s)
    creds = exchange_credentials(client, spec, cfg.website_id, log=log)
    log(f"[umami-export] auth={spec.mode.value} websiteId={creds.website_id}")

    def fetch_page(offset: int):
        return client.metrics_expanded(
            creds.website_id,
            headers=creds.headers,
            start_at=cfg.start_at,
            end_at=cfg.end_at,
            limit=cfg.limit,
            offset=offset,
        )

    totals: Totals = {}
    pages = rows = 0
    for batch in paginate(fetch_page, limit=cfg.limit):
        accumulate(totals, batch)
        pages += 1
        rows += len(batch)
        log(f"[umami-export] page {pages}: {len(batch)} rows (offset {(pages - 1) * cfg.limit})")

    log(f"[umami-export] done: {pages} pages, {rows} rows, {len(totals)} paths")
    return ExportResult(website_id=creds.website_id, totals=dict(totals), pages=pages, rows=rows)
