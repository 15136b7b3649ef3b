from __future__ import annotations
from typing import Any, Dict

from umami_export.common.dates import yesterday_window_ms
from umami_export.common.output import write_totals
from umami_export.common.secrets import load_umami_secret, merge_umami_secret_into_env
from umami_export.pipeline import export_path_visitors
from umami_export.settings import Settings


def handler(event, context) -> Dict[str, Any]:
    """
    EventBridge (cron) -> this Lambda -> JSON totals in S3.

    Event keys (all optional): startAt, endAt, websiteId, limit, out.
    Without a window, yesterday (UTC) is exported.
    """
    event = event or {}
    secret = load_umami_secret()
    merge_umami_secret_into_env(secret)

    # Short-circuit for CI smoke tests
    if event.get("smoke_test"):
        print("[umami-export] Smoke test mode: skipping export.")
        return {"ok": True, "smoke_test": True}

    overrides = dict(event)
    default_start, default_end = yesterday_window_ms()
    if overrides.get("startAt") in (None, ""):
        overrides["startAt"] = default_start
    if overrides.get("endAt") in (None, ""):
        overrides["endAt"] = default_end

    cfg = Settings.from_env().with_overrides(overrides)
    result = export_path_visitors(cfg, log=print)
    dest = write_totals(result.totals, cfg.out)
    print(f"[umami-export] Wrote {len(result.totals)} paths to {dest}")

    return {
        "startAt": cfg.start_at,
        "endAt": cfg.end_at,
        "websiteId": result.website_id,
        "paths": len(result.totals),
        "visitors": sum(result.totals.values()),
        "out": dest,
    }
