from __future__ import annotations
import json
import sys
from pathlib import Path
from typing import Any, Mapping, TextIO

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from umami_export.common.s3io import put_json_text, split_s3_uri
from umami_export.errors import ConfigError, OutputError


def render_totals(totals: Mapping[str, Any]) -> str:
    return json.dumps(dict(totals), ensure_ascii=False, indent=2) + "\n"


def write_totals(
    totals: Mapping[str, Any],
    out: str | None = None,
    *,
    stdout: TextIO | None = None,
    s3=None,
) -> str:
    """
    Write pretty JSON totals to stdout, s3://bucket/key or a local file.
    Returns where it went.
    """
    text = render_totals(totals)
    if not out:
        stream = stdout or sys.stdout
        stream.write(text)
        stream.flush()
        return "<stdout>"

    if out.startswith("s3://"):
        try:
            bucket, key = split_s3_uri(out)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        try:
            put_json_text(s3 or boto3.client("s3"), bucket=bucket, key=key, text=text)
        except (BotoCoreError, ClientError) as e:
            raise OutputError(f"Failed to write {out}: {e}") from e
        return out

    path = Path(out).resolve()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Failed to write {path}: {e}") from e
    return str(path)
