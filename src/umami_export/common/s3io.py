from __future__ import annotations
from typing import Tuple


def split_s3_uri(uri: str) -> Tuple[str, str]:
    """s3://bucket/some/key.json -> ("bucket", "some/key.json")"""
    rest = uri[len("s3://") :]
    bucket, _, key = rest.partition("/")
    if not bucket or not key:
        raise ValueError(f"Expected s3://<bucket>/<key>, got: {uri}")
    return bucket, key


def put_json_text(s3, *, bucket: str, key: str, text: str) -> None:
    s3.put_object(
        Bucket=bucket,
        Key=key,
        Body=text.encode("utf-8"),
        ContentType="application/json",
    )
