from __future__ import annotations
import json
import os
from typing import Dict

import boto3
from botocore.exceptions import ClientError

from umami_export.errors import ConfigError

# secret key aliases -> env var
_SECRET_FIELDS = {
    "UMAMI_TOKEN": ("UMAMI_TOKEN", "token"),
    "UMAMI_SHARE_ID": ("UMAMI_SHARE_ID", "share_id"),
    "UMAMI_USERNAME": ("UMAMI_USERNAME", "username"),
    "UMAMI_PASSWORD": ("UMAMI_PASSWORD", "password"),
    "UMAMI_WEBSITE_ID": ("UMAMI_WEBSITE_ID", "website_id"),
}


def load_umami_secret() -> Dict[str, str]:
    """
    Returns {ENV_NAME: value} for the Umami credentials held in Secrets
    Manager under UMAMI_SECRET_ARN. No ARN -> {} (plain env is used).
    A non-JSON secret is taken as a bare API token.
    """
    arn = os.getenv("UMAMI_SECRET_ARN")
    if not arn:
        return {}

    sm = boto3.client("secretsmanager")
    try:
        resp = sm.get_secret_value(SecretId=arn)
    except ClientError as e:
        msg = e.response.get("Error", {}).get("Message", str(e))
        raise ConfigError(f"Failed to read secret {arn}: {msg}") from e

    secret = (resp.get("SecretString") or "").strip()
    if not secret:
        raise ConfigError(f"Secret {arn} is empty")
    try:
        obj = json.loads(secret)
    except json.JSONDecodeError:
        return {"UMAMI_TOKEN": secret}
    if not isinstance(obj, dict):
        raise ConfigError(f"Secret {arn} must be a JSON object or a bare token")

    out: Dict[str, str] = {}
    for env_name, aliases in _SECRET_FIELDS.items():
        for alias in aliases:
            val = obj.get(alias)
            if val:
                out[env_name] = str(val)
                break
    return out


def merge_umami_secret_into_env(secret: Dict[str, str]) -> None:
    # real env wins over the secret
    for env_name, val in secret.items():
        os.environ.setdefault(env_name, val)
