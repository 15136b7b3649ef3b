import math
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Union

from umami_export.errors import ConfigError
from umami_export.http import normalize_base_url

DEFAULT_LIMIT = 500

Number = Union[int, float]


def _blank_to_none(val: Any) -> Optional[str]:
    if val is None:
        return None
    val = str(val)
    return val if val.strip() else None


def _pick(arg: Any, env_name: str) -> Optional[str]:
    """Explicit argument first, then the environment default."""
    val = _blank_to_none(arg)
    if val is not None:
        return val
    return _blank_to_none(os.getenv(env_name))


def parse_number(value: Any, name: str) -> Optional[Number]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigError(f"Invalid {name}: {value}")
    try:
        n = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {name}: {value}") from None
    if not math.isfinite(n):
        raise ConfigError(f"Invalid {name}: {value}")
    return int(n) if n.is_integer() else n


def parse_timeout(value: Any, name: str = "timeout") -> Optional[float]:
    n = parse_number(value, name)
    if n is None:
        return None
    if n <= 0:
        raise ConfigError(f"Invalid {name}: {value}")
    return float(n)


def parse_limit(value: Any) -> int:
    n = parse_number(value, "limit")
    if n is None:
        return DEFAULT_LIMIT
    if not isinstance(n, int) or n <= 0:
        raise ConfigError(f"Invalid limit: {value}")
    return n


@dataclass(frozen=True)
class Settings:
    base_url: str
    start_at: Optional[Number] = None
    end_at: Optional[Number] = None
    website_id: Optional[str] = None
    share_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None
    limit: int = DEFAULT_LIMIT
    out: Optional[str] = None
    request_timeout_s: Optional[float] = None

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            base_url=normalize_base_url(os.getenv("UMAMI_BASE_URL")),
            website_id=_pick(None, "UMAMI_WEBSITE_ID"),
            share_id=_pick(None, "UMAMI_SHARE_ID"),
            username=_pick(None, "UMAMI_USERNAME"),
            password=_pick(None, "UMAMI_PASSWORD"),
            token=_pick(None, "UMAMI_TOKEN"),
            limit=parse_limit(os.getenv("UMAMI_LIMIT")),
            out=_pick(None, "UMAMI_OUT"),
            request_timeout_s=parse_timeout(os.getenv("UMAMI_TIMEOUT_S"), "UMAMI_TIMEOUT_S"),
        )

    @staticmethod
    def from_args(args: Any) -> "Settings":
        """
        Build from an argparse namespace (attribute names are the snake_case
        of the --camelCase flags). Flags win over UMAMI_* env vars.
        """
        get = lambda name: getattr(args, name, None)  # noqa: E731
        limit = get("limit")
        timeout = get("timeout")
        if _blank_to_none(timeout) is None:
            timeout = os.getenv("UMAMI_TIMEOUT_S")
        return Settings(
            base_url=normalize_base_url(_pick(get("base_url"), "UMAMI_BASE_URL")),
            start_at=parse_number(get("start_at"), "startAt"),
            end_at=parse_number(get("end_at"), "endAt"),
            website_id=_pick(get("website_id"), "UMAMI_WEBSITE_ID"),
            share_id=_pick(get("share_id"), "UMAMI_SHARE_ID"),
            username=_pick(get("username"), "UMAMI_USERNAME"),
            password=_pick(get("password"), "UMAMI_PASSWORD"),
            token=_pick(get("token"), "UMAMI_TOKEN"),
            limit=parse_limit(limit if limit is not None else os.getenv("UMAMI_LIMIT")),
            out=_blank_to_none(get("out")),
            request_timeout_s=parse_timeout(timeout),
        )

    def with_overrides(self, overrides: Mapping[str, Any]) -> "Settings":
        """Overlay camelCase keys (Lambda event style) onto these settings."""
        changes = {}
        if _blank_to_none(overrides.get("startAt")) is not None:
            changes["start_at"] = parse_number(overrides["startAt"], "startAt")
        if _blank_to_none(overrides.get("endAt")) is not None:
            changes["end_at"] = parse_number(overrides["endAt"], "endAt")
        if _blank_to_none(overrides.get("limit")) is not None:
            changes["limit"] = parse_limit(overrides["limit"])
        for key, field in (("websiteId", "website_id"), ("out", "out")):
            val = _blank_to_none(overrides.get(key))
            if val is not None:
                changes[field] = val
        return replace(self, **changes)

    def validate(self) -> None:
        if not self.base_url:
            raise ConfigError("Missing --baseUrl (or UMAMI_BASE_URL).")
        if self.start_at is None:
            raise ConfigError("Missing --startAt <ms>.")
        if self.end_at is None:
            raise ConfigError("Missing --endAt <ms>.")
        if not isinstance(self.limit, int) or isinstance(self.limit, bool) or self.limit <= 0:
            raise ConfigError(f"Invalid limit: {self.limit}")
        if self.request_timeout_s is not None and self.request_timeout_s <= 0:
            raise ConfigError(f"Invalid timeout: {self.request_timeout_s}")
