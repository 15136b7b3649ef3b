from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from umami_export.errors import (
    AmbiguousAuthError,
    ConfigError,
    IncompleteCredentialsError,
    MissingAuthError,
)
from umami_export.http import SHARE_TOKEN_HEADER, UmamiClient


class AuthMode(str, Enum):
    SHARE = "share"
    TOKEN = "token"
    USERPASS = "userpass"


@dataclass(frozen=True)
class AuthSpec:
    mode: AuthMode
    share_id: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    token: Optional[str] = None


@dataclass(frozen=True)
class Credentials:
    website_id: str
    headers: Mapping[str, str]


def resolve_auth(
    *,
    share_id: str | None = None,
    username: str | None = None,
    password: str | None = None,
    token: str | None = None,
) -> AuthSpec:
    """
    Pick exactly one auth mode. Empty strings count as absent.

    username OR password puts "userpass" in play, so a lone username is
    reported as incomplete rather than as missing auth.
    """
    present = [
        mode
        for mode, given in (
            (AuthMode.SHARE, bool(share_id)),
            (AuthMode.TOKEN, bool(token)),
            (AuthMode.USERPASS, bool(username) or bool(password)),
        )
        if given
    ]
    if not present:
        raise MissingAuthError(
            "Missing auth: provide --shareId OR --token OR --username/--password (or env vars)."
        )
    if len(present) > 1:
        raise AmbiguousAuthError(
            "Ambiguous auth: provide only one of --shareId, --token, or "
            "--username/--password (or env vars)."
        )

    mode = present[0]
    if mode is AuthMode.USERPASS and not (username and password):
        raise IncompleteCredentialsError(
            "Missing auth: --username and --password are both required "
            "(or UMAMI_USERNAME/UMAMI_PASSWORD)."
        )
    return AuthSpec(
        mode=mode,
        share_id=share_id or None,
        username=username or None,
        password=password or None,
        token=token or None,
    )


def _require_website_id(website_id: str | None) -> str:
    if not website_id:
        raise ConfigError("Missing websiteId: provide --websiteId or UMAMI_WEBSITE_ID.")
    return website_id


def _bearer(token: str) -> Mapping[str, str]:
    return MappingProxyType({"authorization": f"Bearer {token}"})


def _share(client: UmamiClient, spec: AuthSpec, website_id: str | None, log) -> Credentials:
    data = client.share(spec.share_id)
    share_website_id = data.get("websiteId")
    if website_id and share_website_id and website_id != share_website_id:
        # explicit websiteId wins, same as when they agree
        log(
            f"[auth] --websiteId {website_id} overrides share websiteId {share_website_id}"
        )
    effective = website_id or share_website_id
    if not effective:
        raise ConfigError(
            "Missing websiteId: provide --websiteId or use a shareId that returns websiteId."
        )
    return Credentials(
        website_id=str(effective),
        headers=MappingProxyType({SHARE_TOKEN_HEADER: str(data["token"])}),
    )


def _token(client: UmamiClient, spec: AuthSpec, website_id: str | None, log) -> Credentials:
    return Credentials(website_id=_require_website_id(website_id), headers=_bearer(spec.token))


def _userpass(client: UmamiClient, spec: AuthSpec, website_id: str | None, log) -> Credentials:
    data = client.login(spec.username, spec.password)
    return Credentials(
        website_id=_require_website_id(website_id), headers=_bearer(str(data["token"]))
    )


_EXCHANGERS = {
    AuthMode.SHARE: _share,
    AuthMode.TOKEN: _token,
    AuthMode.USERPASS: _userpass,
}


def exchange_credentials(
    client: UmamiClient,
    spec: AuthSpec,
    website_id: str | None = None,
    log: Callable[[str], None] = lambda msg: None,
) -> Credentials:
    """Turn a resolved AuthSpec into request headers plus the website to export."""
    return _EXCHANGERS[spec.mode](client, spec, website_id or None, log)
