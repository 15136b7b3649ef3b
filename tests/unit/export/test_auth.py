import itertools

import pytest
import responses
from responses import matchers

from umami_export.auth import AuthMode, exchange_credentials, resolve_auth
from umami_export.errors import (
    AmbiguousAuthError,
    ConfigError,
    IncompleteCredentialsError,
    MissingAuthError,
    ProtocolError,
)
from umami_export.http import UmamiClient

BASE = "https://a.example"

SHARE = {"share_id": "S1"}
TOKEN = {"token": "T"}
USERPASS = {"username": "u", "password": "p"}


@pytest.mark.parametrize(
    "inputs,mode",
    [(SHARE, AuthMode.SHARE), (TOKEN, AuthMode.TOKEN), (USERPASS, AuthMode.USERPASS)],
)
def test_exactly_one_mode_resolves(inputs, mode):
    spec = resolve_auth(**inputs)
    assert spec.mode is mode


def test_nothing_given_is_missing_auth():
    with pytest.raises(MissingAuthError):
        resolve_auth()


def test_empty_strings_count_as_absent():
    with pytest.raises(MissingAuthError):
        resolve_auth(share_id="", token="", username="", password="")
    assert resolve_auth(share_id="S1", token="").mode is AuthMode.SHARE


@pytest.mark.parametrize(
    "combo",
    [
        c
        for n in (2, 3)
        for c in itertools.combinations([SHARE, TOKEN, USERPASS, {"username": "u"}, {"password": "p"}], n)
        if not (set().union(*c) <= {"username", "password"})
    ],
)
def test_two_or_more_modes_are_ambiguous(combo):
    inputs = {}
    for part in combo:
        inputs.update(part)
    with pytest.raises(AmbiguousAuthError):
        resolve_auth(**inputs)


@pytest.mark.parametrize("inputs", [{"username": "u"}, {"password": "p"}])
def test_userpass_half_given_is_incomplete(inputs):
    with pytest.raises(IncompleteCredentialsError):
        resolve_auth(**inputs)


def test_all_auth_errors_are_config_errors():
    for cls in (MissingAuthError, AmbiguousAuthError, IncompleteCredentialsError):
        assert issubclass(cls, ConfigError)


@responses.activate
def test_share_uses_share_website_id_and_share_header():
    client = UmamiClient(BASE)
    responses.add(responses.GET, f"{BASE}/api/share/S1", json={"token": "ST", "websiteId": "W"})
    creds = exchange_credentials(client, resolve_auth(share_id="S1"))
    assert creds.website_id == "W"
    assert dict(creds.headers) == {"x-umami-share-token": "ST"}


@responses.activate
def test_share_explicit_website_id_wins_and_is_noted():
    client = UmamiClient(BASE)
    responses.add(responses.GET, f"{BASE}/api/share/S1", json={"token": "ST", "websiteId": "W"})
    lines = []
    creds = exchange_credentials(client, resolve_auth(share_id="S1"), "OTHER", log=lines.append)
    assert creds.website_id == "OTHER"
    assert any("overrides" in line for line in lines)


@responses.activate
def test_share_without_any_website_id_fails():
    client = UmamiClient(BASE)
    responses.add(responses.GET, f"{BASE}/api/share/S1", json={"token": "ST"})
    with pytest.raises(ConfigError, match="Missing websiteId"):
        exchange_credentials(client, resolve_auth(share_id="S1"))


@responses.activate
def test_share_without_token_fails():
    client = UmamiClient(BASE)
    responses.add(responses.GET, f"{BASE}/api/share/S1", json={"websiteId": "W"})
    with pytest.raises(ProtocolError):
        exchange_credentials(client, resolve_auth(share_id="S1"), "W")


@responses.activate
def test_token_mode_makes_no_request():
    client = UmamiClient(BASE)
    creds = exchange_credentials(client, resolve_auth(token="T"), "W")
    assert creds.website_id == "W"
    assert dict(creds.headers) == {"authorization": "Bearer T"}
    assert len(responses.calls) == 0


def test_token_mode_requires_website_id():
    with pytest.raises(ConfigError, match="Missing websiteId"):
        exchange_credentials(UmamiClient(BASE), resolve_auth(token="T"))


@responses.activate
def test_userpass_logs_in_for_bearer():
    client = UmamiClient(BASE)
    responses.add(
        responses.POST,
        f"{BASE}/api/auth/login",
        json={"token": "LT"},
        match=[matchers.json_params_matcher({"username": "u", "password": "p"})],
    )
    creds = exchange_credentials(client, resolve_auth(**USERPASS), "W")
    assert creds.website_id == "W"
    assert dict(creds.headers) == {"authorization": "Bearer LT"}


@responses.activate
def test_userpass_requires_website_id():
    client = UmamiClient(BASE)
    responses.add(responses.POST, f"{BASE}/api/auth/login", json={"token": "LT"})
    with pytest.raises(ConfigError, match="Missing websiteId"):
        exchange_credentials(client, resolve_auth(**USERPASS))


def test_credential_headers_are_read_only():
    creds = exchange_credentials(UmamiClient(BASE), resolve_auth(token="T"), "W")
    with pytest.raises(TypeError):
        creds.headers["authorization"] = "x"
