from __future__ import annotations
import json
from typing import Any, Dict, Mapping
from urllib.parse import quote

import requests

from umami_export.common.paging import Page, extract_rows
from umami_export.errors import AuthError, NotFound, ProtocolError, TransportError

SHARE_TOKEN_HEADER = "x-umami-share-token"


def normalize_base_url(raw: str | None) -> str:
    if not raw:
        return ""
    return str(raw).strip().rstrip("/")


class UmamiClient:
    """
    Thin wrapper over the Umami HTTP API.

    One attempt per call: any transport failure, non-2xx status or
    non-JSON body raises immediately.
    """

    def __init__(
        self,
        base_url: str,
        timeout_s: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = normalize_base_url(base_url)
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self.url(path)
        try:
            resp = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.exceptions.RequestException as e:
            full_url = requests.Request(method, url, params=kwargs.get("params")).prepare().url
            raise TransportError(f"Request failed: {full_url}\n{e}") from e

        if not resp.ok:
            msg = f"HTTP {resp.status_code} {resp.reason}\nURL: {resp.url}\nBody:\n{resp.text}"
            if resp.status_code in (401, 403):
                raise AuthError(msg, url=resp.url, status=resp.status_code, body=resp.text)
            if resp.status_code == 404:
                raise NotFound(msg, url=resp.url, status=resp.status_code, body=resp.text)
            raise ProtocolError(msg, url=resp.url, status=resp.status_code, body=resp.text)
        return resp

    @staticmethod
    def _json(resp: requests.Response) -> Any:
        text = resp.text
        try:
            return json.loads(text)
        except ValueError as e:
            raise ProtocolError(
                f"Invalid JSON response (status {resp.status_code}): {e}\nBody:\n{text}",
                url=resp.url,
                status=resp.status_code,
                body=text,
            ) from e

    def _request(self, method: str, path: str, **kwargs) -> Any:
        return self._json(self._send(method, path, **kwargs))

    def share(self, share_id: str) -> Dict[str, Any]:
        """
        GET /api/share/{shareId} -> {"token": ..., "websiteId": ...}
        """
        path = f"api/share/{quote(str(share_id), safe='')}"
        data = self._request("GET", path)
        if not isinstance(data, dict) or not data.get("token"):
            raise ProtocolError(f"Share response missing token: {self.url(path)}", url=self.url(path))
        return data

    def login(self, username: str, password: str) -> Dict[str, Any]:
        path = "api/auth/login"
        data = self._request("POST", path, json={"username": username, "password": password})
        if not isinstance(data, dict) or not data.get("token"):
            raise ProtocolError(f"Login response missing token: {self.url(path)}", url=self.url(path))
        return data

    def metrics_expanded(
        self,
        website_id: str,
        *,
        headers: Mapping[str, str],
        start_at: int | float,
        end_at: int | float,
        limit: int,
        offset: int,
    ) -> Page:
        """
        GET /api/websites/{websiteId}/metrics/expanded?type=path&...
        Returns the page's rows (possibly empty).
        """
        path = f"api/websites/{quote(str(website_id), safe='')}/metrics/expanded"
        params = {
            "type": "path",
            "startAt": start_at,
            "endAt": end_at,
            "limit": limit,
            "offset": offset,
        }
        resp = self._send("GET", path, params=params, headers=dict(headers))
        data = self._json(resp)
        rows = extract_rows(data)
        if rows is None:
            raise ProtocolError(
                "Unexpected response shape from metrics endpoint.\n"
                f"URL: {resp.url}\nBody:\n{json.dumps(data, indent=2)}",
                url=resp.url,
                status=resp.status_code,
                body=resp.text,
            )
        return rows
