from __future__ import annotations


class UmamiError(Exception): ...


class ConfigError(UmamiError): ...


class MissingAuthError(ConfigError): ...


class AmbiguousAuthError(ConfigError): ...


class IncompleteCredentialsError(ConfigError): ...


class TransportError(UmamiError): ...


class ProtocolError(UmamiError):
    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body


class AuthError(ProtocolError): ...


class NotFound(ProtocolError): ...


class OutputError(UmamiError): ...
