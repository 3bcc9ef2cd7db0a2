"""
Credentials and header resolution for the Data API.

A client is configured with exactly one credential. The credential is
resolved once, at construction, into the headers sent with every
request.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Union

from .types import ConfigurationError

if TYPE_CHECKING:
    from .gateway import Gateway

__all__ = [
    "ApiKeyAuth",
    "Credential",
    "CustomJwtAuth",
    "EmailPasswordAuth",
    "coerce_credential",
    "resolve_headers",
]


@dataclass(frozen=True)
class EmailPasswordAuth:
    """Authenticate as an Atlas App Services email/password user."""

    email: str
    password: str

    def __repr__(self) -> str:
        return f"EmailPasswordAuth(email={self.email!r}, password='***')"


@dataclass(frozen=True)
class ApiKeyAuth:
    """Authenticate with a Data API key."""

    api_key: str

    def __repr__(self) -> str:
        return "ApiKeyAuth(api_key='***')"


@dataclass(frozen=True)
class CustomJwtAuth:
    """Authenticate with a token issued by a custom JWT provider."""

    jwt_token_string: str

    def __repr__(self) -> str:
        return "CustomJwtAuth(jwt_token_string='***')"


Credential = Union[EmailPasswordAuth, ApiKeyAuth, CustomJwtAuth]


def _lookup(source: Any, *names: str) -> Any:
    """Return the first of ``names`` present on a mapping or object."""
    for name in names:
        if isinstance(source, Mapping):
            if name in source:
                return source[name]
        elif hasattr(source, name):
            return getattr(source, name)
    return None


def coerce_credential(auth: Any) -> Credential:
    """
    Turn a credential-shaped value into one of the credential types.

    Mappings and plain objects are accepted using either the wire field
    names (``apiKey``, ``jwtTokenString``, ``email``/``password``) or
    their snake_case equivalents. When several shapes match, the API key
    wins over the JWT, which wins over email/password.

    Args:
        auth: A credential instance, mapping, or object.

    Returns:
        The matching credential.

    Raises:
        ConfigurationError: If no credential shape matches.
    """
    if isinstance(auth, (EmailPasswordAuth, ApiKeyAuth, CustomJwtAuth)):
        return auth

    if auth is None:
        raise ConfigurationError("Invalid auth options")

    api_key = _lookup(auth, "apiKey", "api_key")
    if api_key is not None:
        return ApiKeyAuth(api_key)

    token = _lookup(auth, "jwtTokenString", "jwt_token_string")
    if token is not None:
        return CustomJwtAuth(token)

    email = _lookup(auth, "email")
    password = _lookup(auth, "password")
    if email is not None and password is not None:
        return EmailPasswordAuth(email, password)

    raise ConfigurationError("Invalid auth options")


def resolve_headers(credential: Credential, gateway: Gateway) -> Mapping[str, str]:
    """
    Build the request headers for a credential.

    Args:
        credential: The client's credential.
        gateway: Gateway the headers are for; decides the content types
                 and which credentials are acceptable.

    Returns:
        Read-only mapping of header names to values.

    Raises:
        ConfigurationError: If the gateway does not accept the credential.
    """
    if not gateway.accepts(credential):
        raise ConfigurationError(
            f"{type(credential).__name__} is not supported by this gateway"
        )

    headers = {
        "Content-Type": gateway.content_type,
        "Accept": gateway.accept,
    }

    if isinstance(credential, ApiKeyAuth):
        headers["api-key"] = credential.api_key
    elif isinstance(credential, CustomJwtAuth):
        headers["jwtTokenString"] = credential.jwt_token_string
    elif isinstance(credential, EmailPasswordAuth):
        headers["email"] = credential.email
        headers["password"] = credential.password
    else:
        raise ConfigurationError("Invalid auth options")

    return MappingProxyType(headers)
