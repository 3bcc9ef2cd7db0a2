"""
Gateway strategies.

Data API generations differ in URL routing, media types and the
credentials they accept. A ``Gateway`` captures those differences so the
client has a single request path for all of them.
"""

from __future__ import annotations

from dataclasses import dataclass

from .auth import ApiKeyAuth, Credential, CustomJwtAuth, EmailPasswordAuth

__all__ = [
    "DATA_API",
    "DEFAULT_APP_ENDPOINT",
    "EJSON_MEDIA_TYPE",
    "JSON_MEDIA_TYPE",
    "Gateway",
]

EJSON_MEDIA_TYPE = "application/ejson"
JSON_MEDIA_TYPE = "application/json"
DEFAULT_APP_ENDPOINT = "https://data.mongodb-api.com"


@dataclass(frozen=True)
class Gateway:
    """
    Description of a Data API gateway.

    Attributes:
        route: Path appended to the endpoint; ``{action}`` is replaced
               with the action name.
        content_type: Media type of request bodies.
        accept: Media type requested for responses.
        credentials: Credential types the gateway accepts.
        default_endpoint: Endpoint used when the client is given none.
    """

    route: str = "action/{action}"
    content_type: str = EJSON_MEDIA_TYPE
    accept: str = EJSON_MEDIA_TYPE
    credentials: tuple[type, ...] = (ApiKeyAuth, CustomJwtAuth, EmailPasswordAuth)
    default_endpoint: str | None = None

    @classmethod
    def app_endpoint(cls, app_id: str, version: str = "beta") -> Gateway:
        """
        Gateway for the per-application Data API endpoint.

        This generation is addressed by App ID and only takes API keys.

        Args:
            app_id: Atlas App Services application ID.
            version: Data API version segment of the route.
        """
        return cls(
            route=f"app/{app_id}/endpoint/data/{version}/action/{{action}}",
            accept=JSON_MEDIA_TYPE,
            credentials=(ApiKeyAuth,),
            default_endpoint=DEFAULT_APP_ENDPOINT,
        )

    def accepts(self, credential: Credential) -> bool:
        """Check whether a credential can be used with this gateway."""
        return isinstance(credential, self.credentials)

    def url(self, endpoint: str, action: str) -> str:
        """Build the URL of an action."""
        return f"{endpoint.rstrip('/')}/{self.route.format(action=action)}"


DATA_API = Gateway()
