"""
MongoClient - Data API client.

Provides a PyMongo-style MongoClient interface whose operations are sent
as HTTP requests to a MongoDB Atlas Data API gateway.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Mapping

import httpx

from . import ejson
from .auth import ApiKeyAuth, coerce_credential, resolve_headers
from .database import Database
from .gateway import DATA_API, Gateway
from .types import ConfigurationError, OperationFailure

__all__ = ["MongoClient"]

logger = logging.getLogger(__name__)


class MongoClient:
    """
    Data API client.

    Provides a PyMongo-style API on top of the Atlas Data API. Databases
    can be accessed using the ``database`` method, attribute access, or
    subscript notation. Handles are created on every access and carry no
    state beyond their names.

    Example:
        # Create client
        client = MongoClient(
            "Cluster0",
            auth={"apiKey": "..."},
            endpoint="https://data.mongodb-api.com/app/data-abcde/endpoint/data/v1",
        )

        # Access databases
        db = client.database("myapp")
        db = client["myapp"]
        db = client.myapp

        # Older per-application gateway
        client = MongoClient("Cluster0", app_id="data-abcde", api_key="...")

        # Close the owned HTTP client
        await client.close()

        # Or use as async context manager
        async with MongoClient("Cluster0", auth=..., endpoint=...) as client:
            db = client["myapp"]
            ...
    """

    __slots__ = (
        "_data_source",
        "_endpoint",
        "_gateway",
        "_headers",
        "_http",
        "_owns_http",
        "_relaxed",
    )

    def __init__(
        self,
        data_source: str,
        auth: Any = None,
        endpoint: str | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        gateway: Gateway | None = None,
        app_id: str | None = None,
        api_key: str | None = None,
        timeout: float = 30.0,
        relaxed: bool = True,
    ) -> None:
        """
        Initialize the client.

        Args:
            data_source: Name of the linked cluster or data source.
            auth: Credential: an ``ApiKeyAuth``, ``CustomJwtAuth`` or
                  ``EmailPasswordAuth``, or a mapping such as
                  ``{"apiKey": ...}``.
            endpoint: Base URL of the Data API. Optional only when the
                      gateway has a default endpoint.
            http_client: ``httpx.AsyncClient`` used to send requests. When
                         omitted the client creates and owns one.
            gateway: Gateway strategy (default: ``DATA_API``).
            app_id: App ID for the per-application gateway. Selects
                    ``Gateway.app_endpoint(app_id)`` unless ``gateway``
                    is also given.
            api_key: Shorthand for ``auth=ApiKeyAuth(api_key)``.
            timeout: Timeout in seconds for an owned HTTP client.
            relaxed: Send relaxed rather than canonical extended JSON.

        Raises:
            ConfigurationError: If the credential or endpoint is unusable.
        """
        if api_key is not None:
            if auth is not None:
                raise ConfigurationError("Pass either auth or api_key, not both")
            auth = ApiKeyAuth(api_key)

        if gateway is None:
            gateway = Gateway.app_endpoint(app_id) if app_id else DATA_API

        credential = coerce_credential(auth)
        self._headers = resolve_headers(credential, gateway)

        endpoint = endpoint or gateway.default_endpoint
        if not endpoint:
            raise ConfigurationError("An endpoint is required for this gateway")

        self._data_source = data_source
        self._endpoint = endpoint.rstrip("/")
        self._gateway = gateway
        self._relaxed = relaxed

        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)

    @property
    def data_source(self) -> str:
        """Get the data source name."""
        return self._data_source

    @property
    def endpoint(self) -> str:
        """Get the Data API endpoint."""
        return self._endpoint

    @property
    def gateway(self) -> Gateway:
        """Get the gateway strategy."""
        return self._gateway

    @property
    def headers(self) -> Mapping[str, str]:
        """Get the (read-only) headers sent with every request."""
        return self._headers

    @property
    def relaxed(self) -> bool:
        """Whether requests use relaxed extended JSON."""
        return self._relaxed

    async def call_api(self, action: str, envelope: Mapping[str, Any]) -> Any:
        """
        Invoke a Data API action.

        Sends one POST request; nothing is retried.

        Args:
            action: Action name, e.g. ``"insertOne"``.
            envelope: Request body, including the addressing fields.

        Returns:
            The decoded response body.

        Raises:
            OperationFailure: If the gateway answers with a non-2xx status.
            EJSONDecodeError: If the response body is not extended JSON.
            httpx.HTTPError: If the request could not be sent.
        """
        url = self._gateway.url(self._endpoint, action)
        request = self._http.build_request(
            "POST",
            url,
            headers=dict(self._headers),
            content=ejson.encode(envelope, relaxed=self._relaxed),
        )

        logger.debug("Data API %s -> %s", action, url)
        response = await self._http.send(request)
        body = response.text

        if not response.is_success:
            logger.warning("Data API %s failed with status %d", action, response.status_code)
            raise OperationFailure(response.reason_phrase, body, response.status_code)

        return ejson.decode(body)

    def database(self, name: str) -> Database:
        """
        Get a database handle.

        Args:
            name: Database name.

        Returns:
            Database instance.

        Example:
            db = client.database("myapp")
        """
        return Database(self, name)

    def __getitem__(self, name: str) -> Database:
        """
        Get a database by name using subscript notation.

        Example:
            db = client["myapp"]
        """
        return self.database(name)

    def __getattr__(self, name: str) -> Database:
        """
        Get a database by name using attribute access.

        Example:
            db = client.myapp
        """
        if name.startswith("_"):
            raise AttributeError(f"'{type(self).__name__}' has no attribute '{name}'")

        return self.database(name)

    def get_database(self, name: str) -> Database:
        """Get a database by name."""
        return self.database(name)

    async def close(self) -> None:
        """Close the HTTP client if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> MongoClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    def __repr__(self) -> str:
        return f"MongoClient({self._data_source!r}, endpoint={self._endpoint!r})"
