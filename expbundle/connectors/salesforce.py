"""HTTP client for the Salesforce REST and Tooling query APIs."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from expbundle.core.exceptions import ConfigurationError, QueryError

log = logging.getLogger(__name__)

DEFAULT_API_VERSION = "60.0"
DEFAULT_TIMEOUT_SECONDS = 30.0

USERINFO_PATH = "/services/oauth2/userinfo"


@dataclass(frozen=True)
class OrgSession:
    """Org values available to variable resolution."""

    org_id: str
    username: str
    instance_url: str


@dataclass(frozen=True)
class ConnectionSettings:
    """Settings needed to talk to an org.

    Attributes:
        instance_url: Base URL of the org, e.g. ``https://acme.my.salesforce.com``
        access_token: OAuth access token or session id
        api_version: REST API version without the ``v`` prefix
        username: Known username; looked up from userinfo when absent
        org_id: Known org id; looked up from userinfo when absent
        timeout: Per-request timeout in seconds
    """

    instance_url: str
    access_token: str
    api_version: str = DEFAULT_API_VERSION
    username: str | None = None
    org_id: str | None = None
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ConnectionSettings":
        """Build settings from a merged configuration mapping.

        Raises:
            ConfigurationError: If ``instance_url`` or ``access_token`` is missing
        """
        for key in ("instance_url", "access_token"):
            if not config.get(key):
                raise ConfigurationError(
                    f"Missing connection setting: {key}",
                    option=key,
                    reason="required to query the org",
                )

        return cls(
            instance_url=str(config["instance_url"]),
            access_token=str(config["access_token"]),
            api_version=str(config.get("api_version") or DEFAULT_API_VERSION).lstrip("v"),
            username=config.get("username"),
            org_id=config.get("org_id"),
            timeout=float(config.get("timeout") or DEFAULT_TIMEOUT_SECONDS),
        )

    @property
    def data_path(self) -> str:
        return f"/services/data/v{self.api_version}"


def _salesforce_error(response: httpx.Response) -> tuple[str | None, str | None]:
    """Extract ``(errorCode, message)`` from a Salesforce error body."""
    try:
        payload = response.json()
    except ValueError:
        return None, None

    # The REST API answers with a list of errors, OAuth endpoints with a dict
    if isinstance(payload, list) and payload and isinstance(payload[0], dict):
        payload = payload[0]
    if isinstance(payload, dict):
        error_code = payload.get("errorCode") or payload.get("error")
        message = payload.get("message") or payload.get("error_description")
        return error_code, message
    return None, None


class SalesforceClient:
    """Query client bound to a single org.

    Implements the QueryClient protocol and builds the OrgSession used for
    variable resolution. Use it as a context manager so the underlying
    ``httpx.Client`` is closed.

    Example:
        >>> settings = ConnectionSettings("https://acme.my.salesforce.com", token)
        >>> with SalesforceClient(settings) as client:
        ...     result = client.query("SELECT Id FROM Organization")
        ...     result["totalSize"]
        1
    """

    def __init__(
        self,
        settings: ConnectionSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self._client = httpx.Client(
            base_url=settings.instance_url,
            headers={
                "Authorization": f"Bearer {settings.access_token}",
                "Accept": "application/json",
            },
            timeout=settings.timeout,
            transport=transport,
        )

    def __enter__(self) -> "SalesforceClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def query(self, soql: str, use_tooling: bool = False) -> dict[str, Any]:
        """Run ``soql`` against the data API, or the Tooling API.

        Returns:
            The decoded query result (``totalSize``, ``done``, ``records``)

        Raises:
            QueryError: If the org rejects the query or cannot be reached
        """
        path = f"{self.settings.data_path}/tooling/query" if use_tooling else (
            f"{self.settings.data_path}/query"
        )
        payload = self._get_json(path, params={"q": soql}, query=soql, tooling=use_tooling)

        if not isinstance(payload, dict) or "totalSize" not in payload:
            raise QueryError(
                "Unexpected query response payload", query=soql, tooling=use_tooling
            )
        log.debug("Query returned %s record(s)", payload["totalSize"])
        return payload

    def session(self) -> OrgSession:
        """Return the org session, asking the userinfo endpoint for missing values.

        Raises:
            QueryError: If userinfo cannot be fetched or lacks the values
        """
        org_id = self.settings.org_id
        username = self.settings.username

        if org_id is None or username is None:
            info = self._get_json(USERINFO_PATH, endpoint="userinfo")
            if not isinstance(info, dict):
                raise QueryError("Unexpected userinfo response payload", endpoint="userinfo")
            org_id = org_id or info.get("organization_id")
            username = username or info.get("preferred_username")
            if not org_id or not username:
                raise QueryError(
                    "userinfo response is missing organization_id or preferred_username",
                    endpoint="userinfo",
                )

        return OrgSession(
            org_id=org_id,
            username=username,
            instance_url=self.settings.instance_url,
        )

    def _get_json(
        self,
        path: str,
        params: dict[str, str] | None = None,
        **error_context: Any,
    ) -> Any:
        try:
            response = self._client.get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error_code, message = _salesforce_error(e.response)
            raise QueryError(
                message or f"Org returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                error_code=error_code,
                **error_context,
            ) from e
        except httpx.HTTPError as e:
            raise QueryError(f"Cannot reach org: {e}", **error_context) from e

        try:
            return response.json()
        except ValueError as e:
            raise QueryError("Org returned a non-JSON response", **error_context) from e
