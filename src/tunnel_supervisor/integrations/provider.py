"""Remote tunnel provider: account, tunnel and DNS route management."""

import base64
import secrets
from types import TracebackType
from typing import Any, Protocol

import httpx
from pydantic import BaseModel

from ..common.exceptions import ConfigurationError, ExternalServiceError
from ..common.logging import get_logger
from ..config import DEFAULT_API_BASE_URL

logger = get_logger(__name__)

TUNNEL_SECRET_BYTES = 32
ROUTE_TARGET_SUFFIX = ".cfargotunnel.com"


class ProvisionedTunnel(BaseModel):
    """Identity and secret of a tunnel created at the provider."""

    remote_id: str
    secret: str
    account_id: str | None = None


class TunnelProvider(Protocol):
    """Operations the supervisor needs from the remote provider."""

    async def provision(self, name: str) -> ProvisionedTunnel:
        """Create a remote tunnel."""
        ...

    async def deprovision(self, remote_id: str) -> None:
        """Delete a remote tunnel."""
        ...

    async def create_route(self, zone_id: str, remote_id: str, hostname: str) -> None:
        """Point a hostname at a remote tunnel."""
        ...

    async def delete_route(self, zone_id: str, hostname: str) -> int:
        """Remove the DNS routes for a hostname."""
        ...


def generate_tunnel_secret() -> str:
    """32 random bytes, base64 encoded, as the tunnel binary expects."""
    return base64.b64encode(secrets.token_bytes(TUNNEL_SECRET_BYTES)).decode()


def format_error(error: Exception) -> str:
    """Extract the provider's error messages from a failed request."""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            errors = error.response.json().get("errors")
        except ValueError:
            errors = None
        if isinstance(errors, list) and errors:
            return ", ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
        return f"HTTP {error.response.status_code}"
    return str(error) or type(error).__name__


class CloudflareProvider:
    """Cloudflare API client for named tunnels and their DNS routes.

    Authenticates with an API token, or with an account email plus global API
    key. The account id is discovered from the first account visible to the
    credentials when it is not configured.
    """

    def __init__(
        self,
        account_id: str | None = None,
        api_token: str | None = None,
        api_email: str | None = None,
        api_key: str | None = None,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.account_id = account_id
        self._api_token = api_token
        self._api_email = api_email
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "CloudflareProvider":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        if self._api_token:
            return {"Authorization": f"Bearer {self._api_token}", "Content-Type": "application/json"}
        if self._api_key and self._api_email:
            return {
                "X-Auth-Email": self._api_email,
                "X-Auth-Key": self._api_key,
                "Content-Type": "application/json",
            }
        raise ConfigurationError("No valid provider credentials configured")

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the ``result`` of the API envelope.

        Raises:
            ExternalServiceError: On transport errors, HTTP errors or an
                unsuccessful envelope
        """
        try:
            response = await self._client.request(
                method, f"{self.base_url}{path}", headers=self._headers(), **kwargs
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalServiceError(format_error(e)) from e

        if not body.get("success", False):
            messages = ", ".join(str(e.get("message", e)) for e in body.get("errors") or [])
            raise ExternalServiceError(messages or "Request failed")
        return body.get("result")

    async def resolve_account_id(self) -> str:
        """Return the configured account id, discovering it if needed."""
        if self.account_id:
            return self.account_id

        try:
            accounts = await self._request("GET", "/accounts")
        except ExternalServiceError as e:
            raise ExternalServiceError(f"Failed to get account ID: {e}") from e
        if not accounts:
            raise ExternalServiceError("Failed to get account ID: No accounts found")

        self.account_id = accounts[0]["id"]
        logger.info("Resolved provider account", account_id=self.account_id)
        return self.account_id

    async def provision(self, name: str) -> ProvisionedTunnel:
        account_id = await self.resolve_account_id()
        secret = generate_tunnel_secret()

        logger.info("Creating remote tunnel", account_id=account_id, name=name)
        try:
            result = await self._request(
                "POST",
                f"/accounts/{account_id}/cfd_tunnel",
                json={"name": name, "tunnel_secret": secret},
            )
        except ExternalServiceError as e:
            raise ExternalServiceError(f"Failed to create tunnel: {e}") from e

        return ProvisionedTunnel(remote_id=result["id"], secret=secret, account_id=account_id)

    async def deprovision(self, remote_id: str) -> None:
        account_id = await self.resolve_account_id()
        try:
            await self._request("DELETE", f"/accounts/{account_id}/cfd_tunnel/{remote_id}")
        except ExternalServiceError as e:
            raise ExternalServiceError(f"Failed to delete tunnel: {e}") from e
        logger.info("Deleted remote tunnel", remote_id=remote_id)

    async def create_route(self, zone_id: str, remote_id: str, hostname: str) -> None:
        try:
            await self._request(
                "POST",
                f"/zones/{zone_id}/dns_records",
                json={
                    "type": "CNAME",
                    "name": hostname,
                    "content": f"{remote_id}{ROUTE_TARGET_SUFFIX}",
                    "proxied": True,
                },
            )
        except ExternalServiceError as e:
            raise ExternalServiceError(f"Failed to create DNS record: {e}") from e
        logger.info("DNS record created", hostname=hostname, zone_id=zone_id)

    async def delete_route(self, zone_id: str, hostname: str) -> int:
        """Delete the CNAME records routing ``hostname``.

        Returns:
            Number of deleted records
        """
        try:
            records = await self._request(
                "GET", f"/zones/{zone_id}/dns_records", params={"type": "CNAME", "name": hostname}
            )
            matching = [
                record
                for record in records or []
                if record.get("type") == "CNAME" and record.get("name") == hostname
            ]
            for record in matching:
                await self._request("DELETE", f"/zones/{zone_id}/dns_records/{record['id']}")
                logger.info("Deleted DNS record", name=record["name"], record_id=record["id"])
        except ExternalServiceError as e:
            raise ExternalServiceError(f"Failed to delete DNS record: {e}") from e

        if not matching:
            logger.info("No DNS record found", hostname=hostname, zone_id=zone_id)
        return len(matching)
