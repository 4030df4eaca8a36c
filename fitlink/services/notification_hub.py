"""Push notification relay through an Azure Notification Hub.

The hub fans a message out to every installation tagged ``user:{user_id}``.
Installations are created or replaced with ``PUT /installations/{id}``;
messages go to ``POST /messages`` with a platform-specific payload.

Reference: https://learn.microsoft.com/rest/api/notificationhubs/
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import time
import urllib.parse
from typing import Any

import httpx

from fitlink.config import Settings, get_settings
from fitlink.errors import NotificationDeliveryError
from fitlink.models.notifications import PushPlatform

logger = logging.getLogger("fitlink.notifications")

API_VERSION = "2015-01"

# Hub names for the installation "platform" field and the send format header.
_INSTALLATION_PLATFORM: dict[PushPlatform, str] = {
    PushPlatform.apns: "apns",
    PushPlatform.fcm: "gcm",
}
_SEND_FORMAT: dict[PushPlatform, str] = {
    PushPlatform.apns: "apple",
    PushPlatform.fcm: "gcm",
}


def user_tag(user_id: str) -> str:
    return f"user:{user_id}"


def build_payload(
    platform: PushPlatform, title: str, body: str, data: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Build the native payload the hub forwards to APNs or FCM."""
    extra = data or {}
    if platform is PushPlatform.apns:
        return {"aps": {"alert": {"title": title, "body": body}, "sound": "default"}, **extra}
    return {"notification": {"title": title, "body": body}, "data": extra}


class NotificationHubClient:
    """Thin REST client for one notification hub."""

    def __init__(
        self,
        namespace: str,
        hub_name: str,
        key_name: str,
        key: str,
        *,
        token_ttl_seconds: int = 3600,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            namespace:         Service Bus namespace (without domain).
            hub_name:          Notification hub name inside the namespace.
            key_name:          Shared access policy name.
            key:               Shared access policy key.
            token_ttl_seconds: Lifetime of each generated SAS token.
            http_client:       Optional pre-configured httpx client (for testing).
        """
        self.base_url = f"https://{namespace}.servicebus.windows.net/{hub_name}"
        self._key_name = key_name
        self._key = key
        self._token_ttl = token_ttl_seconds
        self._http_client = http_client

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, http_client: httpx.AsyncClient | None = None
    ) -> NotificationHubClient:
        s = settings or get_settings()
        return cls(
            s.notification_hub_namespace,
            s.notification_hub_name,
            s.notification_hub_key_name,
            s.notification_hub_key,
            token_ttl_seconds=s.notification_token_ttl_seconds,
            http_client=http_client,
        )

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def sas_token(self, now: float | None = None) -> str:
        """Generate a Shared Access Signature for the hub URL.

        The signature is an HMAC-SHA256 of ``{url-encoded uri}\\n{expiry}``
        keyed with the policy key, base64 encoded.
        """
        expiry = int((now if now is not None else time.time()) + self._token_ttl)
        encoded_uri = urllib.parse.quote(self.base_url.lower(), safe="")
        to_sign = f"{encoded_uri}\n{expiry}".encode()
        digest = hmac.new(self._key.encode(), to_sign, hashlib.sha256).digest()
        signature = urllib.parse.quote(base64.b64encode(digest).decode(), safe="")
        return (
            f"SharedAccessSignature sr={encoded_uri}&sig={signature}"
            f"&se={expiry}&skn={self._key_name}"
        )

    # ------------------------------------------------------------------
    # Installations
    # ------------------------------------------------------------------

    async def upsert_installation(
        self,
        installation_id: str,
        user_id: str,
        platform: PushPlatform,
        push_channel: str,
    ) -> None:
        body = {
            "installationId": installation_id,
            "platform": _INSTALLATION_PLATFORM[platform],
            "pushChannel": push_channel,
            "tags": [user_tag(user_id)],
        }
        await self._request(
            "PUT",
            f"/installations/{installation_id}",
            content=json.dumps(body),
            headers={"Content-Type": "application/json"},
        )
        logger.info("Registered %s installation %s for user %s", platform.value, installation_id, user_id)

    async def delete_installation(self, installation_id: str) -> None:
        await self._request("DELETE", f"/installations/{installation_id}")
        logger.info("Deleted installation %s", installation_id)

    # ------------------------------------------------------------------
    # Send
    # ------------------------------------------------------------------

    async def send_to_user(
        self,
        user_id: str,
        platform: PushPlatform,
        title: str,
        body: str,
        data: dict[str, Any] | None = None,
    ) -> str | None:
        """Send one notification to every ``platform`` installation of a user.

        Returns:
            The hub tracking id, if the hub returned one.
        """
        response = await self._request(
            "POST",
            "/messages/",
            content=json.dumps(build_payload(platform, title, body, data)),
            headers={
                "Content-Type": "application/json;charset=utf-8",
                "ServiceBusNotification-Format": _SEND_FORMAT[platform],
                "ServiceBusNotification-Tags": user_tag(user_id),
            },
        )
        tracking_id = response.headers.get("TrackingId")
        logger.info(
            "Sent %s notification to user %s (tracking_id=%s)",
            platform.value,
            user_id,
            tracking_id,
        )
        return tracking_id

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        content: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Make an authenticated request against the hub.

        Raises:
            NotificationDeliveryError: On transport failures or non-2xx responses.
        """
        url = f"{self.base_url}{path}"
        all_headers = {"Authorization": self.sas_token(), **(headers or {})}
        params = {"api-version": API_VERSION}

        try:
            if self._http_client:
                response = await self._http_client.request(
                    method, url, params=params, content=content, headers=all_headers
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.request(
                        method, url, params=params, content=content, headers=all_headers
                    )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Notification hub %s %s returned %s",
                method,
                path,
                exc.response.status_code,
            )
            raise NotificationDeliveryError(
                f"Notification hub returned {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            logger.error("Notification hub %s %s failed: %s", method, path, exc)
            raise NotificationDeliveryError("Notification hub unreachable") from exc
        return response
