import base64
import hashlib
import hmac
import time
from typing import Optional

import httpx
from loguru import logger
from core.config import settings

SUCCESS_STATUS = 100


class SwitchBotError(Exception):
    """Raised when a SwitchBot API call fails or is rejected."""

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.detail = detail

    def __str__(self):
        base = super().__str__()
        if self.detail is not None:
            return f"{base}: {self.detail}"
        return base


def _body(payload: dict) -> dict:
    body = payload.get("body")
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise SwitchBotError("Response body is not an object", payload)
    return body


def sign(token: str, secret: str, t: int, nonce: str) -> str:
    """Base64 HMAC-SHA256 of token + t + nonce, keyed with the secret."""
    data = f"{token}{t}{nonce}".encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), msg=data, digestmod=hashlib.sha256).digest()
    return base64.b64encode(digest).decode("utf-8")


def build_headers(token: str, secret: str, nonce: str, t: Optional[int] = None) -> dict:
    """
    Authentication headers for a single request.
    t defaults to the current epoch time in milliseconds.
    """
    if t is None:
        t = int(time.time() * 1000)
    return {
        "Content-Type": "application/json; charset=utf8",
        "Authorization": token,
        "sign": sign(token, secret, t, nonce),
        "t": str(t),
        "nonce": nonce,
    }


class SwitchBotClient:
    def __init__(
        self,
        token: str = None,
        secret: str = None,
        api_url: str = None,
        nonce: str = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None,
    ):
        self.token = token if token is not None else settings.SWITCHBOT_TOKEN
        self.secret = secret if secret is not None else settings.SWITCHBOT_SECRET
        self.api_url = (api_url or settings.SWITCHBOT_API_URL).rstrip("/")
        self.nonce = nonce or settings.SWITCHBOT_NONCE
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.token and self.secret)

    async def _request(self, method: str, path: str, json: dict = None) -> dict:
        if not self.configured:
            raise SwitchBotError("SWITCHBOT_TOKEN or SWITCHBOT_SECRET is not set")

        headers = build_headers(self.token, self.secret, self.nonce)
        url = f"{self.api_url}{path}"

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.request(method, url, headers=headers, json=json)
            except httpx.HTTPError as e:
                raise SwitchBotError(f"{method} {path} failed", repr(e)) from e

        if resp.is_error:
            raise SwitchBotError(f"{method} {path} returned HTTP {resp.status_code}", resp.text)

        try:
            payload = resp.json()
        except ValueError as e:
            raise SwitchBotError(f"{method} {path} returned invalid JSON", resp.text) from e

        if not isinstance(payload, dict):
            raise SwitchBotError(f"{method} {path} returned an unexpected payload", payload)

        # The API answers HTTP 200 with its own status code in the envelope
        status = payload.get("statusCode")
        if status is not None and status != SUCCESS_STATUS:
            raise SwitchBotError(f"{method} {path} rejected with statusCode {status}", payload)

        logger.debug(f"{method} {path} -> {payload}")
        return payload

    async def get_device_status(self, device_id: str) -> dict:
        """Fetch the status body of a device (temperature, humidity, ...)."""
        payload = await self._request("GET", f"/v1.1/devices/{device_id}/status")
        return _body(payload)

    async def setup_webhook(self, url: str) -> dict:
        """Subscribe url to events from all devices."""
        return await self._request(
            "POST",
            "/v1.1/webhook/setupWebhook",
            json={"action": "setupWebhook", "url": url, "deviceList": "ALL"},
        )

    async def query_webhook(self) -> list:
        """List the webhook URLs currently registered for this account."""
        payload = await self._request(
            "POST",
            "/v1.1/webhook/queryWebhook",
            json={"action": "queryUrl"},
        )
        return _body(payload).get("urls", [])
