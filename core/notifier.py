import httpx
from core.config import settings
from core.logger import logger

class WebexNotifier:
    def __init__(self, url: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.url = url or settings.WEBEX_WEBHOOK_URL
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.transport = transport

    async def send(self, message: str) -> bool:
        """
        Post a markdown message to the Webex incoming webhook.
        Returns True when the webhook accepted it. Failures are logged, never raised.
        """
        if not self.url:
            logger.error("WEBEX_WEBHOOK_URL is not set. Notification skipped.")
            return False

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.post(self.url, json={"markdown": message})
                resp.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"Webex rejected notification ({e.response.status_code}): {e.response.text}")
                return False
            except httpx.HTTPError as e:
                logger.error(f"Failed to send Webex notification: {e!r}")
                return False

        logger.info("Webex notification sent.")
        return True

notifier = WebexNotifier()
