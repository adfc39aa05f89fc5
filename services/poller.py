from core.config import settings
from core.logger import logger
from core.notifier import WebexNotifier, notifier as default_notifier
from sdk.switchbot import SwitchBotClient, SwitchBotError
from services.alerts import alert_message, exceeds, recovery_message


class TemperaturePoller:
    """
    Polls one device and notifies on threshold transitions.

    `alerting` is True while an alert has been delivered without a later recovery.
    It only changes after the matching notification was sent, so a failed send is
    retried on the next cycle. Resets to False on restart.
    """

    def __init__(
        self,
        client: SwitchBotClient = None,
        notifier: WebexNotifier = None,
        device_id: str = None,
        device_name: str = None,
        threshold: float = None,
    ):
        self.client = client or SwitchBotClient()
        self.notifier = notifier or default_notifier
        self.device_id = device_id if device_id is not None else settings.DEVICE_ID
        self.device_name = device_name or settings.DEVICE_NAME
        self.threshold = threshold if threshold is not None else settings.TEMP_THRESHOLD
        self.alerting = False

    async def check(self):
        """Run one poll cycle."""
        if not self.client.configured or not self.device_id:
            logger.error("Error: SWITCHBOT_TOKEN, SWITCHBOT_SECRET or DEVICE_ID is not set.")
            return

        logger.info(f"Checking device status for ID: {self.device_id}...")
        try:
            status = await self.client.get_device_status(self.device_id)
        except SwitchBotError as e:
            logger.error(f"Error checking device status: {e}")
            return

        temperature = status.get("temperature")
        if not isinstance(temperature, (int, float)) or isinstance(temperature, bool):
            logger.error(f"Device status has no temperature: {status}")
            return

        logger.info(f"Current temperature is: {temperature}°C")
        await self.evaluate(temperature)

    async def evaluate(self, temperature: float):
        if exceeds(temperature, self.threshold) and not self.alerting:
            logger.warning(f"Threshold exceeded ({temperature}°C > {self.threshold}°C). Sending alert.")
            message = alert_message(self.device_name, temperature, self.threshold)
            if await self.notifier.send(message):
                self.alerting = True
            else:
                logger.error("Alert not delivered, will retry on next cycle.")

        elif not exceeds(temperature, self.threshold) and self.alerting:
            logger.info("Temperature is back to normal. Sending recovery notice.")
            message = recovery_message(self.device_name, temperature)
            if await self.notifier.send(message):
                self.alerting = False
            else:
                logger.error("Recovery notice not delivered, will retry on next cycle.")


poller = TemperaturePoller()
