from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, ValidationError

from core.config import settings
from core.logger import logger
from core.notifier import notifier
from sdk.switchbot import SwitchBotClient, SwitchBotError
from services.alerts import alert_message, exceeds

router = APIRouter()

switchbot = SwitchBotClient()

WEBHOOK_PATH = "/webhook"
UNKNOWN_DEVICE = "Unknown device"

# --- Schemas ---

class EventContext(BaseModel):
    model_config = ConfigDict(extra="allow")

    deviceName: Optional[str] = None
    deviceMac: Optional[str] = None
    deviceType: Optional[str] = None
    temperature: Optional[float] = None


class WebhookEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    eventType: Optional[str] = None
    context: EventContext = EventContext()


# --- Receiver ---

@router.post(WEBHOOK_PATH)
async def receive_event(request: Request, background_tasks: BackgroundTasks):
    # SwitchBot disables subscriptions that keep failing, so always answer 200
    try:
        event = WebhookEvent.model_validate(await request.json())
    except (ValueError, ValidationError) as e:
        logger.debug(f"Ignored malformed webhook payload: {e}")
        return Response(status_code=200)

    logger.info(f"Webhook event received: {event.eventType}")
    logger.debug(f"Webhook payload: {event.model_dump(exclude_none=True)}")

    temperature = event.context.temperature
    if event.eventType != "changeReport" or temperature is None:
        return Response(status_code=200)

    if exceeds(temperature, settings.TEMP_THRESHOLD):
        device_name = event.context.deviceName or UNKNOWN_DEVICE
        logger.warning(f"Threshold exceeded on {device_name}: {temperature}°C")
        background_tasks.add_task(
            notifier.send, alert_message(device_name, temperature, settings.TEMP_THRESHOLD)
        )

    return Response(status_code=200)


# --- Registrar ---

@router.get("/setup", response_class=PlainTextResponse)
async def setup_webhook():
    if not settings.BASE_URL:
        logger.error("BASE_URL is not set. Cannot register webhook.")
        return PlainTextResponse("Failed to set up webhook.", status_code=500)

    callback_url = settings.BASE_URL.rstrip("/") + WEBHOOK_PATH
    try:
        await switchbot.setup_webhook(callback_url)
    except SwitchBotError as e:
        logger.error(f"Webhook setup failed: {e}")
        return PlainTextResponse("Failed to set up webhook.", status_code=500)

    logger.info(f"Webhook registered: {callback_url}")
    return PlainTextResponse(f"Webhook successfully registered to: {callback_url}")


@router.get(WEBHOOK_PATH + "/status")
async def webhook_status():
    try:
        urls = await switchbot.query_webhook()
    except SwitchBotError as e:
        logger.error(f"Webhook query failed: {e}")
        return JSONResponse({"error": "Failed to query webhook."}, status_code=500)
    return {"urls": urls}
