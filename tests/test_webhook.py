import httpx
import pytest

from conftest import FakeNotifier, Recorder, switchbot_ok
from main import app
from sdk.switchbot import SwitchBotClient


@pytest.fixture
def notifier(monkeypatch):
    fake = FakeNotifier()
    monkeypatch.setattr("services.webhook.notifier", fake)
    monkeypatch.setattr("services.webhook.settings.TEMP_THRESHOLD", 10.0)
    return fake


@pytest.fixture
async def client():
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _event(event_type="changeReport", **context):
    return {"eventType": event_type, "eventVersion": "1", "context": context}


def _vendor(monkeypatch, *responses):
    recorder = Recorder(*responses)
    monkeypatch.setattr(
        "services.webhook.switchbot",
        SwitchBotClient(token="token", secret="secret", transport=recorder.transport),
    )
    return recorder


async def test_change_report_above_threshold_alerts(client, notifier):
    r = await client.post("/webhook", json=_event(deviceName="Living Room", temperature=12.5))

    assert r.status_code == 200
    assert r.content == b""
    assert len(notifier.sent) == 1
    assert "Living Room" in notifier.sent[0]
    assert "12.5" in notifier.sent[0]


async def test_repeated_events_each_alert(client, notifier):
    for _ in range(3):
        await client.post("/webhook", json=_event(deviceName="Hub", temperature=15))
    assert len(notifier.sent) == 3


async def test_missing_device_name_uses_generic_label(client, notifier):
    await client.post("/webhook", json=_event(temperature=30))
    assert "Unknown device" in notifier.sent[0]


@pytest.mark.parametrize(
    "payload",
    [
        _event(deviceName="Hub", temperature=10),
        _event(deviceName="Hub", temperature=3.2),
        _event("deviceStatusChange", deviceName="Hub", temperature=40),
        _event(deviceName="Hub"),
        {"context": {"temperature": 40}},
        {"eventType": "changeReport", "context": None},
        {"eventType": "changeReport", "context": {"temperature": "hot"}},
        [1, 2, 3],
    ],
)
async def test_irrelevant_events_are_ignored(client, notifier, payload):
    r = await client.post("/webhook", json=payload)
    assert r.status_code == 200
    assert notifier.sent == []


async def test_non_json_body_is_ignored(client, notifier):
    r = await client.post("/webhook", content=b"not json", headers={"Content-Type": "text/plain"})
    assert r.status_code == 200
    assert notifier.sent == []


async def test_failed_notification_still_returns_200(client, notifier):
    notifier.ok = False
    r = await client.post("/webhook", json=_event(temperature=50))
    assert r.status_code == 200
    assert len(notifier.sent) == 1


async def test_setup_registers_callback_url(client, monkeypatch):
    monkeypatch.setattr("services.webhook.settings.BASE_URL", "https://example.com")
    recorder = _vendor(monkeypatch, switchbot_ok())

    r = await client.get("/setup")

    assert r.status_code == 200
    assert "https://example.com/webhook" in r.text
    assert recorder.requests[0].url.path == "/v1.1/webhook/setupWebhook"
    assert recorder.json_body()["url"] == "https://example.com/webhook"
    assert recorder.json_body()["deviceList"] == "ALL"


async def test_setup_strips_trailing_slash(client, monkeypatch):
    monkeypatch.setattr("services.webhook.settings.BASE_URL", "https://example.com/")
    recorder = _vendor(monkeypatch, switchbot_ok())

    await client.get("/setup")
    assert recorder.json_body()["url"] == "https://example.com/webhook"


async def test_setup_vendor_rejection_returns_500(client, monkeypatch):
    monkeypatch.setattr("services.webhook.settings.BASE_URL", "https://example.com")
    _vendor(monkeypatch, httpx.Response(200, json={"statusCode": 190, "message": "url exists"}))

    r = await client.get("/setup")
    assert r.status_code == 500
    assert "url exists" not in r.text


async def test_setup_network_error_returns_500(client, monkeypatch):
    monkeypatch.setattr("services.webhook.settings.BASE_URL", "https://example.com")
    _vendor(monkeypatch, httpx.ConnectError("refused"))

    r = await client.get("/setup")
    assert r.status_code == 500


async def test_setup_without_base_url_returns_500(client, monkeypatch):
    monkeypatch.setattr("services.webhook.settings.BASE_URL", "")
    recorder = _vendor(monkeypatch, switchbot_ok())

    r = await client.get("/setup")
    assert r.status_code == 500
    assert recorder.requests == []


async def test_webhook_status(client, monkeypatch):
    _vendor(monkeypatch, switchbot_ok({"urls": ["https://example.com/webhook"]}))

    r = await client.get("/webhook/status")
    assert r.status_code == 200
    assert r.json() == {"urls": ["https://example.com/webhook"]}


async def test_webhook_status_failure(client, monkeypatch):
    _vendor(monkeypatch, httpx.Response(503))

    r = await client.get("/webhook/status")
    assert r.status_code == 500


async def test_event_payload_not_logged_at_info(client, notifier):
    from loguru import logger

    messages = []
    sink_id = logger.add(lambda m: messages.append(m.record["message"]), level="INFO")
    try:
        await client.post("/webhook", json=_event(deviceMac="AA:BB:CC:DD:EE:FF", temperature=5))
    finally:
        logger.remove(sink_id)

    assert "Webhook event received: changeReport" in messages
    assert not any("AA:BB:CC:DD:EE:FF" in m for m in messages)
