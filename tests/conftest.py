import json

import httpx
import pytest


class FakeNotifier:
    def __init__(self, ok: bool = True):
        self.ok = ok
        self.sent = []

    async def send(self, message: str) -> bool:
        self.sent.append(message)
        return self.ok


class Recorder:
    """httpx MockTransport handler that records requests and replays canned responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    def json_body(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def switchbot_ok(body=None) -> httpx.Response:
    return httpx.Response(200, json={"statusCode": 100, "body": body or {}, "message": "success"})


@pytest.fixture
def fake_notifier():
    return FakeNotifier()
