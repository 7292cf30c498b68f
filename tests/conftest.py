from typing import List, Union

import httpx
import pytest

from make_mcp.config import AppConfig

WEBHOOK_URL = "https://hook.eu1.make.com/test-hook"


class FakeWebhook:
    """Scripted webhook endpoint; the last scripted reply repeats."""

    def __init__(self, *replies: Union[httpx.Response, Exception]) -> None:
        self.replies = list(replies) or [httpx.Response(200, json={})]
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return reply

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(webhook_url=WEBHOOK_URL)


@pytest.fixture
def empty_config() -> AppConfig:
    return AppConfig(webhook_url="")
