from __future__ import annotations

import logging
import secrets
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

import anyio
import httpx

from .config import AppConfig
from .errors import InvalidActionError, MakeMCPError, NotConfiguredError, WebhookRequestFailed

logger = logging.getLogger(__name__)

ALLOWED_ACTIONS = ("create_task", "send_notification", "process_data", "custom")

SOURCE = "claude-mcp"
TEST_SOURCE = "claude-mcp-test"
USER_AGENT = "Claude-MCP-Server/1.0.0"
INVOKE_TIMEOUT = 30.0
TEST_TIMEOUT = 10.0
RETRY_BASE_DELAY_MS = 1000
NOT_AVAILABLE = "N/A"
NO_ERROR_INFO = "No additional error info"

_BASE36 = string.digits + string.ascii_lowercase

Sleep = Callable[[float], Awaitable[Any]]


def validate_action(action: Any) -> None:
    if action not in ALLOWED_ACTIONS:
        raise InvalidActionError(action, ALLOWED_ACTIONS)


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_request_id() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"mcp-{int(time.time() * 1000)}-{suffix}"


@dataclass(frozen=True)
class ScenarioPayload:
    action: str
    data: Dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=utc_timestamp)
    source: str = SOURCE
    request_id: Optional[str] = None

    @classmethod
    def for_action(cls, action: str, data: Optional[Dict[str, Any]] = None) -> "ScenarioPayload":
        return cls(action=action, data=dict(data or {}), request_id=new_request_id())

    @classmethod
    def connection_test(cls) -> "ScenarioPayload":
        return cls(action="test_connection", data={"test": True}, source=TEST_SOURCE)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "action": self.action,
            "data": self.data,
            "timestamp": self.timestamp,
            "source": self.source,
        }
        if self.request_id is not None:
            payload["request_id"] = self.request_id
        return payload


@dataclass(frozen=True)
class InvocationOutcome:
    action: str
    http_status: int
    execution_id: str
    request_id: str
    timestamp: str

    @property
    def success(self) -> bool:
        return 200 <= self.http_status < 300


@dataclass(frozen=True)
class ConnectionCheck:
    configured: bool
    ok: bool = False
    status: Optional[int] = None
    status_text: str = ""
    error: Optional[str] = None
    checked_at: str = field(default_factory=utc_timestamp)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or NO_ERROR_INFO


def _execution_id(body: Any) -> str:
    if isinstance(body, dict):
        for key in ("executionId", "id"):
            value = body.get(key)
            if value:
                return str(value)
    return NOT_AVAILABLE


class WebhookInvoker:
    """POSTs scenario actions to the configured Make.com webhook."""

    def __init__(
        self,
        config: AppConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = anyio.sleep,
    ) -> None:
        self.config = config
        self._transport = transport
        self._sleep = sleep

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport, follow_redirects=True)

    async def invoke(self, action: str, data: Optional[Dict[str, Any]] = None) -> InvocationOutcome:
        if not self.config.webhook_configured:
            raise NotConfiguredError()
        validate_action(action)

        payload = ScenarioPayload.for_action(action, data)
        logger.info("Triggering scenario action=%s request_id=%s", action, payload.request_id)
        try:
            async with self._client(INVOKE_TIMEOUT) as client:
                response = await client.post(
                    self.config.webhook_url,
                    json=payload.to_dict(),
                    headers={"Content-Type": "application/json", "User-Agent": USER_AGENT},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Webhook request %s failed: %r", payload.request_id, exc)
            raise WebhookRequestFailed(NOT_AVAILABLE, "Unknown", NO_ERROR_INFO) from exc

        body = _response_body(response)
        if response.status_code >= 500:
            logger.error(
                "Webhook request %s failed with status %s", payload.request_id, response.status_code
            )
            raise WebhookRequestFailed(response.status_code, response.reason_phrase or "Unknown", body)

        outcome = InvocationOutcome(
            action=action,
            http_status=response.status_code,
            execution_id=_execution_id(body),
            request_id=payload.request_id or "",
            timestamp=payload.timestamp,
        )
        logger.info(
            "Scenario request %s answered status=%s execution_id=%s",
            outcome.request_id,
            outcome.http_status,
            outcome.execution_id,
        )
        return outcome

    async def invoke_with_retry(
        self, action: str, data: Optional[Dict[str, Any]] = None, max_retries: int = 3
    ) -> InvocationOutcome:
        """Invoke with exponential backoff: 1s, 2s, 4s, ... between attempts.

        The error of the final attempt is raised unchanged.
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        for attempt in range(max_retries):
            try:
                return await self.invoke(action, data)
            except MakeMCPError:
                if attempt == max_retries - 1:
                    raise
                delay_ms = RETRY_BASE_DELAY_MS * 2**attempt
                logger.warning("Attempt %d failed, retrying in %dms", attempt + 1, delay_ms)
                await self._sleep(delay_ms / 1000)
        # max_retries >= 1 means the last attempt always returns or re-raises.
        raise RuntimeError("retry loop exited without a result")

    async def check_connection(self) -> ConnectionCheck:
        if not self.config.webhook_configured:
            return ConnectionCheck(configured=False)

        payload = ScenarioPayload.connection_test()
        try:
            async with self._client(TEST_TIMEOUT) as client:
                response = await client.post(
                    self.config.webhook_url,
                    json=payload.to_dict(),
                    headers={"Content-Type": "application/json"},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Webhook connection test failed: %r", exc)
            return ConnectionCheck(configured=True, error=str(exc) or type(exc).__name__)

        check = ConnectionCheck(
            configured=True,
            ok=response.is_success,
            status=response.status_code,
            status_text=response.reason_phrase,
        )
        logger.info("Webhook connection test status=%s ok=%s", check.status, check.ok)
        return check


def render_outcome(outcome: InvocationOutcome) -> str:
    marker = "✅ Success" if outcome.success else "⚠️ Partial success"
    return (
        f"{marker}: Make scenario triggered\n"
        f"Action: {outcome.action}\n"
        f"Response status: {outcome.http_status}\n"
        f"Execution ID: {outcome.execution_id}\n"
        f"Request ID: {outcome.request_id}\n"
        f"Timestamp: {outcome.timestamp}"
    )


def render_connection_check(check: ConnectionCheck) -> str:
    if not check.configured:
        return "❌ Webhook URL is not configured\nSet MAKE_WEBHOOK_URL in the .env file"
    if check.ok:
        return (
            "✅ Webhook connection test succeeded\n"
            f"Response status: {check.status}\n"
            f"Response time: {check.checked_at}\n"
            "The Make.com scenario can receive data"
        )
    if check.status is None:
        reason = f"{NOT_AVAILABLE} - {check.error}"
    else:
        reason = f"{check.status} - {check.status_text}"
    return (
        "❌ Webhook connection test failed\n"
        f"Error: {reason}\n"
        "Please check:\n"
        "1. The webhook URL is correct\n"
        "2. The Make.com scenario is enabled\n"
        "3. The network connection is working"
    )
