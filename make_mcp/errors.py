from __future__ import annotations

import json
from typing import Any, Sequence


class MakeMCPError(RuntimeError):
    kind = "MakeMCPError"


class NotConfiguredError(MakeMCPError):
    kind = "NotConfigured"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "Make.com webhook URL is not configured. Set MAKE_WEBHOOK_URL in the .env file"
        )


class InvalidActionError(MakeMCPError):
    kind = "InvalidAction"

    def __init__(self, action: Any, allowed: Sequence[str]) -> None:
        self.action = action
        self.allowed = tuple(allowed)
        super().__init__(f"Invalid action type: {action}. Allowed types: {', '.join(self.allowed)}")


class InvalidArgumentsError(MakeMCPError):
    kind = "InvalidArguments"


class WebhookRequestFailed(MakeMCPError):
    kind = "WebhookRequestFailed"

    def __init__(self, status: int | str, status_text: str, body: Any) -> None:
        self.status = status
        self.status_text = status_text
        self.body = body
        super().__init__(
            f"HTTP request failed: {status} - {status_text}\n"
            f"Error details: {_describe_body(body)}\n"
            "Check the Make.com scenario status and webhook configuration"
        )


def _describe_body(body: Any) -> str:
    try:
        return json.dumps(body, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(body)
