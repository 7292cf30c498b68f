from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from mcp import types
from mcp.shared.exceptions import McpError

from .config import AppConfig
from .errors import MakeMCPError
from .schemas import (
    ConnectionTestArguments,
    ScenarioStatusArguments,
    TriggerScenarioArguments,
    parse_arguments,
)
from .tools import SCENARIO_STATUS, TEST_CONNECTION, TOOL_DEFINITIONS, TRIGGER_SCENARIO
from .webhook import WebhookInvoker, render_connection_check, render_outcome

logger = logging.getLogger(__name__)

Content = List[types.TextContent]


def _text(text: str) -> Content:
    return [types.TextContent(type="text", text=text)]


class ToolDispatcher:
    """Routes MCP tool calls to their handlers.

    Every handler failure leaves as an ``McpError`` with ``INTERNAL_ERROR``;
    the original error kind is kept in ``ErrorData.data["kind"]``.
    """

    def __init__(self, config: AppConfig, invoker: Optional[WebhookInvoker] = None) -> None:
        self.config = config
        self.invoker = invoker or WebhookInvoker(config)
        self._handlers: Dict[str, Callable[[Any], Awaitable[Content]]] = {
            TRIGGER_SCENARIO: self._trigger_scenario,
            SCENARIO_STATUS: self._scenario_status,
            TEST_CONNECTION: self._test_connection,
        }

    def list_tools(self) -> List[types.Tool]:
        return list(TOOL_DEFINITIONS)

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Content:
        handler = self._handlers.get(name)
        if handler is None:
            raise McpError(
                types.ErrorData(code=types.METHOD_NOT_FOUND, message=f"Unknown tool: {name}")
            )
        try:
            return await handler(parse_arguments(name, arguments))
        except MakeMCPError as exc:
            logger.warning("Tool %s failed (%s): %s", name, exc.kind, exc)
            raise self._internal_error(name, exc.kind, str(exc)) from exc
        except Exception as exc:
            logger.exception("Tool %s raised an unexpected error", name)
            raise self._internal_error(name, "InternalError", str(exc) or "Unknown error") from exc

    @staticmethod
    def _internal_error(tool: str, kind: str, message: str) -> McpError:
        return McpError(
            types.ErrorData(
                code=types.INTERNAL_ERROR,
                message=f"Tool execution failed: {message}",
                data={"kind": kind, "tool": tool},
            )
        )

    async def _trigger_scenario(self, args: TriggerScenarioArguments) -> Content:
        outcome = await self.invoker.invoke(args.action, args.data)
        return _text(render_outcome(outcome))

    async def _scenario_status(self, args: ScenarioStatusArguments) -> Content:
        # Placeholder: no Make.com API integration, the text never reflects real state.
        return _text(
            "📊 Scenario status lookup\n"
            f"Execution ID: {args.execution_id}\n"
            "Status: this feature requires Make.com API access to be configured\n"
            "Tip: visit the Make.com dashboard for detailed execution status"
        )

    async def _test_connection(self, args: ConnectionTestArguments) -> Content:
        check = await self.invoker.check_connection()
        return _text(render_connection_check(check))
