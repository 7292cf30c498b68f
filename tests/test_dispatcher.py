import httpx
import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from conftest import FakeWebhook
from make_mcp.dispatcher import ToolDispatcher
from make_mcp.schemas import ARGUMENT_MODELS
from make_mcp.webhook import WebhookInvoker

TOOL_ORDER = ["trigger_make_scenario", "get_scenario_status", "test_webhook_connection"]


def _dispatcher(config, webhook):
    return ToolDispatcher(config, WebhookInvoker(config, transport=webhook.transport))


def test_list_tools_fixed_order(config, empty_config):
    for cfg in (config, empty_config):
        tools = ToolDispatcher(cfg).list_tools()
        assert [tool.name for tool in tools] == TOOL_ORDER


def test_trigger_schema_lists_actions(config):
    trigger = ToolDispatcher(config).list_tools()[0]
    assert trigger.inputSchema["required"] == ["action"]
    assert trigger.inputSchema["properties"]["action"]["enum"] == [
        "create_task",
        "send_notification",
        "process_data",
        "custom",
    ]


@pytest.mark.anyio
async def test_unknown_tool(config):
    with pytest.raises(McpError) as exc_info:
        await ToolDispatcher(config).call_tool("launch_rocket", {})
    assert exc_info.value.error.code == types.METHOD_NOT_FOUND
    assert "launch_rocket" in exc_info.value.error.message


@pytest.mark.anyio
async def test_trigger_returns_summary(config):
    webhook = FakeWebhook(httpx.Response(200, json={"executionId": "abc"}))
    content = await _dispatcher(config, webhook).call_tool(
        "trigger_make_scenario", {"action": "create_task", "data": {"title": "t"}}
    )

    assert len(content) == 1
    assert content[0].type == "text"
    assert "abc" in content[0].text
    assert "200" in content[0].text


@pytest.mark.anyio
async def test_trigger_unconfigured(empty_config):
    webhook = FakeWebhook()
    with pytest.raises(McpError) as exc_info:
        await _dispatcher(empty_config, webhook).call_tool(
            "trigger_make_scenario", {"action": "create_task"}
        )

    error = exc_info.value.error
    assert error.code == types.INTERNAL_ERROR
    assert error.data["kind"] == "NotConfigured"
    assert "MAKE_WEBHOOK_URL" in error.message
    assert webhook.requests == []


@pytest.mark.anyio
async def test_trigger_invalid_action(config):
    webhook = FakeWebhook()
    with pytest.raises(McpError) as exc_info:
        await _dispatcher(config, webhook).call_tool("trigger_make_scenario", {"action": "nuke"})

    error = exc_info.value.error
    assert error.code == types.INTERNAL_ERROR
    assert error.data["kind"] == "InvalidAction"
    assert "send_notification" in error.message
    assert webhook.requests == []


@pytest.mark.anyio
async def test_trigger_missing_action(config):
    webhook = FakeWebhook()
    with pytest.raises(McpError) as exc_info:
        await _dispatcher(config, webhook).call_tool("trigger_make_scenario", {"data": {}})

    assert exc_info.value.error.data["kind"] == "InvalidArguments"
    assert "action" in exc_info.value.error.message
    assert webhook.requests == []


@pytest.mark.anyio
async def test_trigger_server_error(config):
    webhook = FakeWebhook(httpx.Response(500, text="scenario exploded"))
    with pytest.raises(McpError) as exc_info:
        await _dispatcher(config, webhook).call_tool("trigger_make_scenario", {"action": "custom"})

    error = exc_info.value.error
    assert error.code == types.INTERNAL_ERROR
    assert error.data["kind"] == "WebhookRequestFailed"
    assert error.message.startswith("Tool execution failed:")
    assert "500" in error.message
    assert "scenario exploded" in error.message
    assert len(webhook.requests) == 1


@pytest.mark.anyio
async def test_trigger_partial_success(config):
    webhook = FakeWebhook(httpx.Response(404))
    content = await _dispatcher(config, webhook).call_tool(
        "trigger_make_scenario", {"action": "process_data"}
    )
    assert "Partial success" in content[0].text
    assert "404" in content[0].text


@pytest.mark.anyio
async def test_status_is_placeholder(config):
    webhook = FakeWebhook()
    content = await _dispatcher(config, webhook).call_tool(
        "get_scenario_status", {"execution_id": "exec-123"}
    )
    assert "exec-123" in content[0].text
    assert "dashboard" in content[0].text
    assert webhook.requests == []


@pytest.mark.anyio
async def test_status_requires_execution_id(config):
    with pytest.raises(McpError) as exc_info:
        await ToolDispatcher(config).call_tool("get_scenario_status", {})
    assert exc_info.value.error.data["kind"] == "InvalidArguments"


@pytest.mark.anyio
async def test_connection_unconfigured(empty_config):
    webhook = FakeWebhook()
    content = await _dispatcher(empty_config, webhook).call_tool("test_webhook_connection", {})
    assert "not configured" in content[0].text
    assert webhook.requests == []


@pytest.mark.anyio
async def test_connection_failure_is_content(config):
    webhook = FakeWebhook(httpx.Response(503))
    content = await _dispatcher(config, webhook).call_tool("test_webhook_connection", None)

    assert "failed" in content[0].text
    assert "503" in content[0].text
    assert len(webhook.requests) == 1


@pytest.mark.anyio
async def test_connection_timeout_is_content(config):
    webhook = FakeWebhook(httpx.ConnectTimeout("timed out"))
    content = await _dispatcher(config, webhook).call_tool("test_webhook_connection", {})
    assert "failed" in content[0].text


@pytest.mark.anyio
async def test_connection_rejects_extra_arguments(config):
    with pytest.raises(McpError) as exc_info:
        await ToolDispatcher(config).call_tool("test_webhook_connection", {"url": "x"})
    assert exc_info.value.error.data["kind"] == "InvalidArguments"


def test_every_advertised_tool_has_argument_model(config):
    names = [tool.name for tool in ToolDispatcher(config).list_tools()]
    assert sorted(names) == sorted(ARGUMENT_MODELS)
