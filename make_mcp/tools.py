from __future__ import annotations

from typing import List

from mcp import types

from .webhook import ALLOWED_ACTIONS

TRIGGER_SCENARIO = "trigger_make_scenario"
SCENARIO_STATUS = "get_scenario_status"
TEST_CONNECTION = "test_webhook_connection"

TOOL_DEFINITIONS: List[types.Tool] = [
    types.Tool(
        name=TRIGGER_SCENARIO,
        description="Trigger a Make.com scenario to run the given action",
        inputSchema={
            "type": "object",
            "properties": {
                "action": {
                    "type": "string",
                    "description": "Action type to execute",
                    "enum": list(ALLOWED_ACTIONS),
                },
                "data": {
                    "type": "object",
                    "description": "Data passed to the scenario",
                    "additionalProperties": True,
                },
            },
            "required": ["action"],
        },
    ),
    types.Tool(
        name=SCENARIO_STATUS,
        description="Get the execution status of a Make.com scenario",
        inputSchema={
            "type": "object",
            "properties": {
                "execution_id": {
                    "type": "string",
                    "description": "Scenario execution ID",
                },
            },
            "required": ["execution_id"],
        },
    ),
    types.Tool(
        name=TEST_CONNECTION,
        description="Test the connection to the Make.com webhook",
        inputSchema={
            "type": "object",
            "properties": {},
            "additionalProperties": False,
        },
    ),
]
