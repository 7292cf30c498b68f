from __future__ import annotations

from typing import Any, Dict, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import InvalidArgumentsError
from .tools import SCENARIO_STATUS, TEST_CONNECTION, TRIGGER_SCENARIO


class TriggerScenarioArguments(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Checked against the allow-list by the webhook validator, not here.
    action: str = Field(..., description="Action type to execute")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Data passed to the scenario")


class ScenarioStatusArguments(BaseModel):
    model_config = ConfigDict(extra="ignore")

    execution_id: str = Field(..., description="Scenario execution ID")


class ConnectionTestArguments(BaseModel):
    model_config = ConfigDict(extra="forbid")


ToolArguments = Union[TriggerScenarioArguments, ScenarioStatusArguments, ConnectionTestArguments]

ARGUMENT_MODELS: Dict[str, Type[BaseModel]] = {
    TRIGGER_SCENARIO: TriggerScenarioArguments,
    SCENARIO_STATUS: ScenarioStatusArguments,
    TEST_CONNECTION: ConnectionTestArguments,
}


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        problems.append(f"{location}: {error['msg']}")
    return "; ".join(problems)


def parse_arguments(tool_name: str, arguments: Optional[Dict[str, Any]]) -> ToolArguments:
    model = ARGUMENT_MODELS[tool_name]
    try:
        return model.model_validate(arguments or {})
    except ValidationError as exc:
        raise InvalidArgumentsError(f"Invalid arguments for {tool_name}: {_describe(exc)}") from exc
