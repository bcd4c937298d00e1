"""
API endpoints for execution gating and quota attribution.
"""
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from credgate.domain.models.execution_context import ExecutionContext
from credgate.domain.models.policy_decision import PolicyDecision
from credgate.gate import CredentialGate
from credgate_proxy.dependencies import get_gate

router = APIRouter()


class ExecutionContextRequest(BaseModel):
    is_scheduled: bool = Field(False, alias="isScheduled", description="Run was triggered by a schedule.")
    is_recurring: bool = Field(False, alias="isRecurring", description="Run was triggered by a recurrence rule.")
    has_stored_valid_key: bool = Field(
        False,
        alias="hasStoredValidKey",
        description="Caller has a stored, previously validated key.",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_context(self) -> ExecutionContext:
        return ExecutionContext(
            is_scheduled=self.is_scheduled,
            is_recurring=self.is_recurring,
            has_stored_valid_key=self.has_stored_valid_key,
        )


class RunAttributionRequest(BaseModel):
    agents: dict[str, ExecutionContextRequest] = Field(
        default_factory=dict,
        description="Execution flags per agent, in run order.",
    )


def decision_to_dict(decision: PolicyDecision) -> dict[str, Any]:
    return {
        "permitted": decision.permitted,
        "quotaPool": decision.quota_pool.value,
        "denialReason": decision.denial_reason,
    }


@router.post("/executions/decide")
async def decide_execution(
    request: Annotated[ExecutionContextRequest, Body(...)],
    gate: Annotated[CredentialGate, Depends(get_gate)],
) -> dict[str, Any]:
    """
    Decide whether an execution may run and which quota pool it draws from.
    A refusal is a normal decision, so this always answers 200.
    """
    decision = await gate.authorize_execution(request.to_context())
    return decision_to_dict(decision)


@router.post("/workflows/attribution", response_model=None)
async def attribute_workflow_run(
    request: Annotated[RunAttributionRequest, Body(...)],
    gate: Annotated[CredentialGate, Depends(get_gate)],
) -> dict[str, Any] | JSONResponse:
    """
    Decide every agent of a workflow run.

    A run needs at least one agent; an empty one is refused with 400.
    """
    if not request.agents:
        return JSONResponse(
            status_code=400,
            content={"error": "At least one agent is required"},
        )
    attribution = await gate.attribute_run(
        {name: flags.to_context() for name, flags in request.agents.items()}
    )
    return {
        "permitted": attribution.permitted,
        "decisions": {
            name: decision_to_dict(decision)
            for name, decision in attribution.decisions.items()
        },
        "userOwnedAgents": attribution.user_owned_agents,
        "platformAgents": attribution.platform_agents,
        "deniedAgents": attribution.denied_agents,
    }
