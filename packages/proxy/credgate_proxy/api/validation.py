"""
API endpoint for validating user-supplied provider keys.
"""
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from credgate.domain.models.system_error import InfrastructureError
from credgate.domain.models.validation_verdict import ValidationVerdict
from credgate.gate import CredentialGate
from credgate_proxy.dependencies import get_gate

logger = structlog.get_logger(__name__)

router = APIRouter()


class ValidateApiKeyRequest(BaseModel):
    # Any: a wrong type is a format failure for the validator to classify, not a 422.
    api_key: Any = Field(None, alias="apiKey", description="The provider API key to check.")

    model_config = ConfigDict(populate_by_name=True)


def verdict_to_response(verdict: ValidationVerdict) -> JSONResponse:
    """Render a verdict with the endpoint's status semantics.

    200 for a confirmed key, 400 for every client-attributable failure,
    rate limiting included.
    """
    content: dict[str, Any] = {
        "valid": verdict.valid,
        "reason": verdict.reason.value,
    }
    if verdict.valid:
        content["message"] = verdict.message
        return JSONResponse(status_code=200, content=content)

    content["error"] = verdict.message
    if verdict.retry_after is not None:
        content["retryAfter"] = verdict.retry_after
    return JSONResponse(status_code=400, content=content)


@router.post("/validate-api-key")
async def validate_api_key(
    gate: Annotated[CredentialGate, Depends(get_gate)],
    request: Annotated[ValidateApiKeyRequest | None, Body()] = None,
) -> JSONResponse:
    """
    Validate a user-supplied provider API key.

    A missing body or missing key is answered like an empty key (400).
    """
    api_key = request.api_key if request is not None else None
    try:
        verdict = await gate.validate_key(api_key)
    except InfrastructureError as e:
        logger.error("validation_infrastructure_error", error=e.message, provider_code=e.provider_code)
        return JSONResponse(
            status_code=500,
            content={
                "valid": False,
                "error": "Could not reach the provider to validate the API key",
            },
        )
    except Exception as e:
        logger.exception("validation_unexpected_error", error=str(e))
        return JSONResponse(
            status_code=500,
            content={"valid": False, "error": "Internal server error during validation"},
        )

    return verdict_to_response(verdict)
