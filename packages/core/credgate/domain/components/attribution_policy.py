"""AttributionPolicy component for quota pool selection and automation gating."""

from __future__ import annotations

from collections.abc import Mapping

from credgate.domain.models.execution_context import ExecutionContext
from credgate.domain.models.policy_decision import PolicyDecision, QuotaPool, RunAttribution

AUTOMATION_REQUIRES_KEY = "automated execution requires a verified user-owned key"


def decide(ctx: ExecutionContext) -> PolicyDecision:
    """Decide whether an execution may run and which quota pool it draws from.

    Rules, first match wins:

    1. Automated (scheduled or recurring) without a stored valid key: refused.
    2. Stored valid key: permitted on the user-owned pool.
    3. Manual without a key: permitted on platform credits.

    Args:
        ctx: Flags for this execution attempt.

    Returns:
        A new PolicyDecision. Identical contexts always produce equal decisions.
    """
    if ctx.is_automated and not ctx.has_stored_valid_key:
        return PolicyDecision(
            permitted=False,
            quota_pool=QuotaPool.None_,
            denial_reason=AUTOMATION_REQUIRES_KEY,
        )
    if ctx.has_stored_valid_key:
        return PolicyDecision(permitted=True, quota_pool=QuotaPool.UserOwned)
    return PolicyDecision(permitted=True, quota_pool=QuotaPool.Platform)


class AttributionPolicy:
    """Decision table for quota attribution.

    Stateless by construction: there are no toggles to flip, so any policy
    change is a change to :func:`decide`.
    """

    def decide(self, ctx: ExecutionContext) -> PolicyDecision:
        """Decide a single execution attempt. See :func:`decide`."""
        return decide(ctx)

    def attribute_run(self, ctx_by_agent: Mapping[str, ExecutionContext]) -> RunAttribution:
        """Decide every agent of a workflow run.

        Args:
            ctx_by_agent: Execution context per agent name, in run order.

        Returns:
            RunAttribution with one decision per agent. The run is permitted
            only if all agents are.
        """
        return RunAttribution(
            decisions={name: decide(ctx) for name, ctx in ctx_by_agent.items()}
        )
