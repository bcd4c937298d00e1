"""Policy decision models for quota attribution."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuotaPool(str, Enum):
    """Billing bucket an execution draws from."""

    UserOwned = "user-owned"
    """The user's own provider key is charged."""

    Platform = "platform"
    """Shared platform credits are charged."""

    None_ = "none"
    """Nothing is charged because the execution is refused."""


class PolicyDecision(BaseModel):
    """Whether an execution may run and which quota pool pays for it.

    Produced fresh for every decision. Never cache these: the stored-key
    flag they depend on can change between calls.
    """

    permitted: bool = Field(..., description="Whether the execution may proceed")
    quota_pool: QuotaPool = Field(..., description="Quota pool to charge")
    denial_reason: str | None = Field(default=None, description="Why the execution was refused")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_pool_matches_permission(self) -> PolicyDecision:
        """A refused execution charges nothing; a permitted one charges a real pool."""
        if self.permitted and self.quota_pool == QuotaPool.None_:
            raise ValueError("permitted decisions must charge a quota pool")
        if not self.permitted and self.quota_pool != QuotaPool.None_:
            raise ValueError("refused decisions must use quota pool 'none'")
        if not self.permitted and not self.denial_reason:
            raise ValueError("refused decisions must carry a denial_reason")
        return self


class RunAttribution(BaseModel):
    """Per-agent decisions for one workflow run.

    A run is permitted only when every agent in it is permitted.
    """

    decisions: dict[str, PolicyDecision] = Field(
        default_factory=dict,
        description="Decision per agent, in input order",
    )

    model_config = ConfigDict(frozen=True)

    @property
    def permitted(self) -> bool:
        return all(d.permitted for d in self.decisions.values())

    @property
    def user_owned_agents(self) -> list[str]:
        return self._agents_in(QuotaPool.UserOwned)

    @property
    def platform_agents(self) -> list[str]:
        return self._agents_in(QuotaPool.Platform)

    @property
    def denied_agents(self) -> list[str]:
        return self._agents_in(QuotaPool.None_)

    def _agents_in(self, pool: QuotaPool) -> list[str]:
        return [name for name, d in self.decisions.items() if d.quota_pool == pool]
