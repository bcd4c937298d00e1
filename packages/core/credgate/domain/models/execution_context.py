"""ExecutionContext model supplied by the workflow subsystem."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ExecutionContext(BaseModel):
    """Flags describing one execution attempt.

    Built per attempt by the scheduler and consumed read-only by the
    attribution policy.
    """

    is_scheduled: bool = Field(default=False, description="Run was triggered by a schedule")
    is_recurring: bool = Field(default=False, description="Run was triggered by a recurrence rule")
    has_stored_valid_key: bool = Field(
        default=False,
        description="Caller has a stored, previously validated user-owned key",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def is_automated(self) -> bool:
        """Whether the run happens without direct user action."""
        return self.is_scheduled or self.is_recurring
