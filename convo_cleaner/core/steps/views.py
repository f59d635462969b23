from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


class StepAttempt(BaseModel):
	"""What a step executor is told about the attempt it is running"""
	model_config = ConfigDict(extra='forbid', frozen=True)

	attempt: int = Field(description="1-based attempt number")
	skip: bool = Field(default=False, description="Simulate: discover only, never mutate")
	lookup_timeout_ms: float = Field(description="Deadline for lookups inside this attempt")


class StepOutcome(BaseModel):
	model_config = ConfigDict(extra='forbid', frozen=True)

	name: str
	ok: bool
	attempt: int
	evidence: dict[str, Any] = Field(default_factory=dict)
	reason_code: Optional[str] = None


StepExecutor = Callable[[StepAttempt], Awaitable[Optional[dict[str, Any]]]]
