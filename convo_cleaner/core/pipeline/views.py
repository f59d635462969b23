from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from convo_cleaner.core.steps.views import StepOutcome
from convo_cleaner.core.target.views import Target

STEP_INIT = 'init'
STEP_GUARD = 'guard'
STEP_LOCATE_ENTRY = 'locateEntryControl'
STEP_OPEN_MENU = 'openMenu'
STEP_LOCATE_DESTRUCTIVE = 'locateDestructiveControl'
STEP_ACTIVATE = 'activate'
STEP_LOCATE_CONFIRMATION = 'locateConfirmation'
STEP_CONFIRM_ACTIVATE = 'confirmActivate'
STEP_VERIFY = 'verify'

STEP_ORDER = (
	STEP_INIT, STEP_GUARD, STEP_LOCATE_ENTRY, STEP_OPEN_MENU, STEP_LOCATE_DESTRUCTIVE,
	STEP_ACTIVATE, STEP_LOCATE_CONFIRMATION, STEP_CONFIRM_ACTIVATE, STEP_VERIFY
)


class TargetOutcome(BaseModel):
	"""Terminal state of one target run"""
	model_config = ConfigDict(extra='forbid', frozen=True)

	target: Target
	ok: bool
	step: str = Field(description="Last step reached")
	reason_code: str
	attempt: int = 1
	detail: Optional[str] = None
	evidence: list[StepOutcome] = Field(default_factory=list)

	@classmethod
	def failed(cls, target: Target, step: str, reason_code: str, attempt: int = 1, **kwargs: Any) -> 'TargetOutcome':
		return cls(target=target, ok=False, step=step, reason_code=reason_code, attempt=attempt, **kwargs)


class ProbeOutcome(BaseModel):
	"""What a non-destructive probe could see"""
	model_config = ConfigDict(extra='forbid', frozen=True)

	header_found: bool = False
	destructive_control_found: bool = False
	confirmation_found: bool = False
	reason_code: Optional[str] = None
	evidence: dict[str, Any] = Field(default_factory=dict)
