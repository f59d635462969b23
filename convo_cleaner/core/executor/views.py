from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ActionType(str, Enum):
	ACTIVATE = 'activate'
	HOVER = 'hover'
	KEYBOARD = 'keyboard'


@dataclass
class ActionResult:
	action_type: ActionType
	events: tuple[str, ...] = ()
	element: Optional[dict[str, Any]] = None

	def to_evidence(self) -> dict[str, Any]:
		evidence: dict[str, Any] = {'action': self.action_type.value}
		if self.element:
			evidence['element'] = self.element
		return evidence
