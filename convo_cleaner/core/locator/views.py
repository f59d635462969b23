import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from playwright.async_api import ElementHandle, Frame

from convo_cleaner.core.locator.predicates import NodePredicate
from convo_cleaner.perception.base import DomNode, describe_node
from convo_cleaner.perception.dom.service import REF_ATTRIBUTE

logger = logging.getLogger(__name__)


class Scope(str, Enum):
	DOCUMENT = 'document'
	MAIN = 'main'
	HEADER = 'header'
	MENU = 'menu'
	DIALOG = 'dialog'
	SIDEBAR_SELECTED = 'sidebar_selected'


@dataclass
class ElementRef:
	"""Non-owning reference to a node found in one snapshot pass

	Only valid until the next await on a delay; callers re-locate instead of
	holding on to it.
	"""
	frame: Frame
	node: DomNode
	frame_order: int = 0

	@property
	def selector(self) -> str:
		return f'[{REF_ATTRIBUTE}="{self.node.ref}"]'

	async def resolve(self) -> Optional[ElementHandle]:
		try:
			return await self.frame.query_selector(self.selector)
		except Exception as e:
			logger.debug(f"Ref {self.node.ref} no longer resolves: {e}")
			return None

	def describe(self) -> Optional[dict[str, Any]]:
		return describe_node(self.node)


@dataclass(frozen=True)
class Strategy:
	"""One labelled lookup: a scope plus the predicate nodes must satisfy"""
	label: str
	scope: Scope
	predicate: NodePredicate


@dataclass
class LocateResult:
	ref: Optional[ElementRef] = None
	matched: Optional[str] = None
	attempted: list[str] = field(default_factory=list)
	passes: int = 0
	# False when the last pass could not capture the main frame
	conclusive: bool = True

	@property
	def found(self) -> bool:
		return self.ref is not None

	def record(self, label: str) -> None:
		# Collapsed per label across polling passes
		if label not in self.attempted:
			self.attempted.append(label)

	def evidence(self) -> dict[str, Any]:
		evidence: dict[str, Any] = {'attempted': list(self.attempted), 'found': self.found}
		if self.ref is not None:
			evidence['matched'] = self.matched
			evidence['element'] = self.ref.describe()
		return evidence
