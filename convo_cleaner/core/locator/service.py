"""Element location over polled snapshot passes"""

import logging
import time
from typing import Iterable, Optional, Sequence

from convo_cleaner.core.context import AutomationContext
from convo_cleaner.core.locator.predicates import NodePredicate, in_scope, is_candidate
from convo_cleaner.core.locator.views import ElementRef, LocateResult, Scope, Strategy
from convo_cleaner.exceptions import ElementMissingError
from convo_cleaner.perception.dom.service import DomSnapshotter

logger = logging.getLogger(__name__)


def rank(refs: Iterable[ElementRef]) -> list[ElementRef]:
	"""Highest stacking order first; ties go to the later node in document order"""
	return sorted(
		refs,
		key=lambda ref: (ref.node.stacking, ref.frame_order, ref.node.index),
		reverse=True
	)


class ElementLocator:
	"""Finds interactive, visible nodes across frames and shadow roots

	Every lookup takes a fresh snapshot; nothing is cached between passes.
	"""

	def __init__(self, snapshotter: Optional[DomSnapshotter] = None):
		self.snapshotter = snapshotter or DomSnapshotter()

	async def collect(self, ctx: AutomationContext) -> tuple[list[ElementRef], bool]:
		"""One snapshot pass, filtered to interactive and visible nodes

		The flag is False when the main frame could not be captured; an empty
		result from such a pass says nothing about what the page shows.
		"""
		refs = []
		main_captured = False
		for frame, snapshot in await self.snapshotter.snapshot(ctx.page):
			if snapshot.frame_order == 0:
				main_captured = True
			for node in snapshot.nodes:
				if is_candidate(node, ctx.profile):
					refs.append(ElementRef(frame=frame, node=node, frame_order=snapshot.frame_order))
		return refs, main_captured

	@staticmethod
	def select(ctx: AutomationContext, refs: Sequence[ElementRef], scope: Scope, predicate: NodePredicate) -> list[ElementRef]:
		scoped = in_scope(Scope(scope).value)
		return rank(ref for ref in refs if scoped(ref.node, ctx.profile) and predicate(ref.node, ctx.profile))

	async def find_all(self, ctx: AutomationContext, scope: Scope, predicate: NodePredicate) -> list[ElementRef]:
		refs, _ = await self.collect(ctx)
		return self.select(ctx, refs, scope, predicate)

	async def find(
		self,
		ctx: AutomationContext,
		scope: Scope,
		predicate: NodePredicate,
		timeout_ms: Optional[float] = None
	) -> Optional[ElementRef]:
		result = await self.locate(ctx, [Strategy(predicate.name, scope, predicate)], timeout_ms)
		return result.ref

	async def locate(
		self,
		ctx: AutomationContext,
		strategies: Sequence[Strategy],
		timeout_ms: Optional[float] = None
	) -> LocateResult:
		"""Try strategies in order on each pass until one yields a node or the deadline passes"""
		deadline = ctx.deadline(timeout_ms)
		result = LocateResult()
		while True:
			result.passes += 1
			refs, result.conclusive = await self.collect(ctx)
			for strategy in strategies:
				result.record(strategy.label)
				matches = self.select(ctx, refs, strategy.scope, strategy.predicate)
				logger.debug(f"Strategy '{strategy.label}' matched {len(matches)} node(s) on pass {result.passes}")
				if matches:
					result.ref = matches[0]
					result.matched = strategy.label
					return result
			if time.monotonic() >= deadline:
				return result
			await ctx.pause(min(ctx.config.poll_interval_ms, ctx.remaining_ms(deadline)))

	async def require(
		self,
		ctx: AutomationContext,
		strategies: Sequence[Strategy],
		detail: str,
		timeout_ms: Optional[float] = None
	) -> LocateResult:
		result = await self.locate(ctx, strategies, timeout_ms)
		if not result.found:
			raise ElementMissingError(f"Could not locate control: {detail}", detail=detail, evidence=result.evidence())
		return result
