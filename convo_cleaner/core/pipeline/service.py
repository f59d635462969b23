"""Per-target state machine for the delete flow"""

import logging
from typing import Any, Callable, Optional

from playwright.async_api import Page

from convo_cleaner.config import CleanerConfig
from convo_cleaner.core.context import AutomationContext
from convo_cleaner.core.executor.service import ActionExecutor
from convo_cleaner.core.locator.service import ElementLocator
from convo_cleaner.core.locator.strategies import (
	confirm_strategies, delete_strategies, kebab_strategies, share_strategies
)
from convo_cleaner.core.locator.views import LocateResult, Strategy
from convo_cleaner.core.pipeline.views import (
	STEP_ACTIVATE, STEP_CONFIRM_ACTIVATE, STEP_GUARD, STEP_INIT, STEP_LOCATE_CONFIRMATION,
	STEP_LOCATE_DESTRUCTIVE, STEP_LOCATE_ENTRY, STEP_OPEN_MENU, STEP_VERIFY, ProbeOutcome, TargetOutcome
)
from convo_cleaner.core.profile.service import ProfileResolver
from convo_cleaner.core.steps.service import StepRunner
from convo_cleaner.core.steps.views import StepAttempt, StepExecutor, StepOutcome
from convo_cleaner.core.target.views import Target
from convo_cleaner.core.verification.service import VerificationEngine
from convo_cleaner.exceptions import (
	AutomationError, ElementMissingError, GuardFailedError, InvalidTargetError, VerifyTimeoutError
)
from convo_cleaner.session.service import ReadinessGuard
from convo_cleaner.utils import time_execution_async

logger = logging.getLogger(__name__)


class TargetPipeline:
	"""Init -> GuardReady -> LocateEntryControl -> OpenMenu -> LocateDestructiveControl
	-> Activate -> LocateConfirmation -> ConfirmActivate -> Verify -> Done | Failed

	Strictly linear. Each step re-locates what it acts on, so no element
	reference outlives the step that found it. In dry-run the menu is still
	opened and its delete item required; the destructive activations run once
	in skip mode and the run ends after confirmation discovery.
	"""

	def __init__(
		self,
		page: Page,
		config: CleanerConfig,
		guard: Optional[ReadinessGuard] = None,
		resolver: Optional[ProfileResolver] = None,
		locator: Optional[ElementLocator] = None,
		executor: Optional[ActionExecutor] = None,
		verifier: Optional[VerificationEngine] = None
	):
		self.page = page
		self.config = config
		self.guard = guard or ReadinessGuard(poll_interval_ms=config.poll_interval_ms)
		self.resolver = resolver or ProfileResolver()
		self.locator = locator or ElementLocator()
		self.executor = executor or ActionExecutor(self.locator)
		self.verifier = verifier or VerificationEngine(self.locator)
		self.runner = StepRunner(config)

	@time_execution_async('pipeline.run')
	async def run(self, target: Target) -> TargetOutcome:
		ctx = AutomationContext(page=self.page, config=self.config, target=target)
		steps: list[StepOutcome] = []
		dry_run = self.config.dry_run
		try:
			await self._init(target, steps)
			await self._ready(ctx, steps)

			steps.append(await self.runner.run(STEP_LOCATE_ENTRY, self._locate_entry(ctx)))
			# Opening the menu is discovery in both modes; its delete item must be found
			steps.append(await self.runner.run(STEP_OPEN_MENU, self._open_menu(ctx)))
			steps.append(await self.runner.run(
				STEP_LOCATE_DESTRUCTIVE, self._locate(ctx, delete_strategies, 'delete_missing')
			))
			# Simulated steps get a single attempt so a retry can never mutate
			live = not dry_run
			steps.append(await self.runner.run(
				STEP_ACTIVATE, self._activate(ctx, delete_strategies, 'delete_missing'), retryable=live, skip=dry_run
			))
			steps.append(await self.runner.run(
				STEP_LOCATE_CONFIRMATION, self._locate(ctx, confirm_strategies, 'confirm_missing'), retryable=live, skip=dry_run
			))
			steps.append(await self.runner.run(
				STEP_CONFIRM_ACTIVATE, self._activate(ctx, confirm_strategies, 'confirm_missing'), retryable=live, skip=dry_run
			))

			if dry_run:
				await self.executor.dismiss_open(ctx)
				logger.info(f"Dry run complete for {target.id}")
				return TargetOutcome(target=target, ok=True, step=STEP_CONFIRM_ACTIVATE, reason_code='dry_run', evidence=steps)

			verified = await self.runner.run(STEP_VERIFY, self._verify(ctx, target), retryable=False)
			steps.append(verified)
			signal = verified.evidence['signal']
			logger.info(f"Deleted {target.id} ({signal})")
			return TargetOutcome(
				target=target, ok=True, step=STEP_VERIFY, reason_code=signal,
				attempt=verified.attempt, evidence=steps
			)
		except AutomationError as e:
			step = e.step or STEP_INIT
			steps.append(StepOutcome(name=step, ok=False, attempt=e.attempt or 1, evidence=e.evidence, reason_code=e.code))
			logger.error(f"Target {target.id or target.canonical_url} failed at {step}: {e.code}")
			return TargetOutcome.failed(target, step, e.code, e.attempt or 1, detail=e.detail, evidence=steps)

	async def _init(self, target: Target, steps: list[StepOutcome]) -> None:
		if not target.is_resolvable:
			raise InvalidTargetError(f"Unresolvable target {target.canonical_url!r}", step=STEP_INIT, attempt=1)
		steps.append(StepOutcome(name=STEP_INIT, ok=True, attempt=1, evidence={'url': target.canonical_url}))

	async def _ready(self, ctx: AutomationContext, steps: list[StepOutcome]) -> None:
		"""Guard, then resolve the profile once for the rest of the run"""
		await self.executor.dismiss_open(ctx)
		try:
			state = await self.guard.wait_ready(self.page, self.config.step_timeout_ms)
		except GuardFailedError as e:
			e.step = STEP_GUARD
			e.attempt = 1
			raise
		ctx.profile = await self.resolver.resolve_for_page(
			self.page, extra_signals=self.config.locale_signals, overrides=self.config.profile_overrides
		)
		steps.append(StepOutcome(
			name=STEP_GUARD, ok=True, attempt=1, evidence={'guard': state.model_dump(), 'profile': ctx.profile.id}
		))

	def _locate_entry(self, ctx: AutomationContext) -> StepExecutor:
		async def execute(attempt: StepAttempt) -> dict[str, Any]:
			share = await self.locator.require(ctx, share_strategies(), 'share_missing', attempt.lookup_timeout_ms)
			kebab = await self.locator.require(ctx, kebab_strategies(), 'kebab_missing', attempt.lookup_timeout_ms)
			return {'share': share.evidence(), 'kebab': kebab.evidence()}
		return execute

	def _open_menu(self, ctx: AutomationContext) -> StepExecutor:
		async def execute(attempt: StepAttempt) -> dict[str, Any]:
			await self.executor.dismiss_open(ctx)
			kebab = await self.locator.require(ctx, kebab_strategies(), 'kebab_missing', attempt.lookup_timeout_ms)
			await self.executor.hover(ctx, kebab.ref)
			await self.executor.activate(ctx, kebab.ref)
			await ctx.pause(self.config.wait_after_open_ms)
			return {'kebab': kebab.evidence()}
		return execute

	def _locate(self, ctx: AutomationContext, strategies: Callable[[], list[Strategy]], detail: str) -> StepExecutor:
		async def execute(attempt: StepAttempt) -> dict[str, Any]:
			result = await self.locator.locate(ctx, strategies(), attempt.lookup_timeout_ms)
			if result.found:
				return result.evidence()
			if attempt.skip:
				return {**result.evidence(), 'skip': True, 'found': False}
			raise ElementMissingError(f"Could not locate control: {detail}", detail=detail, evidence=result.evidence())
		return execute

	def _activate(self, ctx: AutomationContext, strategies: Callable[[], list[Strategy]], detail: str) -> StepExecutor:
		async def execute(attempt: StepAttempt) -> dict[str, Any]:
			if attempt.skip:
				return {'skip': True}
			result = await self.locator.require(ctx, strategies(), detail, attempt.lookup_timeout_ms)
			action = await self.executor.activate(ctx, result.ref)
			await ctx.pause(self.config.wait_after_click_ms)
			return action.to_evidence()
		return execute

	def _verify(self, ctx: AutomationContext, target: Target) -> StepExecutor:
		async def execute(attempt: StepAttempt) -> dict[str, Any]:
			result = await self.verifier.verify(ctx, target, ctx.profile, self.config.step_timeout_ms)
			if not result.ok:
				raise VerifyTimeoutError("No verification signal before the deadline", evidence=result.evidence)
			return {**result.evidence, 'signal': result.reason}
		return execute

	@time_execution_async('pipeline.probe')
	async def probe(self, target: Target) -> ProbeOutcome:
		"""Discover every control of the flow without activating a destructive one

		Opens the menu to see its delete item and looks for a confirmation
		control anywhere outside the menu, then dismisses whatever is open.
		Neither the delete item nor the confirmation control is activated.
		"""
		ctx = AutomationContext(page=self.page, config=self.config, target=target)
		evidence: dict[str, Any] = {}
		try:
			await self._ready(ctx, [])
		except AutomationError as e:
			return ProbeOutcome(reason_code=e.code, evidence=e.to_meta())

		share = await self._probe_locate(ctx, share_strategies(), evidence, 'share')
		if not share.found:
			return ProbeOutcome(reason_code='share_missing', evidence=evidence)
		kebab = await self._probe_locate(ctx, kebab_strategies(), evidence, 'kebab')
		if not kebab.found:
			return ProbeOutcome(header_found=True, reason_code='kebab_missing', evidence=evidence)

		destructive_found = confirmation_found = False
		try:
			await self.executor.hover(ctx, kebab.ref)
			await self.executor.activate(ctx, kebab.ref)
			await ctx.pause(self.config.wait_after_open_ms)

			delete = await self._probe_locate(ctx, delete_strategies(), evidence, 'delete')
			destructive_found = delete.found
			confirm = await self._probe_locate(
				ctx, confirm_strategies(), evidence, 'confirm', self.config.dry_run_lookup_timeout_ms
			)
			confirmation_found = confirm.found
		except ElementMissingError as e:
			evidence['error'] = e.to_meta()
		finally:
			if confirmation_found:
				await self.executor.dismiss_dialog(ctx)
			await self.executor.dismiss_open(ctx)

		return ProbeOutcome(
			header_found=True,
			destructive_control_found=destructive_found,
			confirmation_found=confirmation_found,
			evidence=evidence
		)

	async def _probe_locate(
		self,
		ctx: AutomationContext,
		strategies: list[Strategy],
		evidence: dict[str, Any],
		key: str,
		timeout_ms: Optional[float] = None
	) -> LocateResult:
		if timeout_ms is None:
			timeout_ms = self.config.step_timeout_ms
		result = await self.locator.locate(ctx, strategies, timeout_ms)
		evidence[key] = result.evidence()
		return result
