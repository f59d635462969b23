"""Sequential, fail-forward processing of a list of targets"""

import logging
import random
from typing import Awaitable, Callable, Optional, Sequence, Union

from playwright.async_api import Page

from convo_cleaner.config import CleanerConfig
from convo_cleaner.core.batch.rate_limiter import RateLimiter
from convo_cleaner.core.batch.views import BatchOutcome, format_reason_label
from convo_cleaner.core.pipeline.service import TargetPipeline
from convo_cleaner.core.pipeline.views import STEP_INIT, ProbeOutcome, TargetOutcome
from convo_cleaner.core.target.views import Target
from convo_cleaner.exceptions import AutomationError
from convo_cleaner.session.service import ExecutionRequester, SessionProvider, run_in_session
from convo_cleaner.utils import sleep_ms

logger = logging.getLogger(__name__)

PipelineFactory = Callable[[Page, CleanerConfig], TargetPipeline]
CancelPredicate = Callable[[], bool]


class BatchOrchestrator:
	"""Runs targets one after another with paced, jittered gaps

	Cancellation is honoured only between targets; a target already in
	flight always runs to its terminal state.
	"""

	def __init__(
		self,
		provider: SessionProvider,
		pipeline_factory: PipelineFactory = TargetPipeline,
		rate_limiter: Optional[RateLimiter] = None,
		rng: Optional[random.Random] = None,
		sleep: Callable[[float], Awaitable[None]] = sleep_ms
	):
		self.provider = provider
		self.pipeline_factory = pipeline_factory
		self.rate_limiter = rate_limiter
		self.rng = rng or random.Random()
		self._sleep = sleep

	def pause_ms(self, config: CleanerConfig) -> float:
		low, high = config.jitter_range_ms
		return config.inter_target_delay_ms + self.rng.uniform(low, high)

	async def run(
		self,
		targets: Sequence[Union[str, Target]],
		config: CleanerConfig,
		is_cancelled: Optional[CancelPredicate] = None
	) -> BatchOutcome:
		requester = ExecutionRequester(config)
		limiter = self.rate_limiter or RateLimiter(config.rate_limit_per_minute)
		outcome = BatchOutcome()
		mode = 'dry-run' if config.dry_run else 'live'
		logger.info(f"Starting {mode} batch of {len(targets)} target(s)")

		for index, item in enumerate(targets):
			if index > 0:
				await self._sleep(self.pause_ms(config))
			if is_cancelled is not None and is_cancelled():
				logger.info(f"Batch cancelled before target {index + 1}/{len(targets)}")
				outcome.cancelled = True
				break

			target = item if isinstance(item, Target) else Target.from_url(item)
			result = await self._run_target(target, config, requester, limiter)
			outcome.results.append(result)
			outcome.attempted += 1
			if result.ok:
				outcome.succeeded += 1
			logger.info(f"[{index + 1}/{len(targets)}] {target.id or target.canonical_url}: {format_reason_label(result)}")

		logger.info(f"Batch finished: {outcome.succeeded}/{outcome.attempted} succeeded")
		return outcome

	async def _run_target(
		self,
		target: Target,
		config: CleanerConfig,
		requester: ExecutionRequester,
		limiter: RateLimiter
	) -> TargetOutcome:
		if not target.is_resolvable:
			logger.warning(f"Skipping invalid target {target.canonical_url!r}")
			return TargetOutcome.failed(target, STEP_INIT, 'invalid_url')
		if not config.dry_run:
			await limiter.acquire()

		async def procedure(page: Page) -> TargetOutcome:
			return await self.pipeline_factory(page, config).run(target)

		try:
			return await run_in_session(self.provider, requester, target.canonical_url, procedure)
		except AutomationError as e:
			logger.error(f"Target {target.id} failed outside the pipeline: {e.code}: {e}")
			return TargetOutcome.failed(target, e.step or 'session', e.code, e.attempt or 1, detail=e.detail)

	async def probe(self, target: Union[str, Target], config: CleanerConfig) -> ProbeOutcome:
		target = target if isinstance(target, Target) else Target.from_url(target)
		if not target.is_resolvable:
			return ProbeOutcome(reason_code='invalid_url')

		async def procedure(page: Page) -> ProbeOutcome:
			return await self.pipeline_factory(page, config).probe(target)

		try:
			return await run_in_session(self.provider, ExecutionRequester(config), target.canonical_url, procedure)
		except AutomationError as e:
			return ProbeOutcome(reason_code=e.code, evidence=e.to_meta())
