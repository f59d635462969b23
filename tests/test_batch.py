"""Batch ordering, pacing, cancellation and fail-forward behaviour"""

import random

import pytest

from convo_cleaner.core.batch.rate_limiter import RateLimiter
from convo_cleaner.core.batch.service import BatchOrchestrator
from convo_cleaner.core.batch.views import format_reason_label
from convo_cleaner.core.pipeline.views import TargetOutcome
from convo_cleaner.core.target.views import Target
from convo_cleaner.session.views import BrowserSession
from tests.conftest import FakePage, build_chat_page

URLS = [
	'https://chatgpt.com/c/one',
	'https://chatgpt.com/c/two',
	'https://chatgpt.com/c/three',
]


class FakeProvider:
	def __init__(self, page_factory=None):
		self.page_factory = page_factory or (lambda url: FakePage(url=url))
		self.opened: list[str] = []

	async def open(self, canonical_url):
		self.opened.append(canonical_url)
		return BrowserSession(page=self.page_factory(canonical_url), canonical_url=canonical_url)


class RecordingPipeline:
	"""Pipeline stand-in that records the order targets arrive in"""
	seen: list[str] = []
	fail_ids: set[str] = set()

	def __init__(self, page, config):
		self.page = page
		self.config = config

	async def run(self, target):
		RecordingPipeline.seen.append(target.id)
		if target.id in RecordingPipeline.fail_ids:
			raise RuntimeError('page crashed')
		return TargetOutcome(target=target, ok=True, step='verify', reason_code='url_changed')


@pytest.fixture(autouse=True)
def reset_pipeline():
	RecordingPipeline.seen = []
	RecordingPipeline.fail_ids = set()


class RecordingSleep:
	def __init__(self):
		self.calls: list[float] = []

	async def __call__(self, ms):
		self.calls.append(ms)


class TestBatchOrchestrator:
	@pytest.mark.asyncio
	async def test_order_is_preserved(self, fast_config):
		provider = FakeProvider()
		outcome = await BatchOrchestrator(provider, RecordingPipeline).run(URLS, fast_config)
		assert RecordingPipeline.seen == ['one', 'two', 'three']
		assert [r.target.id for r in outcome.results] == ['one', 'two', 'three']
		assert outcome.attempted == 3
		assert outcome.succeeded == 3
		assert not outcome.cancelled

	@pytest.mark.asyncio
	async def test_invalid_url_skips_pipeline(self, fast_config):
		provider = FakeProvider()
		outcome = await BatchOrchestrator(provider, RecordingPipeline).run(
			['not a url', URLS[0]], fast_config
		)
		assert outcome.results[0].reason_code == 'invalid_url'
		assert outcome.results[0].target.canonical_url == 'not a url'
		assert provider.opened == ['https://chatgpt.com/c/one/']
		assert outcome.attempted == 2
		assert outcome.succeeded == 1

	@pytest.mark.asyncio
	async def test_failures_do_not_stop_the_batch(self, fast_config):
		RecordingPipeline.fail_ids = {'two'}
		outcome = await BatchOrchestrator(FakeProvider(), RecordingPipeline).run(URLS, fast_config)
		assert [r.ok for r in outcome.results] == [True, False, True]
		assert outcome.results[1].reason_code == 'execution_exception'

	@pytest.mark.asyncio
	async def test_host_mismatch(self, fast_config):
		provider = FakeProvider(lambda url: FakePage(url='https://evil.example/c/one/'))
		outcome = await BatchOrchestrator(provider, RecordingPipeline).run(URLS[:1], fast_config)
		assert outcome.results[0].reason_code == 'host_mismatch'
		assert RecordingPipeline.seen == []

	@pytest.mark.asyncio
	async def test_cancellation_checked_between_targets(self, fast_config):
		checks = []

		def is_cancelled():
			checks.append(len(RecordingPipeline.seen))
			return len(RecordingPipeline.seen) >= 2

		outcome = await BatchOrchestrator(FakeProvider(), RecordingPipeline).run(URLS, fast_config, is_cancelled)
		assert outcome.cancelled
		assert RecordingPipeline.seen == ['one', 'two']
		assert len(outcome.results) == 2
		assert checks == [0, 1, 2]

	@pytest.mark.asyncio
	async def test_pacing_between_targets(self, fast_config):
		config = fast_config.model_copy(update={'inter_target_delay_ms': 1000, 'jitter_range_ms': (100, 200)})
		sleep = RecordingSleep()
		orchestrator = BatchOrchestrator(FakeProvider(), RecordingPipeline, rng=random.Random(7), sleep=sleep)
		await orchestrator.run(URLS, config)
		# No pause before the first target
		assert len(sleep.calls) == 2
		assert all(1100 <= ms <= 1200 for ms in sleep.calls)

	@pytest.mark.asyncio
	async def test_rate_limiter_consulted_only_when_live(self, fast_config):
		limiter = RateLimiter(100)
		orchestrator = BatchOrchestrator(FakeProvider(), RecordingPipeline, rate_limiter=limiter)
		await orchestrator.run(URLS, fast_config.model_copy(update={'dry_run': True}))
		assert limiter.get_remaining_calls() == 100
		await orchestrator.run(URLS, fast_config)
		assert limiter.get_remaining_calls() == 97

	@pytest.mark.asyncio
	async def test_end_to_end_with_real_pipeline(self, dry_config):
		provider = FakeProvider(lambda url: build_chat_page())
		outcome = await BatchOrchestrator(provider).run(['https://chatgpt.com/c/abc123'], dry_config)
		assert outcome.results[0].ok
		assert outcome.results[0].reason_code == 'dry_run'

	@pytest.mark.asyncio
	async def test_probe(self, fast_config):
		provider = FakeProvider(lambda url: build_chat_page())
		outcome = await BatchOrchestrator(provider).probe('https://chatgpt.com/c/abc123', fast_config)
		assert outcome.header_found and outcome.destructive_control_found
		# The dialog only appears once the delete item is activated
		assert not outcome.confirmation_found

	@pytest.mark.asyncio
	async def test_probe_invalid_url(self, fast_config):
		outcome = await BatchOrchestrator(FakeProvider()).probe('nope', fast_config)
		assert outcome.reason_code == 'invalid_url'


class TestRateLimiter:
	@pytest.mark.asyncio
	async def test_disabled_never_waits(self):
		limiter = RateLimiter(0)
		for _ in range(50):
			assert await limiter.acquire() == 0
		assert limiter.get_remaining_calls() is None

	@pytest.mark.asyncio
	async def test_waits_for_rolling_window(self):
		now = [0.0]
		slept = []

		async def sleep(seconds):
			slept.append(seconds)
			now[0] += seconds

		limiter = RateLimiter(2, clock=lambda: now[0], sleep=sleep)
		await limiter.acquire()
		now[0] = 10.0
		await limiter.acquire()
		now[0] = 20.0
		waited = await limiter.acquire()
		assert waited == pytest.approx(40.0)
		assert slept == [pytest.approx(40.0)]


class TestReasonLabels:
	def _outcome(self, ok, reason, detail=None):
		return TargetOutcome(target=Target.from_url(URLS[0]), ok=ok, step='verify', reason_code=reason, detail=detail)

	def test_labels(self):
		assert format_reason_label(self._outcome(True, 'url_changed')) == 'Deleted'
		assert format_reason_label(self._outcome(True, 'dry_run')) == 'Dry run'
		assert format_reason_label(self._outcome(False, 'verify_timeout')) == 'Verify timeout'
		assert format_reason_label(self._outcome(False, 'element_missing', 'kebab_missing')) == 'Control not found (kebab missing)'
		assert format_reason_label(self._outcome(False, 'something_new')) == 'something new'
