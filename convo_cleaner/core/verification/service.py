"""Indirect confirmation that a destructive action took effect"""

import logging
import time
from typing import Any, Optional

from convo_cleaner.core.context import AutomationContext
from convo_cleaner.core.locator.service import ElementLocator
from convo_cleaner.core.locator.strategies import share_strategies
from convo_cleaner.core.profile.views import LocalizationProfile
from convo_cleaner.core.target.views import Target
from convo_cleaner.core.verification.views import VerificationResult, VerificationSignal
from convo_cleaner.utils import time_execution_async

logger = logging.getLogger(__name__)

# Finds the first element whose own text matches a success pattern and
# reports the nearest alert/status/toast host around it.
TOAST_SCRIPT = """
({ sources }) => {
	const patterns = [];
	for (const source of sources || []) {
		try { patterns.push(new RegExp(source, 'i')); } catch (_e) {}
	}
	if (!patterns.length || !document.body) return null;
	const HOST = '[role="alert"],[role="status"],[aria-live],[data-testid*="toast" i]';
	const parentOf = (el) => el.parentElement || (el.getRootNode && el.getRootNode().host) || null;
	const hostOf = (el) => {
		for (let cur = el; cur; cur = parentOf(cur)) {
			if (cur.matches && cur.matches(HOST)) return cur;
		}
		return el;
	};
	let found = null;
	const walk = (root) => {
		const walker = document.createTreeWalker(root, NodeFilter.SHOW_ELEMENT);
		let current = walker.nextNode();
		while (current && !found) {
			const own = Array.from(current.childNodes)
				.filter((n) => n.nodeType === Node.TEXT_NODE)
				.map((n) => n.textContent)
				.join(' ')
				.trim();
			if (own && patterns.some((p) => p.test(own))) {
				found = current;
				break;
			}
			if (current.shadowRoot) walk(current.shadowRoot);
			current = walker.nextNode();
		}
	};
	walk(document.body);
	if (!found) return null;
	const host = hostOf(found);
	return {
		tag: host.tagName.toLowerCase(),
		role: host.getAttribute('role'),
		test_id: host.getAttribute('data-testid'),
		text: (host.textContent || '').trim().slice(0, 60)
	};
}
"""


class VerificationEngine:
	"""Polls for the first of: location change, vanished header control, success toast"""

	def __init__(self, locator: Optional[ElementLocator] = None):
		self.locator = locator or ElementLocator()

	@time_execution_async('verify')
	async def verify(
		self,
		ctx: AutomationContext,
		target: Target,
		profile: Optional[LocalizationProfile] = None,
		timeout_ms: Optional[float] = None
	) -> VerificationResult:
		profile = profile or ctx.profile
		deadline = ctx.deadline(timeout_ms)
		polls = 0
		while True:
			polls += 1
			signal = await self.check_once(ctx, target, profile)
			if signal is not None:
				logger.info(f"Verified {target.id} via {signal.reason.value} after {polls} poll(s)")
				return VerificationResult(ok=True, reason=signal.reason.value, evidence={**signal.evidence, 'polls': polls})
			if time.monotonic() >= deadline:
				break
			await ctx.pause(min(ctx.config.poll_interval_ms, ctx.remaining_ms(deadline)))
		logger.warning(f"No verification signal for {target.id} after {polls} poll(s)")
		return VerificationResult(ok=False, reason='verify_timeout', evidence={'polls': polls, 'url': ctx.page.url})

	async def check_once(
		self,
		ctx: AutomationContext,
		target: Target,
		profile: Optional[LocalizationProfile]
	) -> Optional[VerificationSignal]:
		"""One polling iteration; signals are checked in a fixed order"""
		url = ctx.page.url
		if not target.matches_location(url):
			return VerificationSignal.url_changed(url)

		share = await self.locator.locate(ctx, share_strategies(), timeout_ms=0)
		if not share.found:
			if share.conclusive:
				return VerificationSignal.header_missing(share.attempted)
			logger.debug("Main frame snapshot unavailable; header check inconclusive")

		if profile is not None and profile.success_patterns:
			toast = await self._find_toast(ctx, profile)
			if toast:
				return VerificationSignal.toast(toast)
		return None

	@staticmethod
	async def _find_toast(ctx: AutomationContext, profile: LocalizationProfile) -> Optional[dict[str, Any]]:
		try:
			found = await ctx.page.evaluate(TOAST_SCRIPT, {'sources': profile.success_sources()})
		except Exception as e:
			logger.debug(f"Toast lookup failed: {e}")
			return None
		return found if isinstance(found, dict) else None
