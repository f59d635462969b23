"""Per-target context threaded through every engine call"""

import time
from dataclasses import dataclass
from typing import Optional

from playwright.async_api import Page

from convo_cleaner.config import CleanerConfig
from convo_cleaner.core.profile.views import LocalizationProfile
from convo_cleaner.core.target.views import Target
from convo_cleaner.utils import sleep_ms


@dataclass
class AutomationContext:
	"""Page, configuration and resolved profile for one target run

	The profile is resolved once after the readiness guard and cached here.
	"""
	page: Page
	config: CleanerConfig
	profile: Optional[LocalizationProfile] = None
	target: Optional[Target] = None

	def deadline(self, timeout_ms: Optional[float] = None) -> float:
		"""Monotonic deadline ``timeout_ms`` from now (step timeout by default)"""
		if timeout_ms is None:
			timeout_ms = self.config.step_timeout_ms
		return time.monotonic() + max(0.0, timeout_ms) / 1000

	@staticmethod
	def remaining_ms(deadline: float) -> float:
		return max(0.0, (deadline - time.monotonic()) * 1000)

	async def pause(self, ms: Optional[float] = None) -> None:
		"""Sleep for ``ms`` or one polling interval"""
		await sleep_ms(self.config.poll_interval_ms if ms is None else ms)
