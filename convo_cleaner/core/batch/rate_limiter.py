import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class RateLimiter:
	"""Rolling-minute limit on destructive runs; 0 disables it"""

	def __init__(
		self,
		calls_per_minute: int = 10,
		clock: Callable[[], float] = time.monotonic,
		sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
	):
		self.calls_per_minute = max(0, calls_per_minute)
		self._clock = clock
		self._sleep = sleep
		self._call_times: list[float] = []

	@property
	def enabled(self) -> bool:
		return self.calls_per_minute > 0

	def _prune(self, now: float) -> None:
		self._call_times = [t for t in self._call_times if now - t < WINDOW_SECONDS]

	def wait_time(self) -> float:
		"""Seconds until another call is allowed (0 when a slot is free)"""
		if not self.enabled:
			return 0.0
		now = self._clock()
		self._prune(now)
		if len(self._call_times) < self.calls_per_minute:
			return 0.0
		return max(0.0, WINDOW_SECONDS - (now - self._call_times[0]))

	def get_remaining_calls(self) -> Optional[int]:
		if not self.enabled:
			return None
		self._prune(self._clock())
		return max(0, self.calls_per_minute - len(self._call_times))

	async def acquire(self) -> float:
		"""Wait for a free slot and record the call; returns the seconds waited"""
		if not self.enabled:
			return 0.0
		waited = 0.0
		while True:
			wait = self.wait_time()
			if wait <= 0:
				break
			logger.info(f"Rate limit reached, waiting {wait:.1f}s")
			await self._sleep(wait)
			waited += wait
		self._call_times.append(self._clock())
		return waited
