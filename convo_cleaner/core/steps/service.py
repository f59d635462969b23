"""Bounded retries around a single named step"""

import logging
from typing import Any, Optional

from convo_cleaner.config import CleanerConfig
from convo_cleaner.core.steps.views import StepAttempt, StepExecutor, StepOutcome
from convo_cleaner.exceptions import AutomationError, StepFailedError
from convo_cleaner.utils import sleep_ms

logger = logging.getLogger(__name__)


class StepRunner:
	"""Runs a step executor up to ``1 + max_retries`` times

	The first success short-circuits. Exhaustion raises ``StepFailedError``
	carrying the step name, the last reason code, the attempt number and the
	evidence of the last failure.
	"""

	def __init__(self, config: CleanerConfig):
		self.config = config

	def attempts_for(self, retryable: bool) -> int:
		return self.config.total_attempts if retryable else 1

	async def run(self, name: str, executor: StepExecutor, retryable: bool = True, skip: bool = False) -> StepOutcome:
		total = self.attempts_for(retryable)
		last_error: Optional[BaseException] = None
		for attempt in range(1, total + 1):
			simulated = skip and attempt == 1
			context = StepAttempt(
				attempt=attempt,
				skip=simulated,
				lookup_timeout_ms=self.config.skip_lookup_timeout_ms if simulated else self.config.step_timeout_ms
			)
			try:
				evidence: dict[str, Any] = dict(await executor(context) or {})
				if simulated:
					evidence.setdefault('skip', True)
				logger.info(f"Step '{name}' succeeded on attempt {attempt}/{total}")
				return StepOutcome(name=name, ok=True, attempt=attempt, evidence=evidence)
			except Exception as e:
				last_error = e
				if attempt < total:
					logger.warning(f"Step '{name}' attempt {attempt}/{total} failed ({_code_of(e)}): {e}; retrying")
					await sleep_ms(self.config.retry_delay_ms)

		code = _code_of(last_error)
		evidence = last_error.to_meta() if isinstance(last_error, AutomationError) else {'code': code, 'message': str(last_error)}
		logger.error(f"Step '{name}' failed after {total} attempt(s): {code}")
		raise StepFailedError(
			f"Step '{name}' failed: {last_error}",
			code=code,
			step=name,
			attempt=total,
			evidence=evidence,
			detail=getattr(last_error, 'detail', None)
		) from last_error


def _code_of(error: Optional[BaseException]) -> str:
	if isinstance(error, AutomationError):
		return error.code
	return 'step_failed'
