"""Run configuration for the cleanup engine"""

import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = 'CONVO_CLEANER_'

MIN_STEP_TIMEOUT_MS = 500


class CleanerConfig(BaseModel):
	"""Options supplied once per batch; never mutated mid-run"""
	model_config = ConfigDict(extra='forbid', frozen=True)

	step_timeout_ms: int = Field(default=8000, description="Deadline for each locate/verify operation")
	max_retries: int = Field(default=1, description="Additional attempts per retryable step")
	inter_target_delay_ms: int = Field(default=1500, description="Base pause between targets")
	jitter_range_ms: tuple[int, int] = Field(default=(250, 900), description="Uniform random jitter added to the pause")
	dry_run: bool = Field(default=True, description="Suppress mutating activation, still perform discovery")
	rate_limit_per_minute: int = Field(default=10, description="Destructive runs allowed per rolling minute, 0 disables")

	# Pacing inside a target
	poll_interval_ms: int = Field(default=120, description="Interval between polling passes")
	retry_delay_ms: int = Field(default=120, description="Fixed pause between step attempts")
	wait_after_open_ms: int = Field(default=260, description="Settle time after opening the menu")
	wait_after_click_ms: int = Field(default=160, description="Settle time after activating a control")
	dry_run_lookup_timeout_ms: int = Field(default=400, description="Lookup deadline for simulated steps")

	# Environment
	allowed_hosts: list[str] = Field(default_factory=lambda: ['chatgpt.com'])
	locale_signals: list[str] = Field(default_factory=list, description="Extra locale tags appended after page signals")
	profile_overrides: dict[str, list[str]] = Field(default_factory=dict, description="Pattern lists replacing profile defaults")

	@field_validator('step_timeout_ms')
	@classmethod
	def _clamp_step_timeout(cls, value: int) -> int:
		return max(MIN_STEP_TIMEOUT_MS, int(value))

	@field_validator(
		'max_retries', 'inter_target_delay_ms', 'rate_limit_per_minute', 'poll_interval_ms',
		'retry_delay_ms', 'wait_after_open_ms', 'wait_after_click_ms', 'dry_run_lookup_timeout_ms'
	)
	@classmethod
	def _non_negative(cls, value: int) -> int:
		return max(0, int(value))

	@field_validator('jitter_range_ms')
	@classmethod
	def _ordered_jitter(cls, value: tuple[int, int]) -> tuple[int, int]:
		low, high = (max(0, int(v)) for v in value)
		return (low, high) if low <= high else (high, low)

	@field_validator('allowed_hosts', 'locale_signals')
	@classmethod
	def _lowercase(cls, value: list[str]) -> list[str]:
		return [item.strip().lower() for item in value if item and item.strip()]

	@field_validator('profile_overrides')
	@classmethod
	def _known_override_keys(cls, value: dict[str, list[str]]) -> dict[str, list[str]]:
		known = {'menu_item_patterns', 'confirm_patterns', 'success_patterns'}
		unknown = set(value) - known
		if unknown:
			raise ValueError(f"Unknown profile override keys: {sorted(unknown)}")
		return value

	@property
	def total_attempts(self) -> int:
		return self.max_retries + 1

	@property
	def skip_lookup_timeout_ms(self) -> int:
		return min(self.dry_run_lookup_timeout_ms, self.step_timeout_ms)

	@classmethod
	def from_env(cls, **overrides: Any) -> 'CleanerConfig':
		"""Build a config from CONVO_CLEANER_* variables, then explicit overrides"""
		values: dict[str, Any] = {}
		int_fields = (
			'step_timeout_ms', 'max_retries', 'inter_target_delay_ms', 'rate_limit_per_minute',
			'poll_interval_ms', 'retry_delay_ms', 'wait_after_open_ms', 'wait_after_click_ms',
			'dry_run_lookup_timeout_ms'
		)
		for name in int_fields:
			raw = os.getenv(ENV_PREFIX + name.upper())
			if raw is not None and raw.strip():
				values[name] = int(raw)

		dry_run = _env_bool(os.getenv(ENV_PREFIX + 'DRY_RUN'))
		if dry_run is not None:
			values['dry_run'] = dry_run

		jitter = os.getenv(ENV_PREFIX + 'JITTER_RANGE_MS')
		if jitter:
			parts = [p for p in jitter.replace(',', ' ').split() if p]
			if len(parts) == 2:
				values['jitter_range_ms'] = (int(parts[0]), int(parts[1]))

		hosts = os.getenv(ENV_PREFIX + 'ALLOWED_HOSTS')
		if hosts:
			values['allowed_hosts'] = [h for h in hosts.split(',') if h.strip()]

		values.update({k: v for k, v in overrides.items() if v is not None})
		return cls(**values)


def _env_bool(raw: Optional[str]) -> Optional[bool]:
	if raw is None or not raw.strip():
		return None
	return raw.strip().lower() in ('1', 'true', 'yes', 'on')
