"""Error taxonomy for conversation cleanup automation"""

from typing import Any, Optional


class AutomationError(Exception):
	"""Base error carrying a machine-readable reason code"""

	default_code = 'automation_failed'

	def __init__(
		self,
		message: Optional[str] = None,
		code: Optional[str] = None,
		step: Optional[str] = None,
		attempt: int = 0,
		evidence: Optional[dict[str, Any]] = None,
		detail: Optional[str] = None
	):
		self.code = code or self.default_code
		self.message = message or self.code
		self.step = step
		self.attempt = attempt
		self.evidence = evidence or {}
		self.detail = detail
		super().__init__(self.message)

	def to_meta(self) -> dict[str, Any]:
		"""Structured form used as step evidence"""
		meta: dict[str, Any] = {'code': self.code, 'message': self.message}
		if self.detail:
			meta['detail'] = self.detail
		if self.step:
			meta['step'] = self.step
		if self.attempt:
			meta['attempt'] = self.attempt
		if self.evidence:
			meta['evidence'] = dict(self.evidence)
		return meta


class InvalidTargetError(AutomationError):
	"""Target has no resolvable canonical URL"""
	default_code = 'invalid_target'


class GuardFailedError(AutomationError):
	"""Hosting page never reached a ready state"""
	default_code = 'guard_failed'


class ElementMissingError(AutomationError):
	"""A control could not be located (detail names which one)"""
	default_code = 'element_missing'


class StepFailedError(AutomationError):
	"""A step exhausted its attempts"""
	default_code = 'step_failed'


class VerifyTimeoutError(AutomationError):
	"""No verification signal fired before the deadline"""
	default_code = 'verify_timeout'


class HostMismatchError(AutomationError):
	"""Session is on an unexpected origin"""
	default_code = 'host_mismatch'


class ExecutionError(AutomationError):
	"""The session-scoped call itself threw or the session vanished"""
	default_code = 'execution_exception'
