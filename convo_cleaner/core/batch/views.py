from pydantic import BaseModel, ConfigDict, Field

from convo_cleaner.core.pipeline.views import TargetOutcome

REASON_LABELS = {
	'dry_run': 'Dry run',
	'url_changed': 'Deleted',
	'header_missing': 'Deleted',
	'toast': 'Deleted',
	'verify_timeout': 'Verify timeout',
	'not_logged_in': 'Not logged in',
	'guard_failed': 'Page not ready',
	'invalid_url': 'Invalid URL',
	'invalid_target': 'Invalid URL',
	'element_missing': 'Control not found',
	'host_mismatch': 'Unexpected site',
	'execution_exception': 'Browser error',
	'step_failed': 'Automation failed',
	'automation_failed': 'Automation failed',
}


class BatchOutcome(BaseModel):
	model_config = ConfigDict(extra='forbid')

	attempted: int = 0
	succeeded: int = 0
	cancelled: bool = False
	results: list[TargetOutcome] = Field(default_factory=list, description="One outcome per processed target, in input order")

	@property
	def failed(self) -> int:
		return self.attempted - self.succeeded


def format_reason_label(outcome: TargetOutcome) -> str:
	"""Human-readable label for an outcome's reason code"""
	label = REASON_LABELS.get(outcome.reason_code)
	if outcome.ok and label is None:
		label = 'Deleted'
	if label is None:
		label = outcome.reason_code.replace('_', ' ') if outcome.reason_code else 'Unknown'
	if not outcome.ok and outcome.detail:
		label = f"{label} ({outcome.detail.replace('_', ' ')})"
	return label
