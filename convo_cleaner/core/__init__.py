"""Core components of the cleanup engine"""

from .context import AutomationContext
from .target.views import Target, canonicalize_url, conversation_id_from_url

from .profile.service import ProfileResolver
from .profile.views import LocalizationProfile, ProfileMatcher

from .locator.service import ElementLocator
from .locator.views import ElementRef, LocateResult, Scope, Strategy
from .executor.service import ActionExecutor
from .verification.service import VerificationEngine
from .verification.views import VerificationResult

from .steps.service import StepRunner
from .steps.views import StepAttempt, StepOutcome
from .pipeline.service import TargetPipeline
from .pipeline.views import ProbeOutcome, TargetOutcome
from .batch.service import BatchOrchestrator
from .batch.rate_limiter import RateLimiter
from .batch.views import BatchOutcome, format_reason_label

__all__ = [
	'AutomationContext', 'Target', 'canonicalize_url', 'conversation_id_from_url',
	# Profiles
	'ProfileResolver', 'LocalizationProfile', 'ProfileMatcher',
	# Perception and actions
	'ElementLocator', 'ElementRef', 'LocateResult', 'Scope', 'Strategy',
	'ActionExecutor', 'VerificationEngine', 'VerificationResult',
	# Execution
	'StepRunner', 'StepAttempt', 'StepOutcome',
	'TargetPipeline', 'TargetOutcome', 'ProbeOutcome',
	'BatchOrchestrator', 'BatchOutcome', 'RateLimiter', 'format_reason_label'
]
