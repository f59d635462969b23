from convo_cleaner.config import CleanerConfig
from convo_cleaner.exceptions import AutomationError
from convo_cleaner.core import (
	BatchOrchestrator, BatchOutcome, ProbeOutcome, ProfileResolver, Target, TargetOutcome, TargetPipeline
)
from convo_cleaner.logging_config import setup_logging
from convo_cleaner.session import ExecutionRequester, ReadinessGuard, SessionProvider

__all__ = [
	'AutomationError', 'BatchOrchestrator', 'BatchOutcome', 'CleanerConfig', 'ExecutionRequester',
	'ProbeOutcome', 'ProfileResolver', 'ReadinessGuard', 'SessionProvider', 'Target', 'TargetOutcome',
	'TargetPipeline', 'setup_logging'
]
