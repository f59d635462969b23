from .service import GUARD_SCRIPT, ExecutionRequester, ReadinessGuard, SessionProvider, run_in_session
from .views import BrowserSession, GuardState

__all__ = [
	'BrowserSession', 'ExecutionRequester', 'GUARD_SCRIPT', 'GuardState',
	'ReadinessGuard', 'SessionProvider', 'run_in_session'
]
