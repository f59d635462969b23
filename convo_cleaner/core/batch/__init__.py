from .rate_limiter import RateLimiter
from .service import BatchOrchestrator
from .views import BatchOutcome, format_reason_label

__all__ = ['BatchOrchestrator', 'BatchOutcome', 'RateLimiter', 'format_reason_label']
