from .service import StepRunner
from .views import StepAttempt, StepExecutor, StepOutcome

__all__ = ['StepAttempt', 'StepExecutor', 'StepOutcome', 'StepRunner']
