from .service import TargetPipeline
from .views import STEP_ORDER, ProbeOutcome, TargetOutcome

__all__ = ['ProbeOutcome', 'STEP_ORDER', 'TargetOutcome', 'TargetPipeline']
